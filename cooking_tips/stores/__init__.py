# Stores package init
"""
Cooking Tips Backend — Document Store Layer
=============================================

What:  Persistence collaborators used by the Tip Service.
Why:   The service depends on two small interfaces instead of a database:
       a document store for tips and a directory for user display names.
How:   Abstract interfaces in base.py; concrete backends are picked per
       request by the dependencies in routes/tips.py.

Store Inventory:
    - TipStore (abstract):        find_all / find_by_id / find_by_field /
                                  find_containing / save / delete_by_id
    - SqlTipStore:                `cooking_tips` table, one row per document
    - InMemoryTipStore:           process-local dict (development, tests)
    - UserDirectory (abstract):   user id → display name
    - SqlUserDirectory:           `users` table
    - InMemoryUserDirectory:      plain dict
"""
