# Services package init
"""
Cooking Tips Backend — Services Layer
=======================================

What:  Business logic between the routes (HTTP) and the document stores.
How:   Services receive their store and user directory in the constructor
       and are handed to routes through FastAPI dependency injection.

Service Inventory:
    - TipService: tips, ratings, comments and the ownership rules over them
"""
