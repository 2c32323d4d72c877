# Routes package init
"""
Cooking Tips Backend — API Routes Package
===========================================

Route Inventory:
    - tips.py:    /api/tips ...   (tips, ratings, comments)
    - health.py:  GET /health     (service health check)

Routes stay THIN: resolve the caller and the service, call one service
method, return its result. Errors are raised, never formatted here.
"""
