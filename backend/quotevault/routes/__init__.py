# Routes package init
"""
QuoteVault Backend - API Routes Package
========================================

Route Inventory:
    - quotes.py:  GET/POST        /api/v1/quotes
                  GET/PUT/DELETE  /api/v1/quotes/{id}
    - health.py:  GET  /          (welcome message)
                  GET  /health    (service health check)

Routes stay thin: they read the request, call QuoteService and return
its result. Credential checks and defaults live in the services package.
"""
