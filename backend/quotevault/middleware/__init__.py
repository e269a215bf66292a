# Middleware package init
"""
QuoteVault Backend - Middleware Package
========================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Responses pass back through the chain in reverse, so the request ID is
    on the response headers and the logging middleware sees the final status.
"""
