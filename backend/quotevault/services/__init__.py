# Services package init
"""
QuoteVault Backend - Services Layer
====================================

Service Inventory:
    - access_control: credential comparison and the immutable AccessPolicy
    - quote_service:  list/create/get/update/delete against the store
"""
