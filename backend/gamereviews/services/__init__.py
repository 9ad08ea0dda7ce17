# Services package init
"""
Game Reviews API — Services Layer
===================================

Service Inventory:
    - ReviewStore:   data access (queries, inserts, session handling)
    - ReviewService: request-handling logic (id parsing, body validation,
                     error mapping, concurrent lookups)

Routes call ReviewService; ReviewService calls ReviewStore; only
ReviewStore touches SQLAlchemy.
"""
