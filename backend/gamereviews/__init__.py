"""
Game Reviews API — Application Package
========================================

A REST API over a board-game reviews dataset: categories, users, reviews
and their comments, with comment posting.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   ReviewService (validation/errors) │
    ├─────────────────────────────────────┤
    │      ReviewStore (data access)      │
    ├─────────────────────────────────────┤
    │  Models & Schemas / async database  │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
