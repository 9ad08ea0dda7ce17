# Routes package init
"""
Game Reviews API — Routes Package
===================================

Route Inventory:
    - categories.py: GET  /api/categories
                     GET  /api/users
    - reviews.py:    GET  /api/reviews
                     GET  /api/reviews/{review_id}
                     GET  /api/reviews/{review_id}/comments
                     POST /api/reviews/{review_id}/comments
    - health.py:     GET  /health

Routes are thin: extract path/body values, call ReviewService, return the
response envelope. Validation and error mapping live in the service layer.
"""
