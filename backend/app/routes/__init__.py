"""
Tourlist Backend - API Routes Package
======================================

Route Inventory:
    - categories.py:   /attraction-categories[/{id}]
    - attractions.py:  /attractions[/{id}]
    - hotels.py:       /hotels[/{id}]
    - reviews.py:      /reviews[/{id}], /user/reviews
    - bookings.py:     /bookings[/{id}], /user/bookings
    - upload.py:       POST /upload
    - health.py:       GET /health

Routes stay thin: resolve the caller through a dependency, call a service,
return its result. Business rules live in app.services.
"""
