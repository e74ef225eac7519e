# Routes package init
"""
CloudNote Backend — API Routes Package
========================================

Route Inventory:
    - auth.py:    POST /api/auth/signup, POST /api/auth/login,
                  GET  /api/auth/userdetails
    - notes.py:   POST /api/note, GET /api/note/notes,
                  PUT  /api/note/{slug}, DELETE /api/note/{slug}
    - health.py:  GET  /health

Design Principle:
    Routes are THIN. They extract data from the request, call a service,
    and shape the response. Ownership and credential rules live in services.
"""
