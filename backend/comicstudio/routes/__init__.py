# Routes package init
"""
Comic Studio Backend — API Routes Package
==========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:      POST /api/auth/signup | login | guest | logout, GET /api/auth/me
    - series.py:    GET/POST /api/series, GET/PUT /api/series/{id},
                    GET/POST /api/series/{id}/chapters
    - chapters.py:  GET/PUT /api/chapters/{id}
    - upload.py:    GET /api/upload/auth
    - health.py:    GET /health, GET /

Design Principle:
    Routes stay THIN: read the session, call a service, schedule background
    cleanup, shape the response. Business rules live in services.
"""
