"""
Comic Studio Backend — Middleware Package
===========================================

Middleware chain as registered in main.py (outermost first):

    Request → [CORS] → [Session] → [Request ID] → [Rate Limit] → [Logging] → [GZip] → Route

    CORS outermost so preflight requests and 429 responses still carry the
    Access-Control headers the browser needs to read them. The session cookie
    is decoded before any route runs.
"""
