# Middleware package init
"""
Wildwood Zoo Backend — Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Auth Rate Limit] → [GZip] → [CORS] → Route

    1. Request ID first: every later log line and error body can carry it
    2. Logging: records method, path, status and duration, 429s included
    3. Auth rate limit: only guards /api/auth/login and /api/auth/register
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
