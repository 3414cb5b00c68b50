# Middleware package init
"""
DualStore — Middleware Package
================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation id for every log line of the request
    2. Logging: one access line with status and duration
    3. CORS: FastAPI's CORSMiddleware (preflight + headers)
"""
