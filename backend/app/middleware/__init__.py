"""
Bilarn Blog Backend — Middleware Package
==========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every log line for the request can carry it
    - Logging measures the full downstream duration and final status
"""
