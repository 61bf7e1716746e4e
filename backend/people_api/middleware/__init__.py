# Middleware package init
"""
People API — Middleware Package
=================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    The request ID is set first so the access log line and any error body
    produced further down carry it.
"""
