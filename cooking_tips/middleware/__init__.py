# Middleware package init
"""
Cooking Tips Backend — Middleware Package
===========================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any work is done
    2. Request ID: correlation id for every log line of the request
    3. Logging: one access log line per request, with the id and duration
"""
