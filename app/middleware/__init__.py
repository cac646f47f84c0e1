"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID, IP address)
- CORS for the function endpoints
"""

from app.middleware.cors import CORSMiddleware
from app.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "CORSMiddleware",
]
