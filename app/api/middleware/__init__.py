# 📄 File: app/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation):
# Collects the helpers that wrap every request: one keeps a log of requests, the other turns
# errors into friendly, consistent responses.
# 🧪 Purpose (Technical Summary):
# Package initialization for API middleware: request logging middleware and exception
# handler registration.
# 🔗 Dependencies:
# FastAPI middleware components, app.shared.core
# 🔄 Connected Modules / Calls From:
# app.main.py (application setup)

"""
Middleware Stack (outermost first):
    1. CORSMiddleware
    2. RequestLoggingMiddleware (request id, context, timing)
    3. Exception handlers (error envelopes)
    4. Application routes
"""

from .error_handling import create_error_response, register_exception_handlers
from .logging import REQUEST_ID_HEADER, RequestLoggingMiddleware

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestLoggingMiddleware",
    "create_error_response",
    "register_exception_handlers",
]
