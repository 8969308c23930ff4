"""HTTP middleware: request and correlation ids.

Applied in main app; order matters (first added = outermost).
Import and use from app.main.
"""

from app.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
