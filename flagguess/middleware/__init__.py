from flagguess.middleware.request_context import RequestContextMiddleware
from flagguess.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RequestContextMiddleware", "SecurityHeadersMiddleware"]
