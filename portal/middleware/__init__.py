"""ASGI middleware."""

from portal.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
