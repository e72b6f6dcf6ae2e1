"""
Request handlers.

A handler is any callable taking an HTTPRequest and returning an
HTTPResponse:

    def handler(request: HTTPRequest) -> HTTPResponse: ...

StaticBodyHandler is the one the server uses when none is given.
"""

from .static import StaticBodyHandler

__all__ = ["StaticBodyHandler"]
