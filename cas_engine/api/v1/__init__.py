"""API v1 routers."""

from . import statements

__all__ = ["statements"]
