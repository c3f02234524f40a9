from .trace_middleware import TraceMiddleware

__all__ = ["TraceMiddleware"]
