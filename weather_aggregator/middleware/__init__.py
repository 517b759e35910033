from .request_context import observability_middleware, request_id_middleware

__all__ = ['observability_middleware', 'request_id_middleware']
