from .content_port import ContentPort

__all__ = ["ContentPort"]
