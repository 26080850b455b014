from .app import router

__all__ = ["router"]
