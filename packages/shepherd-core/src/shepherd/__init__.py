"""Shepherd - church-management console client library."""

__all__ = ["ShepherdContext", "ShepherdSettings"]
__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports: keep ``import shepherd`` free of httpx/socketio."""
    if name == "ShepherdSettings":
        from shepherd.config import ShepherdSettings

        return ShepherdSettings
    if name == "ShepherdContext":
        from shepherd.context import ShepherdContext

        return ShepherdContext
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
