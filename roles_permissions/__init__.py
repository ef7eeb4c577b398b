"""Roles & permissions authorization service package."""


def __getattr__(name):
    """Lazy import so scripts can use the models without building the app."""
    if name == "create_app":
        from .main import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
