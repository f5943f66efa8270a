"""Code runner backend.

``app`` resolves lazily to the FastAPI application so that modules needing
only configuration or the execution core can be imported without it."""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name == "app":
        from .main import app as fastapi_app
        return fastapi_app
    raise AttributeError(f"module {__name__} has no attribute {name!r}")
