"""HTTP presentation layer for the identity context."""

from identity.presentation.routes import router

__all__ = ["router"]
