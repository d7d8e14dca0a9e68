"""HTTP presentation layer for the reservation context."""

from reservation.presentation.routes import router

__all__ = ["router"]
