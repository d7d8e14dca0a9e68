"""Ports (interfaces) for the reservation context."""
