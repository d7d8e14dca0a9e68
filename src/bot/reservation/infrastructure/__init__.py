"""Reservation infrastructure: repository adapters and the change watcher."""
