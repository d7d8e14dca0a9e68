"""Reservation bounded context.

Owns resource usages (reservations of GPUs and rooms), conflict detection,
owner authorization, change notification and the calendar persistence adapter.
"""
