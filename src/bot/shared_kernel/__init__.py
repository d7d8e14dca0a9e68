"""Shared Kernel module.

Foundational components shared by the reservation, identity and notification
bounded contexts. Changes here affect every context and should be kept small.
"""
