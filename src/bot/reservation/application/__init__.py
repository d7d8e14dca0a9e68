"""Application layer for the reservation context.

Use-case orchestration: reservation commands and the change notification engine.
"""
