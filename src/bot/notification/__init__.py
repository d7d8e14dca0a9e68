"""Notification bounded context.

Delivers reservation change events to the destinations configured for the
reserved resources (Slack channels, the application log).
"""
