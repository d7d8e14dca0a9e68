"""Identity bounded context.

Links a lab member's email (the primary identity) to their accounts on
external platforms, and provisions their access to the lab's calendars.
"""
