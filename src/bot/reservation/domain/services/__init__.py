"""Domain services for the reservation context.

Stateless rules that span more than one aggregate instance.
"""

from reservation.domain.services.authorization import (
    AuthorizationPolicy,
    ResourceUsageAuthorizationPolicy,
)
from reservation.domain.services.conflict_checker import (
    ConflictCheckResult,
    ConflictChecker,
    ConflictDetected,
    NoConflict,
)

__all__ = [
    "AuthorizationPolicy",
    "ConflictCheckResult",
    "ConflictChecker",
    "ConflictDetected",
    "NoConflict",
    "ResourceUsageAuthorizationPolicy",
]
