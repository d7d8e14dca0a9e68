"""Domain probes for the identity application layer."""

from identity.application.observability.resource_access_probe import (
    DefaultResourceAccessServiceProbe,
    ResourceAccessServiceProbe,
)

__all__ = [
    "DefaultResourceAccessServiceProbe",
    "ResourceAccessServiceProbe",
]
