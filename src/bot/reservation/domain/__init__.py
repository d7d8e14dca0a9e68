"""Domain layer for the reservation context.

Pure business objects: value objects, the ResourceUsage aggregate, the
device-spec factory and domain services. No infrastructure dependencies.
"""
