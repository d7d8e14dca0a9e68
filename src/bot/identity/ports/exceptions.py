"""Port-level exceptions for the identity context."""


class IdentityLinkRepositoryError(Exception):
    """Raised when the identity link store cannot be read or written."""


class ResourceAccessError(Exception):
    """Raised when access to a resource collection could not be granted.

    Attributes:
        collection_id: The calendar (or other collection) concerned
    """

    def __init__(self, collection_id: str, message: str):
        self.collection_id = collection_id
        super().__init__(f"Cannot grant access to {collection_id}: {message}")
