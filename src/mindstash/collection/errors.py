"""Asset collection errors."""


class CollectionError(Exception):
    """Base exception for asset collection operations."""


class AssetNotFoundError(CollectionError):
    """Raised when an asset id is not present in the collection."""


class DuplicateAssetError(CollectionError):
    """Raised when an inserted asset reuses an id already in the collection."""


class ImmutableFieldError(CollectionError):
    """Raised when an update targets a field fixed at creation."""
