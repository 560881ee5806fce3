"""
Error model for the Snap API.
Every failure the core can report is a SnapError subclass so the HTTP layer
can map it to a status code in one place.
"""


class SnapError(Exception):
    """Base exception for all Snap API failures."""
    pass


class InvalidInputError(SnapError):
    """Request rejected before any provider call (empty tags, empty batch, bad range)."""
    pass


class ProviderError(SnapError):
    """Embedding or generation backend unreachable or returned a non-success result."""
    pass


class LockAcquisitionError(SnapError):
    """The shared index lock could not be acquired for this call."""
    pass


class NotFoundError(SnapError):
    """Nothing usable to answer with (empty index, no images in folder)."""
    pass


class CatalogLoadError(SnapError):
    """A file-backed catalog could not be read or is malformed."""
    pass


class IndexInitializationError(SnapError):
    """The similarity index could not be built. Fatal at startup."""
    pass


class LibraryGenerationError(SnapError):
    """The image library generator produced no usable entries or could not write its CSV."""
    pass
