# app/errors.py


class CatalogError(Exception):
    """Base class for errors the routes translate into HTTP responses."""


class ClientInputError(CatalogError):
    """A required request parameter is missing. Maps to 400."""


class UpstreamLookupError(CatalogError):
    """A data source call failed. Maps to 500; the whole request is aborted."""


class UpstreamFetchError(CatalogError):
    """The image relay could not reach its target. Maps to 500."""
