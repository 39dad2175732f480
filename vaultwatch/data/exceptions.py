"""Exceptions raised by the data layer."""


class DataProviderError(Exception):
    """Base exception for data provider errors."""

    pass


class SourceTransportError(DataProviderError):
    """Network failures, timeouts and non-2xx responses."""

    pass


class SourcePayloadError(DataProviderError):
    """Response body missing or malformed."""

    pass


class BigNumberDecodeError(DataProviderError, ValueError):
    """Raised on a tagged node whose payload is not a valid integer."""

    pass


class StoreError(Exception):
    """Local persistence failures."""

    pass
