"""Translate domain errors into HTTPException."""

from fastapi import HTTPException

from vendor_pricing.pricing.errors import (
    CrossTierComparisonError,
    DuplicateVendorError,
    HeaderMappingError,
    InvalidOfferError,
    InvalidTransitionError,
    MalformedCsvError,
    OfferNotFoundError,
    PersistenceError,
    PricingError,
    ReferencePriceNotFoundError,
    TierNotSupportedError,
    UploadNotFoundError,
    VendorNotFoundError,
)

_STATUS: list[tuple[type[PricingError], int]] = [
    (VendorNotFoundError, 404),
    (OfferNotFoundError, 404),
    (UploadNotFoundError, 404),
    (ReferencePriceNotFoundError, 404),
    (DuplicateVendorError, 409),
    (InvalidTransitionError, 409),
    (TierNotSupportedError, 422),
    (HeaderMappingError, 422),
    (MalformedCsvError, 422),
    (InvalidOfferError, 422),
    (CrossTierComparisonError, 400),
    (PersistenceError, 503),
]


def to_http(error: Exception) -> HTTPException:
    """Map a domain error (or ValueError for bad input) to an HTTPException with its message."""
    if isinstance(error, ValueError):
        return HTTPException(status_code=422, detail=str(error))
    for kind, status in _STATUS:
        if isinstance(error, kind):
            return HTTPException(status_code=status, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
