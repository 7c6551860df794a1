"""Error kinds of the pricing pipeline and the admin operations around it."""

from typing import Optional


class PricingError(Exception):
    """Base class for domain errors."""


class HeaderMappingError(PricingError):
    """The header row lacks a required column for the tier; the whole batch is rejected."""

    def __init__(self, tier: str, missing: list[str]):
        self.tier = tier
        self.missing = list(missing)
        super().__init__(
            f"CSV is missing required column(s) for {tier} tier: {', '.join(self.missing)}"
        )


class MalformedCsvError(PricingError):
    """The upload is not readable as CSV at all; like a header error, nothing is processed."""

    def __init__(self, reason: str):
        super().__init__(f"CSV could not be read: {reason}")


class RowParseError(PricingError):
    """A cell could not be coerced to its declared type."""

    def __init__(self, line: int, field: str, value: str, expected: str):
        self.line = line
        self.field = field
        self.value = value
        shown = value if len(value) <= 80 else value[:80] + "..."
        super().__init__(f"{field}: could not parse {shown!r} as {expected}")


class RowValidationError(PricingError):
    """One or more field rules failed for a row."""

    def __init__(self, line: int, errors: list):
        self.line = line
        self.errors = list(errors)
        super().__init__("; ".join(e.message for e in self.errors))


class PersistenceError(PricingError):
    """A validated row could not be written to the store."""

    def __init__(self, line: int, reason: str):
        self.line = line
        super().__init__(f"write failed: {reason}")


class InvalidTransitionError(PricingError):
    """Requested verification-status change is not allowed."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change verification status from {current!r} to {target!r}")


class VendorNotFoundError(PricingError):
    def __init__(self, vendor_id: str):
        self.vendor_id = vendor_id
        super().__init__(f"Vendor not found: {vendor_id}")


class OfferNotFoundError(PricingError):
    def __init__(self, offer_id: str):
        self.offer_id = offer_id
        super().__init__(f"Offer not found: {offer_id}")


class TierNotSupportedError(PricingError):
    def __init__(self, vendor_id: str, tier: str):
        self.vendor_id = vendor_id
        self.tier = tier
        super().__init__(f"Vendor {vendor_id} is not enabled for the {tier} tier")


class DuplicateVendorError(PricingError):
    def __init__(self, name: str, existing_id: Optional[str] = None):
        self.existing_id = existing_id
        super().__init__(f"A vendor named {name!r} already exists")


class CrossTierComparisonError(PricingError):
    """Offers of different tiers were asked to be ranked together."""


class InvalidOfferError(PricingError):
    """A manually entered offer failed parsing or validation."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class UploadNotFoundError(PricingError):
    def __init__(self, upload_id: str):
        self.upload_id = upload_id
        super().__init__(f"Upload not found: {upload_id}")


class ReferencePriceNotFoundError(PricingError):
    def __init__(self, reference_id: str):
        self.reference_id = reference_id
        super().__init__(f"Reference price not found: {reference_id}")
