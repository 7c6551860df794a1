"""Re-export all ORM models so Base.metadata has all tables."""

from vendor_pricing.db.models.offer import VendorOffer, VendorOfferPriceHistory
from vendor_pricing.db.models.reference import BrandReferencePrice
from vendor_pricing.db.models.upload import VendorPriceUpload
from vendor_pricing.db.models.user import UserRoleRecord
from vendor_pricing.db.models.vendor import Vendor

__all__ = [
    "Vendor",
    "VendorOffer",
    "VendorOfferPriceHistory",
    "VendorPriceUpload",
    "BrandReferencePrice",
    "UserRoleRecord",
]
