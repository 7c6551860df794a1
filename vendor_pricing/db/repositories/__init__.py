"""DB repositories: sync functions that return plain dicts."""

from vendor_pricing.db.repositories import offer_repo, reference_repo, upload_repo, user_repo, vendor_repo

__all__ = ["offer_repo", "reference_repo", "upload_repo", "user_repo", "vendor_repo"]
