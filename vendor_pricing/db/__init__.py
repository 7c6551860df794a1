"""Database package: engine, session factory, init_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

from vendor_pricing.config import DATABASE_URL
from vendor_pricing.db.base import Base

# Import all models so Base.metadata has all tables
from vendor_pricing.db.models import (  # noqa: F401
    BrandReferencePrice,
    UserRoleRecord,
    Vendor,
    VendorOffer,
    VendorOfferPriceHistory,
    VendorPriceUpload,
)
from vendor_pricing.utils.logger import get_logger

logger = get_logger("vendor_pricing.db")

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create engine with check_same_thread=False for use from server worker threads."""
    url = DATABASE_URL
    if url.startswith("sqlite"):
        if "?" in url:
            url += "&check_same_thread=False"
        else:
            url += "?check_same_thread=False"
    return create_engine(url, echo=False)


def init_db(seed: bool = True) -> None:
    """Create engine and tables. When the vendors table is new, seed the vendor directory from CSV."""
    global _engine, _SessionLocal
    with _init_lock:
        if _SessionLocal is not None:
            return
        _engine = _get_engine()
        vendors_existed = inspect(_engine).has_table("vendors")
        Base.metadata.create_all(bind=_engine)
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False, expire_on_commit=False)
        logger.info("db.initialized", url=_engine.url.render_as_string(hide_password=True))
        if seed and not vendors_existed:
            from vendor_pricing.db.seed_data import seed_vendors

            session = _SessionLocal()
            try:
                count = seed_vendors(session)
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()
            if count:
                logger.info("db.vendors_seeded", count=count)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
