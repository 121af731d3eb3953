"""
Vendor catalog backends.

Services depend on ``VendorCatalog`` only. The concrete backend is picked
once from ``settings.DATA_BACKEND``:

- ``database``: the ``vendors`` table (populated by scripts/seed_vendors.py)
- ``fixture``: the bundled JSON catalog, read-only, no database rows needed
"""

import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from journeyapi.config import Settings
from journeyapi.repositories.vendor_repository import VendorRepository
from journeyapi.schemas.vendor import Vendor

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE_PATH = Path(__file__).resolve().parent.parent / "fixtures" / "vendors.json"


class VendorCatalog(ABC):
    @abstractmethod
    def get(self, vendor_id: str) -> Optional[Vendor]:
        ...

    @abstractmethod
    def get_many(self, vendor_ids: Iterable[str]) -> Dict[str, Vendor]:
        """Known vendors keyed by id; unknown ids are simply absent"""

    @abstractmethod
    def list_all(self, partner_only: bool = False) -> List[Vendor]:
        ...


class DatabaseVendorCatalog(VendorCatalog):
    def __init__(self, db: Session):
        self.vendor_repo = VendorRepository(db)

    def get(self, vendor_id: str) -> Optional[Vendor]:
        return self.vendor_repo.get_by_id(vendor_id)

    def get_many(self, vendor_ids: Iterable[str]) -> Dict[str, Vendor]:
        return self.vendor_repo.get_many(vendor_ids)

    def list_all(self, partner_only: bool = False) -> List[Vendor]:
        return self.vendor_repo.list_all(partner_only=partner_only)


@lru_cache(maxsize=8)
def load_fixture_vendors(path: str) -> tuple:
    with open(path, "r", encoding="utf-8") as fp:
        raw = json.load(fp)
    vendors = tuple(Vendor.model_validate(item) for item in raw)
    logger.info(f"Loaded {len(vendors)} vendors from fixture {path}")
    return vendors


class FixtureVendorCatalog(VendorCatalog):
    def __init__(self, path: Optional[str] = None):
        self.path = str(path or DEFAULT_FIXTURE_PATH)
        self._by_id = {vendor.id: vendor for vendor in load_fixture_vendors(self.path)}

    def get(self, vendor_id: str) -> Optional[Vendor]:
        return self._by_id.get(vendor_id)

    def get_many(self, vendor_ids: Iterable[str]) -> Dict[str, Vendor]:
        return {vid: self._by_id[vid] for vid in vendor_ids if vid in self._by_id}

    def list_all(self, partner_only: bool = False) -> List[Vendor]:
        vendors = [v for v in self._by_id.values() if v.is_partner or not partner_only]
        return sorted(vendors, key=lambda v: (not v.is_partner, v.name))


def build_vendor_catalog(settings: Settings, db: Optional[Session] = None) -> VendorCatalog:
    backend = (settings.DATA_BACKEND or "database").lower()
    if backend == "fixture":
        return FixtureVendorCatalog(settings.VENDOR_FIXTURE_PATH)
    if backend == "database":
        if db is None:
            raise ValueError("database vendor catalog requires a session")
        return DatabaseVendorCatalog(db)
    raise ValueError(f"Unknown DATA_BACKEND: {settings.DATA_BACKEND}")


CATALOG_IMPORT_MIGRATION = "vendor_catalog_import_v1"


def import_fixture_catalog(db: Session, path: Optional[str] = None, force: bool = False) -> int:
    """Copy the fixture catalog into the vendors table once.

    Returns the number of vendors written; 0 when the import already ran
    and ``force`` is off.
    """
    from journeyapi.models.data_migration import DataMigration

    marker = db.query(DataMigration).filter(DataMigration.name == CATALOG_IMPORT_MIGRATION).first()
    if marker is not None and not force:
        logger.info(f"Vendor catalog import already applied at {marker.created_at}")
        return 0

    vendor_repo = VendorRepository(db)
    vendors = load_fixture_vendors(str(path or DEFAULT_FIXTURE_PATH))
    for vendor in vendors:
        vendor_repo.upsert(vendor.model_dump(), commit=False)
    if marker is None:
        db.add(DataMigration(name=CATALOG_IMPORT_MIGRATION))
    db.commit()

    logger.info(f"Imported {len(vendors)} vendors into the database")
    return len(vendors)
