from typing import Optional

from journeyapi.core.exceptions import NotFoundError
from journeyapi.providers.vendor_catalog import VendorCatalog
from journeyapi.schemas.vendor import Vendor, VendorListResponse


class VendorService:
    """Read-only view of the vendor catalog"""

    def __init__(self, catalog: VendorCatalog):
        self.catalog = catalog

    def list_vendors(self, partner_only: bool = False) -> VendorListResponse:
        vendors = self.catalog.list_all(partner_only=partner_only)
        return VendorListResponse(vendors=vendors, total_count=len(vendors))

    def get_vendor(self, vendor_id: str) -> Vendor:
        vendor: Optional[Vendor] = self.catalog.get(vendor_id)
        if vendor is None:
            raise NotFoundError(
                f"Vendor {vendor_id} not found", details={"vendor_id": vendor_id}
            )
        return vendor
