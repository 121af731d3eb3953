from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session

from journeyapi.models.vendor import Vendor as VendorModel
from journeyapi.schemas.vendor import Vendor as VendorSchema
from journeyapi.repositories.base import BaseRepository


class VendorRepository(BaseRepository[VendorModel, VendorSchema]):
    def __init__(self, db: Session):
        super().__init__(VendorModel, VendorSchema, db)

    def list_all(self, partner_only: bool = False) -> List[VendorSchema]:
        """Partners first, then alphabetical"""
        query = self.db.query(self.model_class)
        if partner_only:
            query = query.filter(self.model_class.is_partner.is_(True))
        query = query.order_by(
            self.model_class.is_partner.desc(), self.model_class.name.asc()
        )
        return [self._to_schema(instance) for instance in query.all()]

    def get_many(self, vendor_ids: Iterable[str]) -> Dict[str, VendorSchema]:
        ids = list(vendor_ids)
        if not ids:
            return {}
        instances = (
            self.db.query(self.model_class).filter(self.model_class.id.in_(ids)).all()
        )
        return {instance.id: self._to_schema(instance) for instance in instances}

    def upsert(self, data: Dict[str, Any], commit: bool = True) -> VendorSchema:
        """Insert or overwrite a catalog row (import script only)"""
        instance = self.get_model(data["id"])
        if instance is None:
            instance = self.model_class(**data)
            self.db.add(instance)
        else:
            for key, value in data.items():
                setattr(instance, key, value)
        self.db.flush()
        if commit:
            self.db.commit()
        return self._to_schema(instance)
