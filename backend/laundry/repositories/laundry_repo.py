from typing import List, Optional

from laundry.db.base import Laundry as DbLaundry
from laundry.domain.entities import Laundry as DomainLaundry
from laundry.domain.interfaces import ILaundryRepository


class LaundryRepository(ILaundryRepository):
    """Repository for laundry shops, mapping models to domain entities."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, laundry_id: int) -> Optional[DomainLaundry]:
        db_laundry = self.db.query(DbLaundry).filter_by(laundry_id=laundry_id).first()
        return self._to_domain(db_laundry) if db_laundry else None

    def get_all(self) -> List[DomainLaundry]:
        db_laundries = self.db.query(DbLaundry).order_by(DbLaundry.laundry_id).all()
        return [self._to_domain(item) for item in db_laundries]

    def get_by_owner(self, user_id: str) -> List[DomainLaundry]:
        db_laundries = (
            self.db.query(DbLaundry)
            .filter_by(user_id=user_id)
            .order_by(DbLaundry.laundry_id)
            .all()
        )
        return [self._to_domain(item) for item in db_laundries]

    def create(self, laundry: DomainLaundry) -> DomainLaundry:
        db_laundry = DbLaundry(
            user_id=laundry.user_id,
            laundry_name=laundry.laundry_name,
            laundry_address=laundry.laundry_address,
            laundry_tel=laundry.laundry_tel,
        )
        self.db.add(db_laundry)
        self.db.flush()
        self.db.refresh(db_laundry)
        return self._to_domain(db_laundry)

    @staticmethod
    def _to_domain(db_laundry: DbLaundry) -> DomainLaundry:
        return DomainLaundry(
            laundry_id=db_laundry.laundry_id,
            user_id=db_laundry.user_id,
            laundry_name=db_laundry.laundry_name,
            laundry_address=db_laundry.laundry_address,
            laundry_tel=db_laundry.laundry_tel,
            laundry_insert_date=db_laundry.laundry_insert_date,
        )
