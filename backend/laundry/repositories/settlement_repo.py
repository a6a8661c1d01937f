from datetime import datetime
from typing import List, Optional

from laundry.core.config import APP_TZ
from laundry.db.base import Settlement as DbSettlement
from laundry.domain.entities import Settlement as DomainSettlement
from laundry.domain.interfaces import ISettlementRepository


class SettlementRepository(ISettlementRepository):
    """Repository for settlement records of completed bookings."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def create(self, settlement: DomainSettlement) -> DomainSettlement:
        db_settlement = DbSettlement(
            book_id=settlement.book_id,
            laundry_id=settlement.laundry_id,
            settlement_fee=settlement.settlement_fee,
            settlement_date=settlement.settlement_date or datetime.now(APP_TZ),
        )
        self.db.add(db_settlement)
        self.db.flush()
        return self._to_domain(db_settlement)

    def get_by_book_id(self, book_id: int) -> Optional[DomainSettlement]:
        db_settlement = (
            self.db.query(DbSettlement).filter(DbSettlement.book_id == book_id).first()
        )
        return self._to_domain(db_settlement) if db_settlement else None

    def get_by_laundry_id(self, laundry_id: int) -> List[DomainSettlement]:
        db_settlements = (
            self.db.query(DbSettlement)
            .filter(DbSettlement.laundry_id == laundry_id)
            .order_by(DbSettlement.settlement_id.desc())
            .all()
        )
        return [self._to_domain(item) for item in db_settlements]

    def get_all(self) -> List[DomainSettlement]:
        db_settlements = (
            self.db.query(DbSettlement)
            .order_by(DbSettlement.settlement_id.desc())
            .all()
        )
        return [self._to_domain(item) for item in db_settlements]

    @staticmethod
    def _to_domain(db_settlement: DbSettlement) -> DomainSettlement:
        return DomainSettlement(
            settlement_id=db_settlement.settlement_id,
            book_id=db_settlement.book_id,
            laundry_id=db_settlement.laundry_id,
            settlement_fee=db_settlement.settlement_fee,
            settlement_date=db_settlement.settlement_date,
        )
