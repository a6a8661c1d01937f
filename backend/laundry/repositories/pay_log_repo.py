from datetime import datetime
from typing import List

from laundry.core.config import APP_TZ
from laundry.db.base import PayLog as DbPayLog
from laundry.domain.entities import PayLog as DomainPayLog
from laundry.domain.interfaces import IPayLogRepository


class PayLogRepository(IPayLogRepository):
    """Repository for Metapay transaction records (append only)."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def create(self, pay_log: DomainPayLog) -> DomainPayLog:
        db_log = DbPayLog(
            metapay_id=pay_log.metapay_id,
            book_id=pay_log.book_id,
            pay_log_type=pay_log.pay_log_type,
            pay_log_amount=pay_log.pay_log_amount,
            pay_log_balance=pay_log.pay_log_balance,
            pay_log_date=pay_log.pay_log_date or datetime.now(APP_TZ),
        )
        self.db.add(db_log)
        self.db.flush()
        return self._to_domain(db_log)

    def get_by_metapay_id(self, metapay_id: int) -> List[DomainPayLog]:
        db_logs = (
            self.db.query(DbPayLog)
            .filter(DbPayLog.metapay_id == metapay_id)
            .order_by(DbPayLog.pay_log_id.desc())
            .all()
        )
        return [self._to_domain(db_log) for db_log in db_logs]

    def get_by_book_id(self, book_id: int) -> List[DomainPayLog]:
        db_logs = (
            self.db.query(DbPayLog)
            .filter(DbPayLog.book_id == book_id)
            .order_by(DbPayLog.pay_log_id)
            .all()
        )
        return [self._to_domain(db_log) for db_log in db_logs]

    @staticmethod
    def _to_domain(db_log: DbPayLog) -> DomainPayLog:
        return DomainPayLog(
            pay_log_id=db_log.pay_log_id,
            metapay_id=db_log.metapay_id,
            book_id=db_log.book_id,
            pay_log_type=db_log.pay_log_type,
            pay_log_amount=db_log.pay_log_amount,
            pay_log_balance=db_log.pay_log_balance,
            pay_log_date=db_log.pay_log_date,
        )
