from typing import Optional

from laundry.db.base import Metapay as DbMetapay
from laundry.db.base import PayAccount as DbPayAccount
from laundry.domain.entities import Metapay as DomainMetapay
from laundry.domain.entities import PayAccount as DomainPayAccount
from laundry.domain.interfaces import IMetapayRepository
from sqlalchemy import update
from sqlalchemy.orm import selectinload


class MetapayRepository(IMetapayRepository):
    """Repository for Metapay accounts and their linked bank accounts."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_user_id(
        self, user_id: str, for_update: bool = False
    ) -> Optional[DomainMetapay]:
        query = (
            self.db.query(DbMetapay)
            .options(selectinload(DbMetapay.pay_accounts))
            .filter(DbMetapay.user_id == user_id)
        )
        if for_update:
            # Row lock until commit; SQLite ignores FOR UPDATE
            query = query.with_for_update().populate_existing()
        db_metapay = query.first()
        return self._to_domain(db_metapay) if db_metapay else None

    def create(self, metapay: DomainMetapay) -> DomainMetapay:
        db_metapay = DbMetapay(
            user_id=metapay.user_id, metapay_balance=metapay.metapay_balance
        )
        self.db.add(db_metapay)
        self.db.flush()
        self.db.refresh(db_metapay)
        return self._to_domain(db_metapay)

    def change_balance(self, metapay_id: int, amount: int) -> Optional[int]:
        """Apply a signed amount in SQL so overlapping requests cannot lose an update."""
        result = self.db.execute(
            update(DbMetapay)
            .where(
                DbMetapay.metapay_id == metapay_id,
                DbMetapay.metapay_balance + amount >= 0,
            )
            .values(metapay_balance=DbMetapay.metapay_balance + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None

        db_metapay = self.db.get(DbMetapay, metapay_id, populate_existing=True)
        return db_metapay.metapay_balance

    def add_pay_account(self, account: DomainPayAccount) -> DomainPayAccount:
        """Link through the relationship so a loaded Metapay sees the new account."""
        db_metapay = self.db.get(DbMetapay, account.metapay_id)
        if not db_metapay:
            raise ValueError(f"Metapay with ID {account.metapay_id} not found")

        db_account = DbPayAccount(
            bank_id=account.bank_id,
            pay_account_number=account.pay_account_number,
        )
        db_metapay.pay_accounts.append(db_account)
        self.db.flush()
        return self._account_to_domain(db_account)

    def get_pay_account(self, pay_account_id: int) -> Optional[DomainPayAccount]:
        db_account = self.db.get(DbPayAccount, pay_account_id)
        return self._account_to_domain(db_account) if db_account else None

    def delete_pay_account(self, pay_account_id: int) -> bool:
        db_account = self.db.get(DbPayAccount, pay_account_id)
        if not db_account:
            return False
        # delete-orphan cascade removes the row
        db_account.metapay.pay_accounts.remove(db_account)
        self.db.flush()
        return True

    @staticmethod
    def _account_to_domain(db_account: DbPayAccount) -> DomainPayAccount:
        return DomainPayAccount(
            pay_account_id=db_account.pay_account_id,
            metapay_id=db_account.metapay_id,
            bank_id=db_account.bank_id,
            pay_account_number=db_account.pay_account_number,
        )

    def _to_domain(self, db_metapay: DbMetapay) -> DomainMetapay:
        return DomainMetapay(
            metapay_id=db_metapay.metapay_id,
            user_id=db_metapay.user_id,
            metapay_balance=db_metapay.metapay_balance,
            metapay_date=db_metapay.metapay_date,
            pay_accounts=[
                self._account_to_domain(account) for account in db_metapay.pay_accounts
            ],
        )
