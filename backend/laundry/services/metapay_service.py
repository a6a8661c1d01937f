"""
Metapay service: stored-balance accounts, linked bank accounts and charges.
"""

import logging
from typing import List, Optional

from laundry.core.config import METAPAY_MAX_CHARGE
from laundry.core.exceptions import DuplicateError, InvalidUserError, NotExistError
from laundry.domain import codes
from laundry.domain.entities import Metapay as DomainMetapay
from laundry.domain.entities import PayAccount as DomainPayAccount
from laundry.domain.entities import PayLog as DomainPayLog
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import IMetapayRepository, IPayLogRepository
from laundry.schemas.dtos import ChargeRequest, PayAccountCreateRequest

from .authorization import require_login, require_self_or_admin

logger = logging.getLogger(__name__)


class MetapayService:
    """Application service for Metapay accounts.

    Every balance change is paired with a PayLog row carrying the balance
    after the change.
    """

    def __init__(
        self,
        metapay_repo: IMetapayRepository,
        pay_log_repo: IPayLogRepository,
        max_charge: int = METAPAY_MAX_CHARGE,
    ) -> None:
        self.metapay_repo = metapay_repo
        self.pay_log_repo = pay_log_repo
        self.max_charge = max_charge

    def open_metapay(self, actor: Optional[DomainUser]) -> DomainMetapay:
        actor = require_login(actor)
        if self.metapay_repo.get_by_user_id(actor.user_id) is not None:
            raise DuplicateError(f"User {actor.user_id} already has a Metapay account")

        metapay = self.metapay_repo.create(DomainMetapay(user_id=actor.user_id))
        logger.info(
            "Metapay opened",
            extra={
                "context": {"user_id": actor.user_id, "metapay_id": metapay.metapay_id}
            },
        )
        return metapay

    def get_metapay(
        self, actor: Optional[DomainUser], user_id: Optional[str] = None
    ) -> DomainMetapay:
        actor = require_login(actor)
        target = user_id or actor.user_id
        require_self_or_admin(actor, target)
        return self._require_metapay(target)

    def link_pay_account(
        self, actor: Optional[DomainUser], request: PayAccountCreateRequest
    ) -> DomainPayAccount:
        actor = require_login(actor)
        request.validate()
        if request.bank_id not in codes.BANKS:
            raise NotExistError(f"Bank {request.bank_id} does not exist")

        metapay = self._require_metapay(actor.user_id)
        for account in metapay.pay_accounts:
            if (
                account.bank_id == request.bank_id
                and account.pay_account_number == request.pay_account_number
            ):
                raise DuplicateError("Bank account is already linked")

        account = self.metapay_repo.add_pay_account(
            DomainPayAccount(
                metapay_id=metapay.metapay_id,
                bank_id=request.bank_id,
                pay_account_number=request.pay_account_number,
            )
        )
        logger.info(
            "Pay account linked",
            extra={
                "context": {
                    "user_id": actor.user_id,
                    "pay_account_id": account.pay_account_id,
                    "bank_id": account.bank_id,
                }
            },
        )
        return account

    def unlink_pay_account(
        self, actor: Optional[DomainUser], pay_account_id: int
    ) -> bool:
        actor = require_login(actor)
        metapay = self._require_metapay(actor.user_id)
        self._require_own_account(metapay, pay_account_id)

        deleted = self.metapay_repo.delete_pay_account(pay_account_id)
        logger.info(
            "Pay account unlinked",
            extra={
                "context": {"user_id": actor.user_id, "pay_account_id": pay_account_id}
            },
        )
        return deleted

    def charge(
        self, actor: Optional[DomainUser], request: ChargeRequest
    ) -> DomainMetapay:
        """Move money from a linked bank account into the Metapay balance."""
        actor = require_login(actor)
        request.validate(self.max_charge)

        metapay = self._require_metapay(actor.user_id, for_update=True)
        self._require_own_account(metapay, request.pay_account_id)

        metapay.deposit(request.amount)
        new_balance = self.metapay_repo.change_balance(metapay.metapay_id, request.amount)
        if new_balance is None:
            raise NotExistError(f"Metapay {metapay.metapay_id} does not exist")
        # The stored row is authoritative when charges overlap
        metapay.metapay_balance = new_balance
        self.pay_log_repo.create(
            DomainPayLog(
                metapay_id=metapay.metapay_id,
                pay_log_type=codes.PAY_LOG_CHARGE,
                pay_log_amount=request.amount,
                pay_log_balance=new_balance,
            )
        )
        logger.info(
            "Metapay charged",
            extra={
                "context": {
                    "user_id": actor.user_id,
                    "amount": request.amount,
                    "balance": new_balance,
                }
            },
        )
        return metapay

    def list_pay_logs(
        self, actor: Optional[DomainUser], user_id: Optional[str] = None
    ) -> List[DomainPayLog]:
        actor = require_login(actor)
        target = user_id or actor.user_id
        require_self_or_admin(actor, target)
        metapay = self._require_metapay(target)
        return self.pay_log_repo.get_by_metapay_id(metapay.metapay_id)

    def _require_metapay(self, user_id: str, for_update: bool = False) -> DomainMetapay:
        metapay = self.metapay_repo.get_by_user_id(user_id, for_update=for_update)
        if metapay is None:
            raise NotExistError(f"User {user_id} has no Metapay account")
        return metapay

    def _require_own_account(self, metapay: DomainMetapay, pay_account_id: int) -> None:
        account = self.metapay_repo.get_pay_account(pay_account_id)
        if account is None:
            raise NotExistError(f"Pay account {pay_account_id} does not exist")
        if account.metapay_id != metapay.metapay_id:
            raise InvalidUserError(
                f"Pay account {pay_account_id} is not linked to this Metapay"
            )
