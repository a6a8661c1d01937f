"""
Settlement service - read side of the records written on booking completion.
"""

from typing import List, Optional

from laundry.core.exceptions import InvalidUserError, NotExistError
from laundry.domain.entities import Settlement as DomainSettlement
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import ILaundryRepository, ISettlementRepository

from .authorization import require_admin, require_login


class SettlementService:
    def __init__(
        self,
        settlement_repo: ISettlementRepository,
        laundry_repo: ILaundryRepository,
    ) -> None:
        self.settlement_repo = settlement_repo
        self.laundry_repo = laundry_repo

    def list_by_laundry(
        self, actor: Optional[DomainUser], laundry_id: int
    ) -> List[DomainSettlement]:
        """Settlements of one shop (its owner or an admin)."""
        actor = require_login(actor)
        laundry = self.laundry_repo.get_by_id(laundry_id)
        if laundry is None:
            raise NotExistError(f"Laundry {laundry_id} does not exist")
        if not actor.is_admin and not laundry.is_owned_by(actor):
            raise InvalidUserError(
                f"User {actor.user_id} does not own laundry {laundry_id}"
            )
        return self.settlement_repo.get_by_laundry_id(laundry_id)

    def list_all(self, actor: Optional[DomainUser]) -> List[DomainSettlement]:
        require_admin(actor)
        return self.settlement_repo.get_all()

    @staticmethod
    def total(settlements: List[DomainSettlement]) -> int:
        return sum(item.settlement_fee for item in settlements)
