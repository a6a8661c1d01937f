"""
Laundry shop service following SOLID principles.
"""

import logging
from typing import List, Optional

from laundry.core.exceptions import InvalidUserError, NotExistError
from laundry.domain.entities import Laundry as DomainLaundry
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import ILaundryRepository, IUserRepository
from laundry.schemas.dtos import LaundryCreateRequest

from .authorization import require_login, require_self_or_admin

logger = logging.getLogger(__name__)


class LaundryService:
    """Application service for laundry shops."""

    def __init__(
        self, laundry_repo: ILaundryRepository, user_repo: IUserRepository
    ) -> None:
        self.laundry_repo = laundry_repo
        self.user_repo = user_repo

    def register_laundry(
        self, actor: Optional[DomainUser], request: LaundryCreateRequest
    ) -> DomainLaundry:
        """Register a shop.

        Business Rules:
        - Only owners and admins register shops
        - Owners always register for themselves
        - Admins may register for an existing owner
        """
        actor = require_login(actor)
        request.validate()

        if actor.is_admin and request.user_id:
            owner = self.user_repo.get_by_id(request.user_id)
            if owner is None:
                raise NotExistError(f"User {request.user_id} does not exist")
            if not (owner.is_owner or owner.is_admin):
                raise InvalidUserError(f"User {owner.user_id} is not a shop owner")
            owner_id = owner.user_id
        elif actor.is_owner or actor.is_admin:
            owner_id = actor.user_id
        else:
            raise InvalidUserError("Only shop owners can register a laundry")

        laundry = self.laundry_repo.create(
            DomainLaundry(
                user_id=owner_id,
                laundry_name=request.laundry_name,
                laundry_address=request.laundry_address,
                laundry_tel=request.laundry_tel,
            )
        )
        logger.info(
            "Laundry registered",
            extra={
                "context": {"laundry_id": laundry.laundry_id, "owner": owner_id}
            },
        )
        return laundry

    def get_laundry(self, laundry_id: int) -> DomainLaundry:
        laundry = self.laundry_repo.get_by_id(laundry_id)
        if laundry is None:
            raise NotExistError(f"Laundry {laundry_id} does not exist")
        return laundry

    def list_laundries(self) -> List[DomainLaundry]:
        return self.laundry_repo.get_all()

    def list_by_owner(
        self, actor: Optional[DomainUser], user_id: str
    ) -> List[DomainLaundry]:
        require_self_or_admin(actor, user_id)
        return self.laundry_repo.get_by_owner(user_id)
