import logging
from typing import List, Optional, Tuple

from laundry.core.exceptions import (
    DuplicateError,
    InvalidCredentialsError,
    NotExistError,
    NotFilledInError,
)
from laundry.core.security import create_user_token, hash_password, verify_password
from laundry.domain import codes
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import IUserRepository
from laundry.schemas.dtos import UserRegisterRequest, UserUpdateRequest

from .authorization import require_admin, require_self_or_admin

logger = logging.getLogger(__name__)


class UserService:
    """Application service for user-related use-cases following SOLID principles.

    This service:
    - Keeps business rules separate from controllers and repositories (Single Responsibility)
    - Depends on abstractions (IUserRepository) not concrete implementations (Dependency Inversion)
    - Works with domain entities, not database models
    """

    def __init__(self, repo: IUserRepository) -> None:
        self.repo = repo

    def register_user(self, request: UserRegisterRequest) -> DomainUser:
        """Register a customer or shop owner.

        Business Rules:
        - user_id, password, user_name and user_tel are required
        - user_id must be unique
        - Administrators cannot self-register
        """
        request.validate()

        if self.repo.get_by_id(request.user_id) is not None:
            raise DuplicateError(f"User id {request.user_id} is already registered")

        user = DomainUser(
            user_id=request.user_id,
            user_name=request.user_name,
            user_tel=request.user_tel,
            user_address=request.user_address,
            user_type=request.user_type,
            is_active=True,
        )
        created = self.repo.create(user, hash_password(request.password))

        logger.info(
            "User registered",
            extra={
                "context": {"user_id": created.user_id, "user_type": created.user_type}
            },
        )
        return created

    def login_user(self, user_id: str, password: str) -> Tuple[DomainUser, str]:
        """Authenticate a user with id and password.

        Returns:
            (user, JWT access token)

        Raises:
            NotFilledInError: If id or password is empty
            InvalidCredentialsError: Unknown id, wrong password or inactive user
        """
        if not user_id:
            raise NotFilledInError(field="user_id")
        if not password:
            raise NotFilledInError(field="password")

        user = self.repo.get_by_id(user_id)
        if user is None or not verify_password(
            password, self.repo.get_password_hash(user_id)
        ):
            logger.warning("Login failed", extra={"context": {"user_id": user_id}})
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(
                "Login refused for inactive user", extra={"context": {"user_id": user_id}}
            )
            raise InvalidCredentialsError("User account is inactive")

        token = create_user_token(user.user_id, user.user_type)
        logger.info("User logged in", extra={"context": {"user_id": user_id}})
        return user, token

    def update_user(
        self, actor: Optional[DomainUser], user_id: str, request: UserUpdateRequest
    ) -> DomainUser:
        """Update profile fields and, optionally, the password (self or admin)."""
        require_self_or_admin(actor, user_id)
        request.validate()

        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotExistError(f"User {user_id} does not exist")

        if request.user_name is not None:
            user.user_name = request.user_name.strip()
        if request.user_tel is not None:
            user.user_tel = request.user_tel
        if request.user_address is not None:
            user.user_address = request.user_address

        updated = self.repo.update(user)
        if request.password:
            self.repo.set_password(user_id, hash_password(request.password))

        logger.info(
            "User updated",
            extra={
                "context": {
                    "user_id": user_id,
                    "actor": actor.user_id,
                    "password_changed": bool(request.password),
                }
            },
        )
        return updated

    def deactivate_user(self, actor: Optional[DomainUser], user_id: str) -> DomainUser:
        """Deactivate a user (business rule: don't delete, just deactivate)."""
        require_admin(actor)
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotExistError(f"User {user_id} does not exist")
        user.is_active = False
        return self.repo.update(user)

    def select_all_user(self, actor: Optional[DomainUser]) -> List[DomainUser]:
        require_admin(actor)
        return self.repo.get_all()

    def select_by_user_id(
        self, actor: Optional[DomainUser], user_id: str
    ) -> DomainUser:
        require_self_or_admin(actor, user_id)
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotExistError(f"User {user_id} does not exist")
        return user

    def select_by_user_type(
        self, actor: Optional[DomainUser], user_type: str
    ) -> List[DomainUser]:
        require_admin(actor)
        if user_type not in codes.USER_TYPES:
            raise ValueError(f"Invalid user type: {user_type}")
        return self.repo.get_by_user_type(user_type)

    def ensure_admin(self, user_id: str, password: str) -> DomainUser:
        """Create or promote the configured administrator account (idempotent)."""
        user = self.repo.get_by_id(user_id)
        if user is None:
            admin = DomainUser(
                user_id=user_id,
                user_name="Administrator",
                user_type=codes.USER_TYPE_ADMIN,
            )
            created = self.repo.create(admin, hash_password(password))
            logger.info("Admin user created", extra={"context": {"user_id": user_id}})
            return created

        if user.user_type != codes.USER_TYPE_ADMIN or not user.is_active:
            user.user_type = codes.USER_TYPE_ADMIN
            user.is_active = True
            user = self.repo.update(user)
            logger.info("User promoted to admin", extra={"context": {"user_id": user_id}})
        return user
