from typing import List, Optional

from laundry.db.base import User as DbUser
from laundry.domain.entities import User as DomainUser
from laundry.domain.interfaces import IUserRepository


class UserRepository(IUserRepository):
    """Repository for User persistence operations following SOLID principles.

    This implementation:
    - Implements IUserRepository interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Maps between domain entities and database models
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_db_by_id(self, user_id: str) -> Optional[DbUser]:
        """Get user by login id, returning database model."""
        return self.db.query(DbUser).filter_by(user_id=user_id).first()

    def get_by_id(self, user_id: str) -> Optional[DomainUser]:
        """Get user by login id, returning domain entity."""
        db_user = self.get_db_by_id(user_id)
        return self._to_domain(db_user) if db_user else None

    def get_all(self) -> List[DomainUser]:
        db_users = self.db.query(DbUser).order_by(DbUser.user_id).all()
        return [self._to_domain(db_user) for db_user in db_users]

    def get_by_user_type(self, user_type: str) -> List[DomainUser]:
        db_users = (
            self.db.query(DbUser)
            .filter_by(user_type=user_type)
            .order_by(DbUser.user_id)
            .all()
        )
        return [self._to_domain(db_user) for db_user in db_users]

    def get_password_hash(self, user_id: str) -> Optional[str]:
        db_user = self.get_db_by_id(user_id)
        return db_user.password_hash if db_user else None

    def create(self, user: DomainUser, password_hash: str) -> DomainUser:
        """Create a new user from domain entity."""
        db_user = DbUser(
            user_id=user.user_id,
            password_hash=password_hash,
            user_name=user.user_name,
            user_tel=user.user_tel,
            user_address=user.user_address,
            user_type=user.user_type,
            active_flag=user.is_active,
        )

        self.db.add(db_user)
        self.db.flush()
        self.db.refresh(db_user)

        return self._to_domain(db_user)

    def update(self, user: DomainUser) -> DomainUser:
        """Update an existing user from domain entity."""
        db_user = self.get_db_by_id(user.user_id)
        if not db_user:
            raise ValueError(f"User with ID {user.user_id} not found")

        db_user.user_name = user.user_name
        db_user.user_tel = user.user_tel
        db_user.user_address = user.user_address
        db_user.user_type = user.user_type
        db_user.is_active = user.is_active

        self.db.flush()
        return self._to_domain(db_user)

    def set_password(self, user_id: str, password_hash: str) -> bool:
        """Set the password hash for a user."""
        db_user = self.get_db_by_id(user_id)
        if not db_user:
            return False

        db_user.password_hash = password_hash
        self.db.flush()
        return True

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        """Convert database model to domain entity."""
        return DomainUser(
            user_id=db_user.user_id,
            user_name=db_user.user_name,
            user_tel=db_user.user_tel or "",
            user_address=db_user.user_address,
            user_type=db_user.user_type,
            is_active=db_user.active_flag,
            user_insert_date=db_user.user_insert_date,
        )
