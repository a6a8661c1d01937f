"""
Unit tests for UserService.

This module tests user operations:
- Registration rules and password hashing
- Login with JWT issue
- Profile updates and admin-only listings
- Admin seeding
"""

from unittest.mock import patch

import pytest

from laundry.core.exceptions import (
    DuplicateError,
    InvalidCredentialsError,
    InvalidUserError,
    NotExistError,
    NotFilledInError,
    NotLoginError,
)
from laundry.core.security import get_user_from_token, verify_password
from laundry.domain import codes
from laundry.domain.entities import User
from laundry.schemas.dtos import UserRegisterRequest, UserUpdateRequest
from laundry.services.user_service import UserService
from tests.factories.repository_factories import UserRepositoryFactory


def _register_request(**overrides) -> UserRegisterRequest:
    data = {
        "user_id": "newbie",
        "password": "secret1",
        "user_name": "정신입",
        "user_tel": "01055556666",
    }
    data.update(overrides)
    return UserRegisterRequest(**data)


@pytest.fixture
def repo(customer, owner, admin):
    return UserRepositoryFactory.create_populated_mock(customer, owner, admin)


@pytest.fixture
def service(repo) -> UserService:
    return UserService(repo)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.user
class TestRegisterUser:
    def test_register_hashes_password(self, service, repo):
        created = service.register_user(_register_request())

        user, password_hash = repo.create.call_args.args
        assert created.user_id == "newbie"
        assert user.user_type == codes.USER_TYPE_CUSTOMER
        assert password_hash != "secret1"
        assert verify_password("secret1", password_hash)

    def test_owner_registration(self, service):
        created = service.register_user(_register_request(user_type=codes.USER_TYPE_OWNER))

        assert created.is_owner

    def test_duplicate_id_rejected(self, service, repo):
        with pytest.raises(DuplicateError):
            service.register_user(_register_request(user_id="customer1"))

        repo.create.assert_not_called()

    def test_admin_self_registration_rejected(self, service, repo):
        with pytest.raises(ValueError):
            service.register_user(_register_request(user_type=codes.USER_TYPE_ADMIN))

        repo.create.assert_not_called()

    @pytest.mark.parametrize("field_name", ["user_id", "password", "user_name", "user_tel"])
    def test_required_fields(self, service, field_name):
        with pytest.raises(NotFilledInError) as exc_info:
            service.register_user(_register_request(**{field_name: ""}))

        assert exc_info.value.field == field_name

    def test_non_digit_tel_rejected(self, service):
        with pytest.raises(ValueError):
            service.register_user(_register_request(user_tel="010-abc"))


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.user
@pytest.mark.auth
class TestLoginUser:
    def test_login_returns_token(self, service, repo, customer):
        with patch("laundry.services.user_service.verify_password", return_value=True):
            user, token = service.login_user("customer1", "pw")

        assert user is customer
        assert get_user_from_token(token) == {
            "user_id": "customer1",
            "user_type": codes.USER_TYPE_CUSTOMER,
        }

    def test_wrong_password_rejected(self, service, repo):
        repo.get_password_hash.return_value = None

        with pytest.raises(InvalidCredentialsError):
            service.login_user("customer1", "wrong")

    def test_unknown_user_rejected(self, service):
        with pytest.raises(InvalidCredentialsError):
            service.login_user("ghost", "pw")

    def test_inactive_user_rejected(self, service, customer):
        customer.is_active = False

        with patch("laundry.services.user_service.verify_password", return_value=True):
            with pytest.raises(InvalidCredentialsError):
                service.login_user("customer1", "pw")

    def test_empty_credentials_rejected(self, service):
        with pytest.raises(NotFilledInError):
            service.login_user("", "pw")
        with pytest.raises(NotFilledInError):
            service.login_user("customer1", "")


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.user
class TestUpdateUser:
    def test_self_update(self, service, repo, customer):
        updated = service.update_user(
            customer, "customer1", UserUpdateRequest(user_name=" 새이름 ", user_address="부산")
        )

        assert updated.user_name == "새이름"
        assert updated.user_address == "부산"
        repo.set_password.assert_not_called()

    def test_password_change(self, service, repo, customer):
        service.update_user(customer, "customer1", UserUpdateRequest(password="newpass"))

        user_id, password_hash = repo.set_password.call_args.args
        assert user_id == "customer1"
        assert verify_password("newpass", password_hash)

    def test_other_user_rejected(self, service, repo, owner):
        with pytest.raises(InvalidUserError):
            service.update_user(owner, "customer1", UserUpdateRequest(user_name="x"))

        repo.update.assert_not_called()

    def test_admin_updates_missing_user(self, service, admin):
        with pytest.raises(NotExistError):
            service.update_user(admin, "ghost", UserUpdateRequest(user_name="x"))

    def test_anonymous_rejected(self, service):
        with pytest.raises(NotLoginError):
            service.update_user(None, "customer1", UserUpdateRequest(user_name="x"))


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.user
class TestSelectUsers:
    def test_select_all_admin_only(self, service, admin, customer):
        assert len(service.select_all_user(admin)) == 3
        with pytest.raises(InvalidUserError):
            service.select_all_user(customer)

    def test_select_by_user_id(self, service, customer):
        assert service.select_by_user_id(customer, "customer1") is customer

    def test_select_other_user_rejected(self, service, customer):
        with pytest.raises(InvalidUserError):
            service.select_by_user_id(customer, "owner1")

    def test_select_missing_user(self, service, admin):
        with pytest.raises(NotExistError):
            service.select_by_user_id(admin, "ghost")

    def test_select_by_user_type(self, service, repo, admin):
        service.select_by_user_type(admin, codes.USER_TYPE_OWNER)

        repo.get_by_user_type.assert_called_once_with(codes.USER_TYPE_OWNER)

    def test_select_by_unknown_type(self, service, admin):
        with pytest.raises(ValueError):
            service.select_by_user_type(admin, "robot")

    def test_deactivate_user(self, service, admin):
        assert service.deactivate_user(admin, "customer1").is_active is False


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.user
class TestEnsureAdmin:
    def test_creates_missing_admin(self):
        repo = UserRepositoryFactory.create_mock_full()
        created = UserService(repo).ensure_admin("root", "rootpass")

        assert created.is_admin
        repo.create.assert_called_once()

    def test_promotes_existing_user(self, service, repo, customer):
        promoted = service.ensure_admin("customer1", "whatever")

        assert promoted.is_admin
        repo.create.assert_not_called()

    def test_existing_admin_untouched(self, service, repo):
        service.ensure_admin("admin", "whatever")

        repo.update.assert_not_called()
        repo.create.assert_not_called()


def test_user_entity_rejects_unknown_type():
    with pytest.raises(ValueError):
        User(user_id="x", user_type="robot")
