"""
Unit tests for the domain entities and the static code tables.
"""

import pytest

from laundry.core.exceptions import InsufficientBalanceError
from laundry.domain import codes
from laundry.domain.entities import Book, Laundry, Metapay, PayLog, User


@pytest.mark.unit
class TestCodes:
    def test_tables_are_numbered_from_one(self):
        assert sorted(codes.BOOK_STATES) == [1, 2, 3, 4]
        assert sorted(codes.BOOK_METHODS) == [1, 2]
        assert sorted(codes.CLOTHES) == list(range(1, 21))
        assert sorted(codes.FABRICS) == list(range(1, 10))
        assert [codes.BANKS[i] for i in range(1, 5)] == ["농협", "국민", "우리", "하나"]

    @pytest.mark.parametrize(
        "current,target,allowed",
        [
            (codes.BOOK_STATE_PENDING, codes.BOOK_STATE_IN_PROGRESS, True),
            (codes.BOOK_STATE_PENDING, codes.BOOK_STATE_CANCELED, True),
            (codes.BOOK_STATE_PENDING, codes.BOOK_STATE_COMPLETE, False),
            (codes.BOOK_STATE_IN_PROGRESS, codes.BOOK_STATE_COMPLETE, True),
            (codes.BOOK_STATE_IN_PROGRESS, codes.BOOK_STATE_CANCELED, True),
            (codes.BOOK_STATE_IN_PROGRESS, codes.BOOK_STATE_PENDING, False),
            (codes.BOOK_STATE_COMPLETE, codes.BOOK_STATE_CANCELED, False),
            (codes.BOOK_STATE_CANCELED, codes.BOOK_STATE_PENDING, False),
        ],
    )
    def test_transitions(self, current, target, allowed):
        assert codes.can_transition(current, target) is allowed

    def test_terminal_states_have_no_exit(self):
        for state in codes.TERMINAL_BOOK_STATES:
            assert not any(codes.can_transition(state, target) for target in codes.BOOK_STATES)


@pytest.mark.unit
@pytest.mark.metapay
class TestMetapayEntity:
    def test_withdraw_and_deposit(self):
        metapay = Metapay(user_id="kim", metapay_balance=1000)

        assert metapay.withdraw(400) == 600
        assert metapay.deposit(150) == 750

    def test_overdraw_rejected_and_balance_unchanged(self):
        metapay = Metapay(user_id="kim", metapay_balance=100)

        with pytest.raises(InsufficientBalanceError) as exc_info:
            metapay.withdraw(101)

        assert metapay.metapay_balance == 100
        assert exc_info.value.balance == 100
        assert exc_info.value.amount == 101
        assert exc_info.value.status_code == 409

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError):
            Metapay(user_id="kim", metapay_balance=-1)


@pytest.mark.unit
class TestOtherEntities:
    def test_user_roles(self):
        assert User(user_id="a", user_type=codes.USER_TYPE_ADMIN).is_admin
        assert User(user_id="o", user_type=codes.USER_TYPE_OWNER).is_owner
        with pytest.raises(ValueError):
            User(user_id="")

    def test_laundry_ownership(self):
        laundry = Laundry(laundry_id=1, user_id="o", laundry_name="세탁소")

        assert laundry.is_owned_by(User(user_id="o", user_type=codes.USER_TYPE_OWNER))
        assert not laundry.is_owned_by(User(user_id="x"))
        assert not laundry.is_owned_by(None)

    def test_book_properties(self):
        book = Book(
            user_id="kim",
            laundry_id=1,
            book_method_id=codes.BOOK_METHOD_METAPAY,
            book_state_id=codes.BOOK_STATE_CANCELED,
        )

        assert book.is_paid_by_metapay
        assert book.is_terminal
        assert book.book_state_name == "예약 취소"

    def test_pay_log_type_validated(self):
        with pytest.raises(ValueError):
            PayLog(metapay_id=1, pay_log_type="gift")
