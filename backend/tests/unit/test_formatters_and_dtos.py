"""
Unit tests for display formatting and the request/response DTOs.
"""

from datetime import datetime

import pytest

from laundry.core.exceptions import NotFilledInError
from laundry.domain import codes
from laundry.domain.entities import Metapay, PayAccount
from laundry.schemas.dtos import (
    BookCreateRequest,
    BookResponse,
    ChargeRequest,
    LaundryCreateRequest,
    LoginRequest,
    MetapayResponse,
    PayAccountCreateRequest,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from laundry.utils.formatters import (
    format_account_number,
    format_datetime,
    format_tel,
    format_won,
    lookup_label,
)
from tests.fixtures.domain_fixtures import make_book


@pytest.mark.unit
class TestFormatters:
    @pytest.mark.parametrize(
        "value,expected",
        [(1234, "1,234"), (0, "0"), (None, "0"), ("15000", "15,000"), (1000000, "1,000,000")],
    )
    def test_format_won(self, value, expected):
        assert format_won(value) == expected

    def test_format_tel(self):
        assert format_tel("01012345678") == "010-1234-5678"
        assert format_tel("010-1234-5678") == "010-1234-5678"
        assert format_tel("010123") == "010-123"
        assert format_tel(None) == ""

    def test_format_account_number(self):
        assert format_account_number("1234567890") == "1234-567-890"
        assert format_account_number("12345678901234") == "1234-567-8901234"
        assert format_account_number("") == ""

    def test_format_datetime(self):
        assert format_datetime(datetime(2026, 10, 19, 9, 5, 0)) == "2026-10-19 09:05:00"
        assert format_datetime(None) is None

    def test_lookup_label(self):
        assert lookup_label(codes.BOOK_STATES, codes.BOOK_STATE_PENDING) == "예약 대기"
        assert lookup_label(codes.BANKS, 1) == "농협"
        assert lookup_label(codes.CLOTHES, 999) == ""
        assert lookup_label(codes.FABRICS, None) == ""


@pytest.mark.unit
class TestRequestDtos:
    def test_register_request_normalizes_tel(self):
        request = UserRegisterRequest.from_dict(
            {"user_id": " kim ", "password": "1234", "user_name": "김", "user_tel": "010-1111-2222"}
        )

        assert request.user_id == "kim"
        assert request.user_tel == "01011112222"
        assert request.user_type == codes.USER_TYPE_CUSTOMER
        request.validate()

    def test_book_request_from_json(self):
        request = BookCreateRequest.from_dict(
            {
                "laundry_id": "10",
                "book_method_id": 2,
                "book_lines": [
                    {"clothes_id": 1, "fabric_id": 1, "book_line_fee": 3000},
                    {"clothes_id": "4", "fabric_id": 2, "book_line_fee": "5000"},
                ],
                "book_count": 2,
                "book_total_fee": 8000,
            }
        )

        request.validate()
        assert request.laundry_id == 10
        assert request.total_fee == 8000

    def test_book_request_count_mismatch(self):
        request = BookCreateRequest.from_dict(
            {
                "laundry_id": 10,
                "book_method_id": 1,
                "book_lines": [{"clothes_id": 1, "fabric_id": 1, "book_line_fee": 3000}],
                "book_count": 3,
            }
        )

        with pytest.raises(ValueError):
            request.validate()

    def test_book_line_requires_fee(self):
        request = BookCreateRequest.from_dict(
            {
                "laundry_id": 10,
                "book_method_id": 1,
                "book_lines": [{"clothes_id": 1, "fabric_id": 1}],
            }
        )

        with pytest.raises(NotFilledInError) as exc_info:
            request.validate()
        assert exc_info.value.field == "book_line_fee"

    def test_non_integer_id_rejected(self):
        with pytest.raises(ValueError):
            BookCreateRequest.from_dict({"laundry_id": "abc"})

    def test_book_lines_must_be_a_list(self):
        with pytest.raises(ValueError):
            BookCreateRequest.from_dict({"laundry_id": 1, "book_lines": "shirt"})

    @pytest.mark.parametrize("line", [5, "shirt", None, [1, 2]])
    def test_book_line_must_be_an_object(self, line):
        with pytest.raises(ValueError):
            BookCreateRequest.from_dict({"laundry_id": 1, "book_lines": [line]})

    def test_book_memo_must_be_text(self):
        with pytest.raises(ValueError):
            BookCreateRequest.from_dict({"laundry_id": 1, "book_memo": 123})

    @pytest.mark.parametrize("field", ["user_id", "password", "user_name", "user_tel"])
    def test_register_fields_must_be_text(self, field):
        data = {
            "user_id": "kim",
            "password": "pass1234",
            "user_name": "김고객",
            "user_tel": "010-1111-2222",
        }
        data[field] = 123

        with pytest.raises(ValueError):
            UserRegisterRequest.from_dict(data)

    def test_update_and_login_fields_must_be_text(self):
        with pytest.raises(ValueError):
            UserUpdateRequest.from_dict({"user_tel": 1011112222})
        with pytest.raises(ValueError):
            LoginRequest.from_dict({"user_id": "kim", "password": 1234})
        with pytest.raises(ValueError):
            LaundryCreateRequest.from_dict({"laundry_name": ["세탁소"]})

    def test_pay_account_request_strips_dashes(self):
        request = PayAccountCreateRequest.from_dict(
            {"bank_id": 3, "pay_account_number": "1234-567-890"}
        )

        request.validate()
        assert request.pay_account_number == "1234567890"

    def test_charge_request_limit(self):
        with pytest.raises(ValueError):
            ChargeRequest(pay_account_id=1, amount=500).validate(max_charge=100)


@pytest.mark.unit
class TestResponseDtos:
    def test_book_response_labels(self, customer, laundry):
        book = make_book(customer, laundry, method=codes.BOOK_METHOD_METAPAY, fees=(12000,))
        book.book_lines[0].clothes_id = 2
        book.book_lines[0].fabric_id = 3

        data = BookResponse.from_domain(book).to_dict()

        assert data["book_state_name"] == "예약 대기"
        assert data["book_method_name"] == "메타페이"
        assert data["book_total_fee_display"] == "12,000원"
        assert data["laundry_name"] == "깨끗한 세탁소"
        line = data["book_lines"][0]
        assert line["clothes_name"] == codes.CLOTHES[2]
        assert line["fabric_name"] == codes.FABRICS[3]
        assert line["book_line_fee_display"] == "12,000원"

    def test_metapay_response_formats_accounts(self):
        metapay = Metapay(
            metapay_id=1,
            user_id="kim",
            metapay_balance=1234567,
            pay_accounts=[PayAccount(pay_account_id=1, bank_id=2, pay_account_number="1234567890")],
        )

        data = MetapayResponse.from_domain(metapay).to_dict()

        assert data["metapay_balance_display"] == "1,234,567"
        assert data["pay_account_count"] == 1
        assert data["pay_accounts"][0]["bank_name"] == "국민"
        assert data["pay_accounts"][0]["pay_account_number"] == "1234-567-890"

    def test_user_response_formats_tel(self, customer):
        assert UserResponse.from_domain(customer).to_dict()["user_tel"] == "010-1234-5678"
