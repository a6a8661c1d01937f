"""
Integration tests for the booking and laundry endpoints.
"""

from datetime import datetime

import pytest

from laundry.core.config import APP_TZ
from laundry.domain import codes
from tests.fixtures.app_fixtures import login_headers, register


def _book_payload(laundry_id, method=codes.BOOK_METHOD_ON_SITE, fees=(3000, 7000), **extra):
    payload = {
        "laundry_id": laundry_id,
        "book_method_id": method,
        "book_memo": "드라이 부탁드려요",
        "book_lines": [
            {"clothes_id": 1, "fabric_id": 2, "book_line_fee": fee} for fee in fees
        ],
    }
    payload.update(extra)
    return payload


@pytest.fixture
def book_id(client, customer_headers, laundry_id) -> int:
    response = client.post("/books", json=_book_payload(laundry_id), headers=customer_headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]["book_id"]


@pytest.mark.integration
@pytest.mark.controllers
class TestLaundryEndpoints:
    def test_listing_is_public(self, client, laundry_id):
        response = client.get("/laundries")

        assert response.status_code == 200
        laundries = response.get_json()["data"]
        assert [l["laundry_id"] for l in laundries] == [laundry_id]
        assert laundries[0]["laundry_tel"] == "021-2345-678"

    def test_customer_cannot_register_shop(self, client, customer_headers):
        response = client.post(
            "/laundries", json={"laundry_name": "몰래 세탁소"}, headers=customer_headers
        )

        assert response.status_code == 403

    def test_unknown_shop(self, client):
        assert client.get("/laundries/999").status_code == 404


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.book
class TestMakeBook:
    def test_create_booking(self, client, customer_headers, laundry_id):
        response = client.post(
            "/books",
            json=_book_payload(laundry_id, book_count=2, book_total_fee=10000),
            headers=customer_headers,
        )

        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["book_state_id"] == codes.BOOK_STATE_PENDING
        assert data["book_state_name"] == "예약 대기"
        assert data["book_total_fee_display"] == "10,000원"
        assert data["book_count"] == 2
        assert [line["fabric_name"] for line in data["book_lines"]] == ["니트", "니트"]

    def test_anonymous_booking_rejected(self, client, laundry_id):
        response = client.post("/books", json=_book_payload(laundry_id))

        assert response.status_code == 401

    def test_unknown_shop_not_found(self, client, customer_headers):
        response = client.post("/books", json=_book_payload(999), headers=customer_headers)

        assert response.status_code == 404

    def test_unknown_clothes_not_found(self, client, customer_headers, laundry_id):
        payload = _book_payload(laundry_id)
        payload["book_lines"][0]["clothes_id"] = 99

        response = client.post("/books", json=payload, headers=customer_headers)

        assert response.status_code == 404

    def test_missing_lines_bad_request(self, client, customer_headers, laundry_id):
        response = client.post(
            "/books", json=_book_payload(laundry_id, fees=()), headers=customer_headers
        )

        assert response.status_code == 400

    def test_total_mismatch_bad_request(self, client, customer_headers, laundry_id):
        response = client.post(
            "/books",
            json=_book_payload(laundry_id, book_total_fee=1),
            headers=customer_headers,
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [{"book_lines": [5]}, {"book_lines": ["shirt"]}, {"book_memo": 123}, {"user_id": 7}],
    )
    def test_wrongly_typed_fields_are_bad_request(
        self, client, customer_headers, laundry_id, overrides
    ):
        payload = _book_payload(laundry_id)
        payload.update(overrides)

        response = client.post("/books", json=payload, headers=customer_headers)

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_metapay_without_account(self, client, customer_headers, laundry_id):
        response = client.post(
            "/books",
            json=_book_payload(laundry_id, codes.BOOK_METHOD_METAPAY),
            headers=customer_headers,
        )

        assert response.status_code == 404


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.book
class TestBookState:
    def test_owner_moves_booking_through_states(self, client, owner_headers, book_id):
        response = client.patch(
            f"/books/{book_id}/state",
            json={"book_state_id": codes.BOOK_STATE_IN_PROGRESS},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.get_json()["data"]["book_state_name"] == "세탁 중"

        response = client.post(f"/books/{book_id}/complete", headers=owner_headers)
        assert response.status_code == 200
        assert response.get_json()["data"]["book_state_id"] == codes.BOOK_STATE_COMPLETE

    def test_customer_cannot_change_state(self, client, customer_headers, book_id):
        response = client.patch(
            f"/books/{book_id}/state",
            json={"book_state_id": codes.BOOK_STATE_IN_PROGRESS},
            headers=customer_headers,
        )

        assert response.status_code == 403

    def test_skipping_to_complete_conflicts(self, client, owner_headers, book_id):
        response = client.post(f"/books/{book_id}/complete", headers=owner_headers)

        assert response.status_code == 409

    def test_unknown_state_not_found(self, client, owner_headers, book_id):
        response = client.patch(
            f"/books/{book_id}/state", json={"book_state_id": 9}, headers=owner_headers
        )

        assert response.status_code == 404

    def test_missing_state_bad_request(self, client, owner_headers, book_id):
        response = client.patch(f"/books/{book_id}/state", json={}, headers=owner_headers)

        assert response.status_code == 400

    def test_customer_cancels_pending_only(self, client, customer_headers, owner_headers, book_id):
        client.patch(
            f"/books/{book_id}/state",
            json={"book_state_id": codes.BOOK_STATE_IN_PROGRESS},
            headers=owner_headers,
        )

        response = client.post(f"/books/{book_id}/cancel", headers=customer_headers)
        assert response.status_code == 409

        response = client.post(f"/books/{book_id}/cancel", headers=owner_headers)
        assert response.status_code == 200
        assert response.get_json()["data"]["book_state_name"] == "예약 취소"


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.book
class TestBookSearch:
    def test_search_by_user_with_state_filter(self, client, customer_headers, book_id):
        response = client.get(
            f"/books/user/customer1?book_state_id={codes.BOOK_STATE_PENDING}",
            headers=customer_headers,
        )

        assert [b["book_id"] for b in response.get_json()["data"]] == [book_id]
        response = client.get(
            f"/books/user/customer1?book_state_id={codes.BOOK_STATE_COMPLETE}",
            headers=customer_headers,
        )
        assert response.get_json()["data"] == []

    def test_search_other_user_forbidden(self, app, client, book_id):
        register(client, "lee")

        response = client.get("/books/user/customer1", headers=login_headers(app, "lee"))

        assert response.status_code == 403

    def test_admin_searches_everything(self, client, admin_headers, book_id):
        assert len(client.get("/books", headers=admin_headers).get_json()["data"]) == 1
        response = client.get("/books/user/customer1", headers=admin_headers)
        assert response.status_code == 200

    def test_search_all_admin_only(self, client, customer_headers, book_id):
        assert client.get("/books", headers=customer_headers).status_code == 403

    def test_first_by_state(self, client, customer_headers, book_id):
        response = client.get(
            f"/books/user/customer1/first?book_state_id={codes.BOOK_STATE_PENDING}",
            headers=customer_headers,
        )
        data = response.get_json()["data"]
        assert data["exists"] is True
        assert data["book"]["book_id"] == book_id

        response = client.get(
            f"/books/user/customer1/first?book_state_id={codes.BOOK_STATE_CANCELED}",
            headers=customer_headers,
        )
        assert response.get_json()["data"] == {"exists": False, "book": None}

    def test_first_by_state_requires_state(self, client, customer_headers, book_id):
        response = client.get("/books/user/customer1/first", headers=customer_headers)

        assert response.status_code == 400

    def test_search_by_laundry_owner_only(
        self, client, owner_headers, customer_headers, laundry_id, book_id
    ):
        response = client.get(f"/books/laundry/{laundry_id}", headers=owner_headers)
        assert [b["book_id"] for b in response.get_json()["data"]] == [book_id]

        response = client.get(f"/books/laundry/{laundry_id}", headers=customer_headers)
        assert response.status_code == 403

    def test_search_by_date(self, client, customer_headers, book_id):
        today = datetime.now(APP_TZ).strftime("%Y-%m-%d")

        response = client.get(f"/books/date/{today}", headers=customer_headers)

        assert [b["book_id"] for b in response.get_json()["data"]] == [book_id]
        assert client.get("/books/date/2000-01-01", headers=customer_headers).get_json()[
            "data"
        ] == []

    def test_search_by_bad_date(self, client, customer_headers):
        response = client.get("/books/date/19-10-2026", headers=customer_headers)

        assert response.status_code == 400

    def test_get_book_visibility(self, app, client, customer_headers, owner_headers, book_id):
        assert client.get(f"/books/{book_id}", headers=customer_headers).status_code == 200
        assert client.get(f"/books/{book_id}", headers=owner_headers).status_code == 200

        register(client, "lee")
        response = client.get(f"/books/{book_id}", headers=login_headers(app, "lee"))
        assert response.status_code == 403
        assert client.get("/books/999", headers=customer_headers).status_code == 404
