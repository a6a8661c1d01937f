"""
Integration tests for Metapay, Metapay-paid bookings, settlements and health.
"""

import pytest

from laundry.domain import codes


@pytest.fixture
def funded_customer(client, customer_headers):
    """customer1 with a Metapay account, one linked bank account and 20,000 won."""
    assert client.post("/metapay", headers=customer_headers).status_code == 201
    account = client.post(
        "/metapay/accounts",
        json={"bank_id": 1, "pay_account_number": "1234-567-890"},
        headers=customer_headers,
    )
    assert account.status_code == 201, account.get_json()
    pay_account_id = account.get_json()["data"]["pay_account_id"]
    charged = client.post(
        "/metapay/charge",
        json={"pay_account_id": pay_account_id, "amount": 20000},
        headers=customer_headers,
    )
    assert charged.status_code == 200, charged.get_json()
    return pay_account_id


def _metapay_book(client, headers, laundry_id, fees):
    return client.post(
        "/books",
        json={
            "laundry_id": laundry_id,
            "book_method_id": codes.BOOK_METHOD_METAPAY,
            "book_lines": [
                {"clothes_id": 10, "fabric_id": 1, "book_line_fee": fee} for fee in fees
            ],
        },
        headers=headers,
    )


def _balance(client, headers) -> int:
    return client.get("/metapay", headers=headers).get_json()["data"]["metapay_balance"]


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.metapay
class TestMetapayEndpoints:
    def test_account_details(self, client, customer_headers, funded_customer):
        data = client.get("/metapay", headers=customer_headers).get_json()["data"]

        assert data["metapay_balance"] == 20000
        assert data["metapay_balance_display"] == "20,000"
        assert data["pay_accounts"][0]["bank_name"] == "농협"
        assert data["pay_accounts"][0]["pay_account_number"] == "1234-567-890"

    def test_second_account_conflicts(self, client, customer_headers, funded_customer):
        assert client.post("/metapay", headers=customer_headers).status_code == 409

    def test_duplicate_bank_account_conflicts(self, client, customer_headers, funded_customer):
        response = client.post(
            "/metapay/accounts",
            json={"bank_id": 1, "pay_account_number": "1234567890"},
            headers=customer_headers,
        )

        assert response.status_code == 409

    def test_unknown_bank(self, client, customer_headers, funded_customer):
        response = client.post(
            "/metapay/accounts",
            json={"bank_id": 9, "pay_account_number": "1234567890"},
            headers=customer_headers,
        )

        assert response.status_code == 404

    def test_charge_over_limit(self, client, customer_headers, funded_customer):
        response = client.post(
            "/metapay/charge",
            json={"pay_account_id": funded_customer, "amount": 999999999},
            headers=customer_headers,
        )

        assert response.status_code == 400

    def test_charge_from_foreign_account(
        self, client, owner_headers, funded_customer
    ):
        client.post("/metapay", headers=owner_headers)

        response = client.post(
            "/metapay/charge",
            json={"pay_account_id": funded_customer, "amount": 1000},
            headers=owner_headers,
        )

        assert response.status_code == 403

    def test_unlink_account(self, client, customer_headers, funded_customer):
        response = client.delete(
            f"/metapay/accounts/{funded_customer}", headers=customer_headers
        )

        assert response.status_code == 200
        data = client.get("/metapay", headers=customer_headers).get_json()["data"]
        assert data["pay_account_count"] == 0

    def test_pay_logs(self, client, customer_headers, funded_customer):
        logs = client.get("/metapay/logs", headers=customer_headers).get_json()["data"]

        assert [(log["pay_log_type"], log["pay_log_type_name"]) for log in logs] == [
            (codes.PAY_LOG_CHARGE, "충전")
        ]

    def test_missing_account(self, client, customer_headers):
        assert client.get("/metapay", headers=customer_headers).status_code == 404


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.metapay
@pytest.mark.book
class TestMetapayBookings:
    def test_booking_debits_balance(self, client, customer_headers, laundry_id, funded_customer):
        response = _metapay_book(client, customer_headers, laundry_id, (8000, 4000))

        assert response.status_code == 201
        assert _balance(client, customer_headers) == 8000
        logs = client.get("/metapay/logs", headers=customer_headers).get_json()["data"]
        assert logs[0]["pay_log_type"] == codes.PAY_LOG_PAYMENT
        assert logs[0]["book_id"] == response.get_json()["data"]["book_id"]

    def test_insufficient_balance_conflicts(
        self, client, customer_headers, admin_headers, laundry_id, funded_customer
    ):
        response = _metapay_book(client, customer_headers, laundry_id, (15000, 15000))

        assert response.status_code == 409
        assert _balance(client, customer_headers) == 20000
        assert client.get("/books", headers=admin_headers).get_json()["data"] == []

    def test_cancel_refunds(self, client, customer_headers, laundry_id, funded_customer):
        book_id = _metapay_book(client, customer_headers, laundry_id, (5000,)).get_json()[
            "data"
        ]["book_id"]

        response = client.post(f"/books/{book_id}/cancel", headers=customer_headers)

        assert response.status_code == 200
        assert _balance(client, customer_headers) == 20000
        logs = client.get("/metapay/logs", headers=customer_headers).get_json()["data"]
        assert logs[0]["pay_log_type"] == codes.PAY_LOG_REFUND
        assert logs[0]["pay_log_amount"] == 5000


@pytest.mark.integration
@pytest.mark.controllers
class TestSettlements:
    def test_completed_booking_is_settled(
        self,
        client,
        customer_headers,
        owner_headers,
        admin_headers,
        laundry_id,
        funded_customer,
    ):
        book_id = _metapay_book(client, customer_headers, laundry_id, (6000, 6500)).get_json()[
            "data"
        ]["book_id"]
        client.patch(
            f"/books/{book_id}/state",
            json={"book_state_id": codes.BOOK_STATE_IN_PROGRESS},
            headers=owner_headers,
        )
        client.patch(
            f"/books/{book_id}/state",
            json={"book_state_id": codes.BOOK_STATE_COMPLETE},
            headers=owner_headers,
        )

        response = client.get(f"/settlements/laundry/{laundry_id}", headers=owner_headers)

        data = response.get_json()["data"]
        assert data["total"] == 12500
        assert data["total_display"] == "12,500원"
        assert [s["book_id"] for s in data["settlements"]] == [book_id]
        assert client.get("/settlements", headers=admin_headers).get_json()["data"]["total"] == 12500

    def test_settlements_restricted(self, client, customer_headers, owner_headers, laundry_id):
        assert (
            client.get(f"/settlements/laundry/{laundry_id}", headers=customer_headers).status_code
            == 403
        )
        assert client.get("/settlements", headers=owner_headers).status_code == 403


@pytest.mark.integration
@pytest.mark.controllers
class TestHealth:
    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["data"] == {"status": "ok"}

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.get_json()["data"]["database"] == "ok"

    def test_readiness_token(self, app, client):
        app.config["HEALTH_CHECK_TOKEN"] = "probe-token"

        assert client.get("/health/ready").status_code == 401
        response = client.get("/health/ready", headers={"X-Health-Token": "probe-token"})
        assert response.status_code == 200

    def test_metrics_exposed(self, client):
        client.get("/health")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert b"flask_http_request" in response.data

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers.get("X-Request-ID") == "abc-123"
