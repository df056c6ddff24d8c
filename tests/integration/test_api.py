"""Integration tests for API endpoints"""

import re
import httpx
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from credit_simulator.domain.models import CreditProduct
from credit_simulator.domain.exceptions import CatalogAPIError
from conftest import make_product


@pytest.fixture
def simulate_body() -> dict:
    return {
        "product_type": "personal",
        "amount": 1_000_000,
        "monthly_income": 800_000,
        "age": 35,
        "tenure_months": 24,
        "term_months": 24,
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "credit_simulation_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


@patch("credit_simulator.infrastructure.clients.catalog.CatalogClient.get_products")
def test_credit_simulation(
    mock_catalog: AsyncMock,
    client: TestClient,
    simulate_body: dict,
    sample_products: list[CreditProduct],
):
    """Test POST /v1/credit/simulate ranks qualifying products"""
    mock_catalog.return_value = sample_products

    response = client.post("/v1/credit/simulate", json=simulate_body)

    assert response.status_code == 200
    data = response.json()
    assert data["product_type"] == "personal"
    assert [r["id"] for r in data["results"]] == ["7-p2", "11-p1"]
    assert data["results"][0]["is_uva"] is True
    # No inflation estimate supplied, so no projection
    assert data["results"][0]["uva_projection"] is None
    assert data["skipped"] == [{"product_id": "p3", "reason": "Income below the required minimum"}]


@patch("credit_simulator.infrastructure.clients.catalog.CatalogClient.get_products")
def test_credit_simulation_attaches_uva_projection(
    mock_catalog: AsyncMock,
    client: TestClient,
    simulate_body: dict,
    sample_products: list[CreditProduct],
):
    mock_catalog.return_value = sample_products

    response = client.post("/v1/credit/simulate", json={**simulate_body, "expected_inflation": 40})

    results = response.json()["results"]
    uva = next(r for r in results if r["is_uva"])
    assert len(uva["uva_projection"]) == 24
    assert uva["uva_projection"][0]["payment"] == pytest.approx(uva["monthly_payment"])
    assert uva["uva_projection"][-1]["payment"] > uva["monthly_payment"]
    assert next(r for r in results if not r["is_uva"])["uva_projection"] is None


@patch("credit_simulator.infrastructure.clients.catalog.CatalogClient.get_products")
def test_credit_simulation_catalog_down(mock_catalog: AsyncMock, client: TestClient, simulate_body: dict):
    """Catalog failures surface as 503"""
    mock_catalog.side_effect = CatalogAPIError("Catalog timeout after 5.0s")

    response = client.post("/v1/credit/simulate", json=simulate_body)

    assert response.status_code == 503


def test_credit_simulation_survives_malformed_catalog_rows(client: TestClient, simulate_body: dict):
    """Non-finite numbers and non-object rows cost only their own product"""
    payload = (
        b'[{"id": 1, "codigo_de_entidad": 11, "descripcion_de_entidad": "Banco Naci\\u00f3n",'
        b' "nombre_corto_del_prestamo_personal": "Personal", "ingreso_minimo_mensual_solicitado": 100000,'
        b' "antiguedad_laboral_minima_meses": 6, "relacion_cuota_ingreso": 0.35,'
        b' "tasa_efectiva_anual_maxima": 0.6, "costo_financiero_efectivo_total_maximo": 0.8,'
        b' "monto_maximo_otorgable": 5000000, "monto_minimo_otorgable": 50000,'
        b' "plazo_maximo_otorgable_anos": 6, "edad_maxima_solicitada": 75},'
        b' {"id": "bad", "codigo_de_entidad": NaN, "tasa_efectiva_anual_maxima": Infinity},'
        b' "garbage"]'
    )
    catalog_response = httpx.Response(
        200,
        content=payload,
        headers={"Content-Type": "application/json"},
        request=httpx.Request("GET", "http://catalog.test/rest/v1/creditos_personales"),
    )

    with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=catalog_response)):
        response = client.post("/v1/credit/simulate", json=simulate_body)

    assert response.status_code == 200
    data = response.json()
    assert [r["id"] for r in data["results"]] == ["11-1"]
    assert [s["product_id"] for s in data["skipped"]] == ["bad"]


def test_credit_simulation_validates_body(client: TestClient, simulate_body: dict):
    response = client.post("/v1/credit/simulate", json={**simulate_body, "product_type": "leasing"})
    assert response.status_code == 422


@patch("credit_simulator.infrastructure.clients.catalog.CatalogClient.get_products")
def test_mortgage_simulation(mock_catalog: AsyncMock, client: TestClient):
    mock_catalog.return_value = [
        make_product(
            id="h1",
            family="mortgage",
            max_annual_rate=0.12,
            max_ltv=0.8,
            max_payment_to_income=0.25,
            max_amount=1_000_000,
            max_term_months=360,
        )
    ]

    response = client.post(
        "/v1/mortgage/simulate",
        json={"property_value": 100_000, "monthly_income": 10_000, "desired_term_months": 120},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] is None
    assert data["results"][0]["status"] == "VIABLE"
    assert data["results"][0]["amount_to_finance"] == pytest.approx(80_000)


@patch("credit_simulator.infrastructure.clients.catalog.CatalogClient.get_products")
def test_mortgage_simulation_empty_catalog(mock_catalog: AsyncMock, client: TestClient):
    mock_catalog.return_value = []

    response = client.post(
        "/v1/mortgage/simulate",
        json={"property_value": 100_000, "monthly_income": 10_000, "desired_term_months": 120},
    )

    assert response.status_code == 200
    assert response.json()["results"] == []
    assert response.json()["message"] == "No mortgage products available"


def test_amortization_endpoint(client: TestClient):
    response = client.post("/v1/amortization", json={"principal": 100_000, "periodic_rate": 0.02, "periods": 12})

    assert response.status_code == 200
    data = response.json()
    assert data["installment"] == pytest.approx(9455.96, abs=0.01)
    assert len(data["rows"]) == 12
    assert data["rows"][-1]["balance"] == 0
    assert data["total_interest"] == pytest.approx(9455.96 * 12 - 100_000, abs=0.1)


def test_amortization_endpoint_incomplete_input(client: TestClient):
    response = client.post("/v1/amortization", json={"principal": 100_000, "periodic_rate": 0, "periods": 12})

    assert response.status_code == 200
    assert response.json() == {"installment": None, "total_interest": 0, "rows": []}


def test_uva_projection_endpoint(client: TestClient):
    response = client.post(
        "/v1/uva-projection",
        json={"initial_payment": 100_000, "annual_inflation": 36, "periods": 3, "income": 500_000},
    )

    rows = response.json()["rows"]
    assert [r["period"] for r in rows] == [1, 2, 3]
    assert rows[1]["payment"] == pytest.approx(103_000)


def test_currency_convert_endpoint(client: TestClient):
    response = client.post(
        "/v1/currency/convert",
        json={"amount": 100, "payment_currency": "USD", "contract_currency": "ARS", "exchange_rate": 350},
    )

    assert response.status_code == 200
    assert response.json()["converted_amount"] == 35000
    assert response.json()["requires_conversion"] is True


def test_currency_convert_invalid_rate(client: TestClient):
    response = client.post(
        "/v1/currency/convert",
        json={"amount": 100, "payment_currency": "ARS", "contract_currency": "USD", "exchange_rate": 0},
    )
    assert response.status_code == 422


def test_progress_endpoint(client: TestClient):
    response = client.post(
        "/v1/simulator/progress",
        json={
            "items": [{"id": "1", "is_selected": True, "amount": 1000}],
            "credit_lines": [],
            "estimated_monthly_income": 0,
        },
    )

    assert response.json()["progress"] == 33
    assert response.json()["next_step"] == "financing"


def test_comparison_basket_flow(client: TestClient):
    """Add twice, keep one; sessions don't share baskets"""
    result = {
        "id": "11-p1",
        "institution": "Banco Nación",
        "product": "Préstamo Personal",
        "monthly_payment": 72_000,
        "income_percentage": 9.0,
        "rate": 0.6,
        "total_financial_cost": 0.8,
        "max_term_months": 72,
    }

    client.post("/v1/comparison/tab-1", json=result)
    response = client.post("/v1/comparison/tab-1", json=result)
    assert [i["id"] for i in response.json()["items"]] == ["11-p1"]
    assert "added_at" in response.json()["items"][0]

    assert client.get("/v1/comparison/tab-2").json()["items"] == []

    client.post("/v1/comparison/tab-1", json={**result, "id": "7-p2"})
    response = client.delete("/v1/comparison/tab-1/11-p1")
    assert [i["id"] for i in response.json()["items"]] == ["7-p2"]

    response = client.delete("/v1/comparison/tab-1/unknown")
    assert len(response.json()["items"]) == 1

    response = client.delete("/v1/comparison/tab-1")
    assert response.json()["items"] == []


def test_comparison_reads_and_clears_do_not_retain_sessions(client: TestClient):
    store = client.app.state.comparison_store
    result = {
        "id": "11-p1",
        "institution": "Banco Nación",
        "product": "Préstamo Personal",
        "monthly_payment": 72_000,
        "income_percentage": 9.0,
        "rate": 0.6,
        "total_financial_cost": 0.8,
        "max_term_months": 72,
    }

    for session_id in ["a", "b", "c"]:
        response = client.get(f"/v1/comparison/{session_id}")
        assert response.json() == {"session_id": session_id, "items": []}
    client.delete("/v1/comparison/d/11-p1")
    assert len(store) == 0

    client.post("/v1/comparison/tab-1", json=result)
    assert len(store) == 1

    response = client.delete("/v1/comparison/tab-1")
    assert response.json()["items"] == []
    assert len(store) == 0
    assert client.get("/v1/comparison/tab-1").json()["items"] == []


@patch("credit_simulator.infrastructure.clients.notifications.NotificationClient.send_simulation_saved")
def test_save_and_lookup_simulation(mock_notify: AsyncMock, client: TestClient):
    """Saved simulations are retrievable by their reference number"""
    mock_notify.return_value = None

    response = client.post(
        "/v1/simulations",
        json={
            "email": "applicant@example.com",
            "simulation_data": {"items": [{"id": "1", "amount": 1000}]},
            "analysis_results": {"roi": 12.5},
        },
    )

    assert response.status_code == 200
    reference = response.json()["reference_number"]
    assert re.fullmatch(r"SIM-\d{13}-[0-9A-Z]{9}", reference)
    mock_notify.assert_awaited_once_with("applicant@example.com", reference)

    lookup = client.get(f"/v1/simulations/{reference}")
    assert lookup.status_code == 200
    data = lookup.json()
    assert data["user_email"] == "applicant@example.com"
    assert data["simulation_data"] == {"items": [{"id": "1", "amount": 1000}]}
    assert data["profile_status"] == "not_started"
    assert data["profile_step"] == 0


def test_lookup_unknown_simulation(client: TestClient):
    response = client.get("/v1/simulations/SIM-0-XXXXXXXXX")
    assert response.status_code == 404
