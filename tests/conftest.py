"""
Pytest configuration and shared fixtures for the Procurement Desk test suite.
"""
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
os.chdir(PROJECT_ROOT)


class RecordingBackend:
    """
    Fake backend for httpx.MockTransport.

    Routes are registered as (METHOD, path) -> handler, where the handler
    receives the httpx.Request and returns an httpx.Response (or a dict that
    is sent as a 200 JSON body). Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response) -> None:
        handler = response if callable(response) else (lambda request, body=response: body)
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"success": False, "error": f"No route {path}"})
        result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)

    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path.removeprefix('/api')}" for r in self.requests]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    tmp_path = tempfile.mkdtemp(prefix="desk_test_")
    yield Path(tmp_path)
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path, monkeypatch) -> "Config":
    """Provide a test configuration isolated from the real config directory."""
    from config import Config

    monkeypatch.setenv("CONFIG_DIR", str(temp_dir / "config"))
    config = Config()
    config.api_base_url = "http://desk.test/api"
    config.api_token = "test-token"
    config.export_dir = temp_dir / "export"
    return config


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def transport(test_config, backend) -> "ApiTransport":
    """ApiTransport whose requests are answered by the fake backend."""
    from services.transport import ApiTransport

    client = httpx.Client(transport=httpx.MockTransport(backend))
    return ApiTransport(test_config, client=client)


@pytest.fixture
def failing_transport(test_config) -> "ApiTransport":
    """ApiTransport whose every request fails to connect."""
    from services.transport import ApiTransport

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(refuse))
    return ApiTransport(test_config, client=client)


@pytest.fixture
def sample_purchase_order() -> dict:
    """A purchase order with two collected lines (wire format)."""
    return {
        "id": 42,
        "orderNumber": "PO-2024-042",
        "supplierId": 7,
        "supplierName": "Gulf Oil Recyclers LLC",
        "orderDate": "2024-03-01",
        "totalAmount": 999.0,
        "items": [
            {"quantityOrdered": 10, "unitPrice": 12.5},
            {"quantityReceived": 4, "contractRate": 20.125},
        ],
    }


@pytest.fixture
def sample_invoice() -> dict:
    """A partially paid company bill (wire format)."""
    return {
        "id": 17,
        "invoice_number": "CB-INV-2024-000117",
        "invoice_date": "2024-03-05",
        "due_date": "2024-04-04",
        "invoice_amount": 205.5,
        "paid_amount": 100.0,
        "balance_due": 105.5,
        "payment_status": "partial",
        "payment_terms_days": 30,
        "notes": "First delivery",
        "attachment": None,
        "billType": "company",
        "bill_status": "sent",
    }


@pytest.fixture
def sample_unbilled_orders() -> list[dict]:
    return [
        {"id": 101, "orderNumber": "PO-101", "supplierId": 7, "supplierName": "Gulf Oil", "totalAmount": 100.0},
        {"id": 102, "orderNumber": "PO-102", "supplierId": 7, "supplierName": "Gulf Oil", "totalAmount": 250.0},
        {"id": 103, "orderNumber": "PO-103", "supplierId": 9, "supplierName": "Desert Metals", "totalAmount": 80.0},
    ]


@pytest.fixture
def sample_materials() -> list[dict]:
    return [
        {"id": 1, "code": "UO-01", "name": "Used Oil", "category": "Oil", "unit": "L", "standardPrice": 0.25},
        {"id": 2, "code": "CU-01", "name": "Copper Scrap", "category": "Metal", "unit": "kg", "standardPrice": 2.0},
        {"id": 3, "code": "FE-01", "name": "Iron Scrap", "category": "Metal", "unit": "kg", "standardPrice": 0.1},
        {"id": 4, "code": "BT-01", "name": "Batteries", "category": "Hazardous", "unit": "pcs",
         "minimumStockLevel": 20},
    ]


@pytest.fixture
def sample_inventory() -> dict:
    """Inventory keyed by material id, as the inventory service returns it."""
    return {
        "1": {"currentStock": 1000, "reorderLevel": 500, "totalValue": 250.0},
        "2": {"currentStock": 50, "reorderLevel": 100, "totalValue": 100.0},
        "3": {"currentStock": 80, "reorderLevel": 100, "totalValue": 8.0},
        "4": {"currentStock": 0, "averageCost": 1.5, "totalValue": 0.0},
    }


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "api: API tests")
