"""
Unit tests for the purchase order and upload services.
"""
import httpx
import pytest

from services import PurchaseOrderService, UploadService


@pytest.mark.unit
class TestPurchaseOrderService:

    def test_get_by_id(self, transport, backend, sample_purchase_order):
        backend.on("GET", "/purchase-orders/42", {"success": True, "data": sample_purchase_order})
        result = PurchaseOrderService(transport).get_by_id(42)
        assert result.success
        assert result.data["orderNumber"] == "PO-2024-042"

    def test_get_unbilled(self, transport, backend, sample_unbilled_orders):
        backend.on("GET", "/purchase-orders/unbilled", {"success": True, "data": sample_unbilled_orders})
        result = PurchaseOrderService(transport).get_unbilled()
        assert [o["id"] for o in result.data] == [101, 102, 103]

    def test_get_unbilled_failure_returns_empty_list(self, failing_transport):
        result = PurchaseOrderService(failing_transport).get_unbilled()
        assert result.success is False
        assert result.data == []
        assert result.error


@pytest.mark.unit
class TestUploadService:

    def test_upload_sends_multipart_with_guessed_type(self, transport, backend):
        backend.on("POST", "/uploads/invoices/17/attachment",
                   {"success": True, "data": {"path": "invoices/17/scan.pdf"}})

        result = UploadService(transport).upload_single_file("invoices", 17, "scan.pdf", b"%PDF-1.4")

        assert result.success
        request = backend.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="attachment"; filename="scan.pdf"' in body
        assert b"Content-Type: application/pdf" in body
        assert b"%PDF-1.4" in body

    def test_upload_unknown_extension_as_octet_stream(self, transport, backend):
        backend.on("POST", "/uploads/invoices/17/attachment", {"success": True})
        UploadService(transport).upload_single_file("invoices", 17, "scan.zzz", b"x")
        assert b"Content-Type: application/octet-stream" in backend.requests[0].content

    def test_delete(self, transport, backend):
        backend.on("DELETE", "/uploads/invoices/17/attachment", {"success": True})
        assert UploadService(transport).delete_single_file("invoices", 17).success

    def test_delete_failure_carries_server_error(self, transport, backend):
        backend.on("DELETE", "/uploads/invoices/17/attachment",
                   httpx.Response(404, json={"success": False, "error": "No attachment"}))
        result = UploadService(transport).delete_single_file("invoices", 17)
        assert result.success is False
        assert result.error == "No attachment"

    def test_get_file_url(self, transport):
        url = UploadService(transport).get_file_url("invoices/17/scan.pdf")
        assert url == "http://desk.test/api/uploads/invoices/17/scan.pdf"
