"""
Single-document slots attached to business entities.

Each entity (e.g. an invoice) has at most one attachment, stored by the
backend under /uploads/<entity_type>/<entity_id>/attachment.
"""
import mimetypes
from typing import Union

from models.result import ServiceResult
from services.base import ApiService


class UploadService(ApiService):

    def _slot(self, entity_type: str, entity_id: Union[int, str]) -> str:
        return f"/uploads/{entity_type}/{entity_id}/attachment"

    def upload_single_file(
        self,
        entity_type: str,
        entity_id: Union[int, str],
        filename: str,
        content: bytes,
    ) -> ServiceResult:
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return self._call(
            "POST", self._slot(entity_type, entity_id), "upload file",
            files={"attachment": (filename, content, content_type)},
        )

    def delete_single_file(self, entity_type: str, entity_id: Union[int, str]) -> ServiceResult:
        return self._call("DELETE", self._slot(entity_type, entity_id), "delete file")

    def get_file_url(self, file_path: str) -> str:
        """Full URL for a stored path such as 'invoices/INV-1.pdf'."""
        return self.transport.url(f"/uploads/{file_path}")
