"""
Proxy API client

Document exchange with Peppol Access Points and registry management.
All endpoints except the monitor require a JWT.
"""

from typing import Any, Dict, List

from .base_resource import BaseResource, path_segment, bool_param


class ProxyClient(BaseResource):
    """Client for the LetsPeppol Proxy API."""

    # ── Documents ──

    def get_all_new_documents(self, size: int = 100) -> List[Dict[str, Any]]:
        """
        Get documents received from the Peppol network and not yet downloaded.

        Args:
            size: Maximum number of documents to return

        Returns:
            List of documents including their UBL content
        """
        return self.get('/sapi/document', {'size': size})

    def get_status_updates(self, document_ids: List[str]) -> List[Dict[str, Any]]:
        """Transmission status for each of the given document IDs."""
        return self.post('/sapi/document/status', document_ids)

    def get_document(self, document_id: str) -> Dict[str, Any]:
        return self.get(f"/sapi/document/{path_segment(document_id)}")

    def create_document(self, document_data: Dict[str, Any], no_archive: bool = False) -> Dict[str, Any]:
        """
        Create a document for transmission.

        Args:
            document_data: ownerPeppolId, counterPartyPeppolId, ubl, direction, documentType
            no_archive: Skip archiving on the proxy
        """
        return self.request(
            'POST', '/sapi/document',
            json=document_data,
            params={'noArchive': bool_param(no_archive)},
        )

    def update_document(
        self,
        document_id: str,
        document_data: Dict[str, Any],
        no_archive: bool = False,
    ) -> Dict[str, Any]:
        """Modify a document that has not been sent yet."""
        return self.request(
            'PUT', f"/sapi/document/{path_segment(document_id)}",
            json=document_data,
            params={'noArchive': bool_param(no_archive)},
        )

    def reschedule_document(self, document_id: str, document_data: Dict[str, Any]) -> Dict[str, Any]:
        """Change the scheduled send time ({'scheduledAt': ISO 8601})."""
        return self.put(f"/sapi/document/{path_segment(document_id)}/send", document_data)

    def mark_downloaded(self, document_id: str, no_archive: bool = False) -> None:
        """Mark a document as downloaded. Repeating the call is left to the server."""
        self.request(
            'PUT', f"/sapi/document/{path_segment(document_id)}/downloaded",
            params={'noArchive': bool_param(no_archive)},
        )

    def mark_downloaded_batch(self, document_ids: List[str], no_archive: bool = False) -> None:
        self.request(
            'PUT', '/sapi/document/downloaded',
            json=document_ids,
            params={'noArchive': bool_param(no_archive)},
        )

    def delete_document(self, document_id: str, no_archive: bool = False) -> None:
        """Cancel a document."""
        self.request(
            'DELETE', f"/sapi/document/{path_segment(document_id)}",
            params={'noArchive': bool_param(no_archive)},
        )

    # ── Registry ──

    def get_registry(self) -> Dict[str, Any]:
        return self.get('/sapi/registry')

    def register_on_access_point(self, registration_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.post('/sapi/registry', registration_data)

    def unregister_from_access_point(self) -> Dict[str, Any]:
        return self.request('PUT', '/sapi/registry/unregister')

    def delete_registry(self) -> None:
        self.delete('/sapi/registry')

    # ── Monitoring ──

    def health_check(self) -> str:
        """GET /api/monitor, returns the plain-text status."""
        return self.request_raw('GET', '/api/monitor').decode('utf-8', errors='replace')

    def top_up_balance(self, amount: int) -> str:
        """Top up the account balance (test and monitoring environments)."""
        return self.request_raw(
            'GET', f"/api/monitor/{path_segment(amount)}"
        ).decode('utf-8', errors='replace')
