"""
App API client

Document management, company profile, partners, products, categories,
statistics and Peppol Directory search.
"""

from typing import Any, Dict, List, Optional, Union

from .base_resource import BaseResource, path_segment, bool_param

XML_HEADERS = {'Content-Type': 'text/xml'}


def _xml_body(ubl_xml: Union[str, bytes]) -> bytes:
    if isinstance(ubl_xml, bytes):
        return ubl_xml
    return ubl_xml.encode('utf-8')


def _document_params(draft: bool, schedule: Optional[str]) -> Dict[str, str]:
    params = {'draft': bool_param(draft)}
    if schedule:
        params['schedule'] = schedule
    return params


class AppClient(BaseResource):
    """Client for the LetsPeppol App API."""

    # ── Documents ──

    def validate_document(self, ubl_xml: Union[str, bytes]) -> Dict[str, Any]:
        """Validate UBL XML without storing it."""
        return self.request(
            'POST', '/sapi/document/validate',
            data=_xml_body(ubl_xml),
            headers=XML_HEADERS,
        )

    def list_documents(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 0,
        size: int = 20,
        sort: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        List documents with filtering and pagination.

        Args:
            filters: type, direction, draft, read, paid
            page: Zero-based page number
            size: Page size
            sort: Field and direction, e.g. "issueDate,desc"

        Returns:
            Page dict with 'content', 'totalElements', 'totalPages'
        """
        params = dict(filters or {})
        for key, value in params.items():
            if isinstance(value, bool):
                params[key] = bool_param(value)
        params.update({'page': page, 'size': size})
        if sort:
            params['sort'] = sort

        return self.get('/sapi/document', params)

    def get_document(self, document_id: str) -> Dict[str, Any]:
        return self.get(f"/sapi/document/{path_segment(document_id)}")

    def create_document(
        self,
        ubl_xml: Union[str, bytes],
        draft: bool = False,
        schedule: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a document from UBL XML.

        Args:
            ubl_xml: UBL invoice or credit note
            draft: Save without sending
            schedule: ISO 8601 datetime to send at
        """
        return self.request(
            'POST', '/sapi/document',
            data=_xml_body(ubl_xml),
            headers=XML_HEADERS,
            params=_document_params(draft, schedule),
        )

    def update_document(
        self,
        document_id: str,
        ubl_xml: Union[str, bytes],
        draft: bool = False,
        schedule: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.request(
            'PUT', f"/sapi/document/{path_segment(document_id)}",
            data=_xml_body(ubl_xml),
            headers=XML_HEADERS,
            params=_document_params(draft, schedule),
        )

    def send_document(self, document_id: str, schedule: Optional[str] = None) -> Dict[str, Any]:
        """Send now, or at schedule when given."""
        params = {'schedule': schedule} if schedule else {}
        return self.request(
            'PUT', f"/sapi/document/{path_segment(document_id)}/send",
            params=params,
        )

    def mark_document_read(self, document_id: str) -> Dict[str, Any]:
        return self.request('PUT', f"/sapi/document/{path_segment(document_id)}/read")

    def mark_document_paid(self, document_id: str) -> Dict[str, Any]:
        return self.request('PUT', f"/sapi/document/{path_segment(document_id)}/paid")

    def delete_document(self, document_id: str) -> None:
        self.delete(f"/sapi/document/{path_segment(document_id)}")

    # ── Company ──

    def get_company(self) -> Dict[str, Any]:
        return self.get('/sapi/company')

    def update_company(self, company_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put('/sapi/company', company_data)

    # ── Partners ──

    def list_partners(self) -> List[Dict[str, Any]]:
        return self.get('/sapi/partner')

    def search_partners(self, peppol_id: str) -> List[Dict[str, Any]]:
        return self.get('/sapi/partner/search', {'peppolId': peppol_id})

    def create_partner(self, partner_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.post('/sapi/partner', partner_data)

    def update_partner(self, partner_id: int, partner_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/sapi/partner/{path_segment(partner_id)}", partner_data)

    def delete_partner(self, partner_id: int) -> None:
        self.delete(f"/sapi/partner/{path_segment(partner_id)}")

    # ── Products ──

    def list_products(self) -> List[Dict[str, Any]]:
        return self.get('/sapi/product')

    def create_product(self, product_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.post('/sapi/product', product_data)

    def update_product(self, product_id: int, product_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/sapi/product/{path_segment(product_id)}", product_data)

    def delete_product(self, product_id: int) -> None:
        self.delete(f"/sapi/product/{path_segment(product_id)}")

    # ── Product categories ──

    def list_root_categories(self, deep: bool = False) -> List[Dict[str, Any]]:
        """Top-level categories; deep=True includes the full subtree."""
        return self.get('/sapi/product-category', {'deep': bool_param(deep)})

    def list_all_categories_flat(self) -> List[Dict[str, Any]]:
        return self.get('/sapi/product-category/all')

    def get_category(self, category_id: int, deep: bool = False) -> Dict[str, Any]:
        return self.get(
            f"/sapi/product-category/{path_segment(category_id)}",
            {'deep': bool_param(deep)},
        )

    def create_category(self, category_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.post('/sapi/product-category', category_data)

    def update_category(self, category_id: int, category_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/sapi/product-category/{path_segment(category_id)}", category_data)

    def delete_category(self, category_id: int) -> None:
        self.delete(f"/sapi/product-category/{path_segment(category_id)}")

    # ── Statistics ──

    def get_donation_stats(self) -> Dict[str, Any]:
        """Public donation statistics, no JWT needed."""
        return self.get('/api/stats/donation')

    def get_account_totals(self) -> Dict[str, Any]:
        return self.get('/sapi/stats/account')

    # ── Peppol Directory ──

    def search_peppol_directory(
        self,
        name: Optional[str] = None,
        participant: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Search the public Peppol Directory by name and/or participant ID."""
        params = {
            key: value for key, value in (
                ('name', name),
                ('participant', participant),
            ) if value is not None
        }
        return self.get('/api/peppol-directory', params)
