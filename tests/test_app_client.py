"""
Tests for AppClient

Document, company, partner, product, category, statistics and
directory endpoints.
"""

import json

import pytest

from letspeppol.client.app_client import AppClient
from letspeppol.client.session import Session
from letspeppol.client.exceptions import ApiError
from tests.fixtures import FakeAdapter, MOCK_DOCUMENT_PAGE, SAMPLE_UBL_INVOICE_XML

BASE = 'https://app.example.com'


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def app(adapter):
    return AppClient(Session(BASE, 'tok', {'adapter': adapter}))


class TestDocuments:
    """Tests for document endpoints."""

    def test_validate_document_sends_xml(self, app, adapter):
        adapter.add(200, {'valid': True, 'errors': []})

        result = app.validate_document(SAMPLE_UBL_INVOICE_XML)

        request = adapter.last_request
        assert result['valid'] is True
        assert request.url == f'{BASE}/sapi/document/validate'
        assert request.headers['Content-Type'] == 'text/xml'
        assert request.body == SAMPLE_UBL_INVOICE_XML.encode('utf-8')

    def test_validate_document_invalid_ubl(self, app, adapter):
        adapter.add(400, {'message': 'Missing cbc:IssueDate'})

        with pytest.raises(ApiError) as exc_info:
            app.validate_document('<Invoice/>')

        assert str(exc_info.value) == 'Bad Request: 400 - Missing cbc:IssueDate'

    def test_list_documents_defaults(self, app, adapter):
        adapter.add(200, MOCK_DOCUMENT_PAGE)

        result = app.list_documents()

        assert result['totalElements'] == 1
        assert adapter.last_request.url == f'{BASE}/sapi/document?page=0&size=20'

    def test_list_documents_filters_and_sort(self, app, adapter):
        adapter.add(200, MOCK_DOCUMENT_PAGE)

        app.list_documents({'type': 'INVOICE', 'read': False}, page=2, size=50, sort='issueDate,desc')

        assert adapter.last_request.url == (
            f'{BASE}/sapi/document?type=INVOICE&read=false&page=2&size=50&sort=issueDate%2Cdesc'
        )

    def test_create_document_draft(self, app, adapter):
        adapter.add(201, {'id': 'doc123', 'status': 'DRAFT'})

        result = app.create_document(SAMPLE_UBL_INVOICE_XML, draft=True)

        request = adapter.last_request
        assert result['status'] == 'DRAFT'
        assert request.method == 'POST'
        assert request.url == f'{BASE}/sapi/document?draft=true'
        assert request.headers['Content-Type'] == 'text/xml'

    def test_create_document_scheduled(self, app, adapter):
        adapter.add(201, {'id': 'doc123'})
        app.create_document(b'<Invoice/>', schedule='2024-01-10T09:00:00Z')
        assert adapter.last_request.url == (
            f'{BASE}/sapi/document?draft=false&schedule=2024-01-10T09%3A00%3A00Z'
        )
        assert adapter.last_request.body == b'<Invoice/>'

    def test_update_document(self, app, adapter):
        adapter.add(200, {'id': 'doc 1'})
        app.update_document('doc 1', '<Invoice/>')
        assert adapter.last_request.method == 'PUT'
        assert adapter.last_request.url == f'{BASE}/sapi/document/doc%201?draft=false'

    def test_send_document(self, app, adapter):
        adapter.add(200, {'status': 'SENT'})
        app.send_document('doc123')
        assert adapter.last_request.url == f'{BASE}/sapi/document/doc123/send'

    def test_mark_read_and_paid(self, app, adapter):
        adapter.add(200, {'read': True}).add(200, {'paid': True})
        assert app.mark_document_read('doc123') == {'read': True}
        assert app.mark_document_paid('doc123') == {'paid': True}
        assert [r.url for r in adapter.requests] == [
            f'{BASE}/sapi/document/doc123/read',
            f'{BASE}/sapi/document/doc123/paid',
        ]

    def test_delete_document(self, app, adapter):
        adapter.add(204, '')
        assert app.delete_document('doc123') is None
        assert adapter.last_request.method == 'DELETE'


class TestCompanyAndPartners:
    """Tests for company and partner endpoints."""

    def test_update_company(self, app, adapter):
        adapter.add(200, {'name': 'New Name'})
        app.update_company({'name': 'New Name'})
        assert adapter.last_request.method == 'PUT'
        assert json.loads(adapter.last_request.body) == {'name': 'New Name'}

    def test_search_partners(self, app, adapter):
        adapter.add(200, [{'id': 1}])
        assert app.search_partners('0208:BE0987654321') == [{'id': 1}]
        assert adapter.last_request.url == (
            f'{BASE}/sapi/partner/search?peppolId=0208%3ABE0987654321'
        )

    def test_partner_crud(self, app, adapter):
        adapter.add(200, []).add(201, {'id': 7}).add(200, {'id': 7}).add(204, '')

        app.list_partners()
        app.create_partner({'name': 'Supplier'})
        app.update_partner(7, {'name': 'Supplier NV'})
        app.delete_partner(7)

        assert [(r.method, r.url) for r in adapter.requests] == [
            ('GET', f'{BASE}/sapi/partner'),
            ('POST', f'{BASE}/sapi/partner'),
            ('PUT', f'{BASE}/sapi/partner/7'),
            ('DELETE', f'{BASE}/sapi/partner/7'),
        ]


class TestProductsAndCategories:
    """Tests for product and category endpoints."""

    def test_product_crud(self, app, adapter):
        adapter.add(200, []).add(201, {'id': 3}).add(200, {'id': 3}).add(204, '')

        app.list_products()
        app.create_product({'name': 'Widget'})
        app.update_product(3, {'name': 'Widget v2'})
        app.delete_product(3)

        assert [(r.method, r.path_url) for r in adapter.requests] == [
            ('GET', '/sapi/product'),
            ('POST', '/sapi/product'),
            ('PUT', '/sapi/product/3'),
            ('DELETE', '/sapi/product/3'),
        ]

    def test_categories(self, app, adapter):
        adapter.add(200, []).add(200, []).add(200, {'id': 4}).add(201, {'id': 5})
        adapter.add(200, {'id': 5}).add(204, '')

        app.list_root_categories(deep=True)
        app.list_all_categories_flat()
        app.get_category(4)
        app.create_category({'name': 'Food'})
        app.update_category(5, {'name': 'Drinks'})
        app.delete_category(5)

        assert [r.path_url for r in adapter.requests] == [
            '/sapi/product-category?deep=true',
            '/sapi/product-category/all',
            '/sapi/product-category/4?deep=false',
            '/sapi/product-category',
            '/sapi/product-category/5',
            '/sapi/product-category/5',
        ]


class TestStatsAndDirectory:
    """Tests for statistics and Peppol Directory endpoints."""

    def test_stats(self, app, adapter):
        adapter.add(200, {'total': 10}).add(200, {'sent': 3})
        assert app.get_donation_stats() == {'total': 10}
        assert app.get_account_totals() == {'sent': 3}
        assert [r.path_url for r in adapter.requests] == ['/api/stats/donation', '/sapi/stats/account']

    def test_search_peppol_directory(self, app, adapter):
        adapter.add(200, [])
        app.search_peppol_directory(name='ACME')
        assert adapter.last_request.path_url == '/api/peppol-directory?name=ACME'
