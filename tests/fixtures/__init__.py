"""
Test fixtures for LetsPeppol SDK tests.
"""

from .mock_responses import (
    SAMPLE_TOKEN,
    MOCK_DOCUMENT,
    MOCK_COMPANY,
    MOCK_DOCUMENT_PAGE,
    SAMPLE_UBL_INVOICE_XML,
    SAMPLE_PDF,
    FakeAdapter,
    make_response,
)

__all__ = [
    'SAMPLE_TOKEN',
    'MOCK_DOCUMENT',
    'MOCK_COMPANY',
    'MOCK_DOCUMENT_PAGE',
    'SAMPLE_UBL_INVOICE_XML',
    'SAMPLE_PDF',
    'FakeAdapter',
    'make_response',
]
