"""
Base API client for LetsPeppol services

Shared request execution for the KYC, Proxy and App resource clients:
JSON decoding, error message extraction and status/network error
classification.
"""

import json
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import quote

import requests

from letspeppol.utils.logging_config import get_logger
from .exceptions import ApiError, LetsPeppolError
from .session import Session

logger = get_logger('letspeppol.client.resource')

# Checked in order; first non-empty string wins
ERROR_MESSAGE_FIELDS: Tuple[str, ...] = ('message', 'error', 'error_description', 'detail', 'title')

ERROR_CATEGORIES = {
    400: 'Bad Request',
    401: 'Unauthorized',
    403: 'Forbidden',
    404: 'Not Found',
    409: 'Conflict',
    422: 'Validation Error',
    429: 'Rate Limit Exceeded',
}

RAW_BODY_PREVIEW = 200


def extract_error_message(data: Any, _nested: bool = False) -> Optional[str]:
    """Pull a human-readable message out of a decoded error body."""
    if not isinstance(data, dict):
        return None

    for field in ERROR_MESSAGE_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value:
            return value

    nested = data.get('error')
    if not _nested and isinstance(nested, dict):
        return extract_error_message(nested, _nested=True)

    return None


def error_category(status_code: int) -> str:
    """Message prefix for an HTTP status code."""
    if status_code >= 500:
        return 'Server Error'
    return ERROR_CATEGORIES.get(status_code, 'API Error')


def categorize_request_exception(error: Exception) -> str:
    """Message prefix for a failure that produced no usable response."""
    # ConnectTimeout is both a ConnectionError and a Timeout
    if isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return 'Connection Error'
    if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        if error.response.status_code >= 500:
            return 'Server Error'
        if error.response.status_code >= 400:
            return 'Client Error'
    if isinstance(error, requests.exceptions.TooManyRedirects):
        return 'Too Many Redirects'
    if isinstance(error, requests.exceptions.RequestException):
        return 'Request Error'
    return 'Network Error'


def path_segment(value: Union[str, int]) -> str:
    """URL-encode a value for use as a single path segment."""
    return quote(str(value), safe='')


def bool_param(value: bool) -> str:
    return 'true' if value else 'false'


class BaseResource:
    """Base API client bound to one Session."""

    def __init__(self, session: Session):
        self.session = session

    def get_session(self) -> Session:
        return self.session

    # ── Convenience verbs ──

    def get(self, endpoint: str, query: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('GET', endpoint, params=query or {})

    def post(
        self,
        endpoint: str,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        options: Dict[str, Any] = {}
        if data is not None:
            options['json'] = data
        if headers:
            options['headers'] = headers
        return self.request('POST', endpoint, **options)

    def put(self, endpoint: str, data: Any = None) -> Any:
        if data is None:
            return self.request('PUT', endpoint)
        return self.request('PUT', endpoint, json=data)

    def delete(self, endpoint: str) -> Any:
        return self.request('DELETE', endpoint)

    # ── Request execution ──

    def _send(self, method: str, endpoint: str, **options) -> requests.Response:
        """Run the request, turning network failures into ApiError(status 0)."""
        try:
            return self.session.get_client().request(method, endpoint, **options)
        except LetsPeppolError as e:
            # Raised by the transport for 401/500
            logger.warning(
                "LetsPeppol request rejected",
                extra={'method': method, 'endpoint': endpoint, 'status_code': e.status_code}
            )
            raise
        except (requests.exceptions.RequestException, OSError) as e:
            error_type = categorize_request_exception(e)
            logger.error(
                "LetsPeppol network error",
                extra={'method': method, 'endpoint': endpoint, 'error_type': error_type}
            )
            raise ApiError(
                f"{error_type}: {e}",
                status_code=0,
                response_data={
                    'exception_class': type(e).__name__,
                    'error_type': error_type,
                },
                endpoint=endpoint,
                method=method,
            ) from e

    def _error_from_response(
        self,
        response: requests.Response,
        method: str,
        endpoint: str,
        preview: Optional[int] = None,
    ) -> ApiError:
        """Build the ApiError for a non-2xx response."""
        status_code = response.status_code
        body = response.text
        error_data: Dict[str, Any] = {}
        detail = None

        if body:
            try:
                decoded = json.loads(body)
            except ValueError:
                decoded = None
            if isinstance(decoded, dict):
                error_data = decoded
                detail = extract_error_message(decoded)

        if detail is None:
            detail = body[:preview] if preview else body
            if preview and not error_data:
                error_data = {'body_preview': body[:500]}

        logger.warning(
            "LetsPeppol API error",
            extra={'method': method, 'endpoint': endpoint, 'status_code': status_code}
        )

        return ApiError(
            f"{error_category(status_code)}: {status_code} - {detail}",
            status_code=status_code,
            response_data=error_data,
            endpoint=endpoint,
            method=method,
        )

    def request(self, method: str, endpoint: str, **options) -> Any:
        """
        Make an API request and decode the JSON response.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **options: requests options (params, json, data, headers)

        Returns:
            Decoded JSON, or {} when the body is empty

        Raises:
            ApiError: On non-2xx status, invalid JSON, or network failure
            AuthenticationError: On 401
            ServerError: On 500
        """
        response = self._send(method, endpoint, **options)
        status_code = response.status_code

        if not 200 <= status_code < 300:
            raise self._error_from_response(response, method, endpoint)

        body = response.text
        if not body.strip():
            return {}

        try:
            decoded = json.loads(body)
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON response: {e}",
                status_code=status_code,
                response_data={'body': body, 'json_error': str(e)},
                endpoint=endpoint,
                method=method,
            ) from e

        return {} if decoded is None else decoded

    def request_raw(self, method: str, endpoint: str, **options) -> bytes:
        """Make an API request and return the raw response body (PDF, text)."""
        response = self._send(method, endpoint, **options)

        if not 200 <= response.status_code < 300:
            raise self._error_from_response(
                response, method, endpoint, preview=RAW_BODY_PREVIEW
            )

        return response.content

    def request_with_headers(self, method: str, endpoint: str, **options) -> Dict[str, Any]:
        """Make an API request and return the raw body with its headers.

        Returns:
            {'body': bytes, 'headers': case-insensitive header mapping}
        """
        response = self._send(method, endpoint, **options)

        if not 200 <= response.status_code < 300:
            raise self._error_from_response(
                response, method, endpoint, preview=RAW_BODY_PREVIEW
            )

        return {
            'body': response.content,
            'headers': response.headers.copy(),
        }
