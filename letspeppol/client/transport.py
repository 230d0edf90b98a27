"""
LetsPeppol HTTP transport

requests.Session subclass shared by every resource client. Adds:
- base URL resolution and a default timeout
- fully-read (non-streamed) responses on every call
- request/response audit logging to a file
- fixed handling for 401 and 500 status codes
"""

import logging
import os
from typing import Any, Dict, Optional

import requests

from letspeppol.utils.logging_config import get_logger
from .exceptions import AuthenticationError, ServerError, ConfigurationError

logger = get_logger('letspeppol.client.transport')

DEFAULT_TIMEOUT = 30

REQUEST_LOG_FORMAT = '{method} {uri} HTTP/{version} {req_body} - {req_headers}'
RESPONSE_LOG_FORMAT = 'RESPONSE: {code} - {res_body}\n'

# Option keys understood by HttpTransport; anything else is a caller mistake
SUPPORTED_OPTIONS = frozenset({'headers', 'timeout', 'verify', 'cert', 'proxies', 'adapter'})


def validate_log_file_path(log_file: str) -> None:
    """Make sure the log file's directory exists and is writable.

    Raises:
        ConfigurationError: If the directory cannot be created or written to
    """
    directory = os.path.dirname(os.path.abspath(log_file))

    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Unable to create log directory: {directory}") from e

    if not os.access(directory, os.W_OK):
        raise ConfigurationError(f"Log directory is not writable: {directory}")


def _decode(body: Any) -> str:
    if body is None:
        return ''
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return str(body)


def _http_version(response: requests.Response) -> str:
    # urllib3 reports 10 / 11 / 20
    version = getattr(response.raw, 'version', None)
    if isinstance(version, int) and version:
        return f'{version // 10}.{version % 10}'
    return '1.1'


class HttpTransport(requests.Session):
    """
    HTTP client bound to one LetsPeppol API surface.

    Status codes other than 401 and 500 are returned to the caller as-is;
    classification happens in BaseResource.

    WARNING: the audit log contains request/response bodies and headers,
    including bearer tokens and personal data. Secure the log file.
    """

    def __init__(
        self,
        base_url: str,
        options: Optional[Dict[str, Any]] = None,
        log_file: Optional[str] = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Base URL that relative request paths are resolved against
            options: headers, timeout, verify, cert, proxies, adapter
            log_file: Optional path of the request/response audit log

        Raises:
            ConfigurationError: On unknown options or an unusable log file path
        """
        options = dict(options or {})

        unknown = set(options) - SUPPORTED_OPTIONS
        if unknown:
            raise ConfigurationError(
                f"Unsupported client options: {', '.join(sorted(unknown))}"
            )
        if log_file:
            validate_log_file_path(log_file)

        super().__init__()

        self.base_url = base_url.rstrip('/')
        self.timeout = options.get('timeout', DEFAULT_TIMEOUT)
        self.headers.update(options.get('headers') or {})

        if 'verify' in options:
            self.verify = options['verify']
        if 'cert' in options:
            self.cert = options['cert']
        if options.get('proxies'):
            self.proxies.update(options['proxies'])

        adapter = options.get('adapter')
        if adapter is not None:
            self.mount('https://', adapter)
            self.mount('http://', adapter)

        self.log_file = log_file
        self._request_logger: Optional[logging.Logger] = None

        if log_file:
            try:
                self._request_logger = self._create_request_logger(log_file)
            except ConfigurationError:
                self.close()
                raise
            self.hooks['response'].append(self._log_exchange)

    def _create_request_logger(self, log_file: str) -> logging.Logger:
        """File logger private to this transport instance."""
        try:
            handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Unable to open log file: {log_file}") from e

        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(name)s.%(levelname)s: %(message)s'
        ))

        # Not registered with logging.getLogger(): a transport is rebuilt on
        # every token change and the logger must go away with it.
        request_logger = logging.Logger('letspeppol.http', logging.INFO)
        request_logger.addHandler(handler)
        return request_logger

    def _log_exchange(self, response: requests.Response, *args, **kwargs) -> None:
        """requests response hook writing one request line and one response line."""
        request = response.request
        self._request_logger.info(REQUEST_LOG_FORMAT.format(
            method=request.method,
            uri=request.url,
            version=_http_version(response),
            req_body=_decode(request.body),
            req_headers='; '.join(f'{k}: {v}' for k, v in request.headers.items()),
        ))
        self._request_logger.info(RESPONSE_LOG_FORMAT.format(
            code=response.status_code,
            res_body=_decode(response.content),
        ))

    def resolve_url(self, uri: str) -> str:
        """Absolute URLs pass through; paths are appended to the base URL."""
        if uri.startswith(('http://', 'https://')):
            return uri
        if not uri:
            return self.base_url
        return f"{self.base_url}/{uri.lstrip('/')}"

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Send a request and wait for the complete response.

        Raises:
            AuthenticationError: On 401, the body is discarded
            ServerError: On 500, the body is included in the message
            requests.RequestException: On network-level failures
        """
        kwargs.setdefault('timeout', self.timeout)
        # Body is read before returning; callers never get a lazy stream
        kwargs['stream'] = False

        response = super().request(method, self.resolve_url(url), **kwargs)

        logger.debug(
            "LetsPeppol response",
            extra={
                'method': method,
                'endpoint': url,
                'status_code': response.status_code,
            }
        )

        if response.status_code == 401:
            raise AuthenticationError(
                "Authentication failure",
                endpoint=url,
                method=method,
            )

        if response.status_code == 500:
            body = response.text
            if self._request_logger is not None:
                self._request_logger.error("Internal server error: %s", body)
            raise ServerError(
                f"Internal server error: {body}",
                response_data={'body': body},
                endpoint=url,
                method=method,
            )

        return response

    def close(self) -> None:
        """Close pooled connections and the audit log file."""
        super().close()
        if self._request_logger is not None:
            for handler in list(self._request_logger.handlers):
                handler.close()
                self._request_logger.removeHandler(handler)
