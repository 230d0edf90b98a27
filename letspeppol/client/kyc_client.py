"""
KYC API client

Authentication, company registration and Web eID contract signing.
"""

from typing import Any, Callable, Dict, List, Optional, Union

import requests

from letspeppol.utils.logging_config import get_logger
from .base_resource import BaseResource, path_segment
from .exceptions import AuthenticationError
from .session import Session

logger = get_logger('letspeppol.client.kyc')


class KycClient(BaseResource):
    """
    Client for the LetsPeppol KYC API.

    Auth: POST /api/jwt/auth with Basic credentials returns a JWT as plain
    text, sent as a Bearer token on every later call.
    """

    def __init__(
        self,
        session: Session,
        token_listener: Optional[Callable[[str], Any]] = None,
    ):
        """
        Args:
            session: Session for the KYC API
            token_listener: Called with tokens from authenticate(), register_peppol()
                and unregister_peppol(). Defaults to updating this session only.
        """
        super().__init__(session)
        self.token_listener = token_listener

    def _publish_token(self, token: str) -> None:
        if self.token_listener is not None:
            self.token_listener(token)
        else:
            self.session.set_token(token)

    # ── Authentication ──

    def authenticate(self, email: str, password: str) -> str:
        """
        Exchange email/password for a JWT and publish it to the token listener.

        Returns:
            JWT token

        Raises:
            AuthenticationError: On rejected credentials, an empty token, or
                a network failure (status_code 0)
            ServerError: On 500
        """
        endpoint = '/api/jwt/auth'
        logger.info("Authenticating", extra={'base_url': self.session.base_url})

        try:
            response = self.session.get_client().request(
                'POST', endpoint, auth=(email, password)
            )
        except (requests.exceptions.RequestException, OSError) as e:
            logger.error("Authentication request failed", extra={'error': str(e)})
            raise AuthenticationError(
                f"Authentication error: {e}",
                status_code=0,
                endpoint=endpoint,
                method='POST',
            ) from e

        if response.status_code != 200:
            raise AuthenticationError(
                f"Authentication failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                endpoint=endpoint,
                method='POST',
            )

        token = response.text.strip()
        if not token:
            raise AuthenticationError(
                "Authentication failed: empty token in response",
                status_code=response.status_code,
                endpoint=endpoint,
                method='POST',
            )

        self._publish_token(token)
        logger.info("Authenticated")
        return token

    # ── Registration ──

    def get_company(self, peppol_id: str) -> Dict[str, Any]:
        """GET /api/register/company/{peppolId}: business register lookup (step 1)."""
        return self.get(f"/api/register/company/{path_segment(peppol_id)}")

    def confirm_company(self, data: Dict[str, Any], language: Optional[str] = None) -> Dict[str, Any]:
        """
        Confirm the company and send the verification email (step 2).

        Args:
            data: peppolId, email, name, password
            language: Optional email language ('en', 'nl', 'fr')
        """
        headers = {'Accept-Language': language} if language else None
        return self.post('/api/register/confirm-company', data, headers=headers)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify the token received in the registration email (step 3)."""
        return self.post('/api/register/verify', {'token': token})

    def prepare_signing(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Prepare the contract for Web eID signing (step 4); returns the hash to sign."""
        return self.post('/api/identity/sign/prepare', data)

    def get_contract(self, director_id: Union[int, str], token: str) -> bytes:
        """Download the unsigned contract PDF (step 5)."""
        return self.request_raw(
            'GET',
            f"/api/identity/contract/{path_segment(director_id)}",
            params={'token': token},
        )

    def finalize_signing(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit the signature and complete registration (step 6).

        Returns:
            {'pdf': signed contract bytes,
             'status': Registration-Status header,
             'provider': Registration-Provider header}
        """
        result = self.request_with_headers(
            'POST', '/api/identity/sign/finalize', json=data
        )
        headers = result['headers']
        return {
            'pdf': result['body'],
            'status': headers.get('Registration-Status', ''),
            'provider': headers.get('Registration-Provider', ''),
        }

    # ── Account ──

    def get_account_info(self) -> Dict[str, Any]:
        """GET /sapi/company: account of the authenticated user."""
        return self.get('/sapi/company')

    def search_companies(
        self,
        vat_number: Optional[str] = None,
        peppol_id: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Search companies by VAT number, Peppol ID or (partial) name."""
        params = {
            key: value for key, value in (
                ('vatNumber', vat_number),
                ('peppolId', peppol_id),
                ('companyName', company_name),
            ) if value is not None
        }
        return self.get('/sapi/company/search', params)

    def _change_peppol_registration(self, action: str, unchanged_status: str) -> Dict[str, Any]:
        result = self.request_with_headers('POST', f'/sapi/company/peppol/{action}')
        body = result['body'].decode('utf-8', errors='replace').strip()

        if body:
            # The API re-issues the JWT with the new registration claim
            self._publish_token(body)
            return {'token': body, 'status': 'updated'}

        return {'status': unchanged_status}

    def register_peppol(self) -> Dict[str, Any]:
        """Register the company on the Peppol Directory."""
        return self._change_peppol_registration('register', 'already_registered')

    def unregister_peppol(self) -> Dict[str, Any]:
        """Remove the company from the Peppol Directory."""
        return self._change_peppol_registration('unregister', 'already_unregistered')

    def get_signed_contract(self) -> bytes:
        return self.request_raw('GET', '/sapi/company/signed-contract')

    # ── Passwords ──

    def forgot_password(self, email: str, language: Optional[str] = None) -> None:
        """Send a password reset email containing a reset token."""
        headers = {'Accept-Language': language} if language else None
        self.post('/api/password/forgot', {'email': email}, headers=headers)

    def reset_password(self, token: str, new_password: str) -> None:
        self.post('/api/password/reset', {
            'token': token,
            'newPassword': new_password,
        })

    def change_password(self, old_password: str, new_password: str) -> None:
        """Change the password of the authenticated user."""
        self.post('/sapi/password/change', {
            'oldPassword': old_password,
            'newPassword': new_password,
        })
