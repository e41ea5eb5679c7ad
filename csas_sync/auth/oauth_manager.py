"""OAuth token manager for the CSAS netbanking API."""

import asyncio
import hashlib
import logging
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

import aiohttp
from cryptography.fernet import Fernet, InvalidToken

from ..exceptions import AuthError, RequestError

logger = logging.getLogger(__name__)

TOKEN_PATH = '/widp/oauth2/token'
NETBANKING_V3_PATH = '/webapi/api/v3/netbanking/'


class TokenManager:
    """Holds the OAuth credentials and the current access token for CSAS."""

    def __init__(self, csas_config: Dict[str, Any], encryption_key: Optional[str] = None):
        """
        Initialize token manager with configuration.

        Args:
            csas_config: The 'csas' configuration section (host, credentials, API key, timeout).
            encryption_key: Optional key used to encrypt the access token held in memory.
        """
        self.host = csas_config.get('host', 'https://www.csas.cz').rstrip('/')
        self.client_id = csas_config.get('client_id') or ''
        self.client_secret = csas_config.get('client_secret') or ''
        self.refresh_token = csas_config.get('refresh_token') or ''
        self.redirect_uri = csas_config.get('redirect_uri', 'https://localhost/code')
        self.web_api_key = csas_config.get('web_api_key') or ''
        self.timeout = aiohttp.ClientTimeout(total=csas_config.get('timeout', 30))

        self._cipher_suite = Fernet(self._load_encryption_key(encryption_key))
        # Single attribute swap keeps token reads and writes atomic
        self._token: Optional[bytes] = None

        logger.info("Token Manager initialized")

    @property
    def token_url(self) -> str:
        return f"{self.host}{TOKEN_PATH}"

    @property
    def api_base_url(self) -> str:
        return f"{self.host}{NETBANKING_V3_PATH}"

    def _load_encryption_key(self, key: Optional[str]) -> bytes:
        """Use the configured key if it is a valid Fernet key, derive one from it otherwise.

        Without a configured key a volatile key valid for this process only is generated.
        """
        if not key:
            return Fernet.generate_key()
        try:
            if len(urlsafe_b64decode(key.encode('utf-8'))) == 32:
                return key.encode('utf-8')
        except ValueError:
            pass
        logger.warning("TOKEN_ENCRYPTION_KEY is not a valid Fernet key; derived key from value.")
        return urlsafe_b64encode(hashlib.sha256(key.encode('utf-8')).digest())

    @property
    def access_token(self) -> str:
        """Current access token, empty string when unauthenticated."""
        token = self._token
        if token is None:
            return ''
        try:
            return self._cipher_suite.decrypt(token).decode('utf-8')
        except InvalidToken:
            logger.error("Stored access token cannot be decrypted")
            return ''

    @property
    def has_access_token(self) -> bool:
        return self.access_token != ''

    def _store_access_token(self, access_token: str) -> None:
        self._token = self._cipher_suite.encrypt(access_token.encode('utf-8'))

    def clear(self) -> None:
        """Forget the access token (used on deactivation only)."""
        self._token = None
        logger.info("Access token cleared")

    async def refresh_access_token(self) -> bool:
        """
        Obtain a new access token using the configured refresh token.

        A failed refresh never clears a previously obtained token.

        Returns:
            True if a new access token was stored, False otherwise.
        """
        try:
            access_token = await self._request_access_token()
        except AuthError as e:
            logger.error(f"Cannot get CSAS token: {e}")
            return False

        self._store_access_token(access_token)
        logger.info("Successfully refreshed CSAS access token")
        return True

    async def _request_access_token(self) -> str:
        """
        Exchange the refresh token for an access token.

        Raises:
            AuthError: If the token endpoint fails or returns no access token.
        """
        token_data = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'redirect_uri': self.redirect_uri,
            'grant_type': 'refresh_token',
            'refresh_token': self.refresh_token,
        }

        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Accept': 'application/json',
        }

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            try:
                async with session.post(self.token_url, data=token_data, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise AuthError(f"Token refresh failed: {response.status} - {error_text}")
                    token_response = await response.json(content_type=None)
            except asyncio.TimeoutError as e:
                raise AuthError("Token refresh timed out") from e
            except aiohttp.ClientError as e:
                raise AuthError(f"Token endpoint unreachable: {e}") from e
            except ValueError as e:
                raise AuthError(f"Token response is not valid JSON: {e}") from e

        if not isinstance(token_response, dict):
            raise AuthError("Token response is not a JSON object")
        logger.debug(f"CSAS token response fields: {sorted(token_response)}")
        access_token = token_response.get('access_token')
        if not access_token or not isinstance(access_token, str):
            raise AuthError("Token response does not contain access_token")
        return access_token

    async def authenticated_get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Perform an authenticated GET against the netbanking v3 API.

        Args:
            path: Path relative to the netbanking base, e.g. 'my/accounts'.
            params: Optional query parameters.

        Returns:
            Parsed JSON body.

        Raises:
            RequestError: On transport failure, timeout, non-2xx status or non-JSON body.
        """
        url = f"{self.api_base_url}{path.lstrip('/')}"
        headers = {
            'WEB-API-key': self.web_api_key,
            'Authorization': f'Bearer {self.access_token}',
            'Accept': 'application/json',
        }

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            try:
                async with session.get(url, headers=headers, params=params) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        raise RequestError(f"GET {path} failed: {response.status} - {error_text}", response.status)
                    data = await response.json(content_type=None)
            except asyncio.TimeoutError as e:
                raise RequestError(f"GET {path} timed out") from e
            except aiohttp.ClientError as e:
                raise RequestError(f"GET {path} failed: {e}") from e
            except ValueError as e:
                raise RequestError(f"GET {path} returned invalid JSON: {e}") from e

        logger.debug(f"CSAS {path}: {data}")
        return data
