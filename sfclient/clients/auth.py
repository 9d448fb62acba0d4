# sfclient/clients/auth.py

from typing import Optional

import msgspec
import requests
from msgspec import Struct

from ..core.exceptions import CredentialError
from ..core.logging import LoggingMixin
from .interfaces import TokenProviderInterface


class ApiTokenInfo(Struct):
    token: str
    expires_at: int = 0


class ApiTokenProvider(TokenProviderInterface, LoggingMixin):
    """
    Exchanges a StreamingFast API key for a short-lived JWT.

    A new token is requested on every call, the session asks for one on
    each connection attempt.
    """

    ISSUE_PATH = "/v1/auth/issue"

    def __init__(self, api_key: str, auth_url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.auth_url = auth_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def acquire_token(self) -> str:
        url = f"{self.auth_url}{self.ISSUE_PATH}"
        try:
            response = self.session.post(url, json={"api_key": self.api_key}, timeout=self.timeout)
        except requests.RequestException as e:
            raise CredentialError(f"unable to reach token issuer at {url}: {e}")

        if response.status_code != 200:
            raise CredentialError(
                f"token issuer rejected the API key (HTTP {response.status_code})",
                {"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            info = msgspec.json.decode(response.content, type=ApiTokenInfo)
        except msgspec.DecodeError as e:
            raise CredentialError(f"invalid token issuer response: {e}")

        if not info.token:
            raise CredentialError("token issuer returned an empty token")

        self.log_debug("API token issued")
        return info.token
