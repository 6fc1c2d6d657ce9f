"""
Gateway HTTP client - small wrapper over requests used by gateway adapters.

Usage:
    client = GatewayHttpClient()
    response = client.with_token(secret).post(url, json={...})
    if response.failed:
        raise GatewayRequestError("...")
    remote_id = response["subscription_id"]

HTTP error statuses do not raise; they are reported through
`GatewayResponse.failed` so each gateway decides what a failure means.
Transport problems (DNS, timeouts, refused connections) raise
GatewayConnectionError.
"""

import logging
from typing import Any, Dict, Optional

import requests

from subscription_gateway.core.config import GATEWAY_HTTP_TIMEOUT
from subscription_gateway.payments.exceptions import GatewayConnectionError

logger = logging.getLogger(__name__)


class GatewayResponse:
    """Decoded response from a gateway API."""

    def __init__(self, status_code: int, data: Optional[Dict[str, Any]] = None, text: str = ""):
        self.status_code = status_code
        self.data = data if isinstance(data, dict) else {}
        self.text = text

    @classmethod
    def from_requests(cls, response: requests.Response) -> "GatewayResponse":
        try:
            data = response.json()
        except ValueError:
            data = {}
        return cls(response.status_code, data, response.text)

    @property
    def failed(self) -> bool:
        return self.status_code >= 400

    @property
    def successful(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Dict[str, Any]:
        return dict(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __repr__(self) -> str:
        return f"<GatewayResponse status={self.status_code}>"


class GatewayHttpClient:
    def __init__(
        self,
        timeout: float = GATEWAY_HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json", **(headers or {})}

    def with_token(self, token: str) -> "GatewayHttpClient":
        """Return a client that sends `Authorization: Bearer <token>`."""
        return GatewayHttpClient(
            timeout=self.timeout,
            session=self.session,
            headers={**self.headers, "Authorization": f"Bearer {token}"},
        )

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> GatewayResponse:
        return self._request("GET", url, params=params)

    def post(self, url: str, json: Optional[Dict[str, Any]] = None) -> GatewayResponse:
        return self._request("POST", url, json=json)

    def _request(self, method: str, url: str, **kwargs) -> GatewayResponse:
        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise GatewayConnectionError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s [%s]", method, url, response.status_code)
        return GatewayResponse.from_requests(response)
