"""
Minimal Philips Hue REST client.

Only the two calls the binding needs: list lights and set a light's state.
The API user must already be paired with the bridge.
"""

import logging
from typing import Any, Dict, Optional

import requests

from catt.errors import BindingError


class HueClient:
    """
    Talks to a Hue bridge over its v1 REST API.

    Args:
        host: Bridge address (e.g. '192.168.1.10')
        username: Paired API username
        timeout: Request timeout in seconds
        session: Optional requests session
        logger: Optional logger instance
    """

    def __init__(
        self,
        host: str,
        username: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = f"http://{host}/api/{username}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def get_lights(self) -> Dict[str, Dict[str, Any]]:
        """
        Fetch all lights.

        Returns:
            Mapping of light id -> light record ('name', 'state', ...)

        Raises:
            BindingError: On transport failure or error response
        """
        data = self._request("GET", "/lights")
        if not isinstance(data, dict):
            raise BindingError(f"Unexpected lights response: {data!r}")
        return data

    def set_state(self, light_id: str, state: Dict[str, Any]) -> None:
        """
        Change a light's state.

        Args:
            light_id: Hue light id
            state: Fields to set (e.g. {'on': True} or {'hue': 0, 'sat': 254})

        Raises:
            BindingError: On transport failure or error response
        """
        self._request("PUT", f"/lights/{light_id}/state", json=state)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise BindingError(f"Hue request {method} {path} failed: {e}") from e

        # Errors come back as HTTP 200 with a list of {"error": {...}} entries
        if isinstance(data, list):
            errors = [
                entry["error"]
                for entry in data
                if isinstance(entry, dict) and "error" in entry
            ]
            if errors:
                descriptions = "; ".join(
                    str(error.get("description", error))
                    if isinstance(error, dict)
                    else str(error)
                    for error in errors
                )
                raise BindingError(f"Hue request {method} {path} failed: {descriptions}")

        self.logger.debug(f"Hue {method} {path} ok")
        return data
