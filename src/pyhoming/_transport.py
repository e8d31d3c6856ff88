"""HTTP transport to the hardware bridge."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyhoming._constants import USER_AGENT
from pyhoming.config import NavigatorConfig
from pyhoming.exceptions import HomingTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the hardware adapters.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`BridgeTransport`) concrete.
    """

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        ...


class BridgeTransport:
    """JSON-over-HTTP transport to the bridge that owns camera and motors."""

    def __init__(self, config: NavigatorConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """POST *payload* to *endpoint* and return the decoded JSON object."""
        url = f"{self._config.bridge_url.rstrip('/')}{endpoint}"
        headers = {
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        body = json.dumps(payload, separators=(",", ":"))

        _logger.debug("POST %s %s", url, body)

        try:
            async with self._http.post(url, data=body, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise HomingTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except HomingTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise HomingTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HomingTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(result, dict):
            raise HomingTransportError(
                f"Expected a JSON object from {endpoint}, got {type(result).__name__}",
                endpoint=endpoint,
            )
        return result
