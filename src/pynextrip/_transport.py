"""HTTP transport for the NexTrip JSON API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from pynextrip._constants import USER_AGENT
from pynextrip.config import NexTripConfig
from pynextrip.exceptions import NexTripTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """GET-only JSON transport over a shared :class:`aiohttp.ClientSession`."""

    def __init__(
        self,
        config: NexTripConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        """Fetch *endpoint* and return the decoded JSON body.

        Raises
        ------
        NexTripTransportError
            On network failure, timeout, non-200 status or invalid JSON.
        """
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        if self._config.api_trace_enabled:
            _logger.debug("GET %s", url)

        try:
            async with self._http.get(
                url,
                params={"format": "json"},
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                raw = await resp.read()
                text = raw.decode("utf-8", errors="replace")
                if resp.status != 200:
                    raise NexTripTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except NexTripTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise NexTripTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise NexTripTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise NexTripTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s: %s", endpoint, text[:512])

        return body
