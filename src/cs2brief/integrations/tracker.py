"""
cs2brief Tracker.gg API Integration

Fetches raw CS2 profile and recent-match payloads from Tracker.gg's public
API. The client returns the contents of the response's ``data`` envelope
and nothing else; interpreting it is the normalizer's job.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from cs2brief.core.config import ProviderConfig
from cs2brief.core.constants import TRACKER_API_KEY_HEADER
from cs2brief.core.errors import FetchError, ParseError
from cs2brief.infra.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class TrackerClient:
    """
    Async client for the Tracker.gg CS2 profile API.

    Requires a Tracker.gg API key which can be obtained from:
    https://tracker.gg/developers

    Every request first passes through the shared RateLimiter and is bounded
    by the configured timeout. Failures raise FetchError (network, timeout,
    non-2xx) or ParseError (undecodable body, missing ``data`` envelope).

    Example:
        >>> client = TrackerClient(ProviderConfig(api_key="..."), RateLimiter())
        >>> raw = await client.fetch_profile("76561198000000001")
        >>> matches = await client.fetch_recent_matches("76561198000000001")
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Tracker.gg client.

        Args:
            config: Provider settings (base URL, platform, key, timeout, rate).
            rate_limiter: Shared limiter; a private one is created if omitted.
            transport: Optional httpx transport, used by tests to stub the API.
        """
        self.config = config or ProviderConfig()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.rate_limiter.set_rate(self.config.name, self.config.rate_per_minute)
        self._transport = transport

        if not self.config.api_key:
            logger.warning(
                "No Tracker.gg API key configured. Set TRACKER_GG_API_KEY or "
                "provider.api_key; requests will likely be rejected."
            )

    @property
    def provider(self) -> str:
        return self.config.name

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json", "Accept-Encoding": "gzip"}
        if self.config.api_key:
            headers[TRACKER_API_KEY_HEADER] = self.config.api_key
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )

    def _profile_path(self, player_id: str) -> str:
        return f"/standard/profile/{self.config.platform}/{quote(player_id, safe='')}"

    async def _get_data(self, path: str, player_id: str, params: dict | None = None) -> Any:
        """Rate-limited GET returning the response's ``data`` envelope."""
        await self.rate_limiter.wait(self.provider)

        # Whole-request deadline; httpx's own timeout is per read
        timeout = self.config.timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                async with self._client() as client:
                    response = await client.get(path, params=params)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                self.provider, player_id, e, status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(self.provider, player_id, e) from e
        except TimeoutError as e:
            raise FetchError(
                self.provider, player_id, f"no complete response within {timeout}s"
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(self.provider, player_id, e) from e

        if not isinstance(payload, dict) or payload.get("data") is None:
            raise ParseError(self.provider, player_id, "response has no 'data' envelope")

        return payload["data"]

    async def fetch_profile(self, player_id: str) -> dict[str, Any]:
        """
        Get the raw profile payload for a player.

        Args:
            player_id: Platform user id (Steam64 id for the steam platform)

        Returns:
            The ``data`` object: ``platformInfo``, ``segments`` and friends
        """
        data = await self._get_data(self._profile_path(player_id), player_id)
        if not isinstance(data, dict):
            raise ParseError(self.provider, player_id, "profile 'data' is not an object")

        logger.info(f"Profile fetched for {player_id}")
        return data

    async def fetch_recent_matches(
        self, player_id: str, limit: int | None = None, queue: str | None = None
    ) -> list[dict[str, Any]]:
        """
        Get a player's most recent matches.

        Args:
            player_id: Platform user id
            limit: Maximum matches to return (default from config, 20)
            queue: Queue filter (default from config, "competitive")

        Returns:
            List of raw match segments, newest first
        """
        if limit is None:
            limit = self.config.match_limit
        params = {"limit": limit, "queue": queue or self.config.queue}
        data = await self._get_data(
            f"{self._profile_path(player_id)}/segments/match", player_id, params=params
        )

        if isinstance(data, list):
            items = data
        elif isinstance(data, dict):
            items = data.get("matches") or data.get("segments") or []
        else:
            raise ParseError(self.provider, player_id, "match 'data' is not a list or object")

        if not isinstance(items, list):
            raise ParseError(self.provider, player_id, "match list is not an array")

        return [item for item in items if isinstance(item, dict)][:limit]
