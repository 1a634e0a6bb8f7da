"""
Error taxonomy for the briefing pipeline.

FetchError and ParseError are raised per player and handled by the
orchestrator, which substitutes a synthetic profile. AggregationError marks
an empty input set and is turned into a "no data" result by the aggregator.
"""

from __future__ import annotations


class BriefingDataError(Exception):
    """Base class for data errors raised inside the briefing pipeline."""


class FetchError(BriefingDataError):
    """Network, timeout, or non-2xx failure talking to a stats provider."""

    def __init__(
        self,
        provider: str,
        player_id: str,
        cause: BaseException | str,
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.player_id = player_id
        self.cause = cause
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code is not None else str(cause)
        super().__init__(f"{provider} request for {player_id} failed: {detail}")


class ParseError(BriefingDataError):
    """Provider payload could not be decoded into the expected schema."""

    def __init__(self, provider: str, player_id: str, cause: BaseException | str) -> None:
        self.provider = provider
        self.player_id = player_id
        self.cause = cause
        super().__init__(f"Malformed {provider} payload for {player_id}: {cause}")


class AggregationError(BriefingDataError):
    """Aggregation was asked to summarize an empty set of profiles."""
