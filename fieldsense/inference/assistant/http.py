"""HTTP adapter for a remote assistant classifier."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

import httpx

from fieldsense.config.field_types import UNKNOWN, is_known_type

from .port import AssistantPort, AssistantRequest, AssistantVerdict

logger = logging.getLogger(__name__)

# Verdicts below this confidence are discarded
MIN_CONFIDENCE = 0.6

# Element/context HTML is truncated before sending
MAX_HTML_CHARS = 1000


def _truncate(html: str | None) -> str | None:
    if html is None or len(html) <= MAX_HTML_CHARS:
        return html
    return html[: MAX_HTML_CHARS - 1] + "…"


class HttpAssistantClient(AssistantPort):
    """Posts classifier input to `{base_url}/classify`.

    After a connection or HTTP failure the client stays quiet for a cooldown
    window instead of retrying on every field. Timeouts only skip the current
    field.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8600",
        timeout: float = 60.0,
        cooldown_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cooldown_seconds = cooldown_seconds
        self._transport = transport
        self._clock = clock
        self._failed_at: float | None = None

    @property
    def in_cooldown(self) -> bool:
        if self._failed_at is None:
            return False
        return self._clock() - self._failed_at < self.cooldown_seconds

    def reset_cooldown(self) -> None:
        self._failed_at = None

    def _build_payload(self, request: AssistantRequest) -> dict[str, Any]:
        payload = asdict(request)
        payload["element_html"] = _truncate(request.element_html)
        payload["context_html"] = _truncate(request.context_html)
        return payload

    def _parse_verdict(self, data: Any) -> AssistantVerdict | None:
        if not isinstance(data, dict):
            return None

        field_type = data.get("field_type")
        confidence = data.get("confidence")
        if not isinstance(field_type, str) or not is_known_type(field_type):
            return None
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            return None

        confidence = max(0.0, min(1.0, float(confidence)))
        if field_type == UNKNOWN or confidence < MIN_CONFIDENCE:
            return None

        generator_type = data.get("generator_type")
        if not isinstance(generator_type, str) or not is_known_type(generator_type):
            generator_type = field_type

        return AssistantVerdict(
            field_type=field_type,
            confidence=confidence,
            generator_type=generator_type,
        )

    async def classify(self, request: AssistantRequest) -> AssistantVerdict | None:
        if self.in_cooldown:
            logger.debug("Assistant in cooldown, skipping")
            return None

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                resp = await client.post(
                    f"{self.base_url}/classify",
                    json=self._build_payload(request),
                )
                resp.raise_for_status()
                data = resp.json()
            except httpx.TimeoutException:
                logger.warning("Assistant timed out after %.0fs", self.timeout)
                return None
            except httpx.HTTPError as e:
                self._failed_at = self._clock()
                logger.warning(
                    "Assistant unavailable, pausing for %.0fs: %s",
                    self.cooldown_seconds,
                    e,
                )
                return None
            except ValueError:
                logger.warning("Assistant returned malformed JSON")
                return None

        verdict = self._parse_verdict(data)
        if verdict is None:
            logger.debug("Assistant gave no usable verdict: %r", data)
        return verdict
