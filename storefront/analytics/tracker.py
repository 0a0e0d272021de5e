"""
Analytics Tracker

Central ``track(event_name, params)`` entry point:
1. builds the payload (event, anonymous user/session ids, timestamp, params)
2. appends it to the in-memory data layer (most recent DATA_LAYER_LIMIT events)
3. forwards it to every registered sink
4. logs it in debug mode

Tracking is fire-and-forget. Nothing here raises to the caller; cart and
catalog correctness never depend on analytics.
"""
import secrets
import time
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

import httpx

from storefront import config
from storefront.analytics.events import Fact
from storefront.logging import get_logger
from storefront.storage import KeyValueStorage, get_storage

logger = get_logger(__name__)

Sink = Callable[[str, dict], None]


def make_uid(prefix: str = "u") -> str:
    """Anonymous id: ``<prefix>_<random hex>_<hex ms timestamp>``."""
    return f"{prefix}_{secrets.token_hex(6)}_{int(time.time() * 1000):x}"


class HttpSink:
    """Posts every event as JSON to a collector endpoint."""

    def __init__(self, url: str, timeout: float = config.ANALYTICS_TIMEOUT, client: Optional[httpx.Client] = None):
        self.url = url
        self._client = client or httpx.Client(timeout=timeout)

    def __call__(self, event_name: str, params: dict) -> None:
        try:
            response = self._client.post(self.url, json={"name": event_name, "params": params})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Analytics collector rejected {event_name}: {e}")

    def close(self) -> None:
        self._client.close()


class Tracker:
    """Analytics dispatcher with persistent anonymous identity."""

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        sinks: Optional[Iterable[Sink]] = None,
        debug: Optional[bool] = None,
        data_layer_limit: int = config.DATA_LAYER_LIMIT,
    ):
        self.storage = storage if storage is not None else get_storage()
        self.sinks: list[Sink] = list(sinks or [])
        self.debug = config.DEBUG if debug is None else debug
        # Bounded: only the most recent events are kept in memory
        self.data_layer: deque[dict] = deque(maxlen=max(1, data_layer_limit))
        self.user_id = self._get_or_create(config.USER_ID_KEY, "user")
        self.session_id = self._get_or_create(config.SESSION_ID_KEY, "sess")

        if self.debug:
            self.track("debug_mode_enabled", {"debug": True})

    def _get_or_create(self, key: str, prefix: str) -> str:
        try:
            value = self.storage.get_item(key)
            if not value:
                value = make_uid(prefix)
                self.storage.set_item(key, value)
            return value
        except Exception as e:
            # Identity is best effort; an id for this process is enough
            logger.warning(f"Analytics identity slot unavailable: {e}")
            return make_uid(prefix)

    def add_sink(self, sink: Sink) -> None:
        self.sinks.append(sink)

    def track(self, event_name: str, params: Optional[dict[str, Any]] = None) -> None:
        """Record one event. Never raises."""
        try:
            payload = {
                "event": event_name,
                "user_id": self.user_id,
                "session_id": self.session_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **(params or {}),
            }
            self.data_layer.append(payload)
        except Exception as e:
            logger.warning(f"Failed to build analytics payload for {event_name}: {e}")
            return

        sink_params = {k: v for k, v in payload.items() if k != "event"}
        for sink in self.sinks:
            try:
                sink(event_name, sink_params)
            except Exception as e:
                logger.warning(f"Analytics sink failed for {event_name}: {e}")

        if self.debug:
            logger.info(f"[track] {event_name} {payload}")

    def dispatch(self, facts: Iterable[Fact]) -> None:
        """Track every fact produced by a core operation, in order."""
        for fact in facts:
            self.track(fact.event_name, fact.properties)


# Singleton instance
_tracker: Optional[Tracker] = None


def get_tracker() -> Tracker:
    """Get Tracker singleton (HTTP sink when STOREFRONT_ANALYTICS_URL is set)."""
    global _tracker
    if _tracker is None:
        sinks = [HttpSink(config.ANALYTICS_URL)] if config.ANALYTICS_URL else []
        _tracker = Tracker(sinks=sinks)
    return _tracker
