"""Background expiry sweeper for reservation holds."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from hba_backend.domain.models import EvictionNotice
from hba_backend.repository.hold_repository import HoldStore
from hba_backend.utils.clock import Clock, utc_now
from hba_backend.utils.config import Settings, get_settings
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


EvictionListener = Callable[[EvictionNotice], None]


class ExpirySweeper:
    """Periodically evicts holds whose deadline has passed.

    Expiry is detected within one ``sweep_interval_seconds`` of the deadline,
    not instantly; readers that need exact answers check ``expires_at``
    themselves. ``sweep`` can be driven directly for deterministic tests.
    """

    def __init__(
        self,
        store: HoldStore,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store
        self._clock = clock or utc_now
        self._interval = float(self._settings.sweep_interval_seconds)
        self._listeners: list[EvictionListener] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def add_listener(self, listener: EvictionListener) -> None:
        self._listeners.append(listener)

    def sweep(self) -> list[EvictionNotice]:
        with self._store.lock:
            now = self._clock()
            notices: list[EvictionNotice] = []
            for hold in self._store.expired(now):
                if self._store.remove(hold.hold_id):
                    notices.append(
                        EvictionNotice(
                            hold_id=hold.hold_id,
                            hotel_id=hold.hotel_id,
                            room_type_id=hold.room_type_id,
                            expired_at=hold.expires_at,
                            evicted_at=now,
                        )
                    )

        for notice in notices:
            logger.info("Hold expired and released: %s", notice.hold_id)
            self.publish(notice)
        if notices:
            logger.info("Cleaned up %d expired holds", len(notices))
        return notices

    def publish(self, notice: EvictionNotice) -> None:
        """Deliver an eviction notice to every listener, including ones not from a sweep."""
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("Eviction listener failed for hold %s", notice.hold_id)

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.sweep()
            except Exception:
                logger.exception("Expiry sweep failed; retrying next tick")

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="hold-expiry-sweeper",
            daemon=True,
        )
        self._thread.start()
        logger.info("Expiry sweeper started (interval=%.1fs)", self._interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            # Keep the reference so start() cannot spawn a second loop.
            logger.warning("Expiry sweeper still finishing a tick after %ss", timeout)
            return
        self._thread = None
        logger.info("Expiry sweeper stopped")
