"""Background corpus watcher that triggers catalog reloads."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from componentfinder.engine import QueryEngine
from componentfinder.utils.files import corpus_fingerprint

LOGGER = logging.getLogger(__name__)


class CorpusWatcher:
    """Polls the corpus fingerprint and reloads the engine when it changes."""

    def __init__(self, engine: QueryEngine, *, interval: float = 2.0) -> None:
        if engine.corpus_root is None:
            raise ValueError("Cannot watch an engine without a corpus root")
        self.engine = engine
        self.root: Path = engine.corpus_root
        self.interval = max(interval, 0.1)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._fingerprint: str | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _current_fingerprint(self) -> str | None:
        try:
            return corpus_fingerprint(self.root)
        except OSError as exc:
            LOGGER.warning("Cannot fingerprint %s: %s", self.root, exc)
            return None

    def prime(self) -> None:
        """Record the fingerprint of the corpus the engine already loaded."""
        self._fingerprint = self._current_fingerprint()

    def poll_once(self) -> bool:
        """Reload if the corpus changed since the last poll. Returns True on a swap."""
        fingerprint = self._current_fingerprint()
        if fingerprint is None or fingerprint == self._fingerprint:
            return False
        LOGGER.info("Corpus change detected under %s, reloading", self.root)
        result = self.engine.reload()
        if not result.ok:
            return False
        self._fingerprint = fingerprint
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        if self.running:
            return
        if self._fingerprint is None:
            self.prime()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="corpus-watcher", daemon=True)
        self._thread.start()
        LOGGER.info("Watching %s every %.1fs", self.root, self.interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
