"""
Debounced preview compilation for an interactive editor.

Every ``edit`` stores the newest source and restarts a quiet-period timer;
only when no edit arrives for ``delay`` seconds is the source compiled.
Superseded timers are cancelled, never queued, so at most one compile
reflects the latest input.  A failed compile keeps the previous HTML.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..config import PreviewConfig
from .fallback import PreviewResult, RendererFactory, render_preview

logger = logging.getLogger(__name__)


class PreviewSession:
    """Keeps the latest preview for one document being edited."""

    def __init__(
        self,
        on_update: Optional[Callable[[PreviewResult], None]] = None,
        *,
        delay: Optional[float] = None,
        config: Optional[PreviewConfig] = None,
        renderer_factory: Optional[RendererFactory] = None,
    ) -> None:
        self.config = config or PreviewConfig()
        self.delay = self.config.debounce_seconds if delay is None else delay
        self.on_update = on_update
        self.renderer_factory = renderer_factory

        self.source = ""
        self.html: Optional[str] = None
        self.error: Optional[str] = None
        self.compile_count = 0

        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._closed = False

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def edit(self, source: str) -> None:
        """Record a new source text and (re)start the quiet-period timer."""
        with self._lock:
            if self._closed:
                raise RuntimeError("PreviewSession is closed")
            self.source = source
            self._generation += 1
            self._cancel_timer()
            timer = threading.Timer(self.delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def refresh(self) -> PreviewResult:
        """Compile the current source now, dropping any scheduled compile."""
        with self._lock:
            self._generation += 1
            self._cancel_timer()
            generation = self._generation
            source = self.source
        return self._compile(source, generation)

    def cancel(self) -> None:
        """Drop the scheduled compile, if any."""
        with self._lock:
            self._generation += 1
            self._cancel_timer()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._generation += 1
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            source = self.source
        self._compile(source, generation)

    def _compile(self, source: str, generation: int) -> PreviewResult:
        result = render_preview(source, config=self.config, renderer_factory=self.renderer_factory)
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding preview for superseded edit %d", generation)
                return result
            self.compile_count += 1
            if result.ok:
                self.html = result.html
                self.error = None
            else:
                self.error = result.error
        if self.on_update is not None:
            self.on_update(result)
        return result
