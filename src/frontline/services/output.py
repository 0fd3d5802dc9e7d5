"""OutputChannel: where command output goes, with scoped capture.

Commands write through ``context.write()``. When a request is eligible for
the request-level cache the dispatcher wraps the chain in
:meth:`OutputChannel.capture`; the captured text is what gets cached.
Leaving the ``with`` block always releases the capture and passes the text
on to the sink, whether the chain completed, stopped early, forwarded or
raised.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from frontline.domain.errors import OutputCaptureError

if TYPE_CHECKING:
    from frontline.domain.ports import TextSink


class Capture:
    """Text collected during one capture scope."""

    def __init__(self, *, active: bool) -> None:
        self.active = active
        self.cancelled = False
        self._parts: list[str] = []

    def append(self, text: str) -> None:
        self._parts.append(text)

    def cancel(self) -> None:
        """Mark the captured text as not cacheable. It is still emitted."""
        self.cancelled = True

    @property
    def cacheable(self) -> bool:
        return self.active and not self.cancelled

    def text(self) -> str:
        return "".join(self._parts)


class OutputChannel:
    """Writes to *sink* (``sys.stdout`` at write time when None)."""

    def __init__(self, sink: TextSink | None = None) -> None:
        self._sink = sink
        self._capture: Capture | None = None

    @property
    def sink(self) -> TextSink:
        return self._sink if self._sink is not None else sys.stdout

    @property
    def capturing(self) -> bool:
        return self._capture is not None

    def write(self, text: str) -> None:
        if not text:
            return
        if self._capture is not None:
            self._capture.append(text)
        else:
            self.sink.write(text)

    @contextmanager
    def capture(self, *, enabled: bool = True) -> Iterator[Capture]:
        """Collect writes for the duration of the block.

        With *enabled* False the yielded capture is inert and writes go
        straight to the sink. Only one capture may be active at a time.
        """
        if not enabled:
            yield Capture(active=False)
            return
        if self._capture is not None:
            msg = "Output capture already active"
            raise OutputCaptureError(msg)
        capture = Capture(active=True)
        self._capture = capture
        try:
            yield capture
        finally:
            self._capture = None
            text = capture.text()
            if text:
                self.sink.write(text)
