"""Line-by-line forwarding of a command's output stream to the sink."""

import threading
from typing import BinaryIO, Optional

from masterless.transport.base import OutputSink


class OutputStreamer:
    """
    Copy one output stream to the sink on a background thread.

    Lines are forwarded in arrival order as soon as they are complete.
    The done event is set exactly once, when the stream ends or a read fails.
    """

    def __init__(self, sink: OutputSink, stream: BinaryIO, name: str = "stdout"):
        """
        Initialize streamer.

        Args:
            sink: Object with an emit(line) method
            stream: Binary stream to read from
            name: Stream name, used for the thread name
        """
        self.sink = sink
        self.stream = stream
        self.name = name
        self.done = threading.Event()
        self.error: Optional[Exception] = None
        self._thread = threading.Thread(
            target=self._copy, name=f"masterless-{name}", daemon=True
        )

    def start(self) -> "OutputStreamer":
        self._thread.start()
        return self

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the stream is drained. Returns False on timeout."""
        finished = self.done.wait(timeout)
        if finished:
            self._thread.join()
        return finished

    def _copy(self) -> None:
        try:
            while True:
                raw = self.stream.readline()
                if not raw:
                    break
                self.sink.emit(self._decode(raw))
        except (OSError, ValueError) as e:
            # Closed or broken pipe ends the stream
            self.error = e
        finally:
            self.done.set()

    @staticmethod
    def _decode(raw) -> str:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        return raw.rstrip("\r\n")
