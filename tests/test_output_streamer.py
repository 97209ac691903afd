"""Tests for masterless.services.output_streamer."""
import io
import os
import time

from masterless.services.output_streamer import OutputStreamer


class BrokenStream:
    """Yields one line then fails like a closed pipe."""

    def __init__(self):
        self.calls = 0

    def readline(self):
        self.calls += 1
        if self.calls == 1:
            return b'first\n'
        raise OSError('pipe closed')


class TestOutputStreamer:

    def test_forwards_lines_in_order(self, sink):
        stream = io.BytesIO(b'a\nb\r\nc')
        streamer = OutputStreamer(sink, stream).start()

        assert streamer.wait(timeout=5)
        assert sink.lines == ['a', 'b', 'c']
        assert streamer.done.is_set()

    def test_keeps_blank_lines(self, sink):
        streamer = OutputStreamer(sink, io.BytesIO(b'a\n\nb\n')).start()
        streamer.wait(timeout=5)
        assert sink.lines == ['a', '', 'b']

    def test_empty_stream_signals_completion(self, sink):
        streamer = OutputStreamer(sink, io.BytesIO(b'')).start()
        assert streamer.wait(timeout=5)
        assert sink.lines == []
        assert streamer.error is None

    def test_read_error_ends_stream(self, sink):
        streamer = OutputStreamer(sink, BrokenStream(), 'stderr').start()

        assert streamer.wait(timeout=5)
        assert sink.lines == ['first']
        assert isinstance(streamer.error, OSError)

    def test_invalid_utf8_is_replaced(self, sink):
        streamer = OutputStreamer(sink, io.BytesIO(b'caf\xe9\n')).start()
        streamer.wait(timeout=5)
        assert sink.lines == ['caf\ufffd']

    def test_lines_arrive_before_stream_ends(self, sink):
        read_fd, write_fd = os.pipe()
        reader = os.fdopen(read_fd, 'rb')
        streamer = OutputStreamer(sink, reader).start()
        try:
            os.write(write_fd, b'early\n')
            deadline = time.monotonic() + 5
            while not sink.lines and time.monotonic() < deadline:
                time.sleep(0.01)

            assert sink.lines == ['early']
            assert not streamer.done.is_set()
        finally:
            os.close(write_fd)

        assert streamer.wait(timeout=5)
        reader.close()
