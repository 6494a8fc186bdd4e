"""Receiving text over UDP and keeping a bounded log of what arrived."""

from __future__ import annotations

import socket
import threading
from collections.abc import Callable

WAITING_TEXT = "[waiting for UDP on port 7001]"
MAX_PAYLOAD = 4095
_POLL_SECONDS = 0.25
_STOP_TIMEOUT = 0.8


class UdpTextReceiver:
    """Listens for UDP datagrams on a background thread and reports their text."""

    def __init__(
        self,
        on_text: Callable[[str], None],
        on_status: Callable[[str], None],
    ):
        self._on_text = on_text
        self._on_status = on_status
        self._socket: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def start(self, port: int) -> int:
        """Bind to the port on all interfaces and start listening.

        Returns the bound port. Raises OSError if the port cannot be bound.
        """
        self.stop()

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(("", port))
        except OSError:
            sock.close()
            self._on_status(f"UDP: bind failed on port {port}")
            raise

        sock.settimeout(_POLL_SECONDS)
        bound_port = sock.getsockname()[1]
        self._socket = sock
        self._stop_event.clear()
        self._on_status(f"UDP: listening on port {bound_port}")
        self._thread = threading.Thread(
            target=self._run, args=(sock,), name="SAMUdpReceiver", daemon=True
        )
        self._thread.start()
        return bound_port

    def stop(self) -> None:
        """Stop listening and release the socket."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(_STOP_TIMEOUT)
            self._thread = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> UdpTextReceiver:
        return self

    def __exit__(self, *args) -> None:
        self.stop()

    def _run(self, sock: socket.socket) -> None:
        while not self._stop_event.is_set():
            try:
                payload = sock.recv(MAX_PAYLOAD)
            except TimeoutError:
                continue
            except OSError:
                return
            if not payload:
                continue
            text = payload.decode("utf-8", errors="replace").strip()
            if text:
                self._on_text(text)


class UdpFeed:
    """A thread-safe log of received lines, trimmed to its newest characters."""

    def __init__(self, max_chars: int = 12000):
        self._max_chars = max_chars
        self._text = WAITING_TEXT
        self._lock = threading.Lock()

    def append(self, text: str) -> None:
        """Add a line, dropping the waiting notice and the oldest overflow."""
        with self._lock:
            current = "" if WAITING_TEXT in self._text else self._text
            current += text + "\n"
            if len(current) > self._max_chars:
                current = current[-self._max_chars:]
            self._text = current

    def text(self) -> str:
        """The whole log as one string."""
        with self._lock:
            return self._text