import socket
import threading

import pytest

from samvoice.udp import WAITING_TEXT, UdpFeed, UdpTextReceiver


class Collector:
    def __init__(self):
        self.texts = []
        self.statuses = []
        self.event = threading.Event()

    def on_text(self, text):
        self.texts.append(text)
        self.event.set()

    def on_status(self, status):
        self.statuses.append(status)


def send(port, payload):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(payload, ("127.0.0.1", port))


def test_receives_trimmed_text():
    collector = Collector()
    with UdpTextReceiver(collector.on_text, collector.on_status) as receiver:
        port = receiver.start(0)
        send(port, b"   \n")
        send(port, b"  hello there \n")
        assert collector.event.wait(3.0)
    assert collector.texts == ["hello there"]


def test_reports_listening_status():
    collector = Collector()
    with UdpTextReceiver(collector.on_text, collector.on_status) as receiver:
        port = receiver.start(0)
    assert collector.statuses == [f"UDP: listening on port {port}"]


def test_decodes_utf8_payload():
    collector = Collector()
    with UdpTextReceiver(collector.on_text, collector.on_status) as receiver:
        port = receiver.start(0)
        send(port, "grüß dich".encode("utf-8"))
        assert collector.event.wait(3.0)
    assert collector.texts == ["grüß dich"]


def test_bind_failure_raises_and_reports():
    collector = Collector()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as blocker:
        blocker.bind(("", 0))
        port = blocker.getsockname()[1]
        receiver = UdpTextReceiver(collector.on_text, collector.on_status)
        with pytest.raises(OSError):
            receiver.start(port)
    assert collector.statuses == [f"UDP: bind failed on port {port}"]


def test_restart_listens_again():
    collector = Collector()
    with UdpTextReceiver(collector.on_text, collector.on_status) as receiver:
        receiver.start(0)
        port = receiver.start(0)
        send(port, b"again")
        assert collector.event.wait(3.0)
    assert collector.texts == ["again"]
    assert len(collector.statuses) == 2


def test_feed_starts_with_waiting_notice():
    assert UdpFeed().text() == WAITING_TEXT


def test_feed_append_replaces_waiting_notice():
    feed = UdpFeed()
    feed.append("one")
    feed.append("two")
    assert feed.text() == "one\ntwo\n"


def test_feed_keeps_newest_characters():
    feed = UdpFeed(max_chars=10)
    feed.append("abcdef")
    feed.append("ghijkl")
    text = feed.text()
    assert len(text) == 10
    assert ("abcdef\nghijkl\n").endswith(text)