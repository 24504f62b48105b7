"""Shared fixtures: an in-process fake rrdcached daemon."""

import os
import shutil
import socket
import tempfile
import threading
import time

import pytest


class FakeDaemon:
    """Answers each request line with a scripted reply.

    ``replies`` maps a request line (without newline) to the raw reply
    text. Unknown requests get ``-1 Unknown command``. After answering a
    request listed in ``hangup`` the daemon closes that connection.

    ``scripts`` overrides ``replies`` for slow daemons: each request maps
    to a list of ``(delay, text)`` chunks, sent one after another with
    ``delay`` seconds of sleep before each. An empty list never answers.
    """

    def __init__(self, family: int = socket.AF_INET, path: str | None = None):
        self.replies: dict[str, str] = {}
        self.hangup: set[str] = set()
        self.scripts: dict[str, list[tuple[float, str]]] = {}
        self.requests: list[str] = []
        self.connections = 0
        self.finished = threading.Event()
        self._stopped = threading.Event()

        self._listener = socket.socket(family, socket.SOCK_STREAM)
        if family == socket.AF_INET:
            self._listener.bind(("127.0.0.1", 0))
            host, port = self._listener.getsockname()
            self.address = f"{host}:{port}"
        else:
            self._listener.bind(path)
            self.address = path
        self._listener.listen(8)
        self._listener.settimeout(0.1)

        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    def _accept_loop(self) -> None:
        while not self._stopped.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            self.connections += 1
            threading.Thread(target=self._serve, args=(conn,), daemon=True).start()

    def _serve(self, conn: socket.socket) -> None:
        conn.settimeout(5.0)
        try:
            with conn, conn.makefile("rb") as reader:
                for raw in reader:
                    line = raw.decode().rstrip("\n")
                    self.requests.append(line)
                    if line == "quit":
                        break
                    if line in self.scripts:
                        for delay, chunk in self.scripts[line]:
                            time.sleep(delay)
                            conn.sendall(chunk.encode())
                    else:
                        conn.sendall(self.replies.get(line, "-1 Unknown command\n").encode())
                    if line in self.hangup:
                        break
        except OSError:
            pass
        finally:
            self.finished.set()

    def close(self) -> None:
        self._stopped.set()
        self._thread.join(timeout=2)
        self._listener.close()


@pytest.fixture
def daemon():
    d = FakeDaemon()
    yield d
    d.close()


@pytest.fixture
def unix_daemon():
    if not hasattr(socket, "AF_UNIX"):
        pytest.skip("UNIX domain sockets not available")
    # Short directory: socket paths are limited to ~100 bytes
    directory = tempfile.mkdtemp(prefix="rrdc")
    d = FakeDaemon(socket.AF_UNIX, os.path.join(directory, "rrdcached.sock"))
    yield d
    d.close()
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def closed_port() -> int:
    """A local TCP port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
