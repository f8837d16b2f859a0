"""Run the ASGI app on a background thread bound to a runtime-chosen port.

The socket is bound before uvicorn starts, so binding to port ``0`` lets the
OS pick a free port that callers read back from :attr:`ApplicationServer.port`
before issuing any request.
"""

from __future__ import annotations

import logging
import socket
import threading
import time

import uvicorn

logger = logging.getLogger(__name__)


class ServerStartupError(RuntimeError):
    """The HTTP server did not report started within its deadline."""


class ApplicationServer:
    """uvicorn server on a pre-bound socket.

    Usage:
        with ApplicationServer(create_app(settings)) as server:
            requests.get(f"{server.base_url}/api/customers")
    """

    def __init__(
        self,
        app,
        host: str = "127.0.0.1",
        port: int = 0,
        *,
        startup_timeout: float = 15.0,
        log_level: str = "warning",
    ):
        self.app = app
        self.host = host
        self.requested_port = port
        self.startup_timeout = startup_timeout
        self.log_level = log_level
        self.port: int | None = None
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def base_url(self) -> str:
        if self.port is None:
            raise RuntimeError("Server has not been started")
        return f"http://{self.host}:{self.port}"

    @property
    def is_running(self) -> bool:
        return bool(
            self._server is not None
            and self._server.started
            and self._thread is not None
            and self._thread.is_alive()
        )

    def start(self) -> "ApplicationServer":
        if self._thread is not None:
            raise RuntimeError("Server already started")

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.requested_port))
        self._socket = sock
        self.port = sock.getsockname()[1]

        config = uvicorn.Config(
            self.app,
            log_level=self.log_level,
            lifespan="on",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [sock]},
            name="ApplicationServer",
            daemon=True,
        )
        self._thread.start()
        self._wait_until_started()
        logger.info("Application listening on %s", self.base_url)
        return self

    def wait(self) -> None:
        """Block until the server thread exits."""
        if self._thread is not None:
            self._thread.join()

    def stop(self, timeout: float = 10.0) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Server thread did not exit within %.1fs", timeout)
        if self._socket is not None:
            self._socket.close()
        self._server = None
        self._thread = None
        self._socket = None

    def __enter__(self) -> "ApplicationServer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _wait_until_started(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        while not self._server.started:
            if not self._thread.is_alive():
                self.stop()
                raise ServerStartupError(
                    "Application exited during startup (see log for the lifespan error)"
                )
            if time.monotonic() >= deadline:
                self.stop()
                raise ServerStartupError(
                    f"Application did not start within {self.startup_timeout:.1f}s"
                )
            time.sleep(0.05)
