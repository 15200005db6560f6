"""Remote backup of log messages: a TCP sender and a receiving server."""

from __future__ import annotations

import os
import socket
import sys
import threading
from typing import Callable

from .logconf import LogConfig, get_config

BACKLOG = 32
DEFAULT_BACKUP_FILE = "./logfile.log"

_CONNECT_ATTEMPTS = 5
_READ_SIZE = 1024
_CONNECT_TIMEOUT = 5.0
_ACCEPT_POLL = 0.2
_CLIENT_TIMEOUT = 10.0


def _connect(address: tuple[str, int]) -> socket.socket:
    last_error: OSError | None = None
    for remaining in range(_CONNECT_ATTEMPTS, 0, -1):
        try:
            return socket.create_connection(address, timeout=_CONNECT_TIMEOUT)
        except OSError as exc:
            last_error = exc
            print(f"retrying backup connection, attempts left: {remaining - 1}", file=sys.stderr)
    raise ConnectionError(
        f"cannot connect to backup server {address[0]}:{address[1]}"
    ) from last_error


def send_backup(message: str | bytes, config: LogConfig | None = None) -> None:
    """Send one message to the configured backup server."""
    config = config if config is not None else get_config()
    data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    with _connect((config.backup_addr, int(config.backup_port))) as sock:
        sock.sendall(data)


def append_to_file(message: str | bytes, filename: str | os.PathLike = DEFAULT_BACKUP_FILE) -> None:
    """Append a received message to the backup file."""
    data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    with open(filename, "ab") as handle:
        handle.write(data)
        handle.flush()


class BackupServer:
    """TCP server that passes each client's message to a callback."""

    def __init__(self, port: int, callback: Callable[[str], None]) -> None:
        self._callback = callback
        self._stopped = threading.Event()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind(("0.0.0.0", port))
            self._listener.listen(BACKLOG)
            self._listener.settimeout(_ACCEPT_POLL)
        except OSError:
            self._listener.close()
            raise
        self.port: int = self._listener.getsockname()[1]

    def serve_forever(self) -> None:
        """Accept clients until shut down, serving each on its own thread."""
        while not self._stopped.is_set():
            try:
                conn, (ip, port) = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._stopped.is_set():
                    break
                print(f"accept error: {exc}", file=sys.stderr)
                continue
            threading.Thread(
                target=self._serve_client, args=(conn, f"{ip}:{port}"), daemon=True
            ).start()

    def shutdown(self) -> None:
        """Stop accepting clients and close the listening socket."""
        self._stopped.set()
        self._listener.close()

    def handle(self, sock: socket.socket, client_info: str) -> None:
        """Read one message from a client and hand it to the callback."""
        try:
            data = sock.recv(_READ_SIZE)
        except OSError as exc:
            print(f"read error: {exc}", file=sys.stderr)
            return
        if data:
            self._callback(client_info + data.decode("utf-8", errors="replace"))

    def _serve_client(self, conn: socket.socket, client_info: str) -> None:
        with conn:
            conn.settimeout(_CLIENT_TIMEOUT)
            self.handle(conn, client_info)


def main(argv: list[str] | None = None) -> int:
    """Run a backup server that appends received messages to a file."""
    args = sys.argv[1:] if argv is None else list(argv)
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "backup"
    if len(args) != 1:
        print(f"usage: {prog} port", file=sys.stderr)
        return 2
    try:
        port = int(args[0])
    except ValueError:
        print(f"usage: {prog} port", file=sys.stderr)
        return 2
    server = BackupServer(port, append_to_file)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())