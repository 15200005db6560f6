import queue
import socket
import threading

import pytest

from cloudstore.backup import BackupServer, append_to_file, main, send_backup
from cloudstore.logconf import LogConfig


@pytest.fixture
def server():
    received: queue.Queue = queue.Queue()
    srv = BackupServer(0, received.put)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv, received
    srv.shutdown()
    thread.join(timeout=5)


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_append_to_file_appends(tmp_path):
    target = tmp_path / "backup.log"
    append_to_file("first\n", target)
    append_to_file(b"second\n", target)
    assert target.read_text(encoding="utf-8") == "first\nsecond\n"


def test_send_backup_reaches_server(server):
    srv, received = server
    config = LogConfig(backup_addr="127.0.0.1", backup_port=srv.port)
    send_backup("hello backup", config)
    message = received.get(timeout=5)
    assert message.startswith("127.0.0.1:")
    assert message.endswith("hello backup")


def test_client_info_prefix_is_address_and_port(server):
    srv, received = server
    with socket.create_connection(("127.0.0.1", srv.port)) as sock:
        local_port = sock.getsockname()[1]
        sock.sendall("数据".encode("utf-8"))
        message = received.get(timeout=5)
    assert message == f"127.0.0.1:{local_port}数据"


def test_server_ignores_empty_connection(server):
    srv, received = server
    with socket.create_connection(("127.0.0.1", srv.port)):
        pass
    config = LogConfig(backup_addr="127.0.0.1", backup_port=srv.port)
    send_backup(b"after-empty", config)
    assert received.get(timeout=5).endswith("after-empty")
    assert received.empty()


def test_server_to_file(tmp_path):
    target = tmp_path / "remote.log"
    srv = BackupServer(0, lambda msg: append_to_file(msg, target))
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    try:
        config = LogConfig(backup_addr="127.0.0.1", backup_port=srv.port)
        send_backup("line one\n", config)
        for _ in range(100):
            if target.exists() and target.read_text(encoding="utf-8").endswith("line one\n"):
                break
            threading.Event().wait(0.05)
    finally:
        srv.shutdown()
        thread.join(timeout=5)
    assert target.read_text(encoding="utf-8").endswith("line one\n")


def test_send_backup_fails_without_server():
    config = LogConfig(backup_addr="127.0.0.1", backup_port=_free_port())
    with pytest.raises(ConnectionError):
        send_backup("nobody listens", config)


def test_main_requires_one_argument(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().err


def test_main_rejects_non_numeric_port(capsys):
    assert main(["abc"]) == 2
    assert "usage" in capsys.readouterr().err