import pytest

from cloudstore.config import ServerConfig, get_config, set_config


def test_from_json_reads_all_fields():
    text = """{
        "server_port": 9090,
        "server_ip": "10.0.0.1",
        "download_prefix": "/dl/",
        "deep_storage_dir": "./deep/",
        "low_storage_dir": "./low/",
        "storage_info": "./info.json",
        "bundle_format": 23,
        "remove_prefix": "/rm/"
    }"""
    config = ServerConfig.from_json(text)
    assert config == ServerConfig(
        server_port=9090,
        server_ip="10.0.0.1",
        download_prefix="/dl/",
        deep_storage_dir="./deep/",
        low_storage_dir="./low/",
        storage_info="./info.json",
        bundle_format=23,
        remove_prefix="/rm/",
    )


def test_missing_keys_keep_defaults():
    assert ServerConfig.from_json("{}") == ServerConfig()
    partial = ServerConfig.from_json('{"server_port": 7000}')
    assert partial.server_port == 7000
    assert partial.download_prefix == ServerConfig().download_prefix


@pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"server_port": "abc"}'])
def test_invalid_configuration(text):
    with pytest.raises(ValueError):
        ServerConfig.from_json(text)


def test_load_from_file(tmp_path):
    path = tmp_path / "Storage.conf"
    path.write_text('{"server_ip": "0.0.0.0", "bundle_format": 5}', encoding="utf-8")
    config = ServerConfig.load(path)
    assert config.server_ip == "0.0.0.0"
    assert config.bundle_format == 5


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ServerConfig.load(tmp_path / "absent.conf")


def test_set_and_get_config():
    config = ServerConfig(server_port=1234)
    set_config(config)
    try:
        assert get_config() is config
        assert get_config().server_port == 1234
    finally:
        set_config(None)