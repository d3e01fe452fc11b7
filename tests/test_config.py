import json
from pathlib import Path

from naslink.config import EXAMPLE_CONFIG, Config, load_config


def test_defaults():
    config = Config(data_dir=Path("/srv/naslink"))

    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.database_path == Path("/srv/naslink/naslink.db")
    assert config.images_dir == Path("/srv/naslink/images")


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("NASLINK_HOST", "127.0.0.1")
    monkeypatch.setenv("NASLINK_PORT", "9000")
    monkeypatch.setenv("NASLINK_DB", str(tmp_path / "links.db"))

    config = Config.from_env()

    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.database_path == tmp_path / "links.db"


def test_from_file_round_trip(tmp_path):
    path = tmp_path / "naslink.json"
    Config(port=8181, data_dir=tmp_path, log_level="DEBUG").save(path)

    config = Config.from_file(path)

    assert config.port == 8181
    assert config.data_dir == tmp_path
    assert config.log_level == "DEBUG"


def test_missing_file_gives_defaults(tmp_path):
    assert Config.from_file(tmp_path / "nope.json").port == 8080


def test_env_overrides_file(monkeypatch, tmp_path):
    path = tmp_path / "naslink.json"
    path.write_text(json.dumps({"host": "10.0.0.1", "port": 8181}))
    monkeypatch.setenv("NASLINK_PORT", "9999")
    monkeypatch.delenv("NASLINK_HOST", raising=False)

    config = load_config(path)

    assert config.host == "10.0.0.1"
    assert config.port == 9999


def test_example_config_loads(tmp_path):
    path = tmp_path / "naslink.json"
    path.write_text(EXAMPLE_CONFIG)

    config = Config.from_file(path)

    assert config.port == 8080
    assert config.data_dir == Path("~/.naslink").expanduser()
    assert config.db_path is None
