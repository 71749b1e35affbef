import json

import pytest

from utils.config import ConfigManager

pytestmark = [pytest.mark.unit]


def test_first_use_writes_defaults(tmp_path) -> None:
    config = ConfigManager(tmp_path)
    assert (tmp_path / "config.json").exists()
    assert config.get("server.port") == 8720
    assert config.get("editor.max_depth") == 2
    assert config.get("logging.file") is None
    assert config.get("missing.key", "fallback") == "fallback"


def test_stored_values_overlay_defaults(tmp_path) -> None:
    (tmp_path / "config.json").write_text(json.dumps({"server": {"port": 9000}}))
    config = ConfigManager(str(tmp_path))
    assert config.get("server.port") == 9000
    assert config.get("server.host") == "127.0.0.1"


def test_corrupt_file_falls_back_to_defaults(tmp_path) -> None:
    (tmp_path / "config.json").write_text("{not json")
    config = ConfigManager(tmp_path)
    assert config.get("server.port") == 8720


def test_set_persists(tmp_path) -> None:
    ConfigManager(tmp_path).set("editor.api_url", "http://example.test:1")
    assert ConfigManager(tmp_path).get("editor.api_url") == "http://example.test:1"
