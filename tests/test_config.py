"""测试配置加载"""

import json

import pytest
from pydantic import ValidationError

from icloud_hme.config import ENV_COOKIE, ENV_PROXY, ENV_TIMEOUT, HMEConfig, load_config
from icloud_hme.constants import SETUP_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (ENV_COOKIE, ENV_PROXY, ENV_TIMEOUT):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """测试配置文件与环境变量"""

    def test_defaults_when_file_missing(self, tmp_path):
        config = load_config(tmp_path / "missing.json")
        assert config.cookie == ""
        assert config.setup_url == SETUP_URL
        assert config.transport_backend == "httpx"
        assert config.proxy is None

    def test_reads_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"cookie": "a=1", "timeout": 5, "transport_backend": "curl_cffi"}), encoding="utf-8")

        config = load_config(path)

        assert config.cookie == "a=1"
        assert config.timeout == 5.0
        assert config.transport_backend == "curl_cffi"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"cookie": "a=1"}), encoding="utf-8")
        monkeypatch.setenv(ENV_COOKIE, "b=2")
        monkeypatch.setenv(ENV_PROXY, "http://127.0.0.1:8080")
        monkeypatch.setenv(ENV_TIMEOUT, "12.5")

        config = load_config(path)

        assert config.cookie == "b=2"
        assert config.proxy == "http://127.0.0.1:8080"
        assert config.timeout == 12.5

    def test_invalid_timeout_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ENV_TIMEOUT, "soon")
        assert load_config(tmp_path / "missing.json").timeout == HMEConfig().timeout

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            HMEConfig(timeout=0)
