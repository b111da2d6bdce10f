# tests/test_settings.py
from product_api.config import Settings


def test_defaults(monkeypatch):
    for name in ("PORT", "HOST", "API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.api_key is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8085")
    monkeypatch.setenv("API_KEY", "s3cret")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    settings = Settings(_env_file=None)
    assert settings.port == 8085
    assert settings.api_key == "s3cret"
    assert settings.log_level == "DEBUG"


def test_empty_api_key_counts_as_unset(monkeypatch):
    monkeypatch.setenv("API_KEY", "")
    assert Settings(_env_file=None).api_key is None


def test_env_files_later_file_wins(tmp_path, monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    base = tmp_path / ".env"
    local = tmp_path / ".env.local"
    base.write_text("API_KEY=from-env\nPORT=4000\n")
    local.write_text("API_KEY=from-local\n")

    settings = Settings(_env_file=(base, local))
    assert settings.api_key == "from-local"
    assert settings.port == 4000
