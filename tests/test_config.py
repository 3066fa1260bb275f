from shared.config import Settings, get_settings
from item_finder import ItemFinder


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    settings = Settings()

    assert settings.openai_api_key.get_secret_value() == ""
    assert settings.openai_model == "gpt-4.1-mini"
    assert settings.openai_api_url == "https://api.openai.com/v1/chat/completions"
    assert settings.log_format == "text"


def test_environment_variables(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_MODEL", "gpt-4.1")
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_API_URL", "http://localhost:8080/v1/chat/completions")

    settings = Settings()

    assert settings.openai_api_key.get_secret_value() == "env-key"
    assert settings.openai_model == "gpt-4.1"
    assert settings.openai_api_url == "http://localhost:8080/v1/chat/completions"


def test_env_file_loading(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("AI_ITEM_FINDER_OPENAI_API_KEY=dotenv-key\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert Settings().openai_api_key.get_secret_value() == "dotenv-key"

    # explicit OS environment should override .env
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_API_KEY", "os-key")
    assert Settings().openai_api_key.get_secret_value() == "os-key"


def test_api_key_is_not_exposed_in_repr(settings):
    assert "test-api-key" not in repr(settings)


def test_finder_falls_back_to_cached_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("AI_ITEM_FINDER_OPENAI_MODEL", "gpt-4.1")

    finder = ItemFinder()

    assert finder.settings is get_settings()
    assert finder.model == "gpt-4.1"
    assert finder.api.api_key == "env-key"
