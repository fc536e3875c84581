import pytest
from pydantic import ValidationError

from math_ellm.config import IndexingSettings, MathEllmBaseSettings, settings_provider
from math_ellm.config.settings import SettingsProvider


@pytest.fixture(autouse=True)
def clean_provider():
    settings_provider.clear()
    yield
    settings_provider.clear()


def test_defaults():
    settings = MathEllmBaseSettings()

    assert settings.sieve_limit == 10000
    assert settings.similarity_threshold == 0.3
    assert settings.match_limit == 5
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MATH_ELLM_SIMILARITY_THRESHOLD", "0.5")
    monkeypatch.setenv("MATH_ELLM_SAMPLE_SIZE", "10")

    settings = IndexingSettings()

    assert settings.similarity_threshold == 0.5
    assert settings.sample_size == 10


@pytest.mark.parametrize(
    "variable,value",
    [
        ("MATH_ELLM_SIMILARITY_THRESHOLD", "1.5"),
        ("MATH_ELLM_MATCH_LIMIT", "0"),
        ("MATH_ELLM_SIEVE_LIMIT", "1"),
    ],
)
def test_invalid_values_rejected(monkeypatch, variable, value):
    monkeypatch.setenv(variable, value)

    with pytest.raises(ValidationError):
        IndexingSettings()


def test_provider_is_a_caching_singleton():
    assert SettingsProvider() is settings_provider

    first = settings_provider.get_settings(IndexingSettings)
    assert settings_provider.get_settings(IndexingSettings) is first

    settings_provider.clear()
    assert settings_provider.get_settings(IndexingSettings) is not first


def test_resolve_dataset_path(tmp_path):
    explicit = tmp_path / "explicit.jsonl"
    default = tmp_path / "default.jsonl"

    settings = IndexingSettings(default_dataset_path=default)
    assert settings.resolve_dataset_path() is None

    default.write_text("", encoding="utf-8")
    assert settings.resolve_dataset_path() == default

    settings = IndexingSettings(dataset_path=explicit, default_dataset_path=default)
    assert settings.resolve_dataset_path() == explicit
