import pytest

from csvstream.config import Settings, load_settings
from csvstream.domain.flags import DECODE_AS_RECORD, READ_AHEAD, StreamFlag

ENV_NAMES = [
    "CSVSTREAM_DELIMITER",
    "CSVSTREAM_QUOTE",
    "CSVSTREAM_ESCAPE",
    "CSVSTREAM_NEWLINE",
    "CSVSTREAM_FLUSH_THRESHOLD",
    "CSVSTREAM_SKIP_EMPTY",
    "CSVSTREAM_READ_AHEAD",
    "CSVSTREAM_DECODE_AS_RECORD",
    "CSVSTREAM_ENCODING",
    "CSVSTREAM_LOG_DIR",
    "CSVSTREAM_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_sources():
    loaded = load_settings(None, {})

    assert loaded.settings == Settings()
    assert loaded.sources_used == []
    assert loaded.settings.flush_threshold == 500
    assert loaded.settings.flags() == DECODE_AS_RECORD


def test_priority_overrides_over_env_over_config(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'delimiter: ";"',
            "flush_threshold: 10",
            "read_ahead: true",
            'log_level: "DEBUG"',
        ]),
        encoding="utf-8",
    )

    # ENV overrides config
    monkeypatch.setenv("CSVSTREAM_FLUSH_THRESHOLD", "20")
    monkeypatch.setenv("CSVSTREAM_DELIMITER", "\t")
    monkeypatch.setenv("CSVSTREAM_NEWLINE", "\\r\\n")

    # overrides win over env
    loaded = load_settings(str(cfg), {"delimiter": "|", "quote": None})
    settings = loaded.settings

    assert settings.delimiter == "|"
    assert settings.quote == '"'
    assert settings.flush_threshold == 20
    assert settings.newline == "\r\n"
    assert settings.log_level == "DEBUG"
    assert settings.flags() == DECODE_AS_RECORD | READ_AHEAD
    assert loaded.sources_used == ["config", "env", "cli"]


@pytest.mark.parametrize("raw", ["none", "NULL", "off"])
def test_flush_threshold_can_be_disabled_from_env(monkeypatch, raw):
    monkeypatch.setenv("CSVSTREAM_FLUSH_THRESHOLD", raw)

    assert load_settings(None, {}).settings.flush_threshold is None


def test_flush_threshold_null_in_yaml_disables(tmp_path):
    cfg = tmp_path / "config.yml"
    cfg.write_text("flush_threshold: null\n", encoding="utf-8")

    assert load_settings(str(cfg), {}).settings.flush_threshold is None


def test_invalid_boolean_env_is_rejected(monkeypatch):
    monkeypatch.setenv("CSVSTREAM_SKIP_EMPTY", "maybe")

    with pytest.raises(ValueError):
        load_settings(None, {})


def test_missing_or_non_mapping_config_is_ignored(tmp_path):
    listing = tmp_path / "list.yml"
    listing.write_text("- a\n- b\n", encoding="utf-8")

    assert load_settings(str(tmp_path / "absent.yml"), {}).sources_used == []
    assert load_settings(str(listing), {}).sources_used == []


def test_flags_from_booleans():
    settings = Settings(skip_empty=True, read_ahead=False, decode_as_record=False)

    assert settings.flags() == StreamFlag.SKIP_EMPTY
