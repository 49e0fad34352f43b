from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml

from csvstream.domain.flags import StreamFlag, buildFlags


@dataclass(frozen=True)
class Settings:
    # CSV control
    delimiter: str = ","
    quote: str = '"'
    escape: str = "\\"

    # Writer
    newline: str = "\n"
    flush_threshold: int | None = 500

    # Cursor flags
    skip_empty: bool = False
    read_ahead: bool = False
    decode_as_record: bool = True

    # Stream
    encoding: str = "utf-8"

    # Logging
    log_dir: str = "./logs"
    log_level: str = "INFO"

    def flags(self) -> StreamFlag:
        return buildFlags(
            skip_empty=self.skip_empty,
            read_ahead=self.read_ahead,
            decode_as_record=self.decode_as_record,
        )


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


_DISABLED = ("none", "null", "off")


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    # no strip: "\t" is a valid delimiter
    v = os.getenv(name)
    if v is None or v == "":
        return None
    return v


def _parse_bool(v: str | None) -> bool | None:
    if v is None:
        return None
    vv = v.strip().lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean env value: {v}")


def _parse_threshold(v) -> int | None:
    if v is None:
        return None
    if isinstance(v, str):
        if v.strip().lower() in _DISABLED:
            return None
        return int(v.strip())
    return int(v)


def _unescape_newline(v: str) -> str:
    # env/YAML users write "\r\n" literally
    return v.replace("\\r", "\r").replace("\\n", "\n")


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: overrides > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {
        "delimiter": _env_get("CSVSTREAM_DELIMITER"),
        "quote": _env_get("CSVSTREAM_QUOTE"),
        "escape": _env_get("CSVSTREAM_ESCAPE"),
        "newline": _env_get("CSVSTREAM_NEWLINE"),
        "flush_threshold": _env_get("CSVSTREAM_FLUSH_THRESHOLD"),
        "skip_empty": _env_get("CSVSTREAM_SKIP_EMPTY"),
        "read_ahead": _env_get("CSVSTREAM_READ_AHEAD"),
        "decode_as_record": _env_get("CSVSTREAM_DECODE_AS_RECORD"),
        "encoding": _env_get("CSVSTREAM_ENCODING"),
        "log_dir": _env_get("CSVSTREAM_LOG_DIR"),
        "log_level": _env_get("CSVSTREAM_LOG_LEVEL"),
    }
    if any(v is not None for v in env.values()):
        sources.append("env")

    # merge config -> env -> overrides
    merged = {
        "delimiter": cfg.get("delimiter", defaults.delimiter),
        "quote": cfg.get("quote", defaults.quote),
        "escape": cfg.get("escape", defaults.escape),

        "newline": cfg.get("newline", defaults.newline),
        "flush_threshold": cfg.get("flush_threshold", defaults.flush_threshold),

        "skip_empty": cfg.get("skip_empty", defaults.skip_empty),
        "read_ahead": cfg.get("read_ahead", defaults.read_ahead),
        "decode_as_record": cfg.get("decode_as_record", defaults.decode_as_record),

        "encoding": cfg.get("encoding", defaults.encoding),
        "log_dir": cfg.get("log_dir", defaults.log_dir),
        "log_level": cfg.get("log_level", defaults.log_level),
    }

    # apply env
    for key in ("delimiter", "quote", "escape", "encoding", "log_dir", "log_level"):
        if env[key] is not None:
            merged[key] = env[key]

    if env["newline"] is not None:
        merged["newline"] = env["newline"]
    if env["flush_threshold"] is not None:
        merged["flush_threshold"] = env["flush_threshold"]

    for key in ("skip_empty", "read_ahead", "decode_as_record"):
        if env[key] is not None:
            merged[key] = _parse_bool(env[key])

    # 3) apply explicit overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        delimiter=merged["delimiter"],
        quote=merged["quote"],
        escape=merged["escape"],
        newline=_unescape_newline(str(merged["newline"])),
        flush_threshold=_parse_threshold(merged["flush_threshold"]),
        skip_empty=bool(merged["skip_empty"]),
        read_ahead=bool(merged["read_ahead"]),
        decode_as_record=bool(merged["decode_as_record"]),
        encoding=merged["encoding"],
        log_dir=merged["log_dir"],
        log_level=merged["log_level"],
    )

    return LoadedSettings(settings=settings, sources_used=sources)
