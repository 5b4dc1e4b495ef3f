from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/oil_bulletin.yml``)
- Validate against the bundled JSON schema (config_schema.json, no extra keys)
- Apply defaults for every missing key
- Apply environment overrides (OIL_BULLETIN_PAGE_URL, OIL_BULLETIN_OUTPUT_DIR)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/oil_bulletin.yml")

DEFAULT_BASE_URL = "https://energy.ec.europa.eu"
DEFAULT_PAGE_PATH = "/data-and-analysis/weekly-oil-bulletin_en"
DEFAULT_LINK_TEXT = "prices with taxes"

ENV_PAGE_URL = "OIL_BULLETIN_PAGE_URL"
ENV_OUTPUT_DIR = "OIL_BULLETIN_OUTPUT_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class BulletinSourceConfig:
    base_url: str = DEFAULT_BASE_URL
    page_path: str = DEFAULT_PAGE_PATH
    link_text: str = DEFAULT_LINK_TEXT
    page_url_override: str | None = None  # full page URL from the environment

    @property
    def page_url(self) -> str:
        if self.page_url_override:
            return self.page_url_override
        return f"{self.base_url.rstrip('/')}{self.page_path}"


@dataclass(frozen=True)
class AppConfig:
    bulletin: BulletinSourceConfig = field(default_factory=BulletinSourceConfig)
    output_directory: str = "./data"
    request_timeout: float = 30.0
    keep_download: bool = False
    sheet: str | None = None  # None -> first sheet
    aggregate_markers_ci: tuple[str, ...] = ()  # added on top of the built-in markers
    aggregate_markers_exact: tuple[str, ...] = ()
    country_codes: dict[str, str] = field(default_factory=dict)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid or config violating the schema.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def apply_env_overrides(cfg: AppConfig, environ: Mapping[str, str] | None = None) -> AppConfig:
    env = os.environ if environ is None else environ
    page_url = env.get(ENV_PAGE_URL)
    output_dir = env.get(ENV_OUTPUT_DIR)
    if page_url:
        cfg = replace(cfg, bulletin=replace(cfg.bulletin, page_url_override=page_url))
    if output_dir:
        cfg = replace(cfg, output_directory=output_dir)
    return cfg


def config_from_dict(data: dict[str, Any]) -> AppConfig:
    _validate_config_schema(data)
    src = data.get("bulletin") or {}
    markers = data.get("aggregate_markers") or {}
    return AppConfig(
        bulletin=BulletinSourceConfig(
            base_url=src.get("base_url", DEFAULT_BASE_URL),
            page_path=src.get("page_path", DEFAULT_PAGE_PATH),
            link_text=src.get("link_text", DEFAULT_LINK_TEXT),
        ),
        output_directory=data.get("output_directory", "./data"),
        request_timeout=float(data.get("request_timeout", 30)),
        keep_download=bool(data.get("keep_download", False)),
        sheet=data.get("sheet"),
        aggregate_markers_ci=tuple(markers.get("case_insensitive", ())),
        aggregate_markers_exact=tuple(markers.get("exact", ())),
        country_codes=dict(data.get("country_codes") or {}),
    )


def load_config(path: Path | None = None) -> AppConfig:
    """Load config from ``path``.

    With ``path=None`` the default location is used and a missing file simply
    means defaults. An explicitly given path must exist.
    """
    explicit = path is not None
    cfg_path = path if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {cfg_path}")
        return apply_env_overrides(config_from_dict({}))
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {cfg_path}")
    return apply_env_overrides(config_from_dict(data))
