import json
import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from infra.adb import resolve_adb_path
from infra.simctl import resolve_xcrun_path

ROOT_DIR = Path(__file__).resolve().parents[1]
ENV_FILES = (ROOT_DIR / ".env", ROOT_DIR / ".env.example")
DEFAULT_CONFIG_DIR = Path.home() / ".mobile-dev-mcp"

UPGRADE_URL = "https://codecontrol.ai/mcp"


def _read_env_values() -> dict:
    values = {}
    for path in ENV_FILES:
        if not path.exists():
            continue
        values.update(dotenv_values(path))
    values.update(os.environ)
    return values


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[str(path) for path in ENV_FILES],
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    config_dir: Path = Field(
        default=DEFAULT_CONFIG_DIR,
        validation_alias=AliasChoices("MOBILEDEV_CONFIG_DIR", "configDir"),
    )
    upgrade_url: str = Field(
        default=UPGRADE_URL,
        validation_alias=AliasChoices("MOBILEDEV_UPGRADE_URL", "upgradeUrl"),
    )
    adb_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MOBILEDEV_ADB_PATH", "ADB_PATH", "adbPath"),
    )
    xcrun_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MOBILEDEV_XCRUN_PATH", "XCRUN_PATH", "xcrunPath"),
    )
    metro_port: int = Field(
        default=8081,
        validation_alias=AliasChoices("MOBILEDEV_METRO_PORT", "METRO_PORT", "metroPort"),
    )
    dump_timeout: float = Field(
        default=10.0,
        validation_alias=AliasChoices("MOBILEDEV_DUMP_TIMEOUT", "dumpTimeout"),
    )
    max_dump_chars: int = Field(
        default=10 * 1024 * 1024,
        validation_alias=AliasChoices("MOBILEDEV_MAX_DUMP_CHARS", "maxDumpChars"),
    )
    max_elements: int = Field(
        default=50000,
        validation_alias=AliasChoices("MOBILEDEV_MAX_ELEMENTS", "maxElements"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("MOBILEDEV_LOG_LEVEL", "LOG_LEVEL", "logLevel"),
    )
    http_host: str = Field(
        default="127.0.0.1",
        validation_alias=AliasChoices("MOBILEDEV_HTTP_HOST", "httpHost"),
    )
    http_port: int = Field(
        default=8765,
        validation_alias=AliasChoices("MOBILEDEV_HTTP_PORT", "httpPort"),
    )

    @field_validator("adb_path", "xcrun_path", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return str(value or "INFO").strip().upper()

    @property
    def license_cache_file(self) -> Path:
        return self.config_dir / "license.json"

    @property
    def resolved_adb_path(self) -> str:
        return self.adb_path or resolve_adb_path()

    @property
    def resolved_xcrun_path(self) -> str:
        return self.xcrun_path or resolve_xcrun_path()

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        # Environment wins over the JSON config file passed as init kwargs.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Optional[str] = None) -> Settings:
    data = {}
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError("config not found: {}".format(path))
        data = _load_json(path)
    else:
        config_dir = _read_env_values().get("MOBILEDEV_CONFIG_DIR")
        candidate = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        candidate = candidate / "config.json"
        if candidate.exists():
            try:
                data = _load_json(candidate)
            except ValueError:
                data = {}
    return Settings(**data)


def _load_json(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("config must be a JSON object: {}".format(path))
    return data
