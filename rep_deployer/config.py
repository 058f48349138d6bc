"""Application configuration settings."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from rep_deployer.domain.entities import (
    DEFAULT_DEPLOYMENT_PATH_PREFIX,
    AuthType,
    DeploymentTarget,
)

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"
CONFIG_DIR_ENV = "CONFIG_DIR"
DEFAULT_CONFIG_DIR = "config"

logger = logging.getLogger(__name__)


def _read_json_file(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at ``path`` or an empty mapping."""

    if not path.is_file():
        return {}
    try:
        raw = path.read_text(encoding="utf-8")
        parsed = json.loads(raw or "{}")
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Failed to parse configuration file at %s: %s", path, exc)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring configuration file at %s: expected a JSON object", path)
        return {}
    return parsed


def deep_merge(*sources: dict[str, Any]) -> dict[str, Any]:
    """Merge ``sources`` left to right.

    Nested mappings are merged key by key; lists and scalars from later
    sources replace earlier values. ``None`` never overrides a value.
    """

    merged: dict[str, Any] = {}
    for source in sources:
        for key, value in source.items():
            if isinstance(value, dict):
                current = merged.get(key)
                merged[key] = deep_merge(current if isinstance(current, dict) else {}, value)
            elif isinstance(value, list):
                merged[key] = list(value)
            elif value is not None:
                merged[key] = value
    return merged


def load_layered_config(config_dir: Path) -> dict[str, Any]:
    """Return the default config overlaid with the local overrides."""

    default_config = _read_json_file(config_dir / "default" / "config.json")
    local_config = _read_json_file(config_dir / "local" / "config.json")
    return deep_merge(default_config, local_config)


# Nested camelCase paths of the config file and the settings field each one fills.
CONFIG_KEY_PATHS: dict[tuple[str, ...], str] = {
    ("server", "host"): "host",
    ("server", "port"): "port",
    ("server", "portRetryLimit"): "port_retry_limit",
    ("server", "sessionSecret"): "session_secret",
    ("server", "session", "cookie", "secure"): "session_cookie_secure",
    ("server", "session", "cookie", "maxAgeHours"): "session_cookie_max_age_hours",
    ("server", "corsOrigins"): "cors_origins",
    ("uploads", "directory"): "upload_dir",
    ("uploads", "allowedExtensions"): "allowed_extensions",
    ("uploads", "maxFileSizeMB"): "max_file_size",
    ("keycloak", "url"): "keycloak_url",
    ("keycloak", "realm"): "keycloak_realm",
    ("keycloak", "clientId"): "keycloak_client_id",
    ("keycloak", "verifyCertificates"): "keycloak_verify_certificates",
    ("keycloak", "requestTimeoutSeconds"): "identity_request_timeout_seconds",
    ("deploy", "maxWorkers"): "deploy_max_workers",
    ("deploy", "requestTimeoutSeconds"): "deploy_request_timeout_seconds",
    ("logging", "level"): "log_level",
    ("bridgeServers",): "bridge_servers",
}
CONFIG_SECTIONS = frozenset(path[0] for path in CONFIG_KEY_PATHS)


def _lookup(data: dict[str, Any], path: tuple[str, ...]) -> Any:
    value: Any = data
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def config_to_fields(data: dict[str, Any], field_names: Iterable[str]) -> dict[str, Any]:
    """Translate a merged config document into settings field values.

    The nested camelCase layout is the documented one; top-level snake_case
    field names are accepted too and lose to a nested value for the same
    field. Unknown top-level keys are logged and ignored.
    """

    known_fields = set(field_names)
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if key in known_fields:
            fields[key] = value
        elif key not in CONFIG_SECTIONS:
            logger.warning("Ignoring unknown configuration key '%s'", key)

    for path, field_name in CONFIG_KEY_PATHS.items():
        value = _lookup(data, path)
        if value is not None:
            fields[field_name] = value
    return fields


class LayeredJsonConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by ``default`` and ``local`` JSON config files."""

    def __init__(self, settings_cls: type[BaseSettings], config_dir: Path) -> None:
        super().__init__(settings_cls)
        self._data = config_to_fields(
            load_layered_config(config_dir), settings_cls.model_fields
        )

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


def _split_list(value: Any) -> Any:
    """Accept comma separated strings as well as JSON arrays."""

    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.startswith("["):
        return json.loads(text)
    return [item.strip() for item in text.split(",") if item.strip()]


class BridgeServerSettings(BaseModel):
    """Configuration entry describing a deployment target."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str = Field(min_length=1)
    scheme: str = "https"
    host: str = Field(min_length=1)
    port: int = Field(gt=0, lt=65536)
    auth_type: AuthType = AuthType.BASIC
    username: str
    password: str
    keycloak_url: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    deployment_path_prefix: str = DEFAULT_DEPLOYMENT_PATH_PREFIX
    verify_certificates: bool = False

    @field_validator("deployment_path_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith("/"):
            value = f"/{value}"
        return value

    @model_validator(mode="after")
    def _validate_oauth_fields(self) -> "BridgeServerSettings":
        if self.auth_type is AuthType.OAUTH and not (self.keycloak_url and self.client_id):
            raise ValueError(
                f"Server '{self.name}' uses oauth and requires keycloakUrl and clientId"
            )
        return self

    def to_entity(self) -> DeploymentTarget:
        return DeploymentTarget(
            name=self.name,
            scheme=self.scheme,
            host=self.host,
            port=self.port,
            auth_type=self.auth_type,
            username=self.username,
            password=self.password,
            keycloak_url=self.keycloak_url,
            client_id=self.client_id,
            client_secret=self.client_secret,
            deployment_path_prefix=self.deployment_path_prefix,
            verify_certificates=self.verify_certificates,
        )


class Settings(BaseSettings):
    """Application configuration values loaded from files and environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface the HTTP server binds to")
    port: int = Field(default=3000, gt=0, lt=65536)
    port_retry_limit: int = Field(
        default=5,
        ge=0,
        description="How many consecutive ports to try when the configured one is busy",
    )
    session_secret: str = Field(
        description="Secret key used to sign session cookies", min_length=1
    )
    session_cookie_secure: bool = False
    session_cookie_max_age_hours: float = Field(default=24, gt=0)

    upload_dir: Path = Path("uploads")
    allowed_extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [".rep"]
    )
    max_file_size: int = Field(default=100, gt=0, description="Upload size limit in MB")

    keycloak_url: str = "https://ec2-54-151-161-17.ap-southeast-1.compute.amazonaws.com/ots2/keycloak"
    keycloak_realm: str = "PAS"
    keycloak_client_id: str = "authenticator-service"
    keycloak_verify_certificates: bool = False

    bridge_servers: list[BridgeServerSettings] = Field(default_factory=list)
    deploy_max_workers: int = Field(
        default=4, gt=0, description="Concurrent deployments allowed per request"
    )
    deploy_request_timeout_seconds: float = Field(default=120, gt=0)
    identity_request_timeout_seconds: float = Field(default=30, gt=0)

    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_dir = Path(os.getenv(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR))
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LayeredJsonConfigSource(settings_cls, config_dir),
            file_secret_settings,
        )

    @field_validator("session_secret", mode="before")
    @classmethod
    def _strip_secret(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("allowed_extensions", "cors_origins", mode="before")
    @classmethod
    def _parse_list(cls, value: Any) -> Any:
        return _split_list(value)

    @field_validator("allowed_extensions")
    @classmethod
    def _default_extensions(cls, value: list[str]) -> list[str]:
        # An empty allowlist falls back to the historical default.
        return value or [".rep"]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size * 1024 * 1024

    @property
    def session_max_age_seconds(self) -> int:
        return int(self.session_cookie_max_age_hours * 60 * 60)

    @property
    def keycloak_token_url(self) -> str:
        base = self.keycloak_url.rstrip("/")
        return f"{base}/realms/{self.keycloak_realm}/protocol/openid-connect/token"

    def deployment_targets(self) -> list[DeploymentTarget]:
        """Return the configured targets as domain entities, in order."""

        return [server.to_entity() for server in self.bridge_servers]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "BridgeServerSettings",
    "CONFIG_KEY_PATHS",
    "Settings",
    "config_to_fields",
    "deep_merge",
    "get_settings",
    "load_layered_config",
    "reset_settings_cache",
]
