"""Local configuration stored in a YAML file, overridable by environment."""

from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from .network_validator import NetworkValidator

CLIENT_ID_KEY = "client_id"
TOKEN_KEY = "token"
SCHEMA_VERSION_KEY = "schema_version"
OFFLINE_KEY = "offline"
POLICY_CONFIG_KEY = "policy_config"
SCHEMA_LOCATIONS_KEY = "schema_locations"

ENV_PREFIX = "DATREE_"
CONFIG_NAME = "config"
CONFIG_TYPE = "yaml"

_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


class TokenClient(Protocol):
    def create_token(self) -> str:
        """Create a new token; an empty string means none was issued."""


@dataclass
class LocalConfig:
    token: str = ""
    client_id: str = ""
    schema_version: str = ""
    offline: str = ""
    policy_config: str = ""
    schema_locations: list[str] = field(default_factory=list)


def default_config_home() -> Path:
    return Path.home() / ".datree"


def init_local_config_file(config_home: str | os.PathLike[str]) -> Path:
    """Make sure the configuration directory and file exist; return the file."""
    home = Path(config_home)
    path = home / f"{CONFIG_NAME}.{CONFIG_TYPE}"
    if not home.exists():
        home.mkdir()
    if not path.exists():
        path.touch()
    return path


def _short_uuid() -> str:
    number = uuid.uuid4().int
    digits = []
    for _ in range(22):
        number, remainder = divmod(number, len(_ALPHABET))
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [_to_string(item) for item in value]
    return [_to_string(value)]


def _validate_key_value(key: str, value: str) -> None:
    if key == OFFLINE_KEY and value not in ("fail", "local"):
        raise ValueError(
            f"invalid offline configuration value- {json.dumps(value)}\n"
            "Valid offline values are - fail, local"
        )


class LocalConfigClient:
    """Reads and writes the local configuration file."""

    def __init__(
        self,
        token_client: TokenClient,
        network_validator: NetworkValidator,
        config_home: str | os.PathLike[str] | None = None,
    ) -> None:
        self.token_client = token_client
        self.network_validator = network_validator
        self.config_home = Path(config_home) if config_home else default_config_home()
        self._settings: dict[str, Any] = {}

    @property
    def config_path(self) -> Path:
        return self.config_home / f"{CONFIG_NAME}.{CONFIG_TYPE}"

    def get_local_configuration(self) -> LocalConfig:
        """Load the configuration, filling in and saving missing defaults."""
        self._load(create=True)

        token = self._get_string(TOKEN_KEY)
        client_id = self._get_string(CLIENT_ID_KEY)
        offline = self._get_string(OFFLINE_KEY)

        if not offline:
            offline = "fail"
            self._set_variable(OFFLINE_KEY, offline)
        self.network_validator.set_offline_mode(offline)

        if not token:
            token = self.token_client.create_token() or ""
            if token:
                self._set_variable(TOKEN_KEY, token)

        if not client_id:
            client_id = _short_uuid()
            self._set_variable(CLIENT_ID_KEY, client_id)

        return LocalConfig(
            token=token,
            client_id=client_id,
            schema_version=self._get_string(SCHEMA_VERSION_KEY),
            offline=offline,
            policy_config=self._get_string(POLICY_CONFIG_KEY),
            schema_locations=_to_string_list(self._raw(SCHEMA_LOCATIONS_KEY)),
        )

    def set(self, key: str, value: str) -> None:
        """Validate and store one configuration value."""
        self._load(create=True)
        _validate_key_value(key, value)
        if key == POLICY_CONFIG_KEY:
            self._settings[key] = os.path.abspath(value)
        elif key == SCHEMA_LOCATIONS_KEY:
            self._settings[key] = value.split(",")
        else:
            self._settings[key] = value
        self._write()

    def get(self, key: str) -> str:
        if self.config_path.exists():
            self._load(create=False)
        return self._get_string(key)

    def _load(self, create: bool) -> None:
        path = init_local_config_file(self.config_home) if create else self.config_path
        with path.open(encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"configuration file {path} does not hold a mapping")
        self._settings = data

    def _write(self) -> None:
        with self.config_path.open("w", encoding="utf-8") as stream:
            yaml.safe_dump(self._settings, stream, default_flow_style=False)

    def _set_variable(self, key: str, value: str) -> None:
        if not value:
            raise ValueError("value is empty")
        self._settings[key] = value
        self._write()
        self._load(create=False)

    def _raw(self, key: str) -> Any:
        env_value = os.environ.get(ENV_PREFIX + key.upper())
        if env_value:
            return env_value
        return self._settings.get(key)

    def _get_string(self, key: str) -> str:
        return _to_string(self._raw(key))