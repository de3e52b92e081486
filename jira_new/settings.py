"""Config store: a flat JSON file plus env-var fallbacks, resolved into JiraSettings."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from jira_new.errors import ValidationError
from jira_new.models import Project

logger = logging.getLogger("jira_new.settings")

CONFIG_PATH = Path.home() / ".config" / "jira-tool" / "config.json"

# settings field -> key in config.json
_FILE_KEYS = {
    "jira_url": "jiraUrl",
    "email": "email",
    "api_token": "apiToken",
    "default_project": "defaultProject",
}


class JiraSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JIRA_NEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jira_url: str | None = None  # https://company.atlassian.net, no trailing slash
    email: str | None = None
    api_token: SecretStr | None = None
    default_project: Project | None = None

    @field_validator("jira_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.strip().rstrip("/") if value else value

    @property
    def is_complete(self) -> bool:
        return bool(self.jira_url and self.email and self.api_token and self.api_token.get_secret_value())


def load_config() -> dict[str, Any]:
    """Read the raw config file, returning {} if it is missing or not a JSON object."""
    if not CONFIG_PATH.exists():
        return {}
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    if not isinstance(data, dict):
        logger.debug("Ignoring config %s: top level is not an object", CONFIG_PATH)
        return {}
    return data


def save_config(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Merge updates into the config file at the top level and write it back.

    Plain read-modify-write: no locking, and the write is not atomic. Concurrent
    invocations are unsupported; the last writer wins.
    """
    merged = {**load_config(), **updates}
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(merged, indent=2), encoding="utf-8")
    logger.debug("Wrote keys %s to %s", sorted(updates), CONFIG_PATH)
    return merged


def get_settings() -> JiraSettings:
    """Resolve JiraSettings from the config file, falling back to JIRA_NEW_* env vars.

    Values in config.json win over the environment. A file value that does not
    validate is dropped on its own, so the rest of the file still applies. An
    invalid JIRA_NEW_* value raises ValidationError.
    """
    raw = load_config()
    file_values = {field: raw[key] for field, key in _FILE_KEYS.items() if raw.get(key) is not None}
    while True:
        try:
            return JiraSettings(**file_values)
        except SettingsError as exc:
            raise ValidationError(f"Invalid JIRA_NEW_* environment variable: {exc}") from exc
        except pydantic.ValidationError as exc:
            failed = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
            from_file = failed & file_values.keys()
            if not from_file:
                names = ", ".join(f"JIRA_NEW_{field.upper()}" for field in sorted(failed)) or "JIRA_NEW_*"
                raise ValidationError(f"Invalid value in environment variable {names}") from exc
            for field in from_file:
                logger.debug("Ignoring invalid %s in %s", _FILE_KEYS[field], CONFIG_PATH)
                del file_values[field]
