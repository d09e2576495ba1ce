"""Configuration management for devops-actions using YAML files."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml

from devops_actions.errors import ConfigError

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".devops-actions"
CONFIG_FILE_NAME = "config.yaml"
ENV_PREFIX = "DEVOPS_ACTIONS_"


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping; a missing or empty file is an empty mapping."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"expected a mapping of keys to values, got {type(data).__name__}")
    return data


class Config:
    """Dotted configuration keys stored in YAML files.

    Local config lives in .devops-actions/config.yaml in the current directory, global
    config in ~/.devops-actions/config.yaml. Reads check the environment first
    (``github.token`` is read from ``DEVOPS_ACTIONS_GITHUB_TOKEN``), then the file this
    instance was opened on, then the global file. Writes only touch the opened file.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Open a config file.

        Args:
            use_global: Open the global file instead of the local one
            config_dir: Directory holding config.yaml (overrides the default location)
        """
        global_dir = Path.home() / CONFIG_DIR_NAME
        if config_dir is None:
            config_dir = global_dir if use_global else Path.cwd() / CONFIG_DIR_NAME
        self.config_dir = Path(config_dir)
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self.is_global = use_global

        try:
            self._values = _read_yaml(self.config_file)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", config_file=str(self.config_file), error=str(e))
            raise ConfigError(f"Failed to load config from {self.config_file}: {e}") from e

        self._fallback: dict[str, Any] = {}
        global_file = global_dir / CONFIG_FILE_NAME
        if not self.is_global and global_file != self.config_file:
            try:
                self._fallback = _read_yaml(global_file)
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Ignoring unreadable global config", config_file=str(global_file), error=str(e))

        logger.debug("Config opened", config_file=str(self.config_file), keys=len(self._values))

    @staticmethod
    def env_name(key: str) -> str:
        """Name of the environment variable that overrides ``key``."""
        return ENV_PREFIX + key.replace(".", "_").replace("-", "_").upper()

    def get(self, key: str, default: Any = None) -> Any:
        env_value = os.environ.get(self.env_name(key))
        if env_value:
            logger.debug("Config value from environment", key=key)
            return env_value

        for source, values in (("file", self._values), ("global", self._fallback)):
            if key in values:
                logger.debug("Config value from file", key=key, source=source)
                return values[key]

        logger.debug("Config value not set", key=key)
        return default

    def set(self, key: str, value: Any) -> None:
        logger.debug("Setting config value", key=key, config_file=str(self.config_file))
        self._values[key] = value
        self._write()

    def unset(self, key: str) -> None:
        if key not in self._values:
            return
        logger.debug("Unsetting config value", key=key, config_file=str(self.config_file))
        del self._values[key]
        self._write()

    def _write(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._values, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error("Failed to save config", config_file=str(self.config_file), error=str(e))
            raise ConfigError(f"Failed to save config to {self.config_file}: {e}") from e

    def list(self) -> dict[str, Any]:
        """Values from the files, the opened file shadowing the global one.

        Environment overrides are not included.
        """
        return {**self._fallback, **self._values}


def get_config(use_global: bool = False) -> Config:
    return Config(use_global=use_global)


@dataclass(frozen=True)
class Settings:
    """Everything a handler needs to know about the environment it runs in."""

    github_organization: str = ""
    github_token: str = ""
    # The account our automation writes as. Notifications about its own pull requests are not sent.
    github_write_user: str = "devops-bot"
    jira_host: str = ""
    jira_email: str = ""
    jira_token: str = ""
    jira_repository_field: str = "customfield_10100"
    slack_token: str = ""
    credentials_api_prefix: str = ""
    credentials_api_secret: str = ""
    credentials_signature_header: str = "X-Credentials-Signature"
    suppressed_checks: tuple[str, ...] = ("GitGuardian", "Codecov")
    has_conflicts_label: str = "has-conflicts"
    has_issues_label: str = "has-issues"
    in_progress_label: str = "in-progress"
    please_review_label: str = "please-review"
    release_label: str = "release"
    status_validated: str = "Validated"
    status_tech_review: str = "Tech Review"
    develop_branch: str = "develop"
    master_branches: tuple[str, ...] = ("master", "main")
    epic_title_prefix: str = "[Epic] "
    http_timeout: float = 30.0

    @property
    def release_branch(self) -> str:
        """The branch release candidates are built on."""
        return f"{self.github_write_user}/release-candidate"

    def issue_url(self, issue_key: str) -> str:
        """Browser URL of a Jira issue."""
        return f"https://{self.jira_host}/browse/{issue_key}"


# Settings field -> config key. Required keys must be present for load_settings to succeed.
_SETTINGS_KEYS: dict[str, str] = {
    "github_organization": "github.organization",
    "github_token": "github.token",
    "github_write_user": "github.write_user",
    "jira_host": "jira.host",
    "jira_email": "jira.email",
    "jira_token": "jira.token",
    "jira_repository_field": "jira.repository_field",
    "slack_token": "slack.token",
    "credentials_api_prefix": "credentials.api_prefix",
    "credentials_api_secret": "credentials.api_secret",
    "credentials_signature_header": "credentials.signature_header",
    "suppressed_checks": "checks.suppressed",
    "has_conflicts_label": "labels.has_conflicts",
    "has_issues_label": "labels.has_issues",
    "in_progress_label": "labels.in_progress",
    "please_review_label": "labels.please_review",
    "release_label": "labels.release",
    "status_validated": "jira.status_validated",
    "status_tech_review": "jira.status_tech_review",
    "develop_branch": "github.develop_branch",
    "master_branches": "github.master_branches",
    "epic_title_prefix": "github.epic_title_prefix",
    "http_timeout": "http.timeout",
}

REQUIRED_KEYS = (
    "github.organization",
    "github.token",
    "jira.host",
    "jira.email",
    "jira.token",
    "slack.token",
    "credentials.api_prefix",
    "credentials.api_secret",
)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple(str(item) for item in value)


def load_settings(config: Config | None = None) -> Settings:
    """Build Settings from configuration.

    Raises:
        ConfigError: If a required key is missing or a value has the wrong type
    """
    config = config or get_config()

    missing = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing:
        raise ConfigError(
            "Missing required configuration: "
            + ", ".join(f"{key} (env {Config.env_name(key)})" for key in missing)
        )

    values: dict[str, Any] = {}
    for attr, key in _SETTINGS_KEYS.items():
        value = config.get(key)
        if value is None:
            continue
        if attr in ("suppressed_checks", "master_branches"):
            value = _as_tuple(value)
        elif attr == "http_timeout":
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {key}: {value!r}") from e
        else:
            value = str(value)
        values[attr] = value

    settings = Settings(**values)
    logger.debug("Settings loaded", organization=settings.github_organization, write_user=settings.github_write_user)
    return settings
