"""Configuration loading from YAML, environment and GitHub Action inputs.

Secrets (tokens) are taken from environment variables or from files
(Docker/CI secrets). Never put real tokens in config files committed to the
repo.

Action inputs are exposed by the runner as INPUT_<NAME> environment
variables and take precedence over everything else.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when a required setting is missing."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}

# Action input name -> (section, field)
ACTION_INPUTS = {
    "GITHUB_TOKEN": ("github", "token"),
    "JIRA_BASE_URL": ("jira", "base_url"),
    "JIRA_USER_EMAIL": ("jira", "user_email"),
    "JIRA_API_TOKEN": ("jira", "api_token"),
    "TICKET_ID": ("gate", "ticket_id"),
}


class GitHubConfig(BaseSettings):
    """GitHub API settings and the Actions runner context."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="Actions token or PAT; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    repository: str | None = Field(default=None, description="Target repo e.g. owner/repo")
    event_path: str | None = Field(default=None, description="Path to the triggering event payload")
    output: str | None = Field(default=None, description="Path of the step output file")


class JiraConfig(BaseSettings):
    """Jira issue tracker settings."""

    model_config = SettingsConfigDict(env_prefix="JIRA_", extra="ignore")

    base_url: str | None = Field(default=None, description="Jira site, e.g. https://acme.atlassian.net")
    user_email: str | None = Field(default=None, description="Account email for basic auth")
    api_token: str | None = Field(default=None, description="API token; prefer env or secret file")


class GateConfig(BaseSettings):
    """Gate behaviour."""

    model_config = SettingsConfigDict(env_prefix="GATE_", extra="ignore")

    ticket_id: str | None = Field(default=None, description="Ticket to check in direct ticket mode")
    base_branch: str | None = Field(
        default=None, description="Destination branch used by release rules in direct ticket mode"
    )
    # Applied to each network call; a call past the bound fails and is not retried
    timeout_seconds: float = Field(default=30, gt=0, le=300, description="Per-request timeout")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    jira: JiraConfig = Field(default_factory=JiraConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def jira_api_token_resolved(self) -> str | None:
        """Resolve Jira API token from config, env or secret file."""
        t = self.jira.api_token
        if t and not t.startswith("${"):
            return t
        return _read_secret("JIRA_API_TOKEN", "JIRA_API_TOKEN_FILE")

    def require(self, *names: str) -> None:
        """Raise ConfigError listing every dotted setting that is empty.

        Token settings are checked through their resolved values.
        """
        resolved = {
            "github.token": self.github_token_resolved,
            "jira.api_token": self.jira_api_token_resolved,
        }
        missing = []
        for name in names:
            if name in resolved:
                value = resolved[name]
            else:
                section, field = name.split(".", 1)
                value = getattr(getattr(self, section), field)
            if not value:
                missing.append(name)
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _apply_action_inputs(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay non-empty INPUT_* variables onto the raw section dicts."""
    merged = {key: dict(val or {}) for key, val in raw.items() if isinstance(val, dict) or val is None}
    for input_name, (section, field) in ACTION_INPUTS.items():
        value = _current_env.get(f"INPUT_{input_name}", "").strip()
        if value:
            merged.setdefault(section, {})[field] = value
    return merged


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file, environment and Action inputs.

    The YAML file is optional: inside a GitHub Action everything usually
    comes from the environment. Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE,
    JIRA_API_TOKEN or JIRA_API_TOKEN_FILE.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    raw: dict[str, Any] = {}
    path = config_path or Path("config.yaml")
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)
    raw = _apply_action_inputs(raw)

    # Build nested models from raw dict; env fills whatever YAML leaves out
    github = GitHubConfig(**(raw.get("github") or {}))
    jira = JiraConfig(**(raw.get("jira") or {}))
    gate = GateConfig(**(raw.get("gate") or {}))
    logging = LoggingConfig(**(raw.get("logging") or {}))

    return AppConfig(github=github, jira=jira, gate=gate, logging=logging)
