"""Loading and saving the gitme configuration file.

Example config.toml:
  username = "octocat"
  # Optional: falls back to GITHUB_TOKEN, then `gh auth token`
  api_key = "ghp_..."
  refresh_interval = 30
  fetch_timeout = 20

  # Command run by the review action, from the repository's local_path
  command = "ghostty"
  command_args = ["-e", "nvim"]

  [[repositories]]
  owner = "dagster-io"
  name = "erk"
  local_path = "~/code/erk"
"""

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import click
import tomli_w

from gitme.gateway.github.types import RepositoryConfig, RepositoryId

DEFAULT_REFRESH_INTERVAL = 30.0
DEFAULT_FETCH_TIMEOUT = 20.0


class ConfigError(Exception):
    """The configuration file is missing required values or is malformed."""


@dataclass(frozen=True)
class GitmeConfig:
    """In-memory representation of config.toml."""

    username: str
    api_key: str | None
    command: str | None
    command_args: tuple[str, ...]
    refresh_interval: float
    fetch_timeout: float
    repositories: tuple[RepositoryConfig, ...]

    def find_repository(self, repo_id: RepositoryId) -> RepositoryConfig | None:
        """Return the configured repository with this identity, if any."""
        for repo in self.repositories:
            if repo.repo_id == repo_id:
                return repo
        return None


def default_config_path() -> Path:
    """Location of config.toml in the platform's per-user config directory."""
    return Path(click.get_app_dir("gitme")) / "config.toml"


def load_config(path: Path) -> GitmeConfig | None:
    """Load config.toml if present.

    Args:
        path: Path to config.toml

    Returns:
        Parsed config, or None if the file doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or misses required values
    """
    if not path.exists():
        return None

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse config file {path}: {e}"
        raise ConfigError(msg) from e

    return parse_config(data)


def parse_config(data: dict[str, Any]) -> GitmeConfig:
    """Build a GitmeConfig from decoded TOML data."""
    username = data.get("username")
    if not username:
        msg = "Config is missing 'username'"
        raise ConfigError(msg)

    repositories: list[RepositoryConfig] = []
    seen: set[RepositoryId] = set()
    for entry in data.get("repositories", []):
        owner = entry.get("owner")
        name = entry.get("name")
        if not owner or not name:
            msg = f"Repository entry needs both 'owner' and 'name': {entry}"
            raise ConfigError(msg)
        repo_id = RepositoryId(owner=str(owner), name=str(name))
        if repo_id in seen:
            msg = f"The repository {repo_id} is listed twice in the config"
            raise ConfigError(msg)
        seen.add(repo_id)
        # system_path is the key written by older versions
        local_path = entry.get("local_path", entry.get("system_path"))
        repositories.append(
            RepositoryConfig(
                repo_id=repo_id,
                local_path=str(local_path) if local_path is not None else None,
            )
        )

    command = data.get("command")
    api_key = data.get("api_key")
    return GitmeConfig(
        username=str(username),
        api_key=str(api_key) if api_key else None,
        command=str(command) if command else None,
        command_args=tuple(str(arg) for arg in data.get("command_args", [])),
        refresh_interval=_non_negative(data, "refresh_interval", DEFAULT_REFRESH_INTERVAL),
        fetch_timeout=_non_negative(data, "fetch_timeout", DEFAULT_FETCH_TIMEOUT),
        repositories=tuple(repositories),
    )


def _non_negative(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if not isinstance(value, int | float) or isinstance(value, bool) or value < 0:
        msg = f"'{key}' must be a non-negative number, got {value!r}"
        raise ConfigError(msg)
    return float(value)


def config_to_dict(config: GitmeConfig) -> dict[str, Any]:
    """Convert a GitmeConfig back into TOML-serializable data (None values omitted)."""
    data: dict[str, Any] = {"username": config.username}
    if config.api_key:
        data["api_key"] = config.api_key
    if config.command:
        data["command"] = config.command
    data["command_args"] = list(config.command_args)
    data["refresh_interval"] = config.refresh_interval
    data["fetch_timeout"] = config.fetch_timeout

    repositories: list[dict[str, str]] = []
    for repo in config.repositories:
        entry = {"owner": repo.repo_id.owner, "name": repo.repo_id.name}
        if repo.local_path is not None:
            entry["local_path"] = repo.local_path
        repositories.append(entry)
    data["repositories"] = repositories
    return data


def save_config(path: Path, config: GitmeConfig) -> None:
    """Write config.toml, creating the config directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(config_to_dict(config)), encoding="utf-8")


def add_repository(config: GitmeConfig, repository: RepositoryConfig) -> GitmeConfig:
    """Return a config with `repository` appended.

    Raises:
        ConfigError: If the repository is already configured
    """
    if config.find_repository(repository.repo_id) is not None:
        msg = f"The repository {repository.repo_id} already exists in the config"
        raise ConfigError(msg)
    return replace(config, repositories=(*config.repositories, repository))


def remove_repository(config: GitmeConfig, repo_id: RepositoryId) -> GitmeConfig:
    """Return a config without `repo_id`.

    Raises:
        ConfigError: If the repository is not configured
    """
    if config.find_repository(repo_id) is None:
        msg = f"The repository {repo_id} is not in the config"
        raise ConfigError(msg)
    remaining = tuple(r for r in config.repositories if r.repo_id != repo_id)
    return replace(config, repositories=remaining)


def parse_repository_spec(spec: str) -> RepositoryId:
    """Parse "owner/name" (a github.com URL is accepted too).

    Raises:
        ConfigError: If `spec` does not name exactly one owner and repository
    """
    value = spec.strip().removesuffix(".git").rstrip("/")
    value = value.removeprefix("https://github.com/").removeprefix("github.com/")
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        msg = f"Expected OWNER/NAME, got {spec!r}"
        raise ConfigError(msg)
    return RepositoryId(owner=parts[0], name=parts[1])
