"""Tests for loading, saving and editing config.toml."""

from pathlib import Path

import pytest

from gitme.core.config import (
    ConfigError,
    add_repository,
    load_config,
    parse_config,
    parse_repository_spec,
    remove_repository,
    save_config,
)
from gitme.gateway.github.types import RepositoryConfig, RepositoryId
from tests.fakes.config import make_config, make_repository, repo_id


class TestLoadConfig:
    """Tests for reading config.toml."""

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "config.toml") is None

    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            """
username = "octocat"
api_key = "ghp_secret"
refresh_interval = 60
fetch_timeout = 5
command = "ghostty"
command_args = ["-e", "nvim"]

[[repositories]]
owner = "acme"
name = "api"
local_path = "~/code/api"

[[repositories]]
owner = "acme"
name = "web"
""",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config is not None
        assert config.username == "octocat"
        assert config.api_key == "ghp_secret"
        assert config.refresh_interval == 60.0
        assert config.fetch_timeout == 5.0
        assert config.command == "ghostty"
        assert config.command_args == ("-e", "nvim")
        assert config.repositories == (
            RepositoryConfig(repo_id=RepositoryId("acme", "api"), local_path="~/code/api"),
            RepositoryConfig(repo_id=RepositoryId("acme", "web"), local_path=None),
        )

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("username = [", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)


class TestParseConfig:
    """Tests for validating decoded config data."""

    def test_defaults(self) -> None:
        config = parse_config({"username": "octocat"})
        assert config.api_key is None
        assert config.command is None
        assert config.command_args == ()
        assert config.refresh_interval == 30.0
        assert config.fetch_timeout == 20.0
        assert config.repositories == ()

    def test_username_required(self) -> None:
        with pytest.raises(ConfigError, match="username"):
            parse_config({})

    def test_repository_needs_owner_and_name(self) -> None:
        with pytest.raises(ConfigError, match="both 'owner' and 'name'"):
            parse_config({"username": "octocat", "repositories": [{"owner": "acme"}]})

    def test_duplicate_repository_rejected(self) -> None:
        entry = {"owner": "acme", "name": "api"}
        with pytest.raises(ConfigError, match="listed twice"):
            parse_config({"username": "octocat", "repositories": [entry, entry]})

    def test_legacy_system_path_key(self) -> None:
        config = parse_config(
            {
                "username": "octocat",
                "repositories": [{"owner": "acme", "name": "api", "system_path": "/src/api"}],
            }
        )
        assert config.repositories[0].local_path == "/src/api"

    @pytest.mark.parametrize("value", [-1, "often", True])
    def test_refresh_interval_must_be_non_negative_number(self, value: object) -> None:
        with pytest.raises(ConfigError, match="refresh_interval"):
            parse_config({"username": "octocat", "refresh_interval": value})

    def test_zero_interval_allowed(self) -> None:
        assert parse_config({"username": "octocat", "refresh_interval": 0}).refresh_interval == 0


class TestSaveConfig:
    """Tests for writing config.toml."""

    def test_save_then_load(self, tmp_path: Path) -> None:
        """Saved configs load back unchanged, creating the directory."""
        path = tmp_path / "nested" / "config.toml"
        config = make_config(
            make_repository("acme/api", local_path="~/code/api"),
            make_repository("acme/web"),
            api_key="ghp_secret",
            command="nvim",
            command_args=("-c", "Git"),
        )

        save_config(path, config)

        assert load_config(path) == config

    def test_none_values_omitted(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        save_config(path, make_config(make_repository("acme/web")))
        text = path.read_text(encoding="utf-8")
        assert "api_key" not in text
        assert "local_path" not in text


class TestRepositories:
    """Tests for adding and removing repositories."""

    def test_add_appends(self) -> None:
        config = add_repository(make_config(make_repository("acme/api")), make_repository("a/b"))
        assert [r.repo_id.full_name for r in config.repositories] == ["acme/api", "a/b"]

    def test_add_duplicate_rejected(self) -> None:
        config = make_config(make_repository("acme/api"))
        with pytest.raises(ConfigError, match="already exists"):
            add_repository(config, make_repository("acme/api"))

    def test_remove(self) -> None:
        config = make_config(make_repository("acme/api"), make_repository("acme/web"))
        updated = remove_repository(config, repo_id("acme/api"))
        assert [r.repo_id.full_name for r in updated.repositories] == ["acme/web"]

    def test_remove_unknown_rejected(self) -> None:
        with pytest.raises(ConfigError, match="not in the config"):
            remove_repository(make_config(), repo_id("acme/api"))


@pytest.mark.parametrize(
    "spec",
    [
        "acme/api",
        " acme/api ",
        "https://github.com/acme/api",
        "https://github.com/acme/api.git",
        "github.com/acme/api/",
    ],
)
def test_parse_repository_spec(spec: str) -> None:
    assert parse_repository_spec(spec) == RepositoryId(owner="acme", name="api")


@pytest.mark.parametrize("spec", ["acme", "acme/api/extra", "/api", ""])
def test_parse_repository_spec_rejects(spec: str) -> None:
    with pytest.raises(ConfigError, match="Expected OWNER/NAME"):
        parse_repository_spec(spec)
