"""Tests for `gitme dash` and the default command."""

from pathlib import Path

from click.testing import CliRunner

from gitme.cli.cli import cli
from gitme.cli.context import CliContext
from gitme.core.config import GitmeConfig, load_config, save_config
from gitme.tui.app import GitmeDashApp
from gitme.tui.context import GitmeDashContext
from gitme.tui.runner import FakeTuiRunner
from tests.fakes.config import make_config, make_repository


def _cli_context(config_path: Path, tui_runner: FakeTuiRunner) -> CliContext:
    return CliContext(
        config_path=config_path,
        dash_context_factory=lambda config, path: GitmeDashContext.for_test(
            config, config_path=path, tui_runner=tui_runner
        ),
    )


def test_dash_runs_app(tmp_path: Path) -> None:
    """`gitme dash` hands the app to the TUI runner without starting Textual."""
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config(make_repository("acme/api")))
    tui_runner = FakeTuiRunner()

    result = CliRunner().invoke(cli, ["dash"], obj=_cli_context(config_path, tui_runner))

    assert result.exit_code == 0, result.output
    assert len(tui_runner.apps_run) == 1
    assert isinstance(tui_runner.apps_run[0], GitmeDashApp)


def test_no_subcommand_runs_dash(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config())
    tui_runner = FakeTuiRunner()

    result = CliRunner().invoke(cli, [], obj=_cli_context(config_path, tui_runner))

    assert result.exit_code == 0, result.output
    assert len(tui_runner.apps_run) == 1


def test_interval_option_overrides_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config(refresh_interval=30))
    tui_runner = FakeTuiRunner()

    result = CliRunner().invoke(
        cli, ["dash", "--interval", "0"], obj=_cli_context(config_path, tui_runner)
    )

    assert result.exit_code == 0, result.output
    assert tui_runner.apps_run[0].scheduler.interval == 0


def test_negative_interval_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config())

    result = CliRunner().invoke(
        cli, ["dash", "--interval", "-5"], obj=_cli_context(config_path, FakeTuiRunner())
    )

    assert result.exit_code == 2


def test_first_run_prompts_for_config(tmp_path: Path) -> None:
    """Without config.toml the user is walked through creating one."""
    config_path = tmp_path / "gitme" / "config.toml"
    tui_runner = FakeTuiRunner()
    answers = [
        "octocat",  # username
        "",  # token
        "nvim",  # review command
        "-c",  # argument 1
        "Git",  # argument 2
        "",  # done with arguments
        "y",  # add a repository
        "acme",
        "api",
        "y",  # local path
        "~/code/api",
        "n",  # no more repositories
    ]

    result = CliRunner().invoke(
        cli, [], obj=_cli_context(config_path, tui_runner), input="\n".join(answers) + "\n"
    )

    assert result.exit_code == 0, result.output
    config = load_config(config_path)
    assert isinstance(config, GitmeConfig)
    assert config.username == "octocat"
    assert config.api_key is None
    assert config.command == "nvim"
    assert config.command_args == ("-c", "Git")
    assert config.repositories == (make_repository("acme/api", local_path="~/code/api"),)
    assert len(tui_runner.apps_run) == 1


def test_token_failure_is_reported(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config())

    def failing_factory(config: GitmeConfig, path: Path) -> GitmeDashContext:
        raise RuntimeError("gh CLI not found")

    cli_ctx = CliContext(config_path=config_path, dash_context_factory=failing_factory)
    result = CliRunner().invoke(cli, ["dash"], obj=cli_ctx)

    assert result.exit_code == 1
    assert "Could not get a GitHub token: gh CLI not found" in result.output


def test_invalid_config_is_reported(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("refresh_interval = 5\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["dash"], obj=_cli_context(config_path, FakeTuiRunner()))

    assert result.exit_code == 1
    assert "username" in result.output


def test_debug_writes_log_next_to_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    save_config(config_path, make_config())

    result = CliRunner().invoke(
        cli, ["--debug", "config", "path"], obj=_cli_context(config_path, FakeTuiRunner())
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == str(config_path)
