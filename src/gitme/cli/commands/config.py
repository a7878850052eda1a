"""`gitme config` commands: inspect and edit config.toml."""

from pathlib import Path

import click
import tomli_w

from gitme.cli.context import CliContext
from gitme.cli.output import machine_output, user_output
from gitme.cli.prompts import prompt_new_config, prompt_repository
from gitme.core.config import (
    ConfigError,
    GitmeConfig,
    add_repository,
    config_to_dict,
    load_config,
    parse_repository_spec,
    remove_repository,
    save_config,
)
from gitme.gateway.github.types import RepositoryConfig


def load_or_create_config(path: Path) -> GitmeConfig:
    """Load config.toml, prompting for a new one when it does not exist yet.

    Raises:
        click.ClickException: If the existing file is invalid
    """
    try:
        config = load_config(path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if config is None:
        config = prompt_new_config()
        save_config(path, config)
        user_output(click.style("✓", fg="green") + f" Wrote {path}")
    return config


def _load_existing(path: Path) -> GitmeConfig:
    try:
        config = load_config(path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if config is None:
        raise click.ClickException(f"No config file at {path}. Run 'gitme' to create one.")
    return config


@click.group("config")
def config_group() -> None:
    """Manage the gitme configuration."""


@config_group.command("path")
@click.pass_obj
def config_path_cmd(cli_ctx: CliContext) -> None:
    """Print the location of config.toml."""
    machine_output(str(cli_ctx.config_path))


@config_group.command("show")
@click.pass_obj
def config_show_cmd(cli_ctx: CliContext) -> None:
    """Print the configuration (the API key is masked)."""
    config = _load_existing(cli_ctx.config_path)
    data = config_to_dict(config)
    if "api_key" in data:
        data["api_key"] = "********"
    machine_output(tomli_w.dumps(data), nl=False)


@config_group.command("add-repo")
@click.argument("repository", required=False)
@click.option(
    "--path",
    "local_path",
    type=str,
    default=None,
    help="Local checkout used by the review action (~ is allowed)",
)
@click.pass_obj
def add_repo_cmd(cli_ctx: CliContext, repository: str | None, local_path: str | None) -> None:
    """Track a repository, given as OWNER/NAME or prompted for.

    Examples:
        gitme config add-repo dagster-io/erk --path ~/code/erk
        gitme config add-repo
    """
    config = _load_existing(cli_ctx.config_path)
    try:
        if repository is None:
            new_repo = prompt_repository()
        elif local_path is None:
            new_repo = prompt_repository(parse_repository_spec(repository))
        else:
            new_repo = RepositoryConfig(
                repo_id=parse_repository_spec(repository), local_path=local_path
            )
        updated = add_repository(config, new_repo)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    save_config(cli_ctx.config_path, updated)
    user_output(click.style("✓", fg="green") + f" Added {new_repo.repo_id}")


@config_group.command("remove-repo")
@click.argument("repository")
@click.pass_obj
def remove_repo_cmd(cli_ctx: CliContext, repository: str) -> None:
    """Stop tracking OWNER/NAME."""
    config = _load_existing(cli_ctx.config_path)
    try:
        repo_id = parse_repository_spec(repository)
        updated = remove_repository(config, repo_id)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    save_config(cli_ctx.config_path, updated)
    user_output(click.style("✓", fg="green") + f" Removed {repo_id}")
