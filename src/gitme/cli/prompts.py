"""Interactive prompts used to create and extend the configuration."""

import os

import click

from gitme.cli.output import user_output
from gitme.core.config import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_REFRESH_INTERVAL,
    GitmeConfig,
)
from gitme.core.review import DEFAULT_REVIEW_COMMAND
from gitme.gateway.github.types import RepositoryConfig, RepositoryId


def _required(label: str) -> str:
    while True:
        value = click.prompt(label, default="", show_default=False).strip()
        if value:
            return value
        user_output("A value is required.")


def prompt_repository(repo_id: RepositoryId | None = None) -> RepositoryConfig:
    """Ask for a repository (unless given) and its optional local checkout."""
    if repo_id is None:
        owner = _required("Repository owner")
        name = _required("Repository name")
        repo_id = RepositoryId(owner=owner, name=name)

    local_path: str | None = None
    if click.confirm(
        "Add a path to the local checkout for review operations?", default=True
    ):
        local_path = _required("Path to local repository (~ is allowed)")
    return RepositoryConfig(repo_id=repo_id, local_path=local_path)


def prompt_new_config() -> GitmeConfig:
    """Walk the user through creating config.toml."""
    user_output("Welcome to gitme!")
    user_output("No configuration file found, let's create one.")
    user_output()

    username = _required("Your GitHub username")
    api_key = click.prompt(
        "GitHub token (leave empty to use GITHUB_TOKEN or the gh CLI)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()
    command = click.prompt(
        "Command used for reviews",
        default=os.environ.get("TERMINAL", DEFAULT_REVIEW_COMMAND),
    ).strip()

    user_output("Add argument(s) for the review command if needed, leave empty to finish:")
    command_args: list[str] = []
    while True:
        arg = click.prompt(
            f"Argument {len(command_args) + 1}", default="", show_default=False
        ).strip()
        if not arg:
            break
        command_args.append(arg)

    repositories: list[RepositoryConfig] = []
    while click.confirm("Do you wish to add a repository?", default=True):
        repository = prompt_repository()
        if any(r.repo_id == repository.repo_id for r in repositories):
            user_output(f"{repository.repo_id} was already added.")
            continue
        repositories.append(repository)
        user_output()

    return GitmeConfig(
        username=username,
        api_key=api_key or None,
        command=command or None,
        command_args=tuple(command_args),
        refresh_interval=DEFAULT_REFRESH_INTERVAL,
        fetch_timeout=DEFAULT_FETCH_TIMEOUT,
        repositories=tuple(repositories),
    )
