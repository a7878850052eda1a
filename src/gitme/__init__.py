"""gitme CLI entry point.

This package provides a Click-based CLI and a Textual dashboard that tracks
the GitHub pull requests waiting on you across a set of repositories.
See `gitme --help` for details.
"""

from gitme.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `gitme` console script."""
    cli()
