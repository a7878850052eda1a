"""GitHub authentication token retrieval.

The token is resolved once at startup: explicit configuration first, then the
GITHUB_TOKEN environment variable, then the gh CLI.
"""

import os
import subprocess


def fetch_github_token(hostname: str = "github.com") -> str:
    """Fetch GitHub token via gh CLI.

    Args:
        hostname: GitHub hostname (default: "github.com")

    Returns:
        GitHub authentication token

    Raises:
        RuntimeError: If gh is missing or `gh auth token` fails
        ValueError: If token is empty
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token", "--hostname", hostname],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        msg = "gh CLI not found. Install GitHub CLI or set api_key in the config"
        raise RuntimeError(msg) from e
    except subprocess.CalledProcessError as e:
        msg = f"Failed to fetch GitHub token for {hostname}: {e.stderr.strip()}"
        raise RuntimeError(msg) from e

    token = result.stdout.strip()
    if not token:
        msg = f"Empty token returned from gh auth for {hostname}"
        raise ValueError(msg)
    return token


def resolve_github_token(api_key: str | None) -> str:
    """Pick the token to use: config value, GITHUB_TOKEN, then gh CLI."""
    if api_key:
        return api_key
    env_token = os.environ.get("GITHUB_TOKEN")
    if env_token:
        return env_token
    return fetch_github_token()
