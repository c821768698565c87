"""GitHub token loading.

Tokens come from an explicit argument, a configurable environment variable,
or the GitHub CLI, in that order.
"""

import logging
import os
import re
import subprocess

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"


class AuthenticationError(Exception):
    """Raised when no usable GitHub token is available."""


def _get_gh_cli_token() -> str | None:
    """Ask `gh auth token` for a token, returning None if unavailable."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except FileNotFoundError:
        logger.debug("gh CLI not found on PATH")
        return None
    except subprocess.TimeoutExpired:
        logger.debug("gh CLI command timed out after 5 seconds")
        return None

    if result.returncode != 0:
        logger.debug("gh CLI returned non-zero exit code (%d)", result.returncode)
        return None

    return result.stdout.strip() or None


class GitHubAuth:
    """Resolved GitHub credentials.

    Accepted token formats:
    - ghp_/gho_/ghu_/ghs_ prefixed tokens
    - github_pat_ fine-grained tokens
    - Classic 40 character hex tokens
    """

    VALID_PREFIXES = ("ghp_", "gho_", "ghu_", "ghs_", "github_pat_")
    CLASSIC_TOKEN_PATTERN = re.compile(r"^[a-f0-9]{40}$")

    def __init__(self, token: str | None = None, token_env: str = DEFAULT_TOKEN_ENV) -> None:
        """Resolve and validate a token.

        Args:
            token: Explicit token. Takes precedence over other sources.
            token_env: Environment variable consulted when no token is given.

        Raises:
            AuthenticationError: If no token is found or its format is invalid.
        """
        if token:
            source = "explicit parameter"
        elif os.environ.get(token_env):
            token = os.environ[token_env]
            source = f"{token_env} environment variable"
        else:
            token = _get_gh_cli_token()
            source = "gh CLI"

        if not token:
            raise AuthenticationError(
                f"GitHub token not found. Set {token_env}, pass a token explicitly, "
                "or authenticate with `gh auth login`."
            )

        logger.info("Using GitHub token from %s", source)
        self._token = token
        self._validate_token()

    def _validate_token(self) -> None:
        token = self._token
        has_valid_prefix = token.startswith(self.VALID_PREFIXES)
        is_classic = bool(self.CLASSIC_TOKEN_PATTERN.match(token))

        if not has_valid_prefix and not is_classic:
            raise AuthenticationError(
                f"Invalid token format. Expected prefix {self.VALID_PREFIXES} "
                "or 40-character hex string (classic token)"
            )

        if has_valid_prefix and len(token) < 20:
            raise AuthenticationError("Token appears too short to be valid")

    @property
    def token(self) -> str:
        return self._token

    def get_authorization_header(self) -> dict[str, str]:
        """Return the Authorization header for API requests."""
        return {"Authorization": f"token {self._token}"}
