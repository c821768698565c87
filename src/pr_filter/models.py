"""Pull request records consumed by head filters."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PullRequestSummary(BaseModel):
    """Lightweight pull request entry from a listing.

    Only carries what is needed to match a head to a pull request number.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    source_branch: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequestSummary":
        """Parse an entry of GitHub's /pulls listing."""
        return cls(
            number=int(data["number"]),
            source_branch=(data.get("head") or {}).get("ref", ""),
        )


class PullRequest(PullRequestSummary):
    """Full pull request record fetched by number."""

    title: str | None = None
    target_branch: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequest":
        """Parse GitHub's /pulls/{number} response.

        Args:
            data: Decoded JSON body.

        Returns:
            PullRequest with head.ref as source and base.ref as target.
        """
        return cls(
            number=int(data["number"]),
            title=data.get("title"),
            source_branch=(data.get("head") or {}).get("ref", ""),
            target_branch=(data.get("base") or {}).get("ref"),
        )
