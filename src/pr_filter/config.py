"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from pr_filter.filters.strategy import FilterField, FilterStrategy, PhraseValidation, validate_phrase


class RepositoryConfig(BaseModel):
    """Repository whose pull requests are discovered."""

    owner: str
    name: str
    state: str = Field(default="open", pattern=r"^(open|closed|all)$")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class AuthConfig(BaseModel):
    """GitHub authentication configuration."""

    token_env: str = "GITHUB_TOKEN"


class FilterRuleConfig(BaseModel):
    """One pull request filter rule.

    Invalid regex phrases are accepted here on purpose: the installed filter
    then accepts every pull request. Use validate() to surface the problem.
    """

    field: FilterField = FilterField.TITLE
    strategy: FilterStrategy = FilterStrategy.DISABLED
    phrase: str | None = None
    case_sensitive: bool = False
    regex: bool = False

    @field_validator("strategy", mode="before")
    @classmethod
    def parse_strategy(cls, v: Any) -> Any:
        """Accept the numeric code or the strategy name."""
        if isinstance(v, str):
            name = v.strip()
            if name.isdigit():
                return int(name)
            try:
                return FilterStrategy[name.upper().replace("-", "_")]
            except KeyError as e:
                valid = ", ".join(s.name.lower() for s in FilterStrategy)
                msg = f"Unknown strategy '{v}'. Expected one of: {valid}"
                raise ValueError(msg) from e
        return v

    def validate_phrase(self, sample: str | None = None) -> PhraseValidation:
        """Check this rule's phrase, optionally against a sample value."""
        return validate_phrase(self.phrase, self.case_sensitive, self.regex, sample)


class Config(BaseModel):
    """Root configuration model."""

    repository: RepositoryConfig
    auth: AuthConfig = Field(default_factory=AuthConfig)
    filters: list[FilterRuleConfig] = Field(default_factory=list)

    def invalid_rules(self) -> list[tuple[int, FilterRuleConfig, PhraseValidation]]:
        """Return enabled rules whose phrase cannot be compiled.

        Returns:
            (index, rule, validation) tuples, index counted from 0.
        """
        invalid = []
        for index, rule in enumerate(self.filters):
            if rule.strategy is FilterStrategy.DISABLED:
                continue
            validation = rule.validate_phrase()
            if validation.is_error:
                invalid.append((index, rule, validation))
        return invalid


def load_config(path: Path) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    return Config.model_validate(raw_config)
