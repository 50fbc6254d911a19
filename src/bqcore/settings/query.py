from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from .base import DriverBaseSettings


class QuerySettings(DriverBaseSettings):
    """Limits and conventions applied when compiling table queries.

    Environment variables use the ``BQ_QUERY_`` prefix, e.g.
    ``BQ_QUERY_DEFAULT_LIMIT=200``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BQ_QUERY_",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(
        default=100,
        ge=1,
        description="Row limit used when a request asks for limit 0 (no explicit limit)"
    )
    max_limit: int = Field(
        default=1000,
        ge=1,
        description="Largest row limit a request may ask for. Larger limits are rejected."
    )
    preview_truncate_length: int = Field(
        default=50,
        ge=1,
        description="Maximum number of characters a preview cell keeps before it is flagged as truncated"
    )
    change_tracking_column: str = Field(
        default="_timestamp",
        min_length=1,
        description="Internal per-row modification timestamp column used by changeSince/changeUntil filters"
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "QuerySettings":
        """Ensure the default limit fits under the maximum."""
        if self.default_limit > self.max_limit:
            raise ValueError(
                f"default_limit ({self.default_limit}) cannot exceed max_limit ({self.max_limit})"
            )
        return self
