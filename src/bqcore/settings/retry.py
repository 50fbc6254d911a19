from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import DriverBaseSettings


class RetrySettings(DriverBaseSettings):
    """Backoff policy for warehouse calls.

    Environment variables use the ``BQ_RETRY_`` prefix, e.g.
    ``BQ_RETRY_MAX_RETRIES=8``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BQ_RETRY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_retries: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of retry attempts after the initial call"
    )
    initial_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Delay in seconds before the first retry"
    )
    max_delay: float = Field(
        default=60.0,
        ge=0.0,
        le=600.0,
        description="Upper bound in seconds for a single backoff delay"
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Multiplier applied to the delay after every failed attempt"
    )
    jitter: bool = Field(
        default=True,
        description="Randomize each delay between half and the full computed value"
    )
