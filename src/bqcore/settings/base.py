from pydantic_settings import BaseSettings, SettingsConfigDict


class DriverBaseSettings(BaseSettings):
    """Base class for every settings group of the driver core.

    Holds the shared environment loading behaviour: values come from the
    process environment or an optional ``.env`` file, names are matched
    case-insensitively, and unknown variables are ignored so the driver can
    share an environment with the host orchestrator.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )
