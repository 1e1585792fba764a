"""MMF configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when a configuration value is invalid for an operation.

    Example:
        >>> Settings(_env_file=None, MAX_WORKERS=-1).resolve_max_workers(4)
        Traceback (most recent call last):
        ...
        ConfigError: MAX_WORKERS=-1 is invalid: must be >= 0 (0 selects
        automatically). Set it in .env file or MAX_WORKERS environment variable.
    """

    def __init__(self, env_var: str, value: object, reason: str) -> None:
        """Initialize configuration error.

        Args:
            env_var: Environment variable name holding the value.
            value: The offending value.
            reason: What is wrong with it.
        """
        self.env_var = env_var
        self.value = value
        message = (
            f"{env_var}={value!r} is invalid: {reason}. "
            f"Set it in .env file or {env_var} environment variable."
        )
        super().__init__(message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Execution
    MAX_WORKERS: int = 0  # 0 = min(levels, cpu count)
    STRICT: bool = False  # Raise instead of degrading empty level rectangles

    # CLI defaults
    DEFAULT_LEVELS: int = 4  # m
    DEFAULT_WINDOW: int = 128  # w, square

    def resolve_max_workers(self, task_count: int) -> int:
        """Return the worker pool size for task_count independent tasks.

        Args:
            task_count: Number of tasks to run (m + 1 levels).

        Returns:
            A positive pool size, never larger than task_count.

        Raises:
            ConfigError: If MAX_WORKERS is negative.
        """
        if self.MAX_WORKERS < 0:
            raise ConfigError(
                "MAX_WORKERS",
                self.MAX_WORKERS,
                "must be >= 0 (0 selects automatically)",
            )
        limit = self.MAX_WORKERS or (os.cpu_count() or 1)
        return max(1, min(limit, task_count))


# Singleton instance for import convenience
settings = Settings()
