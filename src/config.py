"""
Engine configuration, read from PAYMENTS_* environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseSettings):
    """Payments engine runtime configuration"""

    model_config = SettingsConfigDict(env_prefix="PAYMENTS_")

    # Logging goes to stderr; stdout carries only the account table
    log_level: str = "WARNING"
    log_format: str = "%(levelname)s: %(message)s"

    # Print "Processed: N, Rejected: M" to stderr after the run
    report_stats: bool = True

    # Order output rows by client id
    sort_output: bool = True


def get_config() -> EngineConfig:
    return EngineConfig()
