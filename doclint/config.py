"""
doclint Configuration - pydantic-settings based.

Runtime settings are read from environment variables (``DOCLINT_`` prefix)
or a .env file. These are process settings (engine binary, worker pool,
diagnostics), not the per-rule configuration document handled by
``doclint.core.config_resolver``.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── External documentation engine ──
    engine_command: str = Field(
        default="yard", description="Executable of the external documentation engine"
    )
    engine_default_options: list[str] = Field(
        default=["--charset", "utf-8", "--markup", "markdown", "--no-progress"],
        description="Flags passed to every engine invocation",
    )
    engine_db_dir: str | None = Field(
        default=None,
        description="Engine database directory. A process-scoped temp dir when unset.",
    )
    engine_timeout: float | None = Field(
        default=None,
        description="Seconds before an engine invocation is abandoned. None waits forever.",
    )

    # ── Execution ──
    max_workers: int | None = Field(
        default=None, description="Worker pool size for rule execution (default: CPU count)"
    )
    verbose: bool = Field(
        default=False,
        description="Log per-entity rule failures at WARNING instead of DEBUG",
    )
    coverage_source: Literal["registry", "engine"] = Field(
        default="registry",
        description="Where the coverage gate counts documented entities",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Root log level for doclint loggers")

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    model_config = {
        "env_prefix": "DOCLINT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - imported by other modules
settings = Settings()

VERSION = "0.1.0"
