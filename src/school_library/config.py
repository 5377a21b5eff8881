"""Configuration management for the School Library MCP Server.

Settings are loaded from the environment (``SCHOOL_LIBRARY_*``) or a
``.env`` file and validated with Pydantic v2:
1. Protocol Metadata - server name and version for the MCP handshake
2. Storage - where the SQLite database and backups live
3. Circulation Policy - loan period and due-soon reminder window
"""

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibraryConfig(BaseSettings):
    """School library server configuration.

    The circulation policy values are read once at startup and handed to
    the engine and dashboard; changing them later does not affect loans
    that already exist, since due dates are stored at creation.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHOOL_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Protocol Metadata ===

    server_name: str = Field(
        default="school-library",
        min_length=3,
        max_length=50,
        pattern=r"^[a-z0-9-]+$",
        description="Name announced in the MCP handshake",
    )

    server_version: str = Field(
        default="0.1.0",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
        description="Version announced in the MCP handshake",
    )

    transport: str = Field(
        default="stdio",
        pattern=r"^stdio$",
        description="MCP transport; only stdio is served",
    )

    # === Storage ===

    database_path: Path = Field(
        default=Path("data/school_library.db"),
        description="SQLite file holding books, students and loans",
    )

    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides database_path when set",
    )

    backup_directory: Path = Field(
        default=Path("backups"),
        description="Directory where export_backup writes JSON backup files",
    )

    # === Circulation Policy ===

    loan_period_days: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Calendar days between loan date and due date",
    )

    due_soon_days: int = Field(
        default=2,
        ge=0,
        le=30,
        description="Days after today that still trigger a due-soon notice",
    )

    timezone: str = Field(
        default="UTC",
        description="IANA zone whose calendar days drive due dates and reminders",
    )

    # === Logging ===

    debug: bool = Field(default=False, description="Log at DEBUG, including fastmcp")

    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Root log level when debug is off",
    )

    @field_validator("database_path")
    @classmethod
    def prepare_database_path(cls, v: Path) -> Path:
        """Make the path absolute and create its directory."""
        path = v.absolute()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create database directory {path.parent}: {e}") from e
        return path

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {v!r}") from e
        return v

    def get_database_url(self) -> str:
        return self.database_url or f"sqlite:///{self.database_path}"


# === Process-wide instance ===


class _ConfigStore:
    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Load the configuration on first use and return the same instance afterwards."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Forget the loaded configuration so the next call re-reads the environment."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
