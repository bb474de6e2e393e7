"""
Configuration management using Pydantic models.

Settings come either from a YAML file or from environment variables.
Invalid settings raise ``ConfigurationError`` at load time so the
application never starts with a broken schedule.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .domain.exceptions import ConfigurationError
from .domain.models import SlotTemplate

DEFAULT_BUSINESS_SLOTS = ["09:00", "11:00", "14:00", "16:00"]

# Environment variable -> (section, key); section None means top level
ENV_VARS = {
    "GOOGLE_CLIENT_ID": ("google", "client_id"),
    "GOOGLE_CLIENT_SECRET": ("google", "client_secret"),
    "GOOGLE_REDIRECT_URI": ("google", "redirect_uri"),
    "GOOGLE_CALENDAR_ID": (None, "calendar_id"),
    "GOOGLE_TIMEZONE": (None, "timezone"),
    "GOOGLE_TOKEN_PATH": (None, "token_path"),
    "SLOT_DURATION_MINUTES": (None, "slot_duration_minutes"),
    "SLOT_LOOKAHEAD_DAYS": (None, "lookahead_days"),
    "BUSINESS_SLOTS": (None, "business_slots"),
    "SLOT_LOCALE": (None, "locale"),
    "VERIFY_BOOKINGS": (None, "verify_bookings"),
    "HOST_URL": (None, "host_url"),
    "PORT": (None, "port"),
}


class GoogleConfig(BaseModel):
    """OAuth client registered in the Google Cloud console."""
    client_id: str
    client_secret: str
    redirect_uri: str = ""

    @field_validator("client_id", "client_secret")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Ensure credentials are present."""
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class AppConfig(BaseModel):
    """Application configuration."""
    google: GoogleConfig
    calendar_id: str = "primary"
    timezone: str = "America/Santiago"
    slot_duration_minutes: int = 45
    lookahead_days: int = 12
    business_slots: List[str] = Field(default_factory=lambda: list(DEFAULT_BUSINESS_SLOTS))
    token_path: Path = Path("data") / "google-tokens.json"
    locale: str = "es"
    verify_bookings: bool = False
    port: int = 4000
    host_url: str = ""

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the time zone is a known IANA identifier."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: '{value}'")
        return value

    @field_validator("slot_duration_minutes", "lookahead_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure counts and durations are positive."""
        if value <= 0:
            raise ValueError(f"must be greater than zero, got {value}")
        return value

    @field_validator("business_slots", mode="before")
    @classmethod
    def split_business_slots(cls, value: Any) -> Any:
        """Accept a comma separated string as well as a list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("business_slots")
    @classmethod
    def validate_business_slots(cls, value: List[str]) -> List[str]:
        """Ensure every start time is a valid HH:MM time of day."""
        if not value:
            raise ValueError("at least one slot start time is required")
        for item in value:
            SlotTemplate.parse(item)
        return [item.strip() for item in value]

    @model_validator(mode="after")
    def fill_urls(self) -> "AppConfig":
        """Derive the public URL and OAuth redirect from the port."""
        if not self.host_url:
            self.host_url = f"http://localhost:{self.port}"
        if not self.google.redirect_uri:
            self.google.redirect_uri = f"{self.host_url.rstrip('/')}/api/google/oauth2callback"
        return self

    def get_slot_templates(self) -> List[SlotTemplate]:
        """Get the daily start times in configured order."""
        return [SlotTemplate.parse(item) for item in self.business_slots]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: str = "configuration") -> "AppConfig":
        """
        Build and validate a configuration.

        Raises:
            ConfigurationError: If any setting is missing or invalid
        """
        try:
            return cls(**data)
        except PydanticValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigurationError(f"Invalid {source}: {problems}") from exc

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            ConfigurationError: If the file is missing or the config is invalid
        """
        if not config_path.exists():
            raise ConfigurationError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        return cls.from_mapping(data, source=str(config_path))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """
        Load configuration from environment variables.

        Unset or empty variables fall back to the defaults.

        Raises:
            ConfigurationError: If credentials are missing or a value is invalid
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {"google": {}}

        for variable, (section, key) in ENV_VARS.items():
            value = environ.get(variable, "").strip()
            if not value:
                continue
            if section:
                data[section][key] = value
            else:
                data[key] = value

        google = data["google"]
        missing = [name for name in ("client_id", "client_secret") if name not in google]
        if missing:
            raise ConfigurationError(
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set."
            )

        return cls.from_mapping(data, source="environment")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load the configuration from YAML if a file is available, else from the environment.

    An explicitly given path must exist.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig.from_env()
