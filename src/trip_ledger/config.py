"""Configuration management for TripLedger."""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import ViewMode
from .money import SCALE, Money


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Smart Route settings
    settle_epsilon: Decimal = Field(default=Decimal("0.01"), ge=0)
    minor_unit_places: int = Field(default=2, ge=0, le=SCALE)

    # Display settings
    default_view_mode: ViewMode = ViewMode.SMART
    base_currency: str = "USD"  # Label only, no conversion

    @property
    def epsilon(self) -> Money:
        """Settle threshold as Money."""
        return Money.of(self.settle_epsilon)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the TRIP_LEDGER_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
