"""Settings for netwrth.

Values come from ``NETWRTH_*`` environment variables or a ``.env`` file in
the working directory; defaults mirror the app's settings page.
"""

from typing import Annotated

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from netwrth.core.exceptions import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NETWRTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    base_currency: str = Field(default="INR", min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")

    # 4 = April (Indian FY), 1 = January
    fiscal_year_start: Annotated[int, Field(ge=1, le=12)] = 4
    salary_credit_day: Annotated[int, Field(ge=1, le=28)] = 1

    savings_rate_target: Annotated[int, Field(ge=0, le=100)] = 30
    budget_alert_threshold: Annotated[int, Field(ge=0, le=100)] = 80

    report_range_default: str = "this-month"
    ignored_categories: list[str] = Field(default_factory=list)
    top_categories: Annotated[int, Field(ge=1)] = 6
    chart_months: Annotated[int, Field(ge=1, le=120)] = 12


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, applying explicit overrides.

    Raises:
        ConfigError: If any value fails validation.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e.errors()[0]['loc']}: {e.errors()[0]['msg']}") from e
