from __future__ import annotations

import json
import re
from typing import ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # env: local|dev|stage|prod
    APP_ENV: str = "dev"
    API_V1_PREFIX: str = "/v1"
    LOG_LEVEL: str = "INFO"

    # DB
    DATABASE_URL: str = "postgresql+asyncpg://studyplanner:studyplanner@db:5432/studyplanner"
    DB_ECHO: bool = False

    # HTTP & CORS
    # When CORS_ALLOW_CREDENTIALS=True, CORS_ALLOW_ORIGINS must not contain "*"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Defaults for newly created users
    DEFAULT_TIMEZONE: str = "UTC"
    DEFAULT_STUDY_HOURS_PER_DAY: float = 6
    DEFAULT_PREFERRED_TIME: str = "09:00"

    # Timetable engine
    TIMETABLE_OVERFLOW_POLICY: str = "truncate"
    TIMETABLE_MAX_SLOTS: int = 5000
    TIMETABLE_MAX_RANGE_DAYS: int = 366

    ALLOWED_ENVS: ClassVar[set[str]] = {"local", "dev", "stage", "prod"}
    OVERFLOW_POLICIES: ClassVar[set[str]] = {"truncate", "extend"}

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        value = value.lower()
        if value not in cls.ALLOWED_ENVS:
            raise ValueError(f"APP_ENV must be one of {sorted(cls.ALLOWED_ENVS)}, got '{value}'")
        return value

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Parse CORS origins from a JSON array string, a comma list or a list."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("CORS_ALLOW_ORIGINS")
    @classmethod
    def validate_cors_config(cls, value: list[str], info: ValidationInfo) -> list[str]:
        env = info.data.get("APP_ENV", "dev")
        allow_credentials = info.data.get("CORS_ALLOW_CREDENTIALS", True)
        if allow_credentials and "*" in value and env in ("stage", "prod"):
            raise ValueError(
                f"CORS_ALLOW_ORIGINS cannot contain '*' when CORS_ALLOW_CREDENTIALS=True in {env} environment."
            )
        return value

    @field_validator("DEFAULT_TIMEZONE")
    @classmethod
    def validate_default_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"DEFAULT_TIMEZONE '{value}' is not a valid IANA timezone") from exc
        return value

    @field_validator("DEFAULT_STUDY_HOURS_PER_DAY")
    @classmethod
    def validate_default_hours(cls, value: float) -> float:
        if value <= 0 or value > 24:
            raise ValueError("DEFAULT_STUDY_HOURS_PER_DAY must be in (0, 24]")
        return value

    @field_validator("DEFAULT_PREFERRED_TIME")
    @classmethod
    def validate_default_preferred_time(cls, value: str) -> str:
        if not re.fullmatch(r"([01][0-9]|2[0-3]):[0-5][0-9]", value):
            raise ValueError("DEFAULT_PREFERRED_TIME must be in HH:MM format (24-hour)")
        return value

    @field_validator("TIMETABLE_OVERFLOW_POLICY")
    @classmethod
    def validate_overflow_policy(cls, value: str) -> str:
        value = value.lower()
        if value not in cls.OVERFLOW_POLICIES:
            raise ValueError(f"TIMETABLE_OVERFLOW_POLICY must be one of {sorted(cls.OVERFLOW_POLICIES)}")
        return value

    @field_validator("TIMETABLE_MAX_SLOTS", "TIMETABLE_MAX_RANGE_DAYS")
    @classmethod
    def validate_positive_caps(cls, value: int, info: ValidationInfo) -> int:
        if value < 1:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value


settings = Settings()
