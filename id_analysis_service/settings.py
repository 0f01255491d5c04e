import os
from pathlib import Path

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# non-functional values used when the credentials are not provided
PLACEHOLDER_KEY = "YOUR_KEY_HERE"
PLACEHOLDER_ENDPOINT = "YOUR_ENDPOINT_HERE"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)

    ID_ANALYSIS_SERVICE_VERSION: str = Field(
        "dev",
        min_length=1,
        validation_alias=AliasChoices("ID_ANALYSIS_SERVICE_VERSION", "ID_ANALYSIS_IMAGE_RELEASE_VERSION"),
    )
    ID_ANALYSIS_LOG_LEVEL: int = Field(20, ge=0, le=50)
    ID_ANALYSIS_DEBUG_MODE: bool = Field(False)
    ID_ANALYSIS_UPLOAD_DIR: str | None = None

    FORM_RECOGNIZER_KEY: str = Field(PLACEHOLDER_KEY, min_length=1)
    FORM_RECOGNIZER_ENDPOINT: str = Field(PLACEHOLDER_ENDPOINT, min_length=1)
    PORT: int = Field(3000, ge=1, le=65535)

    # seconds; unset means the request waits for as long as the analysis takes
    ID_ANALYSIS_POLL_TIMEOUT: float | None = None
    # seconds between status checks when the service sends no Retry-After
    ID_ANALYSIS_POLLING_INTERVAL: float = Field(1.0, gt=0)
    ID_ANALYSIS_CLEANUP_ON_ERROR: bool = Field(False)
    ID_ANALYSIS_REQUIRE_CREDENTIALS: bool = Field(False)

    ID_ANALYSIS_WEB_WORKERS: int = Field(1, ge=1)

    @field_validator("FORM_RECOGNIZER_ENDPOINT")
    @classmethod
    def strip_endpoint(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("ID_ANALYSIS_POLL_TIMEOUT", mode="before")
    @classmethod
    def empty_timeout_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("ID_ANALYSIS_POLL_TIMEOUT")
    @classmethod
    def positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("ID_ANALYSIS_POLL_TIMEOUT must be greater than 0")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LOG_LEVEL(self) -> int:
        # 50 - CRITICAL, 40 - ERROR, 30 - WARNING, 20 - INFO, 10 - DEBUG, 0 - NOTSET
        return self.ID_ANALYSIS_LOG_LEVEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DEBUG_MODE(self) -> bool:
        return self.ID_ANALYSIS_DEBUG_MODE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ROOT_DIR(self) -> str:
        return str(Path(__file__).resolve().parents[1])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def UPLOAD_DIR(self) -> str:
        return self.ID_ANALYSIS_UPLOAD_DIR or os.path.join(self.ROOT_DIR, "uploads")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def POLL_TIMEOUT(self) -> float | None:
        return self.ID_ANALYSIS_POLL_TIMEOUT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def POLLING_INTERVAL(self) -> float:
        return self.ID_ANALYSIS_POLLING_INTERVAL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def CLEANUP_ON_ERROR(self) -> bool:
        return self.ID_ANALYSIS_CLEANUP_ON_ERROR

    @computed_field  # type: ignore[prop-decorator]
    @property
    def REQUIRE_CREDENTIALS(self) -> bool:
        return self.ID_ANALYSIS_REQUIRE_CREDENTIALS

    @computed_field  # type: ignore[prop-decorator]
    @property
    def CREDENTIALS_CONFIGURED(self) -> bool:
        return (
            self.FORM_RECOGNIZER_KEY != PLACEHOLDER_KEY
            and self.FORM_RECOGNIZER_ENDPOINT != PLACEHOLDER_ENDPOINT
        )

settings = Settings() # type: ignore[call-arg]
