# websolve_leads/core/config.py
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LIVE_ENDPOINT_URL = "https://websolve.nl/webservices/automotiveLeads.php"
DEV_ENDPOINT_URL = "http://websolve-dev.nl/webservices/automotiveLeads.php"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="live", validation_alias="LEADS_ENVIRONMENT")

    # Service location, derived from the environment unless overridden
    endpoint_url: Optional[str] = Field(default=None, validation_alias="LEADS_ENDPOINT_URL")
    wsdl_url: Optional[str] = Field(default=None, validation_alias="LEADS_WSDL_URL")
    soap_namespace: str = Field(default="urn:automotiveLeads", validation_alias="LEADS_SOAP_NAMESPACE")

    # Provider code, set in the eCRM under configuration -> leads providers
    provider_code: Optional[str] = Field(default=None, validation_alias="LEADS_PROVIDER_CODE")

    # HTTP
    request_timeout: float = Field(default=30.0, validation_alias="LEADS_REQUEST_TIMEOUT")
    user_agent: str = Field(default="websolve-leads/1.0", validation_alias="LEADS_USER_AGENT")
    login: Optional[str] = Field(default=None, validation_alias="LEADS_LOGIN")
    password: Optional[str] = Field(default=None, validation_alias="LEADS_PASSWORD")
    proxy_url: Optional[str] = Field(default=None, validation_alias="LEADS_PROXY_URL")
    verify_ssl: bool = Field(default=True, validation_alias="LEADS_VERIFY_SSL")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    @field_validator("environment")
    def validate_environment(cls, v):
        valid_envs = ["live", "dev"]
        if v not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v

    @field_validator("log_level")
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v):
        valid_formats = ["json", "console"]
        if v not in valid_formats:
            raise ValueError(f"log_format must be one of {valid_formats}")
        return v

    @field_validator("request_timeout")
    def validate_request_timeout(cls, v):
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @property
    def is_live(self) -> bool:
        return self.environment == "live"

    def endpoint(self) -> str:
        if self.endpoint_url:
            return self.endpoint_url
        return LIVE_ENDPOINT_URL if self.is_live else DEV_ENDPOINT_URL

    def wsdl(self) -> str:
        if self.wsdl_url:
            return self.wsdl_url
        return f"{self.endpoint()}?WSDL"


settings = Settings()
