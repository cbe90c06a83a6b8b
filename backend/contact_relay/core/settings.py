# contact_relay/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

# Local development origins, always allowed alongside CORS_ORIGIN.
BASE_ORIGINS = [
    "http://127.0.0.1:5500",
    "http://localhost:5500",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

REQUIRED_ENVS = ["SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "CONTACT_TO"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # "PORT=" in a .env or dashboard means unset, not invalid
        env_ignore_empty=True,
    )

    api_title: str = Field(default="Contact Relay", alias="API_TITLE")
    port: int = Field(default=4000, alias="PORT")

    smtp_host: Optional[str] = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=465, alias="SMTP_PORT")
    # None means "derive from the port": implicit TLS on 465, STARTTLS otherwise
    smtp_secure: Optional[bool] = Field(default=None, alias="SMTP_SECURE")
    smtp_user: Optional[str] = Field(default=None, alias="SMTP_USER")
    smtp_pass: Optional[str] = Field(default=None, alias="SMTP_PASS")
    smtp_verify: bool = Field(default=True, alias="SMTP_VERIFY")

    contact_to: Optional[str] = Field(default=None, alias="CONTACT_TO")
    mail_from_name: str = Field(default="Contact Form", alias="MAIL_FROM_NAME")

    # Comma-separated, merged with BASE_ORIGINS
    cors_origin: str = Field(default="", alias="CORS_ORIGIN")

    # Diagnostic route path; must start with "/" to be registered
    debug_url: str = Field(default="", alias="DEBUG_URL")

    @property
    def use_implicit_tls(self) -> bool:
        if self.smtp_secure is not None:
            return self.smtp_secure
        return self.smtp_port == 465

    @property
    def allowed_origins(self) -> List[str]:
        extra = [o.strip() for o in self.cors_origin.split(",") if o.strip()]
        merged: List[str] = []
        for origin in BASE_ORIGINS + extra:
            if origin not in merged:
                merged.append(origin)
        return merged

    @property
    def diagnostic_path(self) -> Optional[str]:
        path = self.debug_url.strip()
        if path.startswith("/"):
            return path
        return None

    def config_presence(self) -> dict:
        """Which required entries are set. Never exposes the values."""
        return {
            "SMTP_HOST": bool(self.smtp_host),
            "SMTP_PORT": bool(self.smtp_port),
            "SMTP_USER": bool(self.smtp_user),
            "SMTP_PASS": bool(self.smtp_pass),
            "CONTACT_TO": bool(self.contact_to),
        }

    def missing_required(self) -> List[str]:
        presence = self.config_presence()
        return [name for name in REQUIRED_ENVS if not presence[name]]
