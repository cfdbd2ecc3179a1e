from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required to generate verification codes

    # Resend
    resend_api_key: Optional[str] = None
    resend_from_email: Optional[str] = None  # Falls back to the provider sandbox sender
    verification_email_subject: str = "Your verification code"
    email_delivery_max_attempts: int = 1

    # Auth framework options
    email_password_enabled: bool = True
    require_email_verification: bool = False  # allow auto login after sign-up
    otp_disable_sign_up: bool = True
    otp_send_on_sign_up: bool = True
    auth_success_redirect: str = "/"
    session_cookie_name: str = "access_token"

    # App
    app_name: str = "account-gate"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def sender_email(self) -> str:
        return self.resend_from_email or "onboarding@resend.dev"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
