"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

SUMMARY_FUNCTION_PATH = "/functions/send-vendor-payment-summaries"


class Settings(BaseSettings):
    app_name: str = "Form Hub"
    app_version: str = "0.1.0"
    api_prefix: str = "/api"
    database_url: str = "sqlite:///./formhub.db"
    service_name: str = "formhub"
    log_level: str = "INFO"

    # Monthly vendor payment summaries
    summary_batch_size: int = 15
    summary_email_delay_ms: int = 600  # provider allows 2 requests/second
    public_base_url: str = ""
    service_token: str = ""
    self_trigger_timeout: float = 10.0

    # Outbound email
    email_channel: str = "resend"  # resend|smtp
    email_from: str = "Form Hub <no-reply@formhub.local>"
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    smtp_host: str = "localhost"
    smtp_port: int = 25
    email_timeout: float = 30.0

    report_org_name: str = "Form Hub"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def summary_function_url(self) -> str:
        """Absolute URL of the summary job, empty when no base URL is configured."""
        if not self.public_base_url:
            return ""
        return f"{self.public_base_url.rstrip('/')}{self.api_prefix}{SUMMARY_FUNCTION_PATH}"


__all__ = ["SUMMARY_FUNCTION_PATH", "Settings"]
