"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from domainfront.models.dns import PlatformTarget

_FALLBACK_CHALLENGE_SECRET = "domain-app-secret"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Registrar / billing (WHMCS)
    whmcs_api_url: str = ""
    whmcs_api_identifier: str = ""
    whmcs_api_secret: str = ""
    whmcs_api_access_key: str = ""

    # Payments (Paystack)
    paystack_secret_key: str = ""
    paystack_webhook_secret: str = ""
    paystack_base_url: str = "https://api.paystack.co"
    paystack_currency: str = "NGN"

    # Search challenge
    challenge_secret: str = ""

    # Hosting platform that connected domains should point at
    platform_nameservers: list[str] = Field(
        default_factory=lambda: ["nsa.ruachost.com", "nsb.ruachost.com"]
    )
    platform_ip_address: str = "185.199.108.153"
    platform_cdn_endpoint: str = "cdn.ruachost.com"
    platform_root_domain: str = "ruachost.com"

    # DNS-over-HTTPS
    doh_url: str = "https://dns.google/resolve"
    dns_timeout: float = 10.0

    # Verification polling
    verify_poll_interval: float = 30.0
    verify_poll_timeout: float = 3600.0

    # Outbound collaborator calls
    http_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    app_base_url: str = "http://localhost:3000"

    @property
    def effective_challenge_secret(self) -> str:
        return self.challenge_secret or self.whmcs_api_secret or _FALLBACK_CHALLENGE_SECRET

    @property
    def whmcs_configured(self) -> bool:
        """Same rule as WhmcsClient.is_available; the access key is optional."""
        return bool(self.whmcs_api_url and self.whmcs_api_identifier and self.whmcs_api_secret)

    def platform_target(self) -> PlatformTarget:
        """Build the immutable platform target from the configured values."""
        return PlatformTarget(
            nameservers=tuple(self.platform_nameservers),
            ip_address=self.platform_ip_address,
            cdn_endpoint=self.platform_cdn_endpoint,
            root_domain=self.platform_root_domain,
        )
