"""Shared test fixtures."""

from __future__ import annotations

import pytest

from domainfront.config import Settings
from domainfront.models.dns import PlatformTarget
from tests.helpers import DOH_URL, PAYSTACK_URL, WHMCS_URL


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        whmcs_api_url=WHMCS_URL,
        whmcs_api_identifier="test-identifier",
        whmcs_api_secret="test-whmcs-secret",
        whmcs_api_access_key="test-access-key",
        paystack_secret_key="sk_test_123",
        paystack_webhook_secret="whsec_test",
        paystack_base_url=PAYSTACK_URL,
        challenge_secret="test-challenge-secret",
        doh_url=DOH_URL,
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def target(settings: Settings) -> PlatformTarget:
    return settings.platform_target()
