"""Pytest fixtures for calendar-extract tests."""

import pytest

from src.config.settings import Settings, get_settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        reference_year=2025,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are lru_cached; keep env changes from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def organization_email() -> str:
    """Organization-dialect job email."""
    return (
        "Organization: Acme Corp\n"
        "Event: Quarterly Town Hall\n"
        "Service Type: CART Captioning\n"
        "Captioner Connection Time: 10:00 AM\n"
        "Scheduled Start: 9:45 AM\n"
        "Scheduled End: 11:30 AM\n"
        "Meeting Number: 123 456 789\n"
        "Password: N/A\n"
        "Dial-In Info: +1 555 0100\n"
        "Rate: $95.00\n"
        "https://acme.zoom.us/j/123456789\n"
    )


@pytest.fixture
def customer_email() -> str:
    """Customer-dialect job email with table-style rows."""
    return (
        "Tuesday, June 24, 2025\n"
        "2:00 PM to 3:30 PM\n"
        "Customer Globex University\n"
        "Job Title Board of Trustees Meeting\n"
        "Location Room 204, Main Hall\n"
        "Client Jane Smith\n"
        "On-Site POC Bob Jones\n"
        "Alice Brown\n"
        "\n"
        "Meeting Link N/A\n"
    )
