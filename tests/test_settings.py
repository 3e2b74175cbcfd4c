import pytest
from pydantic import ValidationError

from results_portal.config.settings import Settings
from results_portal.exceptions import ConfigurationError


def test_sheets_config_from_settings(test_settings):
    config = test_settings.sheets_config()
    assert config.spreadsheet_id == "sheet-id"
    assert config.service_account_email == "results@project.iam.gserviceaccount.com"
    assert config.private_key == test_settings.GOOGLE_PRIVATE_KEY


def test_missing_spreadsheet_id():
    settings = Settings(
        GOOGLE_SPREADSHEET_ID="",
        GOOGLE_SERVICE_ACCOUNT_EMAIL="svc@example.com",
        GOOGLE_PRIVATE_KEY="key",
    )
    with pytest.raises(ConfigurationError) as exc_info:
        settings.sheets_config()
    assert exc_info.value.message == "GOOGLE_SPREADSHEET_ID not configured"
    assert exc_info.value.status_code == 500


def test_blank_credentials_count_as_missing():
    settings = Settings(
        GOOGLE_SPREADSHEET_ID="sheet-id",
        GOOGLE_SERVICE_ACCOUNT_EMAIL="   ",
        GOOGLE_PRIVATE_KEY="",
    )
    assert settings.missing_sheets_settings() == ["GOOGLE_SERVICE_ACCOUNT_EMAIL", "GOOGLE_PRIVATE_KEY"]


def test_sheets_config_is_frozen(test_settings):
    config = test_settings.sheets_config()
    with pytest.raises(ValidationError):
        config.spreadsheet_id = "other"
