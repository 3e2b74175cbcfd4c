import os
from typing import List
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from results_portal.exceptions import ConfigurationError

# Load the appropriate environment file
env_file = '.env.local'
load_dotenv(env_file)


class SheetsConfig(BaseModel):
    """Credentials and spreadsheet id handed to the sheet accessor."""
    spreadsheet_id: str
    service_account_email: str
    private_key: str

    model_config = ConfigDict(frozen=True)


class Settings(BaseSettings):
    """Application settings."""
    # App settings
    APP_ENV: str = os.getenv('APP_ENV', 'production')
    PORT: int = int(os.getenv('PORT', 5000))

    # Google Sheets settings
    GOOGLE_SPREADSHEET_ID: str = os.getenv('GOOGLE_SPREADSHEET_ID', '')
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str = os.getenv('GOOGLE_SERVICE_ACCOUNT_EMAIL', '')
    GOOGLE_PRIVATE_KEY: str = os.getenv('GOOGLE_PRIVATE_KEY', '')

    # CORS
    FRONTEND_URL: str = os.getenv('FRONTEND_URL', '')
    ALLOW_ALL_ORIGINS: bool = os.getenv('ALLOW_ALL_ORIGINS', 'false').lower() == 'true'

    # API settings
    API_TITLE: str = "Results Portal API"
    API_DESCRIPTION: str = "Test results lookup backed by Google Sheets"
    API_VERSION: str = "1.0.0"
    API_DOCS_URL: str = "/api/docs"
    API_REDOC_URL: str = "/api/redoc"
    API_OPENAPI_URL: str = "/api/openapi.json"

    model_config = SettingsConfigDict(env_file=env_file, extra='ignore')

    def missing_sheets_settings(self) -> List[str]:
        required = {
            'GOOGLE_SPREADSHEET_ID': self.GOOGLE_SPREADSHEET_ID,
            'GOOGLE_SERVICE_ACCOUNT_EMAIL': self.GOOGLE_SERVICE_ACCOUNT_EMAIL,
            'GOOGLE_PRIVATE_KEY': self.GOOGLE_PRIVATE_KEY,
        }
        return [name for name, value in required.items() if not value or not value.strip()]

    def sheets_config(self) -> SheetsConfig:
        """
        Build the explicit Google Sheets configuration.

        Raises:
            ConfigurationError: If any of the three Google settings is missing
        """
        missing = self.missing_sheets_settings()
        if missing:
            raise ConfigurationError(f"{', '.join(missing)} not configured")

        return SheetsConfig(
            spreadsheet_id=self.GOOGLE_SPREADSHEET_ID.strip(),
            service_account_email=self.GOOGLE_SERVICE_ACCOUNT_EMAIL.strip(),
            private_key=self.GOOGLE_PRIVATE_KEY,
        )


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency provider for the application settings."""
    return settings
