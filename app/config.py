import os
from dotenv import load_dotenv

load_dotenv()

WEBHOOK_URL_PLACEHOLDER = "YOUR_ZAPIER_WEBHOOK_URL_HERE"
DATASTORE_SEARCH_URL = "https://data.gov.il/api/3/action/datastore_search"


class Settings:
    CITIES_API_URL: str = os.getenv("CITIES_API_URL", DATASTORE_SEARCH_URL)
    CITIES_RESOURCE_ID: str = os.getenv(
        "CITIES_RESOURCE_ID", "5c78e9fa-c2e2-4771-93ff-7f400a12f7ba"
    )
    STREETS_API_URL: str = os.getenv("STREETS_API_URL", DATASTORE_SEARCH_URL)
    STREETS_RESOURCE_ID: str = os.getenv(
        "STREETS_RESOURCE_ID", "9ad3862c-8391-4b2f-84a4-2d4c68625f4b"
    )
    WEBHOOK_URL: str = os.getenv("WEBHOOK_URL", "")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    LOOKUP_RESULT_LIMIT: int = int(os.getenv("LOOKUP_RESULT_LIMIT", "20"))
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def webhook_configured(self) -> bool:
        return bool(self.WEBHOOK_URL) and self.WEBHOOK_URL != WEBHOOK_URL_PLACEHOLDER


settings = Settings()
