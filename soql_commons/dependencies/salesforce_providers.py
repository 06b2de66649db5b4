import os

import httpx
from dotenv import load_dotenv

load_dotenv()

# Singleton instances
__http_client = None
__analyzer_client = None


def get_api_version() -> str:
    return os.getenv("SALESFORCE_API_VERSION", "v59.0")


def get_analyzer_url() -> str | None:
    return os.getenv("SOQL_ANALYZER_URL") or None


def _timeout() -> float:
    return float(os.getenv("SALESFORCE_TIMEOUT_SECONDS", "10"))


def get_http_client() -> httpx.Client:
    global __http_client
    if __http_client is None:
        __http_client = httpx.Client(
            base_url=os.getenv("SALESFORCE_INSTANCE_URL", ""),
            headers={"Authorization": f"Bearer {os.getenv('SALESFORCE_ACCESS_TOKEN', '')}"},
            timeout=_timeout(),
        )
    return __http_client


def get_analyzer_client() -> httpx.AsyncClient:
    global __analyzer_client
    if __analyzer_client is None:
        __analyzer_client = httpx.AsyncClient(timeout=_timeout())
    return __analyzer_client
