from soql_commons.dependencies.salesforce_providers import get_analyzer_client, get_analyzer_url, get_api_version, \
    get_http_client
from soql_commons.repositories.salesforce_repository import QueryAnalyzerRepository, SalesforceRepository

# Create singleton instances
__salesforce_repository = None
__analyzer_repository = None


def get_salesforce_repository() -> SalesforceRepository:
    global __salesforce_repository
    if __salesforce_repository is None:
        __salesforce_repository = SalesforceRepository(client=get_http_client(), api_version=get_api_version())
    return __salesforce_repository


def get_analyzer_repository() -> QueryAnalyzerRepository | None:
    """None when no analyzer url is configured"""
    global __analyzer_repository
    analyzer_url = get_analyzer_url()
    if analyzer_url is None:
        return None
    if __analyzer_repository is None:
        __analyzer_repository = QueryAnalyzerRepository(client=get_analyzer_client(), analyzer_url=analyzer_url)
    return __analyzer_repository
