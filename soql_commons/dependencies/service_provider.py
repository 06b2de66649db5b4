from soql_commons.dependencies.repositories_provider import get_analyzer_repository, get_salesforce_repository
from soql_commons.services.query_analysis_service import QueryAnalysisService
from soql_commons.services.query_builder_service import QueryBuilderService

__query_analysis_service = None


def get_query_analysis_service() -> QueryAnalysisService:
    """Dependency provider for QueryAnalysisService (singleton)"""
    global __query_analysis_service

    if __query_analysis_service is None:
        __query_analysis_service = QueryAnalysisService(analyzer_repo=get_analyzer_repository())

    return __query_analysis_service


def create_query_builder_service() -> QueryBuilderService:
    """New builder session; sessions never share metadata or conditions"""
    return QueryBuilderService(
        salesforce_repo=get_salesforce_repository(),
        analysis_service=get_query_analysis_service(),
    )
