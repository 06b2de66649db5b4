import logging
from typing import Optional

from soql_commons.model.query_model import QueryAnalysis, QuerySpec
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex
from soql_commons.repositories.salesforce_repository import AdvisoryUnavailable, QueryAnalyzerRepository
from soql_commons.utils.query_advisor import BestPracticeRotator, QueryAdvisor, fallback_analysis

logger = logging.getLogger(__name__)


class QueryAnalysisService:
    """
    Scores queries with the remote analyzer when one is configured, otherwise
    with the local tiered heuristic. Analyzer failures never reach the caller.
    """

    def __init__(self, analyzer_repo: Optional[QueryAnalyzerRepository] = None,
                 advisor: Optional[QueryAdvisor] = None):
        self.analyzer_repo = analyzer_repo
        self.advisor = advisor or QueryAdvisor()

    @property
    def is_remote(self) -> bool:
        return self.analyzer_repo is not None

    def analyze_local(self, spec: QuerySpec, metadata_index: Optional[FieldMetadataIndex] = None) -> QueryAnalysis:
        return self.advisor.assess(spec, metadata_index)

    async def analyze(self, query: str, spec: QuerySpec,
                      metadata_index: Optional[FieldMetadataIndex] = None) -> QueryAnalysis:
        if self.analyzer_repo is None:
            return self.analyze_local(spec, metadata_index)
        try:
            data = await self.analyzer_repo.score_query(query)
            return QueryAnalysis.from_analyzer(data)
        except (AdvisoryUnavailable, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Query analysis unavailable, using fallback: {str(e)}")
            return fallback_analysis(spec)

    async def load_best_practices(self, rotator: BestPracticeRotator) -> BestPracticeRotator:
        """Replace the rotator catalogue with the remote one; keeps the defaults on failure"""
        if self.analyzer_repo is None:
            return rotator
        try:
            rotator.replace(await self.analyzer_repo.get_best_practices())
        except AdvisoryUnavailable as e:
            logger.warning(f"Could not load best practices: {str(e)}")
        return rotator
