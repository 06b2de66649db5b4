from typing import List, Optional

from soql_commons.constants.app_constants import AppConstants
from soql_commons.constants.app_message import AppMessage
from soql_commons.model.query_model import QueryAnalysis, QuerySpec
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex

# best -> worst
GRADE_TIERS = [AppConstants.GOOD, AppConstants.FAIR, AppConstants.POOR]


def _downgrade(grade: str) -> str:
    index = GRADE_TIERS.index(grade)
    return GRADE_TIERS[min(index + 1, len(GRADE_TIERS) - 1)]


def describe_query(spec: QuerySpec) -> str:
    """Plain-language sentence describing what the query does"""
    if not spec.entity:
        return ''

    if not spec.selected_fields:
        fields = 'the Id field'
    elif len(spec.selected_fields) == 1:
        fields = f"the {spec.selected_fields[0]} field"
    else:
        fields = f"{len(spec.selected_fields)} fields"

    explanation = f"This query retrieves {fields} from {spec.entity} records"
    if spec.conditions:
        explanation += ' with filtering conditions'
    if spec.order_by_field:
        explanation += f" sorted by {spec.order_by_field}"
    if spec.limit:
        explanation += f" limited to {spec.limit} records"
    return explanation + '.'


class QueryAdvisor:
    """
    Rule based performance advice for a query.

    Every rule is evaluated independently; tips are collected in rule order
    and each rule may lower the grade.
    """

    def assess(self, spec: QuerySpec, metadata_index: Optional[FieldMetadataIndex] = None) -> QueryAnalysis:
        tips: List[str] = []
        grade = AppConstants.GOOD

        has_indexed_filter = any(
            condition.field and condition.value and self._is_indexed(condition.field, metadata_index)
            for condition in spec.conditions
        )
        if spec.conditions and not has_indexed_filter:
            tips.append(AppMessage.TIP_INDEXED_FIELDS)
            grade = _downgrade(grade)

        if len(spec.selected_fields) > AppConstants.MANY_FIELDS_THRESHOLD:
            tips.append(AppMessage.TIP_NARROW_FIELDS)

        if not spec.limit or spec.limit > AppConstants.HIGH_LIMIT_THRESHOLD:
            tips.append(AppMessage.TIP_ADD_LIMIT)
            if grade == AppConstants.GOOD:
                grade = _downgrade(grade)

        has_negative = any(
            condition.operator.value in AppConstants.NEGATIVE_OPERATORS for condition in spec.conditions
        )
        if has_negative:
            tips.append(AppMessage.TIP_NEGATIVE_OPERATORS)
            grade = AppConstants.POOR

        return QueryAnalysis(
            score=AppConstants.GRADE_SCORES[grade],
            grade=grade,
            grade_variant=AppConstants.GRADE_VARIANTS[grade],
            tips=tips,
            explanation=describe_query(spec),
        )

    @staticmethod
    def _is_indexed(field: str, metadata_index: Optional[FieldMetadataIndex]) -> bool:
        if metadata_index is None:
            return field in AppConstants.INDEXED_FIELDS
        return metadata_index.is_indexed(field)


def fallback_analysis(spec: QuerySpec) -> QueryAnalysis:
    """Neutral result used when the remote analyzer cannot be reached"""
    return QueryAnalysis(
        score=AppConstants.FALLBACK_SCORE,
        grade=AppConstants.GOOD,
        grade_variant=AppConstants.SUCCESS,
        tips=[AppMessage.ANALYSIS_UNAVAILABLE],
        explanation=describe_query(spec),
    )


class BestPracticeRotator:
    """Round-robin over the best practice catalogue"""

    def __init__(self, tips: Optional[List[str]] = None):
        self.tips = list(tips) if tips else list(AppMessage.BEST_PRACTICES)
        self.index = 0

    @property
    def current_tip(self) -> str:
        return self.tips[self.index] if self.tips else ''

    def next_tip(self) -> str:
        if self.tips:
            self.index = (self.index + 1) % len(self.tips)
        return self.current_tip

    def replace(self, tips: List[str]) -> None:
        if tips:
            self.tips = list(tips)
            self.index = 0
