from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.condition_model import Condition


class SortDirection(str, Enum):
    ASC = AppConstants.ASC
    DESC = AppConstants.DESC


class QuerySpec(BaseModel):
    """Snapshot of the builder state a query string is assembled from"""
    entity: str = ''
    selected_fields: List[str] = Field(default_factory=list)
    conditions: List[Condition] = Field(default_factory=list)
    order_by_field: str = ''
    sort_direction: SortDirection = SortDirection.ASC
    limit: Optional[int] = AppConstants.DEFAULT_LIMIT
    offset: Optional[int] = AppConstants.DEFAULT_OFFSET

    @field_validator('selected_fields')
    @classmethod
    def dedupe_fields(cls, v: List[str]) -> List[str]:
        # keep first occurrence, preserve order
        return list(dict.fromkeys(v))

    @field_validator('sort_direction', mode='before')
    @classmethod
    def normalize_direction(cls, v: Any) -> Any:
        if isinstance(v, str):
            return (v or AppConstants.ASC).upper()
        return v

    @field_validator('limit')
    @classmethod
    def clamp_limit(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Limit must be zero or positive")
        if v is not None and v > AppConstants.MAX_LIMIT:
            return AppConstants.MAX_LIMIT
        return v

    @field_validator('offset')
    @classmethod
    def validate_offset(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Offset must be zero or positive")
        return v


class QueryAnalysis(BaseModel):
    """Advisory result for a query string"""
    score: int = AppConstants.GRADE_SCORES[AppConstants.GOOD]
    grade: str = AppConstants.GOOD
    grade_variant: str = AppConstants.SUCCESS
    tips: List[str] = Field(default_factory=list)
    explanation: str = ''
    estimated_records: str = ''

    @classmethod
    def from_analyzer(cls, data: Dict[str, Any]) -> 'QueryAnalysis':
        """Converts the remote analyzer payload into a QueryAnalysis"""
        return cls(
            score=int(data.get(AppConstants.PERFORMANCE_SCORE, AppConstants.FALLBACK_SCORE)),
            grade=data.get(AppConstants.PERFORMANCE_GRADE) or AppConstants.GOOD,
            grade_variant=data.get(AppConstants.GRADE_VARIANT) or AppConstants.SUCCESS,
            tips=list(data.get(AppConstants.SUGGESTIONS) or []),
            explanation=data.get(AppConstants.EXPLANATION) or '',
            estimated_records=str(data.get(AppConstants.ESTIMATED_RECORDS) or ''),
        )


class TableColumn(BaseModel):
    label: str
    field_name: str
    type: str = 'text'


class QueryExecutionResult(BaseModel):
    """Response model for query results"""
    records: List[Dict[str, Any]] = Field(default_factory=list)
    total_size: int = 0
    columns: List[TableColumn] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
