from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from soql_commons.constants.app_constants import AppConstants


class Operator(str, Enum):
    """Supported comparison operators"""
    EQUALS = "="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    LIKE = "LIKE"
    IN = "IN"
    NOT_IN = "NOT IN"


class Connector(str, Enum):
    AND = AppConstants.AND
    OR = AppConstants.OR


class InputShape(str, Enum):
    """Input widget a condition value is edited with"""
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime-local"
    PICKLIST = "picklist"


BOOLEAN_OPTIONS = [
    {AppConstants.LABEL: 'True', AppConstants.VALUE: AppConstants.TRUE},
    {AppConstants.LABEL: 'False', AppConstants.VALUE: AppConstants.FALSE},
]


class Condition(BaseModel):
    """One filter clause of the WHERE predicate"""
    model_config = ConfigDict(frozen=True)

    sequence_id: int
    field: str = ''
    operator: Operator = Operator.EQUALS
    value: str = ''
    connector: Connector = Connector.AND
    is_first: bool = False
    input_shape: InputShape = InputShape.TEXT
    picklist_options: List[Dict[str, str]] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return bool(self.field) and bool(self.value)

    @property
    def boolean_options(self) -> List[Dict[str, str]]:
        return BOOLEAN_OPTIONS
