from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from soql_commons.constants.app_constants import AppConstants


class FieldType(str, Enum):
    """Type classification of an object field"""
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"
    PICKLIST = "PICKLIST"


# describe() type name -> FieldType, anything missing is TEXT
DESCRIBE_TYPES = {
    'date': FieldType.DATE,
    'datetime': FieldType.DATETIME,
    'double': FieldType.NUMBER,
    'currency': FieldType.NUMBER,
    'percent': FieldType.NUMBER,
    'int': FieldType.NUMBER,
    'long': FieldType.NUMBER,
    'boolean': FieldType.BOOLEAN,
    'picklist': FieldType.PICKLIST,
    'multipicklist': FieldType.PICKLIST,
}


class FieldMetadata(BaseModel):
    """Type metadata of a single field, immutable once fetched"""
    model_config = ConfigDict(frozen=True)

    identifier: str
    display_label: str = ''
    field_type: FieldType = FieldType.TEXT
    picklist_values: List[str] = Field(default_factory=list)
    is_indexed: bool = False

    @property
    def is_date(self) -> bool:
        return self.field_type in (FieldType.DATE, FieldType.DATETIME)

    @property
    def is_number(self) -> bool:
        return self.field_type == FieldType.NUMBER

    @property
    def is_boolean(self) -> bool:
        return self.field_type == FieldType.BOOLEAN

    @property
    def is_picklist(self) -> bool:
        return self.field_type == FieldType.PICKLIST

    @classmethod
    def from_describe(cls, field: Dict[str, Any]) -> 'FieldMetadata':
        """
        Build metadata from one entry of the describe() `fields` array.

        Only active picklist values are kept, in the order the org returns them.
        """
        name = field[AppConstants.NAME]
        field_type = DESCRIBE_TYPES.get(str(field.get(AppConstants.TYPE, '')).lower(), FieldType.TEXT)
        picklist_values = []
        if field_type == FieldType.PICKLIST:
            picklist_values = [
                entry.get(AppConstants.VALUE)
                for entry in field.get(AppConstants.PICKLIST_VALUES) or []
                if entry.get(AppConstants.ACTIVE, True)
            ]
        is_indexed = (
            name in AppConstants.INDEXED_FIELDS
            or bool(field.get(AppConstants.EXTERNAL_ID))
            or bool(field.get(AppConstants.UNIQUE))
        )
        return cls(
            identifier=name,
            display_label=field.get(AppConstants.LABEL) or name,
            field_type=field_type,
            picklist_values=picklist_values,
            is_indexed=is_indexed,
        )

    def to_option(self) -> Dict[str, Any]:
        """Row shape used by field pickers"""
        return {
            AppConstants.LABEL: self.display_label,
            AppConstants.VALUE: self.identifier,
            'isIndexed': self.is_indexed,
        }
