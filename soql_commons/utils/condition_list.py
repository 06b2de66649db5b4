from typing import Any, Dict, Iterator, List, Optional, Tuple

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.condition_model import Condition, Connector, InputShape, Operator
from soql_commons.model.field_metadata_model import FieldMetadata, FieldType
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex


class InvalidConditionError(ValueError):
    pass


# accepted spellings of the editable attributes
ATTRIBUTE_ALIASES = {
    AppConstants.FIELD: AppConstants.FIELD,
    'field_identifier': AppConstants.FIELD,
    'fieldIdentifier': AppConstants.FIELD,
    AppConstants.OPERATOR: AppConstants.OPERATOR,
    AppConstants.VALUE: AppConstants.VALUE,
    'raw_value': AppConstants.VALUE,
    'rawValue': AppConstants.VALUE,
    AppConstants.CONNECTOR: AppConstants.CONNECTOR,
    'logicOperator': AppConstants.CONNECTOR,
}


def input_shape_for(field_meta: Optional[FieldMetadata]) -> Dict[str, Any]:
    """Derived input attributes of a condition whose field has `field_meta`"""
    if field_meta is None:
        return {'input_shape': InputShape.TEXT, 'picklist_options': []}
    if field_meta.is_date:
        shape = InputShape.DATETIME if field_meta.field_type == FieldType.DATETIME else InputShape.DATE
        return {'input_shape': shape, 'picklist_options': []}
    if field_meta.is_picklist:
        options = [{AppConstants.LABEL: v, AppConstants.VALUE: v} for v in field_meta.picklist_values]
        return {'input_shape': InputShape.PICKLIST, 'picklist_options': options}
    if field_meta.is_number:
        return {'input_shape': InputShape.NUMBER, 'picklist_options': []}
    if field_meta.is_boolean:
        return {'input_shape': InputShape.BOOLEAN, 'picklist_options': []}
    return {'input_shape': InputShape.TEXT, 'picklist_options': []}


class ConditionList:
    """
    Ordered, editable list of WHERE conditions.

    Conditions are immutable; every mutation builds the updated condition with
    model_copy and swaps in a new tuple, so `conditions` returns a new
    collection after each change. Sequence ids are never reused.
    """

    def __init__(self, metadata_index: Optional[FieldMetadataIndex] = None):
        self.metadata_index = metadata_index
        self._conditions: Tuple[Condition, ...] = ()
        self._counter = 0

    @property
    def conditions(self) -> List[Condition]:
        return list(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def __iter__(self) -> Iterator[Condition]:
        return iter(self._conditions)

    def __getitem__(self, position: int) -> Condition:
        self._check_position(position)
        return self._conditions[position]

    def _check_position(self, position: int) -> None:
        if not isinstance(position, int) or position < 0 or position >= len(self._conditions):
            raise InvalidConditionError(f"No condition at position {position!r}")

    def _commit(self, conditions: List[Condition]) -> None:
        # is_first is true for index 0 only
        normalized = []
        for index, condition in enumerate(conditions):
            if condition.is_first != (index == 0):
                condition = condition.model_copy(update={'is_first': index == 0})
            normalized.append(condition)
        self._conditions = tuple(normalized)

    def append(self) -> Condition:
        self._counter += 1
        condition = Condition(sequence_id=self._counter, is_first=not self._conditions)
        self._commit([*self._conditions, condition])
        return condition

    def remove_at(self, position: int) -> Condition:
        self._check_position(position)
        removed = self._conditions[position]
        self._commit([c for i, c in enumerate(self._conditions) if i != position])
        return removed

    def update(self, position: int, attribute: str, value: Any) -> Condition:
        """
        Replace one attribute of the condition at `position`.

        Changing the field clears the value and re-derives the input shape
        from the metadata index (free text when the field is unknown).
        """
        self._check_position(position)
        name = ATTRIBUTE_ALIASES.get(attribute)
        if name is None:
            raise InvalidConditionError(f"Unknown condition attribute '{attribute}'")

        changes: Dict[str, Any] = {}
        if name == AppConstants.FIELD:
            field = '' if value is None else str(value)
            field_meta = self.metadata_index.lookup(field) if self.metadata_index is not None else None
            changes[AppConstants.FIELD] = field
            changes[AppConstants.VALUE] = ''
            changes.update(input_shape_for(field_meta))
        elif name == AppConstants.OPERATOR:
            try:
                changes[AppConstants.OPERATOR] = Operator(value)
            except ValueError:
                raise InvalidConditionError(f"Unsupported operator '{value}'")
        elif name == AppConstants.CONNECTOR:
            try:
                changes[AppConstants.CONNECTOR] = Connector(value.upper() if isinstance(value, str) else value)
            except ValueError:
                raise InvalidConditionError(f"Connector must be AND or OR, got '{value}'")
        else:
            changes[AppConstants.VALUE] = '' if value is None else str(value)

        updated = self._conditions[position].model_copy(update=changes)
        conditions = list(self._conditions)
        conditions[position] = updated
        self._commit(conditions)
        return self._conditions[position]

    def refresh_shapes(self) -> None:
        """Re-derive input shapes after the metadata index was reloaded"""
        conditions = []
        for condition in self._conditions:
            field_meta = self.metadata_index.lookup(condition.field) if self.metadata_index is not None else None
            conditions.append(condition.model_copy(update=input_shape_for(field_meta)))
        self._commit(conditions)

    def clear(self) -> None:
        self._conditions = ()
