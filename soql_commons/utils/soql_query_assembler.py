from typing import List, Optional

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.condition_model import Condition
from soql_commons.model.query_model import QuerySpec
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex
from soql_commons.utils.soql_value_formatter import SoqlValueFormatter


class SoqlQueryAssembler:
    """
    Compose a QuerySpec into a SOQL string.

    Output is deterministic: the same spec and metadata snapshot always
    produce the same string.
    """

    def __init__(self, formatter: Optional[SoqlValueFormatter] = None):
        self.formatter = formatter or SoqlValueFormatter()

    def compile_condition(self, condition: Condition, metadata_index: Optional[FieldMetadataIndex] = None) -> str:
        field_meta = metadata_index.lookup(condition.field) if metadata_index is not None else None
        literal = self.formatter.format(condition.value, field_meta, condition.operator)
        return f"{condition.field} {condition.operator.value} {literal}"

    def compile_where(self, conditions: List[Condition], metadata_index: Optional[FieldMetadataIndex] = None) -> str:
        """
        Join the complete conditions into a single predicate.

        Incomplete conditions (no field or no value) are skipped, and the
        connector of the first surviving condition is never emitted.
        """
        compiled_parts: List[str] = []
        for condition in conditions:
            if not condition.is_complete:
                continue
            part = self.compile_condition(condition, metadata_index)
            if compiled_parts:
                part = f" {condition.connector.value} {part}"
            compiled_parts.append(part)
        return ''.join(compiled_parts)

    def assemble(self, spec: QuerySpec, metadata_index: Optional[FieldMetadataIndex] = None) -> str:
        if not spec.entity:
            return AppConstants.DEFAULT_QUERY

        fields = ', '.join(spec.selected_fields) if spec.selected_fields else AppConstants.DEFAULT_FIELD
        query = f"SELECT {fields} FROM {spec.entity}"

        where = self.compile_where(spec.conditions, metadata_index)
        if where:
            query += f" WHERE {where}"

        if spec.order_by_field:
            query += f" ORDER BY {spec.order_by_field} {spec.sort_direction.value}"

        if spec.limit:
            query += f" LIMIT {spec.limit}"

        if spec.offset:
            query += f" OFFSET {spec.offset}"

        return query


_default_assembler = SoqlQueryAssembler()


def assemble(spec: QuerySpec, metadata_index: Optional[FieldMetadataIndex] = None) -> str:
    return _default_assembler.assemble(spec, metadata_index)
