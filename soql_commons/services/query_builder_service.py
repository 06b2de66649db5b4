import asyncio
import logging
from typing import Any, Dict, List, Optional

from soql_commons.constants.app_constants import AppConstants
from soql_commons.constants.app_message import AppMessage
from soql_commons.model.condition_model import Condition
from soql_commons.model.field_metadata_model import FieldMetadata, FieldType
from soql_commons.model.query_model import QueryAnalysis, QueryExecutionResult, QuerySpec, SortDirection, TableColumn
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex
from soql_commons.repositories.salesforce_repository import MetadataUnavailable, QueryExecutionError
from soql_commons.services.query_analysis_service import QueryAnalysisService
from soql_commons.utils.condition_list import ConditionList
from soql_commons.utils.query_advisor import BestPracticeRotator
from soql_commons.utils.soql_query_assembler import SoqlQueryAssembler
from soql_commons.utils.soql_value_formatter import SoqlValueFormatter

logger = logging.getLogger(__name__)


class QueryBuilderBusyError(QueryExecutionError):
    pass


def column_type_for(field_name: str, value: Any, field_meta: Optional[FieldMetadata]) -> str:
    """Result table column type from field metadata, else from the value and field name"""
    if field_meta is not None:
        if field_meta.is_date:
            return 'date' if field_meta.field_type == FieldType.DATETIME else 'date-local'
        if field_meta.is_number:
            return 'number'
        if field_meta.is_boolean:
            return 'boolean'

    name = field_name.lower()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return 'number'
    if 'date' in name:
        return 'date'
    if 'email' in name:
        return 'email'
    if 'phone' in name:
        return 'phone'
    if 'url' in name or 'website' in name:
        return 'url'
    return 'text'


class QueryBuilderService:
    """
    One query builder session.

    Every edit mutates the session state and then synchronously regenerates the
    query string and the local insights. The session owns its own metadata
    index; nothing is shared between sessions.
    """

    def __init__(self, salesforce_repo=None, analysis_service: Optional[QueryAnalysisService] = None,
                 metadata_aware: bool = True, escape_quotes: bool = False):
        self.salesforce_repo = salesforce_repo
        self.analysis_service = analysis_service or QueryAnalysisService()
        self.metadata_index = FieldMetadataIndex(source=salesforce_repo)
        self.condition_list = ConditionList(self.metadata_index)
        self.assembler = SoqlQueryAssembler(SoqlValueFormatter(metadata_aware=metadata_aware,
                                                               escape_quotes=escape_quotes))
        self.best_practices = BestPracticeRotator()

        self.entity = ''
        self.selected_fields: List[str] = []
        self.order_by_field = ''
        self.sort_direction = SortDirection.ASC
        self.limit: Optional[int] = AppConstants.DEFAULT_LIMIT
        self.offset: Optional[int] = AppConstants.DEFAULT_OFFSET

        self.generated_query = AppConstants.DEFAULT_QUERY
        self.analysis: QueryAnalysis = QueryAnalysis()
        self.metadata_error: Optional[str] = None
        self.last_error: Optional[str] = None
        self.result = QueryExecutionResult()

        self._edit_counter = 0
        self._executing = False
        self.recompute()

    # -------------------------
    # derived state
    # -------------------------
    @property
    def conditions(self) -> List[Condition]:
        return self.condition_list.conditions

    @property
    def field_options(self) -> List[Dict[str, Any]]:
        return [meta.to_option() for meta in self.metadata_index.fields]

    @property
    def is_executing(self) -> bool:
        return self._executing

    @property
    def edit_counter(self) -> int:
        return self._edit_counter

    def build_spec(self) -> QuerySpec:
        return QuerySpec(
            entity=self.entity,
            selected_fields=self.selected_fields,
            conditions=self.condition_list.conditions,
            order_by_field=self.order_by_field,
            sort_direction=self.sort_direction,
            limit=self.limit,
            offset=self.offset,
        )

    def recompute(self) -> str:
        spec = self.build_spec()
        self._edit_counter += 1
        self.generated_query = self.assembler.assemble(spec, self.metadata_index)
        self.analysis = self.analysis_service.analyze_local(spec, self.metadata_index)
        return self.generated_query

    # -------------------------
    # object and fields
    # -------------------------
    def select_entity(self, entity: str) -> str:
        """
        Switch the target object. Clears fields, conditions, ordering and
        results, then reloads the metadata index. A failed metadata fetch keeps
        the object selected with an empty index, so formatting goes untyped.
        """
        self.entity = entity or ''
        self.selected_fields = []
        self.condition_list.clear()
        self.order_by_field = ''
        self.result = QueryExecutionResult()
        self.metadata_error = None
        self.last_error = None
        self.metadata_index.clear()

        if not self.entity:
            self.reset()
            return self.generated_query

        try:
            self.metadata_index.load(self.entity)
        except MetadataUnavailable as e:
            logger.error(f"Error fetching metadata for {self.entity}: {str(e)}", exc_info=True)
            self.metadata_index.clear()
            self.metadata_error = str(e)
        return self.recompute()

    def toggle_field(self, field: str, selected: bool = True) -> str:
        if selected:
            if field not in self.selected_fields:
                self.selected_fields = [*self.selected_fields, field]
        else:
            self.selected_fields = [f for f in self.selected_fields if f != field]
        return self.recompute()

    def select_all_fields(self) -> str:
        self.selected_fields = [meta.identifier for meta in self.metadata_index.fields]
        return self.recompute()

    def clear_fields(self) -> str:
        self.selected_fields = []
        return self.recompute()

    # -------------------------
    # conditions
    # -------------------------
    def add_condition(self) -> Condition:
        condition = self.condition_list.append()
        self.recompute()
        return condition

    def remove_condition(self, position: int) -> Condition:
        removed = self.condition_list.remove_at(position)
        self.recompute()
        return removed

    def update_condition(self, position: int, attribute: str, value: Any) -> Condition:
        condition = self.condition_list.update(position, attribute, value)
        self.recompute()
        return condition

    def change_connector(self, position: int, connector: str) -> Condition:
        return self.update_condition(position, AppConstants.CONNECTOR, connector)

    # -------------------------
    # ordering and pagination
    # -------------------------
    def set_order_by(self, field: str) -> str:
        self.order_by_field = field or ''
        return self.recompute()

    def set_sort_direction(self, direction: str) -> str:
        self.sort_direction = SortDirection(direction.upper() if isinstance(direction, str) else direction)
        return self.recompute()

    def set_limit(self, value: Any) -> List[str]:
        """
        Set the LIMIT. Values above 50,000 are clamped and a warning is returned.

        Raises:
            ValueError: for non-numeric or negative input
        """
        warnings: List[str] = []
        if value is None or str(value).strip() == '':
            self.limit = None
        else:
            limit = int(str(value).strip())
            if limit < 0:
                raise ValueError("LIMIT must be zero or positive")
            if limit > AppConstants.MAX_LIMIT:
                logger.warning(f"LIMIT {limit} clamped to {AppConstants.MAX_LIMIT}")
                warnings.append(AppMessage.LIMIT_EXCEEDED)
                limit = AppConstants.MAX_LIMIT
            self.limit = limit
        self.recompute()
        return warnings

    def set_offset(self, value: Any) -> str:
        if value is None or str(value).strip() == '':
            self.offset = None
        else:
            offset = int(str(value).strip())
            if offset < 0:
                raise ValueError("OFFSET must be zero or positive")
            self.offset = offset
        return self.recompute()

    def reset(self) -> str:
        self.entity = ''
        self.selected_fields = []
        self.condition_list.clear()
        self.order_by_field = ''
        self.metadata_index.clear()
        self.result = QueryExecutionResult()
        return self.recompute()

    # -------------------------
    # remote calls
    # -------------------------
    async def refresh_analysis(self) -> bool:
        """
        Ask the analysis service about the current query.

        The result is applied only when no edit happened while the call was in
        flight; returns whether it was applied.
        """
        issued_at = self._edit_counter
        query = self.generated_query
        analysis = await self.analysis_service.analyze(query, self.build_spec(), self.metadata_index)
        if issued_at != self._edit_counter:
            logger.debug(f"Discarding stale analysis for edit {issued_at}")
            return False
        self.analysis = analysis
        return True

    async def load_best_practices(self) -> str:
        await self.analysis_service.load_best_practices(self.best_practices)
        return self.best_practices.current_tip

    def next_best_practice(self) -> str:
        return self.best_practices.next_tip()

    async def execute(self) -> QueryExecutionResult:
        """
        Run the current query through the salesforce repository.

        Failures do not raise: the returned result carries `error` with the
        backend message, which is also kept in `last_error`.

        Raises:
            QueryBuilderBusyError: another execution of this session is running
        """
        if self._executing:
            raise QueryBuilderBusyError(AppMessage.QUERY_BUSY)
        if not self.entity or not self.generated_query:
            return self._failed(AppMessage.INVALID_QUERY)
        if self.salesforce_repo is None:
            return self._failed("No query executor configured")

        self._executing = True
        self.last_error = None
        try:
            response = await asyncio.to_thread(self.salesforce_repo.execute_query, self.generated_query)
        except QueryExecutionError as e:
            logger.error(f"{AppMessage.QUERY_FAILED}: {e.message}")
            return self._failed(e.message)
        finally:
            self._executing = False

        records = response.get(AppConstants.RECORDS, [])
        self.result = QueryExecutionResult(
            records=records,
            total_size=response.get(AppConstants.TOTAL_SIZE, len(records)),
            columns=self._build_columns(records),
        )
        logger.info(f"Query returned {self.result.total_size} records")
        return self.result

    def _failed(self, message: str) -> QueryExecutionResult:
        self.last_error = message
        self.result = QueryExecutionResult(error=message)
        return self.result

    def _build_columns(self, records: List[Dict[str, Any]]) -> List[TableColumn]:
        if not records:
            return []
        first = records[0]
        return [
            TableColumn(
                label=name,
                field_name=name,
                type=column_type_for(name, value, self.metadata_index.lookup(name)),
            )
            for name, value in first.items()
        ]
