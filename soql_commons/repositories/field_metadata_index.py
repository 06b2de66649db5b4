import logging
from typing import Dict, List, Optional

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.field_metadata_model import FieldMetadata
from soql_commons.repositories.salesforce_repository import MetadataUnavailable

logger = logging.getLogger(__name__)


class FieldMetadataIndex:
    """
    Field identifier -> FieldMetadata lookup for the currently selected object.

    The table is owned by one builder session and is replaced wholesale on
    every load, never merged. A failed load leaves it empty.
    """

    def __init__(self, source=None):
        self.source = source
        self.entity = ''
        self._fields: Dict[str, FieldMetadata] = {}

    def load(self, entity: str) -> Dict[str, FieldMetadata]:
        """
        Fetch metadata for `entity` and replace the current table.

        Raises MetadataUnavailable when there is no source or the source
        fails; the table is already cleared at that point.
        """
        self.clear()
        self.entity = entity
        if not entity:
            return {}
        if self.source is None:
            raise MetadataUnavailable(f"No metadata source configured for {entity}")

        fields = self.source.fetch_field_metadata(entity)
        self._fields = dict(fields)
        logger.info(f"Loaded {len(self._fields)} fields for {entity}")
        return dict(self._fields)

    def replace(self, entity: str, fields: Dict[str, FieldMetadata]) -> None:
        self.entity = entity
        self._fields = dict(fields)

    def clear(self) -> None:
        self.entity = ''
        self._fields = {}

    def lookup(self, identifier: str) -> Optional[FieldMetadata]:
        if not identifier:
            return None
        return self._fields.get(identifier)

    def is_indexed(self, identifier: str) -> bool:
        meta = self.lookup(identifier)
        if meta is not None:
            return meta.is_indexed
        return identifier in AppConstants.INDEXED_FIELDS

    @property
    def fields(self) -> List[FieldMetadata]:
        return list(self._fields.values())

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._fields

    def __len__(self) -> int:
        return len(self._fields)
