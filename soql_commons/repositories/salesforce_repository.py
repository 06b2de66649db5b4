import logging
from typing import Any, Dict, List

import httpx

from soql_commons.constants.app_constants import AppConstants
from soql_commons.constants.app_message import AppMessage
from soql_commons.model.field_metadata_model import FieldMetadata

logger = logging.getLogger(__name__)


class MetadataUnavailable(Exception):
    """Object metadata could not be fetched (transport, auth or unknown object)"""
    pass


class QueryExecutionError(Exception):
    """The backend rejected or failed a query; `message` is shown to the user as is"""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class AdvisoryUnavailable(Exception):
    pass


def _extract_error(response: httpx.Response) -> tuple[str, str | None]:
    # REST errors come back as [{"message": ..., "errorCode": ...}]
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    if isinstance(body, list) and body and isinstance(body[0], dict):
        return body[0].get(AppConstants.MESSAGE, str(body[0])), body[0].get(AppConstants.ERROR_CODE)
    if isinstance(body, dict) and AppConstants.MESSAGE in body:
        return body[AppConstants.MESSAGE], body.get(AppConstants.ERROR_CODE)
    return f"HTTP {response.status_code}", None


class SalesforceRepository:
    """Describe and query calls against the Salesforce REST API"""

    def __init__(self, client: httpx.Client, api_version: str = 'v59.0'):
        self.client = client
        self.api_version = api_version
        logger.info(f"Initialized SalesforceRepository with api version: {self.api_version}")

    def _data_path(self, suffix: str) -> str:
        return f"/services/data/{self.api_version}/{suffix}"

    def fetch_field_metadata(self, entity: str) -> Dict[str, FieldMetadata]:
        """
        Describe `entity` and return its fields keyed by API name, in describe order.

        Raises:
            MetadataUnavailable: on transport errors or non-2xx responses
        """
        try:
            response = self.client.get(self._data_path(f"sobjects/{entity}/describe"))
        except httpx.HTTPError as e:
            logger.error(f"Error describing {entity}: {str(e)}", exc_info=True)
            raise MetadataUnavailable(f"{AppMessage.METADATA_FAILED}: {e}") from e

        if response.is_error:
            message, _ = _extract_error(response)
            logger.error(f"Describe {entity} failed with status {response.status_code}: {message}")
            raise MetadataUnavailable(f"{AppMessage.METADATA_FAILED}: {message}")

        fields: Dict[str, FieldMetadata] = {}
        try:
            for field in response.json().get(AppConstants.FIELDS, []):
                meta = FieldMetadata.from_describe(field)
                fields[meta.identifier] = meta
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            # e.g. an HTML login page served with 200 after the session expired
            logger.error(f"Unreadable describe response for {entity}: {str(e)}", exc_info=True)
            raise MetadataUnavailable(f"{AppMessage.METADATA_FAILED}: unreadable describe response") from e
        return fields

    def execute_query(self, query: str) -> Dict[str, Any]:
        """
        Run `query` and return {"records": [...], "totalSize": n}.

        The per-record `attributes` envelope is dropped.

        Raises:
            QueryExecutionError: with the backend message on any failure
        """
        try:
            logger.debug(f"Executing SOQL: {query}")
            response = self.client.get(self._data_path(AppConstants.QUERY), params={'q': query})
        except httpx.HTTPError as e:
            logger.error(f"Error executing query: {str(e)}", exc_info=True)
            raise QueryExecutionError(str(e)) from e

        if response.is_error:
            message, error_code = _extract_error(response)
            logger.error(f"Query failed ({error_code}): {message}")
            logger.error(f"Statement: {query}")
            raise QueryExecutionError(message, error_code)

        try:
            body = response.json()
            records = []
            for record in body.get(AppConstants.RECORDS, []):
                records.append({k: v for k, v in record.items() if k != AppConstants.ATTRIBUTES})
            total_size = int(body.get(AppConstants.TOTAL_SIZE, len(records)))
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Unreadable query response: {str(e)}", exc_info=True)
            raise QueryExecutionError(f"Unreadable query response: {str(e)}") from e
        return {
            AppConstants.RECORDS: records,
            AppConstants.TOTAL_SIZE: total_size,
        }


class QueryAnalyzerRepository:
    """Optional remote scoring service for query strings"""

    def __init__(self, client: httpx.AsyncClient, analyzer_url: str):
        self.client = client
        self.analyzer_url = analyzer_url.rstrip('/')

    async def score_query(self, query: str) -> Dict[str, Any]:
        try:
            response = await self.client.post(self.analyzer_url, json={AppConstants.QUERY: query})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AdvisoryUnavailable(str(e)) from e
        if not isinstance(data, dict):
            raise AdvisoryUnavailable(f"Analyzer returned {type(data).__name__}, expected an object")
        return data

    async def get_best_practices(self) -> List[str]:
        try:
            response = await self.client.get(f"{self.analyzer_url}/best-practices")
            response.raise_for_status()
            tips = response.json()
            if not isinstance(tips, list):
                raise TypeError(f"expected a list of tips, got {type(tips).__name__}")
            return [str(tip) for tip in tips]
        except (httpx.HTTPError, ValueError, TypeError) as e:
            raise AdvisoryUnavailable(str(e)) from e
