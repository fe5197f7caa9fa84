"""
QueryEngine for paginated entity queries.

Builds filtered statements, walks STARTPOSITION pages strictly one at a time,
and assembles the complete result set. A page shorter than the page size ends
the walk; there is no total-count check, so a result set that is an exact
multiple of the page size costs one extra (empty) request.
"""

from collections.abc import Callable, Iterator
from typing import Any

from qbo_query.constants import MAX_RESULTS_PER_PAGE, REFERENCE_ENTITIES
from qbo_query.core.api_client import APIClient
from qbo_query.core.token_manager import TokenManager
from qbo_query.exceptions import RemoteApiError
from qbo_query.models.query import ConnectionStatus, QueryOptions
from qbo_query.utils.app_logger import get_logger
from qbo_query.utils.query_builder import (
    build_order_by,
    build_select,
    build_where_clause,
    validate_entity_name,
)

logger = get_logger(__name__)


class QueryEngine:
    """
    Executes read-only queries against a single QuickBooks company.

    Features:
    - Date-range and raw WHERE filtering
    - Deterministic ORDER BY per entity type so paging is stable
    - Short-page pagination across the full result set
    - Point lookups, reference maps, and a connection probe
    """

    def __init__(self, token_manager: TokenManager, client: APIClient) -> None:
        """
        Initialize QueryEngine.

        Args:
            token_manager: Source of valid bearer tokens
            client: HTTP API client
        """
        self.token_manager = token_manager
        self.client = client

    def query(self, entity: str, options: QueryOptions | None = None) -> list[dict[str, Any]]:
        """
        Fetch every record of an entity matching the options.

        Args:
            entity: QuickBooks entity name (e.g. ``Invoice``)
            options: Filters and page size (defaults apply when omitted)

        Returns:
            Records from all pages, in server order

        Raises:
            ValueError: If the entity name is invalid
            RemoteApiError: If any page request fails or returns malformed rows
        """
        validate_entity_name(entity)
        options = options or QueryOptions()

        where_clause = build_where_clause(options)
        order_by = build_order_by(entity)

        def statement_for(start_position: int) -> str:
            return build_select(
                entity,
                where_clause=where_clause,
                order_by=order_by,
                start_position=start_position,
                max_results=options.max_results,
            )

        results: list[dict[str, Any]] = []
        for page in self._paginate(entity, statement_for, options.max_results):
            results.extend(page)

        logger.info("Fetched %d %s record(s)", len(results), entity)
        return results

    def get_by_id(self, entity: str, entity_id: str) -> Any:
        """
        Fetch a single record by ID.

        Returns:
            The record document, or None if the response lacks the entity key

        Raises:
            RemoteApiError: If the remote returns non-success (e.g. unknown ID)
        """
        validate_entity_name(entity)
        access_token, realm_id = self.token_manager.get_valid_access_token()
        payload = self.client.get_entity(realm_id, access_token, entity, entity_id)
        return payload.get(entity)

    def get_reference_map(self, entity_type: str) -> dict[str, str]:
        """
        Build an ID -> FullyQualifiedName map for a reference entity.

        Records missing either field are skipped.

        Args:
            entity_type: One of Account, Customer, Vendor

        Raises:
            ValueError: If the entity type is not supported
        """
        if entity_type not in REFERENCE_ENTITIES:
            raise ValueError(
                f"Unsupported reference entity: {entity_type}. "
                f"Supported: {', '.join(REFERENCE_ENTITIES)}"
            )

        def statement_for(start_position: int) -> str:
            return build_select(
                entity_type,
                columns="Id, FullyQualifiedName",
                start_position=start_position,
                max_results=MAX_RESULTS_PER_PAGE,
            )

        ref_map: dict[str, str] = {}
        for page in self._paginate(entity_type, statement_for, MAX_RESULTS_PER_PAGE):
            for ref in page:
                ref_id = ref.get("Id")
                name = ref.get("FullyQualifiedName")
                if ref_id and name:
                    ref_map[str(ref_id)] = name

        return ref_map

    def check_connection(self) -> ConnectionStatus:
        """
        Probe the connection by fetching the company profile.

        Never raises; any failure is captured in the returned status.
        """
        realm_id: str | None = None
        try:
            access_token, realm_id = self.token_manager.get_valid_access_token()
            payload = self.client.get_company_info(realm_id, access_token)
            return ConnectionStatus(
                connected=True,
                realm_id=realm_id,
                company_info=payload.get("CompanyInfo"),
            )
        except Exception as e:
            logger.debug("Connection check failed", exc_info=True)
            return ConnectionStatus(connected=False, realm_id=realm_id, error=str(e))

    def _paginate(
        self,
        entity: str,
        statement_for: Callable[[int], str],
        page_size: int,
    ) -> Iterator[list[dict[str, Any]]]:
        """Yield pages until one comes back shorter than ``page_size``."""
        access_token, realm_id = self.token_manager.get_valid_access_token()
        start_position = 1

        while True:
            payload = self.client.query(realm_id, access_token, statement_for(start_position))
            rows = self._extract_rows(payload, entity)
            logger.debug(
                "%s page at position %d returned %d row(s)", entity, start_position, len(rows)
            )
            yield rows

            if len(rows) < page_size:
                break

            start_position += len(rows)

    @staticmethod
    def _extract_rows(payload: dict[str, Any], entity: str) -> list[dict[str, Any]]:
        """Pull ``QueryResponse[entity]`` out of a query response (missing = no rows)."""
        query_response = payload.get("QueryResponse") or {}
        rows = query_response.get(entity) or []
        if not isinstance(rows, list):
            raise RemoteApiError(
                200, "OK", f"Unexpected QueryResponse.{entity} type: {type(rows).__name__}"
            )
        return rows
