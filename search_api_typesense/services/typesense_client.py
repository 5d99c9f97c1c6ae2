"""
Typesense client for collection and document operations
"""

from typing import Any, Dict, Iterable, List, Optional

import requests
import typesense

from search_api_typesense.core.config import ServerAuth
from search_api_typesense.core.exceptions import TypesenseError
from search_api_typesense.core.logging import logger
from search_api_typesense.core.typesense_schema import CollectionSchema


def build_filter(filters: Dict[str, Iterable[Any]]) -> str:
    """
    Render {field: values} as a Typesense filter_by expression.

    Example: {"id": ["1", "2"]} -> "id:[1,2]"
    """
    clauses = []
    for field_name, values in filters.items():
        rendered = ",".join(str(value) for value in values)
        clauses.append(f"{field_name}:[{rendered}]")
    return " && ".join(clauses)


class TypesenseClient:
    """
    Typesense client wrapper.

    Every failure of the underlying library (HTTP errors, timeouts,
    unreachable nodes) is raised as TypesenseError.
    """

    def __init__(self):
        self.client: Optional[typesense.Client] = None
        self.auth: Optional[ServerAuth] = None

    def set_authorization(self, api_key: str, nodes: List[Dict[str, Any]], connection_timeout_seconds: int) -> None:
        """
        Point the client at a cluster with the given credentials.

        The underlying client is only rebuilt when the credentials change.
        """
        auth = ServerAuth(
            api_key=api_key,
            nodes=nodes,
            connection_timeout_seconds=connection_timeout_seconds,
        )
        self.authorize(auth)

    def authorize(self, auth: ServerAuth) -> None:
        if self.client is not None and auth == self.auth:
            return
        self.client = typesense.Client(auth.to_client_config())
        self.auth = auth
        logger.debug(f"Typesense client configured for {len(auth.nodes)} node(s)")

    def _require_client(self) -> typesense.Client:
        if self.client is None:
            raise TypesenseError("Typesense client is not authorized")
        return self.client

    def retrieve_collections(self) -> List[Dict[str, Any]]:
        """Get all collections of the cluster"""
        client = self._require_client()
        try:
            return client.collections.retrieve()
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to retrieve collections: {e}") from e

    def retrieve_collection(self, collection_name: str) -> Optional[Dict[str, Any]]:
        """
        Get a collection.

        Returns:
            Collection dict if found, otherwise None.
        """
        client = self._require_client()
        try:
            return client.collections[collection_name].retrieve()
        except typesense.exceptions.ObjectNotFound:
            return None
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to retrieve collection '{collection_name}': {e}") from e

    def create_collection(self, schema: CollectionSchema) -> Dict[str, Any]:
        client = self._require_client()
        try:
            collection = client.collections.create(schema.to_typesense())
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to create collection '{schema.name}': {e}") from e
        logger.info(f"Collection '{schema.name}' created with {len(schema.fields)} field(s)")
        return collection

    def drop_collection(self, collection_name: str) -> Dict[str, Any]:
        client = self._require_client()
        try:
            dropped = client.collections[collection_name].delete()
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to drop collection '{collection_name}': {e}") from e
        logger.info(f"Collection '{collection_name}' dropped")
        return dropped

    def create_document(self, collection_name: str, document: Dict[str, Any]) -> Dict[str, Any]:
        client = self._require_client()
        try:
            return client.collections[collection_name].documents.create(document)
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(
                f"Unable to create document '{document.get('id')}' in '{collection_name}': {e}"
            ) from e

    def delete_documents(self, collection_name: str, filters: Dict[str, Iterable[Any]]) -> Dict[str, Any]:
        """Delete every document of a collection matching {field: values}"""
        client = self._require_client()
        filter_by = build_filter(filters)
        try:
            result = client.collections[collection_name].documents.delete({"filter_by": filter_by})
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to delete documents from '{collection_name}': {e}") from e
        logger.info(f"Deleted documents from '{collection_name}' matching {filter_by}")
        return result

    def retrieve_health(self) -> Dict[str, bool]:
        client = self._require_client()
        try:
            return {"ok": bool(client.operations.is_healthy())}
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to retrieve server health: {e}") from e

    def retrieve_debug(self) -> Dict[str, Any]:
        """Get server version and state"""
        client = self._require_client()
        try:
            return client.debug.retrieve()
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to retrieve server debug information: {e}") from e

    def retrieve_metrics(self) -> Dict[str, Any]:
        client = self._require_client()
        try:
            return client.metrics.retrieve()
        except (typesense.exceptions.TypesenseClientError, requests.exceptions.RequestException) as e:
            raise TypesenseError(f"Unable to retrieve server metrics: {e}") from e


# Global client instance
_client: Optional[TypesenseClient] = None


def get_typesense_client() -> TypesenseClient:
    """Get or create global Typesense client"""
    global _client
    if _client is None:
        _client = TypesenseClient()
    return _client
