"""
Typesense search backend

Entry point for the host search framework: it calls the lifecycle hooks
below whenever an index is added, changed or removed and whenever items
are indexed or deleted.
"""

from typing import Any, Dict, Iterable, List, Optional, Set, Union

from search_api_typesense.api.models.index import Index, Item, Server
from search_api_typesense.api.models.status import SettingsInfo
from search_api_typesense.core.config import settings
from search_api_typesense.core.exceptions import TypesenseError
from search_api_typesense.core.logging import logger
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.services.indexer import DocumentIndexer
from search_api_typesense.services.reconciler import CollectionReconciler, ReconciliationOutcome
from search_api_typesense.services.schema import SchemaDeriver
from search_api_typesense.services.status import StatusReporter
from search_api_typesense.services.typesense_client import TypesenseClient, get_typesense_client
from search_api_typesense.services.values import DATA_TYPE_PREFIX


class TypesenseBackend:
    """
    Search backend storing a server's indexes as Typesense collections.

    Construction does no I/O; call connect() to talk to the cluster.
    """

    def __init__(
        self,
        server: Server,
        client: Optional[TypesenseClient] = None,
        messenger: Optional[Messenger] = None,
    ):
        self.server = server
        self.client = client or get_typesense_client()
        self.messenger = messenger or Messenger()
        self.collections: List[Dict[str, Any]] = []
        self.connected = False

        config = server.backend_config
        self.deriver = SchemaDeriver(self.messenger)
        self.reconciler = CollectionReconciler(config, self.client, self.messenger, self.deriver)
        self.indexer = DocumentIndexer(config, self.client, self.messenger)
        self.reporter = StatusReporter(config, self.client, self.messenger, self.deriver)

    @property
    def indexes(self) -> List[Index]:
        return list(self.server.indexes.values())

    def connect(self) -> bool:
        """
        Fetch the cluster's collections with the read-only credentials.

        Returns False when the server is not configured yet or unreachable;
        connect() can simply be called again later.
        """
        auth = self.server.backend_config.get_server_auth(read_only=True)
        if auth is None:
            logger.debug(f"Server '{self.server.id}' is not configured yet, not connecting")
            self.connected = False
            return False

        self.client.authorize(auth)
        try:
            self.collections = self.client.retrieve_collections()
        except TypesenseError as e:
            logger.error(e.message)
            self.messenger.add_error("Unable to retrieve server and/or index information.")
            self.connected = False
            return False

        self.connected = True
        logger.info(f"Connected to Typesense server '{self.server.id}' ({len(self.collections)} collection(s))")
        return True

    def sync_indexes_and_collections(self) -> Dict[str, ReconciliationOutcome]:
        """Create the missing collection of every index of the server"""
        return self.reconciler.sync(self.indexes)

    def add_index(self, index: Index) -> ReconciliationOutcome:
        """
        Handle a newly created index.

        A new index usually has no fields yet; it is seeded with UUID fields
        and its collection is created once the schema processor is set up.
        """
        self.server.indexes[index.id] = index
        bootstrap_schema = self.deriver.bootstrap_fields(index)

        outcome = self.reconciler.reconcile(index)
        if outcome.schema is None:
            outcome.schema = bootstrap_schema
        if not outcome.ok:
            self.messenger.add_error(f"Unable to add the index {index.label or index.id}.")
        return outcome

    def update_index(self, index: Index) -> ReconciliationOutcome:
        self.server.indexes[index.id] = index
        return self.reconciler.update_index(index)

    def remove_index(self, index: Union[Index, str]) -> ReconciliationOutcome:
        if isinstance(index, Index):
            self.server.indexes.pop(index.id, None)
            collection_name = index.collection_name
        else:
            collection_name = index
        return self.reconciler.drop(collection_name)

    def index_items(self, index: Index, items: Iterable[Item]) -> Set[str]:
        return self.indexer.index_items(index.collection_name, items)

    def delete_items(self, index: Index, item_ids: Iterable[str]) -> bool:
        return self.indexer.delete_items(index.collection_name, item_ids)

    def delete_all_index_items(self, index: Index, datasource_id: Optional[str] = None) -> ReconciliationOutcome:
        """
        Remove all items of an index by rebuilding its collection.

        Documents of a single data source cannot be cleared on their own;
        datasource_id is accepted for the host's signature and ignored.
        """
        return self.reconciler.delete_all(index)

    def is_available(self) -> bool:
        return self.reporter.is_available()

    def view_settings(self) -> List[SettingsInfo]:
        return self.reporter.view_settings(self.indexes)

    def supports_data_type(self, data_type: str) -> bool:
        return data_type.startswith(DATA_TYPE_PREFIX)

    def get_supported_features(self) -> List[str]:
        return []

    def search(self, query: Any) -> None:
        """Searching is done client-side against Typesense directly"""
        return None


# Global backend instance
_backend: Optional[TypesenseBackend] = None


def get_typesense_backend() -> TypesenseBackend:
    """Get or create the backend for the server configured in settings"""
    global _backend
    if _backend is None:
        _backend = TypesenseBackend(Server(id="default", backend_config=settings.backend_config))
    return _backend
