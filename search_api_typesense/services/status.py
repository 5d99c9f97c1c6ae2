"""
Server availability and status reporting
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from search_api_typesense.api.models.index import Index
from search_api_typesense.api.models.status import CollectionStatus, SettingsInfo
from search_api_typesense.core.config import BackendConfig
from search_api_typesense.core.exceptions import SchemaUnavailable, TypesenseError
from search_api_typesense.core.logging import logger
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.core.typesense_schema import get_schema_version
from search_api_typesense.services.base import TypesenseComponent
from search_api_typesense.services.schema import SchemaDeriver
from search_api_typesense.services.typesense_client import TypesenseClient

KILOBYTE = 1024
SIZE_UNITS = ["KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]

COLLECTION_MISSING = (
    "Collection not yet created. Add one or more fields to the index and configure the "
    "Typesense Schema processor to create the collection."
)


def format_size(size: float) -> str:
    """Human readable byte count, e.g. 1536 -> '1.5 KB'"""
    if size < KILOBYTE:
        return "1 byte" if size == 1 else f"{size:g} bytes"

    size = size / KILOBYTE
    unit = SIZE_UNITS[0]
    for unit in SIZE_UNITS:
        if round(size, 2) >= KILOBYTE and unit != SIZE_UNITS[-1]:
            size = size / KILOBYTE
        else:
            break
    return f"{round(size, 2):g} {unit}"


def format_metric(name: str, value: Any) -> str:
    """Render one server metric as 'Label: value'"""
    label = name.replace("_", " ")
    label = label[:1].upper() + label[1:]

    if "percentage" in label:
        value = f"{value}%"

    if "bytes" in label:
        try:
            value = format_size(float(value))
        except (TypeError, ValueError):
            pass

    return f"{label}: {value}"


class StatusReporter(TypesenseComponent):
    """
    Read-only diagnostics. Nothing in here raises: a Typesense failure
    degrades the report instead.
    """

    def __init__(
        self,
        config: BackendConfig,
        client: Optional[TypesenseClient] = None,
        messenger: Optional[Messenger] = None,
        deriver: Optional[SchemaDeriver] = None,
    ):
        super().__init__(config, client=client, messenger=messenger)
        self.deriver = deriver or SchemaDeriver(self.messenger)

    def is_available(self) -> bool:
        """Whether the server reports an operational state"""
        if not self._authorize(read_only=True):
            return False
        try:
            return bool(self.client.retrieve_debug().get("state"))
        except TypesenseError as e:
            logger.debug(f"Typesense unavailable: {e.message}")
            return False

    def _schema_version(self, index: Index) -> Optional[str]:
        try:
            return get_schema_version(self.deriver.configured_schema(index))
        except SchemaUnavailable:
            return None

    def collection_status(self, index: Index) -> CollectionStatus:
        """
        Get the state of the collection backing an index.

        Raises:
            TypesenseError: the collection could not be looked up
        """
        collection = self.client.retrieve_collection(index.collection_name)
        status = CollectionStatus(
            index_id=index.id,
            name=index.collection_name,
            exists=collection is not None,
            schema_version=self._schema_version(index),
        )
        if collection is not None:
            created_at = collection.get("created_at")
            if created_at is not None:
                status.created_at = datetime.fromtimestamp(int(created_at), tz=timezone.utc).isoformat()
            status.num_documents = int(collection.get("num_documents", 0))
        return status

    def view_settings(self, indexes: Iterable[Index]) -> List[SettingsInfo]:
        """
        Get the server status report.

        Lists every index's collection (name, creation time, document
        count), followed by server health, version and metrics.
        """
        info: List[SettingsInfo] = []

        if not self._authorize(read_only=True):
            info.append(SettingsInfo(label="Typesense server", info="Not configured", status="error"))
            return info

        try:
            # Loop over indexes as it's possible for an index to not yet have a collection
            for num, index in enumerate(indexes, start=1):
                status = self.collection_status(index)
                info.append(SettingsInfo(label=f"Typesense collection {num}: name", info=status.name))

                created = SettingsInfo(label=f"Typesense collection {num}: created")
                documents = SettingsInfo(label=f"Typesense collection {num}: documents")
                if status.exists:
                    created.info = status.created_at
                    documents.info = (
                        f"{status.num_documents:,}" if status.num_documents else "no documents have been indexed"
                    )
                else:
                    created.info = COLLECTION_MISSING
                info.append(created)
                info.append(documents)

            server_health = self.client.retrieve_health()
            info.append(
                SettingsInfo(
                    label="Typesense server health",
                    info="OK" if server_health.get("ok") else "Down or unavailable",
                    status="ok" if server_health.get("ok") else "error",
                )
            )

            server_debug = self.client.retrieve_debug()
            info.append(SettingsInfo(label="Typesense server version", info=str(server_debug.get("version", ""))))

            metrics: Dict[str, Any] = self.client.retrieve_metrics()
            if metrics:
                items = [format_metric(name, value) for name, value in metrics.items()]
                info.append(SettingsInfo(label="Typesense server metrics", items=items))
            else:
                info.append(SettingsInfo(label="Typesense server metrics", info="Unavailable"))

        except TypesenseError as e:
            logger.error(e.message)
            self.messenger.add_error("Unable to retrieve server and/or index information.")

        return info
