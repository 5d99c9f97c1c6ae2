"""
Keeps Typesense collections in step with host index definitions
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from search_api_typesense.api.models.index import Index
from search_api_typesense.core.config import BackendConfig
from search_api_typesense.core.exceptions import SchemaUnavailable, TypesenseError
from search_api_typesense.core.logging import logger
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.core.typesense_schema import CollectionSchema
from search_api_typesense.services.base import TypesenseComponent
from search_api_typesense.services.schema import SchemaDeriver
from search_api_typesense.services.typesense_client import TypesenseClient


class OutcomeKind(str, Enum):
    """What a reconciliation step did"""

    SKIPPED = "skipped"  # Nothing could be done yet (no schema, no credentials)
    UNCHANGED = "unchanged"  # Collection already in place
    CREATED = "created"
    RECREATED = "recreated"  # Dropped and created again with the current schema
    DROPPED = "dropped"
    FAILED = "failed"


@dataclass
class ReconciliationOutcome:
    """Result of one reconciliation step for one index"""

    kind: OutcomeKind
    collection: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    schema: Optional[CollectionSchema] = None

    @property
    def ok(self) -> bool:
        return self.kind != OutcomeKind.FAILED

    @classmethod
    def skipped(cls, collection: str, reason: str, schema: Optional[CollectionSchema] = None):
        return cls(kind=OutcomeKind.SKIPPED, collection=collection, reason=reason, schema=schema)

    @classmethod
    def failed(cls, collection: str, error: str):
        return cls(kind=OutcomeKind.FAILED, collection=collection, error=error)


NOT_CONFIGURED = "Typesense server credentials are incomplete"


def _config_bytes(field_config: Dict[str, Any]) -> bytes:
    # Key order is part of the comparison
    return json.dumps(field_config, default=str).encode()


def index_fields_updated(index: Index) -> bool:
    """
    Checks if the recently updated index had any fields changed.

    Compares the index against its original state: the set of field names,
    the order of the Typesense schema fields, and each schema field's
    settings.

    Returns:
        True if any of the fields were updated (or there is nothing to
        compare against), False otherwise.
    """
    original = index.original
    if original is None:
        return True

    old_fields = original.fields
    new_fields = index.fields

    if not old_fields and not new_fields:
        return False

    if set(old_fields) != set(new_fields):
        return True

    old_schema_config = original.schema_config.fields if original.schema_config else {}
    new_schema_config = index.schema_config.fields if index.schema_config else {}

    if not old_schema_config and not new_schema_config:
        return False

    if list(old_schema_config) != list(new_schema_config):
        return True

    for name, field_config in new_schema_config.items():
        if _config_bytes(field_config) != _config_bytes(old_schema_config[name]):
            return True

    return False


class CollectionReconciler(TypesenseComponent):
    """
    Creates, drops and recreates collections.

    Typesense cannot alter a collection's schema, so any schema change means
    dropping the collection, creating it again and reindexing everything.
    Remote failures are logged, reported to the messenger and returned as
    FAILED outcomes; nothing is retried.
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

    def _fail(self, collection: str, error: TypesenseError, notice: str) -> ReconciliationOutcome:
        logger.error(error.message)
        self.messenger.add_error(notice)
        return ReconciliationOutcome.failed(collection, error.message)

    def sync(self, indexes: Iterable[Index]) -> Dict[str, ReconciliationOutcome]:
        """
        Make sure there is a collection for every index that has a schema.

        Collections cannot be created when an index is added, because its
        fields and schema processor are configured afterwards; this catches
        up on every index of the server.
        """
        return {index.id: self.reconcile(index) for index in indexes}

    def reconcile(self, index: Index) -> ReconciliationOutcome:
        """
        Create the index's collection if it does not exist yet.

        An existing collection is assumed to match: schema changes are
        caught when the index is updated.
        """
        return self._create(index, if_missing=True)

    def _create(self, index: Index, if_missing: bool) -> ReconciliationOutcome:
        collection_name = index.collection_name
        try:
            schema = self.deriver.configured_schema(index)
        except SchemaUnavailable as e:
            logger.debug(f"Not creating collection '{collection_name}': {e}")
            return ReconciliationOutcome.skipped(collection_name, str(e))

        if not self._authorize(read_only=False):
            return ReconciliationOutcome.skipped(collection_name, NOT_CONFIGURED, schema)

        try:
            if if_missing and self.client.retrieve_collection(schema.name) is not None:
                return ReconciliationOutcome(kind=OutcomeKind.UNCHANGED, collection=schema.name, schema=schema)
            self.client.create_collection(schema)
        except TypesenseError as e:
            return self._fail(schema.name, e, "Unable to sync Search API index schema and Typesense schema.")

        kind = OutcomeKind.CREATED if if_missing else OutcomeKind.RECREATED
        return ReconciliationOutcome(kind=kind, collection=schema.name, schema=schema)

    def recreate(self, index: Index) -> ReconciliationOutcome:
        """Drop the index's collection if present and create it from the current schema"""
        collection_name = index.collection_name
        if not self._authorize(read_only=False):
            return ReconciliationOutcome.skipped(collection_name, NOT_CONFIGURED)

        try:
            if self.client.retrieve_collection(collection_name) is not None:
                self.client.drop_collection(collection_name)
        except TypesenseError as e:
            return self._fail(collection_name, e, f"Unable to update index {collection_name}.")

        return self._create(index, if_missing=False)

    def update_index(self, index: Index) -> ReconciliationOutcome:
        """
        React to an index having been saved.

        When its fields changed the index is queued for reindexing and the
        collection is rebuilt with the new schema.
        """
        if not index_fields_updated(index):
            return ReconciliationOutcome(kind=OutcomeKind.UNCHANGED, collection=index.collection_name)

        logger.info(f"Fields of index '{index.id}' changed, rebuilding collection '{index.collection_name}'")
        index.reindex()
        return self.recreate(index)

    def drop(self, collection_name: str) -> ReconciliationOutcome:
        if not self._authorize(read_only=False):
            return ReconciliationOutcome.skipped(collection_name, NOT_CONFIGURED)

        try:
            self.client.drop_collection(collection_name)
        except TypesenseError as e:
            return self._fail(collection_name, e, f"Unable to remove index {collection_name}.")

        return ReconciliationOutcome(kind=OutcomeKind.DROPPED, collection=collection_name)

    def delete_all(self, index: Index) -> ReconciliationOutcome:
        """
        Remove every document of an index.

        Implemented as drop and create: clearing an index almost always
        precedes a reindex after a schema change, which needs a new
        collection anyway.
        """
        dropped = self.drop(index.collection_name)
        if dropped.kind != OutcomeKind.DROPPED:
            if not dropped.ok:
                self.messenger.add_error(f"Unable to delete all items in the {index.id} index.")
            return dropped

        outcome = self._create(index, if_missing=False)
        if outcome.kind == OutcomeKind.SKIPPED:
            # The collection is gone even though no new one could be created
            outcome.kind = OutcomeKind.DROPPED
        return outcome
