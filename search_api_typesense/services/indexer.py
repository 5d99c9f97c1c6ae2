"""
Document indexer component
"""

from typing import Any, Dict, Iterable, List, Set

from search_api_typesense.api.models.index import Item
from search_api_typesense.core.exceptions import TypesenseError
from search_api_typesense.core.logging import logger
from search_api_typesense.services.base import TypesenseComponent
from search_api_typesense.services.values import normalize, resolve_field_type


def build_document(item: Item) -> Dict[str, Any]:
    """Typesense document for an item: its id plus one normalized value per field"""
    document: Dict[str, Any] = {"id": item.id}
    for field_name, item_field in item.fields.items():
        document[field_name] = normalize(item_field.values, resolve_field_type(item_field.type))
    return document


class DocumentIndexer(TypesenseComponent):
    """
    Sends items to a collection one document at a time.
    """

    def index_items(self, collection_name: str, items: Iterable[Item]) -> Set[str]:
        """
        Index items into a collection.

        A document that Typesense rejects is skipped; the rest of the batch
        is still sent.

        Returns:
            Ids of the items that were indexed
        """
        if not self._authorize(read_only=False):
            return set()

        indexed: Set[str] = set()
        failed: List[str] = []

        for item in items:
            document = build_document(item)
            try:
                created = self.client.create_document(collection_name, document)
            except TypesenseError as e:
                failed.append(item.id)
                logger.warning(e.message)
                continue

            if isinstance(created, dict):
                indexed.add(item.id)
            else:
                failed.append(item.id)
                logger.warning(f"Unexpected response indexing '{item.id}' into '{collection_name}': {created!r}")

        logger.info(f"Indexed into '{collection_name}': {len(indexed)} successful, {len(failed)} failed")
        if failed:
            self.messenger.add_error(f"Unable to index items {', '.join(failed)}.")
        return indexed

    def delete_items(self, collection_name: str, item_ids: Iterable[str]) -> bool:
        """Delete the documents of the given items from a collection"""
        item_ids = list(item_ids)
        if not item_ids or not self._authorize(read_only=False):
            return False

        try:
            self.client.delete_documents(collection_name, {"id": item_ids})
        except TypesenseError as e:
            logger.error(e.message)
            self.messenger.add_error(f"Unable to delete items {', '.join(item_ids)}.")
            return False

        return True
