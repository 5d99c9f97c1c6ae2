"""
Host-side search index models

These mirror what the host search framework hands to the backend: indexes
with their fields, data sources and Typesense schema processor settings,
and the items to be indexed.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from search_api_typesense.core.config import BackendConfig


@dataclass
class IndexField:
    """A field defined on a host index"""

    name: str
    type: str = "typesense_string"
    property_path: Optional[str] = None
    datasource_id: Optional[str] = None
    label: Optional[str] = None


@dataclass
class DataSource:
    """Origin of indexable items, e.g. one content entity type"""

    plugin_id: str
    entity_type_id: str


@dataclass
class SchemaProcessorConfig:
    """
    Settings of the Typesense schema processor attached to an index.

    fields maps field name -> Typesense field settings (type, facet, ...)
    in the order they were configured.
    """

    name: Optional[str] = None
    fields: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    default_sorting_field: Optional[str] = None


@dataclass
class Index:
    """A host search index"""

    id: str
    label: str = ""
    fields: Dict[str, IndexField] = field(default_factory=dict)
    datasources: List[DataSource] = field(default_factory=list)
    schema_config: Optional[SchemaProcessorConfig] = None
    # State of the index before the update currently being processed
    original: Optional["Index"] = field(default=None, repr=False, compare=False)
    needs_reindex: bool = False
    save_count: int = 0
    on_save: Optional[Callable[["Index"], None]] = field(default=None, repr=False, compare=False)

    @property
    def collection_name(self) -> str:
        """Name of the Typesense collection backing this index"""
        if self.schema_config and self.schema_config.name:
            return self.schema_config.name
        return self.id

    def add_field(self, index_field: IndexField) -> None:
        self.fields[index_field.name] = index_field

    def save(self) -> None:
        self.save_count += 1
        if self.on_save is not None:
            self.on_save(self)

    def reindex(self) -> None:
        """Mark every item of the index for reindexing"""
        self.needs_reindex = True

    def snapshot(self) -> "Index":
        """Copy of the current definition, suitable as a comparison baseline"""
        return Index(
            id=self.id,
            label=self.label,
            fields=copy.deepcopy(self.fields),
            datasources=list(self.datasources),
            schema_config=copy.deepcopy(self.schema_config),
        )


@dataclass
class ItemField:
    """One field of an item, with its raw values"""

    name: str
    type: str
    values: List[Any] = field(default_factory=list)


@dataclass
class Item:
    id: str
    fields: Dict[str, ItemField] = field(default_factory=dict)


@dataclass
class Server:
    """A configured search server and the indexes it hosts"""

    id: str
    backend_config: BackendConfig = field(default_factory=BackendConfig)
    indexes: Dict[str, Index] = field(default_factory=dict)
