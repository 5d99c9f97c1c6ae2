"""
API models package
"""

from .index import DataSource, Index, IndexField, Item, ItemField, SchemaProcessorConfig, Server
from .status import CollectionStatus, SettingsInfo, StatusResponse

__all__ = [
    # Host index models
    "DataSource",
    "Index",
    "IndexField",
    "Item",
    "ItemField",
    "SchemaProcessorConfig",
    "Server",
    # Status report models
    "CollectionStatus",
    "SettingsInfo",
    "StatusResponse",
]
