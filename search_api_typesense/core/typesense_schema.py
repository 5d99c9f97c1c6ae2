"""
Typesense collection schema definition
"""

import hashlib
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldSchema(BaseModel):
    """One field of a Typesense collection schema"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    type: str = "string"
    facet: bool = False
    optional: bool = False
    indexed: bool = Field(default=True, alias="index")
    sortable: bool = Field(default=False, alias="sort")
    infix: bool = False
    locale: str = ""

    def to_typesense(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CollectionSchema(BaseModel):
    """
    Desired schema of a Typesense collection.

    Typesense needs the complete field list when the collection is created,
    so a schema without fields cannot exist.
    """

    name: str = Field(min_length=1)
    fields: List[FieldSchema] = Field(min_length=1)
    default_sorting_field: Optional[str] = None

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    def to_typesense(self) -> Dict[str, Any]:
        """
        Get the collection-create payload.

        Returns:
            Collection schema dictionary
        """
        schema: Dict[str, Any] = {
            "name": self.name,
            "fields": [field.to_typesense() for field in self.fields],
        }
        if self.default_sorting_field:
            schema["default_sorting_field"] = self.default_sorting_field
        return schema


def get_schema_version(schema: CollectionSchema) -> str:
    """
    Get a hash of a schema definition.

    The version changes whenever schema fields or configuration change,
    independent of the collection name.

    Returns:
        16-character hex string representing schema version
    """
    payload = schema.to_typesense()
    del payload["name"]

    schema_str = json.dumps(payload, sort_keys=True)
    return hashlib.sha256(schema_str.encode()).hexdigest()[:16]
