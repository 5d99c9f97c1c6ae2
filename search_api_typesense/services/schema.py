"""
Derives Typesense collection schemas from host index definitions
"""

from typing import Optional

from pydantic import ValidationError

from search_api_typesense.api.models.index import Index, IndexField
from search_api_typesense.core.exceptions import SchemaUnavailable
from search_api_typesense.core.logging import logger
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.core.typesense_schema import CollectionSchema, FieldSchema

BOOTSTRAP_NOTICE = (
    "Default index field UUID provided for all selected datasources. Please proceed to add more "
    "fields to the index and update the Typesense schema on the Processors tab."
)


class SchemaDeriver:
    """
    Turns an index's Typesense schema processor settings into a
    CollectionSchema.

    Indexes are created before any fields exist, so a brand new index is
    seeded with one UUID field per data source.
    """

    def __init__(self, messenger: Optional[Messenger] = None):
        self.messenger = messenger or Messenger()

    def derive_schema(self, index: Index) -> CollectionSchema:
        """
        Get the schema for an index, bootstrapping an index without fields.

        Raises:
            SchemaUnavailable: no schema can be derived yet
        """
        if not index.fields:
            schema = self.bootstrap_fields(index)
            if schema is None:
                raise SchemaUnavailable(f"Index '{index.id}' has no fields and no data sources")
            return schema
        return self.configured_schema(index)

    def configured_schema(self, index: Index) -> CollectionSchema:
        """
        Get the schema declared in the index's Typesense schema processor.

        Field settings are used verbatim; nothing is inferred from the host
        field definitions.

        Raises:
            SchemaUnavailable: the index has no fields or the processor
                declares none
        """
        if not index.fields:
            raise SchemaUnavailable(f"Index '{index.id}' has no fields")

        config = index.schema_config
        if config is None or not config.fields:
            raise SchemaUnavailable(f"Index '{index.id}' has no Typesense schema fields configured")

        try:
            fields = [
                FieldSchema.model_validate({**field_config, "name": field_config.get("name") or name})
                for name, field_config in config.fields.items()
            ]
            return CollectionSchema(
                name=index.collection_name,
                fields=fields,
                default_sorting_field=config.default_sorting_field,
            )
        except ValidationError as e:
            raise SchemaUnavailable(f"Invalid Typesense schema for index '{index.id}': {e}") from e

    def bootstrap_fields(self, index: Index) -> Optional[CollectionSchema]:
        """
        Seed an index without fields with a UUID field per data source.

        The fields are added to the index, which is saved once. Indexes that
        already have fields are left alone.

        Returns:
            Schema made of the seeded fields, or None when nothing was seeded
        """
        if index.fields or not index.datasources:
            return None

        fields = []
        for datasource in index.datasources:
            field_name = f"{datasource.entity_type_id}_uuid"
            index.add_field(
                IndexField(
                    name=field_name,
                    type="typesense_string",
                    property_path="uuid",
                    datasource_id=datasource.plugin_id,
                    label="UUID",
                )
            )
            fields.append(
                FieldSchema(
                    name=field_name,
                    type="string",
                    facet=False,
                    optional=False,
                    indexed=True,
                    sortable=False,
                    infix=False,
                    locale="",
                )
            )

        index.save()
        logger.info(f"Seeded index '{index.id}' with field(s): {', '.join(f.name for f in fields)}")
        self.messenger.add_status(BOOTSTRAP_NOTICE)

        return CollectionSchema(name=index.collection_name, fields=fields)
