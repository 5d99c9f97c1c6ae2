"""
Pytest configuration and shared fixtures for Search API Typesense tests.
"""

from unittest.mock import MagicMock

import pytest

from search_api_typesense.api.models.index import (
    DataSource,
    Index,
    IndexField,
    Item,
    ItemField,
    SchemaProcessorConfig,
    Server,
)
from search_api_typesense.core.config import BackendConfig, Node
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.services.typesense_client import TypesenseClient


@pytest.fixture
def backend_config():
    return BackendConfig(
        ro_api_key="ro_1234567890",
        rw_api_key="rw_1234567890",
        nodes=[Node(host="typesense.example.com", port=443, protocol="https")],
        connection_timeout_seconds=2,
    )


@pytest.fixture
def unconfigured():
    """Backend configuration saved before any credentials were entered"""
    return BackendConfig()


@pytest.fixture
def mock_client():
    """TypesenseClient double where every collection is missing and every call succeeds"""
    client = MagicMock(spec=TypesenseClient)
    client.retrieve_collection.return_value = None
    client.create_collection.side_effect = lambda schema: {"name": schema.name, "num_documents": 0}
    client.create_document.side_effect = lambda name, document: dict(document)
    return client


@pytest.fixture
def messenger():
    return Messenger()


@pytest.fixture
def books_index():
    """Index with one configured Typesense field"""
    return Index(
        id="books",
        label="Books",
        fields={"title": IndexField(name="title", type="typesense_string")},
        datasources=[DataSource(plugin_id="entity:node", entity_type_id="node")],
        schema_config=SchemaProcessorConfig(
            name="books",
            fields={"title": {"type": "string", "facet": False, "index": True, "sort": False}},
        ),
    )


@pytest.fixture
def articles_index():
    """Brand new index without any fields"""
    return Index(
        id="articles",
        label="Articles",
        datasources=[DataSource(plugin_id="entity:node", entity_type_id="node")],
    )


@pytest.fixture
def server(backend_config, books_index):
    return Server(id="typesense", backend_config=backend_config, indexes={"books": books_index})


def make_item(item_id, **fields):
    """Item whose fields are given as name=(type, [values])"""
    return Item(
        id=item_id,
        fields={name: ItemField(name=name, type=field_type, values=values) for name, (field_type, values) in fields.items()},
    )


@pytest.fixture
def item_factory():
    return make_item
