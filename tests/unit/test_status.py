import pytest

from search_api_typesense.core.exceptions import TypesenseError
from search_api_typesense.core.messenger import MessageLevel
from search_api_typesense.services.status import COLLECTION_MISSING, StatusReporter, format_metric, format_size


@pytest.fixture
def reporter(backend_config, mock_client, messenger):
    mock_client.retrieve_health.return_value = {"ok": True}
    mock_client.retrieve_debug.return_value = {"state": 1, "version": "27.1"}
    mock_client.retrieve_metrics.return_value = {
        "system_cpu1_active_percentage": "12.5",
        "system_memory_used_bytes": "1536",
    }
    return StatusReporter(backend_config, client=mock_client, messenger=messenger)


def by_label(info):
    return {line.label: line for line in info}


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 bytes"),
        (1, "1 byte"),
        (512, "512 bytes"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (5 * 1024**3, "5 GB"),
    ],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


def test_format_metric():
    assert format_metric("system_cpu1_active_percentage", "12.5") == "System cpu1 active percentage: 12.5%"
    assert format_metric("system_memory_used_bytes", "2048") == "System memory used bytes: 2 KB"
    assert format_metric("typesense_memory_fragmentation_ratio", "0.1") == "Typesense memory fragmentation ratio: 0.1"


def test_is_available(reporter, mock_client, backend_config):
    assert reporter.is_available() is True
    mock_client.authorize.assert_called_with(backend_config.get_server_auth(read_only=True))


def test_is_available_when_state_not_ok(reporter, mock_client):
    mock_client.retrieve_debug.return_value = {"state": 0, "version": "27.1"}
    assert reporter.is_available() is False


def test_transport_failure_is_unavailable(reporter, mock_client):
    mock_client.retrieve_debug.side_effect = TypesenseError("Connection refused")
    assert reporter.is_available() is False


def test_unconfigured_is_unavailable(unconfigured, mock_client):
    assert StatusReporter(unconfigured, client=mock_client).is_available() is False
    mock_client.retrieve_debug.assert_not_called()


def test_view_settings(reporter, mock_client, books_index, articles_index):
    mock_client.retrieve_collection.side_effect = lambda name: (
        {"name": "books", "created_at": 1700000000, "num_documents": 12345} if name == "books" else None
    )

    info = by_label(reporter.view_settings([books_index, articles_index]))

    assert info["Typesense collection 1: name"].info == "books"
    assert info["Typesense collection 1: created"].info == "2023-11-14T22:13:20+00:00"
    assert info["Typesense collection 1: documents"].info == "12,345"
    assert info["Typesense collection 2: name"].info == "articles"
    assert info["Typesense collection 2: created"].info == COLLECTION_MISSING
    assert info["Typesense collection 2: documents"].info is None
    assert info["Typesense server health"].info == "OK"
    assert info["Typesense server health"].status == "ok"
    assert info["Typesense server version"].info == "27.1"
    assert info["Typesense server metrics"].items == [
        "System cpu1 active percentage: 12.5%",
        "System memory used bytes: 1.5 KB",
    ]


def test_view_settings_empty_collection(reporter, mock_client, books_index):
    mock_client.retrieve_collection.return_value = {"name": "books", "created_at": 1700000000, "num_documents": 0}

    info = by_label(reporter.view_settings([books_index]))

    assert info["Typesense collection 1: documents"].info == "no documents have been indexed"


def test_view_settings_without_metrics(reporter, mock_client):
    mock_client.retrieve_health.return_value = {"ok": False}
    mock_client.retrieve_metrics.return_value = {}

    info = by_label(reporter.view_settings([]))

    assert info["Typesense server health"].info == "Down or unavailable"
    assert info["Typesense server health"].status == "error"
    assert info["Typesense server metrics"].info == "Unavailable"


def test_view_settings_degrades_on_failure(reporter, mock_client, messenger, books_index):
    mock_client.retrieve_collection.return_value = None
    mock_client.retrieve_health.side_effect = TypesenseError("timeout")

    info = by_label(reporter.view_settings([books_index]))

    assert "Typesense collection 1: name" in info
    assert "Typesense server health" not in info
    assert [m.text for m in messenger.messages(MessageLevel.ERROR)] == [
        "Unable to retrieve server and/or index information."
    ]


def test_collection_status_reports_schema_version(reporter, mock_client, books_index, articles_index):
    mock_client.retrieve_collection.return_value = None

    assert reporter.collection_status(books_index).schema_version is not None
    assert reporter.collection_status(articles_index).schema_version is None
