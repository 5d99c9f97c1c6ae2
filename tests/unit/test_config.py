import pytest
from pydantic import ValidationError

from search_api_typesense.core.config import BackendConfig, Node, ServerAuth, Settings


def test_read_only_and_read_write_credentials(backend_config):
    ro = backend_config.get_server_auth(read_only=True)
    rw = backend_config.get_server_auth(read_only=False)

    assert ro.api_key == "ro_1234567890"
    assert rw.api_key == "rw_1234567890"
    assert ro.nodes == rw.nodes
    assert ro.connection_timeout_seconds == 2


def test_default_is_read_only(backend_config):
    assert backend_config.get_server_auth().api_key == "ro_1234567890"


@pytest.mark.parametrize(
    "missing",
    [
        {"ro_api_key": None},
        {"ro_api_key": ""},
        {"nodes": []},
        {"connection_timeout_seconds": None},
    ],
)
def test_incomplete_credentials_are_all_or_nothing(backend_config, missing):
    config = backend_config.model_copy(update=missing)
    assert config.get_server_auth(read_only=True) is None


def test_missing_rw_key_only_affects_writes(backend_config):
    config = backend_config.model_copy(update={"rw_api_key": None})

    assert config.get_server_auth(read_only=True) is not None
    assert config.get_server_auth(read_only=False) is None


def test_nodes_from_form_values():
    config = BackendConfig.model_validate(
        {
            "nodes": {
                "1": {"host": "b.example.com", "port": "443"},
                "0": {"host": "a.example.com", "port": 8108, "protocol": "http"},
                "actions": {"add_node": "Add another node"},
            }
        }
    )

    assert [node.host for node in config.nodes] == ["a.example.com", "b.example.com"]
    assert config.nodes[1].port == 443
    assert config.nodes[1].protocol == "https"


def test_server_auth_requires_nodes():
    with pytest.raises(ValidationError):
        ServerAuth(api_key="key", nodes=[], connection_timeout_seconds=2)


def test_server_auth_client_config():
    auth = ServerAuth(api_key="key", nodes=[Node(host="localhost", port=8108, protocol="http")], connection_timeout_seconds=3)

    assert auth.to_client_config() == {
        "api_key": "key",
        "nodes": [{"host": "localhost", "port": 8108, "protocol": "http"}],
        "connection_timeout_seconds": 3,
    }


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TYPESENSE_RO_API_KEY", "ro")
    monkeypatch.setenv("TYPESENSE_RW_API_KEY", "rw")
    monkeypatch.setenv("TYPESENSE_NODES", '[{"host": "search.local", "port": 8108, "protocol": "http"}]')
    monkeypatch.setenv("TYPESENSE_CONNECTION_TIMEOUT_SECONDS", "7")

    config = Settings(_env_file=None).backend_config

    assert config.get_server_auth(read_only=False).api_key == "rw"
    assert config.nodes[0].host == "search.local"
    assert config.connection_timeout_seconds == 7


def test_settings_default_to_unconfigured(monkeypatch):
    for name in ("TYPESENSE_RO_API_KEY", "TYPESENSE_RW_API_KEY", "TYPESENSE_NODES"):
        monkeypatch.delenv(name, raising=False)

    assert Settings(_env_file=None).backend_config.get_server_auth() is None
