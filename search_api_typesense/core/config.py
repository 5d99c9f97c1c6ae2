"""
Application configuration using pydantic-settings
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Import app metadata from pyproject.toml (single source of truth)
from search_api_typesense.core.app_info import get_app_description, get_app_name, get_app_version


class Node(BaseModel):
    """A single Typesense server node"""

    host: str
    port: int
    protocol: Literal["http", "https"] = "https"


class ServerAuth(BaseModel):
    """
    Complete set of credentials for talking to a Typesense cluster.

    Instances only exist when every value is known; see
    BackendConfig.get_server_auth().
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    nodes: List[Node] = Field(min_length=1)
    connection_timeout_seconds: int = Field(gt=0)

    def to_client_config(self) -> Dict[str, Any]:
        """Configuration dictionary accepted by typesense.Client"""
        return {
            "api_key": self.api_key,
            "nodes": [node.model_dump() for node in self.nodes],
            "connection_timeout_seconds": self.connection_timeout_seconds,
        }


class BackendConfig(BaseModel):
    """
    Per-server backend configuration as stored by the host.

    Every value is optional: a server may be saved before it is fully
    configured.
    """

    ro_api_key: Optional[str] = None
    rw_api_key: Optional[str] = None
    nodes: List[Node] = Field(default_factory=list)
    connection_timeout_seconds: Optional[int] = None

    @field_validator("nodes", mode="before")
    @classmethod
    def _positional_nodes(cls, value: Any) -> Any:
        # Node forms are stored keyed by position next to form keys such as "actions"
        if isinstance(value, dict):
            numeric = [(int(key), node) for key, node in value.items() if str(key).isdigit()]
            return [node for _, node in sorted(numeric, key=lambda pair: pair[0])]
        return value

    def get_server_auth(self, read_only: bool = True) -> Optional[ServerAuth]:
        """
        Returns Typesense auth credentials iff ALL needed values are set.

        Args:
            read_only: use the read-only key instead of the read-write key

        Returns:
            ServerAuth, or None when the server is not configured yet
        """
        api_key = self.ro_api_key if read_only else self.rw_api_key
        if not api_key or not self.nodes or not self.connection_timeout_seconds:
            return None
        return ServerAuth(
            api_key=api_key,
            nodes=self.nodes,
            connection_timeout_seconds=self.connection_timeout_seconds,
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application - sourced from pyproject.toml
    app_name: str = get_app_name()
    app_version: str = get_app_version()
    app_description: str = get_app_description()
    debug: bool = False
    log_level: str = Field(default="INFO")

    # Typesense
    typesense_ro_api_key: Optional[str] = Field(default=None)
    typesense_rw_api_key: Optional[str] = Field(default=None)
    typesense_nodes: List[Node] = Field(default_factory=list)  # JSON list in the environment
    typesense_connection_timeout_seconds: int = Field(default=2)

    @property
    def backend_config(self) -> BackendConfig:
        """Get the backend configuration for the default server"""
        return BackendConfig(
            ro_api_key=self.typesense_ro_api_key,
            rw_api_key=self.typesense_rw_api_key,
            nodes=self.typesense_nodes,
            connection_timeout_seconds=self.typesense_connection_timeout_seconds,
        )


# Global settings instance
settings = Settings()
