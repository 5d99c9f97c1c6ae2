"""
Shared plumbing for components that talk to the Typesense cluster
"""

from typing import Optional

from search_api_typesense.core.config import BackendConfig
from search_api_typesense.core.logging import logger
from search_api_typesense.core.messenger import Messenger
from search_api_typesense.services.typesense_client import TypesenseClient, get_typesense_client


class TypesenseComponent:
    """
    Holds the client, the server configuration and the messenger.

    Read operations authorize with the read-only key, anything that writes
    (collections or documents) with the read-write key.
    """

    def __init__(
        self,
        config: BackendConfig,
        client: Optional[TypesenseClient] = None,
        messenger: Optional[Messenger] = None,
    ):
        self.config = config
        self.client = client or get_typesense_client()
        self.messenger = messenger or Messenger()

    def _authorize(self, read_only: bool) -> bool:
        """Authorize the client; False when the server is not configured yet"""
        auth = self.config.get_server_auth(read_only=read_only)
        if auth is None:
            key = "read-only" if read_only else "read-write"
            logger.debug(f"Typesense {key} credentials incomplete, skipping remote call")
            return False
        self.client.authorize(auth)
        return True
