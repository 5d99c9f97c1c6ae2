"""
Typesense backend exceptions.
"""


class TypesenseError(Exception):
    """
    Raised by the Typesense client for any transport, authentication or API
    failure. Callers only ever see the human-readable message.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SchemaUnavailable(Exception):
    """
    Raised when no collection schema can be derived for an index yet, e.g.
    because it has no fields or the Typesense schema processor has not been
    configured. This is a normal, quiescent state and not an error.
    """

    pass
