"""GraphQL request executor."""

from .client import GraphQlClient, InMemoryGraphQlClient
from .config import DEFAULT_GRAPHQL_URL, GraphQlConfig
from .decode import decode_field
from .exceptions import (
    ProtocolError,
    RequestError,
    RequestErrorCodes,
    RequestTimeoutError,
    TransportError,
)
from .http_client import HttpGraphQlClient
from .types import ErrorLocation, GraphQlError, GraphQlQuery, GraphQlResponse

__all__ = [
    "DEFAULT_GRAPHQL_URL",
    "ErrorLocation",
    "GraphQlClient",
    "GraphQlConfig",
    "GraphQlError",
    "GraphQlQuery",
    "GraphQlResponse",
    "HttpGraphQlClient",
    "InMemoryGraphQlClient",
    "ProtocolError",
    "RequestError",
    "RequestErrorCodes",
    "RequestTimeoutError",
    "TransportError",
    "decode_field",
]
