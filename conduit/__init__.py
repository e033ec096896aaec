"""Compile RPC interface definitions into typed HTTP clients and router glue."""

from .adapter import RouteBuilder
from .client import (
    ClientConfig,
    ConnectionFailed,
    ResponseDecodeError,
    StatusError,
    TransportError,
)
from .codegen import generate, render
from .context_builder import build_context
from .errors import (
    BadRequest,
    DuplicateRoute,
    HTTPError,
    InternalError,
    InvalidIdentifier,
    InvalidMethod,
    InvalidPath,
    MissingResponseType,
    NotFound,
    RouteDefinitionError,
    UnsupportedParameterType,
)
from .loader import load_definition
from .models import HTTPMethod, RouteMeta, RouteParameter, ServiceDefinition
from .route_parser import parse_route, parse_service
from .schema import ServiceSchema

__version__ = "0.1.0"

__all__ = [
    "BadRequest",
    "ClientConfig",
    "ConnectionFailed",
    "DuplicateRoute",
    "HTTPError",
    "HTTPMethod",
    "InternalError",
    "InvalidIdentifier",
    "InvalidMethod",
    "InvalidPath",
    "MissingResponseType",
    "NotFound",
    "ResponseDecodeError",
    "RouteBuilder",
    "RouteDefinitionError",
    "RouteMeta",
    "RouteParameter",
    "ServiceDefinition",
    "ServiceSchema",
    "StatusError",
    "TransportError",
    "UnsupportedParameterType",
    "build_context",
    "generate",
    "load_definition",
    "parse_route",
    "parse_service",
    "render",
]
