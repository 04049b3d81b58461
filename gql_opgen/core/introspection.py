"""Fetching a schema from a live endpoint.

Posts graphql-core's standard introspection query and returns the raw JSON
response, which ``SchemaParser`` accepts as an introspection schema file.

Example usage:
    from gql_opgen.core.introspection import AuthorizationAuth, fetch_schema

    result = fetch_schema("https://api.example.com/graphql", auth=AuthorizationAuth("Bearer abc"))
"""

import logging
from typing import Any, Dict, Iterable, Optional, Protocol, runtime_checkable

import httpx
from graphql import get_introspection_query

from .errors import ConfigurationError, IntrospectionError

logger = logging.getLogger(__name__)


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Implement this protocol to send credentials with the introspection query.

    Example:
        class OrgAuth:
            def get_headers(self) -> dict[str, str]:
                return {"X-Org-ID": "42"}
    """

    def get_headers(self) -> Dict[str, str]:
        """Return headers to include in requests."""
        ...


class AuthorizationAuth:
    """Sends a raw ``Authorization`` header value (``Bearer ...``, ``Basic ...``).

    Example:
        auth = AuthorizationAuth("Bearer eyJhbGciOiJIUzI1NiIs...")
    """

    def __init__(self, value: str):
        self.value = value

    def get_headers(self) -> Dict[str, str]:
        return {"Authorization": self.value}


class HeaderAuth:
    """Arbitrary extra headers.

    Example:
        auth = HeaderAuth({"X-API-Key": "key", "X-Tenant-ID": "tenant"})
    """

    def __init__(self, headers: Dict[str, str]):
        self.headers = headers

    def get_headers(self) -> Dict[str, str]:
        return dict(self.headers)


class NoAuth:
    """No authentication (for public endpoints)."""

    def get_headers(self) -> Dict[str, str]:
        return {}


def parse_header(value: str) -> tuple[str, str]:
    """Split a ``Name: value`` header given on the command line."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise ConfigurationError(f"Invalid header {value!r}, expected 'Name: value'")
    return name.strip(), header_value.strip()


def build_auth(authorization: Optional[str] = None, headers: Iterable[str] = ()) -> Auth:
    """Combine an Authorization value and ``Name: value`` headers into one handler."""
    collected: Dict[str, str] = {}
    if authorization:
        collected.update(AuthorizationAuth(authorization).get_headers())
    for header in headers:
        name, value = parse_header(header)
        collected[name] = value
    if not collected:
        return NoAuth()
    return HeaderAuth(collected)


def fetch_schema(
    url: str,
    auth: Optional[Auth] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, Any]:
    """Run the introspection query against ``url``.

    Args:
        url: GraphQL endpoint
        auth: Authentication handler (default: no authentication)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Returns:
        The decoded JSON response, including its ``data`` member

    Raises:
        IntrospectionError: On HTTP failures or GraphQL errors in the response
    """
    headers = {"Content-Type": "application/json"}
    headers.update((auth or NoAuth()).get_headers())
    payload = {"query": get_introspection_query(descriptions=True), "operationName": "IntrospectionQuery"}

    logger.debug("Introspecting %s", url)
    with httpx.Client(timeout=timeout, headers=headers, transport=transport) as client:
        try:
            response = client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IntrospectionError(f"Introspection request to {url} failed: {e}") from e
        result = response.json()

    if result.get("errors"):
        error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
        raise IntrospectionError(f"GraphQL errors: {error_messages}", result["errors"])
    if not (result.get("data") or {}).get("__schema"):
        raise IntrospectionError("Introspection response has no __schema")
    return result
