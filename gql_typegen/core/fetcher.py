"""Fetching introspection documents from a live GraphQL endpoint.

Handles HTTP communication and GraphQL error reporting; compiling the
response is left to the parser and emitter.
"""

import logging
from typing import Any, Awaitable, Callable

import httpx
from graphql import parse, print_ast

logger = logging.getLogger(__name__)

# Wrapper chains (LIST / NON_NULL) are followed six levels deep, enough for
# shapes like [[String!]!]!.
_INTROSPECTION_SOURCE = """
fragment fragType on __Type {
  name
  kind
  ofType {
    name
    kind
    ofType {
      name
      kind
      ofType {
        name
        kind
        ofType {
          name
          kind
          ofType {
            name
            kind
          }
        }
      }
    }
  }
}

fragment fragField on __Field {
  name
  description
  isDeprecated
  deprecationReason
  type {
    ...fragType
  }
}

query IntrospectionQuery {
  __schema {
    types {
      kind
      name
      description
      fields(includeDeprecated: true) {
        ...fragField
      }
      interfaces {
        ...fragType
        fields(includeDeprecated: true) {
          ...fragField
        }
      }
      possibleTypes {
        ...fragType
        fields(includeDeprecated: true) {
          ...fragField
        }
        interfaces {
          ...fragType
        }
      }
      enumValues(includeDeprecated: true) {
        name
        description
        isDeprecated
        deprecationReason
      }
      ofType {
        ...fragType
      }
    }
  }
}
"""

INTROSPECTION_QUERY = print_ast(parse(_INTROSPECTION_SOURCE))

# Sends one GraphQL query and returns the decoded response document
SendQuery = Callable[[str], Awaitable[dict[str, Any]]]


class GraphQLError(Exception):
    """Exception raised for GraphQL errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.message = message
        self.errors = errors
        super().__init__(message)


class IntrospectionFetcher:
    """Runs the introspection query against an endpoint.

    Makes exactly one request per ``fetch``; retries and authentication
    schemes are up to the caller (pass auth headers through ``headers``).

    Example:
        async with IntrospectionFetcher(url, headers={"Authorization": "Bearer x"}) as fetcher:
            document = await fetcher.fetch()
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            url: GraphQL endpoint URL
            headers: Extra request headers, e.g. for authentication
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self.headers)
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "IntrospectionFetcher":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def send_query(self, query: str) -> dict[str, Any]:
        """POST one query and return the whole response document.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            GraphQLError: If the response contains errors
        """
        client = await self._get_client()
        logger.debug("POST %s", self.url)
        response = await client.post(self.url, json={"query": query})
        response.raise_for_status()

        result = response.json()

        if result.get("errors"):
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise GraphQLError(f"GraphQL errors: {error_messages}", result["errors"])

        return result

    async def fetch(self) -> dict[str, Any]:
        """Run the introspection query and return the response document."""
        return await self.send_query(INTROSPECTION_QUERY)
