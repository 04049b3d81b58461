"""gql-opgen: typed Python modules for GraphQL operations."""

from .derive import graphql_query
from .runtime import GraphQLQuery, GraphQLQueryCLI, QueryBody

__version__ = "0.1.0"

__all__ = [
    "graphql_query",
    "GraphQLQuery",
    "GraphQLQueryCLI",
    "QueryBody",
]
