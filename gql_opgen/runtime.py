"""Runtime support imported by generated modules.

Standalone modules derive their variables type from ``GraphQLQueryCLI``;
embedded modules register their host class as a virtual ``GraphQLQuery``.
Either way the result of building a query is a ``QueryBody``, ready to be
posted by whatever transport the application uses:

    body = GetUser(id="42").into_query_body()
    response = httpx.post(url, json=body.to_payload())
    data = GetUser.ResponseData.model_validate(response.json()["data"])
"""

from abc import ABC
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

V = TypeVar("V", bound=BaseModel)


@dataclass
class QueryBody(Generic[V]):
    """A GraphQL request: variables, query text and operation name."""
    variables: V
    query: str
    operation_name: str

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready request body; unset optional variables are left out."""
        return {
            "query": self.query,
            "variables": self.variables.model_dump(mode="json", by_alias=True, exclude_none=True),
            "operationName": self.operation_name,
        }


class GraphQLQuery(ABC):
    """Marker for host classes bound to an operation with ``bind_query``.

    Bound hosts carry ``Variables``, ``ResponseData``, ``OPERATION_NAME``,
    ``QUERY`` and a static ``build_query(variables)``.
    """


class GraphQLQueryCLI(BaseModel):
    """Base of standalone variables types."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    ResponseData: ClassVar[type]

    def into_query_body(self) -> "QueryBody[Any]":
        raise NotImplementedError

    @classmethod
    def parse_response(cls, data: Optional[Dict[str, Any]]) -> BaseModel:
        """Validate the ``data`` member of a GraphQL response."""
        return cls.ResponseData.model_validate(data or {})
