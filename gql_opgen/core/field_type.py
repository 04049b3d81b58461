"""GraphQL type references (``String``, ``[Int!]!``, ...)."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from graphql import ListTypeNode, NamedTypeNode, NonNullTypeNode, TypeNode

from .errors import SchemaError
from .units import TargetType


class TypeKind(Enum):
    NAMED = "named"
    OPTIONAL = "optional"
    LIST = "list"


class NamingContext(Protocol):
    """Maps a named GraphQL type to a target type name."""

    def named_target(self, graphql_name: str) -> str:
        ...


@dataclass(frozen=True)
class FieldType:
    """A reference to a named type, possibly wrapped in optional/list layers.

    Nullability is explicit: GraphQL ``String`` is ``Optional(Named("String"))``
    and ``String!`` is ``Named("String")``.
    """
    kind: TypeKind
    name: str | None = None
    inner: "FieldType | None" = None

    @classmethod
    def named(cls, name: str) -> "FieldType":
        return cls(TypeKind.NAMED, name=name)

    @classmethod
    def optional(cls, inner: "FieldType") -> "FieldType":
        return cls(TypeKind.OPTIONAL, inner=inner)

    @classmethod
    def list_of(cls, inner: "FieldType") -> "FieldType":
        return cls(TypeKind.LIST, inner=inner)

    @property
    def is_optional(self) -> bool:
        return self.kind is TypeKind.OPTIONAL

    @property
    def is_list(self) -> bool:
        return self.kind is TypeKind.LIST

    def inner_name_str(self) -> str:
        """Name of the innermost named type."""
        current = self
        while current.kind is not TypeKind.NAMED:
            current = current.inner
        return current.name

    def is_indirected(self) -> bool:
        """True if a list already sits between this reference and its leaf.

        Lists (and optionals wrapping lists) break structural cycles on their
        own; a bare or optional named type does not.
        """
        if self.kind is TypeKind.LIST:
            return True
        if self.kind is TypeKind.OPTIONAL:
            return self.inner.is_indirected()
        return False

    def to_target_type(self, naming: NamingContext, leaf_name: str | None = None) -> TargetType:
        """Map to a target type; ``leaf_name`` overrides the leaf lookup."""
        if self.kind is TypeKind.NAMED:
            return TargetType.named(leaf_name or naming.named_target(self.name))
        inner = self.inner.to_target_type(naming, leaf_name)
        if self.kind is TypeKind.OPTIONAL:
            return TargetType.optional(inner)
        return TargetType.list_of(inner)

    def to_graphql(self) -> str:
        """Render back to GraphQL syntax, e.g. ``[Int]!``."""
        if self.kind is TypeKind.NAMED:
            return f"{self.name}!"
        if self.kind is TypeKind.LIST:
            return f"[{self.inner.to_graphql()}]!"
        return self.inner.to_graphql()[:-1]

    def __str__(self) -> str:
        return self.to_graphql()

    @classmethod
    def from_type_node(cls, node: TypeNode, non_null: bool = False) -> "FieldType":
        """Build from a graphql-core type AST node."""
        if isinstance(node, NonNullTypeNode):
            return cls.from_type_node(node.type, non_null=True)
        if isinstance(node, ListTypeNode):
            field_type = cls.list_of(cls.from_type_node(node.type))
        elif isinstance(node, NamedTypeNode):
            field_type = cls.named(node.name.value)
        else:
            raise SchemaError(f"Unexpected type node {type(node).__name__}")
        return field_type if non_null else cls.optional(field_type)

    @classmethod
    def from_introspection(cls, ref: dict[str, Any] | None, non_null: bool = False) -> "FieldType":
        """Build from an introspection ``TypeRef`` (``{"kind", "name", "ofType"}``)."""
        if not ref:
            raise SchemaError("Missing type reference in introspection data")
        kind = ref.get("kind")
        if kind == "NON_NULL":
            return cls.from_introspection(ref.get("ofType"), non_null=True)
        if kind == "LIST":
            field_type = cls.list_of(cls.from_introspection(ref.get("ofType")))
        else:
            name = ref.get("name")
            if not name:
                raise SchemaError(f"Unnamed {kind or 'type'} reference in introspection data")
            field_type = cls.named(name)
        return field_type if non_null else cls.optional(field_type)
