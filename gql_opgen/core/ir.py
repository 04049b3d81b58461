"""In-memory model of a GraphQL schema.

The schema is built once per generation run (from SDL or introspection
JSON, see ``parser.py``) and is read-only afterwards, apart from the
reachability table maintained by ``Schema.require``.
"""

from dataclasses import dataclass, field

from .field_type import FieldType

BUILTIN_SCALARS = ("Boolean", "Float", "ID", "Int", "String")

DEFAULT_DEPRECATION_REASON = "No longer supported"


@dataclass(frozen=True)
class DeprecationStatus:
    """Deprecation state of a field or enum value."""
    deprecated: bool = False
    reason: str | None = None

    @classmethod
    def current(cls) -> "DeprecationStatus":
        return cls()

    @classmethod
    def deprecated_because(cls, reason: str | None) -> "DeprecationStatus":
        return cls(True, reason)


@dataclass
class GqlObjectField:
    """A field of an object, interface or input object."""
    name: str
    type: FieldType
    deprecation: DeprecationStatus = field(default_factory=DeprecationStatus)
    description: str | None = None
    # Argument name -> type, for output fields
    arguments: dict[str, FieldType] = field(default_factory=dict)


@dataclass
class GqlInput:
    """A GraphQL input object type."""
    name: str
    fields: dict[str, GqlObjectField]
    description: str | None = None


@dataclass
class GqlObject:
    """A GraphQL object type."""
    name: str
    fields: dict[str, GqlObjectField]
    description: str | None = None
    interfaces: list[str] = field(default_factory=list)


@dataclass
class GqlInterface:
    """A GraphQL interface type."""
    name: str
    fields: dict[str, GqlObjectField]
    description: str | None = None


@dataclass
class GqlUnion:
    """A GraphQL union type."""
    name: str
    variants: list[str]
    description: str | None = None


@dataclass
class GqlEnumValue:
    name: str
    description: str | None = None
    deprecation: DeprecationStatus = field(default_factory=DeprecationStatus)


@dataclass
class GqlEnum:
    """A GraphQL enum type."""
    name: str
    values: list[GqlEnumValue]
    description: str | None = None

    def get_value(self, name: str) -> GqlEnumValue | None:
        for value in self.values:
            if value.name == name:
                return value
        return None


@dataclass
class GqlScalar:
    """A custom GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class Schema:
    """All named types of a schema, keyed by name."""
    objects: dict[str, GqlObject] = field(default_factory=dict)
    inputs: dict[str, GqlInput] = field(default_factory=dict)
    interfaces: dict[str, GqlInterface] = field(default_factory=dict)
    unions: dict[str, GqlUnion] = field(default_factory=dict)
    enums: dict[str, GqlEnum] = field(default_factory=dict)
    scalars: dict[str, GqlScalar] = field(default_factory=dict)
    query_type: str | None = None
    mutation_type: str | None = None
    subscription_type: str | None = None
    # Names of the types used by the operations compiled so far
    _required: set[str] = field(default_factory=set, compare=False, repr=False)

    def root_name(self, operation_type: str) -> str:
        """Root type name for ``query``, ``mutation`` or ``subscription``."""
        if operation_type == "query":
            return self.query_type or "Query"
        if operation_type == "mutation":
            return self.mutation_type or "Mutation"
        if operation_type == "subscription":
            return self.subscription_type or "Subscription"
        raise ValueError(f"Unknown operation type: {operation_type}")

    def require(self, type_name: str):
        """Mark a type, and every input-object field type under it, as used.

        Names that are not input objects, enums or custom scalars are
        ignored. Marks are never removed.
        """
        pending = [type_name]
        while pending:
            name = pending.pop()
            if name in self._required:
                continue
            if name in self.inputs:
                self._required.add(name)
                pending.extend(
                    f.type.inner_name_str() for f in self.inputs[name].fields.values()
                )
            elif name in self.enums or name in self.scalars:
                self._required.add(name)

    def is_required(self, type_name: str) -> bool:
        return type_name in self._required

    def required_inputs(self) -> list[str]:
        return sorted(n for n in self._required if n in self.inputs)

    def required_enums(self) -> list[str]:
        return sorted(n for n in self._required if n in self.enums)

    def required_scalars(self) -> list[str]:
        return sorted(n for n in self._required if n in self.scalars)

    def has_type(self, name: str) -> bool:
        return name in BUILTIN_SCALARS or any(
            name in table
            for table in (
                self.objects, self.inputs, self.interfaces,
                self.unions, self.enums, self.scalars,
            )
        )

    def is_composite(self, name: str) -> bool:
        """True for types that need a selection set (objects, interfaces, unions)."""
        return name in self.objects or name in self.interfaces or name in self.unions

    def lookup_field(self, type_name: str, field_name: str) -> GqlObjectField | None:
        """Look up an output field on an object or interface."""
        owner = self.objects.get(type_name) or self.interfaces.get(type_name)
        if owner is None:
            return None
        return owner.fields.get(field_name)
