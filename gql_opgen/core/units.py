"""Language-neutral emission units.

The engine produces these structures; ``CodeGenerator`` lowers them into
Python source. Nothing here knows about Python syntax.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .options import CodegenMode, Visibility


class TargetKind(Enum):
    NAMED = "named"
    OPTIONAL = "optional"
    LIST = "list"
    BOXED = "boxed"  # explicit indirection breaking a structural cycle


@dataclass(frozen=True)
class TargetType:
    """A target type expression such as ``Optional[List[int]]``."""
    kind: TargetKind
    name: str | None = None
    inner: "TargetType | None" = None

    @classmethod
    def named(cls, name: str) -> "TargetType":
        return cls(TargetKind.NAMED, name=name)

    @classmethod
    def optional(cls, inner: "TargetType") -> "TargetType":
        return cls(TargetKind.OPTIONAL, inner=inner)

    @classmethod
    def list_of(cls, inner: "TargetType") -> "TargetType":
        return cls(TargetKind.LIST, inner=inner)

    @classmethod
    def boxed_of(cls, inner: "TargetType") -> "TargetType":
        return cls(TargetKind.BOXED, inner=inner)

    @property
    def is_optional(self) -> bool:
        return self.kind is TargetKind.OPTIONAL

    def boxed(self) -> "TargetType":
        """Insert a box, keeping an outer optional outside of it."""
        if self.kind is TargetKind.OPTIONAL:
            return TargetType.optional(TargetType.boxed_of(self.inner))
        return TargetType.boxed_of(self)

    def is_boxed(self) -> bool:
        if self.kind is TargetKind.BOXED:
            return True
        if self.kind is TargetKind.OPTIONAL:
            return self.inner.is_boxed()
        return False


# Literal values (variable defaults)

@dataclass(frozen=True)
class LiteralValue:
    value: Any  # int, float, str, bool or None


@dataclass(frozen=True)
class ListValue:
    items: tuple


@dataclass(frozen=True)
class EnumValue:
    type_name: str
    member: str


@dataclass(frozen=True)
class ObjectValue:
    type_name: str
    # (python field name, value) pairs, in literal order
    fields: tuple


# Definitions

@dataclass
class EmittedField:
    """A field of a generated record type."""
    name: str
    type: TargetType
    # Original GraphQL name when it differs from ``name``
    wire_name: str | None = None
    # Deprecation note attached under the ``warn`` strategy
    deprecation: str | None = None

    @property
    def optional(self) -> bool:
        return self.type.is_optional


@dataclass
class Constructor:
    """Convenience constructor taking only the required fields."""
    params: list[EmittedField]
    name: str = "new"


@dataclass
class DefaultValueConstructor:
    """Function producing a variable's declared default value."""
    name: str
    type: TargetType
    value: Any


@dataclass
class StructDefinition:
    name: str
    fields: list[EmittedField] = field(default_factory=list)
    bases: list[str] = field(default_factory=list)
    description: str | None = None
    constructor: Constructor | None = None
    defaults: list[DefaultValueConstructor] = field(default_factory=list)

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass
class EnumMember:
    name: str
    wire_value: str


@dataclass
class EnumDefinition:
    name: str
    values: list[EnumMember]
    description: str | None = None


@dataclass
class ScalarAlias:
    name: str
    target: str = "_typing.Any"


@dataclass
class CapabilityBinding:
    """Binds an operation's variables and response types to a query capability.

    STANDALONE binds ``into_query_body`` on the variables type itself.
    EMBEDDED binds ``build_query`` on an externally supplied host type.
    """
    mode: CodegenMode
    host_name: str
    variables_type: str
    response_type: str = "ResponseData"
    query_constant: str = "QUERY"
    operation_name_constant: str = "OPERATION_NAME"
    # EMBEDDED only: the operation declares no variables
    variables_optional: bool = False


@dataclass
class ModuleUnit:
    """Everything generated for one operation."""
    module_name: str
    operation_name: str
    operation_kind: str
    query: str
    visibility: Visibility
    variables: StructDefinition
    response: list[StructDefinition]
    binding: CapabilityBinding
    inputs: list[StructDefinition] = field(default_factory=list)
    enums: list[EnumDefinition] = field(default_factory=list)
    scalars: list[ScalarAlias] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    query_file: str | None = None
    schema_file: str | None = None
    diagnostics: list[str] = field(default_factory=list)

    @property
    def mode(self) -> CodegenMode:
        return self.binding.mode

    @property
    def file_name(self) -> str:
        return f"{self.module_name}.py"

    @property
    def response_data(self) -> StructDefinition:
        return self.response[-1]

    @property
    def exports(self) -> list[str]:
        """Names listed in ``__all__`` for public modules."""
        if self.visibility is not Visibility.PUBLIC:
            return []
        names = ["OPERATION_NAME", "QUERY"]
        names.extend(alias.name for alias in self.scalars)
        names.extend(enum.name for enum in self.enums)
        names.extend(struct.name for struct in self.inputs)
        names.extend(struct.name for struct in self.response)
        names.append(self.variables.name)
        if self.mode is CodegenMode.EMBEDDED:
            names.extend(["build_query", "bind_query"])
        return names
