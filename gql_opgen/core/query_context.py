"""State shared by the emitters while one operation is being generated."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from graphql import EnumValueNode, ListValueNode, ObjectValueNode, ValueNode

from .errors import DeprecationError, ResolutionError
from .ir import DeprecationStatus, Schema
from .naming import field_name, type_name
from .options import CodegenOptions, DeprecationStrategy
from .scalars import BUILTIN_SCALAR_TYPES, ScalarRegistry
from .units import EmittedField, TargetKind, TargetType

logger = logging.getLogger(__name__)


def annotation_names(target: TargetType) -> set[str]:
    """Bare names an annotation refers to (``Optional[List[Episode]]`` -> {"Episode"})."""
    if target.kind is TargetKind.NAMED:
        return {target.name} if "." not in target.name else set()
    return annotation_names(target.inner)


def make_fields(
    specs: Iterable[tuple[str, TargetType, str | None]],
    reserved: Iterable[str] = (),
) -> list[EmittedField]:
    """Build the fields of one struct from ``(wire name, target, deprecation)`` specs.

    Python names are unique within the struct and never equal a type name
    its annotations use: pydantic resolves annotations against the class
    namespace, where a field default would shadow the type. The GraphQL
    name is kept as ``wire_name`` whenever the Python name differs, and no
    Python name equals the GraphQL name of another field, so keyword
    arguments and response keys map to exactly one field.
    """
    specs = list(specs)
    wire_names = {wire_name for wire_name, _, _ in specs}
    used_names = set(reserved)
    for _, target, _ in specs:
        used_names |= annotation_names(target)

    fields = []
    for wire_name, target, deprecation in specs:
        name = field_name(wire_name)
        while name in used_names or (name != wire_name and name in wire_names):
            name = f"{name}_"
        used_names.add(name)
        fields.append(EmittedField(
            name=name,
            type=target,
            wire_name=wire_name if name != wire_name else None,
            deprecation=deprecation,
        ))
    return fields


@dataclass
class QueryContext:
    """Schema, options and collected side outputs for one operation."""
    schema: Schema
    options: CodegenOptions = field(default_factory=CodegenOptions)
    scalars: ScalarRegistry = field(default_factory=ScalarRegistry)
    operation_name: str | None = None
    imports: set[str] = field(default_factory=set)
    diagnostics: list[str] = field(default_factory=list)

    def variables_derives(self) -> list[str]:
        return self._derive_names(self.options.variables_derive_list)

    def response_derives(self) -> list[str]:
        return self._derive_names(self.options.response_derive_list)

    def _derive_names(self, derives) -> list[str]:
        for derive in derives:
            if derive.import_statement:
                self.imports.add(derive.import_statement)
        return [derive.reference for derive in derives]

    def named_target(self, graphql_name: str) -> str:
        """Python type name for a named input-position type (scalar, enum or input)."""
        if graphql_name in BUILTIN_SCALAR_TYPES or graphql_name in self.schema.scalars:
            resolved = self.scalars.resolve(graphql_name)
            if resolved is None:
                return type_name(graphql_name)
            python_type, import_statement = resolved
            if import_statement:
                self.imports.add(import_statement)
            return python_type
        if graphql_name in self.schema.enums or graphql_name in self.schema.inputs:
            return type_name(graphql_name)
        if self.schema.is_composite(graphql_name):
            raise ResolutionError(
                f"{graphql_name} is an output type and cannot be used here",
                type_name=graphql_name,
                operation=self.operation_name,
            )
        raise ResolutionError(
            f"Unknown type {graphql_name}", type_name=graphql_name, operation=self.operation_name
        )

    def check_deprecation(self, type_name: str, member: str, status: DeprecationStatus) -> str | None:
        """Apply the deprecation strategy to a used field or enum value.

        Returns the note to attach to the emitted field under ``warn``.
        """
        if not status.deprecated:
            return None
        strategy = self.options.deprecation_strategy
        if strategy is DeprecationStrategy.DENY:
            raise DeprecationError(type_name, member, status.reason, operation=self.operation_name)
        if strategy is DeprecationStrategy.ALLOW:
            return None
        reason = status.reason or "deprecated"
        message = f"{type_name}.{member} is deprecated: {reason}"
        if self.operation_name:
            message = f"{message} (operation {self.operation_name})"
        logger.warning(message)
        self.diagnostics.append(message)
        return reason

    def check_literal(self, type_name: str, value: ValueNode):
        """Apply the deprecation strategy to enum values inside a literal."""
        if isinstance(value, ListValueNode):
            for item in value.values:
                self.check_literal(type_name, item)
        elif isinstance(value, EnumValueNode):
            enum = self.schema.enums.get(type_name)
            enum_value = enum.get_value(value.value) if enum else None
            if enum_value is not None:
                self.check_deprecation(type_name, enum_value.name, enum_value.deprecation)
        elif isinstance(value, ObjectValueNode):
            input_type = self.schema.inputs.get(type_name)
            if input_type is None:
                return
            for object_field in value.fields:
                input_field = input_type.fields.get(object_field.name.value)
                if input_field is not None:
                    self.check_literal(input_field.type.inner_name_str(), object_field.value)
