"""Response types for an operation's selection set.

Fields are collected per response key in document order. Fragment spreads
and inline fragments are flattened into their parent; a field that only
arrives through a fragment on a different type is optional.
"""

from dataclasses import dataclass
from typing import Iterable

from graphql import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    SelectionNode,
)

from .errors import ResolutionError
from .field_type import FieldType
from .naming import MODULE_NAMES, pascal_case, type_name
from .operations import Operation
from .query_context import QueryContext, make_fields
from .units import StructDefinition, TargetType

TYPENAME = "__typename"


@dataclass
class CollectedField:
    node: FieldNode
    parent_type: str
    # Only selected under a type condition narrower than the parent
    conditional: bool


class ResponseBuilder:
    """Builds ``ResponseData`` and its nested structs for one operation."""

    def __init__(self, context: QueryContext, fragments: dict[str, FragmentDefinitionNode] | None = None):
        self.context = context
        self.fragments = fragments or {}
        self.struct_names: set[str] = set()

    def build(self, operation: Operation, reserved: Iterable[str] = ()) -> list[StructDefinition]:
        """Structs for the response, nested ones first and ``ResponseData`` last.

        Nested struct names avoid ``reserved`` and every schema type the
        module may define.
        """
        schema = self.context.schema
        self.struct_names = {*MODULE_NAMES, *reserved}
        self.struct_names.update(type_name(name) for name in (*schema.inputs, *schema.enums, *schema.scalars))
        root = operation.root_name(schema)
        if root not in schema.objects:
            raise ResolutionError(
                f"Schema has no {operation.operation_type.value} root type {root}",
                type_name=root,
                operation=operation.name,
            )
        structs: list[StructDefinition] = []
        selections = operation.selection.selections if operation.selection else ()
        self._build_struct(
            "ResponseData",
            pascal_case(operation.name),
            root,
            list(selections),
            [],
            structs,
        )
        return structs

    def collect_fields(
        self,
        type_name: str,
        selections: list[SelectionNode],
        conditional: bool = False,
        visited_fragments: frozenset = frozenset(),
        collected: dict[str, list[CollectedField]] | None = None,
    ) -> dict[str, list[CollectedField]]:
        """Group selected fields by response key, flattening fragments."""
        if collected is None:
            collected = {}
        for selection in selections:
            if isinstance(selection, FieldNode):
                key = selection.alias.value if selection.alias else selection.name.value
                collected.setdefault(key, []).append(
                    CollectedField(selection, type_name, conditional)
                )
            elif isinstance(selection, FragmentSpreadNode):
                fragment_name = selection.name.value
                if fragment_name in visited_fragments:
                    continue
                fragment = self.fragments.get(fragment_name)
                if fragment is None:
                    raise ResolutionError(
                        f"Unknown fragment {fragment_name}", operation=self.context.operation_name
                    )
                condition = fragment.type_condition.name.value
                self.collect_fields(
                    condition,
                    list(fragment.selection_set.selections),
                    conditional or condition != type_name,
                    visited_fragments | {fragment_name},
                    collected,
                )
            elif isinstance(selection, InlineFragmentNode):
                condition = selection.type_condition.name.value if selection.type_condition else type_name
                self.collect_fields(
                    condition,
                    list(selection.selection_set.selections),
                    conditional or condition != type_name,
                    visited_fragments,
                    collected,
                )
        return collected

    def _build_struct(
        self,
        name: str,
        prefix: str,
        type_name: str,
        selections: list[SelectionNode],
        path: list[str],
        structs: list[StructDefinition],
    ):
        schema = self.context.schema
        specs = []

        for key, occurrences in self.collect_fields(type_name, selections).items():
            first = occurrences[0]
            field_path = path + [key]
            optional = all(o.conditional for o in occurrences)

            if first.node.name.value == TYPENAME:
                target = TargetType.named("str")
                specs.append((key, TargetType.optional(target) if optional else target, None))
                continue

            schema_field = schema.lookup_field(first.parent_type, first.node.name.value)
            if schema_field is None:
                raise ResolutionError(
                    f"No field {first.node.name.value} on type {first.parent_type}",
                    type_name=first.parent_type,
                    operation=self.context.operation_name,
                    path=field_path,
                )
            note = self.context.check_deprecation(
                first.parent_type, schema_field.name, schema_field.deprecation
            )
            for occurrence in occurrences:
                self._check_arguments(occurrence.node, schema_field.arguments)

            leaf = schema_field.type.inner_name_str()
            if schema.is_composite(leaf):
                nested_selections = [
                    s
                    for o in occurrences if o.node.selection_set
                    for s in o.node.selection_set.selections
                ]
                if not nested_selections:
                    raise ResolutionError(
                        f"Field of type {leaf} needs a selection set",
                        type_name=leaf,
                        operation=self.context.operation_name,
                        path=field_path,
                    )
                nested_name = self.unique_struct_name(f"{prefix}{pascal_case(key)}")
                self._build_struct(nested_name, nested_name, leaf, nested_selections, field_path, structs)
                target = schema_field.type.to_target_type(self.context, leaf_name=nested_name)
            else:
                schema.require(leaf)
                target = self._leaf_target(schema_field.type, field_path)

            if optional and not target.is_optional:
                target = TargetType.optional(target)
            specs.append((key, target, note))

        structs.append(StructDefinition(
            name=name,
            fields=make_fields(specs),
            bases=self.context.response_derives(),
        ))

    def unique_struct_name(self, name: str) -> str:
        while name in self.struct_names:
            name = f"{name}_"
        self.struct_names.add(name)
        return name

    def _leaf_target(self, field_type: FieldType, path: list[str]) -> TargetType:
        try:
            return field_type.to_target_type(self.context)
        except ResolutionError as e:
            raise ResolutionError(
                e.message, type_name=e.type_name, operation=self.context.operation_name, path=path
            ) from e

    def _check_arguments(self, node: FieldNode, arguments: dict[str, FieldType]):
        for argument in node.arguments or []:
            arg_type = arguments.get(argument.name.value)
            if arg_type is not None:
                self.context.check_literal(arg_type.inner_name_str(), argument.value)
