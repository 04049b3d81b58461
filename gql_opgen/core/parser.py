"""GraphQL schema parser using graphql-core.

Reads SDL (``.graphql``/``.graphqls``) or introspection JSON (``.json``)
and produces a ``Schema``. Both inputs converge onto the same model.
"""

import json
import logging
import os
from typing import Any

from graphql import (
    DirectiveNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    OperationType,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    StringValueNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    parse,
)

from .errors import SchemaError
from .field_type import FieldType
from .ir import (
    BUILTIN_SCALARS,
    DEFAULT_DEPRECATION_REASON,
    DeprecationStatus,
    GqlEnum,
    GqlEnumValue,
    GqlInput,
    GqlInterface,
    GqlObject,
    GqlObjectField,
    GqlScalar,
    GqlUnion,
    Schema,
)

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = (".graphql", ".graphqls")
INTROSPECTION_EXTENSIONS = (".json",)


class SchemaParser:
    """Parses GraphQL schema files into a ``Schema``."""

    def __init__(self, schema_path: str | None = None):
        """Initialize a parser, optionally with a path to a schema file or directory."""
        self.schema_path = schema_path
        self.schema = Schema()
        self.current_file = ""

    def parse_all(self) -> Schema:
        """Parse all schema files under ``schema_path`` and return the schema."""
        if not self.schema_path:
            raise SchemaError("No schema path given")
        schema_files = self._collect_schema_files()
        if not schema_files:
            raise SchemaError(f"No schema files found at {self.schema_path}")

        for file_path in schema_files:
            self.current_file = os.path.basename(file_path)
            logger.debug("Parsing schema file %s", file_path)
            with open(file_path) as f:
                content = f.read()
            if file_path.endswith(INTROSPECTION_EXTENSIONS):
                try:
                    data = json.loads(content)
                except json.JSONDecodeError as e:
                    raise SchemaError(f"Invalid introspection JSON in {self.current_file}: {e}") from e
                self.parse_introspection(data)
            else:
                self.parse_sdl(content)
        return self.schema

    def _collect_schema_files(self) -> list[str]:
        """Collect all schema files from path."""
        extensions = SDL_EXTENSIONS + INTROSPECTION_EXTENSIONS
        files = []
        if os.path.isfile(self.schema_path):
            files.append(self.schema_path)
        else:
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith(extensions):
                        files.append(os.path.join(root, filename))
        return sorted(files)

    # SDL

    def parse_sdl(self, content: str) -> Schema:
        """Add the definitions of an SDL document to the schema."""
        try:
            ast = parse(content)
        except GraphQLSyntaxError as e:
            logger.error("Error parsing %s: %s", self.current_file or "<sdl>", e.message)
            raise SchemaError(f"Invalid schema SDL: {e.message}") from e
        self._process_ast(ast)
        return self.schema

    def _process_ast(self, ast):
        """Process GraphQL AST and populate the schema."""
        for definition in ast.definitions:
            if isinstance(definition, (SchemaDefinitionNode, SchemaExtensionNode)):
                self._process_schema_definition(definition)
            elif isinstance(definition, ScalarTypeDefinitionNode):
                self._process_scalar(definition)
            elif isinstance(definition, (EnumTypeDefinitionNode, EnumTypeExtensionNode)):
                self._process_enum(definition)
            elif isinstance(definition, (InterfaceTypeDefinitionNode, InterfaceTypeExtensionNode)):
                self._process_interface(definition)
            elif isinstance(definition, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
                self._process_object_type(definition)
            elif isinstance(definition, (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)):
                self._process_input_type(definition)
            elif isinstance(definition, (UnionTypeDefinitionNode, UnionTypeExtensionNode)):
                self._process_union(definition)

    def _process_schema_definition(self, node: SchemaDefinitionNode | SchemaExtensionNode):
        for operation_type in node.operation_types or []:
            type_name = operation_type.type.name.value
            if operation_type.operation == OperationType.QUERY:
                self.schema.query_type = type_name
            elif operation_type.operation == OperationType.MUTATION:
                self.schema.mutation_type = type_name
            elif operation_type.operation == OperationType.SUBSCRIPTION:
                self.schema.subscription_type = type_name

    def _process_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        if name in BUILTIN_SCALARS:
            return
        self.schema.scalars[name] = GqlScalar(name=name, description=_description(node))

    def _process_enum(self, node: EnumTypeDefinitionNode | EnumTypeExtensionNode):
        name = node.name.value
        values = [
            GqlEnumValue(
                name=v.name.value,
                description=_description(v),
                deprecation=_deprecation(v.directives),
            )
            for v in node.values or []
        ]
        existing = self.schema.enums.get(name)
        if existing:
            known = {v.name for v in existing.values}
            existing.values.extend(v for v in values if v.name not in known)
            existing.description = existing.description or _description(node)
        else:
            self.schema.enums[name] = GqlEnum(name=name, values=values, description=_description(node))

    def _process_interface(self, node: InterfaceTypeDefinitionNode | InterfaceTypeExtensionNode):
        name = node.name.value
        fields = self._process_fields(node.fields or [])
        existing = self.schema.interfaces.get(name)
        if existing:
            _merge_fields(existing.fields, fields)
            existing.description = existing.description or _description(node)
        else:
            self.schema.interfaces[name] = GqlInterface(
                name=name, fields=fields, description=_description(node)
            )

    def _process_object_type(self, node: ObjectTypeDefinitionNode | ObjectTypeExtensionNode):
        name = node.name.value
        fields = self._process_fields(node.fields or [])
        interfaces = [i.name.value for i in node.interfaces or []]

        # Check if the type already exists (from a definition or an extension)
        existing = self.schema.objects.get(name)
        if existing:
            _merge_fields(existing.fields, fields)
            existing.interfaces.extend(i for i in interfaces if i not in existing.interfaces)
            existing.description = existing.description or _description(node)
        else:
            self.schema.objects[name] = GqlObject(
                name=name,
                fields=fields,
                description=_description(node),
                interfaces=interfaces,
            )

    def _process_input_type(self, node: InputObjectTypeDefinitionNode | InputObjectTypeExtensionNode):
        name = node.name.value
        fields = self._process_fields(node.fields or [])
        existing = self.schema.inputs.get(name)
        if existing:
            _merge_fields(existing.fields, fields)
            existing.description = existing.description or _description(node)
        else:
            self.schema.inputs[name] = GqlInput(name=name, fields=fields, description=_description(node))

    def _process_union(self, node: UnionTypeDefinitionNode | UnionTypeExtensionNode):
        name = node.name.value
        variants = [t.name.value for t in node.types or []]
        existing = self.schema.unions.get(name)
        if existing:
            existing.variants.extend(v for v in variants if v not in existing.variants)
        else:
            self.schema.unions[name] = GqlUnion(name=name, variants=variants, description=_description(node))

    def _process_fields(self, field_nodes) -> dict[str, GqlObjectField]:
        """Process field or input value definitions."""
        fields = {}
        for node in field_nodes:
            # Input values carry their type in `type` as well
            arguments = {
                arg.name.value: FieldType.from_type_node(arg.type)
                for arg in getattr(node, "arguments", None) or []
            }
            fields[node.name.value] = GqlObjectField(
                name=node.name.value,
                type=FieldType.from_type_node(node.type),
                deprecation=_deprecation(node.directives),
                description=_description(node),
                arguments=arguments,
            )
        return fields

    # Introspection

    def parse_introspection(self, data: dict[str, Any]) -> Schema:
        """Add the types of an introspection response to the schema."""
        if "data" in data:
            data = data["data"] or {}
        raw_schema = data.get("__schema")
        if not isinstance(raw_schema, dict):
            raise SchemaError("Introspection response has no __schema")

        self.schema.query_type = _root_name(raw_schema.get("queryType")) or self.schema.query_type
        self.schema.mutation_type = _root_name(raw_schema.get("mutationType")) or self.schema.mutation_type
        self.schema.subscription_type = (
            _root_name(raw_schema.get("subscriptionType")) or self.schema.subscription_type
        )

        for full_type in raw_schema.get("types") or []:
            self._process_full_type(full_type)
        return self.schema

    def _process_full_type(self, full_type: dict[str, Any]):
        name = full_type.get("name")
        if not name:
            raise SchemaError(f"Unnamed {full_type.get('kind', 'type')} in introspection data")
        if name.startswith("__") or name in BUILTIN_SCALARS:
            return

        kind = full_type.get("kind")
        description = full_type.get("description")
        if kind == "SCALAR":
            self.schema.scalars[name] = GqlScalar(name=name, description=description)
        elif kind == "ENUM":
            self.schema.enums[name] = GqlEnum(
                name=name,
                values=[
                    GqlEnumValue(
                        name=_required_key(v, "name", name),
                        description=v.get("description"),
                        deprecation=_introspected_deprecation(v),
                    )
                    for v in full_type.get("enumValues") or []
                ],
                description=description,
            )
        elif kind == "OBJECT":
            self.schema.objects[name] = GqlObject(
                name=name,
                fields=self._introspected_fields(name, full_type.get("fields")),
                description=description,
                interfaces=[_required_key(i, "name", name) for i in full_type.get("interfaces") or []],
            )
        elif kind == "INTERFACE":
            self.schema.interfaces[name] = GqlInterface(
                name=name,
                fields=self._introspected_fields(name, full_type.get("fields")),
                description=description,
            )
        elif kind == "UNION":
            self.schema.unions[name] = GqlUnion(
                name=name,
                variants=[_required_key(t, "name", name) for t in full_type.get("possibleTypes") or []],
                description=description,
            )
        elif kind == "INPUT_OBJECT":
            input_fields = full_type.get("inputFields")
            if input_fields is None:
                raise SchemaError(f"Input object {name} has no inputFields in introspection data")
            self.schema.inputs[name] = GqlInput(
                name=name,
                fields=self._introspected_fields(name, input_fields),
                description=description,
            )
        else:
            raise SchemaError(f"Unknown type kind {kind!r} for {name} in introspection data")

    def _introspected_fields(self, owner: str, raw_fields) -> dict[str, GqlObjectField]:
        if raw_fields is None:
            raise SchemaError(f"Type {owner} has no fields in introspection data")
        fields = {}
        for raw in raw_fields:
            name = _required_key(raw, "name", owner)
            if "type" not in raw:
                raise SchemaError(f"Field {owner}.{name} has no type in introspection data")
            fields[name] = GqlObjectField(
                name=name,
                type=FieldType.from_introspection(raw["type"]),
                deprecation=_introspected_deprecation(raw),
                description=raw.get("description"),
                arguments={
                    _required_key(arg, "name", f"{owner}.{name}"): FieldType.from_introspection(arg.get("type"))
                    for arg in raw.get("args") or []
                },
            )
        return fields


def _description(node) -> str | None:
    description = getattr(node, "description", None)
    return description.value if description else None


def _deprecation(directives: tuple[DirectiveNode, ...] | None) -> DeprecationStatus:
    for directive in directives or []:
        if directive.name.value != "deprecated":
            continue
        reason = DEFAULT_DEPRECATION_REASON
        for argument in directive.arguments or []:
            if argument.name.value == "reason" and isinstance(argument.value, StringValueNode):
                reason = argument.value.value
        return DeprecationStatus.deprecated_because(reason)
    return DeprecationStatus.current()


def _introspected_deprecation(raw: dict[str, Any]) -> DeprecationStatus:
    if raw.get("isDeprecated"):
        return DeprecationStatus.deprecated_because(raw.get("deprecationReason"))
    return DeprecationStatus.current()


def _merge_fields(existing: dict[str, GqlObjectField], new: dict[str, GqlObjectField]):
    for name, field in new.items():
        existing.setdefault(name, field)


def _root_name(ref: dict[str, Any] | None) -> str | None:
    return ref.get("name") if ref else None


def _required_key(raw: dict[str, Any], key: str, owner: str) -> str:
    value = raw.get(key)
    if not value:
        raise SchemaError(f"Missing {key} under {owner} in introspection data")
    return value


def parse_schema(sdl: str) -> Schema:
    """Build a schema from SDL text."""
    return SchemaParser().parse_sdl(sdl)


def schema_from_introspection(data: dict[str, Any]) -> Schema:
    """Build a schema from an introspection response."""
    return SchemaParser().parse_introspection(data)
