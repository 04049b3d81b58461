"""Operations and their variables.

An ``Operation`` is built from one graphql-core ``OperationDefinitionNode``.
Its selection set stays opaque here; ``selection.py`` turns it into the
response types.
"""

from dataclasses import dataclass, field
from enum import Enum

from graphql import (
    BooleanValueNode,
    EnumValueNode,
    FloatValueNode,
    IntValueNode,
    ListValueNode,
    NullValueNode,
    ObjectValueNode,
    OperationDefinitionNode,
    SelectionSetNode,
    StringValueNode,
    TokenKind,
    ValueNode,
    VariableDefinitionNode,
    VariableNode,
)
from graphql import OperationType as AstOperationType

from .errors import QueryDocumentError, ResolutionError
from .field_type import FieldType, TypeKind
from .inputs import InputEmitter
from .naming import field_name, keyword_replace, type_name
from .query_context import QueryContext, make_fields
from .units import (
    Constructor,
    DefaultValueConstructor,
    EmittedField,
    EnumValue,
    ListValue,
    LiteralValue,
    ObjectValue,
    StructDefinition,
)


class OperationType(Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


_AST_OPERATION_TYPES = {
    AstOperationType.QUERY: OperationType.QUERY,
    AstOperationType.MUTATION: OperationType.MUTATION,
    AstOperationType.SUBSCRIPTION: OperationType.SUBSCRIPTION,
}


@dataclass
class Variable:
    """A variable declared by an operation."""
    name: str
    type: FieldType
    default: ValueNode | None = None

    @classmethod
    def from_definition(cls, node: VariableDefinitionNode) -> "Variable":
        return cls(
            name=node.variable.name.value,
            type=FieldType.from_type_node(node.type),
            default=node.default_value,
        )

    @property
    def default_constructor_name(self) -> str:
        return f"default_{field_name(self.name).rstrip('_')}"

    def generate_default_value_constructor(self, context: QueryContext) -> DefaultValueConstructor | None:
        """``default_<name>()`` returning the declared default, if there is one."""
        if self.default is None:
            return None
        return DefaultValueConstructor(
            name=self.default_constructor_name,
            type=self.type.to_target_type(context),
            value=value_expr(context, self.type, self.default, [self.name]),
        )


@dataclass
class Operation:
    """A named query, mutation or subscription."""
    name: str
    operation_type: OperationType
    variables: list[Variable] = field(default_factory=list)
    selection: SelectionSetNode | None = None

    @classmethod
    def from_definition(cls, definition: OperationDefinitionNode) -> "Operation":
        loc = definition.loc
        if loc is not None and loc.start_token.kind == TokenKind.BRACE_L:
            raise QueryDocumentError(
                "Selection set at the root of the document: operations must be declared "
                "with query, mutation or subscription and a name"
            )
        if definition.name is None:
            raise QueryDocumentError(
                f"Unnamed {definition.operation.value}: every generated operation needs a name"
            )
        return cls(
            name=definition.name.value,
            operation_type=_AST_OPERATION_TYPES[definition.operation],
            variables=[Variable.from_definition(v) for v in definition.variable_definitions or []],
            selection=definition.selection_set,
        )

    def root_name(self, schema) -> str:
        return schema.root_name(self.operation_type.value)

    def is_subscription(self) -> bool:
        return self.operation_type is OperationType.SUBSCRIPTION

    def variable_fields(self, context: QueryContext) -> list[EmittedField]:
        """Fields of the variables type, in declaration order.

        Field names stay clear of the ``default_<name>()`` constructors.
        """
        return make_fields(
            ((variable.name, variable.type.to_target_type(context), None) for variable in self.variables),
            reserved={v.default_constructor_name for v in self.variables if v.default is not None},
        )

    def compute_variable_requirements(self, context: QueryContext):
        """Mark the types of this operation's variables as required."""
        for variable in self.variables:
            context.schema.require(variable.type.inner_name_str())

    def expand_variables(self, context: QueryContext, struct_name: str = "Variables") -> StructDefinition:
        """The variables type with its constructor and default-value constructors."""
        bases = context.variables_derives()
        if not self.variables:
            return StructDefinition(name=struct_name, bases=bases)

        fields = self.variable_fields(context)
        defaults = [
            constructor
            for constructor in (v.generate_default_value_constructor(context) for v in self.variables)
            if constructor is not None
        ]
        return StructDefinition(
            name=struct_name,
            fields=fields,
            bases=bases,
            constructor=Constructor(params=[f for f in fields if not f.optional]),
            defaults=defaults,
        )


def value_expr(context: QueryContext, field_type: FieldType, node: ValueNode, path: list[str]):
    """Convert a literal into a value tree, guided by the expected type."""
    if isinstance(node, NullValueNode):
        return LiteralValue(None)
    if isinstance(node, VariableNode):
        raise ResolutionError(
            f"Variable ${node.name.value} cannot be used in a default value",
            operation=context.operation_name,
            path=path,
        )

    if field_type.kind is TypeKind.OPTIONAL:
        field_type = field_type.inner
    if field_type.kind is TypeKind.LIST:
        items = node.values if isinstance(node, ListValueNode) else (node,)
        return ListValue(tuple(
            value_expr(context, field_type.inner, item, path + [str(i)]) for i, item in enumerate(items)
        ))

    leaf_name = field_type.name
    schema = context.schema
    if isinstance(node, EnumValueNode):
        enum = schema.enums.get(leaf_name)
        enum_value = enum.get_value(node.value) if enum else None
        if enum_value is None:
            raise ResolutionError(
                f"Unknown value {node.value} for enum {leaf_name}",
                type_name=leaf_name,
                operation=context.operation_name,
                path=path,
            )
        context.check_deprecation(leaf_name, enum_value.name, enum_value.deprecation)
        return EnumValue(type_name(leaf_name), keyword_replace(enum_value.name))
    if isinstance(node, ObjectValueNode):
        gql_input = schema.inputs.get(leaf_name)
        if gql_input is None:
            raise ResolutionError(
                f"Object literal given for non-input type {leaf_name}",
                type_name=leaf_name,
                operation=context.operation_name,
                path=path,
            )
        python_names = {
            f.wire_name or f.name: f.name for f in InputEmitter(context).to_struct(gql_input).fields
        }
        values = []
        for object_field in node.fields:
            wire_name = object_field.name.value
            input_field = gql_input.fields.get(wire_name)
            if input_field is None:
                raise ResolutionError(
                    f"Unknown field {wire_name} on input {leaf_name}",
                    type_name=leaf_name,
                    operation=context.operation_name,
                    path=path,
                )
            values.append((
                python_names[wire_name],
                value_expr(context, input_field.type, object_field.value, path + [wire_name]),
            ))
        return ObjectValue(type_name(leaf_name), tuple(values))
    if isinstance(node, IntValueNode):
        if leaf_name == "Float":
            return LiteralValue(float(node.value))
        if leaf_name in ("ID", "String"):
            return LiteralValue(node.value)
        return LiteralValue(int(node.value))
    if isinstance(node, FloatValueNode):
        return LiteralValue(float(node.value))
    if isinstance(node, (StringValueNode, BooleanValueNode)):
        return LiteralValue(node.value)
    raise ResolutionError(
        f"Unsupported literal {type(node).__name__}",
        operation=context.operation_name,
        path=path,
    )
