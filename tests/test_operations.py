"""Tests for the operation and variable model."""

import pytest
from graphql import parse

from gql_opgen.core.errors import DeprecationError, QueryDocumentError, ResolutionError
from gql_opgen.core.operations import Operation, OperationType
from gql_opgen.core.options import CodegenOptions, DeprecationStrategy
from gql_opgen.core.query_context import QueryContext
from gql_opgen.core.units import EnumValue, ListValue, LiteralValue, ObjectValue, TargetType


def operation_from(source: str) -> Operation:
    return Operation.from_definition(parse(source).definitions[0])


@pytest.fixture
def context(schema):
    return QueryContext(schema, operation_name="Test")


class TestFromDefinition:
    """Tests for Operation.from_definition."""

    def test_kinds(self):
        assert operation_from("query A { hero { name } }").operation_type is OperationType.QUERY
        assert operation_from("mutation B { x }").operation_type is OperationType.MUTATION
        subscription = operation_from("subscription C { x }")
        assert subscription.is_subscription()

    def test_variables_in_declaration_order(self):
        operation = operation_from("query A($z: Int, $a: String!) { x }")
        assert [v.name for v in operation.variables] == ["z", "a"]
        assert str(operation.variables[1].type) == "String!"

    def test_shorthand_rejected(self):
        with pytest.raises(QueryDocumentError, match="root of the document"):
            operation_from("{ hero { name } }")

    def test_unnamed_rejected(self):
        with pytest.raises(QueryDocumentError, match="Unnamed query"):
            operation_from("query { hero { name } }")

    def test_root_name(self, schema):
        assert operation_from("mutation B { x }").root_name(schema) == "Mutation"


class TestExpandVariables:
    """Tests for Operation.expand_variables."""

    def test_no_variables(self, context):
        struct = operation_from("query A { x }").expand_variables(context)
        assert struct.name == "Variables"
        assert struct.fields == []
        assert struct.constructor is None

    def test_fields_and_constructor(self, context):
        operation = operation_from("query A($episode: Episode, $id: ID!, $in: ReviewInput!) { x }")
        struct = operation.expand_variables(context, "AVars")
        assert struct.name == "AVars"
        assert struct.field_names() == ["episode", "id", "in_"]
        assert struct.fields[0].type == TargetType.optional(TargetType.named("Episode"))
        assert struct.fields[2].wire_name == "in"
        assert [p.name for p in struct.constructor.params] == ["id", "in_"]

    def test_field_avoids_default_constructor_name(self, context):
        struct = operation_from("query A($x: Int = 1, $default_x: Int) { x }").expand_variables(context)
        assert struct.field_names() == ["x", "default_x_"]
        assert struct.fields[1].wire_name == "default_x"
        assert [d.name for d in struct.defaults] == ["default_x"]

    def test_variable_requirements(self, context, schema):
        operation = operation_from("query A($r: ReviewInput!, $e: [Episode!]) { x }")
        operation.compute_variable_requirements(context)
        assert schema.required_inputs() == ["ColorInput", "ReviewInput"]
        assert schema.required_enums() == ["Episode"]
        assert schema.required_scalars() == ["Money"]

    def test_unknown_variable_type(self, context):
        operation = operation_from("query A($x: Nope) { x }")
        with pytest.raises(ResolutionError, match="Nope"):
            operation.expand_variables(context)


class TestDefaultValues:
    """Tests for default-value constructors."""

    def default_of(self, context, declaration: str):
        operation = operation_from(f"query A({declaration}) {{ x }}")
        return operation.expand_variables(context).defaults

    def test_no_default(self, context):
        assert self.default_of(context, "$x: Int") == []

    def test_scalar_default(self, context):
        (default,) = self.default_of(context, "$limit: Int = 10")
        assert default.name == "default_limit"
        assert default.value == LiteralValue(10)

    def test_int_coerced_to_float(self, context):
        (default,) = self.default_of(context, "$ratio: Float = 1")
        assert default.value == LiteralValue(1.0)

    def test_keyword_variable_name(self, context):
        (default,) = self.default_of(context, "$from: String = \"x\"")
        assert default.name == "default_from"

    def test_enum_default(self, context):
        (default,) = self.default_of(context, "$episode: Episode = JEDI")
        assert default.value == EnumValue("Episode", "JEDI")

    def test_list_coercion(self, context):
        (default,) = self.default_of(context, "$episodes: [Episode!] = EMPIRE")
        assert default.value == ListValue((EnumValue("Episode", "EMPIRE"),))

    def test_object_default(self, context):
        (default,) = self.default_of(
            context, '$review: ReviewInput = {stars: 5, from: "me", favoriteColor: {red: 1, green: 2, blue: 3}}'
        )
        assert default.value.type_name == "ReviewInput"
        names = [name for name, _ in default.value.fields]
        assert names == ["stars", "from_", "favorite_color"]
        assert isinstance(default.value.fields[2][1], ObjectValue)

    def test_object_default_uses_record_field_names(self, clash_schema):
        context = QueryContext(clash_schema, operation_name="A")
        (default,) = self.default_of(context, "$f: Filter = {userId: 1, user_id: 2, kind: A}")
        assert default.value.fields == (
            ("user_id_", LiteralValue(1)),
            ("user_id", LiteralValue(2)),
            ("kind", EnumValue("Field", "A")),
        )

    def test_null_default(self, context):
        (default,) = self.default_of(context, "$x: String = null")
        assert default.value == LiteralValue(None)

    def test_unknown_enum_value(self, context):
        with pytest.raises(ResolutionError, match="Unknown value SITH"):
            self.default_of(context, "$episode: Episode = SITH")

    def test_unknown_input_field(self, context):
        with pytest.raises(ResolutionError, match="Unknown field nope"):
            self.default_of(context, "$review: ReviewInput = {nope: 1}")

    def test_deprecated_enum_default_denied(self, schema):
        context = QueryContext(
            schema, CodegenOptions(deprecation_strategy=DeprecationStrategy.DENY), operation_name="A"
        )
        with pytest.raises(DeprecationError, match="Episode.CLONES"):
            self.default_of(context, "$episode: Episode = CLONES")
