"""Tests for input-object emission and recursion boxing."""

import pytest

from gql_opgen.core.inputs import InputEmitter, strongly_connected_components
from gql_opgen.core.options import CodegenOptions
from gql_opgen.core.parser import parse_schema
from gql_opgen.core.query_context import QueryContext
from gql_opgen.core.units import TargetKind, TargetType


@pytest.fixture
def emitter(schema):
    return InputEmitter(QueryContext(schema))


def fields_by_wire_name(struct):
    return {(f.wire_name or f.name): f for f in struct.fields}


class TestStronglyConnectedComponents:
    """Tests for the iterative Tarjan implementation."""

    def test_self_loop_and_chain(self):
        components = strongly_connected_components({"a": ["a", "b"], "b": ["c"], "c": []})
        assert len(set(components.values())) == 3

    def test_cycle_grouped(self):
        components = strongly_connected_components({"a": ["b"], "b": ["c"], "c": ["a"], "d": ["a"]})
        assert components["a"] == components["b"] == components["c"]
        assert components["d"] != components["a"]

    def test_deep_chain_does_not_recurse(self):
        size = 5000
        graph = {f"n{i}": [f"n{i + 1}"] for i in range(size)}
        graph[f"n{size}"] = ["n0"]
        components = strongly_connected_components(graph)
        assert len(set(components.values())) == 1


class TestRecursionDetection:
    """Tests for InputEmitter.needs_box and friends."""

    def test_self_reference_boxed(self, schema, emitter):
        tree = schema.inputs["TreeFilter"]
        assert emitter.needs_box("TreeFilter", tree.fields["not"])

    def test_list_reference_not_boxed(self, schema, emitter):
        tree = schema.inputs["TreeFilter"]
        assert not emitter.needs_box("TreeFilter", tree.fields["and"])

    def test_mutual_recursion_boxed_on_both_sides(self, schema, emitter):
        assert emitter.needs_box("PairA", schema.inputs["PairA"].fields["b"])
        assert emitter.needs_box("PairB", schema.inputs["PairB"].fields["a"])

    def test_acyclic_reference_not_boxed(self, schema, emitter):
        assert not emitter.needs_box("ReviewInput", schema.inputs["ReviewInput"].fields["favoriteColor"])

    def test_scalar_field_not_boxed(self, schema, emitter):
        assert not emitter.needs_box("ReviewInput", schema.inputs["ReviewInput"].fields["stars"])

    def test_is_recursive_without_indirection(self, emitter):
        assert emitter.is_recursive_without_indirection("TreeFilter")
        assert emitter.is_recursive_without_indirection("PairA")
        assert not emitter.is_recursive_without_indirection("ColorInput")

    def test_cycle_only_through_lists_is_not_recursive(self):
        schema = parse_schema("input Node { children: [Node!]! parent: [Node] }")
        emitter = InputEmitter(QueryContext(schema))
        assert not emitter.is_recursive_without_indirection("Node")

    def test_reference_into_cycle_not_boxed(self):
        schema = parse_schema(
            "input Outer { loop: Loop }\n"
            "input Loop { again: Loop }\n"
        )
        emitter = InputEmitter(QueryContext(schema))
        assert not emitter.needs_box("Outer", schema.inputs["Outer"].fields["loop"])
        assert emitter.needs_box("Loop", schema.inputs["Loop"].fields["again"])


class TestToStruct:
    """Tests for InputEmitter.to_struct."""

    def test_fields_sorted_by_name(self, schema, emitter):
        struct = emitter.to_struct(schema.inputs["ReviewInput"])
        assert [f.wire_name or f.name for f in struct.fields] == sorted(schema.inputs["ReviewInput"].fields)

    def test_keyword_field_renamed_with_alias(self, schema, emitter):
        fields = fields_by_wire_name(emitter.to_struct(schema.inputs["ReviewInput"]))
        assert fields["from"].name == "from_"
        assert fields["from"].wire_name == "from"

    def test_camel_case_field_aliased(self, schema, emitter):
        fields = fields_by_wire_name(emitter.to_struct(schema.inputs["ReviewInput"]))
        assert fields["favoriteColor"].name == "favorite_color"
        assert fields["favoriteColor"].type == TargetType.optional(TargetType.named("ColorInput"))

    def test_plain_field_has_no_alias(self, schema, emitter):
        fields = fields_by_wire_name(emitter.to_struct(schema.inputs["ReviewInput"]))
        assert fields["stars"].wire_name is None
        assert fields["stars"].type == TargetType.named("int")

    def test_boxed_optional_keeps_optional_outside(self, schema, emitter):
        fields = fields_by_wire_name(emitter.to_struct(schema.inputs["TreeFilter"]))
        not_type = fields["not"].type
        assert not_type.kind is TargetKind.OPTIONAL
        assert not_type.inner.kind is TargetKind.BOXED
        assert not fields["and"].type.is_boxed()

    def test_boxed_required(self, schema, emitter):
        fields = fields_by_wire_name(emitter.to_struct(schema.inputs["PairA"]))
        assert fields["b"].type == TargetType.boxed_of(TargetType.named("PairB"))

    def test_constructor_takes_required_fields(self, schema, emitter):
        struct = emitter.to_struct(schema.inputs["ColorInput"])
        assert [p.name for p in struct.constructor.params] == ["blue", "green", "red"]
        review = emitter.to_struct(schema.inputs["ReviewInput"])
        assert [p.name for p in review.constructor.params] == ["stars"]

    def test_description_and_derives(self, schema):
        options = CodegenOptions(variables_derives="myapp.mixins.Hashable")
        context = QueryContext(schema, options)
        struct = InputEmitter(context).to_struct(schema.inputs["ReviewInput"])
        assert struct.description == "A review of a film."
        assert struct.bases == ["_myapp_mixins.Hashable"]
        assert "import myapp.mixins as _myapp_mixins" in context.imports

    def test_requires_field_leaves(self, schema, emitter):
        emitter.to_struct(schema.inputs["ReviewInput"])
        assert schema.is_required("ColorInput")
        assert schema.is_required("Money")

    def test_keyword_type_name(self):
        schema = parse_schema("input class { x: Int }")
        struct = InputEmitter(QueryContext(schema)).to_struct(schema.inputs["class"])
        assert struct.name == "class_"

    def test_duplicate_python_names(self):
        schema = parse_schema("input Dup { fooBar: Int foo_bar: Int }")
        struct = InputEmitter(QueryContext(schema)).to_struct(schema.inputs["Dup"])
        fields = fields_by_wire_name(struct)
        assert fields["fooBar"].name == "foo_bar_"
        assert fields["foo_bar"].name == "foo_bar"
        assert fields["foo_bar"].wire_name is None

    def test_field_named_like_builtin_annotation(self):
        schema = parse_schema("scalar Date input Range { int: Int date: Date }")
        fields = fields_by_wire_name(InputEmitter(QueryContext(schema)).to_struct(schema.inputs["Range"]))
        assert fields["int"].name == "int_"
        assert fields["int"].wire_name == "int"
        assert fields["date"].name == "date"
        assert fields["date"].type == TargetType.optional(TargetType.named("_datetime.date"))

    def test_field_named_like_lowercase_type(self):
        schema = parse_schema("enum color { RED } input Paint { color: color }")
        fields = fields_by_wire_name(InputEmitter(QueryContext(schema)).to_struct(schema.inputs["Paint"]))
        assert fields["color"].name == "color_"

    def test_module_name_type_renamed(self):
        schema = parse_schema("input Variables { x: Int }")
        struct = InputEmitter(QueryContext(schema)).to_struct(schema.inputs["Variables"])
        assert struct.name == "Variables_"
