"""Tests for generation hooks."""

import pytest

from gql_opgen.core.errors import ResolutionError
from gql_opgen.core.generator import CodeGenerator
from gql_opgen.core.hooks import (
    AddHeaderHook,
    DropDeprecatedEnumValuesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)


class LowercaseDescriptionsHook:
    """Lower-cases enum descriptions and records the rendered file names."""

    def __init__(self):
        self.files = []

    def pre_generate(self, schema):
        for gql_enum in schema.enums.values():
            gql_enum.description = (gql_enum.description or "").lower()
        return schema

    def post_generate(self, filename, content):
        self.files.append(filename)
        return content


class TestAddHeaderHook:
    """Tests for AddHeaderHook."""

    def test_adds_header(self):
        result = AddHeaderHook("# flake8: noqa").post_generate("get_user.py", '"""Doc."""\n')
        assert result == '# flake8: noqa\n\n"""Doc."""\n'

    def test_header_with_newline(self):
        assert AddHeaderHook("# Header\n").post_generate("x.py", "code") == "# Header\n\ncode"


class TestDropDeprecatedEnumValuesHook:
    """Tests for DropDeprecatedEnumValuesHook."""

    def test_drops_deprecated(self, schema):
        result = DropDeprecatedEnumValuesHook().pre_generate(schema)
        assert [v.name for v in result.enums["Episode"].values] == ["NEWHOPE", "EMPIRE", "JEDI"]

    def test_generated_enum_omits_value(self, schema):
        generator = CodeGenerator(schema, hooks=HookRunner(DropDeprecatedEnumValuesHook()))
        (unit,) = generator.generate_modules("query Heroes($e: Episode) { hero(episode: $e) { name } }")
        (episode,) = unit.enums
        assert "CLONES" not in [member.wire_value for member in episode.values]

    def test_use_of_dropped_value_fails(self, schema):
        generator = CodeGenerator(schema, hooks=HookRunner(DropDeprecatedEnumValuesHook()))
        with pytest.raises(ResolutionError):
            generator.generate_modules("query Clones($e: Episode = CLONES) { hero(episode: $e) { name } }")


class TestHookRunner:
    """Tests for HookRunner."""

    def test_constructor_dispatches_by_protocol(self):
        both = LowercaseDescriptionsHook()
        header = AddHeaderHook("# h")
        runner = HookRunner(both, header)
        assert runner.pre_hooks == [both]
        assert runner.post_hooks == [both, header]

    def test_post_hooks_run_in_order(self):
        runner = HookRunner(AddHeaderHook("# Line 1"), AddHeaderHook("# Line 0"))
        assert runner.run_post_hooks("test.py", "code") == "# Line 0\n\n# Line 1\n\ncode"

    def test_pre_hooks_chain(self, schema):
        runner = HookRunner()
        runner.add_pre_hook(DropDeprecatedEnumValuesHook())

        class CountValuesHook:
            def pre_generate(self, schema):
                schema.value_count = len(schema.enums["Episode"].values)
                return schema

        runner.add_pre_hook(CountValuesHook())
        assert runner.run_pre_hooks(schema).value_count == 3

    def test_post_hook_sees_file_names(self, schema):
        hook = LowercaseDescriptionsHook()
        generator = CodeGenerator(schema, hooks=HookRunner(hook))
        for unit in generator.generate_modules("query A { hero { name } }\nquery B { hero { id } }"):
            generator.render(unit)
        assert hook.files == ["a.py", "b.py"]

    def test_rejects_non_hooks(self):
        runner = HookRunner()
        with pytest.raises(TypeError):
            runner.add(object())
        with pytest.raises(TypeError):
            runner.add_pre_hook(AddHeaderHook("# h"))
        with pytest.raises(TypeError):
            runner.add_post_hook(DropDeprecatedEnumValuesHook())


class TestProtocolCompliance:
    def test_builtins(self):
        assert isinstance(AddHeaderHook("header"), PostGenerateHook)
        assert not isinstance(AddHeaderHook("header"), PreGenerateHook)
        assert isinstance(DropDeprecatedEnumValuesHook(), PreGenerateHook)
