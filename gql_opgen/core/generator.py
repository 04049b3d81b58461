"""Code generator for GraphQL operations.

Renders Jinja2 templates to produce one Python module per operation.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(schema, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import logging
import os
from pathlib import Path
from typing import Optional

from graphql import (
    FragmentDefinitionNode,
    GraphQLSyntaxError,
    OperationDefinitionNode,
    parse,
)
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .errors import OperationNotFoundError, QueryDocumentError, RenderError
from .generated_module import GeneratedModule
from .hooks import HookRunner
from .ir import Schema
from .naming import pascal_case, snake_case
from .operations import Operation
from .options import CodegenOptions
from .scalars import ScalarRegistry
from .units import (
    EmittedField,
    EnumValue,
    ListValue,
    LiteralValue,
    ModuleUnit,
    ObjectValue,
    TargetKind,
    TargetType,
)

logger = logging.getLogger(__name__)


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def render_type(target: TargetType) -> str:
    """Python annotation for a target type.

    Modules are imported under private aliases (``_typing``, ``_pydantic``)
    so that no field name can shadow them inside a class body.
    """
    if target.kind is TargetKind.NAMED:
        return target.name
    if target.kind is TargetKind.OPTIONAL:
        return f"_typing.Optional[{render_type(target.inner)}]"
    if target.kind is TargetKind.LIST:
        return f"_typing.List[{render_type(target.inner)}]"
    # Boxed: a forward reference resolved by model_rebuild()
    return f'"{render_type(target.inner)}"'


def render_field(field: EmittedField) -> str:
    """Annotated class attribute for a model field."""
    annotation = f"{field.name}: {render_type(field.type)}"
    kwargs = []
    if field.optional:
        kwargs.append("default=None")
    if field.wire_name:
        kwargs.append(f"alias={field.wire_name!r}")
    if field.deprecation:
        kwargs.append(f"deprecated={field.deprecation!r}")
    if not kwargs:
        return annotation
    if kwargs == ["default=None"]:
        return f"{annotation} = None"
    return f"{annotation} = _pydantic.Field({', '.join(kwargs)})"


def render_value(value) -> str:
    """Python expression for a literal default value."""
    if isinstance(value, LiteralValue):
        return repr(value.value)
    if isinstance(value, ListValue):
        return f"[{', '.join(render_value(item) for item in value.items)}]"
    if isinstance(value, EnumValue):
        return f"{value.type_name}.{value.member}"
    if isinstance(value, ObjectValue):
        args = ", ".join(f"{name}={render_value(item)}" for name, item in value.fields)
        return f"{value.type_name}({args})"
    raise TypeError(f"Cannot render value {value!r}")


class CodeGenerator:
    """Generates Python modules from GraphQL operation documents.

    Supports custom templates via the template_dir parameter.
    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - module.py.j2: one module per operation
        - macros.j2: model, enum and capability macros

    Example:
        generator = CodeGenerator(
            schema=schema,
            options=CodegenOptions(mode=CodegenMode.STANDALONE),
            template_dir="./my_templates",
        )
        generator.generate(query_source, "./generated")
    """

    def __init__(
        self,
        schema: Schema,
        options: Optional[CodegenOptions] = None,
        template_dir: Optional[str] = None,
        hooks: Optional[HookRunner] = None,
        scalars: Optional[ScalarRegistry] = None,
    ):
        """Initialize the code generator.

        Args:
            schema: The parsed GraphQL schema
            options: Generation options shared by every operation
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            hooks: Pre- and post-generation hooks
            scalars: Handlers for custom scalars
        """
        self.options = options or CodegenOptions()
        self.template_dir = template_dir
        self.hooks = hooks or HookRunner()
        self.scalars = scalars or ScalarRegistry()
        self.schema = self.hooks.run_pre_hooks(schema)

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_opgen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        # Register custom filters
        self.env.filters["snake_case"] = snake_case
        self.env.filters["pascal_case"] = pascal_case
        self.env.filters["repr"] = repr
        self.env.filters["safe_docstring"] = safe_docstring
        self.env.filters["render_type"] = render_type
        self.env.filters["render_field"] = render_field
        self.env.filters["render_value"] = render_value

    def parse_operations(self, query_source: str) -> tuple[list[Operation], dict[str, FragmentDefinitionNode]]:
        """Parse a document into its operations (in document order) and fragments."""
        try:
            document = parse(query_source)
        except GraphQLSyntaxError as e:
            logger.error("Failed to parse query document: %s", e.message)
            raise QueryDocumentError(f"Invalid query document: {e.message}") from e

        operations: list[Operation] = []
        fragments: dict[str, FragmentDefinitionNode] = {}
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                operation = Operation.from_definition(definition)
                if any(op.name == operation.name for op in operations):
                    raise QueryDocumentError(f"Duplicate operation name {operation.name}")
                operations.append(operation)
            elif isinstance(definition, FragmentDefinitionNode):
                fragments[definition.name.value] = definition
        return operations, fragments

    def generate_modules(self, query_source: str) -> list[ModuleUnit]:
        """Build a module unit for each selected operation of the document."""
        operations, fragments = self.parse_operations(query_source)
        selected = self.options.operation_name
        if selected:
            matching = [op for op in operations if op.name == selected]
            if not matching:
                raise OperationNotFoundError(selected, [op.name for op in operations])
            operations = matching

        units = []
        for operation in operations:
            module = GeneratedModule(
                operation,
                query_source,
                self.schema,
                options=self.options,
                fragments=fragments,
                scalars=self.scalars,
            )
            units.append(module.build())
        return units

    def render(self, unit: ModuleUnit) -> str:
        """Lower a module unit to Python source."""
        template = self.env.get_template("module.py.j2")
        content = template.render(unit=unit, standalone=unit.mode.value == "standalone")

        # Validate Python syntax
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise RenderError(
                f"Generated invalid Python for {unit.file_name}: {e}\n"
                f"Template: module.py.j2"
            ) from e
        return self.hooks.run_post_hooks(unit.file_name, content)

    def generate(self, query_source: str, output_dir: str) -> list[str]:
        """Generate and write one module per selected operation.

        Returns:
            Paths of the written files, in document order.
        """
        os.makedirs(output_dir, exist_ok=True)
        written = []
        for unit in self.generate_modules(query_source):
            content = self.render(unit)
            full_path = os.path.join(output_dir, unit.file_name)
            with open(full_path, "w") as f:
                f.write(content)
            logger.info("Wrote %s", full_path)
            written.append(full_path)
        return written
