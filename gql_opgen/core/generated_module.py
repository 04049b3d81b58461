"""Assembly of one generated module per operation.

Standalone and embedded modes share this assembler; they differ only in the
name and base of the variables type and in the capability binding.
"""

import logging

from graphql import FragmentDefinitionNode

from .inputs import InputEmitter
from .ir import Schema
from .naming import keyword_replace, module_name, pascal_case, type_name
from .operations import Operation
from .options import CodegenMode, CodegenOptions, Visibility
from .query_context import QueryContext
from .scalars import ScalarRegistry
from .selection import ResponseBuilder
from .units import CapabilityBinding, EnumDefinition, EnumMember, ModuleUnit, ScalarAlias

logger = logging.getLogger(__name__)


class GeneratedModule:
    """Builds the ``ModuleUnit`` for a single operation."""

    def __init__(
        self,
        operation: Operation,
        query_string: str,
        schema: Schema,
        options: CodegenOptions | None = None,
        fragments: dict[str, FragmentDefinitionNode] | None = None,
        scalars: ScalarRegistry | None = None,
    ):
        self.operation = operation
        self.query_string = query_string
        self.schema = schema
        self.options = options or CodegenOptions()
        self.fragments = fragments or {}
        self.scalars = scalars or ScalarRegistry()

    def variables_type_name(self) -> str:
        if self.options.mode is CodegenMode.EMBEDDED:
            return "Variables"
        return self.options.struct_name or pascal_case(self.operation.name)

    def build(self) -> ModuleUnit:
        operation = self.operation
        context = QueryContext(
            schema=self.schema,
            options=self.options,
            scalars=self.scalars,
            operation_name=operation.name,
        )
        logger.debug("Assembling module for %s %s", operation.operation_type.value, operation.name)

        operation.compute_variable_requirements(context)
        response = ResponseBuilder(context, self.fragments).build(operation, reserved={self.variables_type_name()})
        variables = operation.expand_variables(context, self.variables_type_name())

        # Emitting an input can still mark enums and scalars; inputs go first
        emitter = InputEmitter(context)
        inputs = [emitter.to_struct(self.schema.inputs[name]) for name in self.schema.required_inputs()]
        enums = [self._enum_definition(name) for name in self.schema.required_enums()]
        scalars = [
            ScalarAlias(type_name(name))
            for name in self.schema.required_scalars()
            if not self.scalars.has(name)
        ]

        name = module_name(operation.name)
        if self.options.module_visibility is Visibility.PRIVATE:
            name = f"_{name}"

        return ModuleUnit(
            module_name=name,
            operation_name=operation.name,
            operation_kind=operation.operation_type.value,
            query=self.query_string,
            visibility=self.options.module_visibility,
            variables=variables,
            response=response,
            binding=self._binding(variables.name),
            inputs=inputs,
            enums=enums,
            scalars=scalars,
            imports=sorted(context.imports),
            query_file=self.options.query_file,
            schema_file=self.options.schema_file,
            diagnostics=list(context.diagnostics),
        )

    def _binding(self, variables_type: str) -> CapabilityBinding:
        mode = self.options.mode
        if mode is CodegenMode.STANDALONE:
            return CapabilityBinding(mode=mode, host_name=variables_type, variables_type=variables_type)
        return CapabilityBinding(
            mode=mode,
            host_name=self.options.struct_name or pascal_case(self.operation.name),
            variables_type=variables_type,
            variables_optional=not self.operation.variables,
        )

    def _enum_definition(self, name: str) -> EnumDefinition:
        gql_enum = self.schema.enums[name]
        return EnumDefinition(
            name=type_name(name),
            values=[EnumMember(keyword_replace(v.name), v.name) for v in gql_enum.values],
            description=gql_enum.description,
        )
