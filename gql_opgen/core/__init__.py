"""Core modules for GraphQL operation code generation."""

from .errors import (
    CodegenError,
    ConfigurationError,
    DeprecationError,
    IntrospectionError,
    OperationNotFoundError,
    QueryDocumentError,
    RenderError,
    ResolutionError,
    SchemaError,
)
from .field_type import FieldType, TypeKind
from .generated_module import GeneratedModule
from .generator import CodeGenerator
from .hooks import (
    AddHeaderHook,
    DropDeprecatedEnumValuesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .inputs import InputEmitter
from .introspection import (
    Auth,
    AuthorizationAuth,
    HeaderAuth,
    NoAuth,
    fetch_schema,
)
from .ir import (
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
from .operations import Operation, OperationType, Variable
from .options import CodegenMode, CodegenOptions, DeprecationStrategy, Visibility
from .parser import SchemaParser, parse_schema, schema_from_introspection
from .query_context import QueryContext
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    ScalarHandler,
    ScalarRegistry,
    TypePath,
    UUIDHandler,
    parse_scalar_option,
)
from .selection import ResponseBuilder
from .units import ModuleUnit

__all__ = [
    # Errors
    "CodegenError",
    "ConfigurationError",
    "DeprecationError",
    "IntrospectionError",
    "OperationNotFoundError",
    "QueryDocumentError",
    "RenderError",
    "ResolutionError",
    "SchemaError",
    # Options
    "CodegenMode",
    "CodegenOptions",
    "DeprecationStrategy",
    "Visibility",
    # Schema model
    "DeprecationStatus",
    "FieldType",
    "GqlEnum",
    "GqlEnumValue",
    "GqlInput",
    "GqlInterface",
    "GqlObject",
    "GqlObjectField",
    "GqlScalar",
    "GqlUnion",
    "Schema",
    "TypeKind",
    # Parser
    "SchemaParser",
    "parse_schema",
    "schema_from_introspection",
    # Operations
    "Operation",
    "OperationType",
    "Variable",
    # Generation
    "CodeGenerator",
    "GeneratedModule",
    "InputEmitter",
    "ModuleUnit",
    "QueryContext",
    "ResponseBuilder",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    "TypePath",
    "parse_scalar_option",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "DropDeprecatedEnumValuesHook",
    "HookRunner",
    # Introspection
    "Auth",
    "AuthorizationAuth",
    "HeaderAuth",
    "NoAuth",
    "fetch_schema",
]
