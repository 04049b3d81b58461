"""Exceptions raised while generating code from GraphQL documents."""


class CodegenError(Exception):
    """Base class for every error raised by a generation run."""


class SchemaError(CodegenError):
    """The schema could not be ingested (syntax error or missing structure)."""


class QueryDocumentError(CodegenError):
    """An operation document could not be turned into operations."""


class ResolutionError(CodegenError):
    """A type or field referenced by an operation does not exist in the schema."""

    def __init__(
        self,
        message: str,
        type_name: str | None = None,
        operation: str | None = None,
        path: list[str] | None = None,
    ):
        self.message = message
        self.type_name = type_name
        self.operation = operation
        self.path = list(path or [])
        location = []
        if operation:
            location.append(f"operation {operation}")
        if self.path:
            location.append(f"at {'.'.join(self.path)}")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class DeprecationError(CodegenError):
    """A deprecated field or enum value was used under the ``deny`` strategy."""

    def __init__(self, type_name: str, field: str, reason: str | None, operation: str | None = None):
        self.type_name = type_name
        self.field = field
        self.reason = reason
        self.operation = operation
        message = f"{type_name}.{field} is deprecated"
        if reason:
            message = f"{message}: {reason}"
        if operation:
            message = f"{message} (operation {operation})"
        super().__init__(message)


class ConfigurationError(CodegenError):
    """The generation options are invalid."""


class OperationNotFoundError(ConfigurationError):
    """The selected operation does not exist in the documents."""

    def __init__(self, operation_name: str, available: list[str]):
        self.operation_name = operation_name
        self.available = available
        names = ", ".join(available) or "none"
        super().__init__(
            f"Operation {operation_name!r} not found in the query document (available: {names})"
        )


class RenderError(CodegenError):
    """The generated Python source is not valid Python."""


class IntrospectionError(CodegenError):
    """The endpoint answered the introspection query with errors."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)
