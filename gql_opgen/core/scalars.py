"""Python types for GraphQL scalars.

Built-in scalars map to Python builtins. A custom scalar maps to the type of
its registered handler; scalars nobody registered are emitted as an ``Any``
alias in the generated module.

Handlers are anything with ``python_type`` and ``import_statement``
attributes. The common case is a dotted path:

    registry = ScalarRegistry.from_mapping({"Money": "decimal.Decimal"})
    registry.resolve("Money")   # ("_decimal.Decimal", "import decimal as _decimal")
"""

import re
from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from .errors import ConfigurationError
from .naming import module_alias

BUILTIN_SCALAR_TYPES = {
    "Int": "int",
    "Float": "float",
    "Boolean": "bool",
    "ID": "str",
    "String": "str",
}

_DOTTED_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)+$")


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for custom scalar handlers.

    Attributes:
        python_type: The type as written in annotations (e.g., "_decimal.Decimal")
        import_statement: The import needed for this type, or "" for builtins
    """

    python_type: str
    import_statement: str


@dataclass(frozen=True)
class TypePath:
    """A handler pointing at an importable class, e.g. ``decimal.Decimal``.

    The generated module imports the class's module under a private alias
    (``import decimal as _decimal``) and spells the type ``_decimal.Decimal``,
    so it never clashes with a field or schema type of the same name.
    """
    path: str

    def __post_init__(self):
        if not _DOTTED_PATH.match(self.path):
            raise ConfigurationError(f"Scalar type must be a dotted path like 'decimal.Decimal', got {self.path!r}")

    @property
    def python_type(self) -> str:
        module, name = self.path.rsplit(".", 1)
        return f"{module_alias(module)}.{name}"

    @property
    def import_statement(self) -> str:
        module = self.path.rsplit(".", 1)[0]
        return f"import {module} as {module_alias(module)}"


# pydantic validates ISO 8601 strings into these types on the way in
# and serializes them back with model_dump(mode="json").
DateTimeHandler = TypePath("datetime.datetime")
DateHandler = TypePath("datetime.date")
UUIDHandler = TypePath("uuid.UUID")
JSONHandler = TypePath("typing.Any")

DEFAULT_HANDLERS: dict[str, ScalarHandler] = {
    "DateTime": DateTimeHandler,
    "Date": DateHandler,
    "UUID": UUIDHandler,
    "JSON": JSONHandler,
    "JSONObject": JSONHandler,
}


class ScalarRegistry:
    """Maps GraphQL scalar names to Python types.

    Example:
        registry = ScalarRegistry()
        registry.register("Money", "decimal.Decimal")

        python_type, import_statement = registry.resolve("Money")
    """

    def __init__(self, defaults: bool = True):
        self._handlers: dict[str, ScalarHandler] = dict(DEFAULT_HANDLERS) if defaults else {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, "str | ScalarHandler"]) -> "ScalarRegistry":
        """Build a registry from ``{"Money": "decimal.Decimal", ...}`` on top of the defaults."""
        registry = cls()
        for scalar_name, handler in mapping.items():
            registry.register(scalar_name, handler)
        return registry

    def register(self, scalar_name: str, handler: "str | ScalarHandler"):
        """Register a handler (or a dotted type path) for a scalar type."""
        if scalar_name in BUILTIN_SCALAR_TYPES:
            raise ConfigurationError(f"Cannot override built-in scalar {scalar_name}")
        if isinstance(handler, str):
            handler = TypePath(handler)
        if not isinstance(handler, ScalarHandler):
            raise TypeError(f"Handler for {scalar_name} must define python_type and import_statement")
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        return scalar_name in self._handlers

    def resolve(self, scalar_name: str) -> tuple[str, str | None] | None:
        """The Python type and the import it needs, or None if unhandled."""
        if scalar_name in BUILTIN_SCALAR_TYPES:
            return BUILTIN_SCALAR_TYPES[scalar_name], None
        handler = self._handlers.get(scalar_name)
        if handler is None:
            return None
        return handler.python_type, handler.import_statement or None


def parse_scalar_option(value: str) -> tuple[str, str]:
    """Split a ``Name=module.Type`` mapping given on the command line."""
    scalar_name, sep, path = value.partition("=")
    if not sep or not scalar_name.strip() or not path.strip():
        raise ConfigurationError(f"Invalid scalar mapping {value!r}, expected 'Name=module.Type'")
    return scalar_name.strip(), path.strip()
