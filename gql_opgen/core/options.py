"""Configuration for a code generation run.

One ``CodegenOptions`` value is threaded through every component of a run.
It can be built directly or from a plain mapping of the recognized keys:

    options = CodegenOptions.from_mapping({
        "mode": "embedded",
        "deprecation_strategy": "deny",
        "response_derives": "myapp.mixins.Printable",
    })
"""

import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from .errors import ConfigurationError
from .naming import module_alias

_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class CodegenMode(Enum):
    """Where the generated code is going to live."""
    STANDALONE = "standalone"  # independent build step (the CLI)
    EMBEDDED = "embedded"      # attached to a user-defined host type


class DeprecationStrategy(Enum):
    """What to do when an operation uses a deprecated field or enum value."""
    ALLOW = "allow"
    DENY = "deny"
    WARN = "warn"


class Visibility(Enum):
    """Visibility of the generated module."""
    PUBLIC = "public"
    PRIVATE = "private"
    INHERITED = "inherited"


@dataclass(frozen=True)
class Derive:
    """An extra base class requested for generated types."""
    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit(".", 1)[-1]

    @property
    def reference(self) -> str:
        """How the generated module spells the class, e.g. ``_myapp_mixins.Printable``."""
        if "." not in self.path:
            return self.path
        module, name = self.path.rsplit(".", 1)
        return f"{module_alias(module)}.{name}"

    @property
    def import_statement(self) -> str | None:
        if "." not in self.path:
            return None
        module = self.path.rsplit(".", 1)[0]
        return f"import {module} as {module_alias(module)}"


def parse_derives(value: str | None) -> list[Derive]:
    """Parse a comma-separated list of dotted class paths."""
    if not value:
        return []
    derives = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if not _DOTTED_NAME.match(item):
            raise ConfigurationError(f"Invalid derive entry: {item!r}")
        derive = Derive(item)
        if derive not in derives:
            derives.append(derive)
    return derives


@dataclass
class CodegenOptions:
    """Options recognized by the generator."""
    mode: CodegenMode = CodegenMode.STANDALONE
    # Generate only this operation; all operations when unset
    operation_name: str | None = None
    # Name of the standalone variables type or of the embedded host type
    struct_name: str | None = None
    variables_derives: str | None = None
    response_derives: str | None = None
    deprecation_strategy: DeprecationStrategy = DeprecationStrategy.WARN
    module_visibility: Visibility = Visibility.INHERITED
    # Opaque paths, only echoed into the generated module
    query_file: str | None = None
    schema_file: str | None = None

    def __post_init__(self):
        # Fail early on malformed derive lists
        parse_derives(self.variables_derives)
        parse_derives(self.response_derives)

    @property
    def variables_derive_list(self) -> list[Derive]:
        return parse_derives(self.variables_derives)

    @property
    def response_derive_list(self) -> list[Derive]:
        return parse_derives(self.response_derives)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "CodegenOptions":
        """Create options from a mapping of recognized keys to values."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")

        values = dict(data)
        enum_keys = {
            "mode": CodegenMode,
            "deprecation_strategy": DeprecationStrategy,
            "module_visibility": Visibility,
        }
        for key, enum_type in enum_keys.items():
            if key in values and not isinstance(values[key], enum_type):
                values[key] = _enum_value(enum_type, key, values[key])
        return cls(**values)


def _enum_value(enum_type: type[Enum], key: str, value: Any) -> Enum:
    try:
        return enum_type(str(value).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid value {value!r} for {key} (expected one of: {allowed})"
        ) from None
