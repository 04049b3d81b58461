"""Name conversions between GraphQL and Python identifiers."""

import re

# Python reserved keywords that cannot be used as identifiers
PYTHON_KEYWORDS = {
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield'
}

# Attribute names that would shadow pydantic or generated members
RESERVED_ATTRIBUTES = {
    'construct', 'copy', 'dict', 'json', 'schema', 'validate',
    'model_config', 'model_fields', 'new', 'into_query_body', 'parse_response', 'cls',
}


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word[:1].upper() + word[1:] for word in snake_case(name).split("_"))


def keyword_replace(name: str) -> str:
    """Make a name safe for Python by suffixing keywords with underscore."""
    if name in PYTHON_KEYWORDS:
        return f"{name}_"
    return name


def field_name(wire_name: str) -> str:
    """Python attribute name for a GraphQL field, variable or argument.

    Leading underscores are dropped because pydantic treats such names as
    private attributes.
    """
    name = snake_case(wire_name).lstrip("_") or "field"
    if name[0].isdigit():
        name = f"field_{name}"
    if name in RESERVED_ATTRIBUTES:
        return f"{name}_"
    return keyword_replace(name)


def module_name(operation_name: str) -> str:
    """Module name for an operation, e.g. ``GetUser`` -> ``get_user``."""
    return keyword_replace(snake_case(operation_name))


# Module-level names every generated module binds itself, besides the
# private ``_module`` import aliases
MODULE_NAMES = {
    'annotations', 'bool', 'classmethod', 'float', 'int', 'staticmethod', 'str',
    'OPERATION_NAME', 'QUERY', 'QUERY_FILE', 'SCHEMA_FILE',
    'ResponseData', 'Variables', 'build_query', 'bind_query',
}

_IMPORT_ALIAS = re.compile(r"^_[a-z]")


def type_name(name: str) -> str:
    """Python name for a schema type emitted at module level.

    Keywords, the module's own names and anything shaped like an import
    alias get a trailing underscore.
    """
    name = keyword_replace(name)
    if name in MODULE_NAMES or _IMPORT_ALIAS.match(name):
        return f"{name}_"
    return name


def module_alias(module_path: str) -> str:
    """Private alias a generated module imports ``module_path`` under."""
    return "_" + module_path.replace(".", "_")
