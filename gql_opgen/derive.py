"""Class decorator generating an operation's types in place.

    @graphql_query(schema_path="schema.graphql", query_path="queries.graphql")
    class GetUser:
        pass

    body = GetUser.build_query(GetUser.Variables(id="42"))

The decorator runs the embedded-mode generator for the operation named like
the class (or ``operation_name``), executes the rendered module and binds it
to the class. Relative paths resolve against the directory of the module
defining the class.
"""

import logging
import os
import sys
import types
from typing import Callable, Mapping, Optional, TypeVar, Union

from .core.errors import CodegenError
from .core.generator import CodeGenerator
from .core.options import CodegenMode, CodegenOptions
from .core.parser import SchemaParser
from .core.scalars import ScalarRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


def _resolve(path: str, host: type) -> str:
    if os.path.isabs(path):
        return path
    module = sys.modules.get(host.__module__)
    module_file = getattr(module, "__file__", None)
    base_dir = os.path.dirname(os.path.abspath(module_file)) if module_file else os.getcwd()
    return os.path.join(base_dir, path)


def load_generated_module(name: str, source: str, filename: str = "<gql-opgen>") -> types.ModuleType:
    """Execute generated source as a module registered under ``name``.

    The module is placed in ``sys.modules`` first so pydantic can resolve
    forward references against it.
    """
    module = types.ModuleType(name)
    sys.modules[name] = module
    try:
        exec(compile(source, filename, "exec"), module.__dict__)
    except Exception:
        del sys.modules[name]
        raise
    return module


def graphql_query(
    schema_path: str,
    query_path: str,
    operation_name: Optional[str] = None,
    variables_derives: Optional[str] = None,
    response_derives: Optional[str] = None,
    deprecation_strategy: str = "warn",
    scalars: Union[ScalarRegistry, Mapping[str, str], None] = None,
) -> Callable[[T], T]:
    """Bind the host class to a GraphQL operation.

    Args:
        schema_path: Schema file or directory (SDL or introspection JSON)
        query_path: File holding the operation document
        operation_name: Operation to bind (default: the class name)
        variables_derives: Extra bases for the variables and input types
        response_derives: Extra bases for the response types
        deprecation_strategy: ``allow``, ``deny`` or ``warn``
        scalars: Registry, or mapping like {"Money": "decimal.Decimal"}

    Raises:
        CodegenError: If the operation cannot be generated
    """

    registry = ScalarRegistry.from_mapping(scalars) if isinstance(scalars, Mapping) else scalars

    def decorator(host: T) -> T:
        resolved_query = _resolve(query_path, host)
        schema = SchemaParser(_resolve(schema_path, host)).parse_all()
        with open(resolved_query) as f:
            query_source = f.read()

        options = CodegenOptions.from_mapping({
            "mode": CodegenMode.EMBEDDED,
            "operation_name": operation_name or host.__name__,
            "struct_name": host.__name__,
            "variables_derives": variables_derives,
            "response_derives": response_derives,
            "deprecation_strategy": deprecation_strategy,
        })
        generator = CodeGenerator(schema, options, scalars=registry)
        unit = generator.generate_modules(query_source)[0]
        source = generator.render(unit)

        name = f"{host.__module__}.{unit.module_name}__graphql"
        logger.debug("Binding %s to operation %s as %s", host.__qualname__, unit.operation_name, name)
        try:
            module = load_generated_module(name, source, filename=resolved_query)
        except Exception as e:
            raise CodegenError(f"Generated module for {unit.operation_name} failed to load: {e}") from e
        return module.bind_query(host)

    return decorator
