"""Hooks around a generation run.

A pre-generation hook sees the parsed schema once, before any operation is
resolved against it. A post-generation hook sees each rendered module before
it is written (and after ``ast.parse`` accepted it).

    class HideInternalValues:
        def pre_generate(self, schema):
            for gql_enum in schema.enums.values():
                gql_enum.values = [v for v in gql_enum.values if not v.name.startswith("INTERNAL_")]
            return schema

    generator = CodeGenerator(schema, hooks=HookRunner(HideInternalValues(), AddHeaderHook("# noqa")))
"""

import logging
from typing import Protocol, runtime_checkable

from .ir import Schema

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    """Receives the schema before generation and returns the schema to use."""

    def pre_generate(self, schema: Schema) -> Schema:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Transforms the source of one generated module.

    Example:
        class FormatWithBlack:
            def post_generate(self, filename: str, content: str) -> str:
                import black
                return black.format_str(content, mode=black.FileMode())
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Called for each module.

        Args:
            filename: The module's file name (e.g., "get_user.py")
            content: The rendered Python source

        Returns:
            The source to write
        """
        ...


class AddHeaderHook:
    """Prepends a comment block (license, lint pragmas) to every module.

    Example:
        hook = AddHeaderHook("# flake8: noqa")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        header = self.header if self.header.endswith("\n") else self.header + "\n"
        return header + "\n" + content


class DropDeprecatedEnumValuesHook:
    """Removes deprecated values from every enum before generation.

    Operations that still use a dropped value fail to resolve instead of
    going through the deprecation strategy.
    """

    def pre_generate(self, schema: Schema) -> Schema:
        for gql_enum in schema.enums.values():
            kept = [value for value in gql_enum.values if not value.deprecation.deprecated]
            if len(kept) != len(gql_enum.values):
                logger.debug("Dropping %d deprecated value(s) of %s", len(gql_enum.values) - len(kept), gql_enum.name)
            gql_enum.values = kept
        return schema


class HookRunner:
    """Runs hooks in registration order.

    Hooks passed to the constructor are registered for every protocol they
    implement.
    """

    def __init__(self, *hooks):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []
        for hook in hooks:
            self.add(hook)

    def add(self, hook):
        registered = False
        if isinstance(hook, PreGenerateHook):
            self.pre_hooks.append(hook)
            registered = True
        if isinstance(hook, PostGenerateHook):
            self.post_hooks.append(hook)
            registered = True
        if not registered:
            raise TypeError(f"{type(hook).__name__} defines neither pre_generate() nor post_generate()")

    def add_pre_hook(self, hook: PreGenerateHook):
        if not isinstance(hook, PreGenerateHook):
            raise TypeError(f"{type(hook).__name__} does not define pre_generate()")
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        if not isinstance(hook, PostGenerateHook):
            raise TypeError(f"{type(hook).__name__} does not define post_generate()")
        self.post_hooks.append(hook)

    def run_pre_hooks(self, schema: Schema) -> Schema:
        for hook in self.pre_hooks:
            logger.debug("Running pre-generate hook %s", type(hook).__name__)
            schema = hook.pre_generate(schema)
        return schema

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
