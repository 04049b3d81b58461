"""Command-line interface for gql-opgen."""

import json
import logging
from pathlib import Path

import click

from .core.errors import CodegenError
from .core.generator import CodeGenerator
from .core.introspection import build_auth, fetch_schema
from .core.options import CodegenMode, CodegenOptions, DeprecationStrategy, Visibility
from .core.parser import SchemaParser
from .core.scalars import ScalarRegistry, parse_scalar_option


def _choices(enum_type) -> click.Choice:
    return click.Choice([member.value for member in enum_type], case_sensitive=False)


@click.group()
@click.version_option(package_name="gql-opgen")
def main():
    """Typed Python modules for GraphQL operations.

    Generate pydantic models for the variables and responses of the
    operations in a query document.
    """
    pass


@main.command()
@click.argument("query_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--schema-path",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to the schema: SDL (.graphql, .graphqls), introspection JSON, or a directory.",
)
@click.option(
    "--output-directory",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory for the generated modules (default: next to the query file).",
)
@click.option(
    "--selected-operation",
    "-O",
    help="Generate only this operation.",
)
@click.option(
    "--variables-derives",
    "-I",
    help="Comma-separated dotted paths of extra bases for variables and input types.",
)
@click.option(
    "--response-derives",
    "-R",
    help="Comma-separated dotted paths of extra bases for response types.",
)
@click.option(
    "--deprecation-strategy",
    type=_choices(DeprecationStrategy),
    default=DeprecationStrategy.WARN.value,
    show_default=True,
    help="What to do when an operation uses deprecated fields or enum values.",
)
@click.option(
    "--module-visibility",
    "-m",
    type=_choices(Visibility),
    default=Visibility.INHERITED.value,
    show_default=True,
    help="public emits __all__; private prefixes module names with an underscore.",
)
@click.option(
    "--mode",
    type=_choices(CodegenMode),
    default=CodegenMode.STANDALONE.value,
    show_default=True,
    help="standalone variables types, or build_query/bind_query for a host class.",
)
@click.option(
    "--struct-name",
    help="Name of the variables type (standalone) or host type (embedded).",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    help="Custom scalar type as 'Name=module.Type', e.g. 'Money=decimal.Decimal'. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    query_path: str,
    schema_path: str,
    output_directory: str | None,
    selected_operation: str | None,
    variables_derives: str | None,
    response_derives: str | None,
    deprecation_strategy: str,
    module_visibility: str,
    mode: str,
    struct_name: str | None,
    scalars: tuple[str, ...],
    verbose: bool,
):
    """Generate Python modules for the operations in QUERY_PATH.

    Examples:

        gql-opgen generate queries.graphql --schema-path schema.graphql

        gql-opgen generate queries.graphql -s schema.json -o ./generated -O GetUser
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    query_file = Path(query_path).resolve()
    output_path = Path(output_directory).resolve() if output_directory else query_file.parent

    try:
        options = CodegenOptions.from_mapping({
            "mode": mode,
            "operation_name": selected_operation,
            "struct_name": struct_name,
            "variables_derives": variables_derives,
            "response_derives": response_derives,
            "deprecation_strategy": deprecation_strategy,
            "module_visibility": module_visibility,
            "query_file": str(query_file),
            "schema_file": str(Path(schema_path).resolve()),
        })
        registry = ScalarRegistry.from_mapping(dict(parse_scalar_option(s) for s in scalars))

        if verbose:
            click.echo(f"Schema: {schema_path}")
            click.echo(f"Output: {output_path}")

        click.echo("Parsing schema...")
        schema = SchemaParser(schema_path).parse_all()

        if verbose:
            click.echo(f"  Objects: {len(schema.objects)}")
            click.echo(f"  Inputs: {len(schema.inputs)}")
            click.echo(f"  Enums: {len(schema.enums)}")
            click.echo(f"  Scalars: {len(schema.scalars)}")

        click.echo("Generating code...")
        generator = CodeGenerator(schema, options, scalars=registry)
        written = generator.generate(query_file.read_text(), str(output_path))
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    for path in written:
        click.echo(f"  {path}")
    click.echo(f"Done! Generated {len(written)} module(s) in {output_path}")


@main.command("introspect-schema")
@click.argument("url")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="File to write the schema JSON to (default: stdout).",
)
@click.option(
    "--authorization",
    help="Value of the Authorization header, e.g. 'Bearer <token>'.",
)
@click.option(
    "--header",
    "headers",
    multiple=True,
    help="Extra header as 'Name: value'. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def introspect_schema(url: str, output: str | None, authorization: str | None, headers: tuple[str, ...], verbose: bool):
    """Fetch the schema of the GraphQL endpoint at URL as introspection JSON.

    Examples:

        gql-opgen introspect-schema https://api.example.com/graphql -o schema.json

        gql-opgen introspect-schema http://localhost:4000 --header "X-API-Key: secret"
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    try:
        result = fetch_schema(url, auth=build_auth(authorization, headers))
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    content = json.dumps(result, indent=2)
    if output:
        Path(output).write_text(content + "\n")
        click.echo(f"Wrote schema to {output}")
    else:
        click.echo(content)


if __name__ == "__main__":
    main()
