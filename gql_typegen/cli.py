"""Command-line interface for gql-typegen."""

import asyncio
import logging
from pathlib import Path

import click
import httpx

from .core import generate_types, generate_types_async
from .core.errors import GenerationError
from .core.fetcher import GraphQLError, IntrospectionFetcher
from .core.hooks import AddHeaderHook, HookRunner
from .core.options import GeneratorOptions, parse_overrides


def _split_pairs(values: tuple[str, ...], separator: str, option: str) -> dict[str, str]:
    """Turn repeated ``KEY<sep>VALUE`` options into a dict."""
    pairs = {}
    for value in values:
        key, sep, item = value.partition(separator)
        if not sep or not key.strip() or not item.strip():
            raise click.BadParameter(
                f"expected KEY{separator}VALUE, got {value!r}", param_hint=option
            )
        pairs[key.strip()] = item.strip()
    return pairs


def build_options(
    config: str | None,
    namespace: str | None,
    scalars: tuple[str, ...],
    overrides: tuple[str, ...],
    enums_as_string: bool,
) -> GeneratorOptions:
    """Config file values first, then command-line values on top."""
    options = GeneratorOptions.from_file(config) if config else GeneratorOptions()
    changes = {
        "scalar_name_to_type_name": _split_pairs(scalars, "=", "--scalar"),
        "type_field_to_type_name_override": parse_overrides(
            _split_pairs(overrides, "=", "--override")
        ),
    }
    if namespace:
        changes["namespace"] = namespace
    if enums_as_string:
        changes["enum_members_as_string"] = True
    return options.merged(**changes)


@click.group()
@click.version_option(package_name="gql-typegen")
def main():
    """Generate typed Python models from GraphQL introspection.

    Produces pydantic models for every object, interface, union and enum
    in a GraphQL schema.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to an introspection result (JSON).",
)
@click.option(
    "--url",
    "-u",
    help="GraphQL endpoint to run the introspection query against.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Request header for --url, as 'Name: value'. Repeatable.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output file for the generated models (e.g., models.py).",
)
@click.option(
    "--namespace",
    "-n",
    help="Name recorded in the generated module (default: generated).",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    help="Scalar mapping as 'ScalarName=python_type'. Repeatable.",
)
@click.option(
    "--override",
    "overrides",
    multiple=True,
    help="Field type override as 'TypeName.fieldName=python_type'. Repeatable.",
)
@click.option(
    "--enums-as-string",
    is_flag=True,
    help="Type enum fields as str instead of the enum class.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON config file; command-line options take precedence.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory with templates overriding the built-in ones.",
)
@click.option(
    "--file-header",
    help="Text placed at the top of the generated file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str | None,
    url: str | None,
    headers: tuple[str, ...],
    output: str,
    namespace: str | None,
    scalars: tuple[str, ...],
    overrides: tuple[str, ...],
    enums_as_string: bool,
    config: str | None,
    template_dir: str | None,
    file_header: str | None,
    verbose: bool,
):
    """Generate Python models from a GraphQL schema.

    Examples:

        gql-typegen generate --schema ./introspection.json --output ./shop/models.py

        gql-typegen generate -u https://example.com/graphql -H "Authorization: Bearer x" -o models.py

        gql-typegen generate -s schema.json -o models.py --scalar DateTime=datetime --scalar Money=decimal.Decimal
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if bool(schema) == bool(url):
        raise click.UsageError("Pass exactly one of --schema or --url.")

    try:
        options = build_options(config, namespace, scalars, overrides, enums_as_string)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e
    header_values = _split_pairs(headers, ":", "--header")
    output_path = Path(output).resolve()

    hooks = HookRunner()
    if file_header:
        hooks.add_post_hook(AddHeaderHook(file_header))

    if verbose:
        click.echo(f"Source: {schema or url}")
        click.echo(f"Output: {output_path}")
        click.echo(f"Namespace: {options.namespace}")

    try:
        if url:
            click.echo(f"Fetching introspection from {url}...")
            code = asyncio.run(
                _generate_from_url(url, header_values, options, template_dir, hooks)
            )
        else:
            click.echo("Parsing schema...")
            code = generate_types(
                options, Path(schema), template_dir=template_dir, hooks=hooks
            )
    except (GenerationError, GraphQLError, httpx.HTTPError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        num_classes = code.count("\nclass ")
        click.echo(f"  Lines: {len(code.splitlines())}")
        click.echo(f"  Classes: {num_classes}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    click.echo(f"Writing to {output_path}...")
    output_path.write_text(code, encoding="utf-8")
    click.echo(f"Done! Generated models in {output_path}")


async def _generate_from_url(
    url: str,
    headers: dict[str, str],
    options: GeneratorOptions,
    template_dir: str | None,
    hooks: HookRunner,
) -> str:
    async with IntrospectionFetcher(url, headers=headers) as fetcher:
        return await generate_types_async(
            options, fetcher.send_query, template_dir=template_dir, hooks=hooks
        )


if __name__ == "__main__":
    main()
