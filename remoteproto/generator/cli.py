"""Command-line interface for remoteproto schema generation."""

from __future__ import annotations

import logging
import sys

import click
from lark.exceptions import LarkError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from remoteproto.generator import GeneratorOptions, generate, parse, render
from remoteproto.generator.emitter import GenerationResult
from remoteproto.generator.errors import GenerationError
from remoteproto.generator.parser import ValidationError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(input_file: str, options: GeneratorOptions) -> GenerationResult:
    with open(input_file, encoding="utf-8") as f:
        text = f.read()

    try:
        return generate(parse(text), options)
    except (LarkError, ValidationError, GenerationError) as e:
        print(f"Error: {e}")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Remote view model schema generator."""
    _configure_logging(verbose)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input view model description")
@click.option("--output", "-o", "output_file", required=True, help="Output .proto file")
@click.option("--namespace", default=None, help="Namespace of the generated types")
@click.option("--service", "service_name", default=None, help="Name of the generated service")
@click.option(
    "--allow-name-collisions",
    is_flag=True,
    default=False,
    help="Reuse the first message when two types produce the same name, instead of failing",
)
def gen(
    input_file: str,
    output_file: str,
    namespace: str | None,
    service_name: str | None,
    allow_name_collisions: bool,
) -> None:
    """Generate a .proto schema from a view model description."""
    options = GeneratorOptions(
        namespace=namespace,
        service_name=service_name,
        allow_name_collisions=allow_name_collisions,
    )
    result = _load(input_file, options)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(render(result.schema))

    count = len(result.diagnostics)
    print(f"Generated {output_file} ({count} warning{'s' if count != 1 else ''})")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input view model description")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display the messages and service derived from a view model."""
    result = _load(input_file, GeneratorOptions())

    if output_json:
        print(result.to_json(indent=2))
    else:
        _output_plain(result)


def _output_plain(result: GenerationResult) -> None:
    """Output schema info using rich text formatting."""
    console = Console()
    schema = result.schema

    console.print("[bold cyan]Service[/bold cyan]")
    service_table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    service_table.add_column("Label", style="dim")
    service_table.add_column("Value", style="white")
    service_table.add_row("Name", schema.service_name)
    service_table.add_row("Package", schema.package)
    service_table.add_row("Namespace", schema.namespace)
    service_table.add_row("Imports", ", ".join(schema.imports.paths()))
    console.print(service_table)
    console.print()

    console.print("[bold cyan]Messages[/bold cyan]")
    message_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    message_table.add_column("Name", style="white")
    message_table.add_column("Fields", style="yellow", justify="right")
    message_table.add_column("Kind", style="dim")

    for message in schema.messages:
        message_table.add_row(message.name, str(len(message.fields)), message.provenance.value)

    console.print(message_table)
    console.print()

    console.print("[bold cyan]RPCs[/bold cyan]")
    rpc_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    rpc_table.add_column("Name", style="white")
    rpc_table.add_column("Request", style="green")
    rpc_table.add_column("Response", style="green")

    for rpc in schema.rpcs:
        response = f"stream {rpc.response}" if rpc.server_streaming else rpc.response
        rpc_table.add_row(rpc.name, rpc.request, response)

    console.print(rpc_table)

    if result.diagnostics:
        console.print()
        console.print("[bold yellow]Diagnostics[/bold yellow]")
        for diagnostic in result.diagnostics:
            console.print(f"  {diagnostic}", markup=False)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
