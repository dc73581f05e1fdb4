import json
from datetime import date

import click
from rich import pretty
from rich.console import Console
from rich.table import Table

from openapi_ir.builder import build_document
from openapi_ir.complexity import score
from openapi_ir.config import IRSettings
from openapi_ir.errors import IRBuildError
from openapi_ir.graph import export_mermaid
from openapi_ir.ir.serialization import document_to_dict
from openapi_ir.ir.validation import validate_document
from openapi_ir.ir_logging import configure_logging
from openapi_ir.loader import dump_document, load_openapi_document
from openapi_ir.writer import write_document

pretty.install()
console = Console()


def _stamp() -> str:
    return f"[{date.today().strftime('%Y-%m-%d')}]"


def _build(context, spec_path):
    """Load and build; any build error ends the command with status 1."""
    settings = context.obj["settings"]
    try:
        return build_document(load_openapi_document(spec_path), settings)
    except IRBuildError as e:
        console.print(f"{_stamp()} IR build failed: {e}", style="red", markup=False)
        context.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Per-component debug logging.")
@click.option("-q", "--quiet", is_flag=True, help="Only warnings and errors.")
@click.pass_context
def cli(context, verbose, quiet):
    context.ensure_object(dict)
    settings = context.obj.setdefault("settings", IRSettings())
    configure_logging(verbose=verbose, quiet=quiet, default_level=settings.log_level)


@cli.command("build", help="Build the IR of an OpenAPI document and write it as JSON.")
@click.pass_context
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "out_file", default=None, help="Output file (default: stdout).")
@click.option("--check", is_flag=True, help="Verify the IR invariants after building.")
def build(context, spec_path, out_file, check):
    document = _build(context, spec_path)

    if check:
        issues = validate_document(document)
        if issues:
            for issue in issues:
                console.print(f"  - {issue}", style="red", markup=False)
            console.print(f"{_stamp()} IR check failed with {len(issues)} issue(s)", style="red")
            context.exit(1)

    data = document_to_dict(document)
    if out_file:
        dump_document(data, out_file)
        console.print(f"{_stamp()} IR written to {out_file}", style="green", markup=False)
    else:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@cli.command("roundtrip", help="Write OpenAPI back from the IR and check that rebuilding gives the same IR.")
@click.pass_context
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "out_file", default=None, help="Where to write the regenerated OpenAPI document.")
def roundtrip(context, spec_path, out_file):
    document = _build(context, spec_path)
    written = write_document(document)

    if out_file:
        dump_document(written, out_file)
        console.print(f"{_stamp()} OpenAPI written to {out_file}", style="green", markup=False)

    try:
        rebuilt = build_document(written, context.obj["settings"])
    except IRBuildError as e:
        console.print(f"{_stamp()} Rebuilding the written document failed: {e}", style="red", markup=False)
        context.exit(1)

    if rebuilt != document:
        console.print(f"{_stamp()} Round trip changed the IR", style="red")
        context.exit(1)
    console.print(f"{_stamp()} Round trip is stable", style="green")


@cli.command("graph", help="Print the schema dependency graph.")
@click.pass_context
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--mermaid", is_flag=True, help="Print a Mermaid flowchart instead of a table.")
def graph(context, spec_path, mermaid):
    document = _build(context, spec_path)
    dependency_graph = document.dependency_graph

    if mermaid:
        click.echo(export_mermaid(dependency_graph))
        return

    table = Table(title="Schema dependency graph")
    table.add_column("#", justify="right")
    table.add_column("Schema")
    table.add_column("Depth", justify="right")
    table.add_column("Depends on")
    table.add_column("Circular")
    for index, name in enumerate(dependency_graph.topological_order, start=1):
        node = dependency_graph.nodes[name]
        table.add_row(
            str(index),
            name,
            str(node.depth),
            ", ".join(node.dependencies) or "-",
            "yes" if node.is_circular else "",
        )
    console.print(table)

    for cycle in dependency_graph.circular_references:
        console.print(f"cycle: {' -> '.join(cycle + cycle[:1])}", style="yellow", markup=False)


@cli.command("complexity", help="Score every schema component and show whether it would be inlined.")
@click.pass_context
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--threshold", type=click.IntRange(min=-1), default=None,
              help="Inline schemas scoring below this; -1 inlines everything.")
def complexity(context, spec_path, threshold):
    document = _build(context, spec_path)
    if threshold is None:
        threshold = context.obj["settings"].complexity_threshold

    table = Table(title=f"Schema complexity (threshold {threshold})")
    table.add_column("Schema")
    table.add_column("Score", justify="right")
    table.add_column("Rendering")
    for name in document.schema_names:
        value = score(document.schema(name))
        inline = threshold == -1 or value < threshold
        table.add_row(name, str(value), "inline" if inline else "named")
    console.print(table)


def main():
    cli(prog_name="openapi-ir")


if __name__ == "__main__":
    main()
