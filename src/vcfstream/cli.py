"""
CLI Entry Point: inspect VCF files with the vcfstream reader.
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .convert import header_to_value, number_to_value, record_to_value
from .errors import EndOfStream, VcfError
from .io.reader import open_vcf
from .models.core import BatchErrorPolicy, FilterStatus, Record
from .utils.logging import setup_logging

app = typer.Typer(help="vcfstream: streaming VCF reader")

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """
    vcfstream: streaming VCF reader
    """
    setup_logging(verbose=verbose, log_file=log_file)


@app.command()
def version():
    """Print the vcfstream version."""
    console.print(f"vcfstream {__version__}")


@app.command()
def header(
    path: Path = typer.Argument(..., help="Path to a VCF file"),
    as_json: bool = typer.Option(False, "--json", help="Print the header as JSON"),
):
    """
    Show the file format, INFO and FILTER definitions and samples.
    """
    try:
        with open_vcf(path) as handle:
            hdr = handle.header
    except VcfError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps(header_to_value(hdr), indent=2))
        return

    console.print(f"[bold]File format:[/bold] {hdr.file_format}")
    console.print(f"[bold]Samples:[/bold] {len(hdr.samples)}")

    infos = Table(title="INFO")
    for column in ("ID", "Number", "Type", "Description"):
        infos.add_column(column)
    for info in hdr.infos.values():
        infos.add_row(info.id, str(number_to_value(info.number)), info.type.value, info.description)
    console.print(infos)

    filters = Table(title="FILTER")
    filters.add_column("ID")
    filters.add_column("Description")
    for flt in hdr.filters.values():
        filters.add_row(flt.id, flt.description)
    console.print(filters)


@app.command()
def head(
    path: Path = typer.Argument(..., help="Path to a VCF file"),
    n: int = typer.Option(10, "--lines", "-n", min=0, help="Number of records to show"),
    batch: bool = typer.Option(False, "--batch", help="Read the records with one batched read"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per record"),
):
    """
    Show the first records of a VCF file.
    """
    try:
        with open_vcf(path) as handle:
            if batch:
                records = handle.read_many(n)
            else:
                records = []
                for _ in range(n):
                    try:
                        records.append(handle.read_one())
                    except EndOfStream:
                        break
    except VcfError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    if as_json:
        for record in records:
            typer.echo(json.dumps(record_to_value(record)))
        return

    console.print(_records_table(records))


@app.command()
def count(
    path: Path = typer.Argument(..., help="Path to a VCF file"),
    batch_size: int = typer.Option(1000, "--batch-size", "-b", min=1, help="Records per batched read"),
    skip_bad: bool = typer.Option(False, "--skip-bad", help="Skip undecodable lines instead of failing"),
):
    """
    Count the records of a VCF file.
    """
    policy = BatchErrorPolicy.PARTIAL if skip_bad else BatchErrorPolicy.FAIL
    total = 0
    try:
        with open_vcf(path, batch_errors=policy) as handle:
            while records := handle.read_many(batch_size):
                total += len(records)
    except VcfError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    typer.echo(str(total))


def _records_table(records: list[Record]) -> Table:
    table = Table()
    for column in ("CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"):
        table.add_column(column)
    for record in records:
        if record.filters.status == FilterStatus.FAIL:
            filters = ";".join(record.filters.failed)
        else:
            filters = record.filters.status.value
        table.add_row(
            record.chromosome,
            str(record.position),
            ";".join(record.ids) or ".",
            record.reference_bases,
            record.alternate_bases,
            "." if record.quality_score is None else f"{record.quality_score:g}",
            filters,
            ";".join(f"{k}={v}" if v else k for k, v in record.info.items()) or ".",
        )
    return table


if __name__ == "__main__":
    app()
