"""Click CLI for inspecting and exporting DBF files."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click

from dbfreader.config import (
    EXPORT_FORMATS,
    load_config,
    resolve_encoding,
    resolve_format,
)
from dbfreader.dbf.reader import DbfReader
from dbfreader.errors import DbfError


class Context:
    """Holds options shared by all commands."""

    def __init__(self, encoding: Optional[str] = None):
        self._explicit_encoding = encoding
        self.config = load_config()

    @property
    def encoding(self) -> str:
        return resolve_encoding(self._explicit_encoding, self.config)

    @contextmanager
    def open(self, path: Path) -> Iterator[DbfReader]:
        """Open a DBF reader, reporting format errors as CLI errors."""
        try:
            with DbfReader(path, encoding=self.encoding) as reader:
                yield reader
        except DbfError as e:
            raise click.ClickException(str(e))


pass_ctx = click.make_pass_decorator(Context)

_DBF_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.option("--encoding", "-e", default=None, help="Text encoding of Character fields (default: cp1252)")
@click.option("--verbose", "-v", is_flag=True, help="Log header layout and cursor events")
@click.version_option(package_name="dbfreader")
@click.pass_context
def cli(ctx, encoding: Optional[str], verbose: bool):
    """dbfr - read xBase DBF tables.

    Inspect headers, dump records, and export tables to CSV, text, or JSON.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Context(encoding=encoding)


@cli.command()
@click.argument("dbf", type=_DBF_PATH)
@pass_ctx
def info(ctx: Context, dbf: Path):
    """Show header information and the column table."""
    with ctx.open(dbf) as reader:
        header = reader.header
        last_update = header.last_update
        click.echo(f"File:          {dbf}")
        click.echo(f"Version:       0x{header.version:02X}")
        click.echo(f"Last update:   {last_update.isoformat() if last_update else 'unknown'}")
        click.echo(f"Records:       {header.record_count:,}")
        click.echo(f"Header length: {header.header_length}")
        click.echo(f"Record length: {header.record_length}")
        click.echo(f"Seekable:      {'yes' if reader.can_seek() else 'no'}")

        click.echo(f"\n  {'#':<4}{'Name':<16}{'Type':<8}{'Length':<8}{'Decimal':<8}")
        click.echo("-" * 46)
        for f in header.fields:
            click.echo(f"  {f.index:<4}{f.name:<16}{f.type_tag:<8}{f.length:<8}{f.decimal_count:<8}")


@cli.command()
@click.argument("dbf", type=_DBF_PATH)
@click.option("--start", "-s", type=click.IntRange(min=0), default=0, help="First record index")
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Maximum number of records")
@pass_ctx
def dump(ctx: Context, dbf: Path, start: int, limit: Optional[int]):
    """Print records as fixed-width text."""
    from dbfreader.export.txt_export import export_txt

    with ctx.open(dbf) as reader:
        if start:
            reader.seek_to_record(start)
        click.echo(export_txt(reader, limit=limit), nl=False)


@cli.command()
@click.argument("dbf", type=_DBF_PATH)
@click.option("--format", "fmt", type=click.Choice(EXPORT_FORMATS), default=None,
              help="Output format (default: csv, or 'format' from config)")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Write to a file instead of stdout")
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Maximum number of records")
@pass_ctx
def export(ctx: Context, dbf: Path, fmt: Optional[str], output_path: Optional[Path], limit: Optional[int]):
    """Export records as CSV, fixed-width text, or JSON."""
    from dbfreader.export.csv_export import export_csv
    from dbfreader.export.json_export import export_json
    from dbfreader.export.txt_export import export_txt

    exporters = {"csv": export_csv, "txt": export_txt, "json": export_json}
    fmt = resolve_format(fmt, ctx.config)

    with ctx.open(dbf) as reader:
        text = exporters[fmt](reader, limit=limit)
        count = reader.records_read

    if output_path is None:
        click.echo(text, nl=False)
        return

    output_path.write_text(text, encoding="utf-8")
    click.echo(f"Exported {count:,} records to {output_path}", err=True)


@cli.command()
@click.argument("dbf", type=_DBF_PATH)
@click.argument("index", type=int)
@pass_ctx
def get(ctx: Context, dbf: Path, index: int):
    """Print the record at INDEX (deleted records resolve to the next live one)."""
    from dbfreader.export.values import format_value

    with ctx.open(dbf) as reader:
        reader.seek_to_record(index)
        values = reader.next_record()

        if values is None:
            raise click.ClickException(f"No live record at or after index {index}")

        width = max((len(name) for name in reader.header.field_names), default=0)
        for f, value in zip(reader.header.fields, values):
            click.echo(f"{f.name:<{width}}  {format_value(value, reader.encoding)}")


def main():
    cli()


if __name__ == "__main__":
    main()
