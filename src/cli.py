"""
Command-line interface for calendar-extract.

Reads an email or a spreadsheet upload and prints the extracted calendar
event record(s) as JSON.

Usage:
    calendar-extract email message.txt          # Extract from a file
    cat message.txt | calendar-extract email    # Extract from stdin
    calendar-extract email --enrich message.txt # Consult the LLM oracle
    calendar-extract sheet jobs.xlsx --normalize
"""

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Any, TextIO

import click

from src.config.settings import get_settings
from src.observability.logging import bind_context, clear_context, get_logger, setup_logging

logger = get_logger(__name__)


def resolve_year(year: int | None) -> int:
    """Year for dates written without one: flag, then settings, then today."""
    if year is not None:
        return year
    settings_year = get_settings().reference_year
    if settings_year is not None:
        return settings_year
    return date.today().year


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Calendar Extract - turn emails and spreadsheets into calendar events."""
    setup_logging("DEBUG" if debug else None)


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--enrich/--no-enrich",
    default=None,
    help="Consult the LLM oracle (default: EXTRACTION_ENRICHMENT_ENABLED)",
)
@click.option("--normalize", is_flag=True, help="Print ISO date and 24-hour times")
@click.option(
    "--year",
    type=click.IntRange(1900, 9999),
    default=None,
    help="Year for dates written without one",
)
def email(source: TextIO, enrich: bool | None, normalize: bool, year: int | None) -> None:
    """Extract one event from an email (file path or stdin)."""
    from src.extraction.service import EventExtractionService

    text = source.read()

    async def run() -> dict[str, Any]:
        service = EventExtractionService()
        try:
            if normalize:
                event = await service.extract_email_normalized(
                    text, resolve_year(year), enrich=enrich,
                )
                return event.to_dict()
            record = await service.extract_email(text, enrich=enrich)
            return record.to_dict()
        finally:
            await service.close()

    _echo_json(asyncio.run(run()))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--normalize", is_flag=True, help="Print ISO dates and 24-hour times")
@click.option(
    "--year",
    type=click.IntRange(1900, 9999),
    default=None,
    help="Year for dates written without one",
)
def sheet(path: str, normalize: bool, year: int | None) -> None:
    """Extract one event per row from a .csv or .xlsx file."""
    from src.extraction.normalizer import normalize_record
    from src.spreadsheet import SpreadsheetError, load_table, process_table

    bind_context(source=Path(path).name)
    try:
        result = process_table(load_table(path))
    except SpreadsheetError as e:
        logger.warning("Spreadsheet rejected", error=str(e))
        raise click.ClickException(str(e)) from e
    finally:
        clear_context()

    if normalize:
        reference_year = resolve_year(year)
        _echo_json([normalize_record(r, reference_year).to_dict() for r in result.records])
    else:
        _echo_json([r.to_dict() for r in result.records])

    click.echo(
        f"{len(result.records)} events, {result.skipped} rows skipped",
        err=True,
    )


if __name__ == "__main__":
    main()
