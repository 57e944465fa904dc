import asyncio
import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from .config import Settings
from .contacts import display_contact
from .dedupe import dedupe_records
from .distance import DistanceClient, fill_distances
from .logs import SafeConsole, configure_logging
from .models import CSV_HEADERS, FULL_CSV_HEADERS, VISION_CSV_HEADERS, LoadRecord
from .parser import LoadTableParser, SelectorMap
from .pipeline import LoadNormalizer, NormalizerConfig
from .ratelimit import RateLimiter
from .references import ReferenceMode
from .storage import CsvLoadStore, StatsStore, make_run


app = typer.Typer(help="Normalize scraped load board listings into a de-duplicated CSV")


class Columns(str, Enum):
    basic = "basic"
    vision = "vision"
    full = "full"


COLUMN_SETS = {
    Columns.basic: CSV_HEADERS,
    Columns.vision: VISION_CSV_HEADERS,
    Columns.full: FULL_CSV_HEADERS,
}


def _setup(
    reference_mode: Optional[ReferenceMode],
    redact: bool,
    default_mode: Optional[ReferenceMode] = None,
) -> Tuple[Settings, LoadNormalizer, SafeConsole]:
    settings = Settings.from_env()
    redact = redact or settings.redact
    mode = reference_mode or default_mode or settings.reference_mode

    configure_logging(settings.log_level, redact_output=redact)
    console = SafeConsole(Console(), redact_output=redact)
    normalizer = LoadNormalizer(NormalizerConfig(reference_mode=mode, redact_contacts=redact))

    if redact:
        console.print("[yellow]Redaction mode: contacts are never stored or shown[/yellow]")
    return settings, normalizer, console


def _load_json(path: Path, console: SafeConsole) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error: could not read {escape(str(path))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _load_rows(path: Path, console: SafeConsole) -> List[dict]:
    data = _load_json(path, console)
    if isinstance(data, dict):
        data = data.get("loads", [data])
    if not isinstance(data, list):
        console.print("[red]Error: expected a JSON list of loads[/red]")
        raise typer.Exit(1)
    return [row for row in data if isinstance(row, dict)]


def _print_records(console: SafeConsole, records: List[LoadRecord], limit: int = 5) -> None:
    table = Table(title=f"Sample records ({min(limit, len(records))} of {len(records)})")
    for column in ("Reference", "Origin", "Destination", "Rate", "$/mi", "Company", "Contact"):
        table.add_column(column)

    for record in records[:limit]:
        cells = [
            record.reference_number,
            record.origin,
            record.destination,
            f"${record.rate_total_usd:,}" if record.rate_total_usd is not None else None,
            f"{record.rate_per_mile:.2f}" if record.rate_per_mile is not None else None,
            record.company,
            display_contact(record.contact),
        ]
        table.add_row(*(escape(console.clean(cell)) if cell else "N/A" for cell in cells))

    console.print(table)


def _save(
    settings: Settings,
    console: SafeConsole,
    records: List[LoadRecord],
    crawled: int,
    started: datetime,
    output: Optional[Path],
    headers: List[str],
) -> None:
    store = CsvLoadStore(output or settings.output_path, headers)
    try:
        written, duplicates = store.append(records)
        total = len(store.read())
    except OSError as e:
        console.print(f"[red]Error writing {escape(str(store.path))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    stats_store = StatsStore(settings.stats_path)
    stats_store.update(make_run(started, crawled, written, duplicates, total))

    console.print(f"\n[green]Extracted {len(records)} loads from {crawled} rows[/green]")
    console.print(f"[green]{len(written)} new, {duplicates} duplicates skipped, {total} in {escape(str(store.path))}[/green]")
    if written:
        _print_records(console, written)


def _with_distances(settings: Settings, records: List[LoadRecord]) -> List[LoadRecord]:
    limiter = RateLimiter(min_interval=settings.distance_interval_ms / 1000)
    client = DistanceClient(settings.google_maps_api_key, limiter=limiter)
    return asyncio.run(fill_distances(records, client))


@app.command()
def normalize(
    input_file: Path = typer.Argument(..., help="JSON file with a list of raw scraped rows"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV file to append to"),
    reference_mode: Optional[ReferenceMode] = typer.Option(
        None,
        "--reference-mode",
        "-r",
        help="scraped: only IDs found on the page; synthetic: fall back to AUTO_ IDs"
    ),
    redact: bool = typer.Option(False, "--redact", help="Never store or print contact details"),
    columns: Columns = typer.Option(Columns.basic, "--columns", "-c", help="CSV column set"),
    distance: bool = typer.Option(False, "--distance", help="Look up missing trip distances"),
):
    """Normalize raw scraped rows and append the new loads to a CSV."""
    settings, normalizer, console = _setup(reference_mode, redact)
    started = datetime.now(timezone.utc)

    rows = _load_rows(input_file, console)
    records = normalizer.normalize_rows(rows)
    if distance:
        records = _with_distances(settings, records)

    _save(settings, console, records, len(rows), started, output, COLUMN_SETS[columns])


@app.command()
def vision(
    input_file: Path = typer.Argument(..., help="JSON loads returned by the screenshot vision model"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    reference_mode: Optional[ReferenceMode] = typer.Option(None, "--reference-mode", "-r"),
    redact: bool = typer.Option(False, "--redact"),
):
    """Validate vision-model loads and append them using the vision columns."""
    settings, normalizer, console = _setup(reference_mode, redact, default_mode=ReferenceMode.SYNTHETIC)
    started = datetime.now(timezone.utc)

    rows = _load_rows(input_file, console)
    records = [r for r in (normalizer.from_vision(row) for row in rows) if r is not None]

    _save(settings, console, records, len(rows), started, output, VISION_CSV_HEADERS)


@app.command("parse-html")
def parse_html(
    html_file: Path = typer.Argument(..., help="Saved load board page"),
    selectors: Path = typer.Option(..., "--selectors", "-s", help="JSON selector map for the page"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    reference_mode: Optional[ReferenceMode] = typer.Option(None, "--reference-mode", "-r"),
    redact: bool = typer.Option(False, "--redact"),
    columns: Columns = typer.Option(Columns.basic, "--columns", "-c"),
):
    """Extract rows from saved HTML with the given selectors, then normalize them."""
    settings, normalizer, console = _setup(reference_mode, redact)
    started = datetime.now(timezone.utc)

    try:
        selector_map = SelectorMap.model_validate(_load_json(selectors, console))
    except ValidationError as e:
        console.print(f"[red]Error: invalid selector map: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        html = html_file.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    rows = LoadTableParser(selector_map).parse_page(html)
    records = normalizer.normalize_rows(rows)
    _save(settings, console, records, len(rows), started, output, COLUMN_SETS[columns])


@app.command()
def dedupe(
    csv_file: Path = typer.Argument(..., help="Existing load CSV to clean in place"),
):
    """Remove duplicate loads from an existing CSV."""
    _, _, console = _setup(None, False)
    if not csv_file.exists():
        console.print(f"[red]Error: {escape(str(csv_file))} not found[/red]")
        raise typer.Exit(1)

    store = CsvLoadStore.open_existing(csv_file)
    records = store.read()
    unique = dedupe_records(records)
    store.rewrite(unique)

    console.print(f"[green]{len(records)} processed, {len(records) - len(unique)} duplicates removed, {len(unique)} kept[/green]")


@app.command()
def repair(
    csv_file: Path = typer.Argument(..., help="Existing load CSV to fix in place"),
    reference_mode: ReferenceMode = typer.Option(ReferenceMode.SYNTHETIC, "--reference-mode", "-r"),
    redact: bool = typer.Option(False, "--redact"),
):
    """Split glued origin/destination cells and fill missing references."""
    _, normalizer, console = _setup(reference_mode, redact)
    if not csv_file.exists():
        console.print(f"[red]Error: {escape(str(csv_file))} not found[/red]")
        raise typer.Exit(1)

    store = CsvLoadStore.open_existing(csv_file)
    records = store.read()
    repaired = [normalizer.repair(record) for record in records]
    store.rewrite(repaired)

    changed = sum(1 for old, new in zip(records, repaired) if old != new)
    console.print(f"[green]Repaired {changed} of {len(records)} records[/green]")


@app.command()
def stats(
    stats_file: Optional[Path] = typer.Option(None, "--stats-file", help="Stats JSON (defaults to settings)"),
):
    """Show accumulated run statistics."""
    settings, _, console = _setup(None, False)
    run_stats = StatsStore(stats_file or settings.stats_path).load()

    table = Table(title="Run statistics")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Total runs", str(run_stats.total_runs))
    table.add_row("Entries crawled", str(run_stats.total_entries_crawled))
    table.add_row("New entries added", str(run_stats.total_new_entries_added))
    table.add_row("Duplicates skipped", str(run_stats.total_duplicates_skipped))
    table.add_row("Avg entries / run", f"{run_stats.average_entries_per_run:.2f}")
    table.add_row("Avg new / run", f"{run_stats.average_new_entries_per_run:.2f}")
    table.add_row("First run", run_stats.first_run or "N/A")
    table.add_row("Last run", run_stats.last_run or "N/A")
    console.print(table)


if __name__ == "__main__":
    app()
