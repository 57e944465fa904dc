"""
CSV persistence for normalized loads, plus the JSON run statistics kept next to it.
"""

import csv
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union
from pydantic import BaseModel, Field, ValidationError
from .dedupe import filter_new
from .models import CSV_HEADERS, LoadRecord

logger = logging.getLogger(__name__)

MAX_RUN_HISTORY = 50


class CsvLoadStore:
    """Append-only load file that refuses duplicates of what it already holds."""

    def __init__(self, path: Union[str, Path], headers: List[str] = CSV_HEADERS):
        self.path = Path(path)
        self.headers = list(headers)

    @classmethod
    def open_existing(cls, path: Union[str, Path]) -> "CsvLoadStore":
        """Store for an existing file, keeping that file's own column order."""
        store = cls(path)
        store.headers = store._file_headers() or list(CSV_HEADERS)
        return store

    def _has_content(self) -> bool:
        return self.path.exists() and self.path.stat().st_size > 0

    def _file_headers(self) -> Optional[List[str]]:
        with open(self.path, newline="", encoding="utf-8") as f:
            return next(csv.reader(f), None)

    def read(self) -> List[LoadRecord]:
        if not self.path.exists():
            return []
        with open(self.path, newline="", encoding="utf-8") as f:
            records = [LoadRecord.from_csv_row(row) for row in csv.DictReader(f)]
        logger.info(f"Found {len(records)} existing records in {self.path}")
        return records

    def append(self, records: Iterable[LoadRecord]) -> Tuple[List[LoadRecord], int]:
        """
        Write the records not already in the file. Returns (written, duplicates).

        A file that already has rows keeps its own header; new rows are written
        in those columns whatever column set this store was created with.
        """
        existing = self.read()
        new_records, duplicates = filter_new(records, existing)
        if new_records:
            append = self._has_content()
            if append:
                header = self._file_headers()
                if header and header != self.headers:
                    logger.info(f"Using the existing {len(header)}-column header of {self.path}")
                    self.headers = header
            self._write(new_records, append=append)
            logger.info(f"{len(new_records)} new records saved ({len(existing) + len(new_records)} total)")
        else:
            logger.info(f"No new records to add. Total: {len(existing)}")
        return new_records, duplicates

    def rewrite(self, records: Iterable[LoadRecord]) -> None:
        self._write(list(records), append=False)

    def _write(self, records: List[LoadRecord], append: bool) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a" if append else "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=self.headers)
            if not append:
                writer.writeheader()
            for record in records:
                writer.writerow(record.to_csv_row(self.headers))


class RunRecord(BaseModel):
    timestamp: str
    duration: float = 0
    entries_crawled: int = 0
    new_entries_added: int = 0
    duplicates_skipped: int = 0
    total_records_in_file: int = 0
    contacts_found: int = 0
    reference_numbers_found: int = 0


class RunStats(BaseModel):
    total_runs: int = 0
    total_entries_crawled: int = 0
    total_new_entries_added: int = 0
    total_duplicates_skipped: int = 0
    first_run: Optional[str] = None
    last_run: Optional[str] = None
    average_entries_per_run: float = 0
    average_new_entries_per_run: float = 0
    runs: List[RunRecord] = Field(default_factory=list)

    def record(self, run: RunRecord) -> None:
        self.total_runs += 1
        self.total_entries_crawled += run.entries_crawled
        self.total_new_entries_added += run.new_entries_added
        self.total_duplicates_skipped += run.duplicates_skipped

        if not self.first_run:
            self.first_run = run.timestamp
        self.last_run = run.timestamp

        self.average_entries_per_run = round(self.total_entries_crawled / self.total_runs, 2)
        self.average_new_entries_per_run = round(self.total_new_entries_added / self.total_runs, 2)

        self.runs.insert(0, run)
        del self.runs[MAX_RUN_HISTORY:]


class StatsStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> RunStats:
        if not self.path.exists():
            return RunStats()
        try:
            return RunStats.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, ValueError) as e:
            logger.warning(f"Error loading stats from {self.path}: {e}")
            return RunStats()

    def save(self, stats: RunStats) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(stats.model_dump(), indent=2), encoding="utf-8")

    def update(self, run: RunRecord) -> RunStats:
        stats = self.load()
        stats.record(run)
        self.save(stats)
        return stats


def make_run(
    started: datetime,
    crawled: int,
    written: List[LoadRecord],
    duplicates: int,
    total_in_file: int,
) -> RunRecord:
    finished = datetime.now(timezone.utc)
    return RunRecord(
        timestamp=started.isoformat(),
        duration=round((finished - started).total_seconds(), 2),
        entries_crawled=crawled,
        new_entries_added=len(written),
        duplicates_skipped=duplicates,
        total_records_in_file=total_in_file,
        contacts_found=sum(1 for r in written if r.contact),
        reference_numbers_found=sum(1 for r in written if r.reference_number),
    )
