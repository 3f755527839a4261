"""Catalog ingestion service.

Raw card files are JSON arrays of catalog records as published by the card
data sets.  Records are normalized one by one; non-creature records are
skipped and malformed ones are reported without aborting the batch.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cardbattle.domain.cards import normalize_catalog
from cardbattle.domain.errors import CardDataError
from cardbattle.domain.rules_config import DEFAULT_RULES, CatalogRules
from cardbattle.interfaces import ICardCatalog

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportReport:
    """Per-batch ingestion summary."""

    source: str
    imported: int = 0
    skipped: int = 0
    errors: list[CardDataError] = field(default_factory=list)
    file_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.file_error is None and not self.errors

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": [str(error) for error in self.errors],
            "file_error": self.file_error,
        }


class CatalogImporter:
    """Feed raw catalog records through the normalizer into a card catalog."""

    def __init__(self, catalog: ICardCatalog, *, rules: CatalogRules = DEFAULT_RULES.catalog):
        self.catalog = catalog
        self.rules = rules

    def import_records(
        self, records: Iterable[Mapping[str, Any]], *, source: str = "<records>"
    ) -> ImportReport:
        """Normalize and upsert a batch of raw records."""

        batch = normalize_catalog(records, creature_category=self.rules.creature_category)
        for error in batch.errors:
            logger.warning("%s: skipping malformed record: %s", source, error)

        imported = self.catalog.upsert_many(batch.cards) if batch.cards else 0
        report = ImportReport(
            source=source, imported=imported, skipped=batch.skipped, errors=batch.errors
        )
        logger.info(
            "processed %d battle cards from %s (%d skipped, %d malformed)",
            report.imported,
            source,
            report.skipped,
            len(report.errors),
        )
        return report

    def import_file(self, path: Path | str) -> ImportReport:
        """Import a JSON array of raw records from ``path``."""

        file_path = Path(path)
        source = str(file_path)
        try:
            payload = json.loads(file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("catalog file not found: %s", source)
            return ImportReport(source=source, file_error="file not found")
        except json.JSONDecodeError as exc:
            logger.warning("catalog file %s is not valid JSON: %s", source, exc)
            return ImportReport(source=source, file_error=f"invalid JSON: {exc}")
        except UnicodeDecodeError as exc:
            logger.warning("catalog file %s is not UTF-8 text: %s", source, exc)
            return ImportReport(source=source, file_error=f"not UTF-8 text: {exc.reason}")
        except OSError as exc:
            logger.warning("catalog file %s could not be read: %s", source, exc)
            return ImportReport(source=source, file_error=f"unreadable: {exc.strerror or exc}")

        if not isinstance(payload, list):
            logger.warning("catalog file %s does not contain a list of records", source)
            return ImportReport(source=source, file_error="expected a JSON array of records")

        records = [record for record in payload if isinstance(record, Mapping)]
        report = self.import_records(records, source=source)
        report.skipped += len(payload) - len(records)
        return report

    def import_files(self, paths: Iterable[Path | str]) -> list[ImportReport]:
        return [self.import_file(path) for path in paths]
