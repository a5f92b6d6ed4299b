"""Tab-separated label manifest parsing."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import BaseModel


class ManifestError(ValueError):
    """A manifest line does not hold exactly ``<image-path>\\t<label>``."""


class ManifestEntry(BaseModel, frozen=True):
    """One manifest record.  ``line_number`` is 1-based."""

    image_path: str
    label: str
    line_number: int


def parse_manifest(manifest_path: Path) -> list[ManifestEntry]:
    """Parse a UTF-8 manifest with one ``path<TAB>label`` record per line.

    A leading byte-order mark is dropped.

    Blank lines are skipped.  Any other line that does not split into
    exactly two tab-separated fields raises :class:`ManifestError`; a
    missing file raises ``FileNotFoundError``.  Entries keep file order and
    duplicates are preserved.
    """
    entries: list[ManifestEntry] = []
    with open(manifest_path, encoding="utf-8-sig") as f:
        for line_number, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            parts = line.split("\t")
            if len(parts) != 2:
                raise ManifestError(
                    f"{manifest_path}:{line_number}: expected 2 tab-separated "
                    f"fields, got {len(parts)}"
                )
            entries.append(
                ManifestEntry(
                    image_path=parts[0], label=parts[1], line_number=line_number
                )
            )
    logger.debug(f"Parsed {len(entries)} manifest entries from {manifest_path}")
    return entries
