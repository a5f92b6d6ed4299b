"""Data pipeline for animal_recognition."""

from animal_recognition.data.datamodule import SampleDataModule
from animal_recognition.data.dataset import (
    SampleDataset,
    build_class_to_idx,
    split_samples,
)
from animal_recognition.data.loader import (
    LoadedSample,
    LoadResult,
    Sample,
    SkippedEntry,
    load_entry,
    load_pixels,
    load_samples,
)
from animal_recognition.data.manifest import (
    ManifestEntry,
    ManifestError,
    parse_manifest,
)

__all__ = [
    "LoadResult",
    "LoadedSample",
    "ManifestEntry",
    "ManifestError",
    "Sample",
    "SampleDataModule",
    "SampleDataset",
    "SkippedEntry",
    "build_class_to_idx",
    "load_entry",
    "load_pixels",
    "load_samples",
    "parse_manifest",
    "split_samples",
]
