"""Image loading and preprocessing into flat pixel Samples.

Every manifest entry is loaded independently.  An entry whose image cannot
be decoded or resized becomes a :class:`SkippedEntry`; the rest of the load
carries on.  Only the successfully loaded entries reach training.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image
from pydantic import BaseModel, ConfigDict
from tqdm import tqdm

from animal_recognition.config import LoaderConfig
from animal_recognition.data.manifest import ManifestEntry, parse_manifest

# Pillow mode for each supported channel count.
CHANNEL_MODES: dict[int, str] = {1: "L", 3: "RGB", 4: "RGBA"}


class Sample(BaseModel):
    """Preprocessed image: flat float32 pixels in [0, 1] plus its label.

    ``pixels`` is row-major and channel-interleaved, length
    ``width * height * channels``.  The buffer is marked read-only.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    pixels: np.ndarray  # type: ignore[type-arg]
    label: str


class LoadedSample(BaseModel, frozen=True):
    entry: ManifestEntry
    sample: Sample


class SkippedEntry(BaseModel, frozen=True):
    entry: ManifestEntry
    path: str
    reason: str


LoadResult = LoadedSample | SkippedEntry


def image_to_pixels(image: Image.Image, config: LoaderConfig) -> np.ndarray:  # type: ignore[type-arg]
    """Convert a decoded image into a normalized flat pixel vector.

    The image is converted to the configured channel mode and resized with
    bicubic resampling when its size differs from the target resolution.
    """
    converted = image.convert(CHANNEL_MODES[config.channels])
    size = (config.image_width, config.image_height)
    if converted.size != size:
        converted = converted.resize(size, Image.Resampling.BICUBIC)
    pixels = np.asarray(converted, dtype=np.float32).reshape(-1) / 255.0
    pixels.setflags(write=False)
    return pixels


def load_pixels(path: Path, config: LoaderConfig) -> np.ndarray:  # type: ignore[type-arg]
    """Decode the image at ``path`` and return its pixel vector.

    The decoder handle is closed before returning, on success or failure.
    """
    with Image.open(path) as img:
        return image_to_pixels(img, config)


def load_entry(
    entry: ManifestEntry, base_dir: Path, config: LoaderConfig
) -> LoadResult:
    """Load one manifest entry, turning decode failures into a skip."""
    path = base_dir / entry.image_path
    # Pillow plugins report some broken files as SyntaxError
    try:
        pixels = load_pixels(path, config)
    except (
        OSError, ValueError, SyntaxError, Image.DecompressionBombError
    ) as e:
        return SkippedEntry(entry=entry, path=str(path), reason=str(e))
    return LoadedSample(entry=entry, sample=Sample(pixels=pixels, label=entry.label))


def load_results(
    base_dir: Path, manifest_path: Path, config: LoaderConfig
) -> list[LoadResult]:
    """Per-entry load outcomes in manifest order."""
    entries = parse_manifest(manifest_path)
    return [
        load_entry(entry, base_dir, config)
        for entry in tqdm(entries, desc="Loading images", leave=False)
    ]


def load_samples(
    base_dir: Path, manifest_path: Path, config: LoaderConfig | None = None
) -> list[Sample]:
    """Load every manifest entry and return the Samples that decoded.

    Each skipped entry is logged at ERROR level with its path and reason.
    """
    config = config or LoaderConfig()
    samples: list[Sample] = []
    skipped = 0
    for result in load_results(base_dir, manifest_path, config):
        if isinstance(result, SkippedEntry):
            logger.error(f"Failed to load image {result.path}: {result.reason}")
            skipped += 1
            continue
        samples.append(result.sample)

    logger.info(
        f"Loaded {len(samples)} samples from {manifest_path} "
        f"({skipped} skipped)"
    )
    return samples
