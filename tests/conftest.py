"""Shared pytest fixtures for animal_recognition tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import numpy as np
import pytest
import torch
from loguru import logger
from PIL import Image

from animal_recognition.config import LoaderConfig
from animal_recognition.data.loader import Sample
from animal_recognition.models import MaxEntClassificationModel
from animal_recognition.pipeline import TrainedClassifier
from animal_recognition.schemas.model import ModelSchema


def make_image(
    path: Path,
    size: tuple[int, int] = (300, 200),
    color: tuple[int, int, int] = (200, 40, 40),
) -> Path:
    """Write a solid-color RGB image; format follows the file suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=color).save(path)
    return path


def make_sample(values: list[float], label: str) -> Sample:
    return Sample(pixels=np.asarray(values, dtype=np.float32), label=label)


@pytest.fixture()
def images_dir(tmp_path: Path) -> Path:
    """``images/`` with two decodable JPEGs and a 3-line manifest.

    tags.tsv:
      cat.jpg       cat
      dog.jpg       dog
      missing.jpg   cat    (file does not exist)
    """
    root = tmp_path / "images"
    make_image(root / "cat.jpg", color=(220, 30, 30))
    make_image(root / "dog.jpg", size=(120, 160), color=(30, 30, 220))
    (root / "tags.tsv").write_text(
        "cat.jpg\tcat\ndog.jpg\tdog\nmissing.jpg\tcat\n", encoding="utf-8"
    )
    return root


@pytest.fixture()
def small_config(images_dir: Path) -> LoaderConfig:
    """Loader config over ``images_dir`` at 8x8 to keep training fast."""
    return LoaderConfig(
        base_dir=str(images_dir),
        manifest_path=str(images_dir / "tags.tsv"),
        image_width=8,
        image_height=8,
    )


@pytest.fixture()
def cpu_trainer_kwargs() -> dict[str, Any]:
    return {
        "accelerator": "cpu",
        "devices": 1,
        "enable_progress_bar": False,
        "enable_model_summary": False,
    }


@pytest.fixture()
def log_records() -> Iterator[list[dict[str, Any]]]:
    """Collect loguru records emitted while the test runs."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda msg: records.append(msg.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture()
def handmade_classifier() -> TrainedClassifier:
    """Two-feature classifier: "cat" when feature 0 dominates, else "dog".

    Built from fixed weights so predictions are known without training.
    Input schema is a 2x1 single-channel image.
    """
    module = MaxEntClassificationModel(num_features=2, num_classes=2)
    with torch.no_grad():
        module.linear.weight.copy_(torch.tensor([[4.0, -4.0], [-4.0, 4.0]]))
        module.linear.bias.zero_()
    schema = ModelSchema(
        model_class="MaxEntClassificationModel",
        class_names=["cat", "dog"],
        image_width=2,
        image_height=1,
        channels=1,
        num_features=2,
        hparams=dict(module.hparams),
    )
    return TrainedClassifier(module, schema)
