"""Tests for the Hydra config and the end-to-end training run."""

from __future__ import annotations

import os
import zipfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig

from animal_recognition.config import FitConfig, LoaderConfig
from animal_recognition.io.artifact import load_model
from animal_recognition.train import run_training

from conftest import make_image

CONF_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "src", "animal_recognition", "conf")
)


@pytest.fixture()
def hydra_cfg() -> Iterator[DictConfig]:
    GlobalHydra.instance().clear()
    with initialize_config_dir(config_dir=CONF_DIR, version_base=None):
        yield compose(config_name="train_animal_recognition")
    GlobalHydra.instance().clear()


def test_hydra_config_composes(hydra_cfg: DictConfig) -> None:
    for key in ("data", "fit", "trainer", "output"):
        assert key in hydra_cfg


def test_hydra_defaults_match_config_models(hydra_cfg: DictConfig) -> None:
    assert LoaderConfig(**hydra_cfg.data) == LoaderConfig()
    fit_cfg = FitConfig(seed=hydra_cfg.seed, **hydra_cfg.fit)
    assert fit_cfg == FitConfig()
    assert hydra_cfg.output.model_path == "animal_recognition_model.zip"
    assert hydra_cfg.log_level == "INFO"


def test_hydra_override() -> None:
    GlobalHydra.instance().clear()
    try:
        with initialize_config_dir(config_dir=CONF_DIR, version_base=None):
            cfg = compose(
                config_name="train_animal_recognition",
                overrides=["data.image_width=64", "fit.holdout_fraction=0.2"],
            )
    finally:
        GlobalHydra.instance().clear()
    assert LoaderConfig(**cfg.data).image_width == 64
    assert FitConfig(**cfg.fit).holdout_fraction == pytest.approx(0.2)


def test_run_training_end_to_end(
    small_config: LoaderConfig,
    cpu_trainer_kwargs: dict[str, Any],
    tmp_path: Path,
) -> None:
    model_path = tmp_path / "animal_recognition_model.zip"
    result = run_training(
        small_config, FitConfig(max_epochs=3), model_path, cpu_trainer_kwargs
    )
    # evaluated on the two training samples that loaded
    assert result.num_samples == 2
    assert 0.0 <= result.macro_accuracy <= 1.0
    assert zipfile.is_zipfile(model_path)
    assert load_model(model_path).class_names == ["cat", "dog"]


def test_run_training_overwrites_artifact(
    small_config: LoaderConfig,
    cpu_trainer_kwargs: dict[str, Any],
    tmp_path: Path,
) -> None:
    model_path = tmp_path / "model.zip"
    model_path.write_bytes(b"old")
    run_training(small_config, FitConfig(max_epochs=1), model_path, cpu_trainer_kwargs)
    assert zipfile.is_zipfile(model_path)


def test_run_training_with_holdout(
    tmp_path: Path, cpu_trainer_kwargs: dict[str, Any]
) -> None:
    root = tmp_path / "images"
    lines = []
    for i in range(10):
        label = "cat" if i % 2 else "dog"
        make_image(root / f"{i}.png", size=(12, 12), color=(25 * i, 0, 255 - 25 * i))
        lines.append(f"{i}.png\t{label}")
    (root / "tags.tsv").write_text("\n".join(lines) + "\n")
    cfg = LoaderConfig(
        base_dir=str(root),
        manifest_path=str(root / "tags.tsv"),
        image_width=4,
        image_height=4,
    )
    result = run_training(
        cfg,
        FitConfig(max_epochs=2, holdout_fraction=0.3),
        tmp_path / "model.zip",
        cpu_trainer_kwargs,
    )
    assert result.num_samples == 3


def test_run_training_without_usable_samples(tmp_path: Path) -> None:
    (tmp_path / "tags.tsv").write_text("a.jpg\tcat\n")
    cfg = LoaderConfig(base_dir=str(tmp_path), manifest_path=str(tmp_path / "tags.tsv"))
    with pytest.raises(ValueError, match="No usable samples"):
        run_training(cfg, FitConfig(), tmp_path / "model.zip")
    assert not (tmp_path / "model.zip").exists()


def test_run_training_missing_manifest(tmp_path: Path) -> None:
    cfg = LoaderConfig(base_dir=str(tmp_path), manifest_path=str(tmp_path / "tags.tsv"))
    with pytest.raises(FileNotFoundError):
        run_training(cfg, FitConfig(), tmp_path / "model.zip")
