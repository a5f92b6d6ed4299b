"""Pydantic frozen configuration models for animal_recognition."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LoaderConfig(BaseModel, frozen=True):
    """Where samples come from and how images are preprocessed.

    Defaults reproduce the fixed layout: ``images/`` holding the image files
    and ``images/tags.tsv`` as the manifest.  Image paths in the manifest
    are resolved relative to ``base_dir``.
    """

    base_dir: str = "images"
    manifest_path: str = "images/tags.tsv"
    image_width: int = Field(default=224, gt=0)
    image_height: int = Field(default=224, gt=0)
    channels: Literal[1, 3, 4] = 3

    @property
    def num_features(self) -> int:
        """Length of every Sample pixel vector."""
        return self.image_width * self.image_height * self.channels


class FitConfig(BaseModel, frozen=True):
    """Hyperparameters for fitting the maximum-entropy classifier.

    ``holdout_fraction`` is 0 by default: evaluation then runs on the
    training samples themselves and the reported accuracy is optimistic.
    """

    learning_rate: float = Field(default=1e-3, gt=0)
    weight_decay: float = Field(default=1e-4, ge=0)
    batch_size: int = Field(default=32, gt=0)
    num_workers: int = Field(default=0, ge=0)
    max_epochs: int = Field(default=20, gt=0)
    holdout_fraction: float = 0.0
    seed: int = 1

    @field_validator("holdout_fraction")
    @classmethod
    def _holdout_in_range(cls, value: float) -> float:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"holdout_fraction must be in [0, 1), got {value}")
        return value
