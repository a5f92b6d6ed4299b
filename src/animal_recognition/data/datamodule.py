"""LightningDataModule feeding in-memory Samples to the trainer."""

from __future__ import annotations

from collections.abc import Sequence

import lightning as L
import torch
from loguru import logger
from torch.utils.data import DataLoader

from animal_recognition.config import FitConfig
from animal_recognition.data.dataset import SampleDataset, build_class_to_idx
from animal_recognition.data.loader import Sample


class SampleDataModule(L.LightningDataModule):
    """DataModule over already-loaded training Samples.

    The label encoding is built from the training samples, sorted
    alphabetically, and is the mapping the trained model decodes with.

    Args:
        samples: Training samples.  Must not be empty.
        config: FitConfig providing batch size, worker count and seed.
    """

    def __init__(
        self, samples: Sequence[Sample], config: FitConfig | None = None
    ) -> None:
        super().__init__()
        if not samples:
            raise ValueError("No usable samples to train on")
        self._samples = list(samples)
        self._config = config or FitConfig()
        self._class_to_idx = build_class_to_idx(self._samples)
        self._train_dataset: SampleDataset | None = None
        logger.info(
            f"Built class_to_idx: {len(self._class_to_idx)} classes "
            f"from {len(self._samples)} samples"
        )
        logger.debug(f"class_to_idx: {self._class_to_idx}")

    @property
    def class_to_idx(self) -> dict[str, int]:
        return self._class_to_idx

    @property
    def class_names(self) -> list[str]:
        """Label strings ordered by class index."""
        return sorted(self._class_to_idx, key=self._class_to_idx.__getitem__)

    @property
    def num_classes(self) -> int:
        return len(self._class_to_idx)

    @property
    def num_features(self) -> int:
        return int(self._samples[0].pixels.shape[0])

    def setup(self, stage: str | None = None) -> None:
        if stage in ("fit", None) and self._train_dataset is None:
            self._train_dataset = SampleDataset(self._samples, self._class_to_idx)
            logger.info(f"Setup fit: train={len(self._train_dataset)} samples")

    def train_dataloader(self) -> DataLoader[tuple[torch.Tensor, int]]:
        """Return the shuffled training DataLoader."""
        if self._train_dataset is None:
            raise RuntimeError("Call setup('fit') first")
        generator = torch.Generator().manual_seed(self._config.seed)
        return DataLoader(
            self._train_dataset,
            batch_size=self._config.batch_size,
            shuffle=True,
            generator=generator,
            num_workers=self._config.num_workers,
            collate_fn=SampleDataset.collate_fn,
        )
