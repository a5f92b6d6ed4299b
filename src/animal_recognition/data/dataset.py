"""Torch dataset over in-memory Samples, plus label encoding helpers."""

from __future__ import annotations

from collections.abc import Sequence

import torch
from loguru import logger
from torch.utils.data import Dataset

from animal_recognition.data.loader import Sample
from animal_recognition.types import ClassificationBatch


def build_class_to_idx(samples: Sequence[Sample]) -> dict[str, int]:
    """Alphabetically-sorted mapping from label string to class index."""
    classes = sorted({s.label for s in samples})
    return {cls: i for i, cls in enumerate(classes)}


def split_samples(
    samples: Sequence[Sample], holdout_fraction: float, seed: int
) -> tuple[list[Sample], list[Sample]]:
    """Deterministically split samples into (train, holdout).

    With ``holdout_fraction == 0`` the holdout list is empty.  At least one
    sample always stays in the training split.
    """
    n_holdout = int(len(samples) * holdout_fraction)
    n_holdout = min(n_holdout, max(len(samples) - 1, 0))
    if n_holdout == 0:
        return list(samples), []
    generator = torch.Generator().manual_seed(seed)
    order = torch.randperm(len(samples), generator=generator).tolist()
    holdout = [samples[i] for i in order[:n_holdout]]
    train = [samples[i] for i in order[n_holdout:]]
    logger.info(f"Split samples: train={len(train)}, holdout={len(holdout)}")
    return train, holdout


class SampleDataset(Dataset[tuple[torch.Tensor, int]]):
    """Index-encoded view of a list of Samples.

    Labels are mapped through ``class_to_idx``.  Labels absent from the
    mapping encode as ``-1``; they only occur when evaluating a model on
    data it was not trained on.

    Args:
        samples: Loaded samples, all with the same pixel vector length.
        class_to_idx: Mapping from label string to class index.
    """

    def __init__(
        self, samples: Sequence[Sample], class_to_idx: dict[str, int]
    ) -> None:
        self.samples = list(samples)
        self.class_to_idx = class_to_idx

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> tuple[torch.Tensor, int]:
        sample = self.samples[idx]
        features = torch.tensor(sample.pixels, dtype=torch.float32)
        return features, self.class_to_idx.get(sample.label, -1)

    @staticmethod
    def collate_fn(
        batch: list[tuple[torch.Tensor, int]],
    ) -> ClassificationBatch:
        """Collate (features, label) tuples into a ClassificationBatch dict."""
        features = torch.stack([item[0] for item in batch])
        labels = torch.tensor([item[1] for item in batch], dtype=torch.long)
        return {"features": features, "labels": labels}
