"""Evaluation of a trained classifier: macro-accuracy over a sample set."""

from __future__ import annotations

from collections.abc import Sequence

import torch
from loguru import logger
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.table import Table
from torch.utils.data import DataLoader
from torchmetrics.classification import MulticlassAccuracy

from animal_recognition.data.dataset import SampleDataset
from animal_recognition.data.loader import Sample
from animal_recognition.models.base import metric_num_classes
from animal_recognition.pipeline import TrainedClassifier


class EvaluationResult(BaseModel, frozen=True):
    """Accuracy metrics for one evaluation pass.

    ``macro_accuracy`` is the unweighted mean of ``per_class_accuracy``,
    which covers every label that occurs in the evaluated samples.
    """

    macro_accuracy: float
    micro_accuracy: float
    per_class_accuracy: dict[str, float]
    num_samples: int


def evaluate(
    model: TrainedClassifier,
    samples: Sequence[Sample],
    batch_size: int = 256,
) -> EvaluationResult:
    """Predict every sample and aggregate accuracy metrics.

    Labels the model was never trained on are kept as their own classes and
    always count as misses.  Raises ``ValueError`` on an empty sample list.
    """
    if not samples:
        raise ValueError("Cannot evaluate on an empty sample list")

    # Model classes first so predicted indices need no remapping.
    class_names = model.class_names
    unseen = sorted({s.label for s in samples} - set(class_names))
    if unseen:
        logger.warning(f"Labels not seen during training: {unseen}")
    class_to_idx = {cls: i for i, cls in enumerate(class_names + unseen)}
    num_classes = metric_num_classes(len(class_to_idx))

    per_class_metric = MulticlassAccuracy(num_classes=num_classes, average="none")
    micro_metric = MulticlassAccuracy(num_classes=num_classes, average="micro")
    support = torch.zeros(num_classes, dtype=torch.long)

    loader = DataLoader(
        SampleDataset(samples, class_to_idx),
        batch_size=batch_size,
        shuffle=False,
        collate_fn=SampleDataset.collate_fn,
    )
    for batch in loader:
        preds = model.logits(batch["features"]).argmax(dim=-1)
        labels = batch["labels"]
        per_class_metric.update(preds, labels)
        micro_metric.update(preds, labels)
        support += torch.bincount(labels, minlength=num_classes)

    per_class = per_class_metric.compute()
    present = support > 0
    idx_to_class = {i: cls for cls, i in class_to_idx.items()}
    per_class_accuracy = {
        idx_to_class[i]: float(per_class[i])
        for i in range(num_classes)
        if present[i]
    }
    result = EvaluationResult(
        macro_accuracy=float(per_class[present].mean()),
        micro_accuracy=float(micro_metric.compute()),
        per_class_accuracy=per_class_accuracy,
        num_samples=len(samples),
    )
    logger.debug(f"Evaluation result: {result}")
    return result


def format_report(result: EvaluationResult) -> Table:
    """Rich table with per-class accuracy and the aggregate metrics."""
    table = Table(
        title="Evaluation",
        header_style="bold magenta",
        box=box.SQUARE,
    )
    table.add_column("Class", style="cyan")
    table.add_column("Accuracy", style="green", justify="right")
    for label, acc in result.per_class_accuracy.items():
        table.add_row(label, f"{acc:.2%}")
    table.add_section()
    table.add_row("macro", f"{result.macro_accuracy:.2%}", style="bold")
    table.add_row("micro", f"{result.micro_accuracy:.2%}")
    return table


def print_report(result: EvaluationResult) -> None:
    Console().print(format_report(result))
