"""Fit report callback: model size at fit start, completion notice at fit end."""

from __future__ import annotations

import lightning as L
from loguru import logger
from rich import box
from rich.console import Console
from rich.table import Table


class FitReportCallback(L.Callback):
    """Report the classifier's shape when fitting starts and ends.

    Prints a rich table with the feature and class counts plus parameter
    totals, and logs a completion line naming the feature input once the
    trainer finishes.

    Args:
        feature_name: Name of the feature input, shown in the reports.
    """

    def __init__(self, feature_name: str = "pixels") -> None:
        super().__init__()
        self.feature_name = feature_name

    def on_fit_start(
        self, trainer: L.Trainer, pl_module: L.LightningModule
    ) -> None:
        total_params = sum(p.numel() for p in pl_module.parameters())
        trainable_params = sum(
            p.numel() for p in pl_module.parameters() if p.requires_grad
        )
        num_features = pl_module.hparams.get("num_features")
        num_classes = pl_module.hparams.get("num_classes")

        console = Console()
        table = Table(
            title="Model Information",
            header_style="bold magenta",
            box=box.SQUARE,
            show_lines=True,
        )
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Model Class", type(pl_module).__name__)
        table.add_row("Feature Input", f"{self.feature_name} ({num_features})")
        table.add_row("Classes", str(num_classes))
        table.add_row("Trainable Parameters", f"{trainable_params:,}")
        console.print(table)

        logger.info(
            f"Model: {type(pl_module).__name__} | "
            f"Params: {total_params:,} ({trainable_params:,} trainable)"
        )

    def on_fit_end(
        self, trainer: L.Trainer, pl_module: L.LightningModule
    ) -> None:
        logger.info("Training complete")
        logger.info(
            f"Feature input: {self.feature_name} "
            f"({pl_module.hparams.get('num_features')} values) | "
            f"epochs run: {trainer.current_epoch}"
        )
