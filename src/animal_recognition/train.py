"""Training entrypoint for animal_recognition.

Usage:
    animal-recognition-train                          # defaults
    animal-recognition-train data.image_width=64      # override resolution
    animal-recognition-train fit.holdout_fraction=0.2 # evaluate on a held-out split
    animal-recognition-train output.model_path=out.zip
"""

import sys
from pathlib import Path
from typing import Any

import hydra
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from animal_recognition.config import FitConfig, LoaderConfig
from animal_recognition.data.dataset import split_samples
from animal_recognition.data.loader import load_samples
from animal_recognition.evaluate import EvaluationResult, evaluate, print_report
from animal_recognition.io.artifact import save_model
from animal_recognition.pipeline import fit


def run_training(
    loader_config: LoaderConfig,
    fit_config: FitConfig,
    model_path: Path,
    trainer_kwargs: dict[str, Any] | None = None,
) -> EvaluationResult:
    """Load -> fit -> evaluate -> save.  Returns the evaluation metrics.

    Every failure past per-image loading (missing manifest, no usable
    samples, trainer errors, write errors) propagates to the caller.
    """
    samples = load_samples(
        Path(loader_config.base_dir), Path(loader_config.manifest_path), loader_config
    )
    if not samples:
        raise ValueError(
            f"No usable samples loaded from {loader_config.manifest_path}"
        )

    train_samples, holdout = split_samples(
        samples, fit_config.holdout_fraction, fit_config.seed
    )
    model = fit(train_samples, fit_config, loader_config, trainer_kwargs)

    if holdout:
        eval_samples = holdout
    else:
        logger.warning(
            "Evaluating on the training samples; accuracy is not a "
            "generalization estimate"
        )
        eval_samples = train_samples
    result = evaluate(model, eval_samples)
    logger.info(f"Accuracy: {result.macro_accuracy:.2%}")
    print_report(result)

    save_model(model, model_path.resolve())
    return result


@hydra.main(
    version_base=None, config_path="conf", config_name="train_animal_recognition"
)
def main(cfg: DictConfig) -> None:
    """Run training with the given Hydra config."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.get("log_level", "INFO"))

    logger.info(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")

    loader_config = LoaderConfig(**cfg.data)
    fit_config = FitConfig(seed=cfg.get("seed", 1), **cfg.fit)
    trainer_kwargs = dict(cfg.trainer) if cfg.get("trainer") else None

    run_training(
        loader_config,
        fit_config,
        Path(cfg.output.model_path),
        trainer_kwargs=trainer_kwargs,
    )


if __name__ == "__main__":
    main()
