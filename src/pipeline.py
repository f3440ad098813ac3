"""
End-to-end analysis run: load, build features, split, fit, evaluate, aggregate
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

from config import RANDOM_SEED, TRAIN_PROPORTION
from data_loading import FlightDataLoader, count_missing_by_table
from data_preprocessing import FlightDataPreprocessor
from evaluate import ModelEvaluator, predicted_vs_actual_counts
from train import ModelTrainer, split_train_test
from visualization import DelayAggregates, compute_delay_aggregates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything the report menu needs, computed once per run"""
    flights: pd.DataFrame
    weather: pd.DataFrame
    missing_values: Dict[str, int]
    enriched: pd.DataFrame
    train: pd.DataFrame
    test: pd.DataFrame
    trainer: ModelTrainer
    predictions: pd.DataFrame
    confusion_matrix: pd.DataFrame
    metrics: Dict[str, float]
    feature_importance: pd.DataFrame
    predicted_vs_actual: pd.DataFrame
    aggregates: DelayAggregates


def run_pipeline(flight_df=None, weather_df=None, loader: Optional[FlightDataLoader] = None,
                 train_proportion=TRAIN_PROPORTION, seed=RANDOM_SEED) -> PipelineResult:
    """Run the full analysis. Tables are loaded when not passed in."""
    if flight_df is None or weather_df is None:
        flight_df, weather_df = (loader or FlightDataLoader()).load()

    missing_values = count_missing_by_table(flight_df, weather_df)

    enriched = FlightDataPreprocessor().build_enriched_flights(flight_df, weather_df)
    train_df, test_df = split_train_test(enriched, train_proportion=train_proportion, seed=seed)

    trainer = ModelTrainer()
    trainer.fit(train_df)

    predictions, matrix, metrics = ModelEvaluator(trainer.pipeline).evaluate(test_df)

    logger.info("Computing report aggregates...")
    return PipelineResult(
        flights=flight_df,
        weather=weather_df,
        missing_values=missing_values,
        enriched=enriched,
        train=train_df,
        test=test_df,
        trainer=trainer,
        predictions=predictions,
        confusion_matrix=matrix,
        metrics=metrics,
        feature_importance=trainer.get_feature_importance(),
        predicted_vs_actual=predicted_vs_actual_counts(predictions),
        aggregates=compute_delay_aggregates(enriched),
    )
