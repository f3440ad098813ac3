"""
Model evaluation for flight delay analysis
"""
import logging
from dataclasses import dataclass
from typing import Dict

import pandas as pd
from sklearn.metrics import confusion_matrix

from config import TARGET_COLUMN
from data_preprocessing import DelayLabel, LABEL_DTYPE, as_label_series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfusionCounts:
    """Confusion counts with ``late`` as the positive class"""
    true_positives: int
    false_negatives: int
    false_positives: int
    true_negatives: int

    @property
    def total(self):
        return (self.true_positives + self.false_negatives
                + self.false_positives + self.true_negatives)

    @classmethod
    def from_matrix(cls, matrix: pd.DataFrame) -> "ConfusionCounts":
        """Read counts from a predicted x actual confusion matrix"""
        late, on_time = DelayLabel.LATE.value, DelayLabel.ON_TIME.value
        return cls(
            true_positives=int(matrix.loc[late, late]),
            false_negatives=int(matrix.loc[on_time, late]),
            false_positives=int(matrix.loc[late, on_time]),
            true_negatives=int(matrix.loc[on_time, on_time]),
        )


def _ratio(numerator, denominator):
    return numerator / denominator if denominator > 0 else 0.0


def compute_metrics(counts: ConfusionCounts) -> Dict[str, float]:
    """Accuracy, sensitivity and specificity derived from confusion counts"""
    tp, fn = counts.true_positives, counts.false_negatives
    fp, tn = counts.false_positives, counts.true_negatives

    sensitivity = _ratio(tp, tp + fn)
    specificity = _ratio(tn, tn + fp)

    return {
        'accuracy': _ratio(tp + tn, counts.total),
        'sensitivity': sensitivity,
        'specificity': specificity,
        'false_negative_rate': _ratio(fn, tp + fn),
        'false_positive_rate': _ratio(fp, tn + fp),
        'true_positives': tp,
        'true_negatives': tn,
        'false_positives': fp,
        'false_negatives': fn,
    }


class ModelEvaluator:
    """Predicts on the held-out set and scores the predictions"""

    def __init__(self, pipeline):
        self.pipeline = pipeline

    def predict(self, test_df):
        """Return a copy of ``test_df`` with a ``predicted`` label column"""
        if test_df.isna().any().any():
            raise ValueError("Test data contains missing values")

        X_test = test_df.drop(columns=[TARGET_COLUMN])
        predictions = test_df.copy()
        predictions['predicted'] = as_label_series(
            self.pipeline.predict(X_test), index=test_df.index, name='predicted'
        )
        return predictions

    @staticmethod
    def build_confusion_matrix(predictions):
        """2x2 counts, rows are predicted labels and columns are actual labels"""
        labels = DelayLabel.values()
        cm = confusion_matrix(
            predictions['predicted'].astype(str),
            predictions[TARGET_COLUMN].astype(str),
            labels=labels,
        )
        return pd.DataFrame(
            cm,
            index=pd.Index(labels, name='Prediction'),
            columns=pd.Index(labels, name='Truth'),
        )

    def evaluate(self, test_df):
        """Predict the test partition and compute the evaluation metrics"""
        predictions = self.predict(test_df)
        matrix = self.build_confusion_matrix(predictions)
        metrics = compute_metrics(ConfusionCounts.from_matrix(matrix))

        logger.info(
            f"Evaluated {len(predictions):,} test rows: accuracy {metrics['accuracy']:.4f}, "
            f"sensitivity {metrics['sensitivity']:.4f}, specificity {metrics['specificity']:.4f}"
        )

        return predictions, matrix, metrics


def format_percentage(value):
    return f"{round(value * 100, 2)} %"


def format_report(matrix, metrics, include_rates=True):
    """Console text for the confusion matrix and headline metrics"""
    lines = [matrix.to_string(), ""]
    lines.append(f"Accuracy: {format_percentage(metrics['accuracy'])}")
    if include_rates:
        lines.append(f"Sensitivity (Recall): {format_percentage(metrics['sensitivity'])}")
        lines.append(f"Specificity: {format_percentage(metrics['specificity'])}")
    return "\n".join(lines)


def predicted_vs_actual_counts(predictions):
    """Count of test rows for every (predicted, actual) label pair"""
    counts = (
        predictions
        .groupby(['predicted', TARGET_COLUMN], observed=False)
        .size()
        .rename('count')
        .reset_index()
    )
    counts['predicted'] = counts['predicted'].astype(LABEL_DTYPE)
    return counts
