"""
Feature engineering for flight delay analysis: labelling, departure time
decomposition, daily weather summaries and the flight/weather join
"""
import logging
from enum import Enum

import pandas as pd

from config import (
    LATE_THRESHOLD_MINUTES, JOIN_KEYS, CATEGORICAL_COLUMNS, MODEL_COLUMNS,
    TARGET_COLUMN
)

logger = logging.getLogger(__name__)


class DelayLabel(str, Enum):
    """Binary arrival outcome. ``LATE`` is the positive class."""
    LATE = 'late'
    ON_TIME = 'on_time'

    @classmethod
    def values(cls):
        return [label.value for label in cls]


LABEL_DTYPE = pd.CategoricalDtype(categories=DelayLabel.values())


def as_label_series(values, index=None, name=TARGET_COLUMN):
    """Wrap raw label values in the categorical label dtype"""
    return pd.Series(values, index=index, name=name).astype(str).astype(LABEL_DTYPE)


class FlightDataPreprocessor:
    """Builds the enriched flight table from raw flights and weather"""

    def __init__(self, late_threshold=LATE_THRESHOLD_MINUTES):
        self.late_threshold = late_threshold

    def create_target_variable(self, df):
        """Label flights ``late`` when arrival delay exceeds the threshold.

        Flights without a recorded arrival delay (cancelled or diverted) are
        excluded before labelling.
        """
        df = df.copy()

        unknown = df['arr_delay'].isna()
        if unknown.any():
            logger.info(f"Excluding {unknown.sum():,} flights with unknown arrival delay")
        df = df[~unknown]

        is_late = df['arr_delay'] > self.late_threshold
        labels = is_late.map({True: DelayLabel.LATE.value, False: DelayLabel.ON_TIME.value})
        df[TARGET_COLUMN] = labels.astype(LABEL_DTYPE)

        return df

    def decompose_departure_time(self, df):
        """Split HHMM departure time into hour and minute with integer arithmetic"""
        df = df.copy()
        df['hour'] = df['dep_time'] // 100
        df['minute'] = df['dep_time'] % 100
        return df

    def summarize_weather(self, weather_df):
        """Collapse hourly weather into one row per (year, month, day, origin)"""
        summary = (
            weather_df
            .groupby(JOIN_KEYS, as_index=False)
            .agg(
                temperature=('temp', 'mean'),
                precipitation=('precip', 'sum'),
                wind_speed=('wind_speed', 'mean'),
            )
        )
        logger.info(f"Summarized {len(weather_df):,} weather observations into {len(summary):,} daily rows")
        return summary

    def merge_flight_weather_data(self, flight_df, weather_summary):
        """Left join flights onto the daily weather summary"""
        merged_df = flight_df.merge(weather_summary, on=JOIN_KEYS, how='left')

        if len(merged_df) != len(flight_df):
            raise ValueError(
                f"Weather join changed row count from {len(flight_df)} to {len(merged_df)}; "
                "weather summary keys are not unique"
            )

        return merged_df

    def select_model_columns(self, df):
        df = df[MODEL_COLUMNS].copy()
        for col in CATEGORICAL_COLUMNS:
            df[col] = df[col].astype(object)
        return df

    def drop_incomplete_rows(self, df):
        """Drop every row with a missing value in any retained column"""
        before = len(df)
        df = df.dropna().reset_index(drop=True)
        logger.info(f"Dropped {before - len(df):,} incomplete rows, {len(df):,} remain")
        return df

    def build_enriched_flights(self, flight_df, weather_df):
        """Complete feature building: label, time split, weather join, cleanup"""
        logger.info("Creating target variable...")
        labelled = self.create_target_variable(flight_df)

        logger.info("Decomposing departure times...")
        labelled = self.decompose_departure_time(labelled)

        logger.info("Summarizing weather...")
        weather_summary = self.summarize_weather(weather_df)

        logger.info("Merging flight and weather data...")
        merged_df = self.merge_flight_weather_data(labelled, weather_summary)

        enriched = self.select_model_columns(merged_df)
        return self.drop_incomplete_rows(enriched)
