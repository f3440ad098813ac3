"""
Loading of the reference flights and weather tables
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from config import FLIGHT_COLUMNS, WEATHER_COLUMNS

logger = logging.getLogger(__name__)


class FlightDataLoader:
    """Supplies raw flight and weather records.

    By default the tables come from the bundled ``nycflights13`` dataset.
    When both CSV paths are given, the tables are read from disk instead;
    the files must carry the same columns as the reference dataset.
    """

    def __init__(self, flight_path: Optional[Path] = None,
                 weather_path: Optional[Path] = None):
        if (flight_path is None) != (weather_path is None):
            raise ValueError("Both flight_path and weather_path must be given together")
        self.flight_path = flight_path
        self.weather_path = weather_path

    def load(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return ``(flights, weather)`` DataFrames."""
        if self.flight_path is not None:
            flight_df, weather_df = self._load_csv()
        else:
            flight_df, weather_df = self._load_reference()

        self.validate_columns(flight_df, FLIGHT_COLUMNS, "flights")
        self.validate_columns(weather_df, WEATHER_COLUMNS, "weather")

        logger.info(f"Loaded {len(flight_df):,} flights and {len(weather_df):,} weather observations")
        return flight_df, weather_df

    def _load_reference(self):
        import nycflights13

        return nycflights13.flights.copy(), nycflights13.weather.copy()

    def _load_csv(self):
        for path in (self.flight_path, self.weather_path):
            if not Path(path).exists():
                raise FileNotFoundError(f"Data file not found: {path}")

        logger.info(f"Reading flights from {self.flight_path}")
        flight_df = pd.read_csv(self.flight_path)
        logger.info(f"Reading weather from {self.weather_path}")
        weather_df = pd.read_csv(self.weather_path)
        return flight_df, weather_df

    @staticmethod
    def validate_columns(df: pd.DataFrame, required, table_name: str):
        """Raise ValueError if a required column is missing"""
        missing = [col for col in required if col not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns in {table_name}: {missing}")


def count_missing_values(df: pd.DataFrame) -> int:
    """Total number of missing cells across the whole table"""
    return int(df.isna().sum().sum())


def count_missing_by_table(flight_df: pd.DataFrame, weather_df: pd.DataFrame) -> Dict[str, int]:
    return {
        'flights': count_missing_values(flight_df),
        'weather': count_missing_values(weather_df),
    }


def create_sample_data(n_days=40, flights_per_day=30, seed=7):
    """Create a small synthetic flights/weather pair shaped like nycflights13.

    Late arrivals are driven by evening departures and daily precipitation so
    a classifier has something to learn. A few arrival delays and departure
    times are blanked, and a few origin-days have no weather at all, to
    exercise the cleaning step.
    """
    rng = np.random.default_rng(seed)
    origins = ['EWR', 'JFK', 'LGA']
    carriers = ['AA', 'B6', 'DL', 'UA']

    all_dates = pd.date_range('2013-01-01', '2013-12-31', freq='D')
    dates = pd.DatetimeIndex(np.sort(rng.choice(all_dates, size=n_days, replace=False)))

    # Hourly weather
    weather_rows = []
    for date in dates:
        for origin in origins:
            base_temp = 40 + 35 * np.sin((date.dayofyear - 100) / 365 * 2 * np.pi)
            wet_day = rng.random() < 0.3
            for hour in range(24):
                weather_rows.append({
                    'origin': origin,
                    'year': date.year,
                    'month': date.month,
                    'day': date.day,
                    'hour': hour,
                    'temp': base_temp + rng.normal(0, 5),
                    'precip': rng.exponential(0.05) if wet_day and rng.random() < 0.5 else 0.0,
                    'wind_speed': abs(rng.normal(10, 4)),
                })
    weather_df = pd.DataFrame(weather_rows)

    # Sprinkle missing readings
    for col in ['temp', 'precip', 'wind_speed']:
        mask = rng.random(len(weather_df)) < 0.03
        weather_df.loc[mask, col] = np.nan

    # Remove weather for a couple of origin-days so some flights fail the join
    drop_keys = weather_df[['month', 'day', 'origin']].drop_duplicates().sample(
        n=2, random_state=seed
    )
    weather_df = weather_df.merge(
        drop_keys, on=['month', 'day', 'origin'], how='left', indicator=True
    )
    weather_df = weather_df[weather_df['_merge'] == 'left_only'].drop(columns='_merge')
    weather_df = weather_df.reset_index(drop=True)

    daily_precip = (
        weather_df.groupby(['month', 'day', 'origin'])['precip'].sum().to_dict()
    )

    # Flights
    flight_rows = []
    for date in dates:
        for _ in range(flights_per_day):
            origin = origins[rng.integers(len(origins))]
            hour = int(rng.integers(5, 24))
            minute = int(rng.integers(0, 60))
            precip = daily_precip.get((date.month, date.day, origin), 0.0)
            delay = -5 + 25 * (hour >= 17) + 60 * precip + rng.normal(0, 25)
            flight_rows.append({
                'year': date.year,
                'month': date.month,
                'day': date.day,
                'dep_time': float(hour * 100 + minute),
                'arr_delay': float(round(delay)),
                'carrier': carriers[rng.integers(len(carriers))],
                'origin': origin,
            })
    flight_df = pd.DataFrame(flight_rows)

    # Cancelled / diverted flights
    cancelled = rng.random(len(flight_df)) < 0.03
    flight_df.loc[cancelled, 'arr_delay'] = np.nan
    no_departure = rng.random(len(flight_df)) < 0.02
    flight_df.loc[no_departure, 'dep_time'] = np.nan

    return flight_df, weather_df
