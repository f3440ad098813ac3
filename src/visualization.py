"""
Derived aggregates and plots for the flight delay report
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from config import HISTOGRAM_BINS, TARGET_COLUMN
from data_preprocessing import DelayLabel

LATE = DelayLabel.LATE.value


@dataclass(frozen=True)
class DelayAggregates:
    """Summaries of the enriched table computed once for the report menu"""
    carrier_summary: pd.DataFrame
    delay_by_hour: pd.DataFrame
    origin_temperature: pd.DataFrame
    overall_mean_temperature: float
    delay_by_precipitation: pd.DataFrame
    delay_by_wind_speed: pd.DataFrame
    delay_by_month: pd.DataFrame
    delay_by_carrier_hour: pd.DataFrame


def label_proportions(df, column):
    """Share of each label within each value of ``column``"""
    return pd.crosstab(df[column], df[TARGET_COLUMN], normalize='index')


def binned_label_proportions(df, column, bins=HISTOGRAM_BINS):
    """Share of each label within equal-width bins of a continuous column"""
    binned = pd.cut(df[column], bins=bins, include_lowest=True)
    proportions = pd.crosstab(binned, df[TARGET_COLUMN], normalize='index').dropna(how='all')
    proportions.index = pd.Index(
        [float(interval.mid) for interval in proportions.index], name=column
    )
    return proportions


def compute_delay_aggregates(enriched) -> DelayAggregates:
    is_late = enriched[TARGET_COLUMN] == LATE
    data = enriched.assign(is_late=is_late.astype(float))

    carrier_summary = (
        data.groupby('carrier')
        .agg(
            avg_arr_delay_rate=('is_late', 'mean'),
            avg_temp=('temperature', 'mean'),
            avg_precipitation=('precipitation', 'mean'),
            avg_wind_speed=('wind_speed', 'mean'),
        )
        .sort_values('avg_arr_delay_rate', ascending=False)
    )

    origin_temperature = (
        data.groupby('origin')['temperature'].mean()
        .sort_values(ascending=False)
        .rename('avg_temp')
        .to_frame()
    )

    delay_by_carrier_hour = (
        data.groupby(['carrier', 'hour'])['is_late'].mean()
        .rename('delay_rate')
        .reset_index()
    )

    return DelayAggregates(
        carrier_summary=carrier_summary,
        delay_by_hour=label_proportions(enriched, 'hour'),
        origin_temperature=origin_temperature,
        overall_mean_temperature=float(enriched['temperature'].mean()),
        delay_by_precipitation=binned_label_proportions(enriched, 'precipitation'),
        delay_by_wind_speed=binned_label_proportions(enriched, 'wind_speed'),
        delay_by_month=label_proportions(enriched, 'month'),
        delay_by_carrier_hour=delay_by_carrier_hour,
    )


def _stacked_proportions(proportions, title, xlabel):
    fig, ax = plt.subplots(figsize=(10, 6))
    proportions.plot(kind='bar', stacked=True, ax=ax, width=0.9)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Proportion of Delays")
    ax.legend(title="Arrival")
    fig.tight_layout()
    return fig


def plot_feature_importance(feature_importance):
    fig, ax = plt.subplots(figsize=(10, 6))
    top = feature_importance.head(10)
    sns.barplot(data=top, x='importance', y='feature', color='steelblue', ax=ax)
    ax.set_title("Feature Importance for Flight Delay Prediction")
    ax.set_xlabel("Importance (|standardized coefficient|)")
    ax.set_ylabel("")
    fig.tight_layout()
    return fig


def plot_carrier_delay_rate(aggregates):
    summary = aggregates.carrier_summary.reset_index()
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=summary, x='avg_arr_delay_rate', y='carrier', color='lightblue', ax=ax)
    ax.set_title("Average Delay Rate by Carrier with Weather Conditions")
    ax.set_xlabel("Average Delay Rate")
    ax.set_ylabel("Carrier")
    fig.tight_layout()
    return fig


def plot_delay_by_hour(aggregates):
    return _stacked_proportions(aggregates.delay_by_hour, "Delay Rate by Departure Hour", "Hour of Day")


def plot_origin_temperature(aggregates):
    origin = aggregates.origin_temperature.reset_index()
    overall = aggregates.overall_mean_temperature

    fig, ax = plt.subplots(figsize=(8, 6))
    sns.barplot(data=origin, x='origin', y='avg_temp', color='orange', width=0.6, ax=ax)
    for i, value in enumerate(origin['avg_temp']):
        ax.text(i, value + 0.5, f"{value:.1f}", ha='center', va='bottom')
    ax.axhline(overall, linestyle='--', color='blue')
    ax.text(0, overall + 2, f"Overall Avg Temp: {overall:.1f} °F", color='blue')
    ax.set_title("Average Temperature by Origin Airport")
    ax.set_xlabel("Origin Airport")
    ax.set_ylabel("Average Temperature (°F)")
    ax.tick_params(axis='x', labelrotation=45)
    fig.tight_layout()
    return fig


def plot_predicted_vs_actual(counts):
    fig, ax = plt.subplots(figsize=(8, 6))
    sns.barplot(data=counts, x='predicted', y='count', hue=TARGET_COLUMN, ax=ax)
    for container in ax.containers:
        ax.bar_label(container)
    ax.set_title("Predicted vs Actual Flight Delays")
    ax.set_xlabel("Predicted Delay")
    ax.set_ylabel("Count")
    fig.tight_layout()
    return fig


def plot_delay_by_precipitation(aggregates):
    return _stacked_proportions(
        aggregates.delay_by_precipitation.rename(index=lambda v: round(v, 2)),
        "Delay Rate by Precipitation", "Precipitation (inches)"
    )


def plot_delay_by_wind_speed(aggregates):
    return _stacked_proportions(
        aggregates.delay_by_wind_speed.rename(index=lambda v: round(v, 1)),
        "Delay Rate by Wind Speed", "Wind Speed (mph)"
    )


def plot_delay_by_month(aggregates):
    return _stacked_proportions(aggregates.delay_by_month, "Delay Rate by Month", "Month")


def plot_delay_by_carrier_hour(aggregates):
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.lineplot(data=aggregates.delay_by_carrier_hour, x='hour', y='delay_rate',
                 hue='carrier', ax=ax)
    ax.set_title("Delay Rate by Carrier and Hour of Day")
    ax.set_xlabel("Hour of Day")
    ax.set_ylabel("Delay Rate")
    fig.tight_layout()
    return fig


def show_figure(fig, save_dir: Optional[Path] = None, name: str = "figure"):
    """Display ``fig``, or write it to ``save_dir`` as PNG when given"""
    if save_dir is not None:
        save_dir = Path(save_dir)
        save_dir.mkdir(parents=True, exist_ok=True)
        path = save_dir / f"{name}.png"
        fig.savefig(path)
        plt.close(fig)
        return path

    plt.show()
    plt.close(fig)
    return None
