"""
Console entry point: startup summary and the report menu
"""
import logging
import sys

from config import EXIT_CHOICE, MENU_TITLE
from evaluate import format_report
from pipeline import run_pipeline
from visualization import (
    plot_feature_importance, plot_carrier_delay_rate, plot_delay_by_hour,
    plot_origin_temperature, plot_predicted_vs_actual, plot_delay_by_precipitation,
    plot_delay_by_wind_speed, plot_delay_by_month, plot_delay_by_carrier_hour,
    show_figure
)

logger = logging.getLogger(__name__)

INVALID_CHOICE_MESSAGE = "Invalid choice. Please choose a valid option."
GOODBYE_MESSAGE = "Exiting the menu. Goodbye!"


def show_accuracy(result, save_dir=None):
    print(format_report(result.confusion_matrix, result.metrics, include_rates=False))


def _figure_renderer(name, plot, source):
    def render(result, save_dir=None):
        path = show_figure(plot(source(result)), save_dir=save_dir, name=name)
        if path is not None:
            print(f"Saved {path}")
    return render


MENU_OPTIONS = {
    1: ("View Overall Model Accuracy", show_accuracy),
    2: ("View Impact of Weather Conditions on Delays",
        _figure_renderer("feature_importance", plot_feature_importance, lambda r: r.feature_importance)),
    3: ("View Carrier with Highest Delay Rate",
        _figure_renderer("carrier_delay_rate", plot_carrier_delay_rate, lambda r: r.aggregates)),
    4: ("View Delay Rates by Departure Hour",
        _figure_renderer("delay_by_hour", plot_delay_by_hour, lambda r: r.aggregates)),
    5: ("View Delay Rates by Origin Airport and Temperature",
        _figure_renderer("origin_temperature", plot_origin_temperature, lambda r: r.aggregates)),
    6: ("Compare Actual vs Predicted Delay Rates",
        _figure_renderer("predicted_vs_actual", plot_predicted_vs_actual, lambda r: r.predicted_vs_actual)),
    7: ("View Delay Rate by Precipitation",
        _figure_renderer("delay_by_precipitation", plot_delay_by_precipitation, lambda r: r.aggregates)),
    8: ("View Impact of Wind Speed on Delay Rate",
        _figure_renderer("delay_by_wind_speed", plot_delay_by_wind_speed, lambda r: r.aggregates)),
    9: ("View Delay Rate by Month",
        _figure_renderer("delay_by_month", plot_delay_by_month, lambda r: r.aggregates)),
    10: ("View Delay Rate by Carrier and Hour of Day",
         _figure_renderer("delay_by_carrier_hour", plot_delay_by_carrier_hour, lambda r: r.aggregates)),
}


def format_menu():
    lines = ["", MENU_TITLE]
    for choice, (label, _) in MENU_OPTIONS.items():
        lines.append(f"{choice}. {label}")
    lines.append(f"{EXIT_CHOICE}. Exit")
    return "\n".join(lines)


def parse_menu_choice(raw):
    """Return the menu number for ``raw``, or None if it is not a valid option"""
    try:
        choice = int(str(raw).strip())
    except ValueError:
        return None

    if choice == EXIT_CHOICE or choice in MENU_OPTIONS:
        return choice
    return None


def run_menu(result, input_fn=input, save_dir=None):
    """Read choices until Exit and render the matching precomputed artifact"""
    while True:
        print(format_menu())
        try:
            raw = input_fn("Choose an option: ")
        except EOFError:
            print()
            return

        choice = parse_menu_choice(raw)
        if choice is None:
            print(INVALID_CHOICE_MESSAGE)
            continue
        if choice == EXIT_CHOICE:
            print(GOODBYE_MESSAGE)
            return

        _, render = MENU_OPTIONS[choice]
        render(result, save_dir=save_dir)


def print_startup_summary(result):
    print(f"Number of missing values in flights: {result.missing_values['flights']}")
    print(f"Number of missing values in weather: {result.missing_values['weather']}")
    print(f"Training data size: {len(result.train)}")
    print(f"Testing data size: {len(result.test)}")
    print("Model training completed.")
    print(format_report(result.confusion_matrix, result.metrics))


def main():
    logging.basicConfig(level=logging.INFO)

    try:
        result = run_pipeline()
    except Exception as e:
        logger.exception(f"Flight delay analysis failed: {e}")
        sys.exit(1)

    print_startup_summary(result)
    run_menu(result)


if __name__ == "__main__":
    main()
