"""
Test cases for the end-to-end pipeline, report aggregates and menu
"""
import matplotlib
matplotlib.use("Agg")

import pytest
import pandas as pd
import sys
import os
from types import SimpleNamespace

# Add src to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import cli
from cli import (
    GOODBYE_MESSAGE, INVALID_CHOICE_MESSAGE, MENU_OPTIONS, format_menu,
    parse_menu_choice, print_startup_summary, run_menu
)
from data_loading import create_sample_data
from pipeline import PipelineResult, run_pipeline
from visualization import compute_delay_aggregates


def scripted_input(*answers):
    """Replay ``answers`` as user input, then signal end of input"""
    remaining = list(answers)

    def fake_input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


@pytest.fixture(scope="module")
def result():
    flight_df, weather_df = create_sample_data()
    return run_pipeline(flight_df, weather_df)


class TestRunPipeline:
    """Test cases for run_pipeline"""

    def test_result_is_frozen(self, result):
        assert isinstance(result, PipelineResult)
        with pytest.raises(AttributeError):
            result.metrics = {}

    def test_partition_covers_enriched(self, result):
        assert len(result.train) + len(result.test) == len(result.enriched)
        assert result.enriched.notna().all().all()

    def test_confusion_matrix_sums_to_test_size(self, result):
        matrix = result.confusion_matrix
        counts = result.metrics

        assert matrix.values.sum() == len(result.test)
        correct = counts['true_positives'] + counts['true_negatives']
        assert counts['accuracy'] == pytest.approx(correct / len(result.test))

    def test_model_beats_chance(self, result):
        majority = result.test['label'].value_counts(normalize=True).max()
        assert result.metrics['accuracy'] >= majority - 0.05

    def test_missing_values_reported(self, result):
        assert result.missing_values['flights'] > 0
        assert result.missing_values['weather'] > 0

    def test_reproducible(self, result):
        flight_df, weather_df = create_sample_data()

        again = run_pipeline(flight_df, weather_df)

        assert list(again.train.index) == list(result.train.index)
        assert again.metrics == result.metrics


class TestDelayAggregates:
    """Test cases for the report aggregates"""

    def test_carrier_summary_sorted(self, result):
        summary = result.aggregates.carrier_summary

        assert set(summary.index) == set(result.enriched['carrier'])
        assert summary['avg_arr_delay_rate'].is_monotonic_decreasing

    def test_proportions_sum_to_one(self, result):
        for table in [result.aggregates.delay_by_hour,
                      result.aggregates.delay_by_month,
                      result.aggregates.delay_by_precipitation]:
            assert table.sum(axis=1).tolist() == pytest.approx([1.0] * len(table))

    def test_histogram_bins(self, result):
        assert len(result.aggregates.delay_by_wind_speed) <= 30

    def test_origin_temperature(self):
        enriched = pd.DataFrame({
            'carrier': ['AA', 'AA', 'UA'],
            'origin': ['JFK', 'EWR', 'JFK'],
            'hour': [5.0, 6.0, 7.0],
            'month': [1, 1, 2],
            'temperature': [30.0, 50.0, 40.0],
            'precipitation': [0.0, 0.1, 0.2],
            'wind_speed': [5.0, 6.0, 7.0],
            'label': ['late', 'on_time', 'on_time'],
        })

        aggregates = compute_delay_aggregates(enriched)

        assert list(aggregates.origin_temperature.index) == ['EWR', 'JFK']
        assert aggregates.overall_mean_temperature == pytest.approx(40.0)
        assert aggregates.carrier_summary.loc['AA', 'avg_arr_delay_rate'] == pytest.approx(0.5)


class TestMenu:
    """Test cases for the report menu"""

    def test_menu_lists_all_options(self):
        menu = format_menu()

        assert sorted(MENU_OPTIONS) == list(range(1, 11))
        for choice in range(1, 12):
            assert f"{choice}. " in menu

    @pytest.mark.parametrize("raw,expected", [
        ("1", 1), (" 10 ", 10), ("11", 11), ("abc", None), ("12", None),
        ("0", None), ("", None), ("3.5", None),
    ])
    def test_parse_menu_choice(self, raw, expected):
        assert parse_menu_choice(raw) == expected

    def test_exit_immediately(self, capsys):
        untouched = SimpleNamespace()

        run_menu(untouched, input_fn=scripted_input("11"))

        output = capsys.readouterr().out
        assert GOODBYE_MESSAGE in output
        assert "Accuracy:" not in output
        assert INVALID_CHOICE_MESSAGE not in output

    def test_invalid_choices_reprompt(self, result, capsys):
        metrics_before = dict(result.metrics)

        run_menu(result, input_fn=scripted_input("abc", "12", "11"))

        output = capsys.readouterr().out
        assert output.count(INVALID_CHOICE_MESSAGE) == 2
        assert output.count("Choose") == 0
        assert output.count("11. Exit") == 3
        assert result.metrics == metrics_before

    def test_end_of_input_stops_menu(self, capsys):
        run_menu(SimpleNamespace(), input_fn=scripted_input())

        assert GOODBYE_MESSAGE not in capsys.readouterr().out

    def test_accuracy_option(self, result, capsys):
        run_menu(result, input_fn=scripted_input("1", "11"))

        output = capsys.readouterr().out
        assert "Accuracy:" in output
        assert "Sensitivity" not in output

    @pytest.mark.parametrize("choice", range(2, 11))
    def test_plot_options_render(self, result, tmp_path, capsys, choice):
        run_menu(result, input_fn=scripted_input(str(choice), "11"), save_dir=tmp_path)

        assert len(list(tmp_path.glob("*.png"))) == 1
        assert "Saved" in capsys.readouterr().out

    def test_startup_summary(self, result, capsys):
        print_startup_summary(result)

        output = capsys.readouterr().out
        assert f"Training data size: {len(result.train)}" in output
        assert f"Testing data size: {len(result.test)}" in output
        assert "Number of missing values in flights" in output
        assert "Specificity:" in output


class TestMain:
    """Test cases for the console entry point"""

    def test_fatal_failure_logs_traceback(self, monkeypatch, caplog):
        def failing_pipeline():
            raise RuntimeError("dataset unavailable")

        monkeypatch.setattr(cli, "run_pipeline", failing_pipeline)

        with pytest.raises(SystemExit) as excinfo:
            cli.main()

        assert excinfo.value.code == 1
        failures = [r for r in caplog.records if "dataset unavailable" in r.getMessage()]
        assert len(failures) == 1
        assert failures[0].exc_info is not None
        assert failures[0].exc_info[0] is RuntimeError


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
