"""Tests for simulator CSV export."""

import csv
import io

from edgecore.simulators.export import flip_result_to_csv, rotational_history_to_csv
from edgecore.simulators.flip_x5 import FlipConfig, simulate
from edgecore.simulators.outcomes import Outcome
from edgecore.simulators.rotational import RotationalConfig, replay


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestFlipExport:
    """Tests for flip_result_to_csv."""

    def test_sections_in_order(self):
        config = FlipConfig()
        text = flip_result_to_csv(config, simulate(config, [Outcome.TP, Outcome.TP, Outcome.SL, Outcome.TP]))

        sections = [row[0] for row in _rows(text) if row and row[0].startswith("===")]
        assert sections == [
            "=== CONFIGURATION ===",
            "=== SUMMARY ===",
            "=== TRADITIONAL STRATEGY ===",
            "=== LEVERAGED STRATEGY ===",
            "=== TRADES ===",
        ]

    def test_values(self):
        config = FlipConfig()
        rows = _rows(flip_result_to_csv(config, simulate(config, [Outcome.TP, Outcome.TP, Outcome.SL, Outcome.TP])))

        assert ["Win Rate", "75.00%"] in rows
        assert ["Final Balance", "$1820.00"] in rows
        assert ["Final Balance", "$1500.00"] in rows
        assert ["3", "2", "SL", "$100.00", "$-100.00", "$1300.00", "$420.00", "$-420.00", "$980.00"] in rows

    def test_fixed_dollar_label(self):
        config = FlipConfig(use_fixed_dollars=True)
        rows = _rows(flip_result_to_csv(config, simulate(config, [])))
        assert ["Risk per Trade", "$200.00"] in rows


class TestRotationalExport:
    """Tests for rotational_history_to_csv."""

    def test_history(self):
        config = RotationalConfig.uniform(3, 100.0, 10.0)
        rows = _rows(rotational_history_to_csv(replay(config, [Outcome.TP, Outcome.SL, Outcome.TP])))

        assert ["=== ACCOUNTS ==="] in rows
        assert ["2", "$100.00", "$90.00", "$-10.00", "1", "0", "1"] in rows
        assert ["3", "3", "TP", "$10.00", "$100.00", "$110.00"] in rows
        assert ["Total Balance", "$310.00"] in rows
