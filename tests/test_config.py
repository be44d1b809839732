import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from synthchar import config
from synthchar.models import Component, Product

BATCH = {
    "desired_total_mass": 5,
    "components": [
        {"formula": "CaO", "matrix": 30},
        {"formula": "La2O3", "matrix": 10},
        {"formula": "H3BO3", "matrix": 60},
    ],
    "products": [
        {
            "formula": "B2O3",
            "precursor_formula": "H3BO3",
            "precursor_moles": 2,
            "product_moles": 1,
        },
        {"formula": "La2O3", "precursor_formula": "La2O3"},
    ],
}


class TestBatchFile(unittest.TestCase):
    def test_parse_batch(self):
        inputs = config.parse_batch(BATCH)
        self.assertEqual(inputs.desired_total_mass, 5.0)
        self.assertEqual(inputs.components[0], Component("CaO", 30.0))
        self.assertEqual(inputs.products[0], Product("B2O3", "H3BO3", 2.0, 1.0))
        self.assertEqual(inputs.products[1], Product("La2O3", "La2O3", 1.0, 1.0))

    def test_missing_matrix_is_undefined(self):
        inputs = config.parse_batch({"desired_total_mass": 1, "components": [{"formula": "CaO"}]})
        self.assertIsNone(inputs.components[0].matrix_percent)

    def test_invalid_batches(self):
        for data in (
            [],
            {"components": []},
            {"desired_total_mass": "lots"},
            {"desired_total_mass": 1, "components": ["CaO"]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "precursor_moles": "two"}]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "precursor_moles": 0}]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "precursor_moles": -2}]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "product_moles": -1}]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "precursor_moles": float("nan")}]},
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "product_moles": float("inf")}]},
        ):
            with self.subTest(data=data):
                with self.assertRaises(config.BatchFileError):
                    config.parse_batch(data)

    def test_zero_product_moles_is_accepted(self):
        inputs = config.parse_batch(
            {"desired_total_mass": 1, "products": [{"formula": "B2O3", "product_moles": 0}]}
        )
        self.assertEqual(inputs.products[0].product_moles, 0.0)

    def test_load_batch_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "batch.json"
            path.write_text(json.dumps(BATCH))
            inputs = config.load_batch_file(path)

            bad = Path(tmp) / "bad.json"
            bad.write_text("{not json")
            with self.assertRaises(config.BatchFileError):
                config.load_batch_file(bad)
        self.assertEqual(len(inputs.components), 3)


class TestEnvironment(unittest.TestCase):
    def test_resolve_table_defaults_to_bundled(self):
        with mock.patch.dict(os.environ):
            os.environ.pop(config.TABLE_ENV, None)
            table = config.resolve_table()
        self.assertEqual(len(table), 118)

    def test_resolve_table_from_environment(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "masses.csv"
            path.write_text("AtomicNumber,Element,Symbol,AtomicMass\n1,Hydrogen,H,1.0\n")
            with mock.patch.dict(os.environ, {config.TABLE_ENV: str(path)}):
                table = config.resolve_table()
        self.assertEqual(table.symbols, ("H",))

    def test_log_level(self):
        with mock.patch.dict(os.environ, {config.LOG_LEVEL_ENV: "debug"}):
            self.assertEqual(config.log_level(), logging.DEBUG)
        with mock.patch.dict(os.environ, {config.LOG_LEVEL_ENV: "chatty"}):
            self.assertEqual(config.log_level(), logging.WARNING)


if __name__ == '__main__':
    unittest.main()
