import math
import unittest

from synthchar.periodic import AtomicMassTable
from synthchar.weights import formula_mass, gravimetric_factor, molecular_weight

MASSES = {
    "H": 1.008,
    "B": 10.811,
    "O": 15.999,
    "P": 30.974,
    "Ca": 40.078,
    "La": 138.905,
}


class TestMolecularWeight(unittest.TestCase):
    def setUp(self):
        self.table = AtomicMassTable.from_masses(MASSES)

    def test_known_weights(self):
        self.assertAlmostEqual(molecular_weight("H3BO3", self.table), 61.832, places=6)
        self.assertAlmostEqual(molecular_weight("B2O3", self.table), 69.619, places=6)
        self.assertAlmostEqual(molecular_weight("CaO", self.table), 56.077, places=6)
        self.assertAlmostEqual(molecular_weight("La2O3", self.table), 325.807, places=6)

    def test_group_weight(self):
        expected = 40.078 + 2 * (15.999 + 1.008)
        self.assertAlmostEqual(molecular_weight("Ca(OH)2", self.table), expected)

    def test_unknown_symbol_is_undefined(self):
        self.assertIsNone(molecular_weight("Xe", self.table))
        self.assertIsNone(molecular_weight("CaXeO", self.table))

    def test_unparseable_or_blank_is_undefined(self):
        self.assertIsNone(molecular_weight("Ca(OH", self.table))
        self.assertIsNone(molecular_weight("", self.table))
        self.assertIsNone(molecular_weight("   ", self.table))

    def test_formula_mass(self):
        self.assertAlmostEqual(formula_mass({"H": 2, "O": 1}, self.table), 18.015)
        self.assertEqual(formula_mass({}, self.table), 0.0)
        self.assertIsNone(formula_mass({"Q": 1}, self.table))

    def test_bundled_table(self):
        table = AtomicMassTable.bundled()
        self.assertAlmostEqual(molecular_weight("H3BO3", table), 61.832, places=3)


class TestGravimetricFactor(unittest.TestCase):
    def setUp(self):
        self.table = AtomicMassTable.from_masses(MASSES)

    def test_boric_acid_to_boron_oxide(self):
        factor = gravimetric_factor("H3BO3", "B2O3", 2, 1, self.table)
        self.assertAlmostEqual(factor, 69.619 / (2 * 61.832))
        self.assertAlmostEqual(factor, 0.563, places=3)

    def test_identity_conversion(self):
        self.assertAlmostEqual(gravimetric_factor("La2O3", "La2O3", 1, 1, self.table), 1.0)

    def test_zero_product_moles(self):
        self.assertEqual(gravimetric_factor("H3BO3", "B2O3", 2, 0, self.table), 0.0)

    def test_undefined_cases(self):
        self.assertIsNone(gravimetric_factor("H3BO3", "B2O3", 0, 1, self.table))
        self.assertIsNone(gravimetric_factor("H3BO3", "B2O3", -1, 1, self.table))
        self.assertIsNone(gravimetric_factor("H3BO3", "B2O3", 1, -1, self.table))
        self.assertIsNone(gravimetric_factor("H3BO3", "B2O3", math.nan, 1, self.table))
        self.assertIsNone(gravimetric_factor("H3BO3", "Xe2O3", 2, 1, self.table))
        self.assertIsNone(gravimetric_factor("H3BO3(", "B2O3", 2, 1, self.table))
        self.assertIsNone(gravimetric_factor("H0", "B2O3", 1, 1, self.table))


if __name__ == '__main__':
    unittest.main()
