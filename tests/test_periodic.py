import tempfile
import unittest
from pathlib import Path

from synthchar.periodic import AtomicMassTable, parse_mass_row

TABLE_TEXT = "\n".join(
    [
        "AtomicNumber,Element,Symbol,AtomicMass",
        "1,Hydrogen,H,1.008",
        "2,Helium,He,abc",
        "3,Lithium,Li",
        "",
        "5,Boron,b,10.811",
        "8,Oxygen,O,15.999",
        "8,Oxygen,O,16.0",
        "9,Fluorine,F,-1",
        "20,Calcium,Ca,40.078",
    ]
)


class TestAtomicMassTable(unittest.TestCase):
    def test_malformed_rows_are_skipped(self):
        with self.assertLogs("synthchar.periodic.table", level="WARNING"):
            table = AtomicMassTable.from_text(TABLE_TEXT)
        self.assertEqual(table.symbols, ("H", "O", "Ca"))
        self.assertEqual(table.rejected_lines, (3, 4, 6, 8, 9))
        self.assertEqual(table.atomic_mass("O"), 15.999)

    def test_lookup(self):
        table = AtomicMassTable.from_text(TABLE_TEXT)
        entry = table.entry("Ca")
        self.assertEqual(entry.element_name, "Calcium")
        self.assertEqual(entry.atomic_number, 20)
        self.assertIn("H", table)
        self.assertNotIn("He", table)
        self.assertNotIn("h", table)
        self.assertIsNone(table.atomic_mass("Xx"))
        self.assertIsNone(table.entry("Xx"))

    def test_symbols_are_case_sensitive(self):
        table = AtomicMassTable.from_masses({"Co": 58.933, "C": 12.011, "O": 15.999})
        self.assertEqual(table.atomic_mass("Co"), 58.933)
        self.assertIsNone(table.atomic_mass("CO"))

    def test_from_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "masses.csv"
            path.write_text(TABLE_TEXT, encoding="utf-8")
            table = AtomicMassTable.from_csv(path)
        self.assertEqual(len(table), 3)

    def test_bundled_table(self):
        table = AtomicMassTable.bundled()
        self.assertEqual(len(table), 118)
        self.assertEqual(table.rejected_lines, ())
        self.assertEqual(table.atomic_mass("La"), 138.905)
        self.assertEqual(table.entry("O").element_name, "Oxygen")
        self.assertIs(AtomicMassTable.bundled(), table)

    def test_parse_row(self):
        entry = parse_mass_row(["57", " Lanthanum", "La ", "138.905"])
        self.assertEqual(entry.symbol, "La")
        self.assertEqual(entry.element_name, "Lanthanum")
        with self.assertRaises(ValueError):
            parse_mass_row(["57", "Lanthanum", "LA", "138.905"])
        with self.assertRaises(ValueError):
            parse_mass_row(["x", "Lanthanum", "La", "138.905"])
        with self.assertRaises(ValueError):
            parse_mass_row(["57", "Lanthanum", "La", "nan"])


if __name__ == '__main__':
    unittest.main()
