"""
Tests for the Offline CSV Tools
Splitting combined exports and normalizing headers
"""
import csv
import importlib.util
import io
from pathlib import Path

import pytest

from materials_exchange.core.exceptions import ParseError
from materials_exchange.services.ingestion import (
    merge_documents, normalize_document, parse_inventory_document, split_by_tenant, tenant_file_name
)
from materials_exchange.services.ingestion.csv_tools import clean_cell, is_meaningful

COMBINED = (
    "БЕ,Наименование склада,Адрес склада,Наименование материала,Количество\n"
    "2000,Склад 1,Пермь,Болт,10\n"
    "3000,Склад 7,Казань,Кабель,5\n"
    "2000,Склад 2,Пермь,Гайка,20\n"
    ",Склад 9,Уфа,Шайба,1\n"
)


def read_rows(document: str):
    assert document.startswith("\ufeff")
    return list(csv.reader(io.StringIO(document[1:])))


def load_script(name: str):
    path = Path(__file__).parent.parent / "scripts" / f"{name}.py"
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSplitByTenant:
    """One document per balance unit"""

    def test_split_groups_rows(self):
        """Rows are grouped by balance unit in input order"""
        documents = split_by_tenant(COMBINED)

        assert sorted(documents) == ["2000", "3000"]
        rows = read_rows(documents["2000"])
        assert [r[2] for r in rows[1:]] == ["Болт", "Гайка"]

    def test_warehouse_name_dropped(self):
        """The warehouse-name column is removed"""
        header = read_rows(split_by_tenant(COMBINED)["3000"])[0]

        assert "Наименование склада" not in header
        assert header == ["БЕ", "Адрес склада", "Наименование материала", "Количество"]

    def test_split_documents_upload_cleanly(self):
        """Each output parses as an inventory document"""
        document = split_by_tenant(COMBINED)["2000"]

        rows = parse_inventory_document(document, "2000")

        assert [r["material_name"] for r in rows] == ["Болт", "Гайка"]

    def test_missing_tenant_column(self):
        """A document without a balance unit column cannot be split"""
        with pytest.raises(ParseError, match="balance unit"):
            split_by_tenant("Наименование материала\nБолт\n")

    @pytest.mark.parametrize("tenant_key,expected", [
        ("2000", "2000.csv"),
        (" 3000 ", "3000.csv"),
        ("../../etc/cron.d/job", None),
        ("..", None),
        (".", None),
        ("a\\b", None),
        ("", None),
    ])
    def test_tenant_file_name(self, tenant_key, expected):
        """Only plain balance unit keys become file names"""
        assert tenant_file_name(tenant_key) == expected

    def test_script_skips_unsafe_tenant_keys(self, tmp_path, monkeypatch):
        """Keys with path separators are not written outside the output directory"""
        script = load_script("split_inventory_by_tenant")
        monkeypatch.setattr(script, "setup_logging", lambda **kwargs: None)
        source = tmp_path / "export.csv"
        source.write_text(
            "БЕ,Наименование материала,Количество\n"
            "2000,Болт,10\n"
            "../escaped,Гайка,20\n",
            encoding="utf-8",
        )
        out_dir = tmp_path / "out" / "split"

        assert script.main([str(source), "--out-dir", str(out_dir)]) == 0

        assert sorted(p.name for p in out_dir.iterdir()) == ["2000.csv"]
        assert not (tmp_path / "out" / "escaped.csv").exists()

class TestNormalizeDocument:
    """Canonical headers and clean cells"""

    def test_headers_rewritten(self):
        """Historical spellings become canonical"""
        text = (
            "БЕ (балансовая единица) держателя запаса,\"Адрес склада (Город, район)\","
            "Классы МТР ,Плановая рентабельность ,Примечание\n"
            "2000,Пермь,101,12,заметка\n"
        )

        header = read_rows(normalize_document(text))[0]

        assert header == ["БЕ", "Адрес склада", "Классы МТР", "Рентабельность", "Примечание"]

    def test_trailing_separators_trimmed(self):
        """Trailing ', ' left by the export is removed"""
        text = "БЕ,Адрес склада,Наименование материала\n2000,\"Пермь, \",Болт\n"

        rows = read_rows(normalize_document(text))

        assert rows[1] == ["2000", "Пермь", "Болт"]

    def test_sparse_rows_discarded(self):
        """Rows with fewer than three meaningful cells are dropped"""
        text = (
            "БЕ,Адрес склада,Наименование материала,Количество\n"
            "2000,Пермь,Болт,10\n"
            "2000,\", \",,\n"
            ",,\\,\n"
        )

        rows = read_rows(normalize_document(text))

        assert len(rows) == 2

    def test_warehouse_name_dropped(self):
        """Normalization also removes the warehouse-name column"""
        text = "БЕ,Наименование склада,Наименование материала,Количество\n2000,Склад 1,Болт,3\n"

        rows = read_rows(normalize_document(text))

        assert rows == [["БЕ", "Наименование материала", "Количество"], ["2000", "Болт", "3"]]


class TestMergeDocuments:
    """Per balance unit documents back into one export"""

    def test_split_then_merge(self):
        """Merging the split documents gives back every row with a balance unit"""
        documents = split_by_tenant(COMBINED)

        rows = read_rows(merge_documents(documents[key] for key in sorted(documents)))

        assert rows[0] == ["БЕ", "Адрес склада", "Наименование материала", "Количество"]
        assert rows[1:] == [
            ["2000", "Пермь", "Болт", "10"],
            ["2000", "Пермь", "Гайка", "20"],
            ["3000", "Казань", "Кабель", "5"],
        ]

    def test_columns_matched_by_name(self):
        """Later documents are aligned to the first header"""
        first = "БЕ,Наименование материала,Количество\n2000,Болт,10\n"
        second = "Количество;Примечание;БЕ\n7;заметка;3000\n"

        rows = read_rows(merge_documents([first, second]))

        assert rows == [
            ["БЕ", "Наименование материала", "Количество"],
            ["2000", "Болт", "10"],
            ["3000", "", "7"],
        ]

    def test_empty_documents_skipped(self):
        """Header-only and empty documents contribute nothing"""
        header_only = "БЕ,Адрес склада,Наименование материала\n"
        data = "\ufeffБЕ,Наименование материала\n2000,Болт\n\n"

        rows = read_rows(merge_documents([None, "", header_only, data]))

        assert rows == [["БЕ", "Наименование материала"], ["2000", "Болт"]]

    def test_nothing_to_merge(self):
        """No data rows anywhere is an error"""
        with pytest.raises(ParseError, match="No document contains data rows"):
            merge_documents(["БЕ,Количество\n", ""])

    def test_merge_script(self, tmp_path, monkeypatch):
        """The script merges a directory of CSVs sorted by file name"""
        script = load_script("merge_inventory_csvs")
        monkeypatch.setattr(script, "setup_logging", lambda **kwargs: None)
        split_dir = tmp_path / "split"
        split_dir.mkdir()
        for tenant_key, document in split_by_tenant(COMBINED).items():
            (split_dir / f"{tenant_key}.csv").write_text(document, encoding="utf-8")
        output = tmp_path / "merged.csv"

        assert script.main([str(split_dir), "-o", str(output)]) == 0

        rows = read_rows(output.read_text(encoding="utf-8"))
        assert [r[0] for r in rows[1:]] == ["2000", "2000", "3000"]

    def test_merge_script_without_inputs(self, tmp_path, monkeypatch):
        """An empty directory fails with exit code 1"""
        script = load_script("merge_inventory_csvs")
        monkeypatch.setattr(script, "setup_logging", lambda **kwargs: None)

        assert script.main([str(tmp_path), "-o", str(tmp_path / "merged.csv")]) == 1

class TestCellHelpers:
    """Cell cleaning rules"""

    @pytest.mark.parametrize("value,expected", [
        ("Пермь, ", "Пермь"),
        ("  Болт  ", "Болт"),
        ("a, b,,", "a, b"),
        ("", ""),
    ])
    def test_clean_cell(self, value, expected):
        """Trailing separators and whitespace are removed"""
        assert clean_cell(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("Болт", True),
        ("0", True),
        (", ", False),
        ("\\", False),
        ("", False),
    ])
    def test_is_meaningful(self, value, expected):
        """Only separators and backslashes carry nothing"""
        assert is_meaningful(value) is expected
