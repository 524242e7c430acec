"""Tests for the batch JSONL/CSV converter."""

import json

import pandas as pd
import pytest

from build_expression_trees import build_record, build_trees, iter_input_files, main


def _read_jsonl(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


@pytest.fixture
def jsonl_input(tmp_path):
    path = tmp_path / "exprs.jsonl"
    records = [
        {"id": 0, "expression": "2(3+4)", "source": "manual"},
        {"id": 1, "expression": "(2+"},
        {"id": 2, "expression": "5 – 2"},
        {"id": 3, "expression": ""},
    ]
    path.write_text("\n".join(json.dumps(r, ensure_ascii=False) for r in records) + "\n", encoding="utf-8")
    return path


def test_build_record_adds_tree_fields():
    out = build_record({"id": 7, "expression": "5 – 2"}, "expression")
    assert out["id"] == 7
    assert out["normalized"] == "5 - 2"
    assert out["tree"]["value"] == "-"
    assert "error" not in out


def test_build_record_marks_failures():
    out = build_record({"expression": "(2+"}, "expression")
    assert out["tree"] is None
    assert out["error"]


def test_jsonl_batch_skips_invalid_by_default(jsonl_input, tmp_path):
    out_path = tmp_path / "trees.jsonl"
    num_ok, num_fail = build_trees(str(jsonl_input), out_path)
    assert (num_ok, num_fail) == (2, 1)

    rows = _read_jsonl(out_path)
    assert [r["id"] for r in rows] == [0, 2]
    assert rows[0]["source"] == "manual"
    assert rows[0]["normalized"] == "2 * (3+4)"
    assert rows[0]["tree"]["right"]["isSubExpression"] is True


def test_keep_failures_writes_null_tree(jsonl_input, tmp_path):
    out_path = tmp_path / "trees.jsonl"
    build_trees(str(jsonl_input), out_path, keep_failures=True)
    rows = _read_jsonl(out_path)
    assert [r["id"] for r in rows] == [0, 1, 2]
    assert rows[1]["tree"] is None
    assert "error" in rows[1]


def test_max_items_limits_processing(jsonl_input, tmp_path):
    out_path = tmp_path / "trees.jsonl"
    num_ok, num_fail = build_trees(str(jsonl_input), out_path, max_items=1)
    assert (num_ok, num_fail) == (1, 0)


def test_csv_input_with_custom_column(tmp_path):
    in_path = tmp_path / "exprs.csv"
    pd.DataFrame({"id": [1, 2], "formula": ["12", "[1+2]*{3+4}"]}).to_csv(in_path, index=False)
    out_path = tmp_path / "trees.jsonl"

    main(["--in", str(in_path), "--out", str(out_path), "--column", "formula"])

    rows = _read_jsonl(out_path)
    assert rows[0]["tree"] == {"value": "12", "isSubExpression": False}
    assert rows[1]["normalized"] == "(1+2)*(3+4)"
    assert rows[1]["tree"]["value"] == "*"


def test_missing_csv_column_raises(tmp_path):
    in_path = tmp_path / "exprs.csv"
    pd.DataFrame({"other": ["1+1"]}).to_csv(in_path, index=False)
    with pytest.raises(KeyError):
        build_trees(str(in_path), tmp_path / "out.jsonl")


def test_directory_spec_picks_supported_files(tmp_path):
    (tmp_path / "a.jsonl").write_text("", encoding="utf-8")
    (tmp_path / "b.csv").write_text("expression\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    assert [p.name for p in iter_input_files(str(tmp_path))] == ["a.jsonl", "b.csv"]


def test_unmatched_spec_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(iter_input_files(str(tmp_path / "missing-*.jsonl")))


def test_missing_jsonl_field_raises(tmp_path):
    in_path = tmp_path / "exprs.jsonl"
    in_path.write_text(
        json.dumps({"id": 0, "expression": "1+1"}) + "\n" + json.dumps({"id": 1, "formula": "2+2"}) + "\n",
        encoding="utf-8",
    )
    with pytest.raises(KeyError, match="expression"):
        build_trees(str(in_path), tmp_path / "out.jsonl")


def test_empty_field_is_skipped_in_every_format(tmp_path, capsys):
    jsonl_path = tmp_path / "a.jsonl"
    jsonl_path.write_text(json.dumps({"id": "j", "expression": ""}) + "\n", encoding="utf-8")
    csv_path = tmp_path / "b.csv"
    pd.DataFrame({"id": ["c"], "expression": [""]}).to_csv(csv_path, index=False)

    num_ok, num_fail = build_trees(str(tmp_path), tmp_path / "out.jsonl")

    assert (num_ok, num_fail) == (0, 0)
    out = capsys.readouterr().out
    assert "[SKIP] j" in out
    assert "[SKIP] c" in out
