from __future__ import annotations

import csv
import json

import pytest

from fanrating import calibration as CAL
from fanrating.cli import main


def _write_report(tmp_path, data) -> str:
    path = tmp_path / "report.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_a1_point_json_output(tmp_path, a1_report_dict) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    out = tmp_path / "point.json"
    assert main(["a1-point", "--input", src, "--pressure", "9", "--output", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert abs(data["airflow"] - 50.0) < 1e-9


def test_a1_point_from_labeled_text(tmp_path, capsys) -> None:
    src = tmp_path / "report.txt"
    src.write_text(
        "[REPORT]\nid: T1\ndiameter_in: 10\nrpm: 1000\n[DETERMINATIONS]\n10;0;1\n8;100;1,5\n4;200;2,5\n",
        encoding="utf-8",
    )
    assert main(["a1-point", "--input", str(src), "--resistance", "0.0005"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert abs(data["airflow"] - 120.0) < 1e-2


def test_a1_curve_csv_output(tmp_path, a1_report_dict) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    out = tmp_path / "curve.csv"
    assert main(["a1-curve", "--input", src, "--diameter", "20", "--output", str(out)]) == 0
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert "airflow" in rows[0]
    col = rows[0].index("airflow")
    assert [float(r[col]) for r in rows[1:]] == [0.0, 800.0, 1600.0]


def test_a1_compare_drops_percent_by_default(tmp_path, a1_report_dict, capsys) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    assert main(["a1-compare", "--a", src, "--b", src]) == 0
    data = json.loads(capsys.readouterr().out)
    assert "pct" not in data
    assert data["mean_error"] == 0.0


def test_scale_command(capsys) -> None:
    assert main(["scale", "--quantity", "static_pressure", "--value", "1", "--context", "diameter",
                 "--from", "10", "--to", "20"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["scaled"] == 4.0


def test_fail_on_drift(tmp_path, a1_report_dict) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    CAL.set_solver_defaults(tolerance=1e-6)
    with pytest.raises(SystemExit):
        main(["a1-point", "--input", src, "--pressure", "9", "--fail-on-drift"])


def test_unsupported_output_extension(tmp_path, a1_report_dict) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    with pytest.raises(SystemExit):
        main(["a1-curve", "--input", src, "--output", str(tmp_path / "curve.xlsx")])


def test_scalar_result_as_single_csv_row(tmp_path) -> None:
    out = tmp_path / "scaled.csv"
    assert main(["scale", "--quantity", "cfm", "--value", "100", "--context", "diameter",
                 "--from", "10", "--to", "20", "--output", str(out)]) == 0
    with open(out, newline="", encoding="utf-8") as f:
        header, *rows = list(csv.reader(f))
    assert len(rows) == 1
    assert float(rows[0][header.index("scaled")]) == 800.0


def test_compare_csv_mixes_series_and_scalars(tmp_path, a1_report_dict) -> None:
    src = _write_report(tmp_path, a1_report_dict)
    out = tmp_path / "compare.csv"
    assert main(["a1-compare", "--a", src, "--b", src, "--field", "airflow", "--percent", "--output", str(out)]) == 0
    with open(out, newline="", encoding="utf-8") as f:
        header, *rows = list(csv.reader(f))
    assert header == ["A", "B", "pct", "mean_error"]
    assert len(rows) == 3
    # zero reference airflow: no percent delta and no mean error
    assert rows[0][header.index("pct")] == ""
    assert rows[1][header.index("mean_error")] == ""
