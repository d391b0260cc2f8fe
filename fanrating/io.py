"""
Lightweight parsers for pasted determination tables and labeled text reports.

Determination tables are what test engineers paste from spreadsheets:
one row per determination, columns separated by tabs, semicolons or
whitespace, decimal commas accepted. Labeled reports use the simple
sectioned format of the test fixtures:

    [REPORT]
    id: 2010-A1-0042
    fan_size: 36
    diameter_in: 36
    rpm: 1170
    [DETERMINATIONS]
    # static_pressure; cfm; brake_horsepower
    0,00; 12000; 3,1
    ...

Parsers return dicts consumable by fanrating.api / fanrating.schemas.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List

_SPLIT = re.compile(r"\s+")


# spreadsheet pastes: decimal comma, NBSP or space as thousands separator
_NUMBER_CLEANUP = str.maketrans({"\u00A0": None, " ": None, ",": "."})


def _to_float(token: str) -> float:
    try:
        return float(token.strip().translate(_NUMBER_CLEANUP))
    except ValueError:
        raise ValueError(f"not a number: '{token}'") from None


def _split_row(ln: str) -> List[str]:
    if "\t" in ln or ";" in ln:
        parts = re.split(r"[\t;]", ln)
    else:
        parts = _SPLIT.split(ln)
    return [p.strip() for p in parts if p.strip()]


def parse_determinations(text: str, columns: int = 3) -> List[List[float]]:
    """
    Parse a pasted table into rows of `columns` floats.
    Blank lines and lines starting with '#' are skipped.
    Raises ValueError naming the offending line.
    """
    rows: List[List[float]] = []
    for n, ln in enumerate(text.splitlines(), start=1):
        ln = ln.strip()
        if not ln or ln.startswith("#"):
            continue
        parts = _split_row(ln)
        if len(parts) != columns:
            raise ValueError(f"Line {n}: expected {columns} columns, got {len(parts)}: '{ln}'")
        try:
            rows.append([_to_float(p) for p in parts])
        except ValueError as e:
            raise ValueError(f"Line {n}: {e}") from e
    return rows


def _parse_kv(lines: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for ln in lines:
        if ":" not in ln or ln.startswith("#"):
            continue
        k, v = ln.split(":", 1)
        out[k.strip().lower()] = v.strip()
    return out


def _sections(text: str, kind: str) -> tuple[Dict[str, str], str]:
    lines = [ln.strip() for ln in text.splitlines()]
    report_idx = lines.index("[REPORT]") if "[REPORT]" in lines else -1
    det_idx = lines.index("[DETERMINATIONS]") if "[DETERMINATIONS]" in lines else -1
    if report_idx == -1 or det_idx == -1:
        missing = [name for name, idx in (("REPORT", report_idx), ("DETERMINATIONS", det_idx)) if idx == -1]
        raise ValueError(f"Invalid {kind} report: missing sections {missing}")
    kv = _parse_kv([ln for ln in lines[report_idx + 1 : det_idx] if ln])
    for key in ("id", "diameter_in", "rpm"):
        if key not in kv:
            raise ValueError(f"Invalid {kind} report: missing '{key}'")
    return kv, "\n".join(lines[det_idx + 1 :])


def _header(kv: Dict[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": kv["id"],
        "fan_size": {"id": kv.get("fan_size", kv["diameter_in"]), "diameter": _to_float(kv["diameter_in"])},
        "fan_rpm": _to_float(kv["rpm"]),
    }
    if "series" in kv:
        out["fan_size"]["fan_series"] = {"id": kv["series"], "fan_type": kv.get("fan_type", "")}
    if "density_lb_ft3" in kv:
        out["density_lb_ft3"] = _to_float(kv["density_lb_ft3"])
    return out


def parse_a1_report(text: str) -> Dict[str, Any]:
    """Labeled A1 report → A1ReportIn-shaped dict."""
    kv, table = _sections(text, "A1")
    report = _header(kv)
    report["determinations"] = [
        {"static_pressure": sp, "cfm": q, "brake_horsepower": bhp}
        for sp, q, bhp in parse_determinations(table, columns=3)
    ]
    return report


def parse_a2_report(text: str) -> Dict[str, Any]:
    """Labeled A2 report → A2ReportIn-shaped dict (static pressure; inlet; outlet; bhp)."""
    kv, table = _sections(text, "A2")
    report = _header(kv)
    report["determinations"] = [
        {"static_pressure": sp, "inlet_cfm": qi, "outlet_cfm": qo, "brake_horsepower": bhp}
        for sp, qi, qo, bhp in parse_determinations(table, columns=4)
    ]
    return report
