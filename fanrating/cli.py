"""
Minimal CLI for backend smoke-tests.

Usage examples:
  python -m fanrating.cli a1-point --input report.json --pressure 9
  python -m fanrating.cli a1-point --input report.txt --resistance 0.0005 --rpm 1200
  python -m fanrating.cli a1-curve --input report.json --diameter 40 --output curve.csv
  python -m fanrating.cli scale --quantity cfm --value 1000 --context rpm --from 1000 --to 1200

Commands:
  - a1-point: operating point of an A1 (2010) report (JSON or labeled text)
  - a1-curve: A1 curve rated at another speed / size / density
  - a1-compare: per-point deltas of one field between two A1 reports
  - scale: fan-law scaling of a single value
"""
from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List
import csv
import os

from . import api
from . import calibration as CAL
from .anchors import ANCHORS
from .io import parse_a1_report


def _read_report(path: str) -> Dict[str, Any]:
    """A1 report from a .json payload or a labeled [REPORT]/[DETERMINATIONS] text file."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if os.path.splitext(path)[1].lower() == ".json":
        return json.loads(text)
    return parse_a1_report(text)


_GUARDED = (
    "RHO_STD_LB_FT3", "QUANTITY_REL_TOL", "QUANTITY_ABS_TOL",
    "SOLVER_TOLERANCE", "SOLVER_MAX_ITERATIONS", "ALLOW_EXTRAPOLATION", "EXTRAPOLATION_SPAN",
)


def _fail_on_drift() -> None:
    drifted = [k for k in _GUARDED if float(ANCHORS[k]) != float(getattr(CAL, k))]
    if drifted:
        lines = [f" - {k}: anchor {ANCHORS[k]!r}, runtime {getattr(CAL, k)!r}" for k in drifted]
        raise SystemExit("Calibration drift detected:\n" + "\n".join(lines))


def _csv_rows(obj: Dict[str, Any]) -> List[List[Any]]:
    # Every command returns a flat dict; scalars fill the first row only.
    columns = [v if isinstance(v, list) else [v] for v in obj.values()]
    depth = max(len(c) for c in columns)
    rows = [list(obj.keys())]
    rows.extend([c[i] if i < len(c) else "" for c in columns] for i in range(depth))
    return rows


def _write_output(obj: Dict[str, Any], path: str | None) -> None:
    if not path:
        print(json.dumps(obj, ensure_ascii=False))
        return
    ext = os.path.splitext(path)[1].lower()
    if ext not in (".json", ".csv"):
        raise SystemExit(f"Unsupported output extension: {ext} (use .json or .csv)")
    with open(path, "w", newline="", encoding="utf-8") as f:
        if ext == ".json":
            json.dump(obj, f, ensure_ascii=False)
        else:
            csv.writer(f).writerows(_csv_rows(obj))


def _config(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = {"rpm": args.rpm, "diameter": args.diameter, "density_lb_ft3": args.density}
    return {k: v for k, v in cfg.items() if v is not None}


def _target(args: argparse.Namespace) -> Dict[str, Any]:
    if args.pressure is not None:
        return {"static_pressure": args.pressure}
    if args.cfm is not None:
        return {"cfm": args.cfm}
    if args.bhp is not None:
        return {"brake_horsepower": args.bhp}
    return {"system_resistance": args.resistance}


def cmd_a1_point(args: argparse.Namespace) -> int:
    if args.fail_on_drift:
        _fail_on_drift()
    report = _read_report(args.input)
    out = api.a1_operating_point(
        report, _target(args), config=_config(args),
        allow_extrapolation=True if args.extrapolate else None,
    )
    _write_output(out, args.output)
    return 0


def cmd_a1_curve(args: argparse.Namespace) -> int:
    if args.fail_on_drift:
        _fail_on_drift()
    report = _read_report(args.input)
    out = api.a1_fan_curve(report, config=_config(args), system_resistance=args.resistance)
    _write_output(out, args.output)
    return 0


def cmd_a1_compare(args: argparse.Namespace) -> int:
    if args.fail_on_drift:
        _fail_on_drift()
    out = api.a1_compare(_read_report(args.a), _read_report(args.b), field=args.field)
    if not args.percent:
        out.pop("pct", None)
    _write_output(out, args.output)
    return 0


def cmd_scale(args: argparse.Namespace) -> int:
    out = api.scale_value(args.quantity, args.value, args.context, args.from_, args.to)
    _write_output(out, args.output)
    return 0


def _add_configuration(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rpm", type=float, help="Rated speed [rpm] (default: test speed)")
    p.add_argument("--diameter", type=float, help="Rated impeller diameter [in] (default: tested size)")
    p.add_argument("--density", type=float, help="Rated air density [lb/ft³] (default: test density)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fanrating.cli", description="Fan rating backend CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_pt = sub.add_parser("a1-point", help="Operating point of an A1 (2010) report")
    p_pt.add_argument("--input", required=True, help="Report file (.json or labeled text)")
    tgt = p_pt.add_mutually_exclusive_group(required=True)
    tgt.add_argument("--pressure", type=float, help="Static pressure target [in. wg]")
    tgt.add_argument("--cfm", type=float, help="Airflow target [CFM]")
    tgt.add_argument("--bhp", type=float, help="Brake horsepower target [hp]")
    tgt.add_argument("--resistance", type=float, help="System resistance k [in. wg / CFM²]")
    _add_configuration(p_pt)
    p_pt.add_argument("--extrapolate", action="store_true", help="Allow bounded extrapolation past the curve")
    p_pt.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_pt.add_argument("--fail-on-drift", action="store_true", help="Fail if calibration differs from anchors")
    p_pt.set_defaults(func=cmd_a1_point)

    p_cv = sub.add_parser("a1-curve", help="A1 curve rated at another speed / size / density")
    p_cv.add_argument("--input", required=True, help="Report file (.json or labeled text)")
    _add_configuration(p_cv)
    p_cv.add_argument("--resistance", type=float, help="Add a system curve P = k * Q^2")
    p_cv.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_cv.add_argument("--fail-on-drift", action="store_true", help="Fail if calibration differs from anchors")
    p_cv.set_defaults(func=cmd_a1_curve)

    p_cmp = sub.add_parser("a1-compare", help="Compare one field of two A1 reports")
    p_cmp.add_argument("--a", required=True, help="Report file for test A")
    p_cmp.add_argument("--b", required=True, help="Report file for test B (reference)")
    p_cmp.add_argument("--field", choices=["static_pressure", "airflow", "brake_horsepower"], default="static_pressure")
    p_cmp.add_argument("--percent", action="store_true", help="Include percent delta series in output")
    p_cmp.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_cmp.add_argument("--fail-on-drift", action="store_true", help="Fail if calibration differs from anchors")
    p_cmp.set_defaults(func=cmd_a1_compare)

    p_sc = sub.add_parser("scale", help="Fan-law scaling of a single value")
    p_sc.add_argument("--quantity", required=True, choices=sorted(api.QUANTITIES))
    p_sc.add_argument("--value", required=True, type=float)
    p_sc.add_argument("--context", required=True, choices=sorted(api.CONTEXTS))
    p_sc.add_argument("--from", dest="from_", required=True, type=float)
    p_sc.add_argument("--to", required=True, type=float)
    p_sc.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_sc.set_defaults(func=cmd_scale)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
