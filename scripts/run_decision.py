# scripts/run_decision.py
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from outreach_opt.engine import DecisionEngine
from outreach_opt.export import EXPORT_FILENAME, write_targets_csv
from outreach_opt.formatting import format_break_even, format_money, format_pct, format_roi
from outreach_opt.logger import configure_logging
from outreach_opt.scenarios import DEFAULT_PARAMETERS, PRESETS, get_preset


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Capacity-constrained churn outreach decision.")
    parser.add_argument(
        "--csv",
        default=str(project_root / "data" / "churn_scores.csv"),
        help="Scored customers CSV (customer_id, churn_probability[, actual_churn]).",
    )
    parser.add_argument("--preset", choices=sorted(PRESETS), default=None)
    parser.add_argument("--capacity", type=int, default=None)
    parser.add_argument("--contact-cost", type=float, default=None)
    parser.add_argument("--churn-loss", type=float, default=None)
    parser.add_argument("--save-rate", type=float, default=None)
    parser.add_argument(
        "--out",
        default=None,
        help=f"Write contacted customers here (e.g. outputs/{EXPORT_FILENAME}).",
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def resolve_parameters(args: argparse.Namespace, population_size: int):
    params = get_preset(args.preset) if args.preset else DEFAULT_PARAMETERS
    overrides = {
        "capacity": args.capacity,
        "contact_cost": args.contact_cost,
        "churn_loss": args.churn_loss,
        "save_rate": args.save_rate,
    }
    params = replace(params, **{k: v for k, v in overrides.items() if v is not None})
    return params.for_population(population_size)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    print("\nLoading scored customers...")
    engine = DecisionEngine.from_csv(args.csv)
    print(f"[info] {engine.describe()}")

    params = resolve_parameters(args, len(engine))
    report = engine.analyze(params)
    ev = report.evaluation

    print("\n" + "=" * 80)
    print(
        f"CAPACITY {ev.contacts:,} | cost/contact={params.contact_cost:g} | "
        f"loss/churn={params.churn_loss:g} | save_rate={params.save_rate:g}"
    )
    print("=" * 80)
    print(f"Profit:     {format_money(ev.profit)}")
    print(f"Cost:       {format_money(ev.cost)}")
    print(f"ROI:        {format_roi(report.roi)}")
    print(f"Break-even: {format_break_even(report.break_even_save_rate)}")
    if report.labeled:
        pr = report.precision_recall
        print(f"Precision:  {format_pct(pr.precision)} | Recall: {format_pct(pr.recall)}")

    print("\n=== STRATEGY COMPARISON ===")
    print(report.comparison_table().to_string(index=False))

    peak = report.curve.peak()
    if peak is not None:
        print(f"\n[info] Curve peak: capacity={peak.capacity:,} profit={format_money(peak.profit)}")

    print()
    for line in report.summary():
        print(line)
    print("\n" + report.interpretation())

    if args.out:
        path = write_targets_csv(ev.contacted, args.out)
        print(f"\nSaved targets to:\n  {path}")


if __name__ == "__main__":
    main()
