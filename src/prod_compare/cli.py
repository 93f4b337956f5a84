import argparse
import sys
from pathlib import Path

from . import config
from .analysis.deviation import build_stats, preview
from .compare.joiner import reconcile
from .errors import MappingError, SourceReadError
from .export.report import write_report
from .ingest.sources import read_source
from .mapping.detector import propose_mapping
from .schemas import FieldRole


def _load(path: str):
    p = Path(path)
    return read_source(p.read_bytes(), p.name)


def _parse_overrides(pairs: list[str]) -> dict[FieldRole, str | None]:
    out: dict[FieldRole, str | None] = {}
    for pair in pairs:
        role, sep, header = pair.partition("=")
        if not sep:
            raise ValueError(f"--map expects role=header, got {pair!r}")
        try:
            out[FieldRole(role.strip())] = header.strip() or None
        except ValueError:
            known = ", ".join(r.value for r in FieldRole)
            raise ValueError(f"unknown role {role!r}; known roles: {known}") from None
    return out


def _print_mapping(mapping) -> None:
    for role in FieldRole:
        print(f"  {role.side:<4} {role.value:<20} {mapping.header_for(role) or '-'}")


def _fmt(value) -> str:
    return "-" if value is None else f"{value:+.1f}"


def cmd_detect(args) -> int:
    plan, mes = _load(args.plan), _load(args.mes)
    print(f"Plan: {len(plan)} rows, headers={list(plan.headers)}")
    print(f"MES:  {len(mes)} rows, headers={list(mes.headers)}")
    print("Proposed mapping:")
    _print_mapping(propose_mapping(plan.headers, mes.headers))
    return 0


def cmd_run(args) -> int:
    plan, mes = _load(args.plan), _load(args.mes)
    mapping = propose_mapping(plan.headers, mes.headers).with_overrides(_parse_overrides(args.map))
    print("Mapping:")
    _print_mapping(mapping)
    records = reconcile(plan, mes, mapping)
    stats = build_stats(records)
    out = write_report(args.out, records, stats)
    print("Stats:", stats.to_dict())
    shown = preview(records, config.preview_rows())
    print(f"Preview ({len(shown)} of {len(records)}):")
    for rec in shown:
        print(f"  {rec['work_order']:<12} {rec['operator'] or '-':<12} {_fmt(rec['deviation_minutes'])}")
    print("Exported:", out)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Production plan vs. MES comparison")
    sub = parser.add_subparsers(dest="cmd", required=True)

    det_p = sub.add_parser("detect", help="Show headers and the proposed column mapping")
    det_p.add_argument("--plan", required=True)
    det_p.add_argument("--mes", required=True)
    det_p.set_defaults(func=cmd_detect)

    run_p = sub.add_parser("run", help="Ingest -> map -> join -> export")
    run_p.add_argument("--plan", required=True)
    run_p.add_argument("--mes", required=True)
    run_p.add_argument("--out", default="out/production_comparison.xlsx")
    run_p.add_argument("--map", action="append", default=[], metavar="ROLE=HEADER",
                       help="override a detected column (empty header unmaps the role)")
    run_p.set_defaults(func=cmd_run)

    args = parser.parse_args(argv)
    config.setup_logging()
    try:
        return args.func(args)
    except (SourceReadError, MappingError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
