"""Command-line interface for swingseq.

Provides subcommands for swing kinematic analysis:

    swingseq analyze momentum.csv --rotation ik.csv --output results.json
    swingseq analyze momentum.csv --csv ./out --config config.yaml
    swingseq summary results.json
    swingseq info momentum.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from importlib.metadata import version as pkg_version, PackageNotFoundError


def _get_version() -> str:
    """Return package version without importing the full swingseq package."""
    try:
        return pkg_version("swingseq")
    except PackageNotFoundError:
        return "0.0.0+local"


def _setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_summary(summary):
    d = summary.to_dict()
    print(f"  Movements:        {d['movement_count']}")
    print(f"  Dominant profile: {d['dominant_profile']} "
          f"({100 * d['profile_consistency']:.0f}% of swings)")
    print(f"  Mean timing gap:  {d['mean_timing_gap_ms']:.0f} ms")
    print(f"  Sequence correct: {100 * d['sequence_rate']:.0f}%")
    print(f"  Decel achieved:   {100 * d['decel_rate']:.0f}%")


def cmd_analyze(args):
    """Analyse a momentum export (and optional rotation export)."""
    from .config import DEFAULT_CONFIG, load_config, analysis_config_from
    from .pipeline import analyze_files
    from .session import summarize_session
    from .schema import save_results

    cfg = load_config(args.config) if args.config else None
    config = analysis_config_from(cfg)
    export_cfg = (cfg or DEFAULT_CONFIG)["export"]

    results = analyze_files(args.momentum, args.rotation, config)
    print(f"Analyzed {len(results)} movements from {args.momentum}")
    for r in results:
        print(f"  {r.movement_id}: {r.motor_profile.value} "
              f"({r.motor_profile_confidence:.2f}) seq={r.sequence} "
              f"gap={r.peak_timing_gap_ms}ms ratio={r.transfer_ratio:.2f}")

    summary = summarize_session(results)
    _print_summary(summary)

    output = args.output or str(Path(args.momentum).with_suffix(".swings.json"))
    save_results(results, output, summary=summary, indent=export_cfg["indent"])
    print(f"Saved to {output}")

    # export.csv in the config writes CSVs next to the JSON output
    csv_dir = args.csv or (str(Path(output).parent) if export_cfg["csv"] else None)
    if csv_dir:
        from .export import export_csv
        paths = export_csv(results, csv_dir, prefix=export_cfg["prefix"])
        print(f"CSV: {', '.join(paths)}")


def cmd_summary(args):
    """Summarize a results JSON file."""
    from .schema import load_results
    from .session import summarize_session

    results = load_results(args.json_file)
    print(f"Session: {args.json_file}")
    _print_summary(summarize_session(results))


def cmd_info(args):
    """Show info about an export file."""
    from .ingest import read_table, detect_table_kind, group_by_movement, to_momentum_samples
    from .signals import estimate_sample_rate

    records = read_table(args.csv_file)
    if not records:
        print("No data rows.")
        return

    kind = detect_table_kind(list(records[0].keys()))
    print(f"File: {args.csv_file}")
    print(f"Kind: {kind}")
    print(f"Rows: {len(records)}")

    groups = group_by_movement(to_momentum_samples(records))
    print(f"Movements: {len(groups)}")
    for movement_id, samples in groups.items():
        fs = estimate_sample_rate([s.time for s in samples])
        print(f"  {movement_id}: {len(samples)} samples, ~{fs} Hz")


def main():
    parser = argparse.ArgumentParser(
        prog="swingseq",
        description="Swing kinematic sequence analysis",
    )
    parser.add_argument("--version", action="version", version=f"swingseq {_get_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # analyze
    p_analyze = sub.add_parser("analyze", help="Analyse a momentum export")
    p_analyze.add_argument("momentum", help="Path to momentum/energy CSV")
    p_analyze.add_argument("-r", "--rotation", help="Path to rotation (IK) CSV")
    p_analyze.add_argument("-o", "--output", help="Output JSON path (default: <momentum>.swings.json)")
    p_analyze.add_argument("--csv", metavar="DIR", help="Also export CSV files to DIR")
    p_analyze.add_argument("--config", help="Config file (JSON/YAML)")
    p_analyze.set_defaults(func=cmd_analyze)

    # summary
    p_summary = sub.add_parser("summary", help="Summarize a results JSON file")
    p_summary.add_argument("json_file", help="Path to results JSON")
    p_summary.set_defaults(func=cmd_summary)

    # info
    p_info = sub.add_parser("info", help="Show info about an export CSV")
    p_info.add_argument("csv_file", help="Path to CSV export")
    p_info.set_defaults(func=cmd_info)

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
