#!/usr/bin/env python3
"""
Command-line touch-up tool: one subcommand per tool.

Usage:
    python tools/process.py <tool> <input> [options]

Subcommands:
    silence <input>     Remove sustained silence      (--aggression 0-100, default 80)
    noise <input>       Soft noise gate               (--level light|medium|strong)
    loudness <input>    Normalize loudness            (--target-lufs, default -16)
    quality <input>     Boost + soft compression      (--level light|medium|strong)

Options:
    --output-dir <path>   Directory for <name>_<tool>.wav (default: next to input)
    --stats               Print before/after level report
    --debug               Save <name>_<tool>.resolved.json with options and stats
"""
import sys
import os
import json
import argparse
import logging
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from touchup.core.errors import TouchupError
from touchup.export.naming import output_filename
from touchup.params.resolve import resolve_options
from touchup.params.schema import DEFAULT_OPTIONS
from touchup.pipeline import run_pipeline

logger = logging.getLogger("audio-touchup.cli")


def _params_from_args(args) -> dict:
    """Map CLI flags to tool params (only flags the subcommand defines)."""
    params = {}
    if args.tool == "silence":
        params["aggression"] = args.aggression
    elif args.tool == "noise":
        params["noise_level"] = args.level
    elif args.tool == "loudness":
        params["target_lufs"] = args.target_lufs
    elif args.tool == "quality":
        params["enhance_level"] = args.level
    return params


def _print_stats(label: str, stats: dict) -> None:
    print(
        f"{label:>7}: {stats['channels']}ch {stats['sample_rate']}Hz "
        f"{stats['duration_s']:.3f}s  peak {stats['peak_dbfs']:.2f} dBFS  "
        f"rms {stats['rms_dbfs']:.2f} dBFS  ~{stats['approx_lufs']:.2f} LUFS  "
        f"clipped {stats['clipped_samples']}"
    )


def cmd_process(args) -> int:
    input_path = Path(args.input)
    try:
        options = resolve_options(args.tool, _params_from_args(args))
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        data = input_path.read_bytes()
    except OSError as exc:
        print(f"Error: cannot read {input_path}: {exc}", file=sys.stderr)
        return 1

    try:
        result = run_pipeline(data, options)
    except TouchupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    wav_path = output_dir / output_filename(input_path.name, args.tool)
    wav_path.write_bytes(result.wav_bytes)

    print(f"\n=== Processing Complete ===")
    print(f"Tool: {args.tool} {options.params()}")
    print(f"Output: {wav_path}")
    if args.stats:
        _print_stats("input", result.input_stats)
        _print_stats("output", result.output_stats)

    if args.debug:
        json_path = wav_path.with_suffix(".resolved.json")
        with open(json_path, "w") as f:
            json.dump(
                {
                    "input": str(input_path),
                    "output": str(wav_path),
                    "tool": args.tool,
                    "resolved_params": options.params(),
                    "stats": {"input": result.input_stats, "output": result.output_stats},
                },
                f,
                indent=2,
                default=str,
            )
        print(f"Debug JSON: {json_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audio touch-up: process one clip with one tool")
    subparsers = parser.add_subparsers(dest="tool", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input", help="Input audio file")
    common.add_argument("--output-dir", default=None, help="Output directory (default: next to input)")
    common.add_argument("--stats", action="store_true", help="Print before/after level report")
    common.add_argument("--debug", action="store_true", help="Save resolved options and stats as JSON")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    p = subparsers.add_parser("silence", parents=[common], help="Remove sustained silence")
    p.add_argument("--aggression", type=int, default=DEFAULT_OPTIONS["aggression"])

    p = subparsers.add_parser("noise", parents=[common], help="Soft noise gate")
    p.add_argument("--level", choices=["light", "medium", "strong"], default=DEFAULT_OPTIONS["noise_level"])

    p = subparsers.add_parser("loudness", parents=[common], help="Normalize loudness")
    p.add_argument("--target-lufs", type=float, default=DEFAULT_OPTIONS["target_lufs"])

    p = subparsers.add_parser("quality", parents=[common], help="Boost + soft compression")
    p.add_argument("--level", choices=["light", "medium", "strong"], default=DEFAULT_OPTIONS["enhance_level"])

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return cmd_process(args)


if __name__ == "__main__":
    sys.exit(main())
