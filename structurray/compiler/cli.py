"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from structurray.internals.version import print_banner


def get_effective_cwd() -> Path:
    """Directory relative paths are resolved from.

    Honors STRUCTURRAY_CWD (set by wrapper scripts that change directory
    before invoking the tool), falling back to os.getcwd().
    """
    structurray_cwd = os.environ.get('STRUCTURRAY_CWD')
    if structurray_cwd:
        return Path(structurray_cwd)
    return Path.cwd()


def default_output_path(src_path: Path) -> Path:
    """``foo.rs`` expands to ``foo.expanded.rs`` next to it."""
    return src_path.with_name(f"{src_path.stem}.expanded.rs")


def print_encodings(values: list[str]) -> int:
    """Print the base62 key for each index. Returns 0, or 2 on bad input."""
    from structurray.semantics import base62

    status = 0
    for value in values:
        try:
            print(f"{value} -> {base62.encode(int(value, 10))}")
        except ValueError:
            print(f"error: '{value}' is not an index between 0 and {base62.U32_MAX}", file=sys.stderr)
            status = 2
    return status


def print_decodings(keys: list[str]) -> int:
    """Print the index for each base62 key. Returns 0, or 2 on bad input."""
    from structurray.semantics import base62

    status = 0
    for key in keys:
        try:
            print(f"{key} -> {base62.decode(key)}")
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            status = 2
    return status


def main(argv: list[str] | None = None) -> int:
    """Main generator entry point."""
    ap = argparse.ArgumentParser(prog="structurray",
                                 description="Expand #[faux_array(Type, N)] structs into base62-keyed fields")

    ap.add_argument("source", nargs='?', help="Path to Rust source file (.rs)")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree of each declaration")
    ap.add_argument("--dump-ast", action="store_true", help="Print each assembled struct")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Output path (default: <source stem>.expanded.rs next to the source)")
    ap.add_argument("--stdout", action="store_true",
                    help="Write the expanded source to stdout instead of a file")
    ap.add_argument("--check", action="store_true",
                    help="Validate every faux_array item without writing output")
    ap.add_argument("--encode", nargs="+", metavar="N",
                    help="Print the base62 field key for each index and exit")
    ap.add_argument("--decode", nargs="+", metavar="KEY",
                    help="Print the index for each base62 field key and exit")
    ap.add_argument(
        "--traceback",
        action="store_true",
        help="Print full traceback on internal errors (for debugging)",
    )
    args = ap.parse_args(argv)

    # Keep stdout clean when it carries the generated code
    if not args.stdout:
        print_banner()

    if args.version:
        return 0

    if args.encode or args.decode:
        status = 0
        if args.encode:
            status = max(status, print_encodings(args.encode))
        if args.decode:
            status = max(status, print_decodings(args.decode))
        return status

    if not args.source:
        print("error: source file required (unless using --encode or --decode)", file=sys.stderr)
        return 2

    from structurray.compiler.pipeline import expand_source
    from structurray.internals import errors as er
    from structurray.internals.parse_errors import handle_parse_exception
    from structurray.internals.report import Reporter

    effective_cwd = get_effective_cwd()
    src_path = Path(args.source)

    if not src_path.is_absolute():
        src_path = effective_cwd / src_path

    src_path = src_path.resolve()

    try:
        # newline="" keeps CRLF line endings intact
        with open(src_path, encoding="utf-8", newline="") as f:
            src = f.read()
    except Exception as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(source=src, filename=str(src_path))

    # Check for missing trailing newline
    if src and not src.endswith('\n'):
        er.emit(reporter, er.ERR.CW0001, None)

    try:
        expanded = expand_source(src, reporter, dump_parse=args.dump_parse, dump_ast=args.dump_ast)
    except Exception as exc:
        if handle_parse_exception(exc, reporter):
            reporter.print()
            return 2
        if args.traceback:
            raise
        print(f"internal error: {exc}", file=sys.stderr)
        print("Run with --traceback for details.", file=sys.stderr)
        return 2

    if expanded is None or reporter.has_errors:
        reporter.print()
        return 2

    if args.stdout:
        sys.stdout.write(expanded)
    elif not args.check:
        out_path = Path(args.out) if args.out else default_output_path(src_path)
        if not out_path.is_absolute():
            out_path = effective_cwd / out_path
        if out_path.resolve() == src_path:
            print("error: refusing to overwrite the source file; choose another --out", file=sys.stderr)
            return 2
        try:
            with open(out_path, "w", encoding="utf-8", newline="") as f:
                f.write(expanded)
        except OSError as e:
            print(f"error: cannot write {out_path}: {e}", file=sys.stderr)
            return 2
        print(f"Wrote {out_path}")

    if reporter.has_warnings:
        reporter.print()
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
