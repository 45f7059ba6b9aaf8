import argparse
import dataclasses
import sys
import time
import webbrowser
from pathlib import Path

import yaml

from .api import encode_document
from .config import load_config
from .html_builder import build_error_page, build_page
from .md_reader import read_markdown
from .preview import PreviewSession, render_preview

_WATCH_POLL_SECONDS = 0.2


def _encode(args: argparse.Namespace) -> int:
    document = read_markdown(args.input)
    if args.title:
        document = dataclasses.replace(document, title=args.title)
    output_path = args.output or args.input.with_suffix(".tex")

    output_path.write_text(encode_document(document), encoding="utf-8")
    print(f"Written → {output_path}")
    return 0


def _preview(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    output_path = args.output or args.input.with_suffix(".html")
    title = args.input.name

    if args.watch:
        return _watch(args.input, output_path, title, config.preview)

    print(f"Rendering '{args.input}' …")
    result = render_preview(args.input.read_text(encoding="utf-8"), config=config.preview)
    if not result.ok:
        print(f"Preview failed: {result.error}", file=sys.stderr)
        return 1
    if result.fell_back:
        print("Primary parse failed; showing the simplified fragment preview.", file=sys.stderr)

    output_path.write_text(build_page(result.html, title), encoding="utf-8")
    print(f"Written → {output_path}")
    if args.open:
        webbrowser.open(output_path.absolute().as_uri())
    return 0


def _watch(input_path: Path, output_path: Path, title: str, preview_config) -> int:
    """Recompile on every change to *input_path* until interrupted."""

    def _on_update(result) -> None:
        if result.ok:
            output_path.write_text(build_page(result.html, title), encoding="utf-8")
            print(f"Updated → {output_path}")
        else:
            output_path.write_text(
                build_error_page(result.error, session.html or "", title), encoding="utf-8"
            )
            print(f"Preview failed: {result.error}", file=sys.stderr)

    session = PreviewSession(_on_update, config=preview_config)
    last_mtime = None
    print(f"Watching '{input_path}' (Ctrl-C to stop) …")
    try:
        while True:
            mtime = input_path.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime
                session.edit(input_path.read_text(encoding="utf-8"))
            time.sleep(_WATCH_POLL_SECONDS)
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
    print("\nStopped watching.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtex",
        description="Encode Markdown reports as LaTeX and preview LaTeX as HTML",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Convert a Markdown report to a LaTeX document")
    enc.add_argument("input", type=Path, help="Path to the .md file")
    enc.add_argument(
        "-o", "--output", type=Path, default=None, help="Output .tex path (default: <input>.tex)"
    )
    enc.add_argument("--title", type=str, default=None, help="Override the document title")
    enc.set_defaults(handler=_encode)

    pre = sub.add_parser("preview", help="Render a LaTeX file to an HTML preview")
    pre.add_argument("input", type=Path, help="Path to the .tex file")
    pre.add_argument(
        "-c", "--config", type=Path, default=None, help="Path to config.yaml (optional)"
    )
    pre.add_argument(
        "-o", "--output", type=Path, default=None, help="Output HTML path (default: <input>.html)"
    )
    pre.add_argument(
        "--open",
        action="store_true",
        help="Open the output HTML in the browser when done",
    )
    pre.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and re-render whenever the file changes",
    )
    pre.set_defaults(handler=_preview)
    return parser


def main(argv=None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    if not args.input.exists():
        print(f"Error: '{args.input}' not found.", file=sys.stderr)
        sys.exit(1)

    try:
        code = args.handler(args)
    except (OSError, UnicodeDecodeError, TypeError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
