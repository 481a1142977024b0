"""
Command-line interface for LoanQuill.

Usage:
    loanquill render --values values.json --document-type "Loan Approval Letter" -o letter.pdf
    loanquill render --values values.json --template template.json --png preview.png
    loanquill templates
    loanquill version
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import LoanQuillError, TemplateError
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="loanquill",
        description="LoanQuill - loan letter rendering to single-page PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  loanquill render --values values.json -o approval.pdf
  loanquill render --values values.json --document-type "Loan GST Letter"
  loanquill render --values values.json --template custom.json --png preview.png
  loanquill templates
  loanquill version
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a letter to PDF")
    render_parser.add_argument("--values", required=True, help="JSON file with form values")
    source = render_parser.add_mutually_exclusive_group()
    source.add_argument("--document-type", help="Built-in document type (default: Loan Approval Letter)")
    source.add_argument("--template", help="JSON file with a template definition")
    render_parser.add_argument("--options", help="JSON file with render options")
    render_parser.add_argument(
        "-o", "--output",
        help="Output PDF path or directory (default: derived from the document name)",
    )
    render_parser.add_argument("--png", help="Also write a PNG preview of the page")

    subparsers.add_parser("templates", help="List built-in document types")
    subparsers.add_parser("version", help="Show version information")

    return parser


def _load_json(path: str) -> Any:
    file_path = Path(path)
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TemplateError(f"Cannot read {file_path}", str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise TemplateError(f"Invalid JSON in {file_path}", str(exc)) from exc


def cmd_render(args) -> int:
    """Handle render command."""
    from .api import generate_pdf_async
    from .config import RenderOptions
    from .media.image_loader import ImageLoader
    from .models.form import FormValues
    from .models.template import normalize_template
    from .templates.defaults import get_builtin_template

    values = FormValues.from_dict(_load_json(args.values))
    if args.template:
        template = normalize_template(_load_json(args.template))
    else:
        template = get_builtin_template(args.document_type or "Loan Approval Letter")
    options = RenderOptions.from_mapping(_load_json(args.options)) if args.options else RenderOptions()

    async def run():
        async with ImageLoader(timeout=options.image_timeout) as loader:
            return await generate_pdf_async(
                template, values, options, document_type=args.document_type, loader=loader,
            )

    document = asyncio.run(run())
    output = document.save(args.output or Path.cwd())
    print(f"Saved: {output}")
    if args.png:
        png_path = Path(args.png)
        png_path.parent.mkdir(parents=True, exist_ok=True)
        png_path.write_bytes(document.surface.to_png_bytes())
        print(f"Preview: {png_path}")
    return 0


def cmd_templates(args=None) -> int:
    """Handle templates command."""
    from .templates.defaults import BUILT_IN_DOC_TYPES, get_builtin_template

    for document_type in BUILT_IN_DOC_TYPES:
        template = get_builtin_template(document_type)
        print(f"{document_type}  (headline: {template.headline})")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"LoanQuill v{__version__}")
    print("Loan letter rendering to single-page PDF")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, log_file=args.log_file)

    commands = {
        "render": cmd_render,
        "templates": cmd_templates,
        "version": cmd_version,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except LoanQuillError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
