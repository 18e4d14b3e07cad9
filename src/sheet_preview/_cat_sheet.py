import argparse
import logging
import sys

from sheet_preview import Document, _get_version
from sheet_preview import __name__ as sheet_preview_name
from sheet_preview.constants import RECALC_PASSES
from sheet_preview.exceptions import ExportError, FileError
from sheet_preview.export import html_lines, to_csharp, to_csv

logger = logging.getLogger(sheet_preview_name)


def command_line_parser():
    parser = argparse.ArgumentParser(
        description="Recalculate the tables of HTML documents and export them"
    )
    parser.add_argument("-V", "--version", action="store_true")
    parser.add_argument(
        "-f",
        "--format",
        choices=["html", "csv", "csharp"],
        default="html",
        help="Export format (default: html)",
    )
    parser.add_argument(
        "--formulas",
        action="store_true",
        help="Dump formulas instead of formula results (csv only)",
    )
    parser.add_argument(
        "--no-recalc",
        action="store_true",
        help="Export cell values as they are in the document",
    )
    parser.add_argument(
        "--passes",
        type=int,
        default=RECALC_PASSES,
        help=f"Number of recalculation passes (default: {RECALC_PASSES})",
    )
    parser.add_argument("document", nargs="*", help="Document(s) to export")
    parser.add_argument(
        "--debug", default=False, action="store_true", help="Enable debug logging"
    )
    return parser


def read_document(filename: str) -> Document:
    try:
        with open(filename, encoding="utf-8") as fh:
            html = fh.read()
    except OSError as e:
        raise FileError(e.strerror or str(e)) from None
    return Document(html)


def export_document(args, filename: str) -> str:
    doc = read_document(filename)
    if not args.no_recalc:
        doc.recalculate(args.passes)
    if args.format == "csv":
        return to_csv(doc, formulas=args.formulas)
    elif args.format == "csharp":
        return to_csharp(doc.clean_html())
    else:
        return "\n".join(html_lines(doc.clean_html())) + "\n"


def main():
    parser = command_line_parser()
    args = parser.parse_args()

    if args.version:
        print(_get_version())
    elif len(args.document) == 0:
        parser.print_help()
    else:
        hdlr = logging.StreamHandler()
        hdlr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        logger.addHandler(hdlr)
        if args.debug:
            logger.setLevel("DEBUG")
        else:
            logger.setLevel("ERROR")
        for filename in args.document:
            try:
                sys.stdout.write(export_document(args, filename))
            except (FileError, ExportError) as e:
                print(f"{filename}:", str(e), file=sys.stderr)
                sys.exit(1)


if __name__ == "__main__":
    # execute only if run as a script
    main()  # pragma: no cover
