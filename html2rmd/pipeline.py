"""Pipeline entrypoints and stage orchestration."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import sys
import tempfile
import time
import uuid

from .cleanup.artifacts import strip_artifacts
from .cleanup.brackets import normalize_brackets
from .cleanup.math_spans import unescape_math_spans
from .config import Settings, load_settings
from .conversion.converters import CONVERTER_NAMES, HtmlConverter, get_converter
from .errors import Html2RmdError, InvalidArgumentError, OutputWriteError
from .template import assemble_document, render_footer, render_header

LOGGER = logging.getLogger("html2rmd.pipeline")

_HTML_SUFFIX = ".html"


@dataclass(frozen=True)
class ConversionResult:
    input_path: Path
    output_path: Path
    header_added: bool
    converter: str
    run_id: str


def _log_event(*, run_id: str, stage: str, event: str, elapsed_s: float | None = None, **extra: object) -> None:
    payload: dict[str, object] = {
        "run_id": run_id,
        "stage": stage,
        "event": event,
    }
    if elapsed_s is not None:
        payload["elapsed_s"] = round(elapsed_s, 3)
    payload.update(extra)
    LOGGER.info(json.dumps(payload, sort_keys=True, default=str))


def _run_stage(stage: str, run_id: str, transform: Callable[[str], str], text: str) -> str:
    start = time.perf_counter()
    _log_event(run_id=run_id, stage=stage, event="start", input_chars=len(text))

    result = transform(text)

    elapsed = time.perf_counter() - start
    _log_event(run_id=run_id, stage=stage, event="complete", elapsed_s=elapsed, output_chars=len(result))
    return result


def clean_markup(text: str, *, strict_math: bool = False, run_id: str | None = None) -> str:
    """Run the cleanup passes over converted markup, in order."""

    run_id = run_id or str(uuid.uuid4())
    text = _run_stage("strip_artifacts", run_id, strip_artifacts, text)
    text = _run_stage("normalize_brackets", run_id, normalize_brackets, text)
    return _run_stage(
        "unescape_math",
        run_id,
        lambda value: unescape_math_spans(value, strict=strict_math),
        text,
    )


def convert_html(
    html: str,
    *,
    converter: HtmlConverter,
    settings: Settings,
    add_header: bool = True,
    strict_math: bool | None = None,
    run_id: str | None = None,
) -> str:
    """Convert an HTML string to the final Rmd document text."""

    run_id = run_id or str(uuid.uuid4())
    strict_math = strict_math if strict_math is not None else settings.strict_math

    markup = _run_stage("convert", run_id, converter.convert, html)
    body = clean_markup(markup, strict_math=strict_math, run_id=run_id)

    header = render_header(settings) if add_header else None
    footer = render_footer(settings) if add_header else None
    return _run_stage(
        "assemble",
        run_id,
        lambda value: assemble_document(value, header=header, footer=footer),
        body,
    )


def default_output_path(input_path: Path, extension: str) -> Path:
    """Swap a trailing ``.html`` for ``extension``; append it otherwise."""

    name = input_path.name
    if name.endswith(_HTML_SUFFIX):
        name = name[: -len(_HTML_SUFFIX)]
    return input_path.with_name(f"{name}{extension}")


def write_output(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a temp file in the same directory."""

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise OutputWriteError(f"cannot write '{path}': {exc.strerror or exc}") from exc
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise OutputWriteError(f"cannot write '{path}': {exc.strerror or exc}") from exc
    finally:
        tmp_path.unlink(missing_ok=True)


def convert_file(
    input_path: Path,
    output_path: Path | None = None,
    *,
    add_header: bool = True,
    converter: HtmlConverter | None = None,
    settings: Settings | None = None,
    strict_math: bool | None = None,
    run_id: str | None = None,
) -> ConversionResult:
    run_id = run_id or str(uuid.uuid4())
    settings = settings or load_settings()
    converter = converter or get_converter(settings.converter, settings)
    ensure_available = getattr(converter, "ensure_available", None)
    if ensure_available is not None:
        ensure_available()

    if not input_path.is_file():
        raise InvalidArgumentError(f"input file '{input_path}' not found.")
    output_path = output_path or default_output_path(input_path, settings.output_extension)

    start = time.perf_counter()
    _log_event(run_id=run_id, stage="convert_file", event="start", input=input_path, converter=converter.name)

    html = input_path.read_text(encoding="utf-8")
    document = convert_html(
        html,
        converter=converter,
        settings=settings,
        add_header=add_header,
        strict_math=strict_math,
        run_id=run_id,
    )
    write_output(output_path, document)

    elapsed = time.perf_counter() - start
    _log_event(
        run_id=run_id,
        stage="convert_file",
        event="complete",
        elapsed_s=elapsed,
        output=output_path,
        header_added=add_header,
    )
    return ConversionResult(
        input_path=input_path,
        output_path=output_path,
        header_added=add_header,
        converter=converter.name,
        run_id=run_id,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html2rmd",
        description="Convert HTML to cleaned Rmd, optionally adding a header and reference section",
    )
    parser.add_argument("--no-header", action="store_true", help="Do not insert YAML header and reference section")
    parser.add_argument("--converter", choices=CONVERTER_NAMES, default=None, help="HTML-to-markdown backend")
    parser.add_argument(
        "--strict-math",
        action="store_true",
        default=None,
        help="Fail on unbalanced math delimiters instead of leaving them unprocessed",
    )
    parser.add_argument("input", nargs="?", default=None, help="Input HTML file")
    parser.add_argument("output", nargs="?", default=None, help="Output Rmd file (default: input with .Rmd)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level, format="%(message)s")

        converter = get_converter(args.converter or settings.converter, settings)
        converter.ensure_available()

        if not args.input:
            print("Error: missing input file.", file=sys.stderr)
            parser.print_usage(sys.stderr)
            return 1
        input_path = Path(args.input)
        if not input_path.is_file():
            print(f"Error: input file '{input_path}' not found.", file=sys.stderr)
            parser.print_usage(sys.stderr)
            return 1

        result = convert_file(
            input_path,
            Path(args.output) if args.output else None,
            add_header=not args.no_header,
            converter=converter,
            settings=settings,
            strict_math=args.strict_math,
        )
    except Html2RmdError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f" Converted {result.input_path} → {result.output_path}")
    if not result.header_added:
        print("   (Header and reference section omitted)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
