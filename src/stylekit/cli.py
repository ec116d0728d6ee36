"""Command line for building, watching and previewing components.

Usage:
    stylekit build [--components DIR] [--stylesheet FILE] [--prefix P]
    stylekit watch [--interval SECONDS]
    stylekit rewrite TEMPLATE [--lenient]

Defaults come from ``STYLEKIT_*`` environment variables (see
``stylekit.config``); flags override them.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable, Sequence
from typing import TextIO

from stylekit import terminal
from stylekit.compiler import CompilationResult, ComponentCompiler
from stylekit.config import ComponentConfig
from stylekit.exceptions import ComponentError
from stylekit.preprocessor import rewrite_file

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stylekit", description="Compile styled components")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every loaded component")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--components", help="Definitions directory")
    common.add_argument("--stylesheet", help="Stylesheet output path")
    common.add_argument("--prefix", help="CSS class prefix")
    common.add_argument("--extension", help="Definition file extension")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("build", parents=[common], help="Compile components once")

    watch = sub.add_parser("watch", parents=[common], help="Recompile when definitions change")
    watch.add_argument("--interval", type=float, default=1.0, help="Polling interval in seconds")

    rw = sub.add_parser("rewrite", help="Print a template with component tags rewritten")
    rw.add_argument("template", help="Template file")
    rw.add_argument("--lenient", action="store_true", help="Do not check tag nesting")
    return parser


def _config(args: argparse.Namespace) -> ComponentConfig:
    return ComponentConfig.from_environ().override(
        definitions_dir=args.components,
        stylesheet_path=args.stylesheet,
        class_prefix=args.prefix,
        extension=args.extension,
    )


def _summary(result: CompilationResult) -> str:
    names = ", ".join(d.name for d in result.descriptors) or "none"
    return terminal.success(f"Compiled {len(result.descriptors)} component(s)") + f": {names}"


def watch(
    compiler: ComponentCompiler,
    interval: float,
    *,
    cycles: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    out: TextIO | None = None,
) -> None:
    """Poll for definition changes and recompile when stale.

    A failing pass is reported and the previous registry and stylesheet
    stay in place until the next change compiles cleanly.
    """
    out = out or sys.stderr
    compiler.should_recompile()
    count = 0
    while cycles is None or count < cycles:
        sleep(interval)
        count += 1
        try:
            if compiler.should_recompile():
                print(_summary(compiler.build()), file=out)
        except ComponentError as exc:
            logger.debug("Recompilation failed", exc_info=True)
            print(exc.format_compact(), file=out)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "rewrite":
            print(rewrite_file(args.template, strict=not args.lenient), end="")
            return 0

        compiler = ComponentCompiler.from_config(_config(args))
        print(_summary(compiler.build()), file=sys.stderr)
        if args.command == "watch":
            try:
                watch(compiler, args.interval)
            except KeyboardInterrupt:
                print(terminal.dim_text("Stopped watching"), file=sys.stderr)
        return 0
    except ComponentError as exc:
        print(exc.format_compact(), file=sys.stderr)
        return 1
    except OSError as exc:
        print(terminal.format_error_header(None, str(exc)), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
