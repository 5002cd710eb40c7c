#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Command-line front end: hlclone SOURCE... -d DEST"""

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from core import clone
from link_index import verify_clone
from logger_utils import enable_console_logging, get_logger
from report import render_results, summarize

logger = get_logger("hlclone.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hlclone",
        description="Clone directory trees by hardlinking every file (like 'cp -al').",
    )
    p.add_argument("sources", nargs="+", metavar="SOURCE", help="Source directories to clone.")
    p.add_argument(
        "-d", "--dest",
        dest="destination",
        required=True,
        help="Existing directory that receives DEST/<source name> for each source.",
    )
    p.add_argument(
        "-j", "--jobs",
        type=int,
        default=None,
        help="Number of sources cloned in parallel (default: CPU count).",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every created link to the console.",
    )
    p.add_argument(
        "--verify",
        action="store_true",
        help="After cloning, check that every file shares its inode with the source.",
    )
    p.add_argument(
        "--max-failures",
        type=int,
        default=50,
        help="Failures listed per source (0 for all).",
    )
    return p


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.jobs is not None and args.jobs < 1:
        parser.error("--jobs must be at least 1")
    console = console or Console()
    if args.verbose:
        enable_console_logging(logging.INFO)

    cancel_event = threading.Event()

    def request_cancel(signum, frame):
        logger.warning("Interrupt received, cancelling remaining entries.")
        cancel_event.set()

    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGINT, request_cancel)
    try:
        results = clone(args.sources, args.destination, cancel_event=cancel_event, max_workers=args.jobs)
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    console.print(render_results(results, failure_limit=args.max_failures))
    console.print(summarize(results), style="green" if all(r.ok for r in results) else "red", markup=False)

    verify_failed = False
    if args.verify:
        for r in results:
            if r.aborted or not r.target.is_dir():
                continue
            problems = verify_clone(r.source, r.target)
            for problem in problems:
                console.print(Text.assemble(("verify ", "yellow"), f"{r.source.name}/{problem}"))
            verify_failed = verify_failed or bool(problems)

    if cancel_event.is_set():
        return EXIT_CANCELLED
    if verify_failed or not all(r.ok for r in results):
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
