#!/usr/bin/env python3
"""
Command line interface: miniSEED to Enhanced SYNC listing
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from esynclist.core import (
    EsyncConfig,
    compare_tracelist,
    format_result,
    write_listing,
)
from esynclist.core.exceptions import ConfigError, CoreError
from esynclist.io.load import expand_inputs, load_tracelist

PACKAGE = "esynclist"
VERSION = "0.9"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISMATCH = 3

logger = logging.getLogger(PACKAGE)


def configure_logging(verbose: int) -> None:
    """Diagnostics go to stderr; the listing itself goes to stdout."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PACKAGE,
        description="miniSEED to Enhanced SYNC listing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog=(
            "time format: 'YYYY[,DDD,HH,MM,SS,FFFFFF]' delimiters: [,:.]\n"
            "             or ISO 'YYYY-MM-DDThh:mm:ss.ffffff'\n"
            "Patterns are applied to: 'FDSN:NET_STA_LOC_BAND_SOURCE_SS'"
        ),
    )

    general = parser.add_argument_group("General options")
    general.add_argument("-V", "--version", action="version",
                         version=f"{PACKAGE} version: {VERSION}")
    general.add_argument("-v", dest="verbose", action="count", default=0,
                         help="Be more verbose, multiple flags can be used")
    general.add_argument("-D", dest="dcc", metavar="DCCID",
                         help="Specify the DCC identifier for SYNC header")
    general.add_argument("-C", dest="compare", action="store_true",
                         help="Compare sample values of time series, to diagnose mismatches")
    general.add_argument("--no-data", dest="no_data", action="store_true",
                         help="Do not decode samples; no MD5 digests are produced")

    selection = parser.add_argument_group("Data selection options")
    selection.add_argument("-ts", dest="starttime", metavar="TIME",
                           help="Limit to samples that start on or after time")
    selection.add_argument("-te", dest="endtime", metavar="TIME",
                           help="Limit to samples that end on or before time")
    selection.add_argument("-m", dest="match", metavar="MATCH",
                           help="Limit to records containing the specified pattern")
    selection.add_argument("-r", dest="reject", metavar="REJECT",
                           help="Limit to records not containing the specified pattern")
    selection.add_argument("-tt", dest="timetol", metavar="SECS", type=float,
                           help="Time tolerance for continuous traces, -1 for 1/2 sample period")
    selection.add_argument("-rt", dest="sampratetol", metavar="DIFF", type=float,
                           help="Sample rate tolerance for continuous traces")

    parser.add_argument("inputs", nargs="*", metavar="file",
                        help="File(s) of miniSEED records, list files prefixed with '@'")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the esynclist command"""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = EsyncConfig.from_args(args, expand_inputs(args.inputs))
    except ConfigError as e:
        logger.error("%s, try %s -h for usage", e, PACKAGE)
        return EXIT_ERROR

    logger.info("%s version: %s", PACKAGE, VERSION)

    try:
        tracelist = load_tracelist(config)
        write_listing(tracelist, sys.stdout, config.dcc_label)
    except CoreError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    if config.compare:
        all_match, results = compare_tracelist(tracelist)
        for result in results:
            lines = format_result(result)
            if result.diagnostic:
                for line in lines:
                    logger.warning("%s", line)
                continue
            for line in lines:
                sys.stdout.write(line + "\n")
        if not all_match:
            return EXIT_MISMATCH

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
