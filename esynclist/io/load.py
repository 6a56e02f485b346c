# esynclist/io/load.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from esynclist.core import EsyncConfig, TraceList, admit, trim_tracelist
from esynclist.core.exceptions import ConfigError
from esynclist.io.merge import RecordMerger, TraceListMerger
from esynclist.io.mseed_reader import ObspyMiniseedReader, RecordReader

logger = logging.getLogger(__name__)


def read_list_file(path: str) -> list[str]:
    """File names listed one per line; blank and '#' comment lines are skipped."""
    logger.info("Reading list file '%s'", path)
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ConfigError(f"Cannot open list file {path}: {e}") from e

    files = []
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        logger.debug("Adding '%s' from list file", line)
        files.append(line)
    return files


def expand_inputs(inputs: Iterable[str]) -> list[str]:
    """Expand '@listfile' arguments into the files they name."""
    files: list[str] = []
    for item in inputs:
        if item.startswith("@"):
            files.extend(read_list_file(item[1:]))
        else:
            files.append(item)
    return files


def load_tracelist(
    config: EsyncConfig,
    reader: RecordReader | None = None,
    merger: RecordMerger | None = None,
) -> TraceList:
    """
    Read every configured file, admit records matching the selection and
    fold them into a TraceList. Segments are trimmed to the selection
    window afterwards.
    """
    reader = reader or ObspyMiniseedReader(unpack_data=config.unpack_data)
    merger = merger or TraceListMerger()
    tracelist = TraceList()

    for path in config.files:
        admitted = 0
        for record in reader.read(path):
            if not admit(record.start_ns, record.end_ns, record.sid, config.selection):
                continue
            merger.add(tracelist, record, config.tolerance)
            admitted += 1
        logger.info("Added %d records from %s", admitted, path)

    if config.selection.has_window:
        trim_tracelist(tracelist, config.selection, config.tolerance)

    return tracelist
