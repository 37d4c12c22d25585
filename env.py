import os

import fileutil

from const import REV_AUTO, REVISIONS
from log import logger


def get_revision_override() -> str | None:
    """
    @return
    - The revision named by BANKREADER_REVISION, None when unset or invalid
    """
    revision = os.environ.get("BANKREADER_REVISION")
    if revision == None or revision == "":
        return None
    if revision != REV_AUTO and revision not in REVISIONS:
        logger.warning(f"Ignoring unknown BANKREADER_REVISION value {revision}")
        return None
    return revision


def get_workers_override() -> int | None:
    workers = os.environ.get("BANKREADER_WORKERS")
    if workers == None or workers == "":
        return None
    try:
        value = int(workers)
    except ValueError:
        logger.warning(f"Ignoring non-integer BANKREADER_WORKERS value {workers}")
        return None
    return max(0, value)


def get_data_path():
    """
    @return
    - Directory scanned by default for soundbanks, POSIX form
    """
    location = os.environ.get("BANKREADER_DATA")
    return "" if location == None else fileutil.to_posix(location)


def set_data_path(path: str):
    if path != "" and os.path.exists(path):
        os.environ["BANKREADER_DATA"] = fileutil.to_posix(path)
