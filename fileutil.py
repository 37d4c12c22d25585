import os
import pathlib


BANK_EXTENSIONS = (".bnk",)


def to_posix(path: str):
    return pathlib.PurePath(path).as_posix()


def list_bank_files(path: str = ".") -> list[str]:
    """
    @return
    - Every soundbank file under `path` in POSIX form, sorted. A file path is
    returned as is.
    """
    if os.path.isfile(path):
        return [to_posix(path)]
    banks: list[str] = []
    for dirpath, _, filenames in os.walk(path):
        for filename in filenames:
            _, ext = os.path.splitext(filename)
            if ext.lower() in BANK_EXTENSIONS:
                banks.append(to_posix(os.path.join(dirpath, filename)))
    banks.sort()
    return banks
