"""
CLI Command Module - Implements the execution logic for the CLI commands
"""

import argparse
import json
import struct
import sys

from typing import Any, TextIO

import env
import fileutil

from config import Config
from const import REV_AUTO, hirc_type_name
from core import SoundBank
from errors import BankReaderError
from linking import actor_mixer_view, master_mixer_view, music_view, serialize_view
from log import logger
from path_tree import PathNode


def to_jsonable(value: Any) -> Any:
    """
    Turn a decoded object into plain JSON data. Objects become their
    attribute dicts, bytes become hex strings.
    """
    if value == None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, PathNode):
        # Children are listed in the record table already
        fields = {k: v for k, v in vars(value).items() if k != "children"}
        return {"node": True, **to_jsonable(fields)}
    if hasattr(value, "__dict__"):
        return {k: to_jsonable(v) for k, v in vars(value).items()}
    return str(value)


class CLICommands:
    """CLI Command Executor"""

    def __init__(self, config: Config, out: TextIO | None = None):
        self.config = config
        self.out = out if out != None else sys.stdout

        # Command mapping
        self.commands = {
            "info": self.info,
            "dump": self.dump,
            "tree": self.tree,
            "strings": self.strings,
            "scan": self.scan,
        }

    def execute_command(self, command: str, args: argparse.Namespace) -> bool:
        if command not in self.commands:
            logger.error(f"Unknown command: {command}")
            return False

        logger.info(f"Executing command: {command}")
        return self.commands[command](args)

    def _print(self, *values):
        print(*values, file=self.out)

    def _decode_options(self, args: argparse.Namespace) -> tuple[str, int, bool]:
        revision = args.revision if args.revision != None else self.config.revision
        workers = args.workers if args.workers != None else self.config.workers
        strict = args.strict or self.config.strict
        return revision or REV_AUTO, max(0, workers), strict

    def _load(self, path: str, args: argparse.Namespace) -> SoundBank:
        revision, workers, strict = self._decode_options(args)
        bank = SoundBank.from_file(path, revision, workers, strict)
        self.config.add_recent_file(fileutil.to_posix(path))
        return bank

    def info(self, args: argparse.Namespace) -> bool:
        bank = self._load(args.bank, args)

        self._print(f"Bank: {bank.get_name()}")
        if bank.header != None:
            self._print(f"Version: {bank.header.version:#x}")
            self._print(f"Bank ID: {bank.header.bank_id}")
        self._print(f"Revision: {bank.revision}")

        self._print("Chunks:")
        for chunk in bank.chunks:
            self._print(f"  {chunk.tag} {len(chunk)} bytes @ {chunk.offset}")

        self._print(f"Media files: {len(bank.media)}")
        self._print(f"Names: {len(bank.strings)}")

        if bank.hierarchy != None:
            self._print(f"Objects: {len(bank.hierarchy)}")
            for kind, count in bank.hierarchy.kind_counts().items():
                self._print(f"  {hirc_type_name(kind)}: {count}")
            self._print(f"Kept opaque: {bank.hierarchy.fallback_count()}")
        return True

    def dump(self, args: argparse.Namespace) -> bool:
        bank = self._load(args.bank, args)
        if bank.hierarchy == None:
            logger.error(f"{args.bank} has no HIRC chunk")
            return False

        entries = bank.hierarchy.get_entries()
        if args.kind:
            entries = [e for e in entries if e.hierarchy_type in args.kind]

        dumped = []
        for entry in entries:
            data = to_jsonable(entry)
            data["hierarchy_type"] = entry.hierarchy_type
            data["type_name"] = entry.get_type_name()
            if entry.hierarchy_id != None:
                name = bank.name_of(entry.hierarchy_id)
                if name != None:
                    data["name"] = name
            dumped.append(data)

        text = json.dumps(dumped, indent=2)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text)
        else:
            self._print(text)
        return True

    def tree(self, args: argparse.Namespace) -> bool:
        bank = self._load(args.bank, args)
        if bank.hierarchy == None:
            logger.error(f"{args.bank} has no HIRC chunk")
            return False

        match args.view:
            case "master-mixer":
                view = master_mixer_view(bank.hierarchy)
            case "music":
                view = music_view(bank.hierarchy)
            case _:
                view = actor_mixer_view(bank.hierarchy)

        self._print(serialize_view(view, bank.hierarchy, bank.strings.entries))
        return True

    def strings(self, args: argparse.Namespace) -> bool:
        bank = self._load(args.bank, args)
        for entry_id, name in bank.strings.entries.items():
            self._print(f"{entry_id}\t{name}")
        return True

    def scan(self, args: argparse.Namespace) -> bool:
        path = args.path if args.path else env.get_data_path()
        if not path:
            logger.error("No directory given and BANKREADER_DATA is not set")
            return False

        banks = fileutil.list_bank_files(path)
        failed = 0
        fallbacks = 0
        for bank_path in banks:
            try:
                bank = self._load(bank_path, args)
            except (BankReaderError, struct.error, ValueError) as e:
                failed += 1
                self._print(f"{bank_path}: FAILED {e}")
                continue
            if bank.hierarchy == None:
                self._print(f"{bank_path}: no HIRC")
                continue
            count = bank.hierarchy.fallback_count()
            fallbacks += count
            self._print(
                f"{bank_path}: {len(bank.hierarchy)} objects, {count} kept opaque"
            )
            for diagnostic in bank.hierarchy.diagnostics:
                if diagnostic.reason != "unknown kind":
                    self._print(f"  {diagnostic}")

        self._print(
            f"Scanned {len(banks)} banks, {failed} failed, "
            f"{fallbacks} objects kept opaque"
        )
        return failed == 0
