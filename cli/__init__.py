"""
Command line front end for the SoundBank reader.
"""

import argparse
import logging
import struct

from config import load_config
from const import REV_AUTO, REVISIONS
from errors import BankReaderError
from log import enable_verbose_mode, logger, set_log_level


class CLIMain:
    """CLI Main Controller"""

    def __init__(self, config_path: str = "config.pickle"):
        self.config_path = config_path
        self.commands = None

    def _lazy_init(self):
        if self.commands is None:
            from .commands import CLICommands

            config = load_config(self.config_path)
            if config == None:
                from config import Config
                config = Config()
            set_log_level(config.log_level)
            self.commands = CLICommands(config)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="bank_reader",
            description="SoundBank reader - CLI Mode",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Example usage:
  python bank_reader.py info Music.bnk
  python bank_reader.py dump Music.bnk --kind 0x0A
  python bank_reader.py tree Music.bnk --view music
  python bank_reader.py scan ./banks --revision 2019 --workers 4
            """,
        )

        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            "--revision",
            choices=(REV_AUTO,) + REVISIONS,
            default=None,
            help="Format revision (default: from config, then bank header)"
        )
        common.add_argument(
            "--workers", type=int, default=None,
            help="Decode objects on a thread pool of this size"
        )
        common.add_argument(
            "--strict", action="store_true",
            help="Fail on the first object that cannot be decoded"
        )
        common.add_argument(
            "--verbose", "-v", action="store_true", help="Verbose output"
        )

        subparsers = parser.add_subparsers(dest="mode", help="Command")

        info_parser = subparsers.add_parser(
            "info", parents=[common], help="Header, chunks and object counts"
        )
        info_parser.add_argument("bank", help="Path to a .bnk file")

        dump_parser = subparsers.add_parser(
            "dump", parents=[common], help="JSON dump of decoded objects"
        )
        dump_parser.add_argument("bank", help="Path to a .bnk file")
        dump_parser.add_argument(
            "--kind", type=lambda v: int(v, 0), action="append",
            help="Only dump objects of this kind (e.g. 0x0A), repeatable"
        )
        dump_parser.add_argument(
            "--output", "-o", help="Write the dump to this file"
        )

        tree_parser = subparsers.add_parser(
            "tree", parents=[common], help="Print a hierarchy view"
        )
        tree_parser.add_argument("bank", help="Path to a .bnk file")
        tree_parser.add_argument(
            "--view",
            choices=("master-mixer", "actor-mixer", "music"),
            default="actor-mixer"
        )

        strings_parser = subparsers.add_parser(
            "strings", parents=[common], help="Print the id to name table"
        )
        strings_parser.add_argument("bank", help="Path to a .bnk file")

        scan_parser = subparsers.add_parser(
            "scan", parents=[common],
            help="Decode every .bnk under a directory and report fallbacks"
        )
        scan_parser.add_argument(
            "path", nargs="?", default=None,
            help="Directory to scan (default: BANKREADER_DATA)"
        )

        parser.add_argument(
            "--version", action="version", version="SoundBank Reader CLI v1.0.0"
        )

        return parser

    def parse_arguments(self, argv: list[str] | None = None) -> argparse.Namespace:
        return self.build_parser().parse_args(argv)

    def run(self, args: argparse.Namespace) -> bool:
        self._lazy_init()
        assert self.commands != None
        success = self.commands.execute_command(args.mode, args)
        self.commands.config.save_config(self.config_path)
        return success


def main(argv: list[str] | None = None) -> int:
    """Main function"""
    cli = CLIMain()

    try:
        args = cli.parse_arguments(argv)

        if args.mode == None:
            cli.build_parser().print_help()
            return 1

        if args.verbose:
            enable_verbose_mode()
            set_log_level(logging.DEBUG)

        return 0 if cli.run(args) else 1

    except KeyboardInterrupt:
        logger.info("User interrupted")
        return 1
    except (BankReaderError, OSError, struct.error, ValueError) as e:
        logger.error(f"CLI execution error: {e}")
        return 1
