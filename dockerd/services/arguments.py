import argparse
from typing import Sequence

from dockerd.domain.errors import InvalidArguments


class CommandParser(argparse.ArgumentParser):
    """
    argparse for a command's argument list.

    Never exits or prints: parse errors raise InvalidArguments, and -h/--help
    only sets `show_help` so the handler can write help_text() to its own output.
    """
    def __init__(self, name: str, signature: str, description: str):
        super().__init__(
            prog=f"docker {name}",
            usage=f"docker {name} {signature}",
            description=description,
            add_help=False,
            allow_abbrev=False,
            exit_on_error=False,
        )
        self.add_argument(
            "-h", "--help", dest="show_help", action="store_true",
            help="Show this message",
        )

    def parse(self, args: Sequence[str]) -> argparse.Namespace:
        try:
            return self.parse_args(list(args))
        except argparse.ArgumentError as exc:
            raise InvalidArguments(str(exc)) from exc

    def error(self, message: str):
        raise InvalidArguments(message)

    def exit(self, status: int = 0, message: str | None = None):
        raise InvalidArguments(message or "invalid arguments")

    def help_text(self) -> bytes:
        return ("\n" + self.format_help() + "\n").encode()
