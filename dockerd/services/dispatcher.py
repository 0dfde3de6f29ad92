import logging
from typing import Dict, Sequence

from dockerd.domain.errors import NoSuchCommand
from dockerd.domain.ports import Handler, InputStream, OutputStream
from dockerd.services.commands import Commands

logger = logging.getLogger(__name__)

SUMMARY = [
    ("run", "Run a command in a container"),
    ("clone", "Duplicate a container"),
    ("list", "Display a list of containers"),
    ("layers", "Display a list of layers"),
    ("get", "Download a layer from a remote location"),
    ("put", "Upload a layer"),
    ("export", "Extract changes to a container's filesystem into a new layer"),
    ("help", "Show this summary, or the usage of one command"),
]


def normalize(name: str) -> str:
    return name[:1].upper() + name[1:].lower()


class Dispatcher:
    """Routes command name -> handler. Explicit table, no attribute lookup."""

    def __init__(self, commands: Commands):
        self.commands = commands
        # every command name is listed here and nowhere else
        self._handlers: Dict[str, Handler] = {
            "Help": self.help,
            "Layers": commands.layers,
            "Get": commands.get,
            "Put": commands.put,
            "Export": commands.export,
            "Run": commands.run,
            "Clone": commands.clone,
            "List": commands.list_containers,
        }

    @property
    def names(self) -> list[str]:
        return [name.lower() for name in self._handlers]

    def resolve(self, name: str) -> Handler | None:
        return self._handlers.get(normalize(name))

    async def invoke(
        self,
        handler: Handler,
        stdin: InputStream,
        stdout: OutputStream,
        args: Sequence[str],
    ) -> None:
        await handler(stdin, stdout, list(args))

    async def dispatch(
        self,
        name: str,
        stdin: InputStream,
        stdout: OutputStream,
        args: Sequence[str],
    ) -> None:
        """
        Resolve name and invoke its handler.

        An empty name shows the summary. Raises NoSuchCommand for an unknown
        name and lets handler failures propagate; callers decide how to render
        either.
        """
        logger.info("docker %s", " ".join([name, *args]).strip(), extra={"command": name})
        if not name:
            await self.invoke(self.help, stdin, stdout, [])
            return
        handler = self.resolve(name)
        if handler is None:
            raise NoSuchCommand(name)
        await self.invoke(handler, stdin, stdout, args)

    async def help(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        if not args:
            lines = [
                "Usage: docker COMMAND [arg...]\n",
                "\n",
                "A self-sufficient runtime for linux containers.\n",
                "\n",
                "Commands:\n",
            ]
            lines += [f"    {name:<10.10}{description}\n" for name, description in SUMMARY]
            await stdout.write("".join(lines).encode())
            return

        handler = self.resolve(args[0])
        if handler is None:
            raise NoSuchCommand(args[0])
        if handler == self.help:
            await self.help(stdin, stdout, [])
            return
        await self.invoke(handler, stdin, stdout, ["--help"])
