import argparse
import asyncio
import logging
from typing import Sequence

from dockerd.core.config import Settings
from dockerd.domain.errors import InvalidArguments, NoLayersSpecified, NoSuchContainer
from dockerd.domain.ports import InputStream, OutputStream
from dockerd.services.arguments import CommandParser
from dockerd.services.formatting import format_containers, format_layer, format_layers
from dockerd.services.process_runner import ProcessRunner
from dockerd.services.registry import Registry

logger = logging.getLogger(__name__)


def layers_parser() -> CommandParser:
    parser = CommandParser("layers", "[OPTIONS] [NAME]", "Show available filesystem layers")
    parser.add_argument("-q", dest="quiet", action="store_true", help="Quiet mode")
    parser.add_argument("name", nargs="?")
    return parser


def get_parser() -> CommandParser:
    parser = CommandParser("get", "SOURCE", "Download a layer from a remote location")
    parser.add_argument("source", nargs="?")
    return parser


def put_parser() -> CommandParser:
    parser = CommandParser("put", "SOURCE", "Upload a layer")
    parser.add_argument("source", nargs="?")
    return parser


def export_parser() -> CommandParser:
    parser = CommandParser(
        "export", "CONTAINER LAYER",
        "Create a new layer from the changes on a container's filesystem",
    )
    parser.add_argument(
        "-s", dest="stream", action="store_true",
        help="Stream the new layer to the client instead of storing it on the docker",
    )
    parser.add_argument("container", nargs="?")
    parser.add_argument("layer", nargs="?")
    return parser


def run_parser() -> CommandParser:
    parser = CommandParser(
        "run", "-l LAYER [-l LAYER...] COMMAND [ARG...]", "Run a command in a container",
    )
    parser.add_argument(
        "-l", dest="layers", action="append", default=[], metavar="LAYER",
        help="Add a layer to the filesystem. Multiple layers are added in the order they are defined",
    )
    parser.add_argument("command", nargs="?")
    parser.add_argument("arguments", nargs=argparse.REMAINDER)
    return parser


def clone_parser() -> CommandParser:
    parser = CommandParser("clone", "[OPTIONS] CONTAINER_ID", "Duplicate a container")
    parser.add_argument(
        "-r", dest="reset", action="store_true",
        help="Reset: don't keep filesystem changes from the source container (the only mode available)",
    )
    parser.add_argument("container", nargs="?")
    return parser


def list_parser() -> CommandParser:
    return CommandParser("list", "", "Display a list of containers")


class Commands:
    """The handlers behind every command name except help."""

    def __init__(self, registry: Registry, runner: ProcessRunner, settings: Settings | None = None):
        self.registry = registry
        self.runner = runner
        self.settings = settings or Settings()

    async def layers(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = layers_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return

        layers = await self.registry.list_layers()
        if opts.name:
            layers = [layer for layer in layers if layer.name == opts.name]
        if opts.quiet:
            await stdout.write("".join(f"{layer.id}\n" for layer in layers).encode())
        else:
            await stdout.write(format_layers(layers).encode())

    async def get(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = get_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        if not opts.source:
            raise InvalidArguments("Not enough arguments")

        await stdout.write(f"Downloading from {opts.source}...\n".encode())
        await asyncio.sleep(self.settings.DOWNLOAD_DELAY)
        layer = await self.registry.add_layer(opts.source, "download")
        await stdout.write(f"New layer: {format_layer(layer)}\n".encode())

    async def put(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = put_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        if not opts.source:
            raise InvalidArguments("Not enough arguments")

        await asyncio.sleep(self.settings.UPLOAD_DELAY)
        layer = await self.registry.add_layer(opts.source, "upload")
        await stdout.write(f"New layer: {format_layer(layer)}\n".encode())

    async def export(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = export_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        if not opts.container or not opts.layer:
            raise InvalidArguments("Not enough arguments")

        container = await self.registry.get_container(opts.container)
        if container is None:
            raise NoSuchContainer(opts.container)
        # TODO: honour -s once layers carry content that can be streamed
        layer = await self.registry.add_layer(
            opts.layer, f"export:{container.id}", container.bytes_changed
        )
        await stdout.write(f"New layer: {format_layer(layer)}\n".encode())

    async def run(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = run_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        if not opts.layers:
            raise NoLayersSpecified()
        if not opts.command:
            raise InvalidArguments("No command specified")

        container = await self.registry.add_container(opts.command, opts.arguments, opts.layers)
        await self.runner.run(container, stdin, stdout)

    async def clone(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = clone_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        if not opts.container:
            raise InvalidArguments("Not enough arguments")

        source = await self.registry.get_container(opts.container)
        if source is None:
            raise NoSuchContainer(opts.container)
        container = await self.registry.add_container(
            source.command, source.arguments, [source.id]
        )
        logger.info("Cloned %s into %s", source.id, container.id)
        await self.runner.run(container, stdin, stdout)

    async def list_containers(self, stdin: InputStream, stdout: OutputStream, args: Sequence[str]) -> None:
        parser = list_parser()
        opts = parser.parse(args)
        if opts.show_help:
            await stdout.write(parser.help_text())
            return
        containers = await self.registry.list_containers()
        await stdout.write(format_containers(containers).encode())
