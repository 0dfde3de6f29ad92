import asyncio
import logging
from typing import Sequence

from dockerd.domain.container import Container, RunState
from dockerd.domain.errors import (
    AlreadyRunning,
    ProcessExitError,
    ProcessSpawnFailure,
    StreamCopyError,
)
from dockerd.domain.ports import InputStream, OutputStream, ProcessHandle, Spawner

logger = logging.getLogger(__name__)


async def spawn_process(command: str, arguments: Sequence[str]) -> ProcessHandle:
    return await asyncio.create_subprocess_exec(
        command,
        *arguments,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
    )


class ProcessRunner:
    """
    Runs a container's command as a child process and relays its output.

    A container runs at most once at a time. With relay_stdin off (the default)
    the caller's input is closed unread and the child sees end of input
    immediately, so every run is non-interactive.
    """
    def __init__(
        self,
        spawn: Spawner | None = None,
        *,
        relay_stdin: bool = False,
        chunk_size: int = 32 * 1024,
    ):
        self._spawn = spawn or spawn_process
        self.relay_stdin = relay_stdin
        self.chunk_size = chunk_size

    async def run(
        self,
        container: Container,
        stdin: InputStream,
        stdout: OutputStream,
    ) -> None:
        async with container.run_lock:
            if container.running:
                raise AlreadyRunning(container.id)
            container.running = True
            container.state = RunState.STARTING

        try:
            await self._execute(container, stdin, stdout)
        except Exception:
            container.state = RunState.FAILED
            raise
        else:
            container.state = RunState.COMPLETED
        finally:
            container.running = False
            logger.debug(
                "Container %s is %s", container.id, container.state.value,
                extra={"container_id": container.id},
            )

    # -------------------------------
    # Internal
    # -------------------------------
    async def _execute(
        self,
        container: Container,
        stdin: InputStream,
        stdout: OutputStream,
    ) -> None:
        try:
            process = await self._spawn(container.command, container.arguments)
        except OSError as exc:
            stdin.close()
            raise ProcessSpawnFailure(f"{container.command}: {exc.strerror or exc}") from exc

        container.state = RunState.RUNNING
        copy_out = asyncio.create_task(self._copy_output(process, stdout))
        copy_in = asyncio.create_task(self._handle_input(process, stdin))

        # Reap the child before trusting the output copy: the pipe can keep
        # delivering data until the process is really gone.
        returncode = await process.wait()
        container.exit_code = returncode
        if returncode != 0:
            # drained so nothing is written after we return, results ignored
            await asyncio.gather(copy_in, copy_out, return_exceptions=True)
            logger.warning(
                "Container %s exited with %s", container.id, returncode,
                extra={"container_id": container.id, "returncode": returncode},
            )
            raise ProcessExitError(returncode)

        await copy_in
        await copy_out

    async def _copy_output(self, process: ProcessHandle, sink: OutputStream) -> None:
        try:
            while chunk := await process.stdout.read(self.chunk_size):
                await sink.write(chunk)
        except OSError as exc:
            raise StreamCopyError(f"output copy failed: {exc}") from exc

    async def _handle_input(self, process: ProcessHandle, source: InputStream) -> None:
        if self.relay_stdin:
            await self._relay_input(process, source)
            return
        source.close()
        process.stdin.close()

    async def _relay_input(self, process: ProcessHandle, source: InputStream) -> None:
        try:
            while chunk := await source.read(self.chunk_size):
                process.stdin.write(chunk)
                await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # child stopped reading, the rest of the input is dropped
            pass
        except OSError as exc:
            raise StreamCopyError(f"input copy failed: {exc}") from exc
        finally:
            source.close()
            process.stdin.close()
