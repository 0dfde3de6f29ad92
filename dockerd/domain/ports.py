from typing import Awaitable, Callable, Protocol, Sequence


class InputStream(Protocol):
    async def read(self, n: int = -1) -> bytes:
        """Return up to n bytes, b"" at end of stream."""
        ...

    def close(self) -> None: ...


class OutputStream(Protocol):
    async def write(self, data: bytes) -> None:
        """Deliver data to the caller. Raises OSError when the sink is gone."""
        ...


Handler = Callable[[InputStream, OutputStream, Sequence[str]], Awaitable[None]]


class ProcessStdin(Protocol):
    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def close(self) -> None: ...


class ProcessStdout(Protocol):
    async def read(self, n: int = -1) -> bytes: ...


class ProcessHandle(Protocol):
    """What a spawned child exposes: its input sink, output source and exit."""
    stdin: ProcessStdin
    stdout: ProcessStdout

    async def wait(self) -> int: ...


class Spawner(Protocol):
    async def __call__(self, command: str, arguments: Sequence[str]) -> ProcessHandle:
        """Start command. Raises OSError when it cannot be started."""
        ...


class SizeEstimator(Protocol):
    def layer_size(self) -> int: ...

    def files_changed(self) -> int: ...

    def bytes_changed(self) -> int: ...
