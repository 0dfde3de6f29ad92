import asyncio
import io
from typing import AsyncIterator, BinaryIO, List


class EmptyInput:
    """An input stream that is already at end of stream."""
    def __init__(self):
        self.closed = False

    async def read(self, n: int = -1) -> bytes:
        return b""

    def close(self) -> None:
        self.closed = True


class BufferInput:
    def __init__(self, data: bytes = b""):
        self._io = io.BytesIO(data)
        self.closed = False

    async def read(self, n: int = -1) -> bytes:
        if self.closed:
            return b""
        return self._io.read(n)

    def close(self) -> None:
        self.closed = True


class BufferOutput:
    """Collects everything written, for local callers and tests."""
    def __init__(self):
        self._chunks: List[bytes] = []

    async def write(self, data: bytes) -> None:
        self._chunks.append(bytes(data))

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)

    def text(self) -> str:
        return self.getvalue().decode("utf-8", errors="replace")


class QueueOutput:
    """
    Hands every write to a consumer as soon as it is made.

    Iterating yields chunks until close() is called, which is what lets an HTTP
    response show command output incrementally.
    """
    def __init__(self):
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        self.closed = False

    async def write(self, data: bytes) -> None:
        if self.closed:
            raise BrokenPipeError("output stream is closed")
        await self._queue.put(bytes(data))

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            await self._queue.put(None)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while (chunk := await self._queue.get()) is not None:
            yield chunk


class FileInput:
    """Reads a blocking binary file (e.g. the terminal) off the event loop."""
    def __init__(self, file: BinaryIO):
        self._file = file
        self.closed = False

    async def read(self, n: int = -1) -> bytes:
        if self.closed:
            return b""
        return await asyncio.to_thread(self._file.read, n)

    def close(self) -> None:
        # the underlying file belongs to the caller
        self.closed = True


class FileOutput:
    def __init__(self, file: BinaryIO):
        self._file = file

    async def write(self, data: bytes) -> None:
        await asyncio.to_thread(self._write_and_flush, data)

    def _write_and_flush(self, data: bytes) -> None:
        self._file.write(data)
        self._file.flush()
