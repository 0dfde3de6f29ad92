import asyncio
import logging
from pathlib import PurePosixPath
from typing import AsyncIterator, List, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from starlette.datastructures import QueryParams

from dockerd.domain.errors import DockerdError
from dockerd.services.dispatcher import Dispatcher
from dockerd.services.streams import QueueOutput

logger = logging.getLogger(__name__)

router = APIRouter(tags=["commands"])


class RequestInput:
    """The request body as a command's input stream."""
    def __init__(self, request: Request):
        self._chunks = request.stream()
        self._pending = b""
        self.closed = False

    async def read(self, n: int = -1) -> bytes:
        if self.closed:
            return b""
        if not self._pending:
            try:
                self._pending = await self._chunks.__anext__()
            except StopAsyncIteration:
                return b""
        if n < 0:
            n = len(self._pending)
        data, self._pending = self._pending[:n], self._pending[n:]
        return data

    def close(self) -> None:
        self.closed = True


def url_to_call(path: str, query: QueryParams, arg_key: str = "q") -> Tuple[str, List[str]]:
    """Command name from the last path segment, arguments from repeated `arg_key`."""
    return PurePosixPath("/" + path).name, query.getlist(arg_key)


async def _serve(dispatcher: Dispatcher, name: str, args: List[str], request: Request) -> AsyncIterator[bytes]:
    output = QueueOutput()

    async def call():
        try:
            await dispatcher.dispatch(name, RequestInput(request), output, args)
        except DockerdError as exc:
            logger.warning("docker %s failed: %s", name, exc, extra={"command": name})
            await output.write(f"Error: {exc}\n".encode())
        finally:
            await output.close()

    task = asyncio.create_task(call())
    async for chunk in output:
        yield chunk
    await task


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST"],
    summary="Run a command",
    description="The last path segment names the command, each `q` query parameter is one argument. "
                "Output is streamed as plain text; failures end it with an `Error: ...` line.",
)
async def call_command(path: str, request: Request):
    settings = request.app.state.settings
    dispatcher: Dispatcher = request.app.state.dispatcher
    name, args = url_to_call(path, request.query_params, settings.ARG_URL_KEY)
    return StreamingResponse(
        _serve(dispatcher, name, args, request),
        media_type="text/plain; charset=utf-8",
    )
