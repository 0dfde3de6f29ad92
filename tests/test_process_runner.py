import asyncio
from unittest.mock import AsyncMock

import pytest

from dockerd.domain.container import Container, RunState
from dockerd.domain.errors import (
    AlreadyRunning,
    ProcessExitError,
    ProcessSpawnFailure,
    StreamCopyError,
)
from dockerd.domain.layer import Layer
from dockerd.services.process_runner import ProcessRunner, spawn_process
from dockerd.services.streams import BufferInput, BufferOutput, EmptyInput


def make_container(command, *arguments):
    layer = Layer(id="0123456789abcdef", name="base", size=1, source="download")
    return Container(id="fedcba9876543210", command=command, arguments=list(arguments), layers=[layer])


class CountingSpawner:
    def __init__(self):
        self.calls = []

    async def __call__(self, command, arguments):
        self.calls.append((command, list(arguments)))
        return await spawn_process(command, arguments)


class FailingOutput:
    async def write(self, data):
        raise BrokenPipeError("client went away")


@pytest.mark.asyncio
async def test_run_completes_and_releases_flag():
    container = make_container("true")
    runner = ProcessRunner()

    await runner.run(container, EmptyInput(), BufferOutput())

    assert container.running is False
    assert container.state == RunState.COMPLETED
    assert container.exit_code == 0


@pytest.mark.asyncio
async def test_run_streams_output():
    container = make_container("echo", "hello", "world")
    output = BufferOutput()

    await ProcessRunner().run(container, EmptyInput(), output)

    assert output.text() == "hello world\n"


@pytest.mark.asyncio
async def test_non_zero_exit_is_reported_and_flag_released():
    container = make_container("false")

    with pytest.raises(ProcessExitError) as exc_info:
        await ProcessRunner().run(container, EmptyInput(), BufferOutput())

    assert exc_info.value.returncode == 1
    assert str(exc_info.value) == "exit status 1"
    assert container.running is False
    assert container.state == RunState.FAILED


@pytest.mark.asyncio
async def test_output_before_failure_is_delivered():
    container = make_container("sh", "-c", "echo partial; exit 3")
    output = BufferOutput()

    with pytest.raises(ProcessExitError):
        await ProcessRunner().run(container, EmptyInput(), output)

    assert output.text() == "partial\n"


@pytest.mark.asyncio
async def test_stdin_is_discarded_by_default():
    container = make_container("cat")
    stdin = BufferInput(b"should never arrive")
    output = BufferOutput()

    await ProcessRunner().run(container, stdin, output)

    assert output.getvalue() == b""
    assert stdin.closed


@pytest.mark.asyncio
async def test_stdin_relay_when_enabled():
    container = make_container("cat")
    stdin = BufferInput(b"piped through")
    output = BufferOutput()

    await ProcessRunner(relay_stdin=True).run(container, stdin, output)

    assert output.getvalue() == b"piped through"
    assert stdin.closed


@pytest.mark.asyncio
async def test_second_run_of_running_container_is_rejected():
    container = make_container("sleep", "0.5")
    spawner = CountingSpawner()
    runner = ProcessRunner(spawner)

    first = asyncio.create_task(runner.run(container, EmptyInput(), BufferOutput()))
    while container.state != RunState.RUNNING:
        await asyncio.sleep(0.01)

    with pytest.raises(AlreadyRunning):
        await runner.run(container, EmptyInput(), BufferOutput())

    assert container.running is True
    assert len(spawner.calls) == 1

    await first
    assert container.running is False
    assert container.state == RunState.COMPLETED


@pytest.mark.asyncio
async def test_rejected_run_does_not_spawn():
    container = make_container("true")
    container.running = True
    spawn = AsyncMock()

    with pytest.raises(AlreadyRunning):
        await ProcessRunner(spawn).run(container, EmptyInput(), BufferOutput())

    spawn.assert_not_awaited()
    assert container.running is True
    assert container.state == RunState.IDLE


@pytest.mark.asyncio
async def test_spawn_failure_releases_flag():
    container = make_container("/nonexistent/definitely-not-a-binary")
    stdin = EmptyInput()

    with pytest.raises(ProcessSpawnFailure):
        await ProcessRunner().run(container, stdin, BufferOutput())

    assert container.running is False
    assert container.state == RunState.FAILED
    assert stdin.closed


@pytest.mark.asyncio
async def test_copy_error_after_clean_exit_is_reported():
    container = make_container("echo", "hi")

    with pytest.raises(StreamCopyError):
        await ProcessRunner().run(container, EmptyInput(), FailingOutput())

    assert container.running is False
    assert container.exit_code == 0
    assert container.state == RunState.FAILED


@pytest.mark.asyncio
async def test_container_can_run_again_after_completion():
    container = make_container("echo", "again")
    runner = ProcessRunner()
    output = BufferOutput()

    await runner.run(container, EmptyInput(), output)
    await runner.run(container, EmptyInput(), output)

    assert output.text() == "again\nagain\n"
