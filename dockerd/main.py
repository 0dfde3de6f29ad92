import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dockerd.api import commands
from dockerd.core.config import Settings
from dockerd.core.logging import setup_logging
from dockerd.domain.ports import SizeEstimator, Spawner
from dockerd.services.commands import Commands
from dockerd.services.dispatcher import Dispatcher
from dockerd.services.process_runner import ProcessRunner
from dockerd.services.registry import Registry

logger = logging.getLogger(__name__)


def build_dispatcher(
    settings: Settings,
    *,
    estimator: SizeEstimator | None = None,
    spawn: Spawner | None = None,
) -> Dispatcher:
    registry = Registry(estimator)
    runner = ProcessRunner(
        spawn,
        relay_stdin=settings.RELAY_STDIN,
        chunk_size=settings.COPY_CHUNK_SIZE,
    )
    return Dispatcher(Commands(registry, runner, settings))


def create_app(settings: Settings | None = None, dispatcher: Dispatcher | None = None) -> FastAPI:
    settings = settings or Settings()
    dispatcher = dispatcher or build_dispatcher(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
        logger.info("dockerd ready, commands: %s", ", ".join(dispatcher.names))
        yield
        logger.info("dockerd shutting down")

    app = FastAPI(title="dockerd", lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.include_router(commands.router)
    return app


app = create_app()
