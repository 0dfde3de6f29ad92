import pytest

from dockerd.core.config import Settings
from dockerd.services.commands import Commands
from dockerd.services.dispatcher import Dispatcher
from dockerd.services.process_runner import ProcessRunner
from dockerd.services.registry import Registry


class FixedSizeEstimator:
    def __init__(self, layer_size=1024 * 1024, files_changed=3, bytes_changed=2048):
        self._layer_size = layer_size
        self._files_changed = files_changed
        self._bytes_changed = bytes_changed

    def layer_size(self):
        return self._layer_size

    def files_changed(self):
        return self._files_changed

    def bytes_changed(self):
        return self._bytes_changed


@pytest.fixture
def settings():
    return Settings(DOWNLOAD_DELAY=0, UPLOAD_DELAY=0)


@pytest.fixture
def estimator():
    return FixedSizeEstimator()


@pytest.fixture
def registry(estimator):
    return Registry(estimator)


@pytest.fixture
def runner():
    return ProcessRunner()


@pytest.fixture
def dispatcher(registry, runner, settings):
    return Dispatcher(Commands(registry, runner, settings))
