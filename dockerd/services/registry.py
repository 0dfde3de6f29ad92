import asyncio
import logging
from typing import Dict, List, Sequence

from dockerd.domain.container import Container
from dockerd.domain.errors import NoLayersSpecified, UnresolvedReference
from dockerd.domain.layer import Layer
from dockerd.domain.ports import SizeEstimator
from dockerd.services.estimator import RandomSizeEstimator
from dockerd.services.identity import IdentityGenerator

logger = logging.getLogger(__name__)


class Registry:
    """In-memory store of layers and containers keyed by id.

    Entries are only ever inserted. All map access goes through one lock.
    """
    def __init__(
        self,
        estimator: SizeEstimator | None = None,
        identity: IdentityGenerator | None = None,
    ):
        self.estimator = estimator or RandomSizeEstimator()
        self.identity = identity or IdentityGenerator()
        self._layers: Dict[str, Layer] = {}
        self._containers: Dict[str, Container] = {}
        self._lock = asyncio.Lock()

    # -------------------------------
    # Layers
    # -------------------------------
    async def add_layer(self, name: str, source: str, size: int | None = None) -> Layer:
        if not size:
            size = self.estimator.layer_size()
        layer = Layer(id=self.identity.new_id(), name=name, size=size, source=source)
        async with self._lock:
            self._layers[layer.id] = layer
        logger.info("New layer %s %s (%s)", layer.id, layer.name, layer.source)
        return layer

    async def get_layer(self, layer_id: str) -> Layer | None:
        async with self._lock:
            return self._layers.get(layer_id)

    async def find_layer_by_name(self, name: str) -> Layer | None:
        """First layer called name. Which one wins on duplicates is not defined."""
        async with self._lock:
            return self._find_layer_by_name(name)

    async def list_layers(self) -> List[Layer]:
        async with self._lock:
            return list(self._layers.values())

    # -------------------------------
    # Containers
    # -------------------------------
    async def add_container(
        self,
        command: str,
        arguments: Sequence[str],
        layer_refs: Sequence[str],
    ) -> Container:
        """
        Register a container over the layers named by layer_refs.

        Each ref is tried as a layer id, a layer name, then a container id whose
        layers are spliced in order. Nothing is registered if any ref misses.
        """
        async with self._lock:
            layers: List[Layer] = []
            for ref in layer_refs:
                layers.extend(self._resolve(ref))
            if not layers:
                raise NoLayersSpecified()

            container = Container(
                id=self.identity.new_id(),
                command=command,
                arguments=list(arguments),
                layers=layers,
                files_changed=self.estimator.files_changed(),
                bytes_changed=self.estimator.bytes_changed(),
            )
            self._containers[container.id] = container
        logger.info("New container %s: %s", container.id, container.command_line)
        return container

    async def get_container(self, container_id: str) -> Container | None:
        async with self._lock:
            return self._containers.get(container_id)

    async def list_containers(self) -> List[Container]:
        async with self._lock:
            return list(self._containers.values())

    #-----------------------------------------------------------------------------
    #  Internal methods, caller holds the lock
    #-----------------------------------------------------------------------------
    def _find_layer_by_name(self, name: str) -> Layer | None:
        return next((layer for layer in self._layers.values() if layer.name == name), None)

    def _resolve(self, ref: str) -> List[Layer]:
        layer = self._layers.get(ref) or self._find_layer_by_name(ref)
        if layer is not None:
            return [layer]
        source = self._containers.get(ref)
        if source is not None:
            return list(source.layers)
        raise UnresolvedReference(ref)
