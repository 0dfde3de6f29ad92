import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from dockerd.domain.layer import Layer


class RunState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Container:
    id: str
    command: str
    arguments: list[str]
    layers: list[Layer]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    files_changed: int = 0
    bytes_changed: int = 0
    running: bool = False
    state: RunState = RunState.IDLE
    exit_code: int | None = None
    # guards the idle -> starting transition
    run_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False, compare=False
    )

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.arguments])
