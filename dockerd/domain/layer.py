from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Layer:
    id: str
    name: str
    size: int
    source: str  # download / upload / export:<container-id>
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
