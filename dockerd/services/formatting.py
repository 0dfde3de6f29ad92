from datetime import datetime, timedelta, timezone
from typing import Iterable

from dockerd.domain.container import Container
from dockerd.domain.layer import Layer

MB = 1024 * 1024


def human_duration(delta: timedelta) -> str:
    seconds = int(delta.total_seconds())
    if seconds < 1:
        return "Less than a second"
    if seconds < 60:
        return f"{seconds} seconds"
    minutes = seconds // 60
    if minutes == 1:
        return "About a minute"
    if minutes < 60:
        return f"{minutes} minutes"
    hours = minutes // 60
    if hours == 1:
        return "About an hour"
    if hours < 48:
        return f"{hours} hours"
    if hours < 24 * 7 * 2:
        return f"{hours // 24} days"
    if hours < 24 * 30 * 3:
        return f"{hours // 24 // 7} weeks"
    if hours < 24 * 365 * 2:
        return f"{hours // 24 // 30} months"
    return f"{hours // 24 // 365} years"


def format_size(size: int) -> str:
    return f"{size / MB:.1f}M"


def _ago(created_at: datetime, now: datetime | None) -> str:
    now = now or datetime.now(timezone.utc)
    return human_duration(now - created_at) + " ago"


def _table(rows: list[list[str]], padding: int = 3) -> str:
    """Left-aligned columns; the last column is never padded."""
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]) - 1)]
    lines = []
    for row in rows:
        cells = [cell.ljust(width + padding) for cell, width in zip(row, widths)]
        lines.append("".join(cells) + row[-1])
    return "\n".join(lines) + "\n"


def format_layer(layer: Layer) -> str:
    return f"{layer.id} {layer.name} {format_size(layer.size)}"


def format_layers(layers: Iterable[Layer], now: datetime | None = None) -> str:
    rows = [["ID", "NAME", "SIZE", "ADDED", "SOURCE"]]
    for layer in layers:
        rows.append([
            layer.id,
            layer.name,
            format_size(layer.size),
            _ago(layer.created_at, now),
            layer.source,
        ])
    return _table(rows)


def format_containers(containers: Iterable[Container], now: datetime | None = None) -> str:
    containers = list(containers)
    # CMD column is clipped to 50 characters
    width = max((len(c.command_line) for c in containers), default=0)
    width = min(max(width, 8), 50)

    rows = [["ID", "CMD", "STATUS", "CREATED", "CHANGES", "LAYERS"]]
    for container in containers:
        rows.append([
            container.id,
            container.command_line[:width],
            container.state.value,
            _ago(container.created_at, now),
            format_size(container.bytes_changed),
            ", ".join(layer.name for layer in container.layers),
        ])
    return _table(rows)
