import random

MB = 1024 * 1024


class RandomSizeEstimator:
    """Placeholder sizes for layers and container changes.

    There is no real filesystem diff behind either number.
    """
    def __init__(self, seed: int | None = None):
        self._random = random.Random(seed)

    def layer_size(self) -> int:
        return self._random.randrange(142 * MB)

    def files_changed(self) -> int:
        return self._random.randrange(42)

    def bytes_changed(self) -> int:
        return self._random.randrange(24 * MB)
