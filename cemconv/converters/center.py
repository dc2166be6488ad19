"""
Bounding center of a stream of positions.

The center is the midpoint of the axis-aligned bounding box, so repeated
positions never move it. An empty stream yields the origin.
"""

from typing import Optional, Sequence, Tuple

Vec3 = Tuple[float, float, float]

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class CenterBuilder:
    """
    Streaming reducer for a model's bounding center.

    Example:
        >>> builder = CenterBuilder.begin()
        >>> builder.update((0.0, 0.0, 0.0))
        >>> builder.update((2.0, 4.0, -2.0))
        >>> builder.build()
        (1.0, 2.0, -1.0)
    """

    def __init__(self):
        self._min: Optional[list] = None
        self._max: Optional[list] = None
        self._built = False

    @classmethod
    def begin(cls) -> "CenterBuilder":
        return cls()

    def update(self, position: Sequence[float]) -> None:
        self._check_open()
        if self._min is None:
            self._min = [float(c) for c in position]
            self._max = list(self._min)
            return

        for axis in range(3):
            value = float(position[axis])
            if value < self._min[axis]:
                self._min[axis] = value
            elif value > self._max[axis]:
                self._max[axis] = value

    def build(self) -> Vec3:
        """Return the center and close the builder."""
        self._check_open()
        self._built = True

        if self._min is None:
            return ORIGIN
        return tuple((lo + hi) / 2.0 for lo, hi in zip(self._min, self._max))

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("CenterBuilder already built")
