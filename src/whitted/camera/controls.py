"""Camera control input.

The window layer that captures keyboard and mouse events lives outside this
package. It hands the camera an object implementing ``InputState`` once per
frame; ``InputSnapshot`` is a plain implementation for scripts and tests.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class Key(Enum):
    """Movement actions, one per direction along the three camera axes."""

    FORWARD = "forward"
    BACKWARD = "backward"
    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"


# Default keyboard layout
DEFAULT_KEY_MAP: dict[str, Key] = {
    "w": Key.FORWARD,
    "s": Key.BACKWARD,
    "d": Key.RIGHT,
    "a": Key.LEFT,
    "q": Key.UP,
    "e": Key.DOWN,
}


class InputState(Protocol):
    """What the camera needs to know about user input for one frame."""

    def is_key_down(self, key: Key) -> bool: ...

    def is_pointer_down(self) -> bool: ...

    def pointer_delta(self) -> tuple[float, float]:
        """Pointer motion since the previous sample as (yaw, pitch) units."""
        ...


@dataclass
class InputSnapshot:
    """A fixed input sample.

    Attributes:
        keys: Movement keys held during the sample.
        pointer_down: Whether the primary pointer button is held.
        delta: Pointer motion (yaw, pitch) since the previous sample.
    """

    keys: set[Key] = field(default_factory=set)
    pointer_down: bool = False
    delta: tuple[float, float] = (0.0, 0.0)

    @classmethod
    def from_key_names(
        cls,
        names: Iterable[str],
        *,
        pointer_down: bool = False,
        delta: tuple[float, float] = (0.0, 0.0),
        key_map: dict[str, Key] | None = None,
    ) -> "InputSnapshot":
        """Build a snapshot from held key names such as ``"w"``.

        Names missing from the key map are ignored.
        """
        mapping = DEFAULT_KEY_MAP if key_map is None else key_map
        keys = {mapping[name.lower()] for name in names if name.lower() in mapping}
        return cls(keys=keys, pointer_down=pointer_down, delta=delta)

    def is_key_down(self, key: Key) -> bool:
        return key in self.keys

    def is_pointer_down(self) -> bool:
        return self.pointer_down

    def pointer_delta(self) -> tuple[float, float]:
        return self.delta
