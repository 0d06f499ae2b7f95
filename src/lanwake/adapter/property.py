"""Read-only reachability property."""

from typing import TYPE_CHECKING, Any, Optional

from lanwake.core.errors import ReadOnlyPropertyError

if TYPE_CHECKING:
    from lanwake.adapter.device import WakeOnLanDevice


class ReachabilityProperty:
    """
    Last-known reachability of a device.

    The value starts as ``None`` (unknown) and is only changed through
    ``set_cached_value``, which the owning device calls after a probe.
    """

    def __init__(self, device: "WakeOnLanDevice", name: str = "on", title: str = "In Network") -> None:
        self.device = device
        self.name = name
        self.title = title
        self._value: Optional[bool] = None

    @property
    def read_only(self) -> bool:
        return True

    @property
    def value(self) -> Optional[bool]:
        return self._value

    def read(self) -> Optional[bool]:
        """Return the cached value; never triggers a probe."""
        return self._value

    def write(self, value: Any) -> None:
        raise ReadOnlyPropertyError(f"Property '{self.name}' of {self.device.id} is read-only")

    def set_cached_value(self, value: bool) -> bool:
        """
        Store a freshly probed value.

        Returns:
            True if the value changed, False if it equals the cached one
        """
        if self._value is not None and self._value == value:
            return False
        self._value = value
        return True

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": "boolean",
            "title": self.title,
            "readOnly": True,
            "value": self._value,
        }
