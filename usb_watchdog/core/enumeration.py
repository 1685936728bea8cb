from abc import ABC, abstractmethod
from typing import Any, List, Optional

class DeviceEnumeration(ABC):
    """
    Read-only view of the host device tree encoded as first-child/next-sibling links.
    Node handles are opaque to callers and only valid for the lifetime of the view.
    """

    @abstractmethod
    def root(self) -> Any:
        """Return the handle of the synthetic root node."""

    @abstractmethod
    def device_id(self, node: Any) -> Optional[str]:
        """Return the identifier of a node, or None if it cannot be read."""

    @abstractmethod
    def first_child(self, node: Any) -> Optional[Any]:
        pass

    @abstractmethod
    def next_sibling(self, node: Any) -> Optional[Any]:
        pass

class DeviceForest(DeviceEnumeration):
    """
    Arena-indexed snapshot of a device tree. Handles are list indexes, index 0 is the root.
    The root has no identifier unless one is given, so it never matches a pattern.
    """

    ROOT = 0

    def __init__(self, root_id: Optional[str] = None):
        self._ids: List[Optional[str]] = [root_id]
        self._first_child: List[Optional[int]] = [None]
        self._last_child: List[Optional[int]] = [None]
        self._next_sibling: List[Optional[int]] = [None]

    def __len__(self):
        return len(self._ids)

    def add(self, device_id: Optional[str], parent: int = ROOT) -> int:
        """Append a node as the last child of `parent` and return its handle."""
        if not 0 <= parent < len(self._ids):
            raise IndexError(f"Unknown parent node {parent}")

        node = len(self._ids)
        self._ids.append(device_id)
        self._first_child.append(None)
        self._last_child.append(None)
        self._next_sibling.append(None)

        previous = self._last_child[parent]
        if previous is None:
            self._first_child[parent] = node
        else:
            self._next_sibling[previous] = node
        self._last_child[parent] = node
        return node

    def root(self) -> int:
        return self.ROOT

    def device_id(self, node: int) -> Optional[str]:
        return self._ids[node]

    def first_child(self, node: int) -> Optional[int]:
        return self._first_child[node]

    def next_sibling(self, node: int) -> Optional[int]:
        return self._next_sibling[node]
