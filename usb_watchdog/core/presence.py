from typing import Any, Iterator, Optional, Tuple
from .enumeration import DeviceEnumeration

def walk_forest(enumeration: DeviceEnumeration) -> Iterator[Tuple[Any, int]]:
    """
    Yield (node, depth) pairs in pre-order: a node, then its whole child subtree,
    then its next sibling. A node's sibling is only looked up once its subtree
    is exhausted, so stopping the walk early stops all enumeration queries too.
    """
    ancestors = []
    node, depth = enumeration.root(), 0
    while node is not None:
        yield node, depth

        child = enumeration.first_child(node)
        if child is not None:
            ancestors.append((node, depth))
            node, depth = child, depth + 1
            continue

        # Leaf: climb until some node on the path has a next sibling
        sibling = enumeration.next_sibling(node)
        while sibling is None and ancestors:
            node, depth = ancestors.pop()
            sibling = enumeration.next_sibling(node)
        node = sibling

def find_device(enumeration: DeviceEnumeration, pattern: str) -> Optional[str]:
    """Return the identifier of the first node containing `pattern` (case-insensitive)."""
    pattern_upper = pattern.upper()
    for node, _ in walk_forest(enumeration):
        device_id = enumeration.device_id(node)
        if device_id is None:
            continue
        if pattern_upper in device_id.upper():
            return device_id
    return None

def is_device_present(enumeration: DeviceEnumeration, pattern: str) -> bool:
    return find_device(enumeration, pattern) is not None
