import ctypes
from typing import Optional
from ..core.enumeration import DeviceEnumeration
from ..core.errors import EnumerationUnavailable
from ..core.logger import logger

DEVINST = ctypes.c_ulong
CR_SUCCESS = 0
CM_LOCATE_DEVNODE_NORMAL = 0
MAX_DEVICE_ID_LEN = 1024

class WindowsDeviceEnumeration(DeviceEnumeration):
    """
    Live view of the PnP device tree through the Configuration Manager API.
    Nodes are DEVINST handles and are queried on demand while walking.
    """

    def __init__(self):
        windll = getattr(ctypes, "WinDLL", None)
        if windll is None:
            raise EnumerationUnavailable("cfgmgr32 is only available on Windows")
        try:
            self._cfgmgr = windll("cfgmgr32")
        except OSError as e:
            raise EnumerationUnavailable(f"Could not load cfgmgr32: {e}") from e

        root = DEVINST()
        status = self._cfgmgr.CM_Locate_DevNodeW(ctypes.byref(root), None, CM_LOCATE_DEVNODE_NORMAL)
        if status != CR_SUCCESS:
            raise EnumerationUnavailable(f"CM_Locate_DevNodeW failed with status {status}")
        self._root = root.value

    def root(self) -> int:
        return self._root

    def device_id(self, node: int) -> Optional[str]:
        buffer = ctypes.create_unicode_buffer(MAX_DEVICE_ID_LEN)
        status = self._cfgmgr.CM_Get_Device_IDW(DEVINST(node), buffer, MAX_DEVICE_ID_LEN, 0)
        if status != CR_SUCCESS:
            logger.debug(f"CM_Get_Device_IDW failed for devnode {node} with status {status}")
            return None
        return buffer.value

    def first_child(self, node: int) -> Optional[int]:
        return self._related(self._cfgmgr.CM_Get_Child, node)

    def next_sibling(self, node: int) -> Optional[int]:
        return self._related(self._cfgmgr.CM_Get_Sibling, node)

    @staticmethod
    def _related(query, node: int) -> Optional[int]:
        related = DEVINST()
        if query(ctypes.byref(related), DEVINST(node), 0) != CR_SUCCESS:
            return None
        return related.value
