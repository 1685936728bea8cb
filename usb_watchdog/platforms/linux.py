import os
import pyudev
from typing import Dict, Optional
from ..core.enumeration import DeviceForest
from ..core.errors import EnumerationUnavailable
from ..core.logger import logger

def _attribute(device, name: str) -> Optional[str]:
    try:
        return device.attributes.asstring(name).strip()
    except (KeyError, OSError, UnicodeDecodeError):
        return None

def udev_device_id(device) -> Optional[str]:
    """
    USB devices are named like Windows instance paths (USB\\VID_xxxx&PID_xxxx\\serial)
    so the same pattern works on both platforms. Other nodes use their devpath.
    """
    try:
        if device.subsystem == 'usb' and device.device_type == 'usb_device':
            vid = device.get('ID_VENDOR_ID') or _attribute(device, 'idVendor')
            pid = device.get('ID_MODEL_ID') or _attribute(device, 'idProduct')
            if vid and pid:
                serial = device.get('ID_SERIAL_SHORT') or _attribute(device, 'serial') or device.sys_name
                return f"USB\\VID_{vid.upper()}&PID_{pid.upper()}\\{serial}"
        return device.device_path
    except (LookupError, OSError, ValueError) as e:
        logger.debug(f"Could not read identifier of {getattr(device, 'sys_path', '?')}: {e}")
        return None

class LinuxDeviceEnumeration(DeviceForest):
    """Snapshot of the sysfs device tree taken through udev."""

    def __init__(self, context: Optional["pyudev.Context"] = None):
        super().__init__()
        try:
            self.context = context or pyudev.Context()
            devices = sorted(self.context.list_devices(), key=lambda d: d.sys_path)
        except (ImportError, OSError) as e:
            raise EnumerationUnavailable(f"udev device enumeration is not available: {e}") from e

        # Parents sort before their children, so each ancestor is already indexed
        nodes: Dict[str, int] = {}
        for device in devices:
            parent = self._nearest_indexed_ancestor(device.sys_path, nodes)
            nodes[device.sys_path] = self.add(udev_device_id(device), parent)

        logger.debug(f"udev snapshot: {len(nodes)} devices")

    def _nearest_indexed_ancestor(self, sys_path: str, nodes: Dict[str, int]) -> int:
        path = os.path.dirname(sys_path)
        while path and path != os.path.dirname(path):
            if path in nodes:
                return nodes[path]
            path = os.path.dirname(path)
        return self.ROOT
