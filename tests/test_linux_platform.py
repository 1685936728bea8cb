import unittest
from unittest.mock import MagicMock
from usb_watchdog.core.errors import EnumerationUnavailable
from usb_watchdog.core.presence import find_device, walk_forest
from usb_watchdog.platforms.linux import LinuxDeviceEnumeration, udev_device_id

class FakeUdevDevice:
    """Minimal stand-in for pyudev.Device."""

    def __init__(self, sys_path, subsystem=None, device_type=None, properties=None, attributes=None):
        self.sys_path = sys_path
        self.device_path = sys_path[len("/sys"):]
        self.sys_name = sys_path.rsplit("/", 1)[-1]
        self.subsystem = subsystem
        self.device_type = device_type
        self._properties = properties or {}
        self.attributes = MagicMock()
        self.attributes.asstring.side_effect = lambda name: (attributes or {})[name]

    def get(self, key, default=None):
        return self._properties.get(key, default)

PCI = "/sys/devices/pci0000:00"
XHCI = PCI + "/0000:00:14.0"
BUS = XHCI + "/usb1"
MODEM = BUS + "/1-2"

def sample_devices():
    return [
        FakeUdevDevice(MODEM + "/1-2:1.0", subsystem="usb", device_type="usb_interface"),
        FakeUdevDevice(BUS, subsystem="usb", device_type="usb_device",
                       properties={"ID_VENDOR_ID": "1d6b", "ID_MODEL_ID": "0002"}),
        FakeUdevDevice(MODEM, subsystem="usb", device_type="usb_device",
                       properties={"ID_VENDOR_ID": "1234", "ID_MODEL_ID": "abcd", "ID_SERIAL_SHORT": "SN42"}),
        FakeUdevDevice(PCI),
        FakeUdevDevice(XHCI, subsystem="pci"),
        FakeUdevDevice("/sys/devices/virtual/net/lo", subsystem="net"),
    ]

def fake_context(devices):
    context = MagicMock()
    context.list_devices.return_value = devices
    return context

class TestUdevDeviceId(unittest.TestCase):
    def test_usb_device_uses_instance_path(self):
        device = FakeUdevDevice(MODEM, subsystem="usb", device_type="usb_device",
                                properties={"ID_VENDOR_ID": "1234", "ID_MODEL_ID": "abcd", "ID_SERIAL_SHORT": "SN42"})
        self.assertEqual(udev_device_id(device), "USB\\VID_1234&PID_ABCD\\SN42")

    def test_sysfs_attributes_as_fallback(self):
        device = FakeUdevDevice(MODEM, subsystem="usb", device_type="usb_device",
                                attributes={"idVendor": "0bda", "idProduct": "8153"})
        self.assertEqual(udev_device_id(device), "USB\\VID_0BDA&PID_8153\\1-2")

    def test_other_devices_use_devpath(self):
        device = FakeUdevDevice(XHCI, subsystem="pci")
        self.assertEqual(udev_device_id(device), "/devices/pci0000:00/0000:00:14.0")

    def test_unreadable_identifier(self):
        device = FakeUdevDevice(MODEM, subsystem="usb", device_type="usb_device")
        device.get = MagicMock(side_effect=OSError("gone"))
        self.assertIsNone(udev_device_id(device))

class TestLinuxDeviceEnumeration(unittest.TestCase):
    def test_tree_follows_sysfs_hierarchy(self):
        forest = LinuxDeviceEnumeration(context=fake_context(sample_devices()))
        ids = [(forest.device_id(node), depth) for node, depth in walk_forest(forest)]
        self.assertEqual(ids, [
            (None, 0),
            ("/devices/pci0000:00", 1),
            ("/devices/pci0000:00/0000:00:14.0", 2),
            ("USB\\VID_1D6B&PID_0002\\usb1", 3),
            ("USB\\VID_1234&PID_ABCD\\SN42", 4),
            ("/devices/pci0000:00/0000:00:14.0/usb1/1-2/1-2:1.0", 5),
            ("/devices/virtual/net/lo", 1),
        ])

    def test_find_device(self):
        forest = LinuxDeviceEnumeration(context=fake_context(sample_devices()))
        self.assertEqual(find_device(forest, "vid_1234&pid_abcd"), "USB\\VID_1234&PID_ABCD\\SN42")
        self.assertEqual(find_device(forest, "1-2:1.0"), "/devices/pci0000:00/0000:00:14.0/usb1/1-2/1-2:1.0")
        self.assertIsNone(find_device(forest, "VID_FFFF"))

    def test_udev_failure(self):
        context = MagicMock()
        context.list_devices.side_effect = OSError("libudev missing")
        with self.assertRaises(EnumerationUnavailable):
            LinuxDeviceEnumeration(context=context)

if __name__ == "__main__":
    unittest.main()
