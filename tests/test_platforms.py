import os
import unittest
from types import SimpleNamespace
from unittest import mock

from arduinolink.address import DeviceAddress
from arduinolink.platforms import (
    DARWIN_PLATFORM,
    GENERIC_PLATFORM,
    POSIX_PLATFORM,
    WINDOWS_PLATFORM,
    detect_platform,
)


class DetectPlatformTests(unittest.TestCase):
    def test_known_systems(self) -> None:
        cases = {
            "win32": WINDOWS_PLATFORM,
            "darwin": DARWIN_PLATFORM,
            "linux": POSIX_PLATFORM,
            "cygwin": POSIX_PLATFORM,
            "freebsd13": POSIX_PLATFORM,
        }
        for system, expected in cases.items():
            with self.subTest(system=system):
                self.assertIs(detect_platform(system), expected)

    def test_unknown_system_is_generic(self) -> None:
        platform = detect_platform("emscripten")
        self.assertIs(platform, GENERIC_PLATFORM)
        self.assertFalse(platform.concrete)
        self.assertTrue(WINDOWS_PLATFORM.concrete)


class DeviceExistsTests(unittest.TestCase):
    @mock.patch("arduinolink.platforms.serial.tools.list_ports.comports")
    def test_windows_matches_com_ports_case_insensitively(self, mock_comports) -> None:
        mock_comports.return_value = [SimpleNamespace(device="COM7"), SimpleNamespace(device=None)]
        self.assertTrue(WINDOWS_PLATFORM.device_exists(DeviceAddress("7", "com7")))
        self.assertFalse(WINDOWS_PLATFORM.device_exists(DeviceAddress("8", "com8")))

    @mock.patch("arduinolink.platforms.os.path.exists", return_value=False)
    @mock.patch("arduinolink.platforms.serial.tools.list_ports.comports")
    def test_windows_other_names_use_the_filesystem(self, mock_comports, mock_exists) -> None:
        self.assertFalse(WINDOWS_PLATFORM.device_exists(DeviceAddress("CNCA0", "\\\\.\\CNCA0")))
        mock_comports.assert_not_called()
        mock_exists.assert_called_once_with("\\\\.\\CNCA0")

    @unittest.skipUnless(os.name == "posix", "needs /dev/null")
    def test_posix_checks_the_device_path(self) -> None:
        self.assertTrue(POSIX_PLATFORM.device_exists(DeviceAddress("null", "/dev/null")))
        self.assertFalse(POSIX_PLATFORM.device_exists(DeviceAddress("x", "/dev/arduinolink-missing")))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
