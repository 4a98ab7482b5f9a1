import unittest

from arduinolink.address import DARWIN, POSIX, WINDOWS, resolve_address, strip_scheme


class ResolveAddressTests(unittest.TestCase):
    def test_posix_prefixes_dev(self) -> None:
        address = resolve_address("arduino://ttyACM0", POSIX)
        self.assertEqual(address.name, "ttyACM0")
        self.assertEqual(address.path, "/dev/ttyACM0")
        self.assertEqual(address.native_path, "/dev/ttyACM0")

    def test_darwin_behaves_like_posix(self) -> None:
        address = resolve_address("cu.usbmodem2101", DARWIN)
        self.assertEqual(address.path, "/dev/cu.usbmodem2101")

    def test_windows_canonicalizes_com_ports(self) -> None:
        for name in ("COM3", "com3", "Com03", "3", "arduino://COM3"):
            with self.subTest(name=name):
                address = resolve_address(name, WINDOWS)
                self.assertEqual(address.path, "com3")
                self.assertEqual(address.native_path, "\\\\.\\com3")

    def test_windows_passes_other_names_through(self) -> None:
        address = resolve_address("arduino://\\\\.\\CNCA0", WINDOWS)
        self.assertEqual(address.path, "\\\\.\\CNCA0")
        self.assertEqual(address.native_path, address.path)

    def test_resolution_is_idempotent(self) -> None:
        for platform, name in ((POSIX, "ttyUSB0"), (WINDOWS, "COM12"), (WINDOWS, "nul")):
            with self.subTest(platform=platform, name=name):
                once = resolve_address(name, platform)
                twice = resolve_address(once.path, platform)
                self.assertEqual(once.path, twice.path)

    def test_custom_scheme_is_stripped(self) -> None:
        self.assertEqual(strip_scheme("uno://ttyACM1", "uno"), "ttyACM1")
        self.assertEqual(strip_scheme("arduino://ttyACM1", "uno"), "arduino://ttyACM1")
        self.assertEqual(resolve_address("uno://ttyACM1", POSIX, "uno").path, "/dev/ttyACM1")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
