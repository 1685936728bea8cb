import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
from run import VenvBootstrap, PROJECT_DIR

class TestVenvBootstrap(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.bootstrap = VenvBootstrap(Path(self.tmp.name) / "venv")

    @patch("run.sys.platform", "linux")
    def test_posix_interpreter(self):
        self.assertEqual(self.bootstrap.python, Path(self.tmp.name) / "venv" / "bin" / "python")

    @patch("run.sys.platform", "win32")
    def test_windows_interpreter(self):
        self.assertEqual(self.bootstrap.python, Path(self.tmp.name) / "venv" / "Scripts" / "python.exe")

    @patch("run.subprocess.check_call")
    @patch("run.venv.create")
    def test_first_setup_creates_and_installs(self, mock_create, mock_install):
        mock_create.side_effect = lambda path, with_pip: path.mkdir()
        self.bootstrap.ensure()
        mock_create.assert_called_once_with(self.bootstrap.env_dir, with_pip=True)
        mock_install.assert_called_once_with(
            [str(self.bootstrap.python), "-m", "pip", "install", str(PROJECT_DIR)])
        self.assertTrue(self.bootstrap.installed)

    @patch("run.subprocess.check_call")
    @patch("run.venv.create")
    def test_finished_install_is_not_repeated(self, mock_create, mock_install):
        self.bootstrap.env_dir.mkdir()
        (self.bootstrap.env_dir / VenvBootstrap.MARKER).touch()
        self.bootstrap.ensure()
        mock_create.assert_not_called()
        mock_install.assert_not_called()

    @patch("run.subprocess.check_call", side_effect=subprocess.CalledProcessError(1, "pip"))
    @patch("run.venv.create")
    def test_failed_install_leaves_no_marker(self, mock_create, mock_install):
        with self.assertRaises(SystemExit) as ctx:
            self.bootstrap.ensure()
        self.assertEqual(ctx.exception.code, 1)
        self.assertFalse(self.bootstrap.installed)

    @patch("run.subprocess.call", return_value=3)
    def test_relaunch_exits_with_child_status(self, mock_call):
        with self.assertRaises(SystemExit) as ctx:
            self.bootstrap.relaunch(["check", "-u", "VID_1234"])
        self.assertEqual(ctx.exception.code, 3)
        args = mock_call.call_args[0][0]
        self.assertEqual(args[0], str(self.bootstrap.python))
        self.assertEqual(args[2:], ["check", "-u", "VID_1234"])

if __name__ == "__main__":
    unittest.main()
