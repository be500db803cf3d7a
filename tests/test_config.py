import unittest

from lightsync.config import SyncConfig, get_default_backup_path
from lightsync.listener import summarize
from lightsync.transport import AsyncTransport


class TestSyncConfig(unittest.TestCase):
    def test_defaults(self):
        config = SyncConfig.from_env({})
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 5173)
        self.assertEqual(config.timeout, 5.0)
        self.assertFalse(config.backup_enabled)
        self.assertFalse(config.include_timestamp)
        self.assertEqual(config.backup_path, get_default_backup_path())

    def test_environment(self):
        config = SyncConfig.from_env(
            {
                "LIGHTSYNC_HOST": "localhost",
                "LIGHTSYNC_PORT": "6000",
                "LIGHTSYNC_TIMEOUT": "1.5",
                "LIGHTSYNC_BACKUP": "1",
                "LIGHTSYNC_BACKUP_PATH": "/tmp/lights.txt",
                "LIGHTSYNC_TIMESTAMP": "off",
            }
        )
        self.assertEqual(config.host, "localhost")
        self.assertEqual(config.port, 6000)
        self.assertEqual(config.timeout, 1.5)
        self.assertTrue(config.backup_enabled)
        self.assertEqual(config.backup_path, "/tmp/lights.txt")
        self.assertFalse(config.include_timestamp)

    def test_invalid_port(self):
        with self.assertLogs("lightsync.config", level="ERROR"):
            config = SyncConfig.from_env({"LIGHTSYNC_PORT": "http"})
        self.assertEqual(config.port, 5173)

    def test_invalid_timeout_keeps_port(self):
        with self.assertLogs("lightsync.config", level="ERROR") as logs:
            config = SyncConfig.from_env({"LIGHTSYNC_PORT": "6000", "LIGHTSYNC_TIMEOUT": "soon"})
        self.assertEqual(config.port, 6000)
        self.assertEqual(config.timeout, 5.0)
        self.assertEqual(len(logs.records), 1)

    def test_make_transport(self):
        transport = SyncConfig(port=6001, workers=3, max_pending=4).make_transport()
        self.assertIsInstance(transport, AsyncTransport)
        self.assertEqual(transport.port, 6001)
        self.assertEqual(transport.workers, 3)
        self.assertFalse(transport.is_running())


class TestListener(unittest.TestCase):
    def test_summarize(self):
        message = {"event": "Light Added", "lightCount": 2, "lights": [{"type": "Spot"}, {"type": "Point"}]}
        self.assertEqual(summarize(message), "Light Added: 2 light(s) ['Spot', 'Point']")

    def test_summarize_unexpected_shapes(self):
        self.assertEqual(summarize({"event": "Light Added"}), "Light Added: None light(s) []")
        self.assertEqual(summarize({"lights": [3, {"type": "Point"}]}), "None: None light(s) [None, 'Point']")
