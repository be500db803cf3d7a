import os
import tempfile
import time
import unittest

from lightsync.codec import EventLabel, decode
from lightsync.config import SyncConfig
from lightsync.dispatcher import EventDispatcher
from lightsync.errors import HostUnavailable
from lightsync.snapshot import LightKind
from lightsync.transport import AsyncTransport
from lightsync.units import LengthUnit

from tests.fake_host import FailingTransport, FakeHost, FakeLight, FakeScene, RecordingTransport, spot
from tests.test_transport import unused_port


class TestEventDispatcher(unittest.TestCase):
    def setUp(self):
        self.scene = FakeScene(
            [
                FakeLight(3, kind=LightKind.POINT, position=(1.0, 0.0, 0.0)),
                FakeLight(7, kind=LightKind.DIRECTIONAL, position=(0.0, 2.0, 0.0), intensity=4.0, color=(1, 2, 3)),
                spot(9),
            ]
        )
        self.host = FakeHost(self.scene)
        self.transport = RecordingTransport()
        self.dispatcher = EventDispatcher(self.host, self.transport)

    def last_message(self):
        return decode(self.transport.payloads[-1])

    def light_ids(self):
        return [light["id"] for light in self.last_message()["lights"]]

    def test_every_event_sends_full_snapshot(self):
        for event in (EventLabel.ADDED, EventLabel.MODIFIED, EventLabel.UNKNOWN):
            payload = self.dispatcher.dispatch(event, 3)
            self.assertIsNotNone(payload)
            self.assertEqual(self.last_message()["event"], event.value)
            self.assertEqual(self.light_ids(), [3, 7, 9])
        self.assertEqual(len(self.transport.payloads), 3)
        self.assertEqual(self.dispatcher.run_count, 3)

    def test_delete_undelete(self):
        self.dispatcher.on_deleted(7)
        self.assertEqual(self.last_message()["event"], "Light Deleted")
        self.assertEqual(self.light_ids(), [3, 9])
        self.assertTrue(self.dispatcher.blacklist.contains(7))

        # host still enumerates the light, an unrelated modification must not bring it back
        self.dispatcher.on_modified(3)
        self.assertEqual(self.light_ids(), [3, 9])

        self.dispatcher.on_undeleted(7)
        self.assertEqual(self.last_message()["event"], "Light Undeleted")
        self.assertEqual(self.light_ids(), [3, 7, 9])
        restored = self.last_message()["lights"][1]
        self.assertEqual(restored["type"], "Directional")
        self.assertEqual(restored["location"], {"x": 0.0, "y": 2.0, "z": 0.0})
        self.assertEqual(restored["intensity"], 4.0)
        self.assertEqual(restored["color"], {"r": 1, "g": 2, "b": 3})

    def test_added_and_modified_do_not_touch_blacklist(self):
        self.dispatcher.on_deleted(7)
        self.dispatcher.on_added(7)
        self.dispatcher.on_modified(7)
        self.assertTrue(self.dispatcher.blacklist.contains(7))

    def test_unit_scale(self):
        self.scene.length_unit = LengthUnit.CENTIMETERS
        self.dispatcher.on_modified(3)
        self.assertEqual(self.last_message()["lights"][0]["location"]["x"], 0.01)

        self.scene.length_unit = "METERS"
        self.scene.unit_scale = 0.5
        self.dispatcher.on_modified(3)
        self.assertEqual(self.last_message()["lights"][0]["location"]["x"], 0.5)

    def test_no_scene(self):
        self.host.current_scene = None
        with self.assertLogs("lightsync.dispatcher", level="WARNING"):
            self.assertIsNone(self.dispatcher.on_modified(3))
        self.assertEqual(self.transport.payloads, [])
        self.assertIsInstance(self.dispatcher.last_error, HostUnavailable)
        with self.assertRaises(HostUnavailable):
            self.dispatcher.build_snapshot()

    def test_unexpected_errors_are_contained(self):
        dispatcher = EventDispatcher(self.host, FailingTransport())
        with self.assertLogs("lightsync.dispatcher", level="ERROR"):
            self.assertIsNone(dispatcher.on_added(3))
        self.assertIsInstance(dispatcher.last_error, RuntimeError)

    def test_host_errors_are_contained(self):
        class ExplodingHost:
            def scene(self):
                raise KeyError("scene")

        dispatcher = EventDispatcher(ExplodingHost(), self.transport)
        with self.assertLogs("lightsync.dispatcher", level="ERROR"):
            self.assertIsNone(dispatcher.on_deleted(7))
        # the blacklist is updated even when the pipeline run fails
        self.assertTrue(dispatcher.blacklist.contains(7))

    def test_unknown_event_kind(self):
        self.dispatcher.dispatch("renamed", 3)
        self.assertEqual(self.last_message()["event"], "Unknown Light Event")

    def test_injected_blacklist(self):
        other = EventDispatcher(self.host, self.transport)
        self.dispatcher.on_deleted(3)
        other.on_modified(3)
        self.assertEqual(self.light_ids(), [3, 7, 9])

    def test_idempotent(self):
        first = self.dispatcher.on_modified(3)
        second = self.dispatcher.on_modified(3)
        self.assertEqual(first, second)

    def test_timestamp(self):
        dispatcher = EventDispatcher(self.host, self.transport, config=SyncConfig(include_timestamp=True))
        dispatcher.on_modified(3)
        self.assertIn("timestamp", self.last_message())

    def test_backup(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sub", "Lights.txt")
            config = SyncConfig(backup_enabled=True, backup_path=path)
            dispatcher = EventDispatcher(self.host, self.transport, config=config)
            dispatcher.on_modified(3)
            with open(path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        self.assertEqual(lines[2], "# Total Lights: 3")
        self.assertEqual(len(lines), 7)

    def test_backup_failure_is_contained(self):
        with tempfile.NamedTemporaryFile() as f:
            # a directory cannot be created below a file
            config = SyncConfig(backup_enabled=True, backup_path=os.path.join(f.name, "Lights.txt"))
            dispatcher = EventDispatcher(self.host, self.transport, config=config)
            with self.assertLogs("lightsync.dispatcher", level="WARNING"):
                self.assertIsNotNone(dispatcher.on_modified(3))
        self.assertEqual(len(self.transport.payloads), 1)


class TestUnreachableListener(unittest.TestCase):
    def test_event_returns_promptly(self):
        host = FakeHost(FakeScene([FakeLight(1)]))
        transport = AsyncTransport("127.0.0.1", unused_port(), timeout=5.0)
        dispatcher = EventDispatcher(host, transport)
        try:
            start = time.monotonic()
            for _ in range(10):
                self.assertIsNotNone(dispatcher.on_modified(1))
            self.assertLess(time.monotonic() - start, 0.5)
            transport.flush()
            self.assertEqual(transport.sent_count, 0)
            self.assertEqual(transport.dropped_count, 10)
        finally:
            transport.shutdown(wait=True)
