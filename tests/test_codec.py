import unittest

from parameterized import parameterized

from lightsync import codec
from lightsync.blacklist import BlacklistTracker
from lightsync.codec import EventLabel, decode, encode, format_float
from lightsync.snapshot import LightKind, Snapshot, SnapshotBuilder

from tests.fake_host import FakeLight, spot


def build(lights, scale=1.0):
    return SnapshotBuilder(BlacklistTracker()).build(lights, scale)


class TestFormatFloat(unittest.TestCase):
    @parameterized.expand(
        [
            (0.001, 6, "0.001000"),
            (90.0, 3, "90.000"),
            (-0.0, 3, "0.000"),
            (-0.0001, 3, "0.000"),
            (-1.5, 3, "-1.500"),
            (1609.344, 6, "1609.344000"),
        ]
    )
    def test_format(self, value, decimals, expected):
        self.assertEqual(format_float(value, decimals), expected)


class TestEncode(unittest.TestCase):
    def test_scenario_directional_millimeters(self):
        light = FakeLight(
            1,
            kind=LightKind.DIRECTIONAL,
            position=(1.0, 2.0, 3.0),
            direction=(0.0, 0.0, -1.0),
            intensity=50.0,
            color=(255, 0, 0),
        )
        payload = encode(EventLabel.MODIFIED, build([light], 0.001))
        text = payload.decode("utf-8")
        self.assertIn('"x": 0.001000', text)
        self.assertIn('"y": 0.002000', text)
        self.assertIn('"z": 0.003000', text)
        self.assertIn('"pitch": 90.000', text)
        self.assertIn('"yaw": 0.000', text)
        self.assertIn('"roll": 0.000', text)

        message = decode(payload)
        self.assertEqual(message["event"], "Light Modified")
        self.assertEqual(message["lightCount"], 1)
        entry = message["lights"][0]
        self.assertEqual(entry["id"], 1)
        self.assertEqual(entry["type"], "Directional")
        self.assertEqual(entry["location"], {"x": 0.001, "y": 0.002, "z": 0.003})
        self.assertEqual(entry["rotation"], {"pitch": 90.0, "yaw": 0.0, "roll": 0.0})
        self.assertEqual(entry["intensity"], 50.0)
        self.assertEqual(entry["color"], {"r": 255, "g": 0, "b": 0})
        self.assertNotIn("spotLight", entry)

    def test_key_order(self):
        message = decode(encode(EventLabel.ADDED, build([spot(3)])))
        self.assertEqual(list(message.keys()), ["event", "lightCount", "lights"])
        self.assertEqual(
            list(message["lights"][0].keys()),
            ["id", "type", "location", "rotation", "intensity", "color", "spotLight"],
        )

    def test_light_count_and_spot_presence(self):
        lights = [
            FakeLight(1, kind=LightKind.POINT),
            spot(2, inner=10.0, outer=25.0),
            FakeLight(3, kind=LightKind.AMBIENT),
            FakeLight(4, kind=LightKind.DIRECTIONAL),
            spot(5),
        ]
        snapshot = build(lights)
        message = decode(encode(EventLabel.ADDED, snapshot))
        self.assertEqual(message["lightCount"], len(message["lights"]))
        self.assertEqual(message["lightCount"], 5)
        for record, entry in zip(snapshot, message["lights"]):
            self.assertEqual(record.id, entry["id"])
            self.assertEqual(record.kind is LightKind.SPOT, "spotLight" in entry)
        self.assertEqual(message["lights"][1]["spotLight"], {"innerAngle": 10.0, "outerAngle": 25.0})

    def test_empty_snapshot(self):
        message = decode(encode(EventLabel.DELETED, Snapshot()))
        self.assertEqual(message, {"event": "Light Deleted", "lightCount": 0, "lights": []})

    @parameterized.expand([(label,) for label in EventLabel])
    def test_event_labels(self, label):
        self.assertEqual(decode(encode(label, Snapshot()))["event"], label.value)

    def test_deterministic(self):
        lights = [FakeLight(1, position=(0.1, 0.2, 0.3), direction=(0.2, 0.3, -0.9)), spot(2)]
        self.assertEqual(encode(EventLabel.MODIFIED, build(lights)), encode(EventLabel.MODIFIED, build(lights)))

    def test_timestamp(self):
        message = decode(encode(EventLabel.ADDED, Snapshot(), timestamp="2020-06-01T10:20:30"))
        self.assertEqual(list(message.keys()), ["event", "timestamp", "lightCount", "lights"])
        self.assertEqual(message["timestamp"], "2020-06-01T10:20:30")

    def test_rejects_free_strings(self):
        with self.assertRaises(ValueError):
            encode("Light Added", Snapshot())
        with self.assertRaises(ValueError):
            encode(EventLabel.ADDED, Snapshot(), timestamp='"}')

    def test_utf8_bytes(self):
        payload = encode(EventLabel.ADDED, build([FakeLight(1)]))
        self.assertIsInstance(payload, bytes)
        self.assertTrue(payload.startswith(b"{\n"))
        self.assertTrue(payload.endswith(b"}"))

    def test_precision(self):
        light = FakeLight(1, position=(1.23456789, 0.0, 0.0), direction=(1.0, 1.0, -1.0), intensity=0.1234567)
        text = encode(EventLabel.MODIFIED, build([light])).decode()
        self.assertIn('"x": 1.234568', text)
        self.assertIn('"pitch": 35.264', text)
        self.assertIn('"yaw": 45.000', text)
        self.assertIn('"intensity": 0.123457', text)
        self.assertEqual(codec.LOCATION_DECIMALS, 6)
