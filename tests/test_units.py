import unittest

from parameterized import parameterized

from lightsync.units import LengthUnit, meters_per_unit, scale_position


class TestMetersPerUnit(unittest.TestCase):
    @parameterized.expand(
        [
            (LengthUnit.MILLIMETERS, 0.001),
            (LengthUnit.CENTIMETERS, 0.01),
            (LengthUnit.METERS, 1.0),
            (LengthUnit.KILOMETERS, 1000.0),
            (LengthUnit.INCHES, 0.0254),
            (LengthUnit.FEET, 0.3048),
            (LengthUnit.YARDS, 0.9144),
            (LengthUnit.MILES, 1609.344),
        ]
    )
    def test_table(self, unit, expected):
        self.assertEqual(meters_per_unit(unit), expected)

    def test_name(self):
        self.assertEqual(meters_per_unit("FEET"), 0.3048)
        self.assertEqual(meters_per_unit("millimeters"), 0.001)

    @parameterized.expand([("ADAPTIVE",), ("MICROMETERS",), ("parsecs",), (None,), (42,)])
    def test_unrecognized_is_meters(self, unit):
        self.assertEqual(meters_per_unit(unit), 1.0)


class TestScalePosition(unittest.TestCase):
    def test_scale(self):
        x, y, z = scale_position((1.0, 2.0, 3.0), 0.001)
        self.assertAlmostEqual(x, 0.001)
        self.assertAlmostEqual(y, 0.002)
        self.assertAlmostEqual(z, 0.003)

    def test_identity(self):
        self.assertEqual(scale_position((1.5, -2.0, 0.0), 1.0), (1.5, -2.0, 0.0))
