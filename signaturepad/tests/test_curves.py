"""Curve building, resampling and smoothing."""
from __future__ import annotations

import unittest

from signaturepad.logic.curve_builder import average_spacing, build_curves
from signaturepad.logic.resampler import resample, resample_curves, skip_for_spacing
from signaturepad.logic.smoother import smooth, smooth_segments, subdivide
from signaturepad.models.geometry import Point, Segment

# Straight horizontal line, spacing 10
LINE_LOG = [
    Segment(0, 0, 10, 0),
    Segment(10, 0, 20, 0),
    Segment(20, 0, 30, 0),
]


def _line(xs):
    return tuple(Point(x, 0) for x in xs)


class TestCurveBuilder(unittest.TestCase):
    def test_empty_log(self) -> None:
        self.assertEqual(build_curves([]), ())
        self.assertIsNone(average_spacing([]))

    def test_chained_segments_form_one_curve(self) -> None:
        curves = build_curves(LINE_LOG)
        self.assertEqual(curves, (_line([0, 10, 20, 30]),))

    def test_discontinuity_starts_new_curve(self) -> None:
        log = LINE_LOG + [Segment(50, 5, 51, 6), Segment(51, 6, 55, 6)]
        curves = build_curves(log)
        self.assertEqual(len(curves), 2)
        self.assertEqual(curves[1], (Point(50, 5), Point(51, 6), Point(55, 6)))

    def test_single_segment_curve(self) -> None:
        curves = build_curves([Segment(3, 3, 3, 4)])
        self.assertEqual(curves, ((Point(3, 3), Point(3, 4)),))

    def test_curves_are_immutable(self) -> None:
        curves = build_curves(LINE_LOG)
        self.assertIsInstance(curves, tuple)
        self.assertIsInstance(curves[0], tuple)

    def test_average_spacing(self) -> None:
        self.assertAlmostEqual(average_spacing(LINE_LOG), 10.0)


class TestResampler(unittest.TestCase):
    def test_skip_for_spacing(self) -> None:
        self.assertEqual(skip_for_spacing(10), 4)
        self.assertEqual(skip_for_spacing(20), 4)
        self.assertEqual(skip_for_spacing(2), 10)
        self.assertEqual(skip_for_spacing(0.5), 11)

    def test_straight_line_boundary(self) -> None:
        # arc reaches 30 > 25 only at the final point, which is then kept by the scan
        curve = build_curves(LINE_LOG)[0]
        skip = skip_for_spacing(average_spacing(LINE_LOG))
        self.assertEqual(resample(curve, skip), _line([0, 30]))

    def test_point_count_threshold(self) -> None:
        curve = _line(range(21))
        self.assertEqual(resample(curve, 4), _line([0, 5, 10, 15, 20]))

    def test_arc_length_threshold(self) -> None:
        curve = _line([0, 13, 26, 39])
        self.assertEqual(resample(curve, 10), _line([0, 26, 39]))

    def test_keeps_first_and_last(self) -> None:
        curves = [
            _line([0, 1]),
            _line(range(0, 7)),
            tuple(Point(i, (i * 7) % 5) for i in range(40)),
            _line([0, 40, 41, 42, 43]),
        ]
        for curve in curves:
            for skip in (4, 7, 11):
                out = resample(curve, skip)
                self.assertEqual(out[0], curve[0])
                self.assertEqual(out[-1], curve[-1])

    def test_resample_curves_uses_spacing(self) -> None:
        curves = (_line(range(21)),)
        self.assertEqual(resample_curves(curves, 10.0), (_line([0, 5, 10, 15, 20]),))


class TestSmoother(unittest.TestCase):
    def test_short_curves_pass_through(self) -> None:
        two = _line([0, 30])
        self.assertEqual(smooth(two), two)
        self.assertEqual(subdivide(two), two)

    def test_single_pass_weights(self) -> None:
        curve = (Point(0, 0), Point(10, 10), Point(20, 0))
        out = subdivide(curve)
        self.assertEqual(out, (Point(0, 0), Point(5, 5), Point(10, 7.5), Point(20, 0)))

    def test_three_passes_preserve_endpoints(self) -> None:
        curve = (Point(0, 0), Point(10, 10), Point(20, 0))
        out = smooth(curve)
        # 3 -> 4 -> 6 -> 10 points
        self.assertEqual(len(out), 10)
        self.assertEqual(out[0], curve[0])
        self.assertEqual(out[-1], curve[-1])

    def test_each_pass_works_on_previous_output(self) -> None:
        curve = (Point(0, 0), Point(4, 9), Point(12, 3), Point(20, 20))
        self.assertEqual(smooth(curve, 2), subdivide(subdivide(curve)))

    def test_straight_line_stays_straight(self) -> None:
        out = smooth(_line([0, 5, 10, 15, 20]))
        self.assertTrue(all(p.y == 0 for p in out))

    def test_pipeline(self) -> None:
        self.assertEqual(smooth_segments([]), ())
        self.assertEqual(smooth_segments(LINE_LOG), (_line([0, 30]),))


if __name__ == "__main__":
    unittest.main()
