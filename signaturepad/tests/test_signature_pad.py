"""Capture state machine, redraw pass, replay and export of SignaturePad."""
from __future__ import annotations

import base64
import io
import threading
import unittest

from PIL import Image

from signaturepad.exceptions.errors import ParseError, SurfaceUnavailable
from signaturepad.logic.scheduler import ThreadingScheduler
from signaturepad.logic.signature_pad import SignaturePad
from signaturepad.models.geometry import Point, Segment
from signaturepad.models.pad_config import PadConfig
from signaturepad.models.pad_enums import InputDevice, StrokeState
from signaturepad.tests.fakes import ManualScheduler, RecordingSurface


class PadTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.surface = RecordingSurface()
        self.scheduler = ManualScheduler()
        self.outputs = []
        self.pad = SignaturePad(self.surface, scheduler=self.scheduler,
                                on_output=self.outputs.append)

    def draw(self, pad, points, device=InputDevice.POINTER):
        (x0, y0), rest = points[0], points[1:]
        pad.start_stroke(x0, y0, device)
        for x, y in rest:
            pad.append_sample(x, y)
        pad.end_stroke()


class TestConstruction(PadTestCase):
    def test_missing_surface(self) -> None:
        with self.assertRaises(SurfaceUnavailable):
            SignaturePad(None)

    def test_zero_size_surface(self) -> None:
        with self.assertRaises(SurfaceUnavailable):
            SignaturePad(RecordingSurface(0, 100))

    def test_acquire_wraps_factory_failure(self) -> None:
        def broken():
            raise RuntimeError("no canvas")

        with self.assertRaises(SurfaceUnavailable) as cm:
            SignaturePad.acquire(broken)
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)

    def test_background_painted_once(self) -> None:
        self.assertEqual(self.surface.ops, [("clear",), ("fill", "#ffffff")])
        self.assertTrue(self.pad.is_empty)
        self.assertIs(self.pad.state, StrokeState.IDLE)


class TestCapture(PadTestCase):
    def test_tap_leaves_dot(self) -> None:
        self.assertTrue(self.pad.start_stroke(10.6, 10.2))
        self.assertEqual(self.pad.segments, (Segment(10, 10, 10, 11),))
        self.assertIs(self.pad.state, StrokeState.CAPTURING)
        self.assertEqual(self.surface.lines[-1][1:3], (Point(10, 10), Point(10, 11)))

    def test_duplicate_sample_is_noop(self) -> None:
        self.pad.start_stroke(10, 10)
        ops_before = list(self.surface.ops)
        self.assertIsNone(self.pad.append_sample(10, 11))
        self.assertIsNone(self.pad.append_sample(10.4, 11.9))
        self.assertEqual(len(self.pad.segments), 1)
        self.assertEqual(self.surface.ops, ops_before)

    def test_samples_chain_segments(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.append_sample(4, 1)
        self.pad.append_sample(8, 1)
        segs = self.pad.segments
        self.assertEqual(len(segs), 3)
        for a, b in zip(segs, segs[1:]):
            self.assertEqual(a.end, b.start)

    def test_live_width_follows_distance(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.append_sample(0, 5)
        # (0,1) -> (0,5): distance 4, width 3.5 - 2
        self.assertAlmostEqual(self.surface.lines[-1][3], 1.5)

    def test_sample_while_idle_ignored(self) -> None:
        self.assertIsNone(self.pad.append_sample(5, 5))
        self.assertTrue(self.pad.is_empty)

    def test_new_press_finishes_active_stroke(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.append_sample(20, 0)
        self.pad.start_stroke(50, 50)
        self.assertEqual(len(self.outputs), 1)
        self.assertEqual(self.pad.segments[-1], Segment(50, 50, 50, 51))


class TestEndStroke(PadTestCase):
    def test_empty_log_leaves_surface_untouched(self) -> None:
        ops_before = list(self.surface.ops)
        self.assertFalse(self.pad.end_stroke())
        self.assertEqual(self.surface.ops, ops_before)
        self.assertEqual(self.outputs, [])

    def test_redraw_pass(self) -> None:
        self.pad.start_stroke(0, 0)
        for x in (10, 20, 30):
            self.pad.append_sample(x, 1)
        mark = len(self.surface.ops)
        self.assertTrue(self.pad.end_stroke())

        redraw = self.surface.ops[mark:]
        self.assertEqual(redraw[:2], [("clear",), ("fill", "#ffffff")])
        self.assertTrue(all(op[0] == "line" for op in redraw[2:]))
        self.assertIs(self.pad.state, StrokeState.IDLE)
        self.assertEqual(self.outputs, [self.pad.serialize()])

    def test_redraw_does_not_change_log(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.append_sample(10, 3)
        before = self.pad.segments
        self.pad.end_stroke()
        self.assertEqual(self.pad.segments, before)


class TestLeave(PadTestCase):
    def test_timeout_finalizes(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.append_sample(10, 0)
        self.pad.pointer_leave()
        self.assertIs(self.pad.state, StrokeState.LEAVING)
        self.assertEqual([d for d, _ in self.scheduler.pending.values()], [500])

        mark = len(self.surface.ops)
        self.scheduler.fire_all()
        self.assertIs(self.pad.state, StrokeState.IDLE)
        self.assertEqual(self.surface.ops[mark], ("clear",))
        self.assertEqual(len(self.outputs), 1)

    def test_return_cancels_timer(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.pointer_leave()
        self.pad.append_sample(5, 5)
        self.assertIs(self.pad.state, StrokeState.CAPTURING)
        self.assertEqual(self.scheduler.pending, {})
        self.assertEqual(len(self.scheduler.cancelled), 1)

    def test_release_cancels_timer(self) -> None:
        self.pad.start_stroke(0, 0)
        self.pad.pointer_leave()
        callbacks = [cb for _, cb in self.scheduler.pending.values()]
        self.pad.end_stroke()
        self.assertEqual(self.scheduler.pending, {})
        # a timer that fires late anyway must not redraw again
        for cb in callbacks:
            cb()
        self.assertEqual(len(self.outputs), 1)

    def test_leave_while_idle_ignored(self) -> None:
        self.pad.pointer_leave()
        self.assertIs(self.pad.state, StrokeState.IDLE)
        self.assertEqual(self.scheduler.pending, {})

    def test_threading_scheduler(self) -> None:
        done = threading.Event()
        pad = SignaturePad(RecordingSurface(), config=PadConfig(leave_timeout_ms=10),
                           scheduler=ThreadingScheduler(),
                           on_output=lambda _text: done.set())
        pad.start_stroke(0, 0)
        pad.pointer_leave()
        self.assertTrue(done.wait(5))
        self.assertIs(pad.state, StrokeState.IDLE)


class TestDeviceAndModes(PadTestCase):
    def test_device_fixed_by_first_press(self) -> None:
        self.assertIsNone(self.pad.device)
        self.draw(self.pad, [(0, 0), (5, 5)], InputDevice.TOUCH)
        self.assertIs(self.pad.device, InputDevice.TOUCH)
        before = self.pad.segments
        self.assertFalse(self.pad.start_stroke(30, 30, InputDevice.POINTER))
        self.assertEqual(self.pad.segments, before)
        self.assertTrue(self.pad.start_stroke(30, 30, InputDevice.TOUCH))

    def test_display_only(self) -> None:
        surface = RecordingSurface()
        pad = SignaturePad(surface, config=PadConfig(display_only=True),
                           scheduler=ManualScheduler())
        self.assertEqual(surface.ops, [])
        self.assertFalse(pad.start_stroke(1, 1))
        self.assertTrue(pad.is_empty)
        pad.regenerate('[{"lx":10,"ly":0,"mx":0,"my":0}]')
        self.assertEqual(pad.segments, (Segment(0, 0, 10, 0),))

    def test_clear(self) -> None:
        self.draw(self.pad, [(0, 0), (9, 9)])
        self.pad.clear()
        self.assertTrue(self.pad.is_empty)
        self.assertEqual(self.surface.ops[-2:], [("clear",), ("fill", "#ffffff")])
        self.assertEqual(self.outputs[-1], "")


class TestInterchange(PadTestCase):
    def test_round_trip_into_fresh_pad(self) -> None:
        self.draw(self.pad, [(0, 0), (10, 4), (20, 9)])
        self.draw(self.pad, [(60, 60), (70, 61)])
        text = self.pad.serialize()

        other = SignaturePad(RecordingSurface(), scheduler=ManualScheduler())
        other.replay(other.deserialize(text), append_to_log=True)
        self.assertEqual(other.segments, self.pad.segments)

    def test_replay_uses_constant_width(self) -> None:
        surface = RecordingSurface()
        self.pad.replay([Segment(0, 0, 10, 0), Segment(10, 0, 40, 0)], target=surface)
        self.assertEqual([op[3] for op in surface.lines], [2.0, 2.0])
        self.assertTrue(self.pad.is_empty)

    def test_regenerate_replaces_log(self) -> None:
        self.draw(self.pad, [(0, 0), (5, 0)])
        self.pad.regenerate([Segment(1, 1, 2, 2)])
        self.assertEqual(self.pad.segments, (Segment(1, 1, 2, 2),))
        self.assertEqual(self.outputs[-1], '[{"lx":2,"ly":2,"mx":1,"my":1}]')

    def test_regenerate_with_bad_data_keeps_state(self) -> None:
        self.draw(self.pad, [(0, 0), (5, 0)])
        before = self.pad.segments
        ops_before = list(self.surface.ops)
        with self.assertRaises(ParseError):
            self.pad.regenerate('[{"mx":0,"my":0,"lx":1}]')
        self.assertEqual(self.pad.segments, before)
        self.assertEqual(self.surface.ops, ops_before)

    def test_regenerate_with_unrepresentable_number_keeps_pad_usable(self) -> None:
        self.draw(self.pad, [(0, 0), (5, 0)])
        before = self.pad.segments
        huge = '[{"mx":0,"my":0,"lx":1' + "0" * 400 + ',"ly":0}]'
        with self.assertRaises(ParseError):
            self.pad.regenerate(huge)
        with self.assertRaises(ParseError):
            self.pad.regenerate("[" * 100000)
        self.assertEqual(self.pad.segments, before)
        self.draw(self.pad, [(30, 30), (40, 35)])
        self.assertTrue(self.pad.export_bitmap())

    def test_regenerate_with_empty_list(self) -> None:
        self.draw(self.pad, [(0, 0), (5, 0)])
        self.pad.regenerate([])
        self.assertTrue(self.pad.is_empty)


class TestExport(PadTestCase):
    def test_bitmap_matches_surface_size(self) -> None:
        self.draw(self.pad, [(20, 50), (100, 50), (180, 50)])
        img = Image.open(io.BytesIO(self.pad.export_bitmap()))
        self.assertEqual(img.format, "PNG")
        self.assertEqual(img.size, (200, 100))
        self.assertEqual(img.getpixel((2, 2))[:3], (255, 255, 255))

    def test_data_url(self) -> None:
        url = self.pad.export_data_url()
        self.assertTrue(url.startswith("data:image/png;base64,"))
        raw = base64.b64decode(url.split(",", 1)[1])
        self.assertEqual(raw[:8], b"\x89PNG\r\n\x1a\n")

    def test_jpeg_export(self) -> None:
        self.assertTrue(self.pad.export_data_url("jpg").startswith("data:image/jpeg;base64,"))


if __name__ == "__main__":
    unittest.main()
