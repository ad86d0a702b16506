import unittest

from widget import FloatingWidgetController


class FloatingWidgetControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.widget = FloatingWidgetController(viewport=(1280, 800))

    def test_default_position(self) -> None:
        state = self.widget.state()
        self.assertEqual((20, 80), (state.x, state.y))
        self.assertTrue(state.visible)
        self.assertFalse(state.locked)
        self.assertFalse(state.dragging)

    def test_drag_applies_pointer_delta(self) -> None:
        self.widget.drag_start(300, 300)
        state = self.widget.drag_move(350, 320)
        self.assertEqual((70, 100), (state.x, state.y))
        self.assertTrue(state.dragging)

        state = self.widget.drag_move(360, 330)
        self.assertEqual((80, 110), (state.x, state.y))

    def test_drag_clamps_to_top_left(self) -> None:
        self.widget.drag_start(100, 100)
        state = self.widget.drag_move(50, 50)
        self.assertEqual((0, 30), (state.x, state.y))

    def test_drag_clamps_to_bottom_right(self) -> None:
        self.widget.drag_start(0, 0)
        state = self.widget.drag_move(5000, 5000)
        self.assertEqual((1080, 600), (state.x, state.y))

    def test_move_without_drag_is_ignored(self) -> None:
        state = self.widget.drag_move(500, 500)
        self.assertEqual((20, 80), (state.x, state.y))

    def test_drag_end_stops_moves(self) -> None:
        self.widget.drag_start(0, 0)
        self.widget.drag_end()
        state = self.widget.drag_move(100, 100)
        self.assertEqual((20, 80), (state.x, state.y))
        self.assertFalse(state.dragging)

    def test_lock_prevents_drag(self) -> None:
        self.widget.toggle_lock()
        self.widget.drag_start(0, 0)
        state = self.widget.drag_move(100, 100)
        self.assertEqual((20, 80), (state.x, state.y))
        self.assertTrue(state.locked)

    def test_locking_mid_drag_ends_drag(self) -> None:
        self.widget.drag_start(0, 0)
        state = self.widget.toggle_lock()
        self.assertFalse(state.dragging)
        state = self.widget.drag_move(100, 100)
        self.assertEqual((20, 80), (state.x, state.y))

    def test_toggle_visible(self) -> None:
        self.assertFalse(self.widget.toggle_visible().visible)
        self.assertTrue(self.widget.toggle_visible().visible)

    def test_resize_viewport_reclamps_position(self) -> None:
        self.widget.drag_start(0, 0)
        self.widget.drag_move(900, 500)
        self.widget.drag_end()
        state = self.widget.resize_viewport(600, 400)
        self.assertEqual((400, 200), (state.x, state.y))
        self.assertEqual(600, state.viewport_width)

    def test_viewport_smaller_than_widget_pins_origin(self) -> None:
        state = self.widget.resize_viewport(100, 100)
        self.assertEqual((0, 0), (state.x, state.y))

    def test_state_serializes_for_ui(self) -> None:
        payload = self.widget.state().to_dict()
        self.assertEqual(20, payload["x"])
        self.assertEqual(80, payload["y"])
        self.assertEqual(200, payload["widget_width"])

    def test_invalid_widget_size_rejected(self) -> None:
        with self.assertRaises(ValueError):
            FloatingWidgetController(widget_size=(0, 200))


if __name__ == "__main__":
    unittest.main()
