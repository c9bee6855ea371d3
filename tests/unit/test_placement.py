import asyncio
import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from taskcard_renderer.models import (
    FontSettings,
    HorizontalAlignment,
    TaskSpec,
    TextBlockGeometry,
    VerticalPosition,
)
from taskcard_renderer.placement import MIN_GAP, place_panel, resolve_y
from taskcard_renderer.resources import ImageLoader
from taskcard_renderer.surface import Surface

NO_FOOTER = TextBlockGeometry(final_y=400, lines=[], line_height=0)
ONE_LINE_TITLE = TextBlockGeometry(final_y=69, lines=["Hello"], line_height=29)


def _has_red(image, box) -> bool:
    return any(r - max(g, b) > 120 for r, g, b, _ in image.crop(box).getdata())


class ResolveYTests(unittest.TestCase):
    def test_start_is_top_padding(self):
        tall_title = TextBlockGeometry(final_y=300, lines=["a"] * 9, line_height=29)
        y = resolve_y(VerticalPosition.START, 100, padding=10, image_height=400, title=tall_title, footer=NO_FOOTER)
        self.assertEqual(y, 10)

    def test_center_formula(self):
        footer = TextBlockGeometry(final_y=380, lines=["f"], line_height=23)
        y = resolve_y(VerticalPosition.CENTER, 100, padding=10, image_height=400, title=ONE_LINE_TITLE, footer=footer)
        self.assertEqual(y, 10 + (400 - 20 - 100 - 29 - 23) / 2 + 29)

    def test_end_formula(self):
        footer = TextBlockGeometry(final_y=380, lines=["f"], line_height=23)
        y = resolve_y(VerticalPosition.END, 100, padding=10, image_height=400, title=ONE_LINE_TITLE, footer=footer)
        self.assertEqual(y, 400 - 10 - MIN_GAP - 23 - 100)

    def test_center_and_end_never_overlap_title(self):
        tall_title = TextBlockGeometry(final_y=250, lines=["a"] * 7, line_height=30)
        for vertical in (VerticalPosition.CENTER, VerticalPosition.END):
            for panel_height in (0, 50, 200, 340):
                y = resolve_y(vertical, panel_height, padding=10, image_height=400, title=tall_title, footer=NO_FOOTER)
                self.assertGreaterEqual(y, tall_title.final_y + MIN_GAP)


class PlacePanelTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.loader = ImageLoader(self.tmp)
        self.settings = FontSettings()

    def tearDown(self):
        self._tmp.cleanup()

    def _place(self, task, vertical=VerticalPosition.START, horizontal=HorizontalAlignment.START, title=ONE_LINE_TITLE):
        surface = Surface(600, 400)
        placement = asyncio.run(
            place_panel(
                surface,
                self.loader,
                task,
                self.settings,
                vertical=vertical,
                horizontal=horizontal,
                padding=10,
                image_width=600,
                image_height=400,
                max_panel_height=300,
                title=title,
                footer=NO_FOOTER,
            )
        )
        return surface, placement

    def test_no_panel(self):
        _, placement = self._place(TaskSpec(title="t", number=1))
        self.assertIsNone(placement)

    def test_code_at_start_centered_over_its_own_width(self):
        task = TaskSpec(title="Hello", number=1, code="const x = 1;", language="javascript")
        _, placement = self._place(task, VerticalPosition.START, HorizontalAlignment.CENTER)
        self.assertEqual(placement.kind, "code")
        geometry = placement.geometry
        self.assertEqual(geometry.y, 10)
        self.assertGreater(placement.painted_height, 0)
        self.assertGreater(geometry.width, 0)
        self.assertAlmostEqual(geometry.x, 10 + (580 - geometry.width) / 2)

    def test_start_repaints_title_below_the_panel(self):
        self.settings = FontSettings(title_color="#ff0000")
        task = TaskSpec(title="Hello", number=1, code="let a = 1;\nlet b = 2;", language="javascript")

        surface, placement = self._place(task, VerticalPosition.START)
        baseline = placement.geometry.y + placement.geometry.height + MIN_GAP
        band = (0, int(baseline) - self.settings.title_size, 200, int(baseline) + 6)
        self.assertTrue(_has_red(surface.image, band))

        surface, placement = self._place(task, VerticalPosition.CENTER)
        self.assertGreater(placement.geometry.y, 10)
        self.assertFalse(_has_red(surface.image, band))

    def test_code_at_end_sits_above_bottom_gap(self):
        task = TaskSpec(title="Hello", number=1, code="let a = 1;\nlet b = 2;", language="js")
        _, placement = self._place(task, VerticalPosition.END, HorizontalAlignment.RIGHT)
        geometry = placement.geometry
        self.assertEqual(geometry.y + geometry.height, 400 - 10 - MIN_GAP)
        self.assertAlmostEqual(geometry.x + geometry.width, 590)

    def test_code_wins_over_image(self):
        Image.new("RGB", (50, 50), (0, 255, 0)).save(self.tmp / "pic.png")
        task = TaskSpec(title="t", number=1, code="x = 1", language="python", image="pic.png")
        _, placement = self._place(task)
        self.assertEqual(placement.kind, "code")

    def test_unsupported_language_has_no_image_fallback(self):
        Image.new("RGB", (50, 50), (0, 255, 0)).save(self.tmp / "pic.png")
        task = TaskSpec(title="t", number=1, code="+[-]", language="brainfuck", image="pic.png")
        with self.assertLogs("taskcard.renderer.placement", level="ERROR"):
            surface, placement = self._place(task)
        self.assertIsNone(placement)

    def test_image_panel_is_clamped_below_title(self):
        Image.new("RGB", (300, 150), (0, 255, 0)).save(self.tmp / "pic.png")
        task = TaskSpec(title="t", number=1, image="pic.png")
        _, placement = self._place(task, VerticalPosition.END)
        self.assertEqual(placement.kind, "image")
        self.assertEqual(placement.painted_height, 300 + 2 * 10 + 2 * 10)
        self.assertEqual(placement.geometry.y, ONE_LINE_TITLE.final_y + MIN_GAP)
        self.assertEqual(placement.geometry.width, 580)

    def test_missing_image_gives_no_panel(self):
        task = TaskSpec(title="t", number=1, image="gone.png")
        _, placement = self._place(task, VerticalPosition.CENTER)
        self.assertIsNone(placement)


if __name__ == "__main__":
    unittest.main()
