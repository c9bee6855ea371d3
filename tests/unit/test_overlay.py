import asyncio
import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from taskcard_renderer.models import OverlayElement, OverlayKind
from taskcard_renderer.overlay import render_overlay
from taskcard_renderer.resources import ImageLoader
from taskcard_renderer.surface import Surface


class RenderOverlayTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.loader = ImageLoader(self.tmp)
        self.surface = Surface(600, 400)
        self.before = self.surface.image.tobytes()

    def tearDown(self):
        self._tmp.cleanup()

    def _render(self, element):
        asyncio.run(render_overlay(self.surface, self.loader, element, 600, 400))

    def test_none_is_a_noop(self):
        self._render(None)
        self.assertEqual(self.surface.image.tobytes(), self.before)

    def test_empty_text_is_a_noop(self):
        self._render(OverlayElement(kind=OverlayKind.TEXT, content=None))
        self.assertEqual(self.surface.image.tobytes(), self.before)

    def test_text_is_anchored_bottom_right(self):
        self._render(OverlayElement(kind=OverlayKind.TEXT, content="@tasks", font_size=16, font_color="#ff0000"))
        self.assertNotEqual(self.surface.image.tobytes(), self.before)
        left_half = self.surface.image.crop((0, 0, 300, 400))
        self.assertEqual(left_half.getcolors(), [(300 * 400, (255, 255, 255, 255))])
        below_baseline = self.surface.image.crop((0, 397, 600, 400))
        self.assertEqual(below_baseline.getcolors(), [(600 * 3, (255, 255, 255, 255))])

    def test_image_uses_native_size_at_margins(self):
        Image.new("RGB", (20, 10), (0, 0, 255)).save(self.tmp / "logo.png")
        self._render(OverlayElement(kind=OverlayKind.IMAGE, image_path="logo.png", margin_right=5, margin_bottom=5))
        self.assertEqual(self.surface.image.getpixel((575, 385)), (0, 0, 255, 255))
        self.assertEqual(self.surface.image.getpixel((594, 394)), (0, 0, 255, 255))
        self.assertEqual(self.surface.image.getpixel((595, 395)), (255, 255, 255, 255))
        self.assertEqual(self.surface.image.getpixel((574, 385)), (255, 255, 255, 255))

    def test_missing_image_is_skipped(self):
        with self.assertLogs("taskcard.renderer.overlay", level="ERROR"):
            self._render(OverlayElement(kind=OverlayKind.IMAGE, image_path="gone.png"))
        self.assertEqual(self.surface.image.tobytes(), self.before)


if __name__ == "__main__":
    unittest.main()
