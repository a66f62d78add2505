"""
Tests for Layer.

Covers the render cache and its invalidation, blend/opacity wrapping,
hit-testing through the layer transform and folder access.
"""

import math
import unittest
from unittest import mock

from layerdoc.core.blend_mode import BlendMode
from layerdoc.core.errors import NotAFolderError
from layerdoc.core.folder import Folder
from layerdoc.core.geometry import Affine2D, BoundingBox, Point
from layerdoc.core.layer import Layer
from layerdoc.core.shapes import Ellipse, Rect
from layerdoc.core.style import Color, Fill, PathStyle


def square_quad(x0, y0, x1, y1):
    return [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]


def rim_quad(center, theta, inner, outer, half_width=0.05):
    """A thin radial strip between two radii around `center`."""
    dx, dy = math.cos(theta), math.sin(theta)
    nx, ny = -dy * half_width, dx * half_width
    return [
        Point(center + dx * inner + nx, center + dy * inner + ny),
        Point(center + dx * outer + nx, center + dy * outer + ny),
        Point(center + dx * outer - nx, center + dy * outer - ny),
        Point(center + dx * inner - nx, center + dy * inner - ny),
    ]


RECT_MARKUP = '<path d="M0,0 L10,0 L10,10 L0,10 Z" fill="none" />'


class TestLayerCreation(unittest.TestCase):
    """Test layer defaults."""

    def test_defaults(self):
        """A new layer is visible, dirty, normal and opaque."""
        layer = Layer(Rect())
        self.assertTrue(layer.visible)
        self.assertIsNone(layer.name)
        self.assertTrue(layer.cache_dirty)
        self.assertEqual(layer.cache, "")
        self.assertEqual(layer.thumbnail_cache, "")
        self.assertEqual(layer.blend_mode, BlendMode.NORMAL)
        self.assertEqual(layer.opacity, 1.0)
        self.assertEqual(layer.transform, Affine2D.identity())
        self.assertEqual(layer.style, PathStyle())

    def test_transform_from_values(self):
        """Six transform values are accepted."""
        layer = Layer(Rect(), [1, 0, 0, 1, 5, 6])
        self.assertEqual(layer.transform, Affine2D.from_translation(5, 6))

    def test_blend_mode_table(self):
        """All sixteen blend modes map to CSS keywords."""
        self.assertEqual(len(BlendMode), 16)
        self.assertEqual(BlendMode.COLOR_BURN.to_svg_style_name(), "color-burn")
        self.assertEqual(BlendMode.SOFT_LIGHT.to_svg_style_name(), "soft-light")
        self.assertEqual(BlendMode.LUMINOSITY.to_svg_style_name(), "luminosity")


class TestLayerRender(unittest.TestCase):
    """Test the render cache."""

    def setUp(self):
        self.layer = Layer(Rect(0, 0, 10, 10))

    def test_render_output(self):
        """The payload is wrapped in a compositing group."""
        markup = self.layer.render()
        self.assertEqual(
            markup,
            f'<g style="mix-blend-mode: normal; opacity: 1">{RECT_MARKUP}</g>'
        )
        self.assertEqual(self.layer.thumbnail_cache, RECT_MARKUP)
        self.assertEqual(self.layer.cache, markup)
        self.assertFalse(self.layer.cache_dirty)

    def test_render_is_idempotent(self):
        """A second render returns the cache without recomputing."""
        with mock.patch.object(self.layer.data, "render",
                               wraps=self.layer.data.render) as spy:
            first = self.layer.render()
            second = self.layer.render()
        self.assertEqual(first, second)
        self.assertEqual(spy.call_count, 1)

    def test_dirty_round_trip(self):
        """Changing the transform invalidates and changes the output."""
        before = self.layer.render()
        self.layer.transform = Affine2D.from_translation(5, 0)
        self.assertTrue(self.layer.cache_dirty)
        after = self.layer.render()
        self.assertNotEqual(before, after)
        self.assertIn('d="M5,0 L15,0 L15,10 L5,10 Z"', after)

    def test_manual_dirty_flag(self):
        """In-place payload edits need the flag set by hand."""
        self.layer.render()
        self.layer.data.width = 20
        self.assertFalse(self.layer.cache_dirty)
        self.assertIn(RECT_MARKUP, self.layer.render())
        self.layer.cache_dirty = True
        self.assertIn("L20,0", self.layer.render())

    def test_setters_mark_dirty(self):
        """Assigning tracked attributes dirties the cache."""
        assignments = [
            ("data", Ellipse()),
            ("transform", Affine2D.from_scale(2)),
            ("style", PathStyle(fill=Fill(Color(1, 0, 0)))),
            ("blend_mode", BlendMode.MULTIPLY),
            ("opacity", 0.5),
        ]
        for attribute, value in assignments:
            with self.subTest(attribute=attribute):
                self.layer.render()
                setattr(self.layer, attribute, value)
                self.assertTrue(self.layer.cache_dirty)

    def test_name_and_visibility_keep_cache(self):
        """Renaming or hiding does not invalidate."""
        self.layer.render()
        self.layer.name = "Renamed"
        self.layer.visible = False
        self.layer.visible = True
        self.assertFalse(self.layer.cache_dirty)

    def test_blend_and_opacity_in_wrapper(self):
        """Blend mode and opacity are written into the group style."""
        self.layer.blend_mode = BlendMode.COLOR_DODGE
        self.layer.opacity = 0.25
        self.assertTrue(self.layer.render().startswith(
            '<g style="mix-blend-mode: color-dodge; opacity: 0.25">'
        ))
        self.assertEqual(self.layer.thumbnail_cache, RECT_MARKUP)

    def test_opacity_not_clamped(self):
        """Out of range opacity is passed through."""
        self.layer.opacity = 1.5
        self.assertIn("opacity: 1.5", self.layer.render())

    def test_invisible_layer_keeps_cache(self):
        """Hidden layers render nothing, skip hit-tests and keep the cache."""
        original = self.layer.render()
        self.layer.visible = False

        with mock.patch.object(self.layer.data, "render",
                               wraps=self.layer.data.render) as spy:
            self.assertEqual(self.layer.render(), "")
            self.assertEqual(self.layer.cache, original)

            intersections = []
            self.layer.intersects_quad(square_quad(-5, -5, 15, 15), [], intersections)
            self.assertEqual(intersections, [])

            self.layer.visible = True
            self.assertFalse(self.layer.cache_dirty)
            self.assertEqual(self.layer.render(), original)
        self.assertEqual(spy.call_count, 0)

    def test_invisible_dirty_layer_not_rendered(self):
        """A hidden layer stays dirty until it is shown and rendered."""
        self.layer.visible = False
        self.assertEqual(self.layer.render(), "")
        self.assertTrue(self.layer.cache_dirty)
        self.assertEqual(self.layer.cache, "")


class TestLayerGeometry(unittest.TestCase):
    """Test hit-testing and bounds through the layer transform."""

    def test_intersects_in_parent_space(self):
        """The quad is mapped through the inverse transform."""
        layer = Layer(Rect(0, 0, 10, 10), Affine2D.from_translation(100, 100))
        hits = []
        layer.intersects_quad(square_quad(104, 104, 106, 106), [3], hits)
        self.assertEqual(hits, [[3]])

        misses = []
        layer.intersects_quad(square_quad(4, 4, 6, 6), [3], misses)
        self.assertEqual(misses, [])

    def test_intersects_scaled(self):
        """Scaled unit primitives are hit at their drawn size."""
        layer = Layer(Rect(), Affine2D.from_scale(10))
        hits = []
        layer.intersects_quad(square_quad(2, 2, 8, 8), [], hits)
        self.assertEqual(hits, [[]])

    def test_scaled_curve_hit_near_rim(self):
        """Curves stay close to their drawn outline when scaled up."""
        layer = Layer(Ellipse(), Affine2D.from_scale(1000))
        for theta in (0.3, math.pi / 5, 2.0, 4.0):
            hits = []
            layer.intersects_quad(rim_quad(500, theta, 499.0, 499.9), [], hits)
            self.assertEqual(hits, [[]], theta)

    def test_nested_scales_compound(self):
        """Folder and child scales both tighten the flattening."""
        folder = Folder()
        folder.add_layer(Layer(Ellipse(), Affine2D.from_scale(10)))
        layer = Layer(folder, Affine2D.from_scale(100))
        hits = []
        layer.intersects_quad(rim_quad(500, 1.0, 499.0, 499.9), [], hits)
        self.assertEqual(hits, [[0]])

    def test_scaled_curve_miss_outside_rim(self):
        """Quads just outside a scaled curve are not hits."""
        layer = Layer(Ellipse(), Affine2D.from_scale(1000))
        hits = []
        layer.intersects_quad(rim_quad(500, 1.0, 500.5, 501.0), [], hits)
        self.assertEqual(hits, [])

    def test_degenerate_transform(self):
        """A collapsed layer cannot be hit and does not raise."""
        layer = Layer(Rect(), Affine2D.from_scale(0))
        hits = []
        layer.intersects_quad(square_quad(-1, -1, 1, 1), [], hits)
        self.assertEqual(hits, [])

    def test_current_bounding_box(self):
        """Bounds use the layer's own transform."""
        layer = Layer(Rect(0, 0, 10, 10), Affine2D.from_translation(100, 100))
        self.assertEqual(layer.current_bounding_box(), BoundingBox(100, 100, 110, 110))

    def test_bounding_box_explicit_transform(self):
        """Bounds can be taken in another space."""
        layer = Layer(Rect(0, 0, 10, 10), Affine2D.from_translation(100, 100))
        box = layer.bounding_box(Affine2D.from_scale(2), layer.style)
        self.assertEqual(box, BoundingBox(0, 0, 20, 20))

    def test_to_path(self):
        """to_path applies the layer transform."""
        layer = Layer(Rect(), Affine2D.from_translation(1, 1))
        self.assertEqual(layer.to_path().to_svg(), "M1,1 L2,1 L2,2 L1,2 Z")


class TestLayerFolderAccess(unittest.TestCase):
    """Test as_folder() and friends."""

    def test_as_folder(self):
        """Folder layers expose their folder."""
        folder = Folder()
        layer = Layer(folder)
        self.assertIs(layer.as_folder(), folder)
        self.assertTrue(layer.is_folder())

    def test_not_a_folder(self):
        """Leaf layers refuse folder access."""
        layer = Layer(Rect())
        self.assertFalse(layer.is_folder())
        with self.assertRaises(NotAFolderError):
            layer.as_folder()
        with self.assertRaises(NotAFolderError):
            layer.render_as_folder()

    def test_empty_folder_bounds(self):
        """An empty folder has no bounding box."""
        self.assertIsNone(Layer(Folder()).current_bounding_box())

    def test_clone(self):
        """Clones copy the payload and compositing and start dirty."""
        layer = Layer(Rect(0, 0, 10, 10), name="Box")
        layer.blend_mode = BlendMode.SCREEN
        layer.opacity = 0.5
        layer.render()

        copy = layer.clone()
        self.assertTrue(copy.cache_dirty)
        self.assertEqual(copy.name, "Box")
        self.assertEqual(copy.blend_mode, BlendMode.SCREEN)
        self.assertEqual(copy.data, layer.data)
        self.assertIsNot(copy.data, layer.data)
        self.assertEqual(copy.render(), layer.render())


if __name__ == '__main__':
    unittest.main()
