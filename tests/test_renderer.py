"""Tests for the PIL renderer and render surface."""

import pytest
from PIL import Image

from echoes.config import RenderConfig
from echoes.layout.positions import PositionStore, Viewport
from echoes.models import Edge
from echoes.render.renderer import Renderer
from echoes.render.surface import RenderSurface

from conftest import make_node

BACKGROUND = (15, 23, 42)


@pytest.fixture()
def surface():
    return RenderSurface(400, 400)


def _positions(surface: RenderSurface, **coords: tuple[float, float]) -> PositionStore:
    store = PositionStore(surface.viewport)
    store.reconcile([make_node(node_id) for node_id in coords])
    for node_id, (x, y) in coords.items():
        store[node_id].x = x
        store[node_id].y = y
    return store


def _pixel(surface: RenderSurface, x: int, y: int) -> tuple[int, int, int]:
    return surface.image.getpixel((x, y))[:3]


class TestSurface:
    def test_backing_image_scaled(self):
        surface = RenderSurface(100, 50, scale=2.0)
        assert surface.image.size == (200, 100)
        assert surface.viewport == Viewport(100, 50)

    def test_resize_replaces_image(self, surface):
        surface.resize(120, 80)
        assert surface.image.size == (120, 80)
        assert surface.viewport == Viewport(120, 80)

    def test_negative_size_clamped_to_zero(self):
        surface = RenderSurface(-5, 10)
        assert surface.viewport.is_degenerate

    def test_save_writes_png(self, surface, tmp_path):
        path = surface.save(tmp_path / "nested" / "frame.png")
        assert path.exists()


class TestRenderer:
    def test_empty_snapshot_paints_background(self, surface):
        Renderer(surface).render([], [], PositionStore(surface.viewport))

        colors = surface.image.convert("RGB").getcolors()
        assert colors == [(400 * 400, BACKGROUND)]

    def test_render_clears_previous_frame(self, surface):
        node = make_node("a", size=20)
        positions = _positions(surface, a=(200, 200))
        renderer = Renderer(surface)

        renderer.render([node], [], positions)
        renderer.render([], [], positions)

        assert _pixel(surface, 200, 200) == BACKGROUND

    def test_edge_drawn_between_endpoints(self, surface):
        a, b = make_node("a", size=5), make_node("b", size=5)
        positions = _positions(surface, a=(100, 200), b=(300, 200))

        Renderer(surface).render([a, b], [Edge(source="a", target="b", strength=1.0)], positions)

        assert any(_pixel(surface, 200, y) != BACKGROUND for y in range(197, 204))

    def test_zero_strength_edge_not_drawn(self, surface):
        a, b = make_node("a", size=5), make_node("b", size=5)
        positions = _positions(surface, a=(100, 200), b=(300, 200))

        Renderer(surface).render([a, b], [Edge(source="a", target="b", strength=0.0)], positions)

        assert all(_pixel(surface, 200, y) == BACKGROUND for y in range(197, 204))

    def test_dangling_edge_skipped(self, surface):
        a = make_node("a", size=5)
        positions = _positions(surface, a=(100, 200))

        Renderer(surface).render([a], [Edge(source="a", target="ghost", strength=1.0)], positions)

        assert _pixel(surface, 200, 200) == BACKGROUND

    def test_nodes_drawn_over_edges(self, surface):
        a, b = make_node("a", size=20), make_node("b", size=20, color="#00ff00")
        positions = _positions(surface, a=(100, 200), b=(300, 200))

        Renderer(surface).render([a, b], [Edge(source="a", target="b", strength=1.0)], positions)

        assert _pixel(surface, 100, 200) == (255, 0, 0)
        assert _pixel(surface, 300, 200) == (0, 255, 0)

    def test_hovered_node_is_enlarged(self, surface):
        node = make_node("a", size=30)
        positions = _positions(surface, a=(200, 200))
        renderer = Renderer(surface)

        renderer.render([node], [], positions)
        assert _pixel(surface, 232, 200) != (255, 0, 0)

        renderer.render([node], [], positions, hover_target="a")
        assert _pixel(surface, 232, 200) == (255, 0, 0)

    def test_hovered_node_gets_white_outline(self, surface):
        node = make_node("a", size=30)
        positions = _positions(surface, a=(200, 200))

        Renderer(surface).render([node], [], positions, hover_target="a")

        assert _pixel(surface, 235, 200) == (255, 255, 255)

    def test_hover_target_not_in_snapshot_ignored(self, surface):
        node = make_node("a", size=30)
        positions = _positions(surface, a=(200, 200))

        Renderer(surface).render([node], [], positions, hover_target="missing")

        assert _pixel(surface, 232, 200) != (255, 0, 0)

    def test_scale_applies_to_device_pixels(self):
        surface = RenderSurface(100, 100, scale=2.0)
        node = make_node("a", size=10)
        positions = _positions(surface, a=(50, 50))

        Renderer(surface).render([node], [], positions)

        assert _pixel(surface, 100, 100) == (255, 0, 0)
        assert _pixel(surface, 112, 100) == (255, 0, 0)

    def test_unknown_color_uses_fallback(self, surface):
        node = make_node("a", size=20, color="not-a-color")
        positions = _positions(surface, a=(200, 200))

        Renderer(surface, RenderConfig(fallback_node_color="#06b6d4")).render([node], [], positions)

        assert _pixel(surface, 200, 200) == (6, 182, 212)

    def test_degenerate_surface_is_noop(self):
        surface = RenderSurface(0, 0)
        node = make_node("a")
        positions = _positions(surface, a=(0, 0))

        Renderer(surface).render([node], [], positions)

        assert surface.image.size == (0, 0)


def _ink(frame, x: int, ys: range) -> int:
    """Total channel distance from the background along a pixel column."""
    return sum(
        sum(abs(c - b) for c, b in zip(frame.getpixel((x, y)), BACKGROUND))
        for y in ys
    )


class TestBlending:
    def test_glow_fades_toward_background(self, surface):
        node = make_node("a", size=30)
        positions = _positions(surface, a=(200, 200))

        Renderer(surface).render([node], [], positions)
        frame = surface.copy_frame()

        r, g, b = frame.getpixel((245, 200))  # 1.5 radii out
        assert BACKGROUND[0] < r < 255
        assert g <= BACKGROUND[1]
        # Further out the glow is fainter still, and past 2r it is gone.
        assert frame.getpixel((255, 200))[0] < r
        assert frame.getpixel((265, 200)) == BACKGROUND

    def test_stronger_edges_are_more_opaque(self):
        def edge_ink(strength: float) -> int:
            surface = RenderSurface(400, 400)
            a, b = make_node("a", size=5), make_node("b", size=5)
            positions = _positions(surface, a=(100, 200), b=(300, 200))
            Renderer(surface).render([a, b], [Edge(source="a", target="b", strength=strength)], positions)
            return _ink(surface.copy_frame(), 200, range(195, 206))

        weak, strong = edge_ink(0.2), edge_ink(0.9)
        assert 0 < weak < strong

    def test_edge_is_translucent(self, surface):
        a, b = make_node("a", size=5), make_node("b", size=5)
        positions = _positions(surface, a=(100, 200), b=(300, 200))

        Renderer(surface).render([a, b], [Edge(source="a", target="b", strength=1.0)], positions)
        frame = surface.copy_frame()

        edge_color = RenderConfig().edge_color
        assert all(frame.getpixel((200, y)) != edge_color for y in range(195, 206))

    def test_later_glow_does_not_cover_earlier_fill(self, surface):
        a = make_node("a", size=20)
        b = make_node("b", size=20, color="#00ff00")
        # b's glow (radius 40) reaches a's center.
        positions = _positions(surface, a=(100, 200), b=(130, 200))

        Renderer(surface).render([a, b], [], positions)
        r, g, _ = surface.copy_frame().getpixel((100, 200))

        assert r > 200
        assert g < 60

    def test_saved_png_matches_frame(self, surface, tmp_path):
        node = make_node("a", size=30)
        positions = _positions(surface, a=(200, 200))
        Renderer(surface).render([node], [], positions)

        path = surface.save(tmp_path / "frame.png")

        with Image.open(path) as img:
            assert img.getpixel((245, 200)) == surface.copy_frame().getpixel((245, 200))
