"""Draw a graph snapshot onto a RenderSurface."""

import logging
from collections.abc import Sequence

from PIL import ImageColor, ImageDraw, ImageFont

from echoes.config import RenderConfig
from echoes.layout.positions import PositionStore
from echoes.models import Edge, Node
from echoes.render.surface import RenderSurface

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


class Renderer:
    """Stateless drawing pass: edges first, then node glyphs on top."""

    def __init__(self, surface: RenderSurface, config: RenderConfig | None = None) -> None:
        self.surface = surface
        self.config = config or RenderConfig()
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def render(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        positions: PositionStore,
        hover_target: str | None = None,
    ) -> None:
        if self.surface.viewport.is_degenerate:
            logger.debug("Skipping render: degenerate viewport")
            return

        self.surface.clear()
        draw = self.surface.draw()

        for edge in edges:
            self._draw_edge(draw, edge, positions)

        for node in nodes:
            pos = positions.get(node.id)
            if pos is None:
                continue
            self._draw_node(draw, node, pos.x, pos.y, hovered=node.id == hover_target)

    # --- Edges ---

    def _draw_edge(self, draw: ImageDraw.ImageDraw, edge: Edge, positions: PositionStore) -> None:
        if edge.strength <= 0:
            return
        source = positions.get(edge.source)
        target = positions.get(edge.target)
        if source is None or target is None:
            return

        r, g, b = self.config.edge_color
        alpha = round(255 * edge.strength * 0.3)
        width = max(1, round(edge.strength * 2 * self.surface.scale))
        draw.line(
            [self.surface.to_device(source.x, source.y), self.surface.to_device(target.x, target.y)],
            fill=(r, g, b, alpha),
            width=width,
        )

    # --- Nodes ---

    def _draw_node(
        self,
        draw: ImageDraw.ImageDraw,
        node: Node,
        x: float,
        y: float,
        hovered: bool,
    ) -> None:
        cfg = self.config
        scale = self.surface.scale
        color = self._rgb(node.color)
        radius = node.size * (cfg.hover_scale if hovered else 1.0)
        cx, cy = self.surface.to_device(x, y)
        r = radius * scale

        self._draw_glow(draw, cx, cy, r * 2, color)

        bbox = [(cx - r, cy - r), (cx + r, cy + r)]
        draw.ellipse(bbox, fill=color + (255,))
        if hovered:
            outline = self._rgb(cfg.hover_color) + (255,)
            stroke = 3
        else:
            outline = color + (0x80,)
            stroke = 2
        draw.ellipse(bbox, outline=outline, width=max(1, round(stroke * scale)))

        font = self._font(cfg.hover_font_size if hovered else cfg.font_size)
        left, top, right, bottom = draw.textbbox((0, 0), node.label, font=font)
        tw = right - left
        th = bottom - top
        label_y = cy + r + cfg.label_offset * scale
        draw.text(
            (cx - tw / 2 - left, label_y - th / 2 - top),
            node.label,
            fill=self._rgb(cfg.label_color) + (255,),
            font=font,
        )

    def _draw_glow(
        self,
        draw: ImageDraw.ImageDraw,
        cx: float,
        cy: float,
        outer_radius: float,
        color: RGB,
    ) -> None:
        """Approximate a radial gradient with stacked translucent discs."""
        steps = max(1, self.config.glow_steps)
        ring_alpha = max(1, self.config.glow_alpha // steps)
        for i in range(steps):
            gr = outer_radius * (1 - i / steps)
            draw.ellipse(
                [(cx - gr, cy - gr), (cx + gr, cy + gr)],
                fill=color + (ring_alpha,),
            )

    def _rgb(self, token: str) -> RGB:
        try:
            return ImageColor.getrgb(token)[:3]
        except ValueError:
            logger.debug("Unrecognized color %r, using fallback", token)
            return ImageColor.getrgb(self.config.fallback_node_color)[:3]

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        px = max(1, round(size * self.surface.scale))
        if px not in self._fonts:
            self._fonts[px] = ImageFont.load_default(size=px)
        return self._fonts[px]
