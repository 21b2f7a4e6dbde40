"""Raster surface the renderer draws into."""

from pathlib import Path

from PIL import Image, ImageColor, ImageDraw

from echoes.layout.positions import Viewport


class RenderSurface:
    """An RGB image addressed in logical pixels.

    `scale` is the device pixel ratio: the backing image is `scale` times the
    logical size and all drawing coordinates pass through `to_device`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scale: float = 1.0,
        background: str = "#0f172a",
    ) -> None:
        self.scale = scale
        self.background = ImageColor.getrgb(background)[:3]
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        device_size = (round(self.width * self.scale), round(self.height * self.scale))
        self.image = Image.new("RGB", device_size, self.background)

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.width, self.height)

    def clear(self) -> None:
        w, h = self.image.size
        if w and h:
            self.image.paste(self.background, (0, 0, w, h))

    def draw(self) -> ImageDraw.ImageDraw:
        # An RGBA draw over an RGB image alpha-blends each fill into the pixels below.
        return ImageDraw.Draw(self.image, "RGBA")

    def to_device(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale, y * self.scale

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path)
        return path

    def copy_frame(self) -> Image.Image:
        return self.image.copy()
