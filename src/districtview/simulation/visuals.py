"""Scanner visuals: pulsing marker, text label sprite, and the event list.

Labels carry a Pillow RGBA bitmap (message on the first line, district and
time on the second) that the renderer uploads as a sprite texture.  The
bitmap is an owned resource: ``Label.dispose()`` releases it and removal
of an event must call it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from PIL import Image, ImageDraw, ImageFont

from districtview.scene.graph import SceneNode

LABEL_WIDTH = 1024
LABEL_HEIGHT = 512
_TITLE_FONT_SIZE = 80
_META_FONT_SIZE = 52
_FONT_CANDIDATES = ("Roboto-Bold.ttf", "Arial.ttf", "DejaVuSans-Bold.ttf")


def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    for name in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def meta_line(district_title: str, time_label: str) -> str:
    return f"{district_title} • {time_label}"


def render_label_bitmap(message: str, district_title: str, time_label: str) -> Image.Image:
    """Draw the two-line label on a transparent 1024x512 canvas."""
    image = Image.new("RGBA", (LABEL_WIDTH, LABEL_HEIGHT), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    white = (255, 255, 255, 255)
    draw.text((LABEL_WIDTH / 2, 180), message, fill=white,
              font=_font(_TITLE_FONT_SIZE), anchor="mm")
    draw.text((LABEL_WIDTH / 2, 300), meta_line(district_title, time_label), fill=white,
              font=_font(_META_FONT_SIZE), anchor="mm")
    return image


class Marker(SceneNode):
    """Sphere marking an event location; ``scale`` pulses every frame."""

    def __init__(self, name: str, position, radius: float = 2000.0) -> None:
        super().__init__(name)
        self.position = position
        self.radius = radius
        self.scale = 1.0
        self.opacity = 0.9
        self.depth_test = False
        self.render_order = 10


class Label(SceneNode):
    """Camera-facing sprite showing the event text."""

    def __init__(self, name: str, position, bitmap: Image.Image,
                 world_scale: tuple[float, float] = (24000.0, 12000.0)) -> None:
        super().__init__(name)
        self.position = position
        self.bitmap: Image.Image | None = bitmap
        self.world_scale = world_scale
        self.depth_test = False
        self.render_order = 11

    @property
    def disposed(self) -> bool:
        return self.bitmap is None

    def dispose(self) -> None:
        if self.bitmap is not None:
            self.bitmap.close()
            self.bitmap = None


@dataclass
class ListEntry:
    """One row of the scanner list."""

    event_id: str
    message: str
    district_title: str
    time_label: str
    on_select: Callable[[str], bool] | None = None

    def select(self) -> bool:
        if self.on_select is None:
            return False
        return self.on_select(self.event_id)

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "message": self.message,
            "district": self.district_title,
            "time": self.time_label,
        }


class EventFeed:
    """Most-recent-first list of live scanner events."""

    def __init__(self) -> None:
        self._entries: list[ListEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def prepend(self, entry: ListEntry) -> ListEntry:
        self._entries.insert(0, entry)
        return entry

    def remove(self, event_id: str) -> bool:
        for i, entry in enumerate(self._entries):
            if entry.event_id == event_id:
                del self._entries[i]
                return True
        return False

    def summaries(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]
