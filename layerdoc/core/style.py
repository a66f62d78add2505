"""
layerdoc Path Styles

Fill and stroke paint for primitives, written out as SVG presentation
attributes. Style values are frozen; build a new one with `replace()` or
the `with_*` helpers and assign it to the layer.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .geometry import format_number


@dataclass(frozen=True)
class Color:
    """RGBA color with float channels in [0, 1]."""
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 1.0

    @classmethod
    def from_rgba8(cls, r: int, g: int, b: int, a: int = 255) -> 'Color':
        return cls(r / 255, g / 255, b / 255, a / 255)

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """Parse '#rrggbb' or '#rrggbbaa'."""
        text = value.lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError(f"Invalid hex color: {value!r}")
        channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        return cls.from_rgba8(*channels)

    def rgb_hex(self) -> str:
        """Six digit hex string without the leading '#'."""
        return "".join(f"{round(c * 255):02x}" for c in (self.red, self.green, self.blue))


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


def _opacity_attribute(name: str, color: Color) -> str:
    if color.alpha >= 1.0:
        return ""
    return f' {name}="{format_number(round(color.alpha * 1000) / 1000)}"'


@dataclass(frozen=True)
class Fill:
    color: Color = BLACK

    def render(self) -> str:
        return f' fill="#{self.color.rgb_hex()}"' + _opacity_attribute("fill-opacity", self.color)


@dataclass(frozen=True)
class Stroke:
    color: Color = BLACK
    width: float = 1.0

    def render(self) -> str:
        return (f' stroke="#{self.color.rgb_hex()}"'
                + _opacity_attribute("stroke-opacity", self.color)
                + f' stroke-width="{format_number(self.width)}"')


@dataclass(frozen=True)
class PathStyle:
    """
    Stroke and fill paint for a primitive.

    A missing fill renders as ``fill="none"``; a missing stroke writes no
    stroke attributes at all.
    """
    stroke: Optional[Stroke] = None
    fill: Optional[Fill] = None

    def render(self) -> str:
        fill = self.fill.render() if self.fill is not None else ' fill="none"'
        stroke = self.stroke.render() if self.stroke is not None else ""
        return fill + stroke

    def with_fill(self, color: Optional[Color]) -> 'PathStyle':
        return replace(self, fill=Fill(color) if color is not None else None)

    def with_stroke(self, color: Optional[Color], width: float = 1.0) -> 'PathStyle':
        return replace(self, stroke=Stroke(color, width) if color is not None else None)
