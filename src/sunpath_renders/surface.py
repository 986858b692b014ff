"""
2D drawing surfaces for the scene composer.

Surface defines the primitive set the composer relies on. RasterSurface
rasterizes into a Pillow RGBA image (gradients are evaluated with NumPy);
RecordingSurface keeps an ordered log of calls for headless checks.

Colors are '#RRGGBB' strings or (r, g, b[, a]) tuples with 0-255 channels.
Gradient stops are sequences of (offset, color) with offsets in [0, 1].
"""
import math
from contextlib import contextmanager
from typing import NamedTuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont


def to_rgba(color):
    """Normalize a color to an (r, g, b, a) tuple of ints."""
    if isinstance(color, str):
        rgb = ImageColor.getrgb(color)
    else:
        rgb = tuple(int(round(c)) for c in color)
    if len(rgb) == 3:
        return (*rgb, 255)
    return rgb


def interpolate_stops(t, stops):
    """
    Evaluate gradient stops at parameter values.

    Args:
        t: Array of gradient parameters, clipped to [0, 1]
        stops: Sequence of (offset, color)

    Returns:
        (..., 4) float array of RGBA values
    """
    offsets = np.array([offset for offset, _ in stops], dtype=float)
    colors = np.array([to_rgba(color) for _, color in stops], dtype=float)
    t = np.clip(t, 0.0, 1.0)
    channels = [np.interp(t, offsets, colors[:, c]) for c in range(4)]
    return np.stack(channels, axis=-1)


def dash_polyline(points, pattern):
    """
    Split a polyline into dashes.

    Args:
        points: Sequence of (x, y)
        pattern: (on_length, off_length) in pixels

    Returns:
        List of dashes, each a list of (x, y) with at least two points
    """
    on, off = pattern
    if on <= 0:
        raise ValueError(f"dash length must be positive, got {on}")
    if off <= 0:
        return [list(points)] if len(points) >= 2 else []

    period = on + off
    dashes = []
    current = []
    phase = 0.0
    for (xa, ya), (xb, yb) in zip(points, points[1:]):
        seg_len = math.hypot(xb - xa, yb - ya)
        pos = 0.0
        while pos < seg_len:
            in_on = phase < on
            remaining = (on - phase) if in_on else (period - phase)
            step = min(remaining, seg_len - pos)
            if in_on:
                t0 = pos / seg_len
                t1 = (pos + step) / seg_len
                if not current:
                    current.append((xa + (xb - xa) * t0, ya + (yb - ya) * t0))
                current.append((xa + (xb - xa) * t1, ya + (yb - ya) * t1))
            pos += step
            phase += step
            if in_on and phase >= on:
                dashes.append(current)
                current = []
            elif phase >= period:
                phase = 0.0
    if len(current) >= 2:
        dashes.append(current)
    return dashes


def quadratic_points(start, control, end, steps=24):
    """Sample a quadratic Bezier curve into a polyline."""
    t = np.linspace(0.0, 1.0, steps + 1)
    x = (1 - t) ** 2 * start[0] + 2 * (1 - t) * t * control[0] + t ** 2 * end[0]
    y = (1 - t) ** 2 * start[1] + 2 * (1 - t) * t * control[1] + t ** 2 * end[1]
    return list(zip(x.tolist(), y.tolist()))


class Surface:
    """Drawing primitives consumed by the scene composer."""

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    def fill_rect(self, x, y, w, h, fill):
        raise NotImplementedError

    def stroke_rect(self, x, y, w, h, color, width=1):
        raise NotImplementedError

    def fill_linear_gradient(self, x, y, w, h, start, end, stops):
        raise NotImplementedError

    def fill_radial_gradient(self, cx, cy, radius, stops):
        raise NotImplementedError

    def stroke_polyline(self, points, color, width=1, dash=None):
        raise NotImplementedError

    def stroke_quadratic(self, start, control, end, color, width=1, dash=None):
        self.stroke_polyline(quadratic_points(start, control, end), color, width, dash)

    def fill_polygon(self, points, fill):
        raise NotImplementedError

    def fill_circle(self, cx, cy, radius, fill):
        raise NotImplementedError

    def stroke_circle(self, cx, cy, radius, color, width=1):
        raise NotImplementedError

    def draw_text(self, x, y, text, fill, size=16, stroke=None, stroke_width=0, anchor="mm"):
        raise NotImplementedError


class RasterSurface(Surface):
    """
    Pillow-backed raster target.

    Every primitive is drawn on a transparent layer and alpha-composited onto
    the canvas, so translucent colors blend with what is already there.
    """

    def __init__(self, width, height, background=(0, 0, 0, 255)):
        super().__init__(width, height)
        self.image = Image.new("RGBA", (self.width, self.height), to_rgba(background))
        self._fonts = {}

    @contextmanager
    def _layer(self):
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        yield ImageDraw.Draw(layer)
        self.image.alpha_composite(layer)

    def _font(self, size):
        font = self._fonts.get(size)
        if font is None:
            font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def _clip_box(self, x0, y0, x1, y1):
        """Integer pixel box clipped to the canvas, or None when empty."""
        bx0 = max(0, int(math.floor(x0)))
        by0 = max(0, int(math.floor(y0)))
        bx1 = min(self.width, int(math.ceil(x1)))
        by1 = min(self.height, int(math.ceil(y1)))
        if bx1 <= bx0 or by1 <= by0:
            return None
        return bx0, by0, bx1, by1

    def _composite_array(self, rgba, x0, y0):
        tile = Image.fromarray(np.clip(np.round(rgba), 0, 255).astype(np.uint8))
        self.image.alpha_composite(tile, dest=(x0, y0))

    def fill_rect(self, x, y, w, h, fill):
        if w <= 0 or h <= 0:
            return
        with self._layer() as draw:
            draw.rectangle([x, y, x + w - 1, y + h - 1], fill=to_rgba(fill))

    def stroke_rect(self, x, y, w, h, color, width=1):
        if w <= 0 or h <= 0:
            return
        with self._layer() as draw:
            draw.rectangle([x, y, x + w - 1, y + h - 1], outline=to_rgba(color), width=width)

    def fill_linear_gradient(self, x, y, w, h, start, end, stops):
        box = self._clip_box(x, y, x + w, y + h)
        if box is None:
            return
        bx0, by0, bx1, by1 = box
        px, py = np.meshgrid(np.arange(bx0, bx1) + 0.5, np.arange(by0, by1) + 0.5)

        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length_sq = dx * dx + dy * dy
        if length_sq > 0:
            t = ((px - start[0]) * dx + (py - start[1]) * dy) / length_sq
        else:
            t = np.zeros_like(px)
        self._composite_array(interpolate_stops(t, stops), bx0, by0)

    def fill_radial_gradient(self, cx, cy, radius, stops):
        if radius <= 0:
            return
        box = self._clip_box(cx - radius, cy - radius, cx + radius, cy + radius)
        if box is None:
            return
        bx0, by0, bx1, by1 = box
        px, py = np.meshgrid(np.arange(bx0, bx1) + 0.5, np.arange(by0, by1) + 0.5)

        dist = np.hypot(px - cx, py - cy)
        rgba = interpolate_stops(dist / radius, stops)
        # Nothing outside the circle
        rgba[dist > radius, 3] = 0.0
        self._composite_array(rgba, bx0, by0)

    def stroke_polyline(self, points, color, width=1, dash=None):
        if len(points) < 2:
            return
        pieces = dash_polyline(points, dash) if dash else [list(points)]
        with self._layer() as draw:
            for piece in pieces:
                draw.line([tuple(p) for p in piece], fill=to_rgba(color), width=width, joint="curve")

    def fill_polygon(self, points, fill):
        with self._layer() as draw:
            draw.polygon([tuple(p) for p in points], fill=to_rgba(fill))

    def fill_circle(self, cx, cy, radius, fill):
        with self._layer() as draw:
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=to_rgba(fill))

    def stroke_circle(self, cx, cy, radius, color, width=1):
        with self._layer() as draw:
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius],
                         outline=to_rgba(color), width=width)

    def draw_text(self, x, y, text, fill, size=16, stroke=None, stroke_width=0, anchor="mm"):
        with self._layer() as draw:
            draw.text((x, y), text, fill=to_rgba(fill), font=self._font(size), anchor=anchor,
                      stroke_width=stroke_width if stroke is not None else 0,
                      stroke_fill=to_rgba(stroke) if stroke is not None else None)

    def to_array(self):
        """(H, W, 3) uint8 RGB copy of the canvas."""
        return np.array(self.image.convert("RGB"))


class DrawCall(NamedTuple):
    op: str
    args: dict


class RecordingSurface(Surface):
    """Records primitive calls in order instead of rasterizing them."""

    def __init__(self, width, height):
        super().__init__(width, height)
        self.calls = []

    def _record(self, op, **args):
        self.calls.append(DrawCall(op, args))

    def ops(self, name=None):
        """Calls in order, optionally filtered by primitive name."""
        return [c for c in self.calls if name is None or c.op == name]

    def fill_rect(self, x, y, w, h, fill):
        self._record("fill_rect", x=x, y=y, w=w, h=h, fill=fill)

    def stroke_rect(self, x, y, w, h, color, width=1):
        self._record("stroke_rect", x=x, y=y, w=w, h=h, color=color, width=width)

    def fill_linear_gradient(self, x, y, w, h, start, end, stops):
        self._record("fill_linear_gradient", x=x, y=y, w=w, h=h,
                     start=tuple(start), end=tuple(end), stops=list(stops))

    def fill_radial_gradient(self, cx, cy, radius, stops):
        self._record("fill_radial_gradient", cx=cx, cy=cy, radius=radius, stops=list(stops))

    def stroke_polyline(self, points, color, width=1, dash=None):
        self._record("stroke_polyline", points=[tuple(p) for p in points],
                     color=color, width=width, dash=dash)

    def fill_polygon(self, points, fill):
        self._record("fill_polygon", points=[tuple(p) for p in points], fill=fill)

    def fill_circle(self, cx, cy, radius, fill):
        self._record("fill_circle", cx=cx, cy=cy, radius=radius, fill=fill)

    def stroke_circle(self, cx, cy, radius, color, width=1):
        self._record("stroke_circle", cx=cx, cy=cy, radius=radius, color=color, width=width)

    def draw_text(self, x, y, text, fill, size=16, stroke=None, stroke_width=0, anchor="mm"):
        self._record("draw_text", x=x, y=y, text=text, fill=fill, size=size,
                     stroke=stroke, stroke_width=stroke_width, anchor=anchor)
