# aerodrome-lite/aerodrome/atc/rendering.py
"""
2D rendering framework

Thin pyglet layer for the viewer: a window holding persistent and one-time
geometries, and the handful of shapes the airspace needs. Coordinates are
screen coordinates (y up); callers flip the y-down canvas themselves.
"""
import sys

import numpy as np
import pyglet
from gymnasium import error


def get_display(spec):
    """
    Convert a display specification (such as :0) into an actual Display object.

    Pyglet only supports multiple Displays on Linux.
    """
    if spec is None:
        return pyglet.display.get_display()
    elif isinstance(spec, str):
        return pyglet.display.Display(spec)
    else:
        raise error.Error(f"Invalid display specification: {spec}. (Must be a string like :0 or None.)")


class Viewer(object):
    """
    Rendering window. Persistent geometries are drawn every frame, one-time
    geometries only in the next frame.
    """
    def __init__(self, width, height, display=None, caption="aerodrome"):
        display = get_display(display)
        self.width = width
        self.height = height
        self.window = pyglet.window.Window(width=width, height=height, display=display, caption=caption)
        self.window.on_close = self.window_closed_by_user
        self.isopen = True
        self.geoms = []
        self.onetime_geoms = []

    def close(self):
        # sys.meta_path is None while the interpreter shuts down
        if self.isopen and sys.meta_path:
            self.window.close()
            self.isopen = False

    def window_closed_by_user(self):
        self.isopen = False

    def add_geom(self, geom):
        self.geoms.append(geom)

    def add_onetime(self, geom):
        self.onetime_geoms.append(geom)

    def render(self, return_rgb_array=False):
        """
        Render all geometries and optionally return the frame.

        :param return_rgb_array: If True, return the rendered scene as an RGB array
        :return: RGB array if requested, otherwise whether the window is still open
        """
        self.window.clear()
        self.window.switch_to()
        self.window.dispatch_events()

        for geom in self.geoms:
            geom.render()
        for geom in self.onetime_geoms:
            geom.render()

        arr = None
        if return_rgb_array:
            buffer = pyglet.image.get_buffer_manager().get_color_buffer()
            image_data = buffer.get_image_data()
            arr = np.frombuffer(image_data.get_data(), dtype=np.uint8)
            # buffer size can differ from the requested window size
            arr = arr.reshape(buffer.height, buffer.width, 4)
            arr = arr[::-1, :, 0:3]

        self.window.flip()
        self.onetime_geoms = []
        return arr if return_rgb_array else self.isopen

    def __del__(self):
        self.close()


class Geom(object):
    """Base class of all shapes; holds the RGBA colour."""
    def __init__(self):
        self.color = (0, 0, 0, 255)

    def render(self):
        self._render()

    def _render(self):
        raise NotImplementedError

    def set_color(self, r, g, b):
        self.color = (r, g, b, 255)

    def set_color_opacity(self, r, g, b, a):
        self.color = (r, g, b, a)


class FilledPolygon(Geom):
    def __init__(self, v):
        super().__init__()
        self.v = [(float(x), float(y)) for x, y in v]

    def _render(self):
        pyglet.shapes.Polygon(*self.v, color=self.color).draw()



class Line(Geom):
    def __init__(self, start=(0.0, 0.0), end=(0.0, 0.0), linewidth=1):
        super().__init__()
        self.start = start
        self.end = end
        self.linewidth = linewidth

    def _render(self):
        pyglet.shapes.Line(self.start[0], self.start[1], self.end[0], self.end[1],
                           color=self.color, thickness=self.linewidth).draw()


class Circle(Geom):
    def __init__(self, x, y, radius, filled=True):
        super().__init__()
        self.x = x
        self.y = y
        self.radius = radius
        self.filled = filled

    def _render(self):
        if self.filled:
            pyglet.shapes.Circle(self.x, self.y, self.radius, color=self.color).draw()
        else:
            pyglet.shapes.Arc(self.x, self.y, self.radius, color=self.color).draw()


class Label(Geom):
    """Text label anchored at its top-left corner."""
    def __init__(self, text, x, y, font_size=12, bold=False):
        super().__init__()
        self.text = text
        self.x = x
        self.y = y
        self.font_size = font_size
        self.bold = bold
        self.color = (255, 255, 255, 255)

    def _render(self):
        pyglet.text.Label(
            self.text,
            font_name='Arial',
            font_size=self.font_size,
            weight='bold' if self.bold else 'normal',
            x=self.x, y=self.y,
            anchor_x="left",
            anchor_y="top",
            color=self.color,
        ).draw()
