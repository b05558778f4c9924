# aerodrome-lite/aerodrome/atc/headless_rendering.py
"""
Headless counterpart of the rendering module for runs without a display.
Exposes the same viewer and shape names; nothing is drawn, but the shapes
added for a frame can be inspected.
"""
import numpy as np


class HeadlessViewer:
    """Viewer that keeps its geometries but never opens a window."""
    def __init__(self, width, height, display=None, caption="aerodrome"):
        self.width = width
        self.height = height
        self.isopen = True
        self.geoms = []
        self.onetime_geoms = []
        # one-time geometries of the last rendered frame
        self.last_frame = []
        self.frames_rendered = 0

    def close(self):
        self.isopen = False

    def add_geom(self, geom):
        self.geoms.append(geom)

    def add_onetime(self, geom):
        self.onetime_geoms.append(geom)

    def render(self, return_rgb_array=False):
        """
        :param return_rgb_array: If True, returns a blank frame
        :return: Blank RGB array if requested, else isopen status
        """
        self.last_frame = self.onetime_geoms
        self.onetime_geoms = []
        self.frames_rendered += 1
        if return_rgb_array:
            return np.zeros((self.height, self.width, 3), dtype=np.uint8)
        return self.isopen


class HeadlessGeom:
    def __init__(self):
        self.color = (0, 0, 0, 255)

    def render(self):
        pass

    def set_color(self, r, g, b):
        self.color = (r, g, b, 255)

    def set_color_opacity(self, r, g, b, a):
        self.color = (r, g, b, a)


class FilledPolygon(HeadlessGeom):
    def __init__(self, v):
        super().__init__()
        self.v = v



class Line(HeadlessGeom):
    def __init__(self, start=(0.0, 0.0), end=(0.0, 0.0), linewidth=1):
        super().__init__()
        self.start = start
        self.end = end
        self.linewidth = linewidth


class Circle(HeadlessGeom):
    def __init__(self, x, y, radius, filled=True):
        super().__init__()
        self.x = x
        self.y = y
        self.radius = radius
        self.filled = filled


class Label(HeadlessGeom):
    def __init__(self, text, x, y, font_size=12, bold=False):
        super().__init__()
        self.text = text
        self.x = x
        self.y = y
        self.font_size = font_size
        self.bold = bold
