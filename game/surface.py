"""Drawing targets.

The simulation only issues draw calls; `CommandSurface` records them as
plain lists so a browser canvas can replay the frame.
"""

from typing import Protocol


class Surface(Protocol):
    def clear_rect(self, x, y, width, height): ...

    def fill_rect(self, x, y, width, height, color): ...

    def fill_circle(self, cx, cy, radius, color): ...

    def stroke_circle(self, cx, cy, radius, color): ...

    def fill_rotated_rect(self, cx, cy, size, angle, color): ...


def _r(value):
    return round(value, 2)


class CommandSurface:
    """Surface that records draw calls in issue order."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.commands = []

    def clear_rect(self, x, y, width, height):
        # A full clear drops everything recorded before it
        if x <= 0 and y <= 0 and width >= self.width and height >= self.height:
            self.commands = []
        self.commands.append(["clear", _r(x), _r(y), _r(width), _r(height)])

    def fill_rect(self, x, y, width, height, color):
        self.commands.append(["rect", _r(x), _r(y), _r(width), _r(height), color])

    def fill_circle(self, cx, cy, radius, color):
        self.commands.append(["circle", _r(cx), _r(cy), _r(radius), color])

    def stroke_circle(self, cx, cy, radius, color):
        self.commands.append(["ring", _r(cx), _r(cy), _r(radius), color])

    def fill_rotated_rect(self, cx, cy, size, angle, color):
        self.commands.append(["spin", _r(cx), _r(cy), _r(size), round(angle, 3), color])

    def to_list(self):
        return [list(command) for command in self.commands]
