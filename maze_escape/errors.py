class MazeEscapeError(Exception):
    """Base class for errors raised by the simulation core."""


class InvalidMazeDimensions(MazeEscapeError, ValueError):
    """Maze width/height must be odd integers >= 5."""

    def __init__(self, width, height):
        super().__init__(
            f"maze dimensions must be odd integers >= 5, got {width}x{height}"
        )
        self.width = width
        self.height = height


class ConfigError(MazeEscapeError, ValueError):
    pass
