"""
Configuration & Constants
=========================
This module serves as the central registry for global constants shared by the
topology store, the operators and the exporter.

Exports:
    UV_CHANNEL_COUNT (int): Number of UV channels a face corner can carry.
    ALL_UV_CHANNELS (tuple[int, ...]): Default channel set used by the exporter.
    MAX_UINT16_VERTEX_COUNT (int): Largest vertex count addressable with 16-bit indices.
    DEFAULT_AUTO_SMOOTH_ANGLE (float): Angle threshold (degrees) for auto-smoothing.
    DEFAULT_ISLAND_VALUE (float): Value assigned to vertices of suppressed islands.
    COLOR_COMPONENTS (int): Number of components of a vertex color (RGBA).
    LOGGER_NAME (str): Root logger of the package namespace.
    LOG_FORMAT (str), LOG_DATE_FORMAT (str): Record layout used by setup_logging.
"""

UV_CHANNEL_COUNT: int = 8
ALL_UV_CHANNELS: tuple[int, ...] = tuple(range(UV_CHANNEL_COUNT))

MAX_UINT16_VERTEX_COUNT: int = 65535

DEFAULT_AUTO_SMOOTH_ANGLE: float = 30.0  # degrees
DEFAULT_ISLAND_VALUE: float = 1e-3

COLOR_COMPONENTS: int = 4  # RGBA

LOGGER_NAME: str = "procmesh"
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%H:%M:%S'
