"""Version information for img2latex."""

from importlib.metadata import version

__version__ = version("img2latex")
