"""pathman: add and remove directories from PATH in your shell startup file."""

__version__ = "0.3.0"
