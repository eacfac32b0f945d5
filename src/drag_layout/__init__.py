"""drag-layout: grid layout engine for draggable, resizable widgets."""

from loguru import logger

__version__ = "0.1.0"

# Library code stays quiet until an application (or the CLI) opts in.
logger.disable("drag_layout")
