"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - YAML I/O (fs)
    - Palette colors (color)
    - Point-set geometry (geometry)
    - Hashing for provenance and fingerprints (hashing)
    - Unified logging (logging_config)
    - Profiling (profiler)

No module in utils/ may import from src.space_paint.

Convenience imports:
    from src.utils import fs, validators, hashing
    from src.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import geometry
from . import hashing
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, push_context, setup_logging
from .validators import ConfigurationError

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'hashing',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'ConfigurationError',
    'setup_logging',
    'get_logger',
    'push_context',
]
