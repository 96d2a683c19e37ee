"""Space Paint: seeded starfield and nebula backgrounds.

This package generates renderer-agnostic scene descriptions (layers of
attributed placement records) from a single integer seed and a canvas size.

Architecture layers (strict one-way dependency):
    scripts/ -> src/space_paint/ -> src/utils/

Key invariants:
    - Same (seed, width, height, config) -> same Scene, record for record
    - Canvas pixels end-to-end, integer point coordinates
    - YAML configs validated by pydantic before any sampling
"""

__version__ = "1.0.0"
