"""Layout gentest packages module.

This module provides the package and project paths used by the generator.
"""

from pathlib import Path

THIS_DIR = Path(__file__).parent
PROJECT_DIR = (THIS_DIR / "../..").resolve()
