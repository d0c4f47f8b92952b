"""
Engine configuration.

Override any of these with environment variables.
"""

import os
from pathlib import Path

# Content directories
BUNDLED_WORLD_DATA_DIR = str(Path(__file__).parent / "world_data")
WORLD_DATA_DIR = os.getenv("CAIRN_WORLD_DATA_DIR", BUNDLED_WORLD_DATA_DIR)

# Game settings
START_LOCATION = os.getenv("CAIRN_START_LOCATION", "village-square")
TICK_SECONDS = float(os.getenv("CAIRN_TICK_SECONDS", "1.0"))

# Unset means combat rolls are not reproducible between runs
_seed = os.getenv("CAIRN_RANDOM_SEED")
RANDOM_SEED = int(_seed) if _seed else None

# Logging
LOG_LEVEL = os.getenv("CAIRN_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
