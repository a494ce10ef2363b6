"""
constants shared by the warp pipeline and the viewer

the slider ranges are the ones the editing surface clamps to; the algebra itself
accepts any finite value.
"""

import logging
import os


# out-of-bounds fill (r, g, b, a): semi-transparent magenta so that the
# exposed regions stand out while editing
FILL_COLOR = (255, 0, 255, 117)

SLOT_COUNT = 10

ANGLE_RANGE = (0.0, 360.0)
TRANSLATE_RANGE = (-1000.0, 1000.0)
SCALE_RANGE = (0.00001, 5.0)

# max |inv(H) @ H - I| entry before H counts as numerically singular
INVERSE_RESIDUAL_TOLERANCE = 1e-6

# slack around [0, w-1] x [0, h-1] for floating point noise in the inverse map
EDGE_TOLERANCE = 1e-6

DEFAULT_IMAGE_PATH = os.path.join("img", "lena-gray.png")

WINDOW_TITLE = "Homography Playground"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL = os.environ.get("HOMOGRAPHY_PLAYGROUND_LOG", "INFO").upper()


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
