"""
static preview of a transform chain, without the Qt viewer

1 load the source image (or generate a grid when it is missing)
2 build a small example chain: scale, rotate about the origin, translate back into view
3 compose H and warp the source with it
4 show the source and the warped image side by side with matplotlib

usage:
    homography-preview [image_path]
"""

import logging
import sys

import matplotlib.pyplot as plt

from .chain import ChainController
from .config import DEFAULT_IMAGE_PATH, setup_logging
from .descriptor import TransformKind
from .projection import format_matrix
from .raster import load_or_generate


logger = logging.getLogger(__name__)


def example_chain(width, height):
    """Scale 0.5, rotate 30 deg about the origin, then shift right by half the width"""
    controller = ChainController(length=3)
    controller.set_kind(0, TransformKind.SCALE)
    controller.set_scale(0, 0.5, 0.5)
    controller.set_kind(1, TransformKind.ROTATE)
    controller.set_angle(1, 30.0)
    controller.set_kind(2, TransformKind.TRANSLATE)
    controller.set_translation(2, width / 2, 0.0)
    return controller


def main():
    setup_logging()
    image_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_IMAGE_PATH
    source = load_or_generate(image_path)

    controller = example_chain(source.width, source.height)
    H = controller.current_matrix()
    logger.info("chain: %s", list(controller.descriptors))
    logger.info("H =\n%s", "\n".join(format_matrix(H)))

    warped = controller.render(source)

    fig, axes = plt.subplots(1, 2, figsize=(15, 7))

    axes[0].imshow(source.pixels)
    axes[0].set_title('Source Image', fontsize=12)
    axes[0].axis('off')

    axes[1].imshow(warped.pixels)
    axes[1].set_title('Warped Image', fontsize=12)
    axes[1].axis('off')

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
