"""Command line interface for latchhook."""
import argparse
import logging
import sys

from latchhook.pipeline import LatchhookPipeline
from latchhook.types import DiagramConfig, LatchhookError, STRATEGIES

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='latchhook',
        description='Convert an image into a latch hook diagram'
    )

    parser.add_argument(
        '--input',
        type=str,
        default='mandelbrot.png',
        help='Image to load (default: mandelbrot.png)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default='test.png',
        help='Output image name (default: test.png)'
    )

    parser.add_argument(
        '--num',
        type=int,
        default=5,
        help='Number of unique colors in the final image (default: 5)'
    )

    parser.add_argument(
        '--cell-size',
        type=int,
        default=4,
        help='Side length of a diagram cell in pixels (default: 4)'
    )

    parser.add_argument(
        '--width',
        type=int,
        default=None,
        help='Resize to this many cells across before reducing colors'
    )

    parser.add_argument(
        '--height',
        type=int,
        default=None,
        help='Resize to this many cells down before reducing colors'
    )

    parser.add_argument(
        '--strategy',
        choices=STRATEGIES,
        default='perceptual',
        help='perceptual: nearest color in L*a*b*; paletted: nearest RGBA palette index'
    )

    parser.add_argument(
        '--smooth',
        action='store_true',
        help='Average every pixel with its neighbors before reducing colors'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail instead of leaving empty pixels when resizing up'
    )

    parser.add_argument(
        '--save-stages',
        type=str,
        default=None,
        help='Directory to save pipeline stage images'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging'
    )

    return parser


def main(args=None):
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = DiagramConfig(
            num_colors=parsed_args.num,
            strategy=parsed_args.strategy,
            width=parsed_args.width,
            height=parsed_args.height,
            strict_resize=parsed_args.strict,
            smooth=parsed_args.smooth,
            cell_side=parsed_args.cell_size,
            save_stages=parsed_args.save_stages,
        )
        pipeline = LatchhookPipeline(config)
        pipeline.process(parsed_args.input, parsed_args.output)
        return 0

    except (LatchhookError, ValueError) as e:
        logger.error(f"{e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
