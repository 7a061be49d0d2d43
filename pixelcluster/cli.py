"""
Command line front end.

    pixelcluster kmeans leaf.png -k 4 --tolerance 0.05 -o leaf_kmeans.png
    pixelcluster meanshift leaf.png --bandwidth 0.3 -o leaf_meanshift.png
"""

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys

from .imaging import load_image, quantize_image, quantize_image_meanshift, save_image
from .kmeans import METRICS, KMeansConfig
from .kmeans.config import INIT_METHODS
from .meanshift import MeanShiftConfig

logger = logging.getLogger(__name__)


def _default_output(input_path: Path, suffix: str) -> Path:
    return input_path.with_name(f"{input_path.stem}_{suffix}.png")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pixelcluster',
        description='Reduce the number of colors in an image by clustering its pixels.'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('input', type=Path, help='Input image path')
    common.add_argument('-o', '--output', type=Path, help='Output image path (default: INPUT_<method>.png)')
    common.add_argument('--min', type=float, default=-1.0, help='Lower bound of the sample range (default: -1)')
    common.add_argument('--max', type=float, default=1.0, help='Upper bound of the sample range (default: 1)')

    subparsers = parser.add_subparsers(dest='method', required=True)

    kmeans = subparsers.add_parser('kmeans', parents=[common], help='K-Means color quantization')
    kmeans.add_argument('-k', '--clusters', type=int, default=4, help='Number of colors (default: 4)')
    kmeans.add_argument('--tolerance', type=float, default=0.05,
                        help='Stop when no centroid moves more than this (default: 0.05)')
    kmeans.add_argument('--metric', choices=sorted(METRICS), default='squared_euclidean',
                        help='Distance used to assign pixels (default: squared_euclidean)')
    kmeans.add_argument('--init', choices=INIT_METHODS, default='k-means++',
                        help='Centroid seeding method (default: k-means++)')
    kmeans.add_argument('--max-iter', type=int, default=100, help='Iteration cap (default: 100)')
    kmeans.add_argument('--max-time', type=float, default=None, help='Deadline in seconds')
    kmeans.add_argument('--seed', type=int, default=42, help='Seed for centroid seeding')

    meanshift = subparsers.add_parser('meanshift', parents=[common], help='Mean-Shift color quantization')
    meanshift.add_argument('--bandwidth', type=float, default=None,
                           help='Kernel bandwidth (default: estimated from the image)')
    meanshift.add_argument('--quantile', type=float, default=0.3,
                           help='Quantile used to estimate the bandwidth (default: 0.3)')
    meanshift.add_argument('--max-iter', type=int, default=300, help='Iteration cap (default: 300)')

    return parser


def run(args: argparse.Namespace) -> Path:
    image = load_image(args.input)

    if args.method == 'kmeans':
        config = KMeansConfig(
            n_clusters=args.clusters,
            tol=args.tolerance,
            max_iter=args.max_iter,
            metric=args.metric,
            init=args.init,
            random_state=args.seed,
            max_time=args.max_time
        )
        quantized = quantize_image(image, config, min=args.min, max=args.max)
        status = 'converged' if quantized.result.converged else 'stopped before converging'
        logger.info(f"K-Means {status} after {quantized.result.n_iter} iterations")
    else:
        config = MeanShiftConfig(
            bandwidth=args.bandwidth,
            quantile=args.quantile,
            max_iter=args.max_iter
        )
        quantized = quantize_image_meanshift(image, config, min=args.min, max=args.max)

    output = args.output or _default_output(args.input, args.method)
    return save_image(quantized.image, output)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        output = run(args)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"{args.method} failed: {e}")
        return 1

    print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
