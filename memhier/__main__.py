import argparse
import logging
import sys

from memhier.pipeline import SimulationPipeline
from memhier.utils.config_utils import ConfigError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memhier",
        description="Replay a kernel's memory instructions through L1/L2/LDS and report hit rates")
    parser.add_argument("kernel", help="kernel file, one `KIND ADDRESS [SIZE]` per line")
    parser.add_argument("--config", default=None,
                        help="hierarchy config yaml (defaults to the built-in geometry)")
    parser.add_argument("--output", default=None,
                        help="directory for report.yaml and the run log")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO logs, -vv for DEBUG")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        pipeline = SimulationPipeline(args.config, args.output)
    except ConfigError as e:
        print(f"memhier: invalid config: {e}", file=sys.stderr)
        return 2

    result = pipeline.run_kernel_file(args.kernel)
    for line in result.report.summary_lines():
        print(line)
    if result.report_path:
        print(f"report saved to: {result.report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
