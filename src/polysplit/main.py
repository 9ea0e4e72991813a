"""
Command line entry point.

Reads a split job (JSON file, WKT argument or remote key-value store record),
splits the polygon into equal-area parts and prints one WKT line per part.
"""
import argparse
import logging
import sys
from typing import List, Optional

from .config import RuntimeSettings, SplitterConfig
from .controllers.split_controller import SplitController
from .data.job_source import JSONJobAdapter, KeyValueStoreAdapter, SplitJob
from .data.polygon_io import PolygonIO
from .errors import InvalidArgumentError, JobSourceError, PolygonSplitError
from .logging_config import setup_logging
from .utils.exporter import GeoJSONExporter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polysplit",
        description="Split a simple polygon into parts of equal area with short straight cuts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --wkt "POLYGON ((0 0, 100 0, 90 50, 10 50, 0 0))" --parts 2
  %(prog)s --job job.json --output parts.geojson
  %(prog)s --from-store                      # APIFY_DEFAULT_KEY_VALUE_STORE_ID / APIFY_TOKEN
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--job",
        help='JSON job file: {"polygon": "<WKT>", "parts": n}'
    )
    source.add_argument(
        "--wkt",
        help="Polygon as WKT text"
    )
    source.add_argument(
        "--from-store",
        action="store_true",
        help="Read the INPUT record of the default key-value store (default when no other source is given)"
    )

    parser.add_argument(
        "--parts",
        type=int,
        help="Number of parts (overrides the job record)"
    )
    parser.add_argument(
        "--output",
        help="Write the parts to a file (.geojson for GeoJSON, JSON otherwise)"
    )
    parser.add_argument(
        "--plot",
        nargs="?",
        const=True,
        default=None,
        metavar="FILE",
        help="Plot the parts (shown interactively, or saved to FILE)"
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Evaluate edge pairs in worker threads"
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of worker threads (with --parallel)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: POLYSPLIT_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write the log to this file"
    )
    return parser


def load_job(args, settings: RuntimeSettings) -> SplitJob:
    if args.wkt:
        if args.parts is None:
            raise InvalidArgumentError("--parts is required with --wkt.")
        return SplitJob(PolygonIO.load_wkt(args.wkt), args.parts, {"source": "wkt"})

    if args.job:
        source = JSONJobAdapter(args.job)
    else:
        if not settings.has_store:
            raise InvalidArgumentError(
                "No job given: use --job, --wkt or set APIFY_DEFAULT_KEY_VALUE_STORE_ID.")
        source = KeyValueStoreAdapter.from_settings(settings)

    # The polygon is parsed even when --parts overrides the record
    polygon = source.get_polygon()
    parts = args.parts if args.parts is not None else source.get_parts()
    return SplitJob(polygon, parts, source.get_metadata())


def write_output(filename: str, result: dict, metadata: dict):
    properties = dict(metadata)
    properties.update(result["metrics"])
    if filename.lower().endswith((".geojson", ".geo.json")):
        GeoJSONExporter.save(filename, result["parts"], properties)
    else:
        PolygonIO.save_parts(result["parts"], filename, properties)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = RuntimeSettings.from_env()
    setup_logging(args.log_level or settings.log_level, args.log_file)

    try:
        config = SplitterConfig(parallel=args.parallel, max_workers=args.workers)
        job = load_job(args, settings)

        controller = SplitController(config)
        result = controller.run(job.polygon, job.parts)

        for part in result["parts"]:
            print(PolygonIO.dump_wkt(part))

        if args.output:
            write_output(args.output, result, job.metadata)

        if args.plot:
            from .utils.plotting import plot_parts
            filename = args.plot if isinstance(args.plot, str) else None
            plot_parts(result["parts"], original=result["polygon"], filename=filename)
            if filename is None:
                import matplotlib.pyplot as plt
                plt.show()

    except (InvalidArgumentError, ValueError) as e:
        logger.error("Invalid input: %s", e)
        return EXIT_INVALID_INPUT
    except JobSourceError as e:
        logger.error("Could not load job: %s", e)
        return EXIT_FAILURE
    except PolygonSplitError as e:
        logger.error("Split failed: %s", e)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
