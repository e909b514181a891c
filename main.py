"""
Main entry point for the region coder application.

This script provides the command-line interface for looking up single points
and codes, and for annotating recorded game rounds with country data.
"""

import argparse
import sys
import time
from contextlib import contextmanager
from pathlib import Path

import psutil

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from region_coder.coder import RegionCoder
from region_coder.config import CoderConfig, VALID_LOG_LEVELS
from region_coder.data_loader import DataLoader
from region_coder.exceptions import (
    ConfigurationError, DatasetLoadError, FileAccessError,
    OutputGenerationError, ValidationError
)
from region_coder.hierarchy.level_config import DEFAULT_LEVELS
from region_coder.logging_config import setup_logging
from region_coder.output.output_generator import OutputGenerator
from region_coder.rounds import CountryStatsAggregator, RoundAnnotator


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Region Coder - Resolve coordinates and codes to countries and regions"
    )

    mode = parser.add_mutually_exclusive_group(required=True)

    mode.add_argument(
        "--point",
        nargs=2,
        type=float,
        metavar=("LAT", "LNG"),
        help="Resolve a latitude/longitude to its country and region"
    )

    mode.add_argument(
        "--code",
        help="Resolve a code, name, flag or ccTLD to its region"
    )

    mode.add_argument(
        "--rounds",
        help="Path to a rounds CSV file to annotate"
    )

    parser.add_argument(
        "--output",
        help="Output directory for annotated rounds (required with --rounds)"
    )

    parser.add_argument(
        "--config-dir",
        default="./",
        help="Directory searched for an external countries.json (default: ./)"
    )

    parser.add_argument(
        "--dataset",
        help="Path to a region dataset used instead of the embedded one"
    )

    parser.add_argument(
        "--level",
        choices=list(DEFAULT_LEVELS),
        default="country",
        help="Administrative level for --point lookups (default: country)"
    )

    parser.add_argument(
        "--max-level",
        choices=list(DEFAULT_LEVELS),
        default="world",
        help="Coarsest level accepted for --point lookups (default: world)"
    )

    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        help="Write log output to this file"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars"
    )

    args = parser.parse_args(argv)

    if args.rounds and not args.output:
        parser.error("--output is required with --rounds")

    return args


class PerformanceMonitor:
    """
    Records wall time and resident memory for the phases of a run.

    Each phase is wrapped in ``checkpoint(name)``; memory is sampled with
    psutil when the phase starts and when it ends.
    """

    def __init__(self, logger=None):
        self.logger = logger
        self.process = psutil.Process()
        self.start_time = time.time()
        self.checkpoints = {}
        self.memory_samples = []

    def _report(self, message: str):
        if self.logger:
            self.logger.info(message)
        else:
            print(message)

    def sample_memory(self, label: str) -> float:
        """Record and report resident memory in MB."""
        rss_mb = self.process.memory_info().rss / (1024 * 1024)
        self.memory_samples.append((label, rss_mb))
        self._report(f"Memory at {label}: {rss_mb:.1f} MB ({self.process.memory_percent():.1f}%)")
        return rss_mb

    @contextmanager
    def checkpoint(self, name: str):
        """Time the enclosed block and sample memory around it."""
        self.sample_memory(f"{name} start")
        started = time.time()
        try:
            yield
        finally:
            duration = time.time() - started
            self.checkpoints[name] = duration
            self.sample_memory(f"{name} end")
            self._report(f"Phase {name} took {duration:.2f} seconds")

    def get_peak_memory(self) -> float:
        return max((rss_mb for _, rss_mb in self.memory_samples), default=0.0)

    def get_memory_growth(self) -> float:
        if len(self.memory_samples) < 2:
            return 0.0
        return self.memory_samples[-1][1] - self.memory_samples[0][1]

    def get_performance_summary(self) -> dict:
        """Totals for the end-of-run report."""
        return {
            'total_execution_time': time.time() - self.start_time,
            'peak_memory_mb': self.get_peak_memory(),
            'memory_growth_mb': self.get_memory_growth(),
            'phase_durations': dict(self.checkpoints),
            'memory_samples': len(self.memory_samples)
        }


def run_point_lookup(coder: RegionCoder, lat: float, lng: float, level: str, max_level: str):
    """Print what a single position resolves to."""
    code = coder.resolve_country_code_for_point(lat, lng)
    name = coder.resolve_display_name_for_point(lat, lng)
    smallest = coder.smallest_region(lat, lng)
    leveled = coder.resolve_at_level(lat, lng, target_level=level, max_level=max_level)

    print(f"Location: {lat}, {lng}")
    print(f"  Country code: {code or '-'}")
    print(f"  Country name: {name or '-'}")
    print(f"  Stored key: {coder.code_by_location(lat, lng)}")
    print(f"  Smallest region: {smallest.display_name if smallest else '-'}")
    print(f"  Region at level '{level}': {leveled.display_name if leveled else '-'}")


def run_code_lookup(coder: RegionCoder, code: str) -> bool:
    """
    Print what an identifier resolves to.

    Returns:
        True if the identifier resolved to a region
    """
    region = coder.resolve_by_identifier(code)
    print(f"Identifier: {code}")
    print(f"  Display name: {coder.resolve_display_name_for_code(code)}")

    if region is not None:
        print(f"  Region: {region.id} ({region.level or 'no level'})")
        if region.iso1a2:
            print(f"  ISO 3166-1 alpha-2: {region.iso1a2}")
        if region.groups:
            print(f"  Groups: {', '.join(region.groups)}")
        return True

    suggestions = coder.suggest_identifiers(code)
    if suggestions:
        print("  Not found. Did you mean:")
        for name, suggested, score in suggestions:
            print(f"    {name} ({suggested.id}, score {score:.0f})")
    else:
        print("  Not found.")
    return False


def print_processing_summary(processing_stats, summary, generated_files):
    """Print a summary of a batch run to console."""
    print("\n" + "=" * 60)
    print("ROUND ANNOTATION COMPLETED")
    print("=" * 60)

    print("\nProcessing Summary:")
    print(f"  Total rounds processed: {processing_stats.total_rounds:,}")
    print(f"  Processing time: {processing_stats.processing_time:.2f} seconds")
    print(f"  Resolution rate: {processing_stats.get_resolution_rate():.2f}%")
    print(f"  Correct country guesses: {processing_stats.correct_guesses:,} "
          f"({processing_stats.get_accuracy():.2f}%)")

    print("\nPlayer Summary:")
    print(f"  Average score: {summary['avg_score']:.0f}")
    print(f"  Average distance: {summary['avg_distance']:.1f} km")
    print(f"  Most played country: {summary['favourite_country'] or 'n/a'}")
    print(f"  Best country: {summary['best_country'] or 'n/a'}")
    print(f"  Worst country: {summary['worst_country'] or 'n/a'}")

    print("\nGenerated Output Files:")
    for file_type, file_path in generated_files.items():
        print(f"  {file_type}: {Path(file_path).name}")


def run_rounds(coder: RegionCoder, config: CoderConfig, logger, perf_monitor: PerformanceMonitor,
               rounds_file: str, show_progress: bool = True):
    """Annotate a rounds CSV file and write the analytics outputs."""
    output_generator = OutputGenerator(config, logger)

    with perf_monitor.checkpoint("data_loading"):
        loader = DataLoader(logger.logger)
        rounds_df = loader.load_rounds(rounds_file)
        logger.log_file_operation("Loaded rounds", rounds_file, len(rounds_df))

    logger.log_processing_start(len(rounds_df), len(coder.catalog))

    with perf_monitor.checkpoint("round_annotation"):
        logger.log_phase_start("round annotation")
        annotator = RoundAnnotator(coder, logger.logger, show_progress=show_progress)
        annotated_df, processing_stats = annotator.annotate(rounds_df)
        logger.log_phase_complete("round annotation", len(annotated_df), processing_stats.processing_time)

    with perf_monitor.checkpoint("country_analytics"):
        aggregator = CountryStatsAggregator(coder, logger.logger)
        country_stats = aggregator.country_stats(annotated_df)
        confusion_pairs = aggregator.confusion_pairs(annotated_df)
        summary = aggregator.summary(annotated_df)
        score_distribution = aggregator.score_distribution(annotated_df)

    with perf_monitor.checkpoint("output_generation"):
        generated_files = output_generator.generate_all_outputs(
            annotated_df, country_stats, confusion_pairs, summary,
            processing_stats, score_distribution
        )

    logger.log_processing_complete(processing_stats)
    print_processing_summary(processing_stats, summary, generated_files)
    return generated_files


def main(argv=None):
    """Main application entry point."""
    args = parse_arguments(argv)
    perf_monitor = None

    try:
        config = CoderConfig(
            config_dir=args.config_dir,
            dataset_path=args.dataset,
            output_directory=args.output if args.rounds else None,
            log_level=args.log_level,
            log_file=args.log_file
        )

        logger = setup_logging(config)
        logger.debug(f"Configuration: {config.to_dict()}")
        perf_monitor = PerformanceMonitor(logger.logger)

        with perf_monitor.checkpoint("catalog_loading"):
            coder = RegionCoder.from_config(config, logger=logger.logger)
            logger.log_catalog_loaded(
                config.dataset_path or config.config_dir,
                len(coder.catalog),
                coder.catalog.geometry_count(),
                len(coder.catalog.identifiers())
            )

        if args.point:
            lat, lng = args.point
            run_point_lookup(coder, lat, lng, args.level, args.max_level)
        elif args.code is not None:
            run_code_lookup(coder, args.code)
        else:
            print("Region Coder starting batch run...")
            print(f"Rounds file: {args.rounds}")
            print(f"Output directory: {args.output}")
            run_rounds(coder, config, logger, perf_monitor, args.rounds,
                       show_progress=not args.no_progress)

            perf_summary = perf_monitor.get_performance_summary()
            print("\nPerformance Summary:")
            print(f"  Total execution time: {perf_summary['total_execution_time']:.2f} seconds")
            print(f"  Peak memory usage: {perf_summary['peak_memory_mb']:.1f} MB")
            print(f"  Memory growth: {perf_summary['memory_growth_mb']:.1f} MB")
            if perf_summary['phase_durations']:
                print("  Phase timings:")
                for phase, duration in perf_summary['phase_durations'].items():
                    print(f"    {phase}: {duration:.2f}s")

        logger.info("Application completed successfully")

    except (ValidationError, DatasetLoadError) as e:
        print(f"\nData Error: {e}", file=sys.stderr)
        if getattr(e, 'file_path', None):
            print(f"File: {e.file_path}", file=sys.stderr)
        sys.exit(2)

    except (ConfigurationError, OutputGenerationError) as e:
        print(f"\nProcessing Error: {e}", file=sys.stderr)
        sys.exit(3)

    except (FileAccessError, FileNotFoundError) as e:
        print(f"\nFile Error: {e}", file=sys.stderr)
        print("Please check that all input files exist and are accessible.", file=sys.stderr)
        sys.exit(4)

    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        sys.exit(130)

    except Exception as e:
        print(f"\nError: Unexpected error: {e}", file=sys.stderr)
        print("Please check the log files for more details.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
