"""
Charts orchestrator

Main entry point for the charts pipeline.
Loads the dataset once, builds chart payloads and optionally renders them.
"""
import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .builders import BUILDERS
from .config import ChartsConfig, get_config
from .loader import DatasetLoader, create_loader
from .models import Observation
from .render import render_svg

logger = logging.getLogger(__name__)


class ChartsOrchestrator:
    """Orchestrates loading, building and rendering of charts"""

    def __init__(self, config: ChartsConfig, loader: Optional[DatasetLoader] = None):
        """
        Initialize orchestrator

        Args:
            config: Charts configuration
            loader: Dataset loader (default: one built from config)
        """
        self.config = config
        self.loader = loader or create_loader(config)
        self._observations: Optional[List[Observation]] = None
        logger.info("ChartsOrchestrator initialized")

    @property
    def observations(self) -> List[Observation]:
        """Observations of the configured dataset, loaded on first access."""
        if self._observations is None:
            self._observations = self.loader.load()
        return self._observations

    def build_chart(self, kind: str, metric: Optional[str] = None) -> Dict[str, Any]:
        """
        Build one chart payload

        Args:
            kind: Chart kind (histogram, timeline, boxplot)
            metric: Metric to plot (default: the configured metric for the kind)

        Returns:
            Chart payload
        """
        if kind not in BUILDERS:
            raise ValueError(
                f"Unknown chart kind: {kind}. Must be one of {list(BUILDERS.keys())}"
            )
        metric = metric or self.config.default_metric(kind)
        dimensions = self.config.dimensions(kind)

        if kind == "histogram":
            return BUILDERS[kind](
                self.observations,
                metric,
                dimensions,
                thresholds=self.config.histogram_thresholds,
                bar_padding=self.config.histogram_bar_padding,
            )
        if kind == "boxplot":
            return BUILDERS[kind](
                self.observations,
                metric,
                dimensions,
                outlier_factor=self.config.outlier_iqr_factor,
            )
        return BUILDERS[kind](self.observations, metric, dimensions)

    def run_chart(
        self,
        kind: str,
        metric: Optional[str] = None,
        render: bool = False,
    ) -> Dict[str, Any]:
        """
        Build (and optionally render) one chart, reporting the outcome

        Returns:
            Run statistics with status 'success' or 'failed'
        """
        start_time = datetime.utcnow()
        metric = metric or (self.config.default_metric(kind) if kind in BUILDERS else None)
        logger.info(f"Building chart: kind={kind}, metric={metric}")

        try:
            payload = self.build_chart(kind, metric)

            output_path = None
            if render:
                output_path = render_svg(
                    payload, Path(self.config.output_dir) / f"{kind}_{metric}.svg"
                )

            end_time = datetime.utcnow()
            duration = (end_time - start_time).total_seconds()
            logger.info(f"Chart {kind} complete in {duration:.2f}s")

            return {
                "kind": kind,
                "metric": metric,
                "status": "success",
                "observation_count": payload["observation_count"],
                "output_path": str(output_path) if output_path else None,
                "payload": payload,
                "processing_time_seconds": duration,
                "started_at": start_time.isoformat(),
                "completed_at": end_time.isoformat(),
            }

        except Exception as e:
            logger.error(f"Chart {kind} failed: {e}", exc_info=True)

            end_time = datetime.utcnow()
            return {
                "kind": kind,
                "metric": metric,
                "status": "failed",
                "error": str(e),
                "error_type": type(e).__name__,
                "processing_time_seconds": (end_time - start_time).total_seconds(),
                "started_at": start_time.isoformat(),
                "failed_at": end_time.isoformat(),
            }

    def run(
        self,
        kinds: Sequence[str],
        metric: Optional[str] = None,
        render: bool = False,
    ) -> Dict[str, Any]:
        """
        Build several charts

        Returns:
            Combined results for all charts
        """
        logger.info(f"Building {len(kinds)} charts")

        results = [self.run_chart(kind, metric, render=render) for kind in kinds]

        successes = sum(1 for r in results if r["status"] == "success")
        failures = len(results) - successes

        logger.info(f"Batch complete: {successes} succeeded, {failures} failed")

        return {
            "total_charts": len(results),
            "successful": successes,
            "failed": failures,
            "chart_results": results,
        }


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="WeatherInsight Charts")
    parser.add_argument(
        "--source",
        default=None,
        help="Dataset path or URL (default: configured dataset source)"
    )
    parser.add_argument(
        "--chart",
        action="append",
        choices=sorted(BUILDERS.keys()),
        help="Chart kind to build; repeat for several (default: all)"
    )
    parser.add_argument(
        "--metric",
        default=None,
        help="Metric to plot (default: the configured metric per chart)"
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Render SVG files to the output directory"
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for rendered SVG files"
    )
    parser.add_argument(
        "--include-payload",
        action="store_true",
        help="Include full chart payloads in the printed results"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI"""
    args = build_arg_parser().parse_args(argv)

    config = get_config()
    overrides = {}
    if args.source:
        overrides["dataset_source"] = args.source
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if overrides:
        config = config.model_copy(update=overrides)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    orchestrator = ChartsOrchestrator(config)
    results = orchestrator.run(
        args.chart or list(BUILDERS.keys()),
        metric=args.metric,
        render=args.render,
    )

    if not args.include_payload:
        for result in results["chart_results"]:
            result.pop("payload", None)

    print(json.dumps(results, indent=2, default=str))

    return 0 if results["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
