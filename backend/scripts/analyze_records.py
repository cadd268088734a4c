"""
Run the ARGUS risk-indicator pipeline over a file of procurement records.

Reads records (JSON array or JSON Lines), analyses them in parallel against
an optional SQLite history snapshot, and writes one JSON result per line:
the RiskAnalysis payload on success, or the error with its code otherwise.

Settings come from ARGUS_* environment variables (see PipelineSettings);
command-line flags override them.

Usage:
    python -m scripts.analyze_records records.jsonl [--history-db history.db]
        [--weights weights.json] [--knowledge-base kb.json] [--output out.jsonl]
"""

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from argus.common.errors import ConfigurationError
from argus.common.structlog_config import configure
from argus.config import KnowledgeBase, PipelineSettings, WeightConfig
from argus.pipeline import RiskAnalysisPipeline
from argus.services.record_io import RecordFileError, load_records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyse procurement records for risk indicators")
    parser.add_argument("input", type=Path, help="Records file (JSON array or JSON Lines)")
    parser.add_argument("--history-db", type=Path, default=None,
                        help="SQLite history snapshot (default: ARGUS_HISTORY_DB)")
    parser.add_argument("--weights", type=Path, default=None,
                        help="JSON object of pattern type -> weight")
    parser.add_argument("--knowledge-base", type=Path, default=None,
                        help="JSON knowledge base (brand_names, restrictive_patterns, exempted_categories)")
    parser.add_argument("--output", type=Path, default=None,
                        help="Write results here instead of stdout")
    parser.add_argument("--log-level", default=None,
                        help="Log level (default: ARGUS_LOG_LEVEL or INFO)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = PipelineSettings.from_env()
        overrides = {}
        if args.history_db is not None:
            overrides["history_db"] = args.history_db
        if args.log_level is not None:
            overrides["log_level"] = args.log_level.upper()
        settings = dataclasses.replace(settings, **overrides)
        configure(settings.log_level, stream=sys.stderr)

        weights = WeightConfig.from_file(args.weights) if args.weights else WeightConfig()
        knowledge_base = (
            KnowledgeBase.from_file(args.knowledge_base) if args.knowledge_base else KnowledgeBase.default()
        )
    except ConfigurationError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        return 1

    if settings.history_db is not None and not Path(settings.history_db).exists():
        print(f"ERROR: History database not found: {settings.history_db}", file=sys.stderr)
        return 1

    try:
        records = load_records(args.input)
    except RecordFileError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        pipeline = RiskAnalysisPipeline(weights=weights, knowledge_base=knowledge_base, settings=settings)
    except ConfigurationError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        return 1

    with pipeline:
        runs = pipeline.analyze_batch(records)

    lines = [json.dumps(run.to_dict(), ensure_ascii=False) for run in runs]
    if args.output is not None:
        args.output.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    else:
        for line in lines:
            print(line)

    failed = sum(1 for run in runs if not run.ok)
    print(
        f"Analysed {len(runs):,} records: {len(runs) - failed:,} succeeded, {failed:,} failed",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
