#!/usr/bin/env python3
"""
Fetch prescriber contacts from ActiveCampaign, geocode addresses, optionally
enrich with Google Places, and write prescribers.json.

Writes the same document to two places:
  - website/data/prescribers.json    (archive copy)
  - website/public/prescribers.json  (served to the map page)

Usage:
    uv run python fetch_prescribers.py              # Full fetch + geocode
    uv run python fetch_prescribers.py --enrich     # Also enrich via Google Places
    uv run python fetch_prescribers.py --dry-run    # Preview without writing files
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from prescriber_map.builder import RecordBuilder
from prescriber_map.collectors.activecampaign import ActiveCampaignCollector
from prescriber_map.collectors.google_places import PlacesEnricher
from prescriber_map.config import Settings, get_data_output_path, get_public_output_path, load_environment
from prescriber_map.errors import ConfigurationError, CRMError
from prescriber_map.geocoders import build_geocoder
from prescriber_map.orchestrator import PrescriberSyncOrchestrator, SyncReport
from prescriber_map.utils.logger import PipelineLogger, configure_global_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync tagged ActiveCampaign prescribers into prescribers.json")
    parser.add_argument("--enrich", action="store_true", help="Enrich each prescriber via Google Places text search")
    parser.add_argument("--dry-run", action="store_true", help="Fetch and geocode but do not write any files")
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--log-file", type=str, default=None, help="Also log to logs/<name>")
    return parser.parse_args(argv)


def print_dry_run(report: SyncReport, output_paths):
    dataset = report.dataset
    print("\n[DRY RUN] Would write to:")
    for path in output_paths:
        print(f"  {path}")
    print(f"Total: {dataset.total}, Geocoded: {dataset.geocoded}, No address: {dataset.no_address}")
    sample = dataset.prescribers[0].to_dict() if dataset.prescribers else None
    print("Sample:", json.dumps(sample, indent=2))


def main(argv=None) -> int:
    args = parse_args(argv)
    load_environment()

    log_level = "DEBUG" if args.verbose else "INFO"
    configure_global_logging(log_level, phase="Fetch")
    logger = PipelineLogger("prescriber_sync", log_level=log_level, log_file=args.log_file, phase="Fetch")

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1

    logger.log_pipeline_start(settings.active_geocoder, enrich=args.enrich, dry_run=args.dry_run)

    collector = ActiveCampaignCollector(settings.crm_base_url, settings.crm_api_key, logger=logger)
    geocoder = build_geocoder(settings, logger=logger)
    enricher = PlacesEnricher(settings.google_api_key, logger=logger) if args.enrich else None
    if args.enrich and not settings.google_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY not set; enrichment will mark every record unverified")

    orchestrator = PrescriberSyncOrchestrator(
        collector=collector,
        builder=RecordBuilder(geocoder=geocoder, enricher=enricher, logger=logger),
        logger=logger,
    )
    output_paths = [get_data_output_path(), get_public_output_path()]

    try:
        report = orchestrator.run(output_paths=output_paths, dry_run=args.dry_run)
    except CRMError as e:
        # Already logged by the orchestrator's contact listing stage
        print(f"Fatal: contact sync aborted, nothing written: {e}")
        return 1

    if args.dry_run:
        print_dry_run(report, output_paths)
    else:
        print(f"\nWrote {report.dataset.total} prescribers to:")
        for path in report.written:
            print(f"  {path}")

    if report.degraded_contacts:
        print(f"\n{len(report.degraded_contacts)} contacts had unreadable custom fields (see warnings)")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
