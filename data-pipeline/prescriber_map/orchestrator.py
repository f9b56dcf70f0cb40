"""
Prescriber sync orchestrator - CRM -> records -> geocode/enrich -> dataset.

Runs strictly sequentially: contacts are processed one at a time because the
free geocoder allows a single request per second.

Failure semantics:
- CRMError while listing contacts propagates and aborts the run (nothing written)
- CRMError while reading one contact's fields degrades that record only
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .builder import RecordBuilder
from .collectors.activecampaign import ActiveCampaignCollector
from .constants import PROGRESS_EVERY
from .errors import CRMError
from .exporter import write_dataset
from .models import Prescriber, PrescriberDataset
from .utils.logger import PipelineLogger


@dataclass
class SyncReport:
    """Outcome of a sync run."""

    dataset: PrescriberDataset
    written: List[Path] = field(default_factory=list)
    degraded_contacts: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    dry_run: bool = False


class PrescriberSyncOrchestrator:
    """Coordinates the fetch, build, sort and persist stages."""

    def __init__(
        self,
        collector: ActiveCampaignCollector,
        builder: RecordBuilder,
        logger: Optional[PipelineLogger] = None,
        progress_every: int = PROGRESS_EVERY,
    ):
        self.collector = collector
        self.builder = builder
        self.logger = logger or PipelineLogger(name="prescriber_sync")
        self.progress_every = progress_every

    def _fields_for(self, contact: Dict[str, Any], degraded: List[str]) -> Dict[str, str]:
        contact_id = str(contact.get("id"))
        try:
            return self.collector.fetch_field_values(contact_id)
        except CRMError as e:
            degraded.append(contact_id)
            self.logger.log_record_degraded(contact_id, "field values", str(e))
            return {}

    def build_records(self, contacts: List[Dict[str, Any]]) -> tuple[List[Prescriber], List[str]]:
        """Build one record per distinct contact id, in order."""
        records: List[Prescriber] = []
        degraded: List[str] = []
        geocoded = 0
        no_address = 0
        total = len(contacts)

        self.logger.info(f"Fetching field values for {total} contacts...")

        seen: set[str] = set()
        for i, contact in enumerate(contacts, 1):
            contact_id = str(contact.get("id"))
            if contact_id in seen:
                # Offset paging can repeat a contact when the tag list shifts mid-run
                self.logger.warning("Skipping duplicate contact", contact_id=contact_id)
            else:
                seen.add(contact_id)
                record = self.builder.build(contact, self._fields_for(contact, degraded))

                if record.has_coordinates:
                    geocoded += 1
                elif not record.address.full:
                    no_address += 1
                records.append(record)

            if i % self.progress_every == 0 or i == total:
                self.logger.log_progress(i, total, geocoded, no_address)

        return records, degraded

    def run(self, output_paths: Optional[List[Path]] = None, dry_run: bool = False) -> SyncReport:
        """
        Execute a full sync.

        Args:
            output_paths: Where to write the dataset (ignored in dry-run mode)
            dry_run: Build everything but write nothing

        Raises:
            CRMError: If the contact listing fails
        """
        start = time.monotonic()
        with self.logger.time_stage("contact listing"):
            contacts = self.collector.fetch_all_contacts()
        records, degraded = self.build_records(contacts)
        dataset = PrescriberDataset.from_records(records)

        written: List[Path] = []
        if not dry_run and output_paths:
            written = write_dataset(dataset, output_paths)

        duration = time.monotonic() - start
        self.logger.log_pipeline_complete(
            total=dataset.total,
            geocoded=dataset.geocoded,
            no_address=dataset.no_address,
            duration_seconds=duration,
        )

        return SyncReport(
            dataset=dataset,
            written=written,
            degraded_contacts=degraded,
            duration_seconds=duration,
            dry_run=dry_run,
        )
