"""Turn per-date cumulative species snapshots into daily count rows."""

from collections.abc import Mapping, Sequence
from datetime import date

from birdboard.counts.models import DailyCount
from birdboard.station.models import SpeciesObservation

Snapshot = Mapping[str, SpeciesObservation]


def build_master_species(
    snapshots: Sequence[tuple[date, Snapshot]],
) -> dict[str, SpeciesObservation]:
    """Ordered union of species across snapshots.

    Snapshots must be in ascending date order. A species keeps the metadata of
    the first snapshot it appears in; insertion order follows first appearance.
    """
    master: dict[str, SpeciesObservation] = {}
    for _, snapshot in snapshots:
        for species_id, observation in snapshot.items():
            master.setdefault(species_id, observation)
    return master


def _row(day: date, species_id: str, meta: SpeciesObservation, present: bool) -> DailyCount:
    counts = meta.detections
    return DailyCount(
        species_code=species_id,
        date=day,
        common_name=meta.common_name,
        scientific_name=meta.scientific_name,
        color=meta.color,
        image_url=meta.image_url,
        thumbnail_url=meta.thumbnail_url,
        png_url=meta.png_url,
        almost_certain=counts.almost_certain if present else 0,
        very_likely=counts.very_likely if present else 0,
        uncertain=counts.uncertain if present else 0,
        unlikely=counts.unlikely if present else 0,
        total_detections=counts.total if present else 0,
        latest_detection_at=meta.latest_detection_at if present else None,
    )


def reconcile(snapshots: Sequence[tuple[date, Snapshot]]) -> dict[date, list[DailyCount]]:
    """Build one row per master species for every snapshot date.

    A species missing from a date's snapshot gets zero counts and a null
    latest detection for that date. Totals are copied as-is; no differencing
    happens here.

    Args:
        snapshots: ``(since_date, species_id -> observation)`` pairs, oldest first.

    Returns:
        Rows keyed by date, in the same order as ``snapshots``.
    """
    master = build_master_species(snapshots)
    rows_by_date: dict[date, list[DailyCount]] = {}

    for day, snapshot in snapshots:
        rows = []
        for species_id, first_seen in master.items():
            observation = snapshot.get(species_id)
            if observation is not None:
                rows.append(_row(day, species_id, observation, present=True))
            else:
                rows.append(_row(day, species_id, first_seen, present=False))
        rows_by_date[day] = rows

    return rows_by_date
