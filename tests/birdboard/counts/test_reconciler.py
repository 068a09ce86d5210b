"""Tests for reconciling per-date snapshots into daily count rows."""

from datetime import date

from birdboard.counts.reconciler import build_master_species, reconcile

D1 = date(2026, 10, 1)
D2 = date(2026, 10, 2)
D3 = date(2026, 10, 3)


class TestBuildMasterSpecies:
    """Ordered union of species across dates."""

    def test_first_appearance_order_and_metadata(self, observation_factory):
        """Should order by first appearance and keep first-seen metadata."""
        first_a = observation_factory("A", 5, commonName="First A")
        snapshots = [
            (D1, {"A": first_a}),
            (D2, {"B": observation_factory("B", 2), "A": observation_factory("A", 3)}),
            (D3, {"C": observation_factory("C", 1)}),
        ]

        master = build_master_species(snapshots)

        assert list(master) == ["A", "B", "C"]
        assert master["A"] is first_a

    def test_empty(self):
        """Should return an empty mapping when nothing was fetched."""
        assert build_master_species([(D1, {}), (D2, {})]) == {}


class TestReconcile:
    """Zero filling across the master species set."""

    def test_every_date_has_every_species(self, observation_factory):
        """Should emit one row per master species for every date."""
        snapshots = [
            (D1, {"A": observation_factory("A", 10), "B": observation_factory("B", 4)}),
            (D2, {"A": observation_factory("A", 7)}),
            (D3, {"A": observation_factory("A", 7), "C": observation_factory("C", 1)}),
        ]

        rows_by_date = reconcile(snapshots)

        assert list(rows_by_date) == [D1, D2, D3]
        for day, rows in rows_by_date.items():
            assert [row.species_code for row in rows] == ["A", "B", "C"]
            assert all(row.date == day for row in rows)

    def test_missing_species_get_zero_counts(self, observation_factory):
        """Should fill absent species with zeros and no latest detection."""
        snapshots = [
            (D1, {"B": observation_factory("B", 4)}),
            (D2, {}),
        ]

        rows = reconcile(snapshots)[D2]

        assert len(rows) == 1
        row = rows[0]
        assert row.species_code == "B"
        assert row.total_detections == 0
        assert row.almost_certain == 0
        assert row.very_likely == 0
        assert row.uncertain == 0
        assert row.unlikely == 0
        assert row.latest_detection_at is None
        # Metadata comes from the first date the species was seen
        assert row.common_name == "Bird B"
        assert row.image_url == "https://img.example/B.jpg"

    def test_totals_are_copied_not_differenced(self, observation_factory):
        """Should store cumulative totals exactly as upstream reported them."""
        snapshots = [
            (D1, {"A": observation_factory("A", 10)}),
            (D2, {"A": observation_factory("A", 7)}),
        ]

        rows_by_date = reconcile(snapshots)

        assert rows_by_date[D1][0].total_detections == 10
        assert rows_by_date[D2][0].total_detections == 7
        assert rows_by_date[D2][0].latest_detection_at is not None

    def test_present_species_use_that_dates_metadata(self, observation_factory):
        """Should take metadata from the date's own snapshot when present."""
        snapshots = [
            (D1, {"A": observation_factory("A", 3, color="#000000")}),
            (D2, {"A": observation_factory("A", 2, color="#ffffff")}),
        ]

        rows_by_date = reconcile(snapshots)

        assert rows_by_date[D1][0].color == "#000000"
        assert rows_by_date[D2][0].color == "#ffffff"

    def test_no_species_yields_empty_rows(self):
        """Should produce empty row lists when no date returned species."""
        assert reconcile([(D1, {}), (D2, {})]) == {D1: [], D2: []}
