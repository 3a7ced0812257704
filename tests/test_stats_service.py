"""
Tests for the Stats Aggregator

notArrivedCount is total pax minus the number of checked-in records, so a
group can legitimately report a negative figure.
"""

from datetime import datetime
from types import SimpleNamespace

from tickmypax.models.passenger_record import ArchivePassengerRecord
from tickmypax.services.guide_directory import GuideDirectory
from tickmypax.services.stats_service import StatsAggregator, aggregate

NOW = datetime(2025, 4, 20, 12, 0)
PAST = datetime(2025, 4, 15, 9, 30)
FUTURE = datetime(2025, 4, 25, 9, 30)


def rec(tour_type="Cliffs", pax=1, checked_in=False, checked_in_by=None, tour_date=PAST):
    return SimpleNamespace(
        tour_type=tour_type, pax=pax, checked_in=checked_in,
        checked_in_by=checked_in_by, tour_date=tour_date,
    )


class TestAggregate:
    """Aggregation over plain record-like objects"""

    def test_cliffs_example(self):
        summaries = aggregate(
            [rec(pax=3, checked_in=True, checked_in_by="Anna"), rec(pax=5)],
            guides={},
        )

        assert len(summaries) == 1
        cliffs = summaries[0]
        assert cliffs.tour_type == "Cliffs"
        assert cliffs.total_clients == 8
        assert cliffs.checked_in_count == 1
        assert cliffs.not_arrived_count == 7

    def test_not_arrived_can_be_negative(self):
        summaries = aggregate(
            [
                rec(pax=0, checked_in=True, checked_in_by="Anna"),
                rec(pax=0, checked_in=True, checked_in_by="Anna"),
            ],
            guides={},
        )

        assert summaries[0].total_clients == 0
        assert summaries[0].checked_in_count == 2
        assert summaries[0].not_arrived_count == -2

    def test_breakdown_by_attributor(self):
        summaries = aggregate(
            [
                rec(pax=3, checked_in=True, checked_in_by="Liam"),
                rec(pax=2, checked_in=True, checked_in_by="Anna"),
                rec(pax=4),
            ],
            guides={},
        )

        guides = {g.guide_name: g for g in summaries[0].guides}
        assert [g.guide_name for g in summaries[0].guides] == ["Anna", "Liam", "None"]
        assert guides["Liam"].clients == 3
        assert guides["Liam"].checked_in_count == 1
        assert guides["None"].clients == 4
        assert guides["None"].checked_in_count == 0
        assert guides["None"].not_arrived_count == 4

    def test_group_date_is_earliest_and_output_sorted(self):
        summaries = aggregate(
            [
                rec(tour_type="Dublin", tour_date=datetime(2025, 4, 14)),
                rec(tour_type="Cliffs", tour_date=datetime(2025, 4, 16)),
                rec(tour_type="Cliffs", tour_date=datetime(2025, 4, 15)),
            ],
            guides={},
        )

        assert [s.tour_type for s in summaries] == ["Dublin", "Cliffs"]
        assert summaries[1].tour_date == datetime(2025, 4, 15)

    def test_assigned_guide_is_looked_up_normalized(self):
        summaries = aggregate([rec(tour_type=" Cliffs")], guides={"cliffs": "Anna"})

        assert summaries[0].guide_name == "Anna"

    def test_empty_input(self):
        assert aggregate([], guides={}) == []


class TestStatsAggregator:

    def test_only_completed_tours_are_counted(self, db, add_record):
        add_record(tour_type="Cliffs", pax=3, tour_date=PAST)
        add_record(tour_type="Dublin", pax=5, tour_date=FUTURE)

        summaries = StatsAggregator(db).completed_tour_stats(now=NOW)

        assert [s.tour_type for s in summaries] == ["Cliffs"]

    def test_tour_exactly_now_is_not_completed(self, db, add_record):
        add_record(tour_date=NOW)

        assert StatsAggregator(db).completed_tour_stats(now=NOW) == []

    def test_guide_from_directory(self, db, add_record):
        add_record(tour_type="Cliffs", pax=3)
        GuideDirectory(db).assign_guide("cliffs", "Anna")

        summaries = StatsAggregator(db).completed_tour_stats(now=NOW)

        assert summaries[0].guide_name == "Anna"

    def test_archive_is_not_mixed_into_live_stats(self, db, add_record):
        add_record(tour_type="Cliffs", pax=3)
        db.add(ArchivePassengerRecord(
            tour_type="Cliffs", pax=10, original_pax=10, tour_date=PAST,
            checked_in=False, archived_at=NOW,
        ))
        db.commit()

        live = StatsAggregator(db).completed_tour_stats(now=NOW)
        archived = StatsAggregator(db).archived_tour_stats(now=NOW)

        assert live[0].total_clients == 3
        assert archived[0].total_clients == 10
