"""
Test: Twin Service
Verifies twin creation, lifecycle persistence, event logging, batch
updates, weight ratings, manual grading and soft deletion against the
in-memory stores.
"""

from datetime import datetime, timedelta, timezone

import pytest
from aseel_twin.core.events import BirdEventType
from aseel_twin.core.twin import DigitalTwin
from aseel_twin.service import (
    DigitalTwinService,
    BirthRecord,
    ManualGrading,
    InMemoryTwinStore,
    InMemoryEventStore,
)


NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)
OWNER = "owner-1"


def create_service():
    return DigitalTwinService(InMemoryTwinStore(), InMemoryEventStore())


def born(bird_id: str, age_days: int, gender: str = "MALE", **kwargs) -> BirthRecord:
    return BirthRecord(bird_id, NOW - timedelta(days=age_days), gender, **kwargs)


# =============================================================================
# CREATION
# =============================================================================

class TestCreateTwin:
    """Tests for twin creation from birth records."""

    def test_creates_scored_twin(self):
        service = create_service()
        twin = service.create_twin(born("AS-001", 100, weight_grams=1500, height_cm=40), OWNER, NOW)

        assert twin.lifecycle_stage == "GROWER"
        assert twin.age_days == 100
        assert twin.weight_kg == pytest.approx(1.5)
        assert twin.valuation_score is not None
        assert twin.maturity_score is not None
        assert service.twin_store.get("AS-001") == twin

    def test_logs_creation_event(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)

        events = service.event_store.events_for("AS-001")
        assert len(events) == 1
        assert events[0].event_type == BirdEventType.STAGE_TRANSITION
        assert events[0].title == "Digital Twin Created"
        assert events[0].lifecycle_stage_at_event == "GROWER"

    def test_idempotent(self):
        """A second create for the same bird returns the existing twin."""
        service = create_service()
        first = service.create_twin(born("AS-001", 100), OWNER, NOW)
        second = service.create_twin(born("AS-001", 500), "someone-else", NOW)

        assert second is first
        assert len(service.event_store) == 1

    def test_record_without_birth_date_is_egg(self):
        service = create_service()
        twin = service.create_twin(BirthRecord("EGG-1"), OWNER, NOW)
        assert twin.lifecycle_stage == "EGG"
        assert twin.age_days is None

    def test_gender_normalised(self):
        service = create_service()
        hen = service.create_twin(born("AS-002", 600, gender="female"), OWNER, NOW)
        assert hen.gender == "FEMALE"
        assert hen.lifecycle_stage == "BREEDER_PRIME"


# =============================================================================
# LIFECYCLE
# =============================================================================

class TestServiceLifecycle:
    """Tests for persisted lifecycle updates."""

    def test_update_persists_transition(self):
        service = create_service()
        service.create_twin(born("AS-001", 40), OWNER, NOW)

        later = NOW + timedelta(days=10)
        updated = service.update_lifecycle("AS-001", later)

        assert updated.lifecycle_stage == "GROWER"
        assert service.twin_store.get("AS-001").lifecycle_stage == "GROWER"
        transitions = [e for e in service.event_store.events_for("AS-001")
                       if e.string_value == "CHICK->GROWER"]
        assert len(transitions) == 1

    def test_unknown_bird(self):
        assert create_service().update_lifecycle("missing", NOW) is None

    def test_batch_update(self):
        service = create_service()
        service.create_twin(born("AS-001", 40), OWNER, NOW)
        service.create_twin(born("AS-002", 100), OWNER, NOW)
        service.create_twin(born("AS-003", 100), "other-owner", NOW)

        result = service.update_all_lifecycles(OWNER, NOW + timedelta(days=10))
        assert result.processed == 2
        assert result.transitions == 1
        assert result.errors == 0

    def test_batch_isolates_failures(self):
        """A broken twin is counted as an error and the rest still update."""
        service = create_service()
        service.create_twin(born("AS-001", 40), OWNER, NOW)
        service.twin_store.save(DigitalTwin(
            twin_id="bad", bird_id="AS-BAD", owner_id=OWNER,
            birth_date=NOW + timedelta(days=30),
        ))

        result = service.update_all_lifecycles(OWNER, NOW + timedelta(days=10))
        assert result.processed == 1
        assert result.errors == 1
        assert result.failed_bird_ids == ["AS-BAD"]
        assert service.twin_store.get("AS-001").lifecycle_stage == "GROWER"

    def test_transition_info(self):
        service = create_service()
        service.create_twin(born("AS-001", 40), OWNER, NOW)
        info = service.get_transition_info("AS-001", NOW)
        assert info.days_remaining == 5


# =============================================================================
# EVENTS
# =============================================================================

class TestRecordEvent:
    """Tests for event logging and score impact."""

    def test_fight_win_deltas(self):
        service = create_service()
        service.create_twin(born("AS-001", 400), OWNER, NOW)
        twin = service.record_event("AS-001", BirdEventType.FIGHT_WIN, now=NOW)

        assert twin.total_fights == 1
        assert twin.fight_wins == 1
        event = service.event_store.events_for("AS-001")[-1]
        assert event.performance_delta == 5
        assert event.market_delta == 3
        assert event.title == "Fight Won"
        assert event.lifecycle_stage_at_event == "ADULT_FIGHTER"

    def test_injury_delta_and_status(self):
        service = create_service()
        service.create_twin(born("AS-001", 400), OWNER, NOW)
        twin = service.record_event("AS-001", "INJURY", now=NOW)

        assert twin.current_health_status == "INJURED"
        assert service.event_store.events_for("AS-001")[-1].health_delta == -5

    def test_weight_event(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)
        twin = service.record_event("AS-001", BirdEventType.WEIGHT_RECORDED, numeric_value=1450, now=NOW)

        assert twin.weight_kg == pytest.approx(1.45)
        assert service.event_store.events_for("AS-001")[-1].title == "Weight: 1450g"

    def test_unknown_event_type_kept(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)
        service.record_event("AS-001", "FEATHER_MOLT", now=NOW)
        assert service.event_store.events_for("AS-001")[-1].event_type == "FEATHER_MOLT"

    def test_unknown_bird(self):
        assert create_service().record_event("missing", BirdEventType.VACCINATION, now=NOW) is None


# =============================================================================
# WEIGHT TRACKING
# =============================================================================

class TestWeightTracking:
    """Tests for weight ratings on logged weights and lifecycle anomaly events."""

    def test_weight_event_rated(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)
        service.record_event("AS-001", BirdEventType.WEIGHT_RECORDED, numeric_value=1450, now=NOW)

        event = service.event_store.events_for("AS-001")[-1]
        assert event.string_value == "EXCELLENT"
        assert event.morphology_delta == 2
        assert event.description == "Weight recorded: 1450g. Expected: 1500g. Rating: Excellent (-3.3%)"

    @pytest.mark.parametrize("grams,rating,delta", [
        (1300, "GOOD", 1),
        (1100, "FAIR", 0),
        (800, "UNDERWEIGHT", -1),
        (2200, "OVERWEIGHT", -1),
    ])
    def test_weight_rating_deltas(self, grams, rating, delta):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)
        service.record_event("AS-001", BirdEventType.WEIGHT_RECORDED, numeric_value=grams, now=NOW)

        event = service.event_store.events_for("AS-001")[-1]
        assert (event.string_value, event.morphology_delta) == (rating, delta)

    def test_unrated_events_have_no_morphology_delta(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)
        service.record_event("AS-001", BirdEventType.VACCINATION, now=NOW)
        assert service.event_store.events_for("AS-001")[-1].morphology_delta is None

    def test_underweight_bird_logs_anomaly_once_per_week(self):
        service = create_service()
        service.create_twin(born("AS-001", 100, weight_grams=900), OWNER, NOW)

        service.update_lifecycle("AS-001", NOW)
        service.update_lifecycle("AS-001", NOW + timedelta(days=3))
        anomalies = [e for e in service.event_store.events_for("AS-001")
                     if e.event_type == BirdEventType.TRAIT_RECORDED]
        assert len(anomalies) == 1
        assert anomalies[0].title == "Weight Underweight"
        assert anomalies[0].string_value == "UNDERWEIGHT"
        assert anomalies[0].numeric_value == 900

        service.update_lifecycle("AS-001", NOW + timedelta(days=8))
        assert service.event_store.latest("AS-001", BirdEventType.TRAIT_RECORDED).event_date == \
            NOW + timedelta(days=8)

    def test_healthy_weight_logs_no_anomaly(self):
        service = create_service()
        service.create_twin(born("AS-001", 100, weight_grams=1500), OWNER, NOW)
        service.update_lifecycle("AS-001", NOW)
        assert service.event_store.latest("AS-001", BirdEventType.TRAIT_RECORDED) is None


# =============================================================================
# MANUAL GRADING
# =============================================================================

class TestManualGrading:
    """Tests for expert morphology grading."""

    def test_grading_revalues_and_logs(self):
        service = create_service()
        before = service.create_twin(born("AS-001", 400), OWNER, NOW)
        assert before.morphology_score == 50

        graded = service.submit_manual_grading(
            "AS-001", ManualGrading(weight_grams=3500, height_cm=65, bone_density_score=80), NOW)

        assert graded.morphology_score == 97
        assert graded.weight_kg == pytest.approx(3.5)
        assert graded.valuation_score > before.valuation_score
        assert service.twin_store.get("AS-001") == graded

        event = service.event_store.events_for("AS-001")[-1]
        assert event.event_type == BirdEventType.MORPHOLOGY_GRADING
        assert event.title == "Manual Grading Completed"
        assert event.numeric_value == 97
        assert event.description == "Expert grading submitted. Score: 97/100"

    def test_partial_grading_keeps_stored_measurements(self):
        service = create_service()
        service.create_twin(born("AS-001", 400, weight_grams=3500, height_cm=65), OWNER, NOW)

        graded = service.submit_manual_grading("AS-001", ManualGrading(bone_density_score=80, notes="Heavy bone"), NOW)
        assert graded.height_cm == 65
        assert graded.morphology_score == 97
        assert service.event_store.events_for("AS-001")[-1].description.endswith("Heavy bone")

    def test_unknown_bird(self):
        assert create_service().submit_manual_grading("missing", ManualGrading(), NOW) is None


# =============================================================================
# DELETION
# =============================================================================

class TestDeleteTwin:

    def test_soft_delete(self):
        service = create_service()
        service.create_twin(born("AS-001", 100), OWNER, NOW)

        assert service.delete_twin("AS-001", NOW)
        stored = service.twin_store.get("AS-001")
        assert stored.is_deleted
        assert stored.deleted_at == NOW
        assert service.get_twin("AS-001") is None
        assert service.twin_store.list_by_owner(OWNER) == []
        assert not service.delete_twin("AS-001", NOW)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
