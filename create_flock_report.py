#!/usr/bin/env python3
"""
Create a demo Aseel flock valuation workbook:
1. Registers a small flock through the twin service
2. Logs fight, show, health and breeding events
3. Forecasts offspring colours for two pairings
4. Writes everything to an Excel report
"""

from datetime import datetime, timedelta, timezone
import logging
import sys

from aseel_twin.genetics import (
    GeneticProfile, AlleleE, AlleleS, AlleleB, AlleleBl, AlleleMo,
    predict_offspring_distribution,
)
from aseel_twin.core.events import BirdEventType
from aseel_twin.reporting import save_flock_report
from aseel_twin.service import (
    DigitalTwinService, BirthRecord, ManualGrading, InMemoryTwinStore, InMemoryEventStore,
)

OWNER_ID = "demo-farm"


def build_demo_flock(service: DigitalTwinService, now: datetime):
    kaki_cock = GeneticProfile(
        e_locus=(AlleleE.EXTENDED, AlleleE.EXTENDED),
        s_locus=(AlleleS.GOLD, AlleleS.GOLD),
    )
    dega_hen = GeneticProfile(
        e_locus=(AlleleE.WILD_TYPE, AlleleE.WILD_TYPE),
        bl_locus=(AlleleBl.BLUE, AlleleBl.NON_BLUE),
    )
    parla_cock = GeneticProfile(
        e_locus=(AlleleE.EXTENDED, AlleleE.WILD_TYPE),
        b_locus=(AlleleB.BARRED, AlleleB.NOT_BARRED),
        mo_locus=(AlleleMo.MOTTLED, AlleleMo.NON_MOTTLED),
    )

    records = [
        BirthRecord("AS-001", now - timedelta(days=900), "MALE", name="Raja",
                    weight_grams=4100, height_cm=68, genetic_profile=kaki_cock),
        BirthRecord("AS-002", now - timedelta(days=600), "FEMALE", name="Rani",
                    weight_grams=2700, height_cm=52, genetic_profile=dega_hen),
        BirthRecord("AS-003", now - timedelta(days=400), "MALE", name="Veera",
                    weight_grams=3400, height_cm=63, genetic_profile=parla_cock),
        BirthRecord("AS-004", now - timedelta(days=1600), "MALE", name="Pedda",
                    weight_grams=3700, height_cm=66),
        BirthRecord("AS-005", now - timedelta(days=60), "FEMALE", weight_grams=1300),
    ]
    for record in records:
        service.create_twin(record, OWNER_ID, now)

    for _ in range(4):
        service.record_event("AS-001", BirdEventType.FIGHT_WIN, now=now)
    service.record_event("AS-001", BirdEventType.FIGHT_LOSS, now=now)
    for placement in (1, 2, 3):
        service.record_event("AS-003", BirdEventType.SHOW_RESULT, numeric_value=placement, now=now)
    for _ in range(3):
        service.record_event("AS-002", BirdEventType.BREEDING_SUCCESS, now=now)
    service.record_event("AS-004", BirdEventType.INJURY, now=now)
    service.record_event("AS-005", BirdEventType.VACCINATION, now=now)
    service.record_event("AS-005", BirdEventType.WEIGHT_RECORDED, numeric_value=2400, now=now)
    service.submit_manual_grading("AS-001", ManualGrading(height_cm=68, bone_density_score=85), now)

    service.update_all_lifecycles(OWNER_ID, now)
    return kaki_cock, dega_hen, parla_cock


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    output_path = sys.argv[1] if len(sys.argv) > 1 else "aseel_flock_report.xlsx"

    now = datetime.now(timezone.utc)
    service = DigitalTwinService(InMemoryTwinStore(), InMemoryEventStore())
    kaki_cock, dega_hen, parla_cock = build_demo_flock(service, now)

    forecasts = {
        "AS-001 x AS-002": predict_offspring_distribution(kaki_cock, dega_hen, seed=42),
        "AS-003 x AS-002": predict_offspring_distribution(parla_cock, dega_hen, seed=42),
    }

    twins = service.twin_store.list_by_owner(OWNER_ID)
    save_flock_report(twins, output_path, forecasts)

    print("=" * 60)
    print(f"Flock report: {output_path}")
    print("=" * 60)
    for twin in twins:
        print(f"  {twin.bird_id:8s} {twin.lifecycle_stage:14s} score={twin.valuation_score:3d} "
              f"value={twin.estimated_value:,.0f}")
