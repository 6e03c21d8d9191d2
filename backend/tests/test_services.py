"""Tests for the report services and event store against a real (SQLite) session."""

import logging
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from fathom.core.enums import Momentum, RiskLevel
from fathom.db.event_store import EventStore
from fathom.models import (
    Commitment,
    Interaction,
    Introduction,
    ProofPoint,
    ProofPointUsage,
    Relationship,
    StageTransition,
)
from fathom.schemas.introduction import IntroductionNetwork
from fathom.services.commitment_service import commitment_service
from fathom.services.cultural_service import cultural_service
from fathom.services.introduction_service import introduction_service
from fathom.services.momentum_service import momentum_service
from fathom.services.proof_point_service import proof_point_service
from fathom.services.stall_risk_service import stall_risk_service

TODAY = date(2024, 6, 1)


async def _relationship(db, name="Ana Souza", **kwargs) -> Relationship:
    kwargs.setdefault("organization", "Banco Sul")
    rel = Relationship(name=name, **kwargs)
    db.add(rel)
    await db.flush()
    return rel


async def _store_down(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("connection refused"))


async def _connection_refused(*args, **kwargs):
    raise ConnectionRefusedError(111, "Connect call failed")


# ---------------------------------------------------------------------------
# Event store
# ---------------------------------------------------------------------------


async def test_list_relationships_active_only(db):
    await _relationship(db, "Active")
    await _relationship(db, "Archived", is_active=False)

    store = EventStore(db)

    assert [r.name for r in await store.list_relationships()] == ["Active"]
    assert len(await store.list_relationships(active_only=False)) == 2


async def test_get_relationship_loads_history(db):
    rel = await _relationship(db)
    db.add(Interaction(relationship_id=rel.id, meeting_date=TODAY, temperature_change="warmer"))
    db.add(StageTransition(relationship_id=rel.id, to_stage="Identified", transition_date=TODAY))
    await db.commit()

    loaded = await EventStore(db).get_relationship(rel.id)

    assert len(loaded.interactions) == 1
    assert loaded.stage_transitions[0].to_stage == "Identified"
    assert await EventStore(db).get_relationship(9999) is None


async def test_relationships_by_ids_skips_unknown(db):
    rel = await _relationship(db)
    lookup = await EventStore(db).relationships_by_ids([rel.id, 404, None])
    assert list(lookup) == [rel.id]
    assert await EventStore(db).relationships_by_ids([]) == {}


async def test_list_commitments_filters(db):
    a = await _relationship(db, "A")
    b = await _relationship(db, "B")
    for rel, due in [(a, TODAY), (a, TODAY + timedelta(days=40)), (b, TODAY)]:
        db.add(Commitment(relationship_id=rel.id, owner="us", description="x", due_date=due))
    await db.flush()

    store = EventStore(db)

    assert len(await store.list_commitments(relationship_id=a.id)) == 2
    assert len(await store.list_commitments(due_from=TODAY, due_to=TODAY)) == 2


# ---------------------------------------------------------------------------
# Stall risks
# ---------------------------------------------------------------------------


async def test_stall_risk_service(db):
    rel = await _relationship(db, temperature="cold")
    db.add(
        StageTransition(
            relationship_id=rel.id,
            from_stage="Identified",
            to_stage="Engaged",
            transition_date=TODAY - timedelta(days=50),
            days_in_previous_stage=10,
        )
    )
    await db.flush()

    risks = await stall_risk_service.get_stall_risks(db, today=TODAY)

    # Engaged has no history, so the 21-day default applies: 50 > 42
    assert len(risks) == 1
    assert risks[0].relationship.name == "Ana Souza"
    assert risks[0].risk_level == RiskLevel.HIGH
    assert risks[0].avg_days_for_stage == 21
    assert "Relationship temperature is cold/cooling" in risks[0].risk_factors

    summary = await stall_risk_service.get_stall_risk_summary(db, today=TODAY)
    assert summary.high_risk == 1
    assert summary.stage_health["Engaged"].at_risk == 1


async def test_stall_risks_degrade_to_empty_on_store_failure(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_stage_transitions", _store_down)

    assert await stall_risk_service.get_stall_risks(db, today=TODAY) == []
    summary = await stall_risk_service.get_stall_risk_summary(db, today=TODAY)
    assert summary.total_at_risk == 0


async def test_stall_risks_degrade_when_server_unreachable(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_stage_transitions", _connection_refused)
    assert await stall_risk_service.get_stall_risks(db, today=TODAY) == []


async def test_failed_rollback_still_returns_fallback(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_stage_transitions", _connection_refused)
    monkeypatch.setattr(db, "rollback", _connection_refused)
    assert await stall_risk_service.get_stall_risks(db, today=TODAY) == []


async def test_non_store_errors_propagate(db, monkeypatch):
    async def broken(*args, **kwargs):
        raise ValueError("bad row")

    monkeypatch.setattr(EventStore, "list_stage_transitions", broken)

    with pytest.raises(ValueError):
        await stall_risk_service.get_stall_risks(db)


# ---------------------------------------------------------------------------
# Momentum
# ---------------------------------------------------------------------------


async def test_momentum_service(db):
    heating = await _relationship(db, "Heating", temperature="warm")
    quiet = await _relationship(db, "Quiet")
    await _relationship(db, "Gone", is_active=False)
    for n, change in enumerate(["warmer", "warmer", "cooler"]):
        db.add(
            Interaction(
                relationship_id=heating.id,
                meeting_date=TODAY - timedelta(days=n),
                temperature_change=change,
            )
        )
    await db.flush()

    dashboard = await momentum_service.get_temperature_velocity_dashboard(db)
    assert [e.name for e in dashboard.heating] == ["Heating"]
    assert dashboard.summary.total_active == 2
    assert dashboard.summary.stable == 1

    velocity = await momentum_service.get_temperature_velocity(db, heating.id)
    assert velocity.momentum == Momentum.HEATING
    assert velocity.consecutive_direction == 2
    assert await momentum_service.get_temperature_velocity(db, 9999) is None

    everything = await momentum_service.get_all_temperature_velocities(db)
    assert set(everything) == {heating.id, quiet.id}


async def test_momentum_dashboard_degrades(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_relationships", _store_down)
    dashboard = await momentum_service.get_temperature_velocity_dashboard(db)
    assert dashboard.summary.total_active == 0
    assert await momentum_service.get_all_temperature_velocities(db) == {}


async def test_unknown_relationship_is_not_logged_as_store_failure(db, caplog):
    with caplog.at_level(logging.INFO, logger="fathom"):
        assert await momentum_service.get_temperature_velocity(db, 9999) is None

    assert "Relationship 9999 not found" in caplog.text
    assert "Store access failed" not in caplog.text


async def test_velocity_store_failure_is_logged(db, monkeypatch, caplog):
    monkeypatch.setattr(EventStore, "get_relationship", _store_down)
    with caplog.at_level(logging.INFO, logger="fathom"):
        assert await momentum_service.get_temperature_velocity(db, 1) is None

    assert "Store access failed" in caplog.text
    assert "not found" not in caplog.text


# ---------------------------------------------------------------------------
# Commitments
# ---------------------------------------------------------------------------


async def test_commitment_metrics_service(db):
    rel = await _relationship(db)
    db.add_all(
        [
            Commitment(
                relationship_id=rel.id,
                owner="360",
                description="Send proposal",
                due_date=TODAY - timedelta(days=8),
            ),
            Commitment(
                relationship_id=rel.id,
                owner="partner",
                description="Intro to CFO",
                due_date=TODAY - timedelta(days=2),
                status="completed",
            ),
        ]
    )
    await db.flush()

    metrics = await commitment_service.get_commitment_metrics(db, today=TODAY)

    assert metrics.us.overdue == 1
    assert metrics.us.overdue_items[0].days_overdue == 8
    assert metrics.trust_score.we_deliver == 0
    assert metrics.trust_score.they_deliver == 100
    assert metrics.trust_score.reciprocity_balance == 1.0

    split = await commitment_service.get_commitments_by_relationship(db, rel.id)
    assert [c.description for c in split.us] == ["Send proposal"]
    assert [c.description for c in split.them] == ["Intro to CFO"]


async def test_complete_commitment(db):
    commitment = Commitment(owner="us", description="Share deck", due_date=TODAY)
    db.add(commitment)
    await db.commit()

    assert await commitment_service.complete_commitment(db, commitment.id) is True
    await db.commit()

    stored = (
        await db.execute(
            select(Commitment)
            .where(Commitment.id == commitment.id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert stored.status == "completed"
    assert stored.completed_at is not None

    # Already completed: nothing left to transition
    assert await commitment_service.complete_commitment(db, commitment.id) is False


async def test_complete_unknown_commitment(db):
    assert await commitment_service.complete_commitment(db, 4242) is False


async def test_complete_commitment_store_failure(db, monkeypatch):
    monkeypatch.setattr(EventStore, "mark_commitment_complete", _store_down)
    assert await commitment_service.complete_commitment(db, 1) is False


async def test_complete_commitment_server_unreachable(db, monkeypatch):
    monkeypatch.setattr(EventStore, "mark_commitment_complete", _connection_refused)
    assert await commitment_service.complete_commitment(db, 1) is False


# ---------------------------------------------------------------------------
# Introductions
# ---------------------------------------------------------------------------


async def test_introduction_service(db):
    ana = await _relationship(db, "Ana Souza")
    ben = await _relationship(db, "Ben Carter", organization="Northwind")
    db.add_all(
        [
            Introduction(
                introducer_id=ana.id,
                introduced_id=ben.id,
                direction="received",
                status="completed",
                first_meeting_at=datetime(2024, 5, 2),
                outcome="converted",
                value_generated=12000.0,
                created_at=datetime(2024, 5, 1),
            ),
            Introduction(
                introducer_id=ana.id,
                introduced_name="Dana Ruiz",
                direction="incoming",
                status="requested",
                created_at=datetime(2024, 5, 20),
            ),
            Introduction(
                introducer_id=ben.id,
                introduced_name="Eli Moss",
                direction="made",
                status="pending",
                created_at=datetime(2024, 5, 25),
            ),
        ]
    )
    await db.flush()

    network = await introduction_service.get_introduction_network(db)
    assert network.funnel.total_intros == 3
    assert network.funnel.conversion_rates.intro_to_meeting == 33
    assert [s.name for s in network.top_introducers] == ["Ana Souza"]
    assert [r.introduced_name for r in network.recent_introductions] == [
        "Eli Moss",
        "Dana Ruiz",
        "Ben Carter",
    ]

    pending = await introduction_service.get_pending_introductions(db)
    assert [p.introduced_name for p in pending] == ["Eli Moss", "Dana Ruiz"]

    roi = await introduction_service.get_network_roi(db)
    assert roi.total_introductions_received == 2
    assert roi.avg_value_per_intro == 6000
    assert roi.top_introducer_name == "Ana Souza"

    stats = await introduction_service.get_introducer_stats(db, ana.id)
    assert stats.deals_generated == 1
    assert stats.conversion_rate == 50
    assert await introduction_service.get_introducer_stats(db, ben.id) is None


async def test_introduction_network_empty(db):
    assert await introduction_service.get_introduction_network(db) == IntroductionNetwork()


async def test_introduction_network_degrades(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_introductions", _store_down)
    assert await introduction_service.get_introduction_network(db) == IntroductionNetwork()
    assert await introduction_service.get_pending_introductions(db) == []


# ---------------------------------------------------------------------------
# Proof points
# ---------------------------------------------------------------------------


async def test_proof_point_service(db):
    rel = await _relationship(db)
    cfo_story = ProofPoint(
        name="Treasury automation",
        category="Efficiency",
        relevant_personas=["CFO"],
        relevant_geographies=["Brazil"],
    )
    generic = ProofPoint(name="Platform uptime")
    db.add_all([cfo_story, generic])
    await db.flush()
    for resonated in (True, True, False):
        db.add(ProofPointUsage(proof_point_id=cfo_story.id, relationship_id=rel.id, resonated=resonated))
    db.add(ProofPointUsage(proof_point_id=generic.id, relationship_id=rel.id, resonated=True))
    await db.flush()

    intelligence = await proof_point_service.get_proof_point_intelligence(db)
    assert intelligence.total_proof_points == 2
    assert intelligence.overall_resonance_rate == 75
    assert [p.name for p in intelligence.top_performers] == ["Treasury automation"]
    assert intelligence.proof_points[0].recent_usage[0].relationship_name == "Ana Souza"

    recommended = await proof_point_service.get_recommended_proof_points(
        db, persona_type="CFO", geography="Brazil"
    )
    assert [(r.name, r.score) for r in recommended] == [("Treasury automation", 102)]

    by_category = await proof_point_service.get_proof_points_by_category(db)
    assert sorted(by_category) == ["Efficiency", "Uncategorized"]

    for_cfo = await proof_point_service.get_best_proof_points_for_persona(db, "CFO")
    assert [p.name for p in for_cfo] == ["Treasury automation"]


async def test_proof_point_intelligence_degrades(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_proof_points", _store_down)
    assert (await proof_point_service.get_proof_point_intelligence(db)).total_proof_points == 0
    assert await proof_point_service.get_recommended_proof_points(db, persona_type="CFO") == []


# ---------------------------------------------------------------------------
# Cultural
# ---------------------------------------------------------------------------


async def test_cultural_service(db):
    rel = await _relationship(db, cultural_approach="Brazilian, formal introductions")
    await _relationship(db, "Ben Carter", cultural_approach="Direct, american")
    await _relationship(db, "Archived", cultural_approach="Japanese", is_active=False)
    db.add(
        Interaction(
            relationship_id=rel.id,
            meeting_date=TODAY,
            cultural_context="Lunch ran long, family came up twice.",
        )
    )
    await db.flush()

    patterns = await cultural_service.get_cultural_patterns(db)
    assert sorted(patterns) == ["Brazil", "United States"]
    assert patterns["Brazil"].key_insights == ["Lunch ran long, family came up twice"]

    assert await cultural_service.get_geography_distribution(db) == {
        "Brazil": 1,
        "United States": 1,
    }

    context = await cultural_service.get_relationship_cultural_context(db, rel.id)
    assert context.geography == "Brazil"
    assert context.meeting_count == 1
    assert await cultural_service.get_relationship_cultural_context(db, 9999) is None

    prep = await cultural_service.get_cultural_prep_for_meeting(db, rel.id)
    assert prep.geography == "Brazil"
    assert prep.key_considerations == ["Formal communication preferred"]
    assert prep.previous_cultural_notes == ["Lunch ran long, family came up twice."]


async def test_cultural_prep_unknown_relationship(db):
    prep = await cultural_service.get_cultural_prep_for_meeting(db, 9999)
    assert prep.geography == "Global"
    assert prep.previous_cultural_notes == []


async def test_cultural_patterns_degrade(db, monkeypatch):
    monkeypatch.setattr(EventStore, "list_relationships", _store_down)
    assert await cultural_service.get_cultural_patterns(db) == {}
