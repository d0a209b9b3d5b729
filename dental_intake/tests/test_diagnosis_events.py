from datetime import datetime, timedelta, timezone

from dental_intake.models.diagnosis_event import DiagnosisEvent
from dental_intake.services.diagnosis import generate_diagnosis
from dental_intake.services.diagnosis_events import input_key, save_diagnosis_event, window_cutoff


def test_input_key_ignores_symptom_order_and_duplicates():
    a = input_key("dolor", ["sensibilidad", "dolor-muela"], "inmediata", False)
    b = input_key("dolor", ["dolor-muela", "sensibilidad", "dolor-muela"], "inmediata", False)
    assert a == b
    assert a != input_key("dolor", ["dolor-muela", "sensibilidad"], "inmediata", True)


def test_save_reuses_event_within_window(db):
    args = ("dolor", ["inflamacion"], "inmediata", True)
    result = generate_diagnosis(*args)
    first = save_diagnosis_event(db, *args, result)
    second = save_diagnosis_event(db, *args, result)
    assert first.id == second.id
    assert first.result_json["route_key"] == result.route_key


def test_save_inserts_after_window(db):
    args = ("ortodoncia", ["mordida-mala"], "este-mes", False)
    result = generate_diagnosis(*args)
    first = save_diagnosis_event(db, *args, result)
    first.created_at = datetime.utcnow() - timedelta(minutes=5)
    db.commit()
    second = save_diagnosis_event(db, *args, result)
    assert second.id != first.id
    assert db.query(DiagnosisEvent).filter(DiagnosisEvent.input_key == first.input_key).count() == 2


def test_window_cutoff_is_aware_on_postgres_and_naive_utc_elsewhere():
    now = datetime(2026, 3, 1, 12, 0, 10, tzinfo=timezone.utc)
    pg = window_cutoff("postgresql", now)
    assert pg.tzinfo is not None
    assert pg == datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    lite = window_cutoff("sqlite", now)
    assert lite.tzinfo is None
    assert lite == datetime(2026, 3, 1, 12, 0, 0)
