import pytest

from dental_intake.schemas.wizard import PhotoMeta, WizardSession
from dental_intake.services import wizard


def _photo(name="a.jpg", content_type="image/jpeg", size=1024):
    return PhotoMeta(filename=name, content_type=content_type, size_bytes=size)


def _at_photos_step():
    s = wizard.select_reason(wizard.new_session(), "prevencion")
    s = wizard.toggle_symptom(s, "limpieza")
    s = wizard.toggle_symptom(s, "revision-general")
    s = wizard.set_urgency(s, "este-mes")
    return wizard.advance(s)


def test_new_session_starts_at_reason_step():
    s = wizard.new_session()
    assert s.step == 1
    assert wizard.step_title(s.step) == "Motivo"
    assert wizard.can_proceed(s) is False
    assert wizard.progress(s) == pytest.approx(100 / 6)


def test_selecting_reason_moves_to_symptoms():
    s = wizard.select_reason(wizard.new_session(), "dolor")
    assert s.step == 2
    assert s.reason == "dolor"


def test_transitions_do_not_mutate_input():
    s = wizard.new_session()
    wizard.select_reason(s, "dolor")
    assert s.step == 1
    assert s.reason is None


def test_toggle_symptom_adds_and_removes():
    s = wizard.toggle_symptom(WizardSession(step=2), "sensibilidad")
    assert s.symptom_ids == ["sensibilidad"]
    s = wizard.toggle_symptom(s, "sensibilidad")
    assert s.symptom_ids == []


def test_symptoms_step_requires_urgency():
    s = wizard.select_reason(wizard.new_session(), "dolor")
    assert wizard.can_proceed(s) is False
    with pytest.raises(wizard.WizardError):
        wizard.advance(s)
    s = wizard.set_urgency(s, "inmediata")
    assert wizard.advance(s).step == 3


def test_leaving_photos_step_runs_diagnosis():
    s = _at_photos_step()
    assert s.step == 3
    assert s.diagnosis is None
    s = wizard.advance(s)
    assert s.step == 4
    assert wizard.step_title(s.step) == "Diagnóstico"
    assert s.diagnosis.route_key == "zero-caries"


def test_photos_mark_the_diagnosis():
    s = wizard.add_photos(_at_photos_step(), [_photo()])
    s = wizard.advance(s)
    assert s.diagnosis.recommendations[-1].startswith("Gracias por compartir")


def test_invalid_photos_are_dropped():
    s = wizard.add_photos(
        _at_photos_step(),
        [
            _photo("doc.pdf", "application/pdf"),
            _photo("big.png", "image/png", wizard.MAX_PHOTO_BYTES + 1),
            _photo("ok.png", "image/png"),
        ],
    )
    assert [p.filename for p in s.photos] == ["ok.png"]


def test_at_most_five_photos_kept():
    s = wizard.add_photos(_at_photos_step(), [_photo(f"{i}.jpg") for i in range(4)])
    s = wizard.add_photos(s, [_photo(f"x{i}.jpg") for i in range(3)])
    assert len(s.photos) == 5
    assert s.photos[-1].filename == "x0.jpg"


def test_remove_photo_by_index():
    s = wizard.add_photos(_at_photos_step(), [_photo("a.jpg"), _photo("b.jpg")])
    s = wizard.remove_photo(s, 0)
    assert [p.filename for p in s.photos] == ["b.jpg"]
    with pytest.raises(wizard.WizardError):
        wizard.remove_photo(s, 3)


def test_walks_to_last_step_and_stays():
    s = wizard.advance(_at_photos_step())
    s = wizard.advance(s)
    assert wizard.step_title(s.step) == "Inversión"
    s = wizard.advance(s)
    assert s.step == 6
    assert wizard.progress(s) == pytest.approx(100.0)
    assert wizard.advance(s).step == 6


def test_back_never_goes_below_first_step():
    s = wizard.back(_at_photos_step())
    assert s.step == 2
    assert wizard.back(wizard.new_session()).step == 1


def test_photos_step_rejects_session_without_answers():
    s = WizardSession(step=3)
    assert wizard.can_proceed(s) is False
    with pytest.raises(wizard.WizardError):
        wizard.advance(s)


def test_diagnosis_steps_require_a_result():
    assert wizard.can_proceed(WizardSession(step=4)) is False
    assert wizard.can_proceed(WizardSession(step=5)) is False
