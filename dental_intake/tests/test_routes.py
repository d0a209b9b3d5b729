def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers.get("x-trace-id")


def test_trace_id_is_echoed(client):
    r = client.get("/api/health", headers={"x-trace-id": "abc-123"})
    assert r.headers["x-trace-id"] == "abc-123"


def test_catalog_reasons_and_urgencies(client):
    reasons = client.get("/api/catalog/reasons").json()
    assert [r["id"] for r in reasons][0] == "dolor"
    assert len(reasons) == 6
    urgencies = client.get("/api/catalog/urgencies").json()
    assert [u["priority"] for u in urgencies] == [1, 2, 3, 4]


def test_catalog_symptoms_by_reason(client):
    r = client.get("/api/catalog/symptoms", params={"reason": "ortodoncia"})
    assert r.status_code == 200
    ids = [s["id"] for s in r.json()]
    assert ids == ["dolor-mandibula", "dientes-chuecos", "espacios", "mordida-mala", "apretamiento"]
    assert len(client.get("/api/catalog/symptoms").json()) == 20


def test_catalog_symptoms_rejects_unknown_reason(client):
    r = client.get("/api/catalog/symptoms", params={"reason": "nope"})
    assert r.status_code == 422


def test_catalog_programs_and_fees(client):
    programs = client.get("/api/catalog/programs").json()
    assert [p["id"] for p in programs] == ["implant-one", "revive-face-smile", "align", "zero-caries"]
    fees = client.get("/api/catalog/fees").json()
    assert fees[0]["price_display"] == "$45.000"


def test_diagnosis_route(client):
    r = client.post(
        "/api/diagnosis",
        json={"reason": "prevencion", "symptom_ids": ["limpieza", "revision-general"], "urgency": "este-mes"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["event_id"]
    assert body["diagnosis"]["route_key"] == "zero-caries"
    assert body["price_display"] == "$85.000 - $350.000"
    assert body["financing"]["installments"] == 12
    assert body["financing"]["amount"] == 217500
    assert body["cta"]["whatsapp_url"].startswith("https://wa.me/56935572986?text=")
    assert "ZERO%20CARIES" in body["cta"]["whatsapp_url"]
    assert body["cta"]["booking_url"] == "https://ff.healthatom.io/41knMr"


def test_repeated_diagnosis_reuses_event(client):
    payload = {"reason": "estetica", "symptom_ids": ["espacios", "forma-dientes"], "urgency": "esta-semana"}
    first = client.post("/api/diagnosis", json=payload).json()
    payload["symptom_ids"] = list(reversed(payload["symptom_ids"]))
    second = client.post("/api/diagnosis", json=payload).json()
    assert first["event_id"] == second["event_id"]


def test_diagnosis_route_validates_urgency(client):
    r = client.post("/api/diagnosis", json={"reason": "dolor", "urgency": "mañana"})
    assert r.status_code == 422


def test_financing_simulate_route(client):
    r = client.post(
        "/api/financing/simulate",
        json={"price_estimate": {"min": 85000, "max": 350000}, "amount": 123456, "installments": 6},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["amount"] == 125000
    assert body["installments"] == 6
    assert body["amount_display"] == "$125.000"


def test_financing_simulate_rejects_installments(client):
    r = client.post(
        "/api/financing/simulate",
        json={"price_estimate": {"min": 85000, "max": 350000}, "installments": 7},
    )
    assert r.status_code == 400
    assert r.json()["code"] == "BAD_REQUEST"
    assert "Unsupported installments" in r.json()["message"]


def _transition(client, session, action, **extra):
    r = client.post("/api/wizard/transition", json={"session": session, "action": action, **extra})
    return r


def test_wizard_flow_over_http(client):
    r = client.post("/api/wizard/start")
    assert r.status_code == 201
    state = r.json()
    assert state["step_title"] == "Motivo"
    assert state["can_proceed"] is False

    state = _transition(client, state["session"], "select_reason", reason="implantes").json()
    assert state["session"]["step"] == 2
    state = _transition(client, state["session"], "toggle_symptom", symptom_id="falta-diente").json()
    state = _transition(client, state["session"], "set_urgency", urgency="inmediata").json()
    assert state["can_proceed"] is True
    state = _transition(client, state["session"], "next").json()
    assert state["step_title"] == "Fotos"
    state = _transition(
        client,
        state["session"],
        "add_photos",
        photos=[{"filename": "boca.jpg", "content_type": "image/jpeg", "size_bytes": 2048}],
    ).json()
    assert len(state["session"]["photos"]) == 1
    state = _transition(client, state["session"], "next").json()
    assert state["step_title"] == "Diagnóstico"
    assert state["session"]["diagnosis"]["route_key"] == "implant-one"

    state = _transition(client, state["session"], "back").json()
    assert state["session"]["step"] == 3


def test_wizard_next_without_answer_is_400(client):
    session = client.post("/api/wizard/start").json()["session"]
    r = _transition(client, session, "next")
    assert r.status_code == 400
    assert r.json()["message"].startswith("Completa este paso")


def test_wizard_action_missing_argument(client):
    session = client.post("/api/wizard/start").json()["session"]
    r = _transition(client, session, "select_reason")
    assert r.status_code == 400
    assert r.json()["message"] == "reason is required"
