import app.main as main_mod


def test_auth_rate_limit_blocks_excess_requests(monkeypatch, client):
    monkeypatch.setattr(main_mod.settings, "rate_limit_auth_per_min", 2)
    monkeypatch.setattr("app.routers.auth.get_by_email", lambda db, email: None)

    payload = {"email": "x@example.com", "password": "bad"}
    r1 = client.post("/api/auth/login", json=payload)
    r2 = client.post("/api/auth/login", json=payload)
    r3 = client.post("/api/auth/login", json=payload)

    assert r1.status_code == 401
    assert r2.status_code == 401
    assert r3.status_code == 429
    assert r3.headers["Retry-After"]
    assert r3.json()["success"] is False


def test_feedback_submission_is_rate_limited_but_reads_are_not(monkeypatch, client):
    monkeypatch.setattr(main_mod.settings, "rate_limit_feedback_per_min", 1)
    monkeypatch.setattr("app.routers.feedback.get_paginated", lambda db, flt, params: ([], 0))

    bad = {"feedback": "", "rating": 9}
    assert client.post("/api/feedback", json=bad).status_code == 400
    assert client.post("/api/feedback", json=bad).status_code == 429
    assert client.get("/api/feedback/public").status_code == 200
    assert client.get("/api/feedback/public").status_code == 200
