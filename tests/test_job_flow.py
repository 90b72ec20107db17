"""End-to-end flows through the real routers, auth and SQLite persistence."""


def test_job_lifecycle_emits_events(register, live_client, notifier):
    _, headers = register()

    created = live_client.post(
        "/api/jobs",
        headers=headers,
        json={"company": "Acme", "position": "Backend Engineer", "salary": 120000, "appliedDate": "2024-02-01"},
    )
    assert created.status_code == 201
    job = created.json()["data"]
    assert job["status"] == "applied"
    assert job["appliedDate"].startswith("2024-02-01")
    assert notifier.names() == ["job-created"]

    updated = live_client.put(f"/api/jobs/{job['id']}", headers=headers, json={"status": "interview"})
    assert updated.status_code == 200
    assert updated.json()["data"]["status"] == "interview"
    assert updated.json()["data"]["salary"] == 120000
    event, payload, _ = notifier.events[-1]
    assert event == "job-status-updated"
    assert (payload["oldStatus"], payload["newStatus"]) == ("applied", "interview")

    overview = live_client.get("/api/jobs/stats/overview", headers=headers).json()["data"]
    assert overview["totalJobs"] == 1
    assert overview["statusStats"]["interview"] == 1

    deleted = live_client.delete(f"/api/jobs/{job['id']}", headers=headers)
    assert deleted.status_code == 200
    assert notifier.names() == ["job-created", "job-status-updated", "job-deleted"]
    assert live_client.get(f"/api/jobs/{job['id']}", headers=headers).status_code == 404


def test_jobs_are_private_to_their_owner(register, live_client):
    _, alice = register(name="Alice", email="alice@example.com")
    _, bob = register(name="Bob", email="bob@example.com")
    job_id = live_client.post("/api/jobs", headers=alice, json={"company": "Acme", "position": "Dev"}).json()["data"]["id"]

    assert live_client.get(f"/api/jobs/{job_id}", headers=bob).status_code == 404
    assert live_client.put(f"/api/jobs/{job_id}", headers=bob, json={"status": "offer"}).status_code == 404
    assert live_client.delete(f"/api/jobs/{job_id}", headers=bob).status_code == 404
    assert live_client.get("/api/jobs", headers=bob).json()["total"] == 0
    assert live_client.get("/api/jobs", headers=alice).json()["total"] == 1


def test_jobs_require_authentication(live_client):
    assert live_client.get("/api/jobs").status_code == 401
    assert live_client.get("/api/jobs", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_public_feedback_flow(register, live_client, notifier):
    for rating, public in ((5, True), (2, True), (4, False)):
        resp = live_client.post(
            "/api/feedback",
            json={"rating": rating, "feedback": f"rated {rating}", "email": "fan@example.com", "isPublic": public},
        )
        assert resp.status_code == 201
    assert notifier.names() == ["new-feedback"] * 3
    assert {room for _, _, room in notifier.events} == {"admin-room"}

    public = live_client.get("/api/feedback/public").json()
    assert public["total"] == 2
    assert all("email" not in row for row in public["data"])
    assert live_client.get("/api/feedback/public?rating=2").json()["total"] == 1

    stats = live_client.get("/api/feedback/stats").json()["data"]
    assert stats["totalFeedbacks"] == 3
    assert stats["averageRating"] == 3.7
    assert stats["ratingDistribution"] == {"5": 1, "4": 1, "3": 0, "2": 1, "1": 0}


def test_admin_flow(register, live_client):
    applicant, applicant_headers = register(name="Applicant", email="app@example.com")
    _, admin_headers = register(name="Boss", email="boss@example.com", role="admin")
    live_client.post("/api/jobs", headers=applicant_headers, json={"company": "Acme", "position": "Dev"})
    live_client.post("/api/feedback", json={"rating": 4, "feedback": "nice"})

    assert live_client.get("/api/admin/stats", headers=applicant_headers).status_code == 403

    stats = live_client.get("/api/admin/stats", headers=admin_headers).json()["data"]
    assert stats["overview"]["totalUsers"] == 1
    assert stats["overview"]["totalJobs"] == 1
    assert stats["growth"]["newUsers"] == 1

    users = live_client.get("/api/admin/users?role=applicant", headers=admin_headers).json()
    assert [(u["id"], u["jobCount"]) for u in users["data"]] == [(applicant["id"], 1)]

    feedback_id = live_client.get("/api/admin/feedback", headers=admin_headers).json()["data"][0]["id"]
    reviewed = live_client.put(
        f"/api/admin/feedback/{feedback_id}/status", headers=admin_headers, json={"status": "reviewed"}
    )
    assert reviewed.json()["data"]["status"] == "reviewed"

    toggled = live_client.put(f"/api/admin/users/{applicant['id']}/toggle-status", headers=admin_headers)
    assert toggled.json()["message"] == "User deactivated successfully"
    assert live_client.get("/api/jobs", headers=applicant_headers).status_code == 401
