from datetime import datetime, timedelta, timezone

import app.repos.admin_repo as ar
from app.models.feedback import Feedback
from app.models.job import Job
from app.models.user import User
from app.services import stats_service as ss

NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)


def test_zero_filled_counts_seeds_every_key():
    out = ss.zero_filled_counts(("applied", "interview", "offer"), {"offer": 2})
    assert out == {"applied": 0, "interview": 0, "offer": 2}


def test_zero_filled_counts_keeps_unexpected_keys():
    assert ss.zero_filled_counts((1, 2), {3: 1}) == {1: 0, 2: 0, 3: 1}


def test_growth_cutoff_is_relative_to_now():
    assert ss.growth_cutoff(NOW, days=30) == NOW - timedelta(days=30)
    before = datetime.now(timezone.utc)
    cutoff = ss.growth_cutoff()
    assert before - timedelta(days=30, seconds=1) <= cutoff <= datetime.now(timezone.utc) - timedelta(days=30)


def test_round_rating_half_up():
    assert ss.round_rating(4.25) == 4.3
    assert ss.round_rating(3.333) == 3.3
    assert ss.round_rating(0) == 0


def test_job_overview_for_user_without_jobs(db_session):
    out = ss.job_overview(db_session, "nobody")
    assert out["totalJobs"] == 0
    assert out["statusStats"] == {"applied": 0, "interview": 0, "offer": 0, "rejected": 0, "accepted": 0}
    assert out["recentJobs"] == []


def test_job_overview_counts_only_own_jobs_and_limits_recent(db_session):
    db_session.add_all(
        [
            User(id="u1", name="One", email="one@example.com", password_hash="x"),
            User(id="u2", name="Two", email="two@example.com", password_hash="x"),
        ]
    )
    for i in range(6):
        db_session.add(
            Job(
                id=f"j{i}",
                user_id="u1",
                company="Acme",
                position="Dev",
                status="interview" if i == 0 else "applied",
                updated_at=NOW - timedelta(hours=i),
            )
        )
    db_session.add(Job(id="other", user_id="u2", company="Acme", position="Dev", status="offer"))
    db_session.commit()

    out = ss.job_overview(db_session, "u1")
    assert out["totalJobs"] == 6
    assert out["statusStats"]["applied"] == 5
    assert out["statusStats"]["interview"] == 1
    assert out["statusStats"]["offer"] == 0
    assert [j["id"] for j in out["recentJobs"]] == ["j0", "j1", "j2", "j3", "j4"]
    assert out["recentJobs"][0]["user"]["email"] == "one@example.com"


def test_feedback_stats_empty(db_session):
    out = ss.feedback_stats(db_session)
    assert out == {
        "totalFeedbacks": 0,
        "averageRating": 0.0,
        "ratingDistribution": {5: 0, 4: 0, 3: 0, 2: 0, 1: 0},
    }


def test_feedback_stats_histogram_and_average(db_session):
    for i, rating in enumerate((5, 5, 4, 1)):
        db_session.add(Feedback(id=f"f{i}", feedback="ok", rating=rating))
    db_session.commit()
    out = ss.feedback_stats(db_session)
    assert out["totalFeedbacks"] == 4
    assert out["averageRating"] == 3.75
    assert out["ratingDistribution"] == {5: 2, 4: 1, 3: 0, 2: 0, 1: 1}


def test_admin_stats_growth_window_and_applicant_only_counts(db_session):
    old = NOW - timedelta(days=45)
    recent = NOW - timedelta(days=2)
    db_session.add_all(
        [
            User(id="a1", name="Admin", email="admin@example.com", password_hash="x", role="admin", created_at=recent),
            User(id="u1", name="New", email="new@example.com", password_hash="x", created_at=recent),
            User(id="u2", name="Old", email="old@example.com", password_hash="x", created_at=old),
        ]
    )
    db_session.add_all(
        [
            Job(id="j1", user_id="u1", company="A", position="P", status="offer", created_at=recent),
            Job(id="j2", user_id="u2", company="B", position="P", created_at=old),
            Feedback(id="f1", feedback="nice", rating=4, created_at=recent),
            Feedback(id="f2", feedback="meh", rating=3, created_at=old),
            Feedback(id="f3", feedback="great", rating=4, created_at=old),
        ]
    )
    db_session.commit()

    out = ar.get_stats(db_session, now=NOW)
    assert out["overview"] == {"totalUsers": 2, "totalJobs": 2, "totalFeedbacks": 3, "averageRating": 3.7}
    assert out["jobStatusStats"] == {"applied": 1, "interview": 0, "offer": 1, "rejected": 0, "accepted": 0}
    assert out["feedbackRatingStats"] == {5: 0, 4: 2, 3: 1, 2: 0, 1: 0}
    assert out["growth"] == {"newUsers": 1, "newJobs": 1, "newFeedbacks": 1}
    assert [u["id"] for u in out["recentActivity"]["users"]] == ["u1", "u2"]
    assert "passwordHash" not in out["recentActivity"]["users"][0]
    assert len(out["recentActivity"]["jobs"]) == 2
    assert len(out["recentActivity"]["feedbacks"]) == 3


def test_admin_stats_empty_database(db_session):
    out = ar.get_stats(db_session, now=NOW)
    assert out["overview"]["averageRating"] == 0
    assert set(out["jobStatusStats"].values()) == {0}
    assert set(out["feedbackRatingStats"].values()) == {0}
    assert out["growth"] == {"newUsers": 0, "newJobs": 0, "newFeedbacks": 0}
