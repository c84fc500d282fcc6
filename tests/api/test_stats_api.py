from datetime import datetime, timedelta

from conftest import ALICE, BOB, add_profile, add_review, add_session, auth


def test_dashboard(client, db):
    add_profile(db, ALICE, "Alice")
    add_profile(db, BOB, "Bob")
    recent = datetime.utcnow() - timedelta(days=3)
    done = add_session(db, ALICE, BOB, skill="Python", status="completed",
                       scheduled_at=recent, duration_minutes=90)
    add_session(db, BOB, ALICE, skill="Chess", status="completed", scheduled_at=recent)
    add_review(db, done, BOB, ALICE, 5)

    stats = client.get("/dashboard", headers=auth(ALICE)).json()

    assert stats["hours_taught"] == 1.5
    assert stats["hours_learned"] == 1.0
    assert stats["total_sessions"] == 2
    assert stats["average_rating"] == 5.0
    assert stats["skills_taught"] == [{"name": "Python", "hours": 1.5}]
    assert len(stats["sessions_over_time"]) == 6
    assert sum(m["taught"] for m in stats["sessions_over_time"]) == 1
    assert sum(m["learned"] for m in stats["sessions_over_time"]) == 1


def test_empty_dashboard(client):
    stats = client.get("/dashboard", headers=auth(ALICE)).json()
    assert stats["total_sessions"] == 0
    assert stats["average_rating"] == 0
    assert all(m["taught"] == m["learned"] == 0 for m in stats["sessions_over_time"])


def test_leaderboard(client, db):
    add_profile(db, ALICE, "Alice Smith")
    add_profile(db, BOB, "Bob")
    done = add_session(db, ALICE, BOB, status="completed")
    add_review(db, done, BOB, ALICE, 5)

    board = client.get("/leaderboard", headers=auth(BOB)).json()
    assert [(e["id"], e["satisfaction_score"]) for e in board] == [(ALICE, 50 + 2 + 5)]

    assert client.get("/leaderboard", params={"sort_by": "rating"}, headers=auth(BOB)).status_code == 200
    assert client.get("/leaderboard", params={"sort_by": "fame"}, headers=auth(BOB)).status_code == 400
