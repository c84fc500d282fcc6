from conftest import ALICE, BOB, CAROL, add_profile, add_review, add_session, auth, make_token


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requires_bearer_token(client):
    assert client.get("/profiles/me").status_code == 401


def test_rejects_expired_token(client):
    resp = client.get(
        "/profiles/me",
        headers={"Authorization": f"Bearer {make_token(ALICE, expires_in=-10)}"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_token_with_non_object_header_is_unauthorized(client):
    # Header segment decodes to a JSON array
    resp = client.get("/profiles/me", headers={"Authorization": "Bearer W10.e30.c2ln"})
    assert resp.status_code == 401


def test_first_access_creates_profile_from_token(client):
    resp = client.get(
        "/profiles/me", headers=auth(ALICE, email="alice@example.com", full_name="Alice A")
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == ALICE
    assert body["email"] == "alice@example.com"
    assert body["full_name"] == "Alice A"
    assert body["profile_completed"] is False
    assert body["skills_to_teach"] == []
    assert body["email_digest_enabled"] is True


def test_update_profile_completes_it(client):
    resp = client.put("/profiles/me", headers=auth(ALICE), json={
        "full_name": "  Alice  ",
        "bio": "Pythonista",
        "skills_to_teach": ["Python", " Python ", "", "SQL"],
        "skills_to_learn": ["Chess"],
        "availability": {"monday": ["evening"]},
        "email_digest_enabled": False,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["full_name"] == "Alice"
    assert body["skills_to_teach"] == ["Python", "SQL"]
    assert body["availability"] == {"monday": ["evening"]}
    assert body["profile_completed"] is True
    assert body["email_digest_enabled"] is False
    assert body["session_reminder_enabled"] is True


def test_update_profile_validation(client):
    no_skills = client.put("/profiles/me", headers=auth(ALICE), json={"full_name": "Alice"})
    assert no_skills.status_code == 400
    assert no_skills.json()["detail"] == "Please add at least one skill to teach or learn"

    no_name = client.put(
        "/profiles/me", headers=auth(ALICE), json={"full_name": " ", "skills_to_teach": ["Go"]}
    )
    assert no_name.status_code == 400

    long_bio = client.put("/profiles/me", headers=auth(ALICE), json={
        "full_name": "Alice", "bio": "x" * 501, "skills_to_teach": ["Go"],
    })
    assert long_bio.status_code == 400


def test_public_profile(client, db):
    add_profile(db, ALICE, "Alice", bio="Teacher", skills_to_teach=["Python"])
    add_profile(db, BOB, "Bob")
    add_profile(db, CAROL, "")
    s1 = add_session(db, ALICE, BOB, status="completed")
    s2 = add_session(db, ALICE, CAROL, status="completed")
    add_session(db, ALICE, BOB, status="confirmed")
    add_review(db, s1, BOB, ALICE, 5, "Superb")
    add_review(db, s2, CAROL, ALICE, 4)

    resp = client.get(f"/profiles/{ALICE}", headers=auth(BOB))

    assert resp.status_code == 200
    body = resp.json()
    assert body["full_name"] == "Alice"
    assert "email" not in body
    assert body["sessions_taught"] == 2
    assert body["average_rating"] == 4.5
    names = sorted(r["reviewer_name"] for r in body["reviews"])
    assert names == ["Anonymous", "Bob"]


def test_incomplete_profile_is_not_public(client, db):
    add_profile(db, CAROL, "Carol", completed=False)
    resp = client.get(f"/profiles/{CAROL}", headers=auth(ALICE))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Profile not found"


def test_matches_and_skills(client, db):
    add_profile(db, ALICE, "Alice", skills_to_learn=["Python"])
    add_profile(db, BOB, "Bob", bio="Backend dev", skills_to_teach=["Python", "Go"])
    add_profile(db, CAROL, "Carol", skills_to_teach=["Chess"])

    matches = client.get("/matches", params={"skill": "py"}, headers=auth(ALICE)).json()
    assert [m["id"] for m in matches] == [BOB]

    everyone = client.get("/matches", headers=auth(ALICE)).json()
    assert [m["id"] for m in everyone] == [BOB, CAROL]

    by_bio = client.get("/matches", params={"search": "BACKEND"}, headers=auth(ALICE)).json()
    assert [m["id"] for m in by_bio] == [BOB]

    skills = client.get("/skills", headers=auth(ALICE)).json()
    assert [s["skill"] for s in skills["teach"]] == ["Python", "Go", "Chess"]
    assert skills["learn"][0]["users"] == [{"id": ALICE, "full_name": "Alice", "bio": ""}]
