from notes_backend.api.config import SESSION_COOKIE_NAME


def test_health_check(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Healthy"


# -------- AUTH TESTS --------
def test_register_and_login(client, user_data):
    # Register new account; email is normalized
    r = client.post("/auth/register", json={"email": "Alice@Example.com", "password": user_data["password"]})
    assert r.status_code == 201
    resp = r.json()
    assert resp["email"] == user_data["email"]
    assert resp["role"] == "user"
    assert "password_hash" not in resp
    assert SESSION_COOKIE_NAME in r.cookies

    # Duplicate email, generic failure
    r2 = client.post("/auth/register", json=user_data)
    assert r2.status_code == 400
    assert r2.json()["detail"] == "Registration failed"

    # Login with correct credentials
    r3 = client.post("/auth/login", json=user_data)
    assert r3.status_code == 200
    assert r3.json()["id"] == resp["id"]

    # Wrong password and unknown email fail the same way
    r4 = client.post("/auth/login", json={"email": user_data["email"], "password": "wrongpw"})
    r5 = client.post("/auth/login", json={"email": "somebody@example.com", "password": "pw"})
    assert r4.status_code == r5.status_code == 401
    assert r4.json() == r5.json()


def test_register_requires_password(client):
    r = client.post("/auth/register", json={"email": "x@example.com", "password": "   "})
    assert r.status_code == 400


def test_profile_requires_session(client, user_data):
    r = client.get("/auth/me")
    assert r.status_code == 401

    client.post("/auth/register", json=user_data)
    r2 = client.get("/auth/me")
    assert r2.status_code == 200
    assert r2.json()["email"] == user_data["email"]


def test_logout_ends_session(alice):
    assert alice.get("/auth/me").status_code == 200
    r = alice.post("/auth/logout")
    assert r.status_code == 204
    assert alice.get("/auth/me").status_code == 401


def test_forged_cookie_is_anonymous(client):
    client.cookies.set(SESSION_COOKIE_NAME, "not-a-token")
    assert client.get("/notes").status_code == 401


def test_session_of_deleted_account_is_anonymous(alice, admin):
    me = alice.get("/auth/me").json()
    assert admin.delete(f"/admin/users/{me['id']}").status_code == 204
    assert alice.get("/notes").status_code == 401


# ------- NOTES CRUD --------
def test_notes_crud(alice):
    # Empty notes list
    r = alice.get("/notes")
    assert r.status_code == 200
    assert r.json() == []

    # Create a note
    r2 = alice.post("/notes", json={"title": " First ", "content": "Hello note"})
    assert r2.status_code == 201
    note = r2.json()
    assert note["title"] == "First"
    assert note["content"] == "Hello note"
    assert note["updated_at"] is None
    assert note["updated_human"] is None
    assert len(note["created_human"]) == len("2024-01-01 12:00")
    note_id = note["id"]

    # List notes (should include the new one)
    notes = alice.get("/notes").json()
    assert [n["title"] for n in notes] == ["First"]

    # Get note by ID
    r3 = alice.get(f"/notes/{note_id}")
    assert r3.status_code == 200
    assert r3.json()["id"] == note_id

    # Update note
    r4 = alice.put(f"/notes/{note_id}", json={"title": "Renamed", "content": ""})
    assert r4.status_code == 200
    assert r4.json()["title"] == "Renamed"
    assert r4.json()["content"] is None
    assert r4.json()["updated_human"] is not None

    # Delete note
    r5 = alice.delete(f"/notes/{note_id}")
    assert r5.status_code == 204

    # Ensure note gone
    r6 = alice.get(f"/notes/{note_id}")
    assert r6.status_code == 404


def test_notes_listed_newest_first(alice):
    for title in ("one", "two", "three"):
        alice.post("/notes", json={"title": title})
    assert [n["title"] for n in alice.get("/notes").json()] == ["three", "two", "one"]


def test_notes_auth_required(client):
    # All notes endpoints must require a session
    assert client.get("/notes").status_code == 401
    assert client.post("/notes", json={"title": "x"}).status_code == 401
    assert client.get("/notes/123").status_code == 401
    assert client.put("/notes/123", json={"title": "x"}).status_code == 401
    assert client.delete("/notes/123").status_code == 401


def test_notes_multi_user(alice, bob):
    # Alice adds a note
    r = alice.post("/notes", json={"title": "A note", "content": "Owned"})
    note_id = r.json()["id"]

    # Bob cannot see it in his list
    assert all(n["id"] != note_id for n in bob.get("/notes").json())

    # Bob's attempts look exactly like attempts on a note that does not exist
    missing = 9999
    for method, kwargs in (("get", {}), ("put", {"json": {"title": "hax"}}), ("delete", {})):
        theirs = getattr(bob, method)(f"/notes/{note_id}", **kwargs)
        nowhere = getattr(bob, method)(f"/notes/{missing}", **kwargs)
        assert theirs.status_code == nowhere.status_code == 404
        assert theirs.json() == nowhere.json()

    # Alice's note is untouched
    r2 = alice.get(f"/notes/{note_id}")
    assert r2.status_code == 200
    assert r2.json()["title"] == "A note"


def test_create_note_invalid(alice):
    # Blank title
    r = alice.post("/notes", json={"title": "   ", "content": "x"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Title is required"
    # Missing title
    r2 = alice.post("/notes", json={"content": "x"})
    assert r2.status_code == 400
    # Title too long
    r3 = alice.post("/notes", json={"title": "x" * 300})
    assert r3.status_code == 422


def test_update_note_blank_title(alice):
    note_id = alice.post("/notes", json={"title": "Keep"}).json()["id"]
    r = alice.put(f"/notes/{note_id}", json={"title": ""})
    assert r.status_code == 400
    assert alice.get(f"/notes/{note_id}").json()["title"] == "Keep"


def test_update_note_not_found(alice):
    r = alice.put("/notes/999", json={"title": "nope"})
    assert r.status_code == 404


def test_delete_note_not_found(alice):
    r = alice.delete("/notes/999")
    assert r.status_code == 404


def test_password_with_nul_byte(alice, client, user_data):
    bad = "ab\x00cd"
    r = client.post("/auth/register", json={"email": "nul@example.com", "password": bad})
    assert r.status_code == 400
    assert client.post("/auth/login", json={"email": "nul@example.com", "password": "abcd"}).status_code == 401

    # Against an existing account it is just another wrong password
    r2 = client.post("/auth/login", json={"email": user_data["email"], "password": bad})
    r3 = client.post("/auth/login", json={"email": user_data["email"], "password": "wrongpw"})
    assert r2.status_code == r3.status_code == 401
    assert r2.json() == r3.json()
