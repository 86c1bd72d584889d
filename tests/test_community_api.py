from datetime import datetime, timedelta

import pytest


def test_comments_flow(client, register, user_headers, admin_headers, post_experience):
    experience = post_experience()
    url = f"/api/experiences/{experience['id']}/comments"

    assert client.post(url, json={"content": "Anonymous?"}).status_code == 401

    first = client.post(url, headers=user_headers, json={"content": "Very helpful, thanks"})
    assert first.status_code == 201
    assert first.json()["authorName"] == "Alice"
    assert first.json()["authorUsername"] == "alice_01"

    bob_headers, _ = register("bob_99", name="Bob")
    client.post(url, headers=bob_headers, json={"content": "Which language did you use?"})

    comments = client.get(url).json()
    assert [c["content"] for c in comments] == ["Very helpful, thanks", "Which language did you use?"]

    comment_id = first.json()["id"]
    assert client.delete(f"/api/comments/{comment_id}", headers=bob_headers).status_code == 403
    assert client.delete(f"/api/comments/{comment_id}", headers=user_headers).status_code == 200
    assert client.delete(f"/api/comments/{comment_id}", headers=user_headers).status_code == 404

    second_id = comments[1]["id"]
    assert client.delete(f"/api/comments/{second_id}", headers=admin_headers).status_code == 200
    assert client.get(url).json() == []


def test_comment_validation(client, user_headers, post_experience):
    experience = post_experience()
    url = f"/api/experiences/{experience['id']}/comments"

    assert client.post(url, headers=user_headers, json={"content": "   "}).status_code == 400
    assert client.post(url, headers=user_headers, json={"content": "x" * 1001}).status_code == 400


def test_cannot_comment_on_hidden_experience(client, register, post_experience):
    author_headers, _ = register("alice_01")
    experience = post_experience(headers=author_headers, approve=False)
    other_headers, _ = register("bob_99", name="Bob")

    response = client.post(f"/api/experiences/{experience['id']}/comments",
                           headers=other_headers, json={"content": "hi"})
    assert response.status_code == 404


def test_report_and_review(client, user_headers, admin_headers, post_experience):
    experience = post_experience(company="Spammy Corp")
    url = f"/api/experiences/{experience['id']}/report"

    assert client.post(url, json={"reason": "spam"}).status_code == 401
    assert client.post(url, headers=user_headers, json={"reason": "because"}).status_code == 400

    filed = client.post(url, headers=user_headers, json={"reason": "spam", "description": "Ad link"})
    assert filed.status_code == 201
    assert filed.json()["status"] == "pending"
    assert client.post(url, headers=user_headers, json={"reason": "duplicate"}).status_code == 400

    reports = client.get("/api/admin/reports", params={"status": "pending"}, headers=admin_headers).json()
    assert len(reports) == 1
    assert reports[0]["reporterName"] == "Alice"
    assert reports[0]["experience"]["company"] == "Spammy Corp"

    report_id = reports[0]["id"]
    reopened = client.put(f"/api/admin/reports/{report_id}", headers=admin_headers, json={"status": "pending"})
    assert reopened.status_code == 400

    reviewed = client.put(f"/api/admin/reports/{report_id}", headers=admin_headers,
                          json={"status": "resolved", "adminNotes": "Removed link"})
    assert reviewed.status_code == 200
    assert reviewed.json()["status"] == "resolved"
    assert reviewed.json()["adminNotes"] == "Removed link"
    assert reviewed.json()["reviewedBy"] is not None

    assert client.get("/api/admin/reports", params={"status": "pending"}, headers=admin_headers).json() == []
    assert client.put("/api/admin/reports/999", headers=admin_headers,
                      json={"status": "dismissed"}).status_code == 404


def test_public_announcements_are_active_unexpired_and_prioritized(client, admin_headers):
    def create(title, **extra):
        response = client.post("/api/admin/announcements", headers=admin_headers,
                               json={"title": title, "content": f"{title} details", **extra})
        assert response.status_code == 201, response.text
        return response.json()

    create("Low notice", priority="low")
    create("Urgent notice", priority="urgent", type="important")
    create("Medium notice")
    create("Expired", priority="urgent", expiresAt=(datetime.utcnow() - timedelta(days=1)).isoformat())
    create("Future expiry", priority="high", expiresAt=(datetime.utcnow() + timedelta(days=7)).isoformat())
    hidden = create("Inactive", priority="urgent", isActive=False)

    titles = [a["title"] for a in client.get("/api/announcements").json()]

    assert titles == ["Urgent notice", "Future expiry", "Medium notice", "Low notice"]
    assert len(client.get("/api/admin/announcements", headers=admin_headers).json()) == 6

    updated = client.put(f"/api/admin/announcements/{hidden['id']}", headers=admin_headers,
                         json={"isActive": True, "title": "Now visible"})
    assert updated.status_code == 200
    assert updated.json()["isActive"] is True
    assert "Now visible" in [a["title"] for a in client.get("/api/announcements").json()]

    assert client.delete(f"/api/admin/announcements/{hidden['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/announcements/{hidden['id']}", headers=admin_headers).status_code == 404
    assert client.put("/api/admin/announcements/999", headers=admin_headers,
                      json={"title": "x"}).status_code == 404


def test_announcement_validation(client, admin_headers):
    response = client.post("/api/admin/announcements", headers=admin_headers,
                           json={"title": "x", "content": "y", "priority": "critical"})
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["isActive", "title", "content", "type", "priority"])
def test_announcement_update_rejects_null_for_required_fields(client, admin_headers, field):
    created = client.post("/api/admin/announcements", headers=admin_headers,
                          json={"title": "Drive", "content": "Details"}).json()

    response = client.put(f"/api/admin/announcements/{created['id']}", headers=admin_headers,
                          json={field: None})

    assert response.status_code == 400
    assert response.json()["detail"] == f"{field} cannot be null"
    unchanged = client.get("/api/admin/announcements", headers=admin_headers).json()[0]
    assert unchanged["title"] == "Drive"
    assert unchanged["isActive"] is True


def test_announcement_update_null_expiry_clears_it(client, admin_headers):
    expires = (datetime.utcnow() + timedelta(days=1)).isoformat()
    created = client.post("/api/admin/announcements", headers=admin_headers,
                          json={"title": "Drive", "content": "Details", "expiresAt": expires}).json()
    assert created["expiresAt"] is not None

    response = client.put(f"/api/admin/announcements/{created['id']}", headers=admin_headers,
                          json={"expiresAt": None})

    assert response.status_code == 200
    assert response.json()["expiresAt"] is None

    blank = client.put(f"/api/admin/announcements/{created['id']}", headers=admin_headers,
                       json={"title": "   "})
    assert blank.status_code == 400
