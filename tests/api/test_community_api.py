from fitflow.core.enums import UserRole


def _post(client, headers, title="Hydration"):
    return client.post(
        "/community/posts", json={"title": title, "content": "Drink water."}, headers=headers
    )


def test_members_cannot_post(client, make_user, auth_headers):
    make_user("mia@example.com")
    response = _post(client, auth_headers("mia@example.com"))

    assert response.status_code == 403
    assert response.json()["code"] == "INSUFFICIENT_ROLE"


def test_post_vote_comment_flow(client, make_trainer, make_user, auth_headers):
    trainer = make_trainer()
    coach = auth_headers(trainer.email, UserRole.TRAINER)
    make_user("mia@example.com", display_name="Mia")
    mia = auth_headers("mia@example.com")

    created = _post(client, coach)
    assert created.status_code == 201
    post = created.json()
    assert post["author_role"] == "trainer"
    assert (post["likes"], post["dislikes"]) == (0, 0)

    liked = client.post("/community/vote", json={"post_id": post["id"], "vote_type": "like"}, headers=mia)
    assert liked.json() == {"likes": 1, "dislikes": 0, "user_vote": "like"}

    switched = client.post(
        "/community/vote", json={"post_id": post["id"], "vote_type": "dislike"}, headers=mia
    )
    assert switched.json() == {"likes": 0, "dislikes": 1, "user_vote": "dislike"}

    cleared = client.post("/community/vote", json={"post_id": post["id"], "vote_type": None}, headers=mia)
    assert cleared.json() == {"likes": 0, "dislikes": 0, "user_vote": None}

    nothing = client.post("/community/vote", json={"post_id": post["id"], "vote_type": None}, headers=mia)
    assert nothing.status_code == 400
    assert nothing.json()["code"] == "NOTHING_TO_TOGGLE"

    comment = client.post(
        f"/community/posts/{post['id']}/comments", json={"text": "Thanks!"}, headers=mia
    )
    assert comment.status_code == 201
    assert comment.json()["author_name"] == "Mia"

    detail = client.get(f"/community/posts/{post['id']}").json()
    assert [c["text"] for c in detail["comments"]] == ["Thanks!"]

    assert (
        client.delete(
            f"/community/posts/{post['id']}/comments/{comment.json()['id']}", headers=coach
        ).status_code
        == 403
    )
    assert client.delete(f"/community/posts/{post['id']}", headers=mia).status_code == 403
    assert client.delete(f"/community/posts/{post['id']}", headers=coach).status_code == 200
    assert client.get(f"/community/posts/{post['id']}").status_code == 404


def test_posts_are_paginated_newest_first(client, admin_headers):
    for index in range(3):
        _post(client, admin_headers, title=f"Post {index}")

    page = client.get("/community/posts", params={"page": 1, "limit": 2}).json()
    assert page["total"] == 3
    assert page["total_pages"] == 2
    assert [p["title"] for p in page["posts"]] == ["Post 2", "Post 1"]

    second = client.get("/community/posts", params={"page": 2, "limit": 2}).json()
    assert [p["title"] for p in second["posts"]] == ["Post 0"]
