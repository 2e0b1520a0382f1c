import pytest


def _create(client, **body):
    payload = {"title": "제목", "content": "본문", "category": "work", "tags": []}
    payload.update(body)
    r = client.post("/memos", json=payload)
    assert r.status_code == 201
    return r.json()


def test_create_returns_camel_case_and_enriches(client, board, fake_client):
    fake_client.tags = ["work", "urgent"]
    memo = _create(client, tags=["work"])
    assert memo["tags"] == ["work"]
    assert memo["createdAt"] == memo["updatedAt"]
    assert memo["summary"] is None

    board.wait_for_enrichment(memo["id"], timeout=5)
    r = client.get(f"/memos/{memo['id']}")
    assert r.status_code == 200
    assert r.json()["tags"] == ["work", "urgent"]
    assert r.json()["summary"] == "S"

    status = client.get(f"/memos/{memo['id']}/enrichment").json()
    assert status == {"memoId": memo["id"], "state": "done", "tags": ["work", "urgent"],
                      "summary": "S", "error": None}


def test_list_search_and_stats(client, board, fake_client):
    fake_client.tags = []
    a = _create(client, title="장보기", category="personal")
    b = _create(client, title="배포 계획", category="work")
    for m in (a, b):
        board.wait_for_enrichment(m["id"], timeout=5)

    body = client.get("/memos").json()
    assert [m["id"] for m in body["items"]] == [b["id"], a["id"]]
    assert body["stats"] == {"total": 2, "byCategory": {"personal": 1, "work": 1}, "filtered": 2}

    body = client.get("/memos", params={"q": "배포"}).json()
    assert [m["title"] for m in body["items"]] == ["배포 계획"]
    assert body["stats"]["filtered"] == 1

    body = client.get("/memos", params={"q": "", "category": "personal"}).json()
    assert [m["title"] for m in body["items"]] == ["장보기"]

    assert client.get("/memos/stats").json()["total"] == 2


def test_update_and_delete(client, board):
    memo = _create(client)
    board.wait_for_enrichment(memo["id"], timeout=5)

    r = client.put(f"/memos/{memo['id']}", json={"title": "수정", "content": "새 본문", "category": "idea"})
    assert r.status_code == 200
    assert r.json()["title"] == "수정"
    assert r.json()["category"] == "idea"
    board.wait_for_enrichment(memo["id"], timeout=5)

    r = client.delete(f"/memos/{memo['id']}")
    assert r.status_code == 200 and r.json() == {"deleted": True}
    r = client.get(f"/memos/{memo['id']}")
    assert r.status_code == 404
    assert "error" in r.json()


def test_missing_memo_is_404(client):
    assert client.put("/memos/nope", json={"title": "x", "content": "y"}).status_code == 404
    assert client.delete("/memos/nope").status_code == 404
    assert client.get("/memos/nope/enrichment").status_code == 404


def test_clear_all(client, board):
    memo = _create(client)
    board.wait_for_enrichment(memo["id"], timeout=5)
    r = client.delete("/memos")
    assert r.status_code == 200 and r.json() == {"cleared": True}
    assert client.get("/memos").json()["items"] == []


def test_bad_memo_payload_is_400(client):
    r = client.post("/memos", json={"title": "x" * 500, "content": "y"})
    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.parametrize("tags", ["work", 5, [1, 2]])
def test_non_list_tags_are_400(client, tags):
    r = client.post("/memos", json={"title": "x", "content": "y", "tags": tags})
    assert r.status_code == 400
    assert "error" in r.json()
    assert client.get("/memos").json()["items"] == []


def test_tags_are_trimmed_and_deduplicated(client):
    memo = _create(client, tags=[" work ", "", "work", "urgent"])
    assert memo["tags"] == ["work", "urgent"]


def test_enrichment_status_is_gone_after_delete(client, board):
    memo = _create(client)
    board.wait_for_enrichment(memo["id"], timeout=5)
    assert client.get(f"/memos/{memo['id']}/enrichment").status_code == 200

    client.delete(f"/memos/{memo['id']}")
    assert board.enrichment_status(memo["id"]) is None
    r = client.get(f"/memos/{memo['id']}/enrichment")
    assert r.status_code == 404
    assert "error" in r.json()
