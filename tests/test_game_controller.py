import json

from wordle_daily.services.game_engine import GameEngine

from conftest import play


def _start(client, player_id="p1", day_index=0):
    r = client.post("/api/game", data=json.dumps({"player_id": player_id, "day_index": day_index}),
                    content_type="application/json")
    assert r.status_code == 200
    return r.get_json()


def _press(client, key, player_id="p1"):
    return client.post(f"/api/game/{player_id}/key", data=json.dumps({"key": key}),
                       content_type="application/json")


def _type(client, word, player_id="p1"):
    for letter in word:
        assert _press(client, letter, player_id).status_code == 200
    return _press(client, "ENTER", player_id)


def test_start_game_returns_fresh_state(client):
    data = _start(client)
    assert data["success"]
    assert data["player_id"] == "p1"
    state = data["state"]
    assert state["status"] == "playing"
    assert state["tries"] == 6
    assert state["word_length"] == 5
    assert state["active_cell"] == [0, 0]
    assert state["answer"] is None


def test_start_game_without_body_generates_player(client):
    r = client.post("/api/game")
    assert r.status_code == 200
    assert r.get_json()["player_id"]


def test_start_game_rejects_bad_day(client):
    r = client.post("/api/game", data=json.dumps({"day_index": "monday"}), content_type="application/json")
    assert r.status_code == 400
    assert not r.get_json()["success"]


def test_key_presses_update_state(client):
    _start(client)
    r = _press(client, "f")
    data = r.get_json()
    assert data["changed"]
    assert data["state"]["board"][0][0] == "F"
    assert data["state"]["current_col"] == 1

    data = _press(client, "ENTER").get_json()
    assert not data["changed"]


def test_missing_key_is_bad_request(client):
    _start(client)
    r = client.post("/api/game/p1/key", data=json.dumps({}), content_type="application/json")
    assert r.status_code == 400


def test_unknown_player_is_not_found(client):
    assert _press(client, "a", "ghost").status_code == 404
    assert client.get("/api/game/ghost/state").status_code == 404
    assert client.get("/api/game/ghost/share").status_code == 404
    assert client.delete("/api/game/ghost").status_code == 404


def test_winning_game_reveals_answer_and_shares_on_enter(client):
    _start(client)
    _type(client, "crane")
    data = _type(client, "fiona").get_json()
    assert data["state"]["status"] == "won"
    assert data["state"]["answer"] == "FIONA"

    data = _press(client, "ENTER").get_json()
    assert data["share"].startswith("Wordle 0 2/6\n")
    assert not data["changed"]


def test_losing_game(client):
    _start(client)
    for _ in range(6):
        data = _type(client, "crane").get_json()
    assert data["state"]["status"] == "lost"
    assert data["state"]["colors"][5] == ["ABSENT", "ABSENT", "PRESENT", "CORRECT", "ABSENT"]


def test_share_endpoint_lists_committed_rows(client):
    _start(client)
    _type(client, "nafio")
    _press(client, "c")
    data = client.get("/api/game/p1/share").get_json()
    assert data["share"] == "Wordle 0\n" + "\U0001f7e8" * 5


def test_state_endpoint(client):
    _start(client)
    _press(client, "x")
    data = client.get("/api/game/p1/state").get_json()
    assert data["state"]["board"][0][0] == "X"


def test_saved_game_resumes_through_api(client, store):
    saved = GameEngine("fiona", day_index=0)
    play(saved, "crane")
    store.set("@game:p9", saved.serialize())

    data = _start(client, "p9")
    assert data["state"]["current_row"] == 1
    assert data["state"]["board"][0] == list("CRANE")


def test_corrupt_save_is_not_surfaced(client, store):
    store.set("@game:p9", "garbage")
    data = _start(client, "p9")
    assert data["success"]
    assert data["state"]["current_row"] == 0


def test_delete_game(client):
    _start(client)
    r = client.delete("/api/game/p1")
    assert r.status_code == 200
    assert r.get_json()["success"]


def test_health_check(client):
    _start(client)
    data = client.get("/api/health").get_json()
    assert data["status"] == "healthy"
    assert data["active_games"] == 1
    assert data["storage"] == "MemoryStore"
