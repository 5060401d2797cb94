import json
import threading

from wordle_daily.models.game import GameStatus
from wordle_daily.services.game_engine import GameEngine
from wordle_daily.services.game_service import GameService, get_game_service
from wordle_daily.services.storage import MemoryStore, StateWriter
from wordle_daily.services.word_provider import WordProvider

from conftest import WORDS, play


def test_initialize_sets_global_service(game_service):
    assert get_game_service() is game_service


def test_start_game_picks_secret_for_day(game_service):
    _, engine = game_service.start_game("p1", day_index=1)
    assert engine.secret_word == "crane"
    assert engine.day_index == 1
    assert engine.status is GameStatus.PLAYING


def test_start_game_generates_player_id(game_service):
    player_id, _ = game_service.start_game(day_index=0)
    assert player_id
    assert game_service.get_engine(player_id) is not None


def test_start_game_is_idempotent_for_same_day(game_service):
    _, first = game_service.start_game("p1", day_index=0)
    _, second = game_service.start_game("p1", day_index=0)
    assert first is second


def test_every_change_is_saved(game_service, store):
    _, engine = game_service.start_game("p1", day_index=0)
    engine.press_key("f")
    saved = json.loads(store.get("@game:p1"))
    assert saved["board"][0][0] == "f"
    assert saved["currentCol"] == 1
    assert saved["dayIndex"] == 0

    engine.press_key("CLEAR")
    assert json.loads(store.get("@game:p1"))["currentCol"] == 0


def test_ignored_keys_are_not_saved(game_service, store):
    game_service.start_game("p1", day_index=0)
    assert game_service.press_key("p1", "ENTER") is False
    assert store.get("@game:p1") is None


def test_saved_game_is_restored_on_start(game_service, store):
    saved = GameEngine("fiona", day_index=0)
    play(saved, "crane")
    saved.submit_letter("f")
    store.set("@game:p1", saved.serialize())

    _, engine = game_service.start_game("p1", day_index=0)
    assert engine.current_row == 1
    assert engine.current_col == 1
    assert engine.board == saved.board


def test_corrupt_save_starts_fresh(game_service, store):
    store.set("@game:p1", "{not json")
    _, engine = game_service.start_game("p1", day_index=0)
    assert (engine.current_row, engine.current_col) == (0, 0)
    assert engine.status is GameStatus.PLAYING

    # The next change replaces the bad blob
    engine.press_key("f")
    assert json.loads(store.get("@game:p1"))["currentCol"] == 1


def test_save_from_previous_day_starts_fresh(game_service, store):
    yesterday = GameEngine("fiona", day_index=0)
    play(yesterday, "crane")
    store.set("@game:p1", yesterday.serialize())

    _, engine = game_service.start_game("p1", day_index=1)
    assert engine.secret_word == "crane"
    assert engine.current_row == 0


def test_unreadable_store_starts_fresh():
    class BrokenStore:
        def get(self, key):
            raise ConnectionError("store offline")

        def set(self, key, value):
            raise ConnectionError("store offline")

    service = GameService(StateWriter(BrokenStore(), asynchronous=False), WordProvider(WORDS))
    _, engine = service.start_game("p1", day_index=0)
    assert engine.press_key("f")
    assert engine.current_col == 1


def test_press_key_for_unknown_player(game_service):
    assert game_service.press_key("nobody", "a") is None


def test_game_ended_listener_gets_player_and_status(game_service):
    ended = []
    game_service.add_status_listener(lambda pid, engine, status: ended.append((pid, status)))
    _, engine = game_service.start_game("p1", day_index=0)
    play(engine, "fiona")
    assert ended == [("p1", GameStatus.WON)]


def test_share_message_includes_title_and_score(game_service):
    _, engine = game_service.start_game("p1", day_index=0)
    play(engine, "crane", "fiona")
    message = game_service.share_message("p1")
    lines = message.split("\n")
    assert lines[0] == "Wordle 0 2/6"
    assert lines[2] == "\U0001f7e9" * 5
    assert len(lines) == 3


def test_share_message_marks_loss(game_service):
    _, engine = game_service.start_game("p1", day_index=0)
    play(engine, *["crane"] * 6)
    assert game_service.share_message("p1").startswith("Wordle 0 X/6\n")


def test_share_message_before_any_commit(game_service):
    game_service.start_game("p1", day_index=0)
    assert game_service.share_message("p1") == "Wordle 0"


def test_game_view_hides_answer_until_over(game_service):
    _, engine = game_service.start_game("p1", day_index=0)
    play(engine, "crane")
    view = game_service.game_view("p1")
    assert view["answer"] is None
    assert view["board"][0] == list("CRANE")
    assert view["colors"][0] == ["ABSENT", "ABSENT", "PRESENT", "CORRECT", "ABSENT"]
    assert view["colors"][1] == ["UNKNOWN"] * 5
    assert view["active_cell"] == [1, 0]
    assert view["keyboard"] == {"correct": ["n"], "present": ["a"], "absent": ["c", "e", "r"]}

    play(engine, "fiona")
    view = game_service.game_view("p1")
    assert view["status"] == "won"
    assert view["answer"] == "FIONA"
    assert view["active_cell"] is None


def test_end_game_drops_engine_but_keeps_save(game_service, store):
    _, engine = game_service.start_game("p1", day_index=0)
    engine.press_key("f")
    assert game_service.end_game("p1")
    assert not game_service.end_game("p1")
    assert game_service.get_engine("p1") is None

    _, resumed = game_service.start_game("p1", day_index=0)
    assert resumed.current_col == 1


def test_custom_state_key_and_tries():
    store = MemoryStore()
    service = GameService(StateWriter(store, asynchronous=False), WordProvider(WORDS),
                          tries=3, state_key="@daily")
    _, engine = service.start_game("p2", day_index=2)
    play(engine, "crane", "fiona", "crane")
    assert engine.status is GameStatus.LOST
    assert json.loads(store.get("@daily:p2"))["gameStatus"] == "lost"


def test_concurrent_key_presses_keep_cursor_consistent(game_service, store):
    _, engine = game_service.start_game("p1", day_index=0)
    start = threading.Barrier(8)

    def hammer(keys):
        start.wait()
        for _ in range(200):
            for key in keys:
                game_service.press_key("p1", key)

    threads = [threading.Thread(target=hammer, args=(keys,))
               for keys in [["f", "i"], ["CLEAR"], ["o", "n", "a"], ["BACKSPACE", "x"]] * 2]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    col = engine.current_col
    assert 0 <= col <= engine.word_length
    row = engine.board[engine.current_row]
    assert all(row[:col])
    assert not any(row[col:])

    resumed = GameEngine("fiona", day_index=0)
    resumed.restore(store.get("@game:p1"))
    assert resumed.board == engine.board
    assert resumed.current_col == col


def test_dotted_capital_i_is_ignored_and_game_resumes(game_service, store):
    game_service.start_game("p1", day_index=0)
    for key in ["f", "\u0130", "i"]:
        game_service.press_key("p1", key)
    game_service.end_game("p1")

    _, resumed = game_service.start_game("p1", day_index=0)
    assert resumed.board[0][:3] == ["f", "i", ""]
    assert resumed.current_col == 2


def test_named_listener_is_replaced_not_duplicated(game_service):
    ended = []
    game_service.add_status_listener(lambda pid, engine, status: ended.append("old"), name="push")
    game_service.add_status_listener(lambda pid, engine, status: ended.append("new"), name="push")
    _, engine = game_service.start_game("p1", day_index=0)
    play(engine, "fiona")
    assert ended == ["new"]
