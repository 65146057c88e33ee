from mazerun.client import ClientView, parse_roster
from tests.maze_utils import ROUTE_TO_END


def _extract(event_name, received):
    return [p["args"][0] for p in received if p["name"] == event_name]


def _session(app):
    return app.extensions["game_session"]


def test_connect_receives_dungeon(make_client):
    client = make_client()
    received = client.get_received()
    dungeon = _extract("dungeon_data", received)
    assert len(dungeon) == 1
    assert dungeon[0]["startingPoint"] == {"x": 2, "y": 2}
    assert dungeon[0]["endingPoint"] == {"x": 5, "y": 2}
    assert dungeon[0]["dungeon"]["width"] == 7


def test_id_request_registers_one_player_at_start(make_client, test_app):
    client = make_client()
    client.get_received()
    assert len(_session(test_app).players) == 0
    client.emit("id_request")
    received = client.get_received()
    me = _extract("player_id", received)[0]
    roster = _extract("roster", received)[-1]
    assert (me["x"], me["y"]) == (2, 2)
    assert roster == [me]
    assert len(_session(test_app).players) == 1


def test_id_request_is_idempotent(make_client, test_app):
    client = make_client()
    client.emit("id_request")
    first = _extract("player_id", client.get_received())[0]
    client.emit("id_request")
    second = _extract("player_id", client.get_received())[0]
    assert first["id"] == second["id"]
    assert len(_session(test_app).players) == 1


def test_third_connection_sees_both_players(make_client):
    watcher = make_client()
    a = make_client()
    b = make_client()
    a.emit("id_request")
    b.emit("id_request")
    id_a = _extract("player_id", a.get_received())[0]["id"]
    id_b = _extract("player_id", b.get_received())[0]["id"]
    assert id_a != id_b
    rosters = _extract("roster", watcher.get_received())
    assert {p["id"] for p in rosters[-1]} == {id_a, id_b}


def test_move_into_wall_still_broadcasts(make_client):
    client = make_client()
    client.emit("id_request")
    client.get_received()
    client.emit("location_update", {"direction": "down"})
    roster = _extract("roster", client.get_received())
    assert len(roster) == 1
    assert (roster[0][0]["x"], roster[0][0]["y"]) == (2, 2)


def test_move_reaches_other_clients(make_client):
    mover = make_client()
    other = make_client()
    mover.emit("id_request")
    me = _extract("player_id", mover.get_received())[0]
    other.get_received()
    mover.emit("location_update", {"playerId": me["id"], "direction": "up"})
    roster = _extract("roster", other.get_received())[-1]
    assert parse_roster(roster) == {(me["id"], 2, 1)}


def test_legacy_payload_shape(make_client):
    client = make_client()
    client.emit("id_request")
    me = _extract("player_id", client.get_received())[0]
    client.emit("location_update", {"player": me, "direction": "left"})
    roster = _extract("roster", client.get_received())[-1]
    assert (roster[0]["x"], roster[0]["y"]) == (1, 2)


def test_malformed_payload_is_dropped(make_client):
    client = make_client()
    client.emit("id_request")
    client.get_received()
    client.emit("location_update", {"direction": 5})
    client.emit("location_update", "up")
    received = client.get_received()
    assert _extract("roster", received) == []
    assert [p for p in received if p["name"] == "error"] == []


def test_move_before_identify_is_dropped(make_client):
    client = make_client()
    client.get_received()
    client.emit("location_update", {"direction": "up"})
    assert client.get_received() == []


def test_reaching_end_pushes_new_dungeon_to_everyone(make_client, test_app):
    runner = make_client()
    other = make_client()
    runner.emit("id_request")
    runner_id = _extract("player_id", runner.get_received())[0]["id"]
    other.get_received()
    for step in ROUTE_TO_END:
        runner.emit("location_update", {"direction": step})
    received = other.get_received()
    dungeon = _extract("dungeon_data", received)
    assert len(dungeon) == 1
    assert dungeon[0]["startingPoint"] == {"x": 5, "y": 2}
    completions = _session(test_app).completion_history()
    assert completions[0]["playerId"] == runner_id


def test_disconnect_updates_roster(make_client, test_app):
    leaver = make_client()
    stayer = make_client()
    leaver.emit("id_request")
    stayer.emit("id_request")
    stay_id = _extract("player_id", stayer.get_received())[0]["id"]
    leaver.disconnect()
    rosters = _extract("roster", stayer.get_received())
    assert [p["id"] for p in rosters[-1]] == [stay_id]
    assert len(_session(test_app).players) == 1


def test_timer_broadcast(make_client, test_app):
    client = make_client()
    client.get_received()
    session = _session(test_app)
    for _ in range(10):
        session.tick()
    timers = _extract("timer", client.get_received())
    assert len(timers) == 10
    assert timers[-1] == {"minutes": 0, "seconds": 1}


def test_roster_round_trip_matches_registry(make_client, test_app):
    clients = [make_client() for _ in range(3)]
    view = ClientView()
    for c in clients:
        c.emit("id_request")
    clients[0].emit("location_update", {"direction": "up"})
    for packet in clients[2].get_received():
        handler = getattr(view, f"on_{packet['name']}", None)
        if handler is not None and packet["args"]:
            handler(packet["args"][0])
    registry = _session(test_app).players
    expected = {(p["id"], p["x"], p["y"]) for p in registry.snapshot_all()}
    assert view.positions() == expected
    assert view.dungeon is not None
