"""HTTP and WebSocket endpoint tests."""


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "rooms": 0, "connections": 0}


def test_create_room_over_http(client):
    response = client.post("/api/rooms", json={"name": "Alice"})

    assert response.status_code == 201
    code = response.json()["code"]
    assert client.registry.get_room(code).creator_name == "Alice"


def test_create_room_without_body(client):
    response = client.post("/api/rooms")
    assert response.status_code == 201
    assert len(response.json()["code"]) == 4


def test_get_room_state(client):
    code = client.post("/api/rooms", json={}).json()["code"]

    response = client.get(f"/api/rooms/{code.lower()}")

    assert response.status_code == 200
    assert response.json() == {
        "scrumMaster": None,
        "revealed": False,
        "participants": [],
        "average": None,
    }


def test_get_missing_room(client):
    response = client.get("/api/rooms/ZZZZ")
    assert response.status_code == 404
    assert response.json()["detail"] == "Room not found"


def test_join_unknown_room_over_websocket(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "join-room", "code": "ZZZZ", "name": "Alice", "requestId": 7})
        assert ws.receive_json() == {
            "type": "join-room",
            "error": "Room not found",
            "requestId": 7,
        }


def test_invalid_message_keeps_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json() == {"type": "error", "error": "Invalid message"}

        ws.send_json({"type": "shout"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "create-room", "name": "Alice"})
        assert ws.receive_json()["type"] == "create-room"


def test_full_round_over_websocket(client):
    with client.websocket_connect("/ws") as alice:
        alice.send_json({"type": "create-room", "name": "Alice", "requestId": "1"})
        created = alice.receive_json()
        assert created["type"] == "create-room"
        assert created["requestId"] == "1"
        code = created["code"]

        alice.send_json({"type": "join-room", "code": f" {code.lower()} ", "name": "Alice"})
        joined = alice.receive_json()
        assert joined["code"] == code
        alice_id = joined["state"]["scrumMaster"]
        assert [p["id"] for p in joined["state"]["participants"]] == [alice_id]

        with client.websocket_connect("/ws") as bob:
            bob.send_json({"type": "join-room", "code": code, "name": "Bob"})
            bob_joined = bob.receive_json()
            bob_id = bob_joined["state"]["participants"][1]["id"]
            assert bob_joined["state"]["scrumMaster"] == alice_id

            update = alice.receive_json()
            assert update["type"] == "room-update"
            assert len(update["state"]["participants"]) == 2

            bob.send_json({"type": "vote", "value": 5})
            for ws in (alice, bob):
                state = ws.receive_json()["state"]
                bob_entry = next(p for p in state["participants"] if p["id"] == bob_id)
                assert bob_entry == {"id": bob_id, "name": "Bob", "vote": None, "hasVoted": True}

            # non-facilitator reveal is dropped, so the next update comes from the vote
            bob.send_json({"type": "reveal"})
            bob.send_json({"type": "vote", "value": "8"})
            assert bob.receive_json()["state"]["revealed"] is False
            alice.receive_json()

            alice.send_json({"type": "vote", "value": "3"})
            alice.receive_json()
            bob.receive_json()

            alice.send_json({"type": "reveal"})
            revealed = bob.receive_json()["state"]
            assert revealed["revealed"] is True
            assert revealed["average"] == 5.5
            assert alice.receive_json()["state"] == revealed

            alice.send_json({"type": "clear"})
            cleared = bob.receive_json()["state"]
            assert cleared["revealed"] is False
            assert not any(p["hasVoted"] for p in cleared["participants"])
            alice.receive_json()

            alice.close()

            handed_over = bob.receive_json()["state"]
            assert handed_over["scrumMaster"] == bob_id
            assert [p["id"] for p in handed_over["participants"]] == [bob_id]


def test_joining_another_room_leaves_the_current_one(client):
    with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
        alice.send_json({"type": "create-room", "name": "Alice"})
        first_code = alice.receive_json()["code"]
        alice.send_json({"type": "join-room", "code": first_code, "name": "Alice"})
        alice_id = alice.receive_json()["state"]["scrumMaster"]

        bob.send_json({"type": "join-room", "code": first_code, "name": "Bob"})
        bob_id = bob.receive_json()["state"]["participants"][1]["id"]
        alice.receive_json()

        alice.send_json({"type": "create-room", "name": "Alice"})
        second_code = alice.receive_json()["code"]
        alice.send_json({"type": "join-room", "code": second_code, "name": "Alice"})

        moved = alice.receive_json()
        assert moved["code"] == second_code
        assert moved["state"]["scrumMaster"] == alice_id
        assert [p["id"] for p in moved["state"]["participants"]] == [alice_id]

        left_behind = bob.receive_json()
        assert left_behind["type"] == "room-update"
        assert left_behind["state"]["scrumMaster"] == bob_id
        assert [p["id"] for p in left_behind["state"]["participants"]] == [bob_id]

        first_room = client.registry.get_room(first_code)
        assert list(first_room.participants) == [bob_id]
