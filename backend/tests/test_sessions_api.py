from __future__ import annotations

import datetime as dt
import io

import pytest
from openpyxl import load_workbook

from pokernight.core.exceptions import ValidationError
from pokernight.models.db import Player, Session, SessionPlayer
from pokernight.services.session_service import SessionService


def _roster(client, session_id):
    r = client.get(f"/api/sessions/{session_id}/players")
    assert r.status_code == 200
    return r.json()


def test_create_and_fetch_session(client, make_player, make_session):
    a = make_player("Alice")
    b = make_player("Bob")
    s = make_session("Friday game", [a["id"], b["id"]])

    assert s["name"] == "Friday game"
    assert s["scheduledDateTime"].startswith("2026-10-23T19:30")
    assert sorted(s["playerIds"]) == sorted([a["id"], b["id"]])

    r = client.get(f"/api/sessions/{s['id']}")
    assert r.status_code == 200
    assert r.json()["id"] == s["id"]

    r = client.get("/api/sessions")
    assert [x["id"] for x in r.json()] == [s["id"]]

    roster = _roster(client, s["id"])
    assert {e["status"] for e in roster} == {"Invited"}
    assert all(e["buyIn"] == 0 and e["cashOut"] == 0 for e in roster)


def test_session_json_uses_camel_case_keys(client, make_player):
    a = make_player("Alice")
    r = client.post(
        "/api/sessions",
        json={"name": "Friday game", "scheduledDateTime": "2026-11-06T20:00:00", "playerIds": [a["id"]]},
    )
    assert r.status_code == 201, r.text
    session_id = r.json()["id"]

    body = client.get(f"/api/sessions/{session_id}").json()
    assert set(body) == {"id", "name", "scheduledDateTime", "createdAt", "playerIds"}
    assert body["scheduledDateTime"].startswith("2026-11-06T20:00")

    r = client.put(
        f"/api/sessions/{session_id}",
        json={"name": "Friday game", "scheduledDateTime": "2026-11-13T20:00:00", "playerIds": [a["id"]]},
    )
    assert r.status_code == 200, r.text
    assert r.json()["scheduledDateTime"].startswith("2026-11-13T20:00")


def test_session_accepts_snake_case_input(client):
    r = client.post("/api/sessions", json={"name": "Game", "scheduled_datetime": "2026-11-06T20:00:00"})
    assert r.status_code == 201, r.text
    assert r.json()["scheduledDateTime"].startswith("2026-11-06T20:00")


def test_session_validation(client, make_player):
    r = client.post("/api/sessions", json={"name": " ", "scheduledDateTime": "2026-10-23T19:30:00"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Session name is required"

    r = client.post("/api/sessions", json={"name": "Game"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Scheduled date and time is required"

    r = client.post(
        "/api/sessions",
        json={"name": "Game", "scheduledDateTime": "2026-10-23T19:30:00", "playerIds": [404]},
    )
    assert r.status_code == 400
    assert "404" in r.json()["detail"]
    assert client.get("/api/sessions").json() == []


def test_update_roster_keeps_existing_rsvp(client, make_player, make_session):
    a = make_player("Alice")
    b = make_player("Bob")
    c = make_player("Carol")
    s = make_session(player_ids=[a["id"], b["id"]])

    client.put(f"/api/sessions/{s['id']}/players/{a['id']}/status", json={"status": "In"})
    client.put(f"/api/sessions/{s['id']}/players/{a['id']}/financials", json={"buyIn": 40})

    r = client.put(
        f"/api/sessions/{s['id']}",
        json={"name": "Renamed", "scheduledDateTime": "2026-10-30T19:30:00", "playerIds": [a["id"], c["id"]]},
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Renamed"
    assert sorted(r.json()["playerIds"]) == sorted([a["id"], c["id"]])

    by_player = {e["playerId"]: e for e in _roster(client, s["id"])}
    assert by_player[a["id"]]["status"] == "In"
    assert by_player[a["id"]]["buyIn"] == 40
    assert by_player[c["id"]]["status"] == "Invited"
    assert b["id"] not in by_player


def test_delete_session(client, make_player, make_session):
    a = make_player("Alice")
    s = make_session(player_ids=[a["id"]])

    r = client.delete(f"/api/sessions/{s['id']}")
    assert r.status_code == 200
    assert client.get(f"/api/sessions/{s['id']}").status_code == 404
    assert client.delete(f"/api/sessions/{s['id']}").status_code == 404
    # players survive their sessions
    assert client.get(f"/api/players/{a['id']}").status_code == 200


def test_deleting_player_removes_them_from_sessions(client, make_player, make_session):
    a = make_player("Alice")
    b = make_player("Bob")
    s = make_session(player_ids=[a["id"], b["id"]])

    client.delete(f"/api/players/{a['id']}")

    assert client.get(f"/api/sessions/{s['id']}").json()["playerIds"] == [b["id"]]


def test_roster_sorted_by_status(client, make_player, make_session):
    players = [make_player(n) for n in ("Ann", "Ben", "Cat", "Dan", "Eve")]
    s = make_session(player_ids=[p["id"] for p in players])
    statuses = {
        "Ann": "Out",
        "Ben": "Maybe",
        "Cat": "In",
        "Dan": "Attending but not playing",
    }
    for p in players:
        if p["name"] in statuses:
            r = client.put(
                f"/api/sessions/{s['id']}/players/{p['id']}/status",
                json={"status": statuses[p["name"]]},
            )
            assert r.status_code == 200

    assert [e["player"]["name"] for e in _roster(client, s["id"])] == ["Cat", "Dan", "Ben", "Eve", "Ann"]


def test_status_update_errors(client, make_player, make_session):
    a = make_player("Alice")
    outsider = make_player("Zed")
    s = make_session(player_ids=[a["id"]])

    r = client.put(f"/api/sessions/{s['id']}/players/{a['id']}/status", json={"status": "Sure"})
    assert r.status_code == 422

    r = client.put(f"/api/sessions/{s['id']}/players/{outsider['id']}/status", json={"status": "In"})
    assert r.status_code == 404

    r = client.put(f"/api/sessions/999/players/{a['id']}/status", json={"status": "In"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Session not found"


def test_financials_and_summary(client, make_player, make_session):
    a = make_player("Alice")
    b = make_player("Bob")
    s = make_session(player_ids=[a["id"], b["id"]])
    base = f"/api/sessions/{s['id']}/players"

    client.put(f"{base}/{a['id']}/status", json={"status": "In"})
    client.put(f"{base}/{b['id']}/status", json={"status": "In"})
    r = client.put(f"{base}/{a['id']}/financials", json={"buyIn": 50, "cashOut": 82.5})
    assert r.status_code == 200
    assert r.json()["net"] == 32.5
    client.put(f"{base}/{b['id']}/financials", json={"buyIn": 50, "cashOut": 17.5})

    summary = client.get(f"/api/sessions/{s['id']}/summary").json()
    assert summary["totalPlayers"] == 2
    assert summary["statusCounts"]["In"] == 2
    assert summary["totalBuyIn"] == 100
    assert summary["totalCashOut"] == 100
    assert summary["discrepancy"] == 0
    assert summary["balanced"] is True

    # only cash-out changes; buy-in is untouched
    client.put(f"{base}/{b['id']}/financials", json={"cashOut": 7.5})
    summary = client.get(f"/api/sessions/{s['id']}/summary").json()
    assert summary["totalBuyIn"] == 100
    assert summary["discrepancy"] == -10
    assert summary["balanced"] is False


def test_negative_financials_rejected(client, make_player, make_session):
    a = make_player("Alice")
    s = make_session(player_ids=[a["id"]])
    r = client.put(f"/api/sessions/{s['id']}/players/{a['id']}/financials", json={"buyIn": -5})
    assert r.status_code == 422


@pytest.mark.parametrize("raw", ['{"buyIn": 1e30}', '{"cashOut": 100000000}', '{"buyIn": Infinity}', '{"cashOut": NaN}'])
def test_out_of_range_financials_rejected(client, make_player, make_session, raw):
    a = make_player("Alice")
    s = make_session(player_ids=[a["id"]])
    r = client.put(
        f"/api/sessions/{s['id']}/players/{a['id']}/financials",
        content=raw,
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422

    roster = _roster(client, s["id"])
    assert roster[0]["buyIn"] == 0 and roster[0]["cashOut"] == 0


def test_largest_amount_is_accepted(client, make_player, make_session):
    a = make_player("Alice")
    s = make_session(player_ids=[a["id"]])
    r = client.put(f"/api/sessions/{s['id']}/players/{a['id']}/financials", json={"buyIn": 99999999.99})
    assert r.status_code == 200, r.text
    assert r.json()["buyIn"] == 99999999.99


def test_service_rejects_unbounded_amounts(db):
    player = Player(name="Alice")
    session = Session(name="Game", scheduled_datetime=dt.datetime(2026, 11, 6, 20, 0))
    session.players.append(SessionPlayer(player=player, status="In"))
    db.add(session)
    db.commit()

    for value in (float("inf"), float("nan"), 1e30, -1.0):
        with pytest.raises(ValidationError):
            SessionService.update_financials(db, session.id, player.id, buy_in=value)


def test_session_report_export(client, make_player, make_session):
    a = make_player("Alice")
    s = make_session("Friday game", [a["id"]])
    client.put(f"/api/sessions/{s['id']}/players/{a['id']}/status", json={"status": "In"})
    client.put(f"/api/sessions/{s['id']}/players/{a['id']}/financials", json={"buyIn": 20, "cashOut": 35})

    r = client.get(f"/api/sessions/{s['id']}/report.xlsx")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert "attachment" in r.headers["content-disposition"]

    wb = load_workbook(io.BytesIO(r.content))
    assert wb.sheetnames == ["Ledger", "Summary"]
    ledger = wb["Ledger"]
    assert [c.value for c in ledger[1]] == ["Player", "Status", "Buy-in", "Cash-out", "Net"]
    assert [c.value for c in ledger[2]] == ["Alice", "In", 20, 35, 15]

    assert client.get("/api/sessions/999/report.xlsx").status_code == 404
