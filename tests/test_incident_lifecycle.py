# tests/test_incident_lifecycle.py

"""
Tests for PUT /new-incident and DELETE /remove-incident, and for the
lifecycle processor underneath them.
"""

import threading
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from crime_api.db.gateway import Transaction
from crime_api.errors import IncidentExistsError, IncidentNotFoundError
from crime_api.processors.lifecycle import add_incident, remove_incident
from crime_api.schemas import parse_new_incident

ALREADY_EXISTS = "Error: could not insert incident because case number already exists in the database"
DOES_NOT_EXIST = "Error: could not delete incident because case number does not exist in the database"


def new_incident(**overrides):
    body = {
        "case_number": "23000100",
        "date": "2023-01-15",
        "time": "14:30:00",
        "code": 600,
        "incident": "Theft",
        "police_grid": 87,
        "neighborhood_number": 7,
        "block": "98X UNIVERSITY AV W",
    }
    body.update(overrides)
    return body


def test_create_incident(client, count_incidents):
    resp = client.put("/new-incident", json=new_incident())
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "Incident added successfully"
    assert count_incidents("23000100") == 1

    row = client.get("/incidents?limit=1").get_json()[0]
    assert row["case_number"] == "23000100"
    assert row["date"] == "2023-01-15"
    assert row["time"] == "14:30:00"
    assert row["block"] == "98X UNIVERSITY AV W"


def test_create_with_short_time_is_stored_with_seconds(client):
    client.put("/new-incident", json=new_incident(time="09:05"))
    row = client.get("/incidents?limit=1").get_json()[0]
    assert row["time"] == "09:05:00"


def test_create_duplicate_is_rejected_and_first_record_kept(client, count_incidents):
    assert client.put("/new-incident", json=new_incident()).status_code == 200

    resp = client.put("/new-incident", json=new_incident(incident="Robbery", code=300))
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == ALREADY_EXISTS
    assert count_incidents("23000100") == 1

    row = client.get("/incidents?code=600&limit=1").get_json()[0]
    assert row["case_number"] == "23000100"
    assert row["incident"] == "Theft"


def test_create_for_seeded_case_number_is_rejected(client):
    resp = client.put("/new-incident", json=new_incident(case_number="22000001"))
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == ALREADY_EXISTS


def test_remove_unknown_case_number(client, count_incidents):
    resp = client.delete("/remove-incident", json={"case_number": "99999999"})
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == DOES_NOT_EXIST
    assert count_incidents() == 6


def test_create_remove_remove(client, count_incidents):
    assert client.put("/new-incident", json=new_incident()).status_code == 200

    resp = client.delete("/remove-incident", json={"case_number": "23000100"})
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "Incident deleted successfully"
    assert count_incidents("23000100") == 0
    assert count_incidents() == 6

    resp = client.delete("/remove-incident", json={"case_number": "23000100"})
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == DOES_NOT_EXIST


def test_remove_seeded_incident(client, count_incidents):
    resp = client.delete("/remove-incident", json={"case_number": "22000003"})
    assert resp.status_code == 200
    assert count_incidents() == 5
    assert "22000003" not in [r["case_number"] for r in client.get("/incidents").get_json()]


@pytest.mark.parametrize("body", [
    {"case_number": "23000100"},
    new_incident(code="six hundred"),
    new_incident(date="2023-02-30"),
    new_incident(time="25:00"),
    new_incident(case_number="   "),
    new_incident(police_grid=None),
    new_incident(code="600"),
    new_incident(block=None),
    new_incident(code=10 ** 20),
    new_incident(police_grid=-2 ** 63 - 1),
    new_incident(neighborhood_number=1e20),
])
def test_create_invalid_body(client, count_incidents, body):
    resp = client.put("/new-incident", json=body)
    assert resp.status_code == 400
    assert resp.get_data(as_text=True).startswith("Error: invalid incident")
    assert count_incidents() == 6


def test_create_non_json_body(client):
    resp = client.put("/new-incident", data="case_number=1", content_type="application/x-www-form-urlencoded")
    assert resp.status_code == 400


def test_remove_invalid_body(client):
    assert client.delete("/remove-incident", json={}).status_code == 400
    assert client.delete("/remove-incident", json=["22000001"]).status_code == 400


def test_create_store_failure(client, mocker):
    mocker.patch(
        "crime_api.api.incidents.add_incident",
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
    )
    resp = client.put("/new-incident", json=new_incident())
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == "Error: could not insert incident"


def test_remove_store_failure(client, mocker):
    mocker.patch(
        "crime_api.api.incidents.remove_incident",
        side_effect=OperationalError("DELETE", {}, Exception("database is locked")),
    )
    resp = client.delete("/remove-incident", json={"case_number": "22000001"})
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == "Error: could not delete incident"


def test_store_constraint_is_reported_as_existing(gateway, mocker, count_incidents):
    """If the existence check misses a row, the unique key still stops the insert."""
    mocker.patch.object(Transaction, "select", return_value=[])

    with pytest.raises(IncidentExistsError):
        add_incident(gateway, parse_new_incident(new_incident(case_number="22000001")))
    assert count_incidents("22000001") == 1


def test_integrity_error_from_mocked_gateway():
    tx = MagicMock()
    tx.select.return_value = []
    tx.run.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
    gateway = MagicMock()
    gateway.transaction.return_value.__enter__.return_value = tx
    gateway.transaction.return_value.__exit__.return_value = False

    with pytest.raises(IncidentExistsError) as excinfo:
        add_incident(gateway, parse_new_incident(new_incident()))
    assert excinfo.value.case_number == "23000100"


def test_insert_binds_all_fields():
    tx = MagicMock()
    tx.select.return_value = []
    gateway = MagicMock()
    gateway.transaction.return_value.__enter__.return_value = tx
    gateway.transaction.return_value.__exit__.return_value = False

    add_incident(gateway, parse_new_incident(new_incident()))

    sql, params = tx.run.call_args.args
    assert "2023-01-15" not in sql
    assert params == {
        "case_number": "23000100",
        "date_time": "2023-01-15T14:30:00",
        "code": 600,
        "incident": "Theft",
        "police_grid": 87,
        "neighborhood_number": 7,
        "block": "98X UNIVERSITY AV W",
    }


def test_remove_returns_deleted_rows(gateway):
    assert remove_incident(gateway, "22000002") == 1
    with pytest.raises(IncidentNotFoundError):
        remove_incident(gateway, "22000002")


def test_concurrent_creates_admit_one(gateway, count_incidents):
    results = []
    barrier = threading.Barrier(8)

    def create():
        barrier.wait()
        try:
            add_incident(gateway, parse_new_incident(new_incident()))
            results.append("added")
        except IncidentExistsError:
            results.append("exists")

    threads = [threading.Thread(target=create) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["added"] + ["exists"] * 7
    assert count_incidents("23000100") == 1


def test_integral_float_is_stored_as_int(client):
    resp = client.put("/new-incident", json=new_incident(code=600.0))
    assert resp.status_code == 200

    row = client.get("/incidents?limit=1").get_json()[0]
    assert row["case_number"] == "23000100"
    assert row["code"] == 600
    assert isinstance(row["code"], int)
