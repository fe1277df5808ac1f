# tests/test_patients_api.py
import uuid
from datetime import timedelta

import pytest

from clinic_api.config.settings import settings
from clinic_api.core.auth import create_access_token

API = settings.api_prefix
PATIENTS = f"{API}/patients"


###############
# Auth gate
###############

def test_missing_token_is_unauthorized(client):
    r = client.get(PATIENTS)
    assert r.status_code == 401
    assert r.json() == {"msg": "Not authorized, no token provided."}


@pytest.mark.parametrize("header", ["Token abc", "Bearer", "Basic dXNlcjpwYXNz"])
def test_malformed_header_is_unauthorized(client, header):
    r = client.get(PATIENTS, headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json() == {"msg": "Not authorized, no token provided."}


def test_invalid_token_is_unauthorized(client):
    r = client.get(PATIENTS, headers={"Authorization": "Bearer not.a.token"})
    assert r.status_code == 401
    assert r.json() == {"msg": "Not authorized, invalid token."}


def test_expired_token_is_unauthorized(client, register):
    user_id = register()["user"]["id"]
    token = create_access_token(user_id, "admin", expires_delta=timedelta(seconds=-1))
    r = client.get(PATIENTS, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"msg": "Not authorized, token expired."}


def test_token_for_unknown_user_is_unauthorized(client):
    token = create_access_token(str(uuid.uuid4()), "admin")
    r = client.get(PATIENTS, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"msg": "Not authorized, user not found for this token."}


def test_missing_secret_on_protected_route_is_server_error(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "secret_key", None)
    r = client.get(PATIENTS, headers=admin_headers)
    assert r.status_code == 500
    assert r.json() == {"msg": "Server configuration error."}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", ""),
        ("post", ""),
        ("get", "/00000000-0000-0000-0000-000000000000"),
        ("put", "/00000000-0000-0000-0000-000000000000"),
        ("delete", "/00000000-0000-0000-0000-000000000000"),
    ],
)
def test_non_admin_is_forbidden_everywhere(client, user_headers, method, path):
    kwargs = {"json": {}} if method in ("post", "put") else {}
    r = getattr(client, method)(f"{PATIENTS}{path}", headers=user_headers, **kwargs)
    assert r.status_code == 403
    assert r.json()["msg"].startswith("User role 'user' is not authorized")


###############
# Create
###############

def test_create_derives_bmi(create_patient):
    patient = create_patient(bodyWeightKg=70, heightCm=175)
    assert patient["bmi"] == 22.86
    assert patient["diabetes"] == "None"
    assert patient["id"]
    assert patient["dateOfAppointment"]
    assert patient["createdAt"]


def test_create_explicit_bmi_wins(create_patient):
    patient = create_patient(bodyWeightKg=70, heightCm=175, bmi=99)
    assert patient["bmi"] == 99


def test_create_blank_numbers_are_treated_as_absent(create_patient):
    patient = create_patient(bodyWeightKg="", heightCm="", bmi="")
    assert patient["bodyWeightKg"] is None
    assert patient["bmi"] is None


def test_create_duplicate_aadhar_conflicts(client, admin_headers, create_patient):
    create_patient()
    r = client.post(
        PATIENTS,
        json={"name": "Someone Else", "aadharNo": "123456789012", "contactNo": "9123456780"},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json() == {"errors": [{"msg": "Patient with this Aadhar No. already exists."}]}


def test_create_reports_every_violated_field(client, admin_headers):
    r = client.post(
        PATIENTS,
        json={"aadharNo": "12ab", "contactNo": "123", "bfrPercent": 101, "hemoglobin": -2},
        headers=admin_headers,
    )
    assert r.status_code == 400
    messages = [e["msg"] for e in r.json()["errors"]]
    assert set(messages) == {
        "Name is required.",
        "Aadhar number must be 12 digits.",
        "Contact number must be between 10 to 15 digits.",
        "Hemoglobin cannot be negative.",
        "BFR cannot exceed 100.",
    }


def test_create_rejects_non_numeric_vitals(client, admin_headers):
    r = client.post(
        PATIENTS,
        json={"name": "A", "aadharNo": "123456789012", "contactNo": "9876543210", "sbp": "high"},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json() == {"errors": [{"msg": "SBP must be a number."}]}


def test_create_rejects_infinite_vitals(client, admin_headers):
    body = '{"name": "A", "aadharNo": "123456789012", "contactNo": "9876543210", "bodyWeightKg": 1e400}'
    r = client.post(
        PATIENTS,
        content=body,
        headers={**admin_headers, "Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"errors": [{"msg": "Body weight must be a number."}]}


###############
# List / search
###############

def test_list_is_ordered_by_appointment_desc(client, admin_headers, create_patient):
    create_patient(name="Old", aadharNo="100000000001", dateOfAppointment="2024-01-01T09:00:00")
    create_patient(name="New", aadharNo="100000000002", dateOfAppointment="2024-06-01T09:00:00")
    create_patient(name="Mid", aadharNo="100000000003", dateOfAppointment="2024-03-01T09:00:00")

    r = client.get(PATIENTS, headers=admin_headers)
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["New", "Mid", "Old"]


def test_list_orders_mixed_offsets_by_instant(client, admin_headers, create_patient):
    # 10:00 in India is 04:30 UTC, earlier than 05:00 UTC
    create_patient(name="India", aadharNo="100000000011", dateOfAppointment="2024-01-01T10:00:00+05:30")
    create_patient(name="Utc", aadharNo="100000000012", dateOfAppointment="2024-01-01T05:00:00Z")

    r = client.get(PATIENTS, headers=admin_headers)
    assert [p["name"] for p in r.json()] == ["Utc", "India"]


def test_search_matches_name_case_insensitively(client, admin_headers, create_patient):
    create_patient(name="Alice Kumar", aadharNo="200000000001")
    create_patient(name="Bob Singh", aadharNo="200000000002")

    r = client.get(PATIENTS, params={"search": "aLiCe"}, headers=admin_headers)
    assert [p["name"] for p in r.json()] == ["Alice Kumar"]


def test_search_matches_partial_aadhar(client, admin_headers, create_patient):
    create_patient(name="Alice Kumar", aadharNo="200000000001")
    create_patient(name="Bob Singh", aadharNo="300000000002")

    r = client.get(PATIENTS, params={"search": "0000002"}, headers=admin_headers)
    assert [p["aadharNo"] for p in r.json()] == ["300000000002"]


def test_search_treats_wildcards_literally(client, admin_headers, create_patient):
    create_patient(name="Alice Kumar", aadharNo="200000000001")
    r = client.get(PATIENTS, params={"search": "%"}, headers=admin_headers)
    assert r.json() == []


###############
# Read
###############

def test_read_by_id(client, admin_headers, create_patient):
    created = create_patient()
    r = client.get(f"{PATIENTS}/{created['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == created


def test_read_unknown_id_is_not_found(client, admin_headers):
    r = client.get(f"{PATIENTS}/{uuid.uuid4()}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"msg": "Patient not found."}


def test_read_malformed_id_is_not_found(client, admin_headers):
    r = client.get(f"{PATIENTS}/not-an-id", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"msg": "Patient not found (invalid ID format)."}


###############
# Update
###############

def test_partial_update_leaves_absent_fields_alone(client, admin_headers, create_patient):
    created = create_patient(bodyWeightKg=70, heightCm=175)
    r = client.put(
        f"{PATIENTS}/{created['id']}", json={"doctorName": "Dr. X"}, headers=admin_headers
    )
    assert r.status_code == 200
    body = r.json()
    assert body["doctorName"] == "Dr. X"
    assert body["aadharNo"] == created["aadharNo"]
    assert body["name"] == created["name"]
    assert body["bmi"] == 22.86


def test_update_weight_recomputes_bmi(client, admin_headers, create_patient):
    created = create_patient(bodyWeightKg=70, heightCm=175)
    r = client.put(f"{PATIENTS}/{created['id']}", json={"bodyWeightKg": 80}, headers=admin_headers)
    assert r.json()["bmi"] == 26.12


def test_update_clearing_height_clears_bmi(client, admin_headers, create_patient):
    created = create_patient(bodyWeightKg=70, heightCm=175)
    r = client.put(f"{PATIENTS}/{created['id']}", json={"heightCm": None}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["heightCm"] is None
    assert r.json()["bmi"] is None


def test_update_explicit_bmi_wins(client, admin_headers, create_patient):
    created = create_patient(bodyWeightKg=70, heightCm=175)
    r = client.put(
        f"{PATIENTS}/{created['id']}", json={"bodyWeightKg": 80, "bmi": 30.5}, headers=admin_headers
    )
    assert r.json()["bmi"] == 30.5


def test_update_null_date_keeps_stored_date(client, admin_headers, create_patient):
    created = create_patient(dateOfAppointment="2024-02-01T09:00:00Z")
    for blank in (None, ""):
        r = client.put(
            f"{PATIENTS}/{created['id']}", json={"dateOfAppointment": blank}, headers=admin_headers
        )
        assert r.status_code == 200
        assert r.json()["dateOfAppointment"] == created["dateOfAppointment"]


def test_update_to_taken_aadhar_conflicts(client, admin_headers, create_patient):
    create_patient(aadharNo="400000000001")
    second = create_patient(aadharNo="400000000002")
    r = client.put(
        f"{PATIENTS}/{second['id']}", json={"aadharNo": "400000000001"}, headers=admin_headers
    )
    assert r.status_code == 400
    assert r.json() == {
        "errors": [{"msg": "Another patient with this Aadhar No. already exists."}]
    }


def test_update_to_own_aadhar_is_allowed(client, admin_headers, create_patient):
    created = create_patient()
    r = client.put(
        f"{PATIENTS}/{created['id']}", json={"aadharNo": created["aadharNo"]}, headers=admin_headers
    )
    assert r.status_code == 200


def test_update_revalidates_merged_record(client, admin_headers, create_patient):
    created = create_patient()
    r = client.put(
        f"{PATIENTS}/{created['id']}",
        json={"contactNo": "12", "name": None},
        headers=admin_headers,
    )
    assert r.status_code == 400
    messages = [e["msg"] for e in r.json()["errors"]]
    assert set(messages) == {
        "Name is required.",
        "Contact number must be between 10 to 15 digits.",
    }

    unchanged = client.get(f"{PATIENTS}/{created['id']}", headers=admin_headers).json()
    assert unchanged["contactNo"] == created["contactNo"]


def test_update_unknown_and_malformed_ids(client, admin_headers):
    missing = client.put(f"{PATIENTS}/{uuid.uuid4()}", json={}, headers=admin_headers)
    malformed = client.put(f"{PATIENTS}/12345", json={}, headers=admin_headers)
    assert missing.status_code == malformed.status_code == 404


###############
# Delete
###############

def test_delete_removes_record(client, admin_headers, create_patient):
    created = create_patient()
    r = client.delete(f"{PATIENTS}/{created['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"msg": "Patient removed successfully."}

    again = client.get(f"{PATIENTS}/{created['id']}", headers=admin_headers)
    assert again.status_code == 404


def test_delete_unknown_id_is_not_found(client, admin_headers):
    r = client.delete(f"{PATIENTS}/{uuid.uuid4()}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"msg": "Patient not found."}


def test_delete_malformed_id_is_not_found(client, admin_headers):
    r = client.delete(f"{PATIENTS}/zzz", headers=admin_headers)
    assert r.status_code == 404
