"""Tests for the HTTP gateway."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from kiosk_print.api.app import create_app
from kiosk_print.config import Settings
from kiosk_print.containers import AppContainer, build_container
from kiosk_print.domain.accounts import AccountRecord, AccountRole
from tests.conftest import FakeChannel

PDF_BYTES = b"%PDF-1.4\n" + b"0" * 2039


def _upload(client: TestClient, user_id: str, kiosk_id: str = "KIOSK1") -> dict:
    response = client.post(
        "/api/upload",
        files={"file": ("report.pdf", PDF_BYTES, "application/pdf")},
        data={"userId": user_id, "kioskId": kiosk_id, "color": "color", "copies": "2"},
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_register_and_login(client: TestClient) -> None:
    registered = client.post(
        "/api/register",
        json={"type": "user", "credentialName": "alice", "secret": "s3cret"},
    )
    login = client.post(
        "/api/login",
        json={"type": "user", "credentialName": "alice", "secret": "s3cret"},
    )

    assert registered.status_code == 200
    assert registered.json()["success"] is True
    assert login.status_code == 200
    account = login.json()["account"]
    assert account["id"] == registered.json()["id"]
    assert account["credentialName"] == "alice"
    assert "secret" not in account


def test_register_accepts_legacy_field_names(client: TestClient) -> None:
    response = client.post(
        "/api/register",
        json={
            "type": "kiosk",
            "kiosk_name": "KIOSK1",
            "password": "pw",
            "location": "Library",
        },
    )
    login = client.post(
        "/api/login", json={"type": "kiosk", "kiosk_name": "KIOSK1", "password": "pw"}
    )

    assert response.status_code == 200
    assert login.json()["account"]["location"] == "Library"


def test_register_duplicate_is_client_error(client: TestClient) -> None:
    body = {"type": "user", "credentialName": "alice", "secret": "s3cret"}
    client.post("/api/register", json=body)

    response = client.post("/api/register", json=body)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "User already exists"}


def test_login_with_wrong_secret_is_unauthorized(
    client: TestClient, user: AccountRecord
) -> None:
    response = client.post(
        "/api/login",
        json={"type": "user", "credentialName": "alice", "secret": "wrong"},
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_login_unknown_account_is_unauthorized(client: TestClient) -> None:
    response = client.post(
        "/api/login",
        json={"type": "user", "credentialName": "ghost", "secret": "x"},
    )

    assert response.status_code == 401


def test_missing_field_names_the_field(client: TestClient) -> None:
    response = client.post(
        "/api/login", json={"type": "user", "credentialName": "alice"}
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing secret"}


def test_upload_then_download_roundtrip(
    client: TestClient, user: AccountRecord
) -> None:
    uploaded = _upload(client, str(user.id))

    response = client.get(f"/api/file/{uploaded['fileId']}")

    assert uploaded["filename"] == "report.pdf"
    assert uploaded["size"] == len(PDF_BYTES)
    assert uploaded["url"] == f"http://testserver/api/file/{uploaded['fileId']}"
    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="report.pdf"' in response.headers["content-disposition"]


def test_upload_requires_file_and_user(client: TestClient, user: AccountRecord) -> None:
    no_file = client.post("/api/upload", data={"userId": str(user.id)})
    no_user = client.post(
        "/api/upload", files={"file": ("a.txt", b"a", "text/plain")}
    )

    assert no_file.status_code == 400
    assert no_file.json()["error"] == "No file uploaded"
    assert no_user.status_code == 400
    assert no_user.json()["error"] == "Missing userId"


def test_upload_for_unknown_user_is_not_found(client: TestClient) -> None:
    response = client.post(
        "/api/upload",
        files={"file": ("a.txt", b"a", "text/plain")},
        data={"userId": str(uuid4())},
    )

    assert response.status_code == 404


def test_list_files(client: TestClient, user: AccountRecord) -> None:
    uploaded = _upload(client, str(user.id))

    response = client.get(f"/api/files/{user.id}")

    files = response.json()["files"]
    assert len(files) == 1
    assert files[0]["fileId"] == uploaded["fileId"]
    assert files[0]["length"] == len(PDF_BYTES)
    assert files[0]["contentType"] == "application/pdf"
    assert files[0]["metadata"]["kioskId"] == "KIOSK1"
    assert files[0]["metadata"]["copies"] == 2


def test_download_unknown_and_malformed_ids(client: TestClient) -> None:
    assert client.get(f"/api/file/{uuid4()}").status_code == 404
    assert client.get("/api/file/not-an-id").status_code == 400


def test_print_to_kiosk_that_never_joined_is_gone(
    client: TestClient, user: AccountRecord
) -> None:
    uploaded = _upload(client, str(user.id), kiosk_id="KIOSK9")

    response = client.post(
        "/api/print",
        json={"kioskId": "KIOSK9", "fileId": uploaded["fileId"], "copies": 1},
    )

    assert response.status_code == 410
    assert response.json() == {"success": False, "error": "Kiosk is offline"}


def test_print_unknown_file_is_not_found(client: TestClient) -> None:
    response = client.post(
        "/api/print", json={"kioskId": "KIOSK1", "fileId": str(uuid4())}
    )

    assert response.status_code == 404


def test_print_rejects_copy_count_out_of_range(
    client: TestClient, user: AccountRecord
) -> None:
    uploaded = _upload(client, str(user.id))

    response = client.post(
        "/api/print",
        json={"kioskId": "KIOSK1", "fileId": uploaded["fileId"], "copies": 11},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid copies")


def test_print_to_online_kiosk_returns_job(
    client: TestClient, container: AppContainer, user: AccountRecord
) -> None:
    kiosk = FakeChannel()
    container.print_flow_service.attach_kiosk("KIOSK1", kiosk)
    uploaded = _upload(client, str(user.id))

    response = client.post(
        "/api/print",
        json={
            "kioskId": "KIOSK1",
            "fileId": uploaded["fileId"],
            "color": "black_white",
            "copies": 3,
            "pageRange": "2-4",
            "userId": str(user.id),
        },
    )

    assert response.status_code == 200
    job = response.json()["job"]
    assert job["copies"] == 3
    assert job["pageRange"] == "2-4"
    assert job["status"] == "dispatched"
    assert kiosk.events() == ["fileReceived", "printFile"]
    status = client.get(f"/api/print/{job['jobId']}").json()["job"]
    assert status["status"] == "dispatched"


def test_wallet_endpoints(client: TestClient, user: AccountRecord) -> None:
    recharge = client.post(
        "/api/wallet/recharge", json={"userId": str(user.id), "amount": 40}
    )
    by_path = client.get(f"/api/wallet/{user.id}")
    by_query = client.get("/api/wallet", params={"userId": str(user.id)})

    assert recharge.json()["newBalance"] == 40
    assert by_path.json()["balance"] == 40
    assert by_query.json()["history"][0]["type"] == "credit"


def test_wallet_recharge_rejects_negative_amount(
    client: TestClient, user: AccountRecord
) -> None:
    response = client.post(
        "/api/wallet/recharge", json={"userId": str(user.id), "amount": -5}
    )

    assert response.status_code == 400


@pytest.mark.parametrize("amount", ["nan", "inf", "-inf"])
def test_wallet_recharge_rejects_non_finite_amount(
    client: TestClient, user: AccountRecord, amount: str
) -> None:
    response = client.post(
        "/api/wallet/recharge", json={"userId": str(user.id), "amount": amount}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid amount")
    assert client.get(f"/api/wallet/{user.id}").json()["balance"] == 0


def test_legacy_login_with_dollar_signs_is_unauthorized(settings: Settings) -> None:
    container = build_container(
        settings.model_copy(update={"legacy_plaintext_secrets": True})
    )
    container.identity_service.repository.create_account(
        AccountRole.USER, "old", "a$b$c", None
    )
    client = TestClient(create_app(container))

    response = client.post(
        "/api/login", json={"type": "user", "credentialName": "old", "secret": "x"}
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid credentials"}


def test_wallet_routes_absent_when_disabled(settings: Settings) -> None:
    container = build_container(settings.model_copy(update={"wallet_enabled": False}))
    client = TestClient(create_app(container))

    assert client.get(f"/api/wallet/{uuid4()}").status_code == 404


def test_unexpected_failure_passes_message_through(
    container: AppContainer, user: AccountRecord, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(_owner_id):  # type: ignore[no-untyped-def]
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(
        container.content_service.repository, "list_files_for_owner", broken
    )
    client = TestClient(create_app(container), raise_server_exceptions=False)

    response = client.get(f"/api/files/{user.id}")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database unavailable"}
