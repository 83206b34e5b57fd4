"""
User CRUD contract tests: envelope, uniqueness, 404s and validation.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from app.application.user.usecase import UserUsecase
from app.common.errors import ConflictError, NotFoundError
from app.domain import models, schemas

BASE = "/api/v1/users"


def _create(client, email="jane@example.com", name="Jane Doe"):
    return client.post(BASE, json={"email": email, "name": name})


class TestCreateUser:
    def test_create_user_success(self, client) -> None:
        response = _create(client)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User created successfully"
        assert body["data"]["email"] == "jane@example.com"
        assert body["data"]["name"] == "Jane Doe"
        uuid.UUID(body["data"]["id"])
        assert body["data"]["created_at"]
        assert body["data"]["updated_at"]

    def test_email_is_trimmed_and_lowercased(self, client) -> None:
        response = _create(client, email="  Mixed.Case@Example.COM ", name="  Trimmed  ")
        assert response.status_code == 201
        assert response.json()["data"]["email"] == "mixed.case@example.com"
        assert response.json()["data"]["name"] == "Trimmed"

    def test_duplicate_email_conflict(self, client) -> None:
        assert _create(client).status_code == 201
        response = _create(client, email="JANE@example.com", name="Other")
        assert response.status_code == 409
        assert response.json()["success"] is False
        assert response.json()["message"] == "Email already exists"
        assert response.json()["code"] == "EMAIL_ALREADY_EXISTS"

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"name": "No Email"}, "email"),
            ({"email": "", "name": "Empty"}, "email"),
            ({"email": "not-an-email", "name": "Bad"}, "email"),
            ({"email": "a" * 250 + "@example.com", "name": "Long"}, "email"),
            ({"email": "ok@example.com"}, "name"),
            ({"email": "ok@example.com", "name": "   "}, "name"),
            ({"email": "ok@example.com", "name": "J"}, "name"),
            ({"email": "ok@example.com", "name": "x" * 101}, "name"),
            ({"email": 123, "name": "Number"}, "email"),
        ],
    )
    def test_validation_rejects(self, client, payload, field) -> None:
        response = client.post(BASE, json=payload)
        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["errors"]]
        assert field in fields


class TestReadUsers:
    def test_list_users_newest_first(self, client) -> None:
        _create(client, email="first@example.com", name="First")
        _create(client, email="second@example.com", name="Second")
        response = client.get(BASE)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Users retrieved successfully"
        assert [u["email"] for u in body["data"]] == ["second@example.com", "first@example.com"]

    def test_list_users_empty(self, client) -> None:
        response = client.get(BASE)
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_get_user_by_id(self, client) -> None:
        user_id = _create(client).json()["data"]["id"]
        response = client.get(f"{BASE}/{user_id}")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == user_id
        assert response.json()["message"] == "User retrieved successfully"

    def test_get_user_not_found(self, client) -> None:
        response = client.get(f"{BASE}/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "User not found",
            "code": "USER_NOT_FOUND",
            "trace_id": response.headers["X-Trace-Id"],
        }

    def test_get_user_invalid_uuid(self, client) -> None:
        response = client.get(f"{BASE}/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "user_id", "message": "ID must be a valid UUID"}]

    def test_get_user_by_email(self, client) -> None:
        _create(client)
        response = client.get(f"{BASE}/email/JANE@example.com")
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "jane@example.com"

    def test_get_user_by_email_not_found(self, client) -> None:
        response = client.get(f"{BASE}/email/nobody@example.com")
        assert response.status_code == 404

    def test_get_user_by_invalid_email(self, client) -> None:
        response = client.get(f"{BASE}/email/not-an-email")
        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "email", "message": "Email does not have a valid format"}
        ]


class TestUpdateUser:
    def test_update_name_only(self, client) -> None:
        created = _create(client).json()["data"]
        response = client.put(f"{BASE}/{created['id']}", json={"name": "Jane Smith"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Jane Smith"
        assert data["email"] == created["email"]
        assert response.json()["message"] == "User updated successfully"

    def test_update_email(self, client) -> None:
        user_id = _create(client).json()["data"]["id"]
        response = client.put(f"{BASE}/{user_id}", json={"email": "New@Example.com"})
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "new@example.com"

    def test_update_to_existing_email_conflicts(self, client) -> None:
        _create(client, email="taken@example.com", name="Taken")
        user_id = _create(client).json()["data"]["id"]
        response = client.put(f"{BASE}/{user_id}", json={"email": "taken@example.com"})
        assert response.status_code == 409

    def test_update_to_own_email_is_fine(self, client) -> None:
        user_id = _create(client).json()["data"]["id"]
        response = client.put(f"{BASE}/{user_id}", json={"email": "jane@example.com"})
        assert response.status_code == 200

    def test_update_missing_user(self, client) -> None:
        response = client.put(f"{BASE}/{uuid.uuid4()}", json={"name": "Ghost"})
        assert response.status_code == 404

    @pytest.mark.parametrize("payload", [{"email": ""}, {"email": "bad"}, {"name": ""}, {"name": "x"}])
    def test_update_validation(self, client, payload) -> None:
        user_id = _create(client).json()["data"]["id"]
        response = client.put(f"{BASE}/{user_id}", json=payload)
        assert response.status_code == 400


class TestDeleteUser:
    def test_delete_user(self, client) -> None:
        user_id = _create(client).json()["data"]["id"]
        response = client.delete(f"{BASE}/{user_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": None, "message": "User deleted successfully"}
        assert client.get(f"{BASE}/{user_id}").status_code == 404

    def test_delete_missing_user(self, client) -> None:
        response = client.delete(f"{BASE}/{uuid.uuid4()}")
        assert response.status_code == 404


class TestUserUsecase:
    def test_create_and_conflict(self, db) -> None:
        uc = UserUsecase()
        created = uc.create_user(db, req=schemas.UserCreate(email="uc@example.com", name="Usecase"))
        assert created.email == "uc@example.com"
        with pytest.raises(ConflictError):
            uc.create_user(db, req=schemas.UserCreate(email="UC@example.com", name="Again"))

    def test_missing_user_raises_not_found(self, db) -> None:
        with pytest.raises(NotFoundError):
            UserUsecase().get_user_by_id(db, user_id=str(uuid.uuid4()))

    def test_name_column_is_required(self, db) -> None:
        db.add(models.User(email="noname@example.com"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
