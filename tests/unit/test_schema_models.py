"""Unit tests for MongoDB document models."""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError

from schemas.models.base import MongoBaseModel, PyObjectId
from schemas.models.url import UrlDoc
from schemas.models.user import UserDoc
from schemas.models.verification import VerificationCodeDoc


# ── Helpers ───────────────────────────────────────────────────────────────────

def now():
    return datetime.now(timezone.utc)


def oid():
    return ObjectId()


# ── PyObjectId ────────────────────────────────────────────────────────────────

class TestPyObjectId:
    def test_accepts_objectid_instance(self):
        o = oid()
        assert PyObjectId._validate(o) == o

    def test_accepts_valid_string(self):
        s = str(oid())
        result = PyObjectId._validate(s)
        assert isinstance(result, ObjectId)
        assert str(result) == s

    def test_rejects_invalid_string(self):
        with pytest.raises(ValueError):
            PyObjectId._validate("not-an-objectid")

    def test_rejects_none(self):
        with pytest.raises(ValueError):
            PyObjectId._validate(None)


# ── MongoBaseModel ─────────────────────────────────────────────────────────────

class TestMongoBaseModel:
    def test_from_mongo_returns_none_for_none(self):
        assert MongoBaseModel.from_mongo(None) is None

    def test_id_alias(self):
        o = oid()
        m = MongoBaseModel.model_validate({"_id": o})
        assert m.id == o

    def test_to_mongo_drops_none_id(self):
        assert "_id" not in MongoBaseModel().to_mongo()

    def test_to_mongo_keeps_objectid(self):
        o = oid()
        assert MongoBaseModel(id=o).to_mongo()["_id"] == o


# ── UserDoc ───────────────────────────────────────────────────────────────────

class TestUserDoc:
    def test_defaults(self):
        user = UserDoc(username="alice", email="alice@example.com")
        assert user.is_verified is False
        assert user.password_hash is None
        assert user.created_at.tzinfo is not None

    def test_to_public_drops_hash(self):
        o = oid()
        user = UserDoc(id=o, username="alice", email="a@example.com", password_hash="h")
        public = user.to_public()
        assert "password_hash" not in public
        assert public["id"] == str(o)

    def test_from_mongo_without_hash(self):
        raw = {
            "_id": oid(),
            "username": "alice",
            "email": "a@example.com",
            "is_verified": True,
            "created_at": now(),
            "updated_at": now(),
        }
        user = UserDoc.from_mongo(raw)
        assert user.is_verified is True
        assert user.password_hash is None


# ── VerificationCodeDoc ───────────────────────────────────────────────────────

class TestVerificationCodeDoc:
    def test_valid(self):
        doc = VerificationCodeDoc(email="a@example.com", verification_code=123456)
        assert doc.to_mongo()["verification_code"] == 123456
        assert isinstance(doc.created_at, datetime)

    @pytest.mark.parametrize("code", [12345, 1234567])
    def test_code_must_be_six_digits(self, code):
        with pytest.raises(ValidationError):
            VerificationCodeDoc(email="a@example.com", verification_code=code)


# ── UrlDoc ────────────────────────────────────────────────────────────────────

class TestUrlDoc:
    def test_to_mongo_keeps_objectid_owner(self):
        owner = oid()
        doc = UrlDoc(origin="https://example.com", shorten="abc", user_id=owner)
        raw = doc.to_mongo()
        assert raw["user_id"] == owner
        assert raw["clicks"] == 0

    def test_to_public_stringifies_ids(self):
        owner = oid()
        doc = UrlDoc(id=oid(), origin="https://example.com", shorten="abc", user_id=owner)
        assert doc.to_public()["user_id"] == str(owner)

    def test_negative_clicks_rejected(self):
        with pytest.raises(ValidationError):
            UrlDoc(origin="https://example.com", shorten="abc", user_id=oid(), clicks=-1)
