"""
Tests for core.business — tenant, member and cash book models and policies.
"""

import uuid
import pytest
from datetime import datetime, timezone

from core.business.models import Business, CashBook, CashBookRef, Member, UserProfile
from core.business.policies import (
    filter_cashbooks_by_name,
    validate_member_of_business,
    validate_not_already_member,
)
from core.errors import ReasonCode
from core.permissions import MemberRole


BIZ_ID = uuid.uuid4()
NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def _book(name: str) -> CashBook:
    return CashBook(cashbook_id=uuid.uuid4(), business_id=BIZ_ID, name=name, created_at=NOW)


# ── Model Tests ──────────────────────────────────────────────

class TestBusiness:
    def test_members_list(self):
        biz = Business(
            business_id=BIZ_ID,
            name="Sharma Traders",
            owner_id="u1",
            created_at=NOW,
            members=["u1", "u2"],
        )
        assert biz.members == ("u1", "u2")
        assert biz.has_member("u2")
        assert not biz.has_member("u3")

    def test_rejects_empty_name(self):
        with pytest.raises(ValueError, match="name"):
            Business(business_id=BIZ_ID, name="", owner_id="u1", created_at=NOW)

    def test_rejects_non_uuid(self):
        with pytest.raises(ValueError, match="UUID"):
            Business(business_id="abc", name="X", owner_id="u1", created_at=NOW)


class TestMember:
    def test_role_string_is_parsed(self):
        member = Member(user_id="u1", email="a@example.com", role="operator")
        assert member.role is MemberRole.OPERATOR
        assert member.to_dict() == {"id": "u1", "email": "a@example.com", "role": "operator"}

    def test_rejects_bad_role(self):
        with pytest.raises(ValueError):
            Member(user_id="u1", email="a@example.com", role="superuser")


class TestUserProfile:
    def test_requires_user_id(self):
        with pytest.raises(ValueError, match="user_id"):
            UserProfile(user_id="", email="a@example.com")


class TestCashBook:
    def test_ref(self):
        book = _book("Main")
        assert book.ref == CashBookRef(BIZ_ID, book.cashbook_id)
        assert str(book.ref) == f"{BIZ_ID}/{book.cashbook_id}"
        assert book.to_dict()["name"] == "Main"


# ── Policy Tests ─────────────────────────────────────────────

class TestMembershipPolicies:
    def test_non_member_rejected(self):
        reason = validate_member_of_business(None, "u9")
        assert reason.code == ReasonCode.NOT_A_MEMBER

    def test_member_passes(self):
        member = Member(user_id="u1", email="a@example.com", role=MemberRole.VIEWER)
        assert validate_member_of_business(member, "u1") is None

    def test_duplicate_email_case_insensitive(self):
        members = [Member(user_id="u1", email="Asha@Example.com", role=MemberRole.OWNER)]
        reason = validate_not_already_member("  asha@example.COM ", members)
        assert reason.code == ReasonCode.DUPLICATE_MEMBER
        assert reason.message == "This user is already a member of the business."

    def test_duplicate_user_id_with_stale_email(self):
        members = [Member(user_id="u1", email="old@example.com", role=MemberRole.OWNER)]
        assert validate_not_already_member("new@example.com", members, "u1") is not None
        assert validate_not_already_member("new@example.com", members, "u2") is None


class TestCashBookSearch:
    def test_substring_case_insensitive(self):
        books = [_book("Main Shop"), _book("Petty cash"), _book("Warehouse")]
        assert [b.name for b in filter_cashbooks_by_name(books, "SHOP")] == ["Main Shop"]

    def test_empty_query_returns_all(self):
        books = [_book("A"), _book("B")]
        assert filter_cashbooks_by_name(books, "") == books
        assert filter_cashbooks_by_name(books, None) == books
