"""
CBM Cash Book Store — Relational State
========================================
ORM rows behind DjangoCashBookStore.

Entries reference their cash book with PROTECT: the database refuses to
drop a cash book that still has entries, so the children-first cascade
order is enforced rather than assumed.
"""

from __future__ import annotations

from django.db import models


class MemberRoleChoice(models.TextChoices):
    OWNER = "owner", "Owner"
    OPERATOR = "operator", "Operator"
    VIEWER = "viewer", "Viewer"


class EntryTypeChoice(models.TextChoices):
    IN = "in", "Cash In"
    OUT = "out", "Cash Out"


class UserProfile(models.Model):
    user_id = models.CharField(primary_key=True, max_length=255)
    email = models.CharField(max_length=320, db_index=True)
    display_name = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "cbm_users"
        ordering = ["user_id"]

    def __str__(self) -> str:
        return f"{self.user_id} ({self.email})"


class Business(models.Model):
    business_id = models.UUIDField(primary_key=True, editable=False)
    name = models.CharField(max_length=255)
    owner_id = models.CharField(max_length=255)
    created_at = models.DateTimeField()
    members = models.JSONField(default=list)

    class Meta:
        db_table = "cbm_businesses"
        ordering = ["created_at", "business_id"]

    def __str__(self) -> str:
        return f"{self.business_id} ({self.name})"


class Member(models.Model):
    business = models.ForeignKey(
        Business,
        on_delete=models.PROTECT,
        related_name="member_records",
        db_column="business_id",
    )
    user_id = models.CharField(max_length=255)
    email = models.CharField(max_length=320)
    role = models.CharField(max_length=16, choices=MemberRoleChoice.choices)

    class Meta:
        db_table = "cbm_members"
        ordering = ["business_id", "user_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "user_id"],
                name="uq_member_business_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} ({self.role})"


class CashBook(models.Model):
    cashbook_id = models.UUIDField(primary_key=True, editable=False)
    business = models.ForeignKey(
        Business,
        on_delete=models.PROTECT,
        related_name="cashbooks",
        db_column="business_id",
    )
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "cbm_cashbooks"
        ordering = ["created_at", "cashbook_id"]

    def __str__(self) -> str:
        return f"{self.cashbook_id} ({self.name})"


class Entry(models.Model):
    entry_id = models.UUIDField(primary_key=True, editable=False)
    cashbook = models.ForeignKey(
        CashBook,
        on_delete=models.PROTECT,
        related_name="entries",
        db_column="cashbook_id",
    )
    type = models.CharField(max_length=3, choices=EntryTypeChoice.choices)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    date = models.DateField()
    remark = models.CharField(max_length=500)
    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=255)

    class Meta:
        db_table = "cbm_entries"
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(
                fields=["cashbook", "-date", "-created_at"],
                name="idx_entry_book_date_created",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.entry_id} ({self.type} {self.amount})"
