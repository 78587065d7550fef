"""
CBM Core Business — Public API
=================================
Business, membership and cash book models and policies.
"""

from core.business.models import (
    Business,
    CashBook,
    CashBookRef,
    Member,
    UserProfile,
)
from core.business.policies import (
    filter_cashbooks_by_name,
    validate_member_of_business,
    validate_not_already_member,
)

__all__ = [
    "Business",
    "CashBook",
    "CashBookRef",
    "Member",
    "UserProfile",
    "filter_cashbooks_by_name",
    "validate_member_of_business",
    "validate_not_already_member",
]
