"""Who is acting on an order, and in what capacity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: Role = Role.BUYER

    @property
    def is_staff(self) -> bool:
        """Sellers and admins share the fulfilment permissions."""
        return self.role in (Role.SELLER, Role.ADMIN)

    def owns(self, buyer_id: str) -> bool:
        return self.user_id == buyer_id


def parse_role(raw: str | None) -> Role:
    """A role from its wire value; missing means buyer."""
    if not raw:
        return Role.BUYER
    try:
        return Role(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError(
            f"Unknown role '{raw}' (expected one of: {allowed})", fields=["role"]
        ) from None
