"""
Translation between display labels and stored codes for every enumerated
field (statuses, categories, payment modes, discount tiers, roles...).

The tables below are the built-in label set. A deployment can replace them
with a JSON file of the same shape (``ENUM_LABELS_FILE``); routers receive the
mapper through ``Depends(get_enum_mapper)`` so tests and alternate label sets
can swap it out.
"""

import json
import logging
from decimal import Decimal
from functools import lru_cache

from erp_api.core.config import settings

logger = logging.getLogger("app")


DEFAULT_FAMILIES = {
    "invoice_status": {
        "default": "DRAFT",
        "labels": {
            "draft": "DRAFT",
            "pending": "PENDING",
            "unpaid": "UNPAID",
            "overdue": "OVERDUE",
            "partially paid": "PARTIALLY_PAID",
            "paid": "PAID",
        },
    },
    "quote_status": {
        "default": "DRAFT",
        "labels": {
            "draft": "DRAFT",
            "sent": "SENT",
            "accepted": "ACCEPTED",
            "declined": "DECLINED",
            "expired": "EXPIRED",
        },
    },
    "order_status": {
        "default": "PENDING",
        "labels": {
            "Pending": "PENDING",
            "Confirmed": "CONFIRMED",
            "Shipped": "SHIPPED",
            "Delivered": "DELIVERED",
            "Cancelled": "CANCELLED",
        },
    },
    "transaction_type": {
        "default": "INCOME",
        "labels": {
            "Income": "INCOME",
            "Expense": "EXPENSE",
            "Transfer": "TRANSFER",
        },
    },
    "transaction_status": {
        "default": "PENDING",
        "labels": {
            "Pending": "PENDING",
            "Completed": "COMPLETED",
            "Cancelled": "CANCELLED",
        },
    },
    "transaction_category": {
        "default": "OFFICE_SUPPLIES",
        "labels": {
            "Office Supplies": "OFFICE_SUPPLIES",
            "Marketing": "MARKETING",
            "Travel": "TRAVEL",
            "Utilities": "UTILITIES",
            "Salaries": "SALARIES",
        },
    },
    "sale_status": {
        "default": "COMPLETED",
        "labels": {
            "Pending": "PENDING",
            "Completed": "COMPLETED",
            "Cancelled": "CANCELLED",
            "Refunded": "REFUNDED",
        },
    },
    "payment_method": {
        "default": "CASH",
        "labels": {
            "Cash": "CASH",
            "Credit Card": "CREDIT_CARD",
            "Bank Transfer": "BANK_TRANSFER",
            "Digital Wallet": "DIGITAL_WALLET",
        },
    },
    "discount": {
        "default": "NO_DISCOUNT",
        "labels": {
            "No Discount": "NO_DISCOUNT",
            "5% Off": "FIVE_PERCENT",
            "10% Off": "TEN_PERCENT",
            "15% Off": "FIFTEEN_PERCENT",
        },
        "percent": {
            "NO_DISCOUNT": 0,
            "FIVE_PERCENT": 5,
            "TEN_PERCENT": 10,
            "FIFTEEN_PERCENT": 15,
        },
    },
    "payment_mode": {
        "default": "CASH",
        "labels": {
            "Cash": "CASH",
            "Credit Card": "CREDIT_CARD",
            "Bank Transfer": "BANK_TRANSFER",
            "Digital Wallet": "DIGITAL_WALLET",
            "Check": "CHECK",
            "Wire Transfer": "WIRE_TRANSFER",
        },
    },
    "payment_status": {
        "default": "RECEIVED",
        "labels": {
            "Received": "RECEIVED",
            "Pending": "PENDING",
            "Processing": "PROCESSING",
            "Completed": "COMPLETED",
            "Failed": "FAILED",
            "Refunded": "REFUNDED",
        },
    },
    "active_status": {
        "default": "ACTIVE",
        "labels": {
            "Active": "ACTIVE",
            "Inactive": "INACTIVE",
        },
    },
    "department": {
        "default": None,
        "labels": {
            "IT": "IT",
            "HR": "HR",
            "Finance": "FINANCE",
            "Marketing": "MARKETING",
            "Sales": "SALES",
        },
    },
    "user_role": {
        "default": None,
        "labels": {
            "Admin": "ADMIN",
            "HR": "HR",
            "Finance": "FINANCE",
            "Sales": "SALES",
            "Employee": "EMPLOYEE",
        },
    },
}


class UnknownLabelError(ValueError):
    def __init__(self, family: str, value, allowed: list[str]):
        self.family = family
        self.value = value
        self.allowed = allowed
        super().__init__(f"must be one of: {', '.join(allowed)}")


class _Family:
    def __init__(self, name: str, table: dict):
        self.name = name
        self.default = table.get("default")
        self.label_to_code = dict(table["labels"])
        self.code_to_label = {code: label for label, code in self.label_to_code.items()}
        self.folded = {label.casefold(): code for label, code in self.label_to_code.items()}
        self.percent = {
            code: Decimal(str(value)) for code, value in table.get("percent", {}).items()
        }

        if len(self.code_to_label) != len(self.label_to_code):
            raise ValueError(f"Enum family '{name}' maps two labels to one code")


class EnumMapper:
    def __init__(self, families: dict):
        self._families = {name: _Family(name, table) for name, table in families.items()}

    @classmethod
    def from_file(cls, path: str) -> "EnumMapper":
        """Families named in the file replace the built-in ones; the rest are kept."""
        with open(path, encoding="utf-8") as fh:
            overrides = json.load(fh)
        logger.info(f"Enum labels loaded from {path}: {', '.join(overrides)}")
        return cls({**DEFAULT_FAMILIES, **overrides})

    def _family(self, family: str) -> _Family:
        try:
            return self._families[family]
        except KeyError:
            raise KeyError(f"Unknown enum family '{family}'") from None

    def families(self) -> list[str]:
        return list(self._families)

    def labels(self, family: str) -> list[str]:
        return list(self._family(family).label_to_code)

    def codes(self, family: str) -> list[str]:
        return list(self._family(family).code_to_label)

    def to_code(self, family: str, label):
        """
        Map a display label to its stored code.

        Labels match exactly, then case-insensitively; a value that already is
        a stored code is accepted unchanged. A missing value falls back to the
        family default.
        """
        fam = self._family(family)

        if label is None or (isinstance(label, str) and not label.strip()):
            if fam.default is None:
                raise UnknownLabelError(family, label, self.labels(family))
            return fam.default

        if label in fam.label_to_code:
            return fam.label_to_code[label]

        if isinstance(label, str):
            folded = label.strip().casefold()
            if folded in fam.folded:
                return fam.folded[folded]

        if label in fam.code_to_label:
            return label

        raise UnknownLabelError(family, label, self.labels(family))

    def to_label(self, family: str, code):
        if code is None:
            return None

        fam = self._family(family)
        label = fam.code_to_label.get(code)

        if label is None:
            # Stored data outside the configured table is shown as-is
            logger.warning(f"Unmapped {family} code: {code!r}")
            return code

        return label

    def discount_percent(self, value) -> Decimal:
        fam = self._family("discount")
        code = self.to_code("discount", value)
        return fam.percent.get(code, Decimal("0"))


@lru_cache
def get_enum_mapper() -> EnumMapper:
    if settings.ENUM_LABELS_FILE:
        return EnumMapper.from_file(settings.ENUM_LABELS_FILE)
    return EnumMapper(DEFAULT_FAMILIES)
