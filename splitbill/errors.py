"""Error hierarchy shared by the settlement core, the ledger and the API.

Every error carries a snake_case ``code``, a human-readable ``message`` and the
HTTP status the API answers with. ``to_response`` builds the JSON envelope.
"""

from typing import Any, Dict


class SplitBillError(Exception):
    """Base exception for all SplitBill errors."""

    def __init__(self, message: str, code: str, http_status: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class LedgerImbalance(SplitBillError):
    """Total spent and total paid disagree beyond the tolerance."""

    def __init__(self, total_spent: float, total_paid: float) -> None:
        super().__init__("Totals do not match", "totals_mismatch", 409)
        self.total_spent = total_spent
        self.total_paid = total_paid


class ParticipantNotFound(SplitBillError):
    def __init__(self, index: int) -> None:
        super().__init__(f"No participant at position {index}", "participant_not_found", 404)
        self.index = index


class EntryNotFound(SplitBillError):
    """An item or payment index is out of range."""

    def __init__(self, kind: str, index: int) -> None:
        super().__init__(f"No {kind} at position {index}", f"{kind}_not_found", 404)
        self.kind = kind
        self.index = index


class InvalidAmount(SplitBillError):
    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid amount: {value!r}", "invalid_amount", 400)
        self.value = value


class InvalidName(SplitBillError):
    def __init__(self) -> None:
        super().__init__("Name must not be empty", "missing_name", 400)
