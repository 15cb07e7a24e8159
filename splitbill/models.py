"""Immutable data types passed between the ledger, the settlement core and the API."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Item:
    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class Participant:
    """A named party with the item costs it incurred and the payments it made."""

    name: str
    items: Tuple[Item, ...] = ()
    payments: Tuple[float, ...] = ()

    @property
    def spent(self) -> float:
        return sum(item.value for item in self.items)

    @property
    def paid(self) -> float:
        return sum(self.payments)

    @property
    def balance(self) -> float:
        return self.paid - self.spent

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Participant":
        items = tuple(
            Item(name=str(item.get("name", "")), value=float(item["value"]))
            for item in payload.get("items") or ()
        )
        payments = tuple(float(amount) for amount in payload.get("payments") or ())
        return cls(name=str(payload["name"]), items=items, payments=payments)

    @classmethod
    def freeze(cls, participant: Any) -> "Participant":
        """Copy a participant or a mapping into a fresh immutable snapshot."""
        if isinstance(participant, Mapping):
            return cls.from_dict(participant)
        return cls(
            name=participant.name,
            items=tuple(Item(item.name, item.value) for item in participant.items),
            payments=tuple(participant.payments),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "payments": list(self.payments),
        }


@dataclass(frozen=True)
class Transfer:
    """``from_name`` pays ``amount`` to ``to_name``."""

    from_name: str
    to_name: str
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_name, "to": self.to_name, "amount": self.amount}


@dataclass(frozen=True)
class Balances:
    """Net balance per participant name plus the two grand totals."""

    by_name: Dict[str, float]
    total_spent: float = 0.0
    total_paid: float = 0.0


@dataclass(frozen=True)
class SettlementResult:
    """Exactly one of ``error`` or ``transfers`` is populated."""

    transfers: Optional[List[Transfer]] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.error is None) == (self.transfers is None):
            raise ValueError("SettlementResult needs exactly one of error or transfers")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {"transfers": [transfer.to_dict() for transfer in self.transfers]}


def freeze_all(participants: Iterable[Any]) -> Tuple[Participant, ...]:
    return tuple(Participant.freeze(participant) for participant in participants)
