import logging
import math
import threading
from typing import Any, List, Tuple

from .errors import EntryNotFound, InvalidAmount, InvalidName, ParticipantNotFound
from .models import Item, Participant, SettlementResult
from .settlement import compute_settlement

logger = logging.getLogger(__name__)


class Ledger:
    """Mutable list of participants shared by the API request handlers.

    Participants are stored as immutable snapshots and replaced on every edit,
    so anything handed out by :meth:`snapshot` never changes underneath the
    settlement core.
    """

    def __init__(self) -> None:
        self._people: List[Participant] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._people)

    def snapshot(self) -> Tuple[Participant, ...]:
        with self._lock:
            return tuple(self._people)

    def get_person(self, person_index: int) -> Participant:
        with self._lock:
            return self._people[self._check_index(person_index)]

    def add_person(self, name: str) -> Tuple[int, Participant]:
        """Append a participant and return its position with it."""
        name = str(name or "").strip()
        if not name:
            raise InvalidName()
        person = Participant(name=name)
        with self._lock:
            self._people.append(person)
            index = len(self._people) - 1
        logger.info("Added participant %s at %d", name, index)
        return index, person

    def delete_person(self, person_index: int) -> Participant:
        with self._lock:
            person = self._people.pop(self._check_index(person_index))
        logger.info("Deleted participant %s", person.name)
        return person

    def add_item(self, person_index: int, item_name: str, value: Any) -> Item:
        item = Item(name=(item_name or "").strip(), value=to_amount(value))
        with self._lock:
            idx = self._check_index(person_index)
            person = self._people[idx]
            self._people[idx] = Participant(person.name, person.items + (item,), person.payments)
        return item

    def remove_item(self, person_index: int, item_index: int) -> Item:
        with self._lock:
            idx = self._check_index(person_index)
            person = self._people[idx]
            if not 0 <= item_index < len(person.items):
                raise EntryNotFound("item", item_index)
            items = list(person.items)
            removed = items.pop(item_index)
            self._people[idx] = Participant(person.name, tuple(items), person.payments)
        return removed

    def add_payment(self, person_index: int, amount: Any) -> float:
        payment = to_amount(amount)
        with self._lock:
            idx = self._check_index(person_index)
            person = self._people[idx]
            self._people[idx] = Participant(person.name, person.items, person.payments + (payment,))
        return payment

    def remove_payment(self, person_index: int, payment_index: int) -> float:
        with self._lock:
            idx = self._check_index(person_index)
            person = self._people[idx]
            if not 0 <= payment_index < len(person.payments):
                raise EntryNotFound("payment", payment_index)
            payments = list(person.payments)
            removed = payments.pop(payment_index)
            self._people[idx] = Participant(person.name, person.items, tuple(payments))
        return removed

    def settle(self) -> SettlementResult:
        return compute_settlement(self.snapshot())

    def _check_index(self, person_index: int) -> int:
        if not 0 <= person_index < len(self._people):
            raise ParticipantNotFound(person_index)
        return person_index


def to_amount(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(value)
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidAmount(value) from None
    if not math.isfinite(amount):
        raise InvalidAmount(value)
    return amount
