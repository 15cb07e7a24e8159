"""Settlement core: balances, the totals check and greedy debt matching.

Every function here is pure. ``compute_settlement`` copies its input into
immutable participants on entry and never touches the caller's ledger.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List

from .errors import LedgerImbalance
from .models import Balances, Participant, SettlementResult, Transfer, freeze_all

logger = logging.getLogger(__name__)

# Largest accepted gap between total spent and total paid, in currency units.
TOTALS_TOLERANCE = 0.01

# Remaining amounts at or below this are treated as fully settled.
ZERO_EPSILON = 1e-9


def aggregate_balances(participants: Iterable[Participant]) -> Balances:
    by_name: Dict[str, float] = {}
    total_spent = 0.0
    total_paid = 0.0

    for participant in participants:
        spent = sum(item.value for item in participant.items)
        paid = sum(participant.payments)
        # Same-named participants share one balance so the totals still close.
        by_name[participant.name] = by_name.get(participant.name, 0.0) + (paid - spent)
        total_spent += spent
        total_paid += paid

    return Balances(by_name=by_name, total_spent=total_spent, total_paid=total_paid)


def check_totals(total_spent: float, total_paid: float, tolerance: float = TOTALS_TOLERANCE) -> None:
    # Overflowed sums leave inf or nan behind, which never compare as closed.
    if not abs(total_spent - total_paid) <= tolerance:
        logger.warning(
            "Ledger does not balance: spent=%.6f paid=%.6f", total_spent, total_paid
        )
        raise LedgerImbalance(total_spent, total_paid)


def match_debts(balances: Dict[str, float]) -> List[Transfer]:
    creditors = []
    debtors = []

    for name, amount in balances.items():
        if not math.isfinite(amount):
            continue
        if amount > ZERO_EPSILON:
            creditors.append({"name": name, "amount": amount})
        elif amount < -ZERO_EPSILON:
            debtors.append({"name": name, "amount": -amount})

    # sorted() is stable, so equal amounts keep ledger order
    creditors = sorted(creditors, key=lambda entry: entry["amount"], reverse=True)
    debtors = sorted(debtors, key=lambda entry: entry["amount"], reverse=True)

    transfers: List[Transfer] = []
    creditor_idx = 0
    debtor_idx = 0

    while creditor_idx < len(creditors) and debtor_idx < len(debtors):
        creditor = creditors[creditor_idx]
        debtor = debtors[debtor_idx]

        settled_amount = min(creditor["amount"], debtor["amount"])
        transfers.append(Transfer(from_name=debtor["name"], to_name=creditor["name"], amount=settled_amount))

        creditor["amount"] -= settled_amount
        debtor["amount"] -= settled_amount

        if creditor["amount"] <= ZERO_EPSILON:
            creditor["amount"] = 0.0
            creditor_idx += 1
        if debtor["amount"] <= ZERO_EPSILON:
            debtor["amount"] = 0.0
            debtor_idx += 1

    return transfers


def compute_settlement(participants: Iterable[Any]) -> SettlementResult:
    """Settle a ledger snapshot.

    ``participants`` may hold :class:`Participant` objects, anything with
    ``name``/``items``/``payments`` attributes, or plain mappings of the same
    shape. Returns a result carrying either the transfer list or the
    "Totals do not match" error.
    """
    snapshot = freeze_all(participants)
    balances = aggregate_balances(snapshot)
    logger.debug(
        "Aggregated %d participants: spent=%.6f paid=%.6f",
        len(snapshot),
        balances.total_spent,
        balances.total_paid,
    )

    try:
        check_totals(balances.total_spent, balances.total_paid)
    except LedgerImbalance as exc:
        return SettlementResult(error=exc.message)

    transfers = match_debts(balances.by_name)
    logger.debug("Settled ledger with %d transfers", len(transfers))
    return SettlementResult(transfers=transfers)
