from .models import Item, Participant, SettlementResult, Transfer
from .settlement import compute_settlement

__all__ = ["Item", "Participant", "SettlementResult", "Transfer", "compute_settlement"]
