"""
In-memory, read-only set of rate cards handed to the engine.

At most one active card per (service_id, card_type); a second one is
rejected when the book is built.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import CardStateError
from .models import RateCard


class RateCardBook:

    def __init__(self, cards: Iterable[RateCard] = ()):
        self._by_id: Dict[str, RateCard] = {}
        self._active: Dict[Tuple[str, str], RateCard] = {}
        for card in cards:
            self._add(card)

    def _add(self, card: RateCard):
        if card.id in self._by_id:
            raise ValueError(f"duplicate rate card id {card.id}")
        if card.is_active:
            key = (card.service_id, card.card_type)
            if key in self._active:
                raise ValueError(f"service {card.service_id} already has an active {card.card_type} "
                                 f"card ({self._active[key].id}); {card.id} must not be active too")
            self._active[key] = card
        self._by_id[card.id] = card

    def __len__(self):
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())

    def get(self, card_id) -> Optional[RateCard]:
        return self._by_id.get(str(card_id or "").strip())

    def require(self, card_id) -> RateCard:
        card = self.get(card_id)
        if card is None:
            raise CardStateError(f"rate card {card_id} not found", stage="card",
                                 details={"cardId": card_id, "reason": "not_found"})
        return card

    def active_for(self, service_id: str, card_type: str) -> RateCard:
        card = self._active.get((service_id, card_type))
        if card is None:
            raise CardStateError(f"service {service_id} has no active {card_type} card",
                                 stage="card", details={"serviceId": service_id, "cardType": card_type})
        return card

    def list(self, service_id: Optional[str] = None) -> List[RateCard]:
        return [c for c in self._by_id.values() if service_id is None or c.service_id == service_id]
