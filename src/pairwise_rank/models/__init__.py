from .item import Item, Outcome
from .snapshot import ItemState, OutcomeRecord, RatingSnapshot

__all__ = ["Item", "ItemState", "Outcome", "OutcomeRecord", "RatingSnapshot"]
