from .modifiers import MODIFIER_CATALOG, Modifier
from .selector import DailyModifierSelector, DailyState

__all__ = ["MODIFIER_CATALOG", "Modifier", "DailyModifierSelector", "DailyState"]
