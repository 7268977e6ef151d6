from .ledger import ProgressionLedger, ProgressState
from .unlocks import UnlockRegistry
from .xp_curve import MAX_LEVEL, requirement

__all__ = ["ProgressionLedger", "ProgressState", "UnlockRegistry", "MAX_LEVEL", "requirement"]
