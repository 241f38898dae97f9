# ============================================================
# RULES EXCEPTIONS
# ============================================================

class RulesError(Exception):
    """Base exception for rules resolution errors"""
    pass


class DiceRollError(RulesError):
    """The randomness engine failed to produce a value"""
    pass


class InvalidFormulaError(DiceRollError):
    """A dice formula could not be parsed"""
    pass


class StoreUpdateError(RulesError):
    """The combatant store rejected a batched update as a whole"""
    pass


class StoreLookupError(RulesError):
    """The combatant store failed while reading a combatant or its entity"""
    pass
