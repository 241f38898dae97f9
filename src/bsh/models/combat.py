from pydantic import BaseModel

from bsh.models.schemas import CriticalFlag

class Combatant(BaseModel):
    """A participant in an encounter's turn order."""
    id: str
    entity_id: str | None = None            # Controlling entity; unresolvable combatants are skipped
    initiative: int | None = None           # Rank, higher acts sooner
    critical_flag: CriticalFlag | None = None

class InitiativeUpdate(BaseModel):
    """One entry of the batched combatant mutation. critical_flag=None clears the flag."""
    id: str
    rank: int
    critical_flag: CriticalFlag | None = None
