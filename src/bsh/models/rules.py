from typing import Dict

from pydantic import BaseModel

from bsh.models.schemas import Attributes

class Background(BaseModel):
    name: str = ""
    attributes: Attributes = {}             # Bonuses added to the raw attribute values

class RulesConfiguration(BaseModel):
    """Ruleset tables consulted by attribute derivation."""
    backgrounds: Dict[str, Background] = {}
    attribute_cap: int = 18
