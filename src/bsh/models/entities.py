from typing import Annotated, Dict, Literal, Union

from pydantic import BaseModel, Field

from bsh.models.schemas import Attributes, Die, WeaponType

# ============================================================
# CHARACTER SHEET PARTS
# ============================================================
class Backgrounds(BaseModel):
    """Background names. A name may be namespaced as 'prefix#key'."""
    first: str = ""
    second: str = ""
    third: str = ""

    def keys(self) -> list[str]:
        return [name.split('#')[-1] for name in (self.first, self.second, self.third)]

class AttributeChoice(BaseModel):
    choice: str

class AttributeImprovement(BaseModel):
    granted: bool = False
    first: AttributeChoice | None = None
    second: AttributeChoice | None = None

class StoryImprovements(BaseModel):
    attributes: AttributeImprovement | None = None

class Story(BaseModel):
    title: str = ""
    improvements: StoryImprovements | None = None

class DamageDice(BaseModel):
    armed: Die = Die.D6
    unarmed: Die = Die.D4

class Armour(BaseModel):
    shield: bool = False

# ============================================================
# ENTITIES
# ============================================================
class Character(BaseModel):
    """A player character."""
    kind: Literal["character"] = "character"         # EntityKind.CHARACTER
    id: str
    name: str
    level: int = 1
    attributes: Attributes
    calculated: Attributes | None = None    # Cached derivation, filled by calculate_character_data
    maximum_hit_points: int | None = None
    backgrounds: Backgrounds = Field(default_factory=Backgrounds)
    stories: Dict[str, Story] = {}
    doom: Die = Die.D6
    damage_dice: DamageDice = Field(default_factory=DamageDice)
    armour: Armour = Field(default_factory=Armour)

    @property
    def doomed(self) -> bool:
        return self.doom == Die.EXHAUSTED

class Creature(BaseModel):
    """A monster or NPC. Creatures never roll initiative."""
    kind: Literal["creature"] = "creature"           # EntityKind.CREATURE
    id: str
    name: str
    level: int = 1
    attributes: Attributes = {}

Entity = Annotated[Union[Character, Creature], Field(discriminator="kind")]

class Weapon(BaseModel):
    id: str
    name: str
    type: WeaponType = WeaponType.MELEE
    hands: int = 1
