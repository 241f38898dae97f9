"""
Character attribute derivation.

Raw attribute values are adjusted by background bonuses and by story
improvements, then capped. The result is what every roll-under test is
made against.
"""

from bsh.models import Attribute, Attributes, Character, RulesConfiguration


def calculate_attribute_values(character: Character, rules: RulesConfiguration) -> Attributes:
    """
    Calculates the final values for a character's attributes.

    Unknown background names and unknown attribute choices are ignored.
    """
    calculated = {attribute.value: character.attributes.get(attribute.value, 0) for attribute in Attribute}

    for key in character.backgrounds.keys():
        background = rules.backgrounds.get(key)
        if background is None:
            continue
        for attribute, bonus in background.attributes.items():
            if attribute in calculated:
                calculated[attribute] += bonus

    for story in character.stories.values():
        improvement = story.improvements.attributes if story.improvements else None
        if improvement is None or not improvement.granted:
            continue
        for choice in (improvement.first, improvement.second):
            if choice is not None and choice.choice in calculated:
                calculated[choice.choice] += 1

    return {attribute: min(value, rules.attribute_cap) for attribute, value in calculated.items()}


def calculate_level(character: Character) -> int:
    """A character's level is one plus the number of titled stories."""
    return 1 + sum(1 for story in character.stories.values() if story.title.strip())


def calculate_maximum_hit_points(constitution: int, level: int) -> int:
    if level < 10:
        return constitution + level - 1
    return constitution + 9


def calculate_character_data(character: Character, rules: RulesConfiguration) -> Character:
    """Returns a copy of the character with level, calculated attributes and hit points filled in."""
    level = calculate_level(character)
    calculated = calculate_attribute_values(character, rules)
    return character.model_copy(update={
        "level": level,
        "calculated": calculated,
        "maximum_hit_points": calculate_maximum_hit_points(calculated[Attribute.CONSTITUTION.value], level),
    })
