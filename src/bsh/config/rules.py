import logging
from pathlib import Path

from bsh.models import RulesConfiguration

logger = logging.getLogger(__name__)

def load_rules_configuration(path: Path | str | None = None) -> RulesConfiguration:
    """
    Loads the rules configuration from a JSON file.

    Raises:
        FileNotFoundError: The file does not exist.
        pydantic.ValidationError: The file does not describe a rules configuration.
    """
    if path is None:
        return RulesConfiguration()

    path = Path(path)
    rules = RulesConfiguration.model_validate_json(path.read_text(encoding="utf-8"))
    logger.info("Loaded rules configuration from %s (%d backgrounds)", path, len(rules.backgrounds))
    return rules
