from bsh.config.settings import Settings, settings
from bsh.config.rules import load_rules_configuration

__all__ = [
    'Settings',
    'settings',
    'load_rules_configuration',
]
