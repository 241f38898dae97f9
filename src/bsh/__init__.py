"""Black Sword Hack rules resolution: attributes, dice formulas, tests and initiative."""

__version__ = "0.1.0"
