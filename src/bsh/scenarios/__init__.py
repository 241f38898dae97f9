from bsh.scenarios.sample_encounter import create_sample_encounter

__all__ = ['create_sample_encounter']
