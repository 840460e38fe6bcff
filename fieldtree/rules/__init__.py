"""Built-in rule set

Reference implementations shipped with every engine. Callers extend or
replace them per rule class through ``create_engine(overrides)``.
"""
from fieldtree.rules.validators import VALIDATORS, parse_float
from fieldtree.rules.sanitizers import SANITIZERS
from fieldtree.rules.schemes import VALIDATOR_SCHEMES, SANITIZER_SCHEMES

DEFAULT_RULES = {
    "validators": VALIDATORS,
    "validatorSchemes": VALIDATOR_SCHEMES,
    "sanitizations": SANITIZERS,
    "sanitizationSchemes": SANITIZER_SCHEMES,
}

__all__ = [
    "DEFAULT_RULES",
    "VALIDATORS",
    "VALIDATOR_SCHEMES",
    "SANITIZERS",
    "SANITIZER_SCHEMES",
    "parse_float",
]
