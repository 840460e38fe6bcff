"""fieldtree: declarative, recursive field validation and sanitization.

Usage:
    from fieldtree import create_engine, collect_errors, collect_values

    engine = create_engine()
    result = await engine.run(
        {"keys": {"first_name": {"validatorSchemes": [["name"]], "sanitizations": [["trim"]]}}},
        {"first_name": " Jo "},
    )
    collect_errors(result)   # {}
    collect_values(result)   # {"first_name": "Jo"}
"""
__version__ = "0.1.0"

from fieldtree.engine import (
    RuleCall,
    LeafDeclaration,
    GroupDeclaration,
    parse_declaration,
    load_declaration,
    RuleClass,
    RuleRegistry,
    LeafResult,
    GroupResult,
    Engine,
    create_engine,
    get_engine,
    collect_errors,
    collect_values,
)
from fieldtree.core.errors import (
    ConfigurationError,
    UnknownRuleError,
    DeclarationError,
    RuleExecutionError,
    FieldValidationError,
)

__all__ = [
    "__version__",
    "RuleCall",
    "LeafDeclaration",
    "GroupDeclaration",
    "parse_declaration",
    "load_declaration",
    "RuleClass",
    "RuleRegistry",
    "LeafResult",
    "GroupResult",
    "Engine",
    "create_engine",
    "get_engine",
    "collect_errors",
    "collect_values",
    "ConfigurationError",
    "UnknownRuleError",
    "DeclarationError",
    "RuleExecutionError",
    "FieldValidationError",
]
