from fieldtree.engine.declaration import (
    RuleCall,
    LeafDeclaration,
    GroupDeclaration,
    parse_declaration,
    load_declaration,
)
from fieldtree.engine.registry import RuleClass, RuleRegistry
from fieldtree.engine.results import LeafResult, GroupResult
from fieldtree.engine.runtime import Engine, create_engine, get_engine
from fieldtree.engine.extract import collect_errors, collect_values

__all__ = [
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
]
