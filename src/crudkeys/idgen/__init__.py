"""
Identifier generation

This package provides pluggable primary-key generators and the storage
lookups they use to avoid handing out a key that is already taken.
"""

from crudkeys.idgen.errors import GenerationError, GenerationExhausted
from crudkeys.idgen.generator import (
    CounterIdGenerator,
    GenerationContext,
    IdentifierGenerator,
    RandomIdGenerator,
    build_generator,
)
from crudkeys.idgen.store import KeyStore, PostgresKeyStore

__all__ = [
    "CounterIdGenerator",
    "GenerationContext",
    "GenerationError",
    "GenerationExhausted",
    "IdentifierGenerator",
    "KeyStore",
    "PostgresKeyStore",
    "RandomIdGenerator",
    "build_generator",
]
