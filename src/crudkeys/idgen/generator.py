"""
Identifier generators.

A generator hands out primary keys for new records in place of a database
sequence. The persistence layer calls generate() exactly once per insert,
inside the transaction that performs the insert, and uses the result as
the row's key.

Two strategies are provided:

    RandomIdGenerator   random draw over the positive BIGINT range,
                        verified against storage, bounded retries
    CounterIdGenerator  monotonically increasing per-collection counter,
                        seeded from the largest stored key when storage
                        is available
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

from crudkeys.idgen.errors import GenerationExhausted
from crudkeys.idgen.store import KeyStore

logger = logging.getLogger(__name__)

MIN_ID = 1
MAX_ID = 2**63 - 1


@dataclass(frozen=True)
class GenerationContext:
    """What the persistence layer knows about the insert being keyed."""

    collection: str
    storage: Optional[KeyStore] = None


class IdentifierGenerator(Protocol):
    def generate(self, context: GenerationContext) -> int:
        ...


class RandomIdGenerator:
    """
    Draws keys uniformly from [min_id, max_id] and checks them against storage.

    Each attempt costs one storage.exists() call. A candidate that is already
    taken is discarded and a new one drawn; after max_attempts collisions
    GenerationExhausted is raised.

    Without storage in the context the first draw is returned as is. Uniqueness
    then rests on the size of the key space alone: over the full positive
    BIGINT range the chance of any collision among n keys is about n**2 / 2**64.

    The check only protects the following insert when both run in the same
    transaction under db.lock_collection(), as the repositories do.
    """

    def __init__(
        self,
        max_attempts: int = 10,
        rng: random.Random = None,
        min_id: int = MIN_ID,
        max_id: int = MAX_ID,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not MIN_ID <= min_id <= max_id <= MAX_ID:
            raise ValueError(f"Key range must lie within [{MIN_ID}, {MAX_ID}]")
        self.max_attempts = max_attempts
        self.min_id = min_id
        self.max_id = max_id
        self._rng = rng or random.SystemRandom()

    def _draw(self) -> int:
        return self._rng.randint(self.min_id, self.max_id)

    def generate(self, context: GenerationContext) -> int:
        if context.storage is None:
            return self._draw()

        for attempt in range(1, self.max_attempts + 1):
            candidate = self._draw()
            if not context.storage.exists(context.collection, candidate):
                return candidate
            logger.debug(
                "Key %s already used in %s (attempt %d/%d)",
                candidate,
                context.collection,
                attempt,
                self.max_attempts,
            )

        logger.warning(
            "Gave up generating a key for %s after %d attempts",
            context.collection,
            self.max_attempts,
        )
        raise GenerationExhausted(context.collection, self.max_attempts, "every candidate was taken")


class CounterIdGenerator:
    """
    Hands out increasing keys per collection, starting at `start`.

    Increment-and-read happens under a lock, so concurrent callers in one
    process never see the same value. When storage is available the next
    key is also pushed past the largest stored key, which keeps separate
    processes apart as long as they generate under db.lock_collection().
    """

    def __init__(self, start: int = MIN_ID, max_value: int = MAX_ID):
        if not MIN_ID <= start <= MAX_ID:
            raise ValueError(f"start must lie within [{MIN_ID}, {MAX_ID}]")
        if not start <= max_value <= MAX_ID:
            raise ValueError(f"max_value must lie within [start, {MAX_ID}]")
        self.start = start
        self.max_value = max_value
        self._last: dict[str, int] = {}
        self._lock = threading.Lock()

    def generate(self, context: GenerationContext) -> int:
        with self._lock:
            candidate = self._last.get(context.collection, self.start - 1) + 1

            if context.storage is not None:
                stored = context.storage.max_key(context.collection)
                if stored is not None and stored >= candidate:
                    candidate = stored + 1

            if candidate > self.max_value:
                logger.warning(
                    "Counter for %s passed its maximum %d", context.collection, self.max_value
                )
                raise GenerationExhausted(
                    context.collection, 1, f"counter passed its maximum {self.max_value}"
                )

            self._last[context.collection] = candidate
            return candidate


def build_generator(cfg) -> IdentifierGenerator:
    """
    Build the generator selected by configuration.

    Args:
        cfg: A crudkeys.config.Config (or anything with the same id_* fields)

    Returns:
        A RandomIdGenerator or CounterIdGenerator
    """
    if cfg.id_strategy == "random":
        return RandomIdGenerator(max_attempts=cfg.id_max_attempts)
    if cfg.id_strategy == "counter":
        return CounterIdGenerator(start=cfg.id_counter_start)
    raise ValueError(f"Unknown id strategy {cfg.id_strategy!r}")
