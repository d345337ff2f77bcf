"""Canonical ordering of unordered collections.

Map keys and set members have no natural total order across arbitrary
types, so they are ordered by their own 64-bit digest. Keys whose primary
digests collide are re-digested with the fallback family; if two keys still
clash the collision is reported instead of silently merging them.
"""

import logging
from typing import Any, Callable, Sequence

from .digests import Accumulator
from .exceptions import UnresolvableCollisionError
from .options import HashOptions

logger = logging.getLogger(__name__)

# (value, digest_factory) -> 64-bit digest of value
DigestFn = Callable[[Any, Callable[[], Accumulator]], int]


class MapOrderer:
    """Orders keys by content digest, breaking collisions with a fallback digest."""

    def __init__(self, digest_fn: DigestFn, options: HashOptions):
        self.digest_fn = digest_fn
        self.options = options

    def order(self, keys: Sequence[Any], dedupe: bool = False) -> list[int]:
        """
        Compute the canonical visiting order of keys.

        Args:
            keys: The keys (or set members) to order
            dedupe: Collapse members that match under both digest families
                into one, as set semantics require. Map keys are unique, so
                for maps such a match is a collision.

        Returns:
            Indices into keys, in ascending digest order.

        Raises:
            UnresolvableCollisionError: If two keys collide under the
                primary and the fallback digest
        """
        digests = [self.digest_fn(key, self.options.digest_factory) for key in keys]

        groups: dict[int, list[int]] = {}
        for i, digest in enumerate(digests):
            groups.setdefault(digest, []).append(i)

        colliding = [i for members in groups.values() if len(members) > 1 for i in members]
        if not colliding:
            return sorted(range(len(keys)), key=digests.__getitem__)

        logger.debug("Re-hashing %d colliding keys with fallback digest", len(colliding))

        # digest -> key index; unique keys keep their primary digest
        final: dict[int, int] = {}
        pending: list[tuple[int, int]] = []

        for digest, members in groups.items():
            if len(members) == 1:
                final[digest] = members[0]
                continue

            rehashed: dict[int, int] = {}
            for i in members:
                fallback = self.digest_fn(keys[i], self.options.fallback_digest_factory)
                if fallback in rehashed:
                    if not dedupe:
                        raise UnresolvableCollisionError(keys[i])
                    logger.debug("Dropping duplicate set member %r", keys[i])
                    continue
                rehashed[fallback] = i

            # Duplicates collapsed to one member, which sorts like any unique key
            if len(rehashed) == 1:
                final[digest] = next(iter(rehashed.values()))
            else:
                pending.extend(rehashed.items())

        for fallback, i in pending:
            if fallback in final:
                raise UnresolvableCollisionError(keys[i])
            final[fallback] = i

        return [final[digest] for digest in sorted(final)]
