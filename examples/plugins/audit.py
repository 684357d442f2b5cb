"""Audit extension: log every call to the words demo's operations."""

import logging

from hookchain import FilterRegistry

logger = logging.getLogger(__name__)


def audit(args, next):
    logger.info("-> %s(%s)", args["_method"], args.params())
    result = next()
    logger.info("<- %s = %r", args["_method"], result)
    return result


def setup(registry: FilterRegistry):
    from words import Words

    for name in ("shout", "whisper"):
        registry.register(Words, name, audit)
