"""Demo entry point: cd examples && python demo.py"""

import logging

from hookchain import HookConfig, apply_config, configure_logging

from words import Words

logger = logging.getLogger("demo")


def main() -> None:
    config = HookConfig.load("config.yaml")
    configure_logging(config)
    apply_config(config)

    words = Words()
    logger.info("shout('Hi') -> %s", words("shout", "Hi"))
    logger.info("shout('pig') -> %s", words("shout", "pig"))
    logger.info("whisper('  HEY ') -> %s", words.whisper("  HEY "))
    logger.info("sing('la') -> %r", words("sing", "la"))


if __name__ == "__main__":
    main()
