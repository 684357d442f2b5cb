"""Filter that trims whitespace from the ``word`` argument."""


def strip_word(args, next):
    args["word"] = args["word"].strip()
    return next(args)
