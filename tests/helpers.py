"""Filters shared by several test modules."""


def wrap_in_quotes(args, next):
    return f'"{next()}"'


def append_bang(args, next):
    return next() + "!"


def abort_if_pig(args, next):
    if args["word"] == "pig":
        return None
    return next()


def strip_word(args, next):
    args["word"] = args["word"].strip()
    return next()


async def async_append_bang(args, next):
    return (await next()) + "!"


async def async_wrap_in_quotes(args, next):
    return f'"{await next()}"'
