"""Operations and filters used by the demo script."""

from hookchain import Filterable, operation


class Words(Filterable):
    @operation(desc="Return the word unchanged")
    def shout(self, word: str):
        return word

    def whisper(self, word: str):
        # Opts into filtering from its own body
        return self.hook("whisper", {"word": word}, lambda args: args["word"].lower())


@Words.filter("shout")
def wrap_in_quotes(args, next):
    return f'"{next()}"'


@Words.filter("shout")
def abort_if_pig(args, next):
    if args["word"] == "pig":
        return None
    return next()


@Words.filter("shout")
def append_bang(args, next):
    return next() + "!"
