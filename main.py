import enum

from rich.pretty import pprint

from argot import *


class Level(enum.Enum):
    quiet = 0
    normal = 1
    loud = 2


options = Options(
    "greet",
    "1.0",
    "Says hello to everybody listed on the command line.",
    "Names can also be given without an option.",
    auto_help=True,
    colorful=None,
)
options.add("greeting", "g", "Greeting to use", default="Hello", pattern=r"[A-Z]\w*")
options.add("times", "t", "How many times to greet", type=uint, default=1)
options.add("level", "l", "Output level", type=Level, default=Level.normal)
options.add("shout", "s", "Upper-case the output", type=bool)
options.add("names", "n", "People to greet", multiple=True, anonymous=True)


if __name__ == '__main__':
    if options.run():
        pprint(dict(options.values))
