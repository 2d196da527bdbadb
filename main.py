from rich.pretty import pprint

from boa import *

__prog__ = "boa-demo"

table = {
    "name": Item("name", kind=Kind.STRING, arity=-1, default="James", children=["--first"]),
    "-a": Item("-a", kind=Kind.BOOL, ordinal=1),
    "-b": Item("-b", kind=Kind.BOOL, ordinal=2),
    "-c": Item("-c", kind=Kind.INT, arity=-1, default="999", ordinal=3),
    "--topping": Item("--topping", kind=Kind.STRING, arity=1, ordinal=4),
}


if __name__ == '__main__':
    result = parse(table, ["name", "--first", "Jimmy", "-abc", "--", "--topping=choc"], application="demo")
    pprint(result)
    pprint(result.items)
    result.surface(shell=True)
