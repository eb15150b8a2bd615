"""My very cool app"""
from collections import deque

from replicant import *

__prog__ = "MyApp"
__version__ = "v0.1.0"

repl = Repl(deque(), colorful=True)


@repl.command("add", Parameter("first", required=True), Parameter("second", required=True))
def add(arguments, context):
    """Add two numbers together"""
    return str(arguments["first"].convert(int) + arguments["second"].convert(int))


@repl.command("hello", Parameter("who", required=True))
def hello(arguments, context):
    """Greetings!"""
    return f"Hello, {arguments['who']}"


@repl.command("append", Parameter("names", required=True, variadic=True, help="names to add"))
def append(arguments, context):
    """Append names to the end of the list"""
    context.extend(arguments["names"].convert(list))
    return ", ".join(context)


@repl.command("prepend", Parameter("name", required=True))
def prepend(arguments, context):
    """Prepend a name to the front of the list"""
    context.appendleft(arguments["name"].convert(str))
    return ", ".join(context)


if __name__ == '__main__':
    repl.run()
