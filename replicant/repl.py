"""
Replicant registry, dispatcher and session loop.

What this module provides
- Repl: owns the commands and the host context.
  • add_command()/command(): registration (duplicates rejected).
  • process_line(): tokenize → look up → bind → call the handler → output.
  • run(): the interactive loop (banner, prompt, output, error reporting).
  • Synthesized commands: 'help [command]' and, unless disabled, 'quit'.
- Line readers: any object with readline(prompt) -> str raising EOFError at end
  of input and KeyboardInterrupt on interrupt.
  • PromptReader: prompt_toolkit session with history and command completion.
  • StreamReader: reads from a text stream (scripts, pipes, tests).
- CommandCompleter: prompt_toolkit completer over the registered command names.

Session rules
- Per-line faults (parse, unknown command, binding, conversion, handler) never end
  the loop; they go to 'onerror' (by default rendered on the error console).
- End of input, SessionExit (the 'quit' command) and, with interrupt="exit", an
  interrupt end the loop. With interrupt="continue" an interrupt drops the line.
- The registry is sealed when run() starts. Registering afterwards still works
  but emits LateRegistrationWarning.

Quick start
    from replicant import Repl, Parameter

    repl = Repl(name="MyApp", version="v0.1.0", description="My very cool app")

    @repl.command("hello", Parameter("who", required=True), help="Greetings!")
    def hello(arguments, context):
        return f"Hello, {arguments['who']}"

    if __name__ == "__main__":
        repl.run()
"""
import copy
import difflib
import inspect
import os.path
import sys
from types import MappingProxyType

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.text import Text

from . import faults
from .binding import bind
from .commands import Command, command
from .faults import (
    DuplicateCommandError,
    UnknownCommandError,
    HandlerError,
    LateRegistrationWarning,
    ReplException,
    SessionExit,
    FaultCode,
    trigger,
)
from .help import HelpContext, HelpEntry, DefaultHelpViewer
from .parameters import Parameter
from .tokens import tokenize
from .utils import Unset, Introspectable, coalesce


class StreamReader:
    """
    Line reader over a text stream; the prompt is ignored.
    """

    def __init__(self, stream=Unset, /):
        self.stream = coalesce(stream, sys.stdin)

    def readline(self, prompt, /):
        if not (line := self.stream.readline()):
            raise EOFError
        return line.rstrip("\r\n")


class CommandCompleter(Completer):
    """
    Complete the command word, and the command name after 'help'.
    """

    def __init__(self, repl, /):
        self.repl = repl

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor.lstrip()
        words = text.split()
        if not text or text[-1].isspace():
            words.append("")

        if len(words) == 1 or (len(words) == 2 and words[0] == "help"):
            word = words[-1]
            for name, command in self.repl.commands.items():
                if name.startswith(word):
                    yield Completion(
                        name,
                        start_position=-len(word),
                        display=name,
                        display_meta=str(command.help or ""),
                    )


class PromptReader:
    """
    Interactive line reader backed by a prompt_toolkit PromptSession.

    The session is created on first use so constructing a Repl never touches the
    terminal. History lives in memory for the lifetime of the reader.
    """

    def __init__(self, completer=None, /):
        self.completer = completer
        self.session = None

    def readline(self, prompt, /):
        if self.session is None:
            self.session = PromptSession(
                history=InMemoryHistory(),
                completer=self.completer,
                complete_while_typing=False,
            )
        return self.session.prompt(prompt)


def default_error_handler(fault, repl, /):
    repl.report(fault)


class Repl(metaclass=Introspectable):
    """
    Command registry, dispatcher and interactive session.

    Properties (read-only)
    - name, version, description: metadata shown by the banner and 'help'.
    - commands: ordered mapping of name to Command (registration order).
    - context: the host object lent to every handler call.
    - sealed: True once run() (or seal()) was called.
    - colorful, fancy: rendering flags.
    - interrupt: "continue" or "exit".
    """
    __introspectable__ = ("name", "version", "description", "commands", "sealed", "colorful", "fancy", "interrupt")
    __displayable__ = ("name", "version", "description", "commands", "sealed")

    def __init__(
            self,
            context=None,
            /,
            # ── Identity (banner + help header) ─────────────────────────────────────
            name=Unset,
            version=Unset,
            description=Unset,
            # ── Session chrome ──────────────────────────────────────────────────────
            prompt=Unset,
            banner=Unset,
            quit=Unset,
            *,
            # ── Runtime flags ───────────────────────────────────────────────────────
            colorful=Unset,
            fancy=Unset,
            interrupt="continue",
            completion=True,
            # ── Collaborators ───────────────────────────────────────────────────────
            reader=Unset,
            viewer=Unset,
            onerror=Unset,
            console=Unset,
            errconsole=Unset,
    ):
        """
        Parameters
        - context: any object; handlers receive it as their second argument.
        - name: defaults to __prog__ in __main__, then the basename of sys.argv[0].
        - version: defaults to __version__ in __main__ (or "").
        - description: defaults to the first line of __main__'s docstring (or "").
        - prompt: str or prompt_toolkit formatted text; defaults to "{name}> "
          (bold green when colorful).
        - banner: printed when run() starts; defaults to "Welcome to {name} {version}";
          None disables it.
        - quit: name of the synthesized quit command ("quit"); None disables it.
        - colorful, fancy: rendering flags (default False).
        - interrupt: "continue" drops the current line, "exit" ends the session.
        - completion: offer command-name completion in the default reader.
        - reader: line reader (default PromptReader).
        - viewer: help renderer (default DefaultHelpViewer).
        - onerror: callable(fault, repl) for per-line faults (default: repl.report).
        - console, errconsole: rich consoles for output and faults.

        Raises
        - TypeError/ValueError on invalid metadata or flags.
        """
        main = __import__("__main__")

        metadata = {
            "name": coalesce(name, getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "replicant")),
            "version": coalesce(version, getattr(main, "__version__", "")),
            "description": coalesce(description, (inspect.getdoc(main) or "").partition("\n")[0]),
        }
        for field, value in metadata.items():
            if not isinstance(value, str):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")
            metadata[field] = value.strip()
        if not metadata["name"]:
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")

        if interrupt not in ("continue", "exit"):
            raise ValueError(f"{type(self).__typename__} 'interrupt' must be 'continue' or 'exit'")

        self._name = metadata["name"]
        self._version = metadata["version"]
        self._description = metadata["description"]
        self._context = context
        self._commands = {}
        self._sealed = False
        self._colorful = bool(coalesce(colorful, False))
        self._fancy = bool(coalesce(fancy, False))
        self._interrupt = interrupt

        if prompt is Unset:
            prompt = f"{self._name}> "
            if self._colorful:
                prompt = FormattedText([("ansigreen bold", prompt)])
        self._prompt = prompt
        self._banner = coalesce(banner, " ".join(filter(None, ("Welcome to", self._name, self._version))))

        self._reader = coalesce(reader, PromptReader(CommandCompleter(self) if completion else None))
        self._viewer = coalesce(viewer, DefaultHelpViewer(colorful=self._colorful))
        self._onerror = coalesce(onerror, default_error_handler)
        self._console = coalesce(console, Console())
        self._errconsole = coalesce(errconsole, faults.console)

        self.add_command(Command(
            "help",
            self._helper,
            Parameter("command", help="command to describe"),
            help="list the commands, or describe one",
        ))
        if (quit := coalesce(quit, "quit")) is not None:
            self.add_command(Command(quit, self._quitter, help="end the session"))

    @property
    def context(self):
        return self._context

    @property
    def helpcontext(self):
        """
        HelpContext snapshot of the registry, rebuilt on every access.
        """
        return HelpContext(
            self._name,
            self._version,
            self._description,
            tuple(map(HelpEntry.of, self._commands.values())),
        )

    def _helper(self, arguments, context):
        return self._viewer.help(arguments["command"].literal if "command" in arguments else None, self.helpcontext)

    def _quitter(self, arguments, context):
        raise SessionExit

    def seal(self):
        """
        Enter the sealed phase; later registrations emit LateRegistrationWarning.
        """
        self._sealed = True
        return self

    def add_command(self, command, /):
        """
        Register 'command' under its name and return the repl for chaining.

        Raises
        - DuplicateCommandError: the name is taken (the registry is left unchanged).
        - TypeError: 'command' is not a Command.
        """
        if not isinstance(command, Command):
            raise TypeError(f"{type(self).__typename__} can only register command instances")

        if command.name in self._commands:
            raise DuplicateCommandError(
                f"a command named {command.name!r} is already registered",
                title="duplicate command",
                code=FaultCode.DUPLICATE_COMMAND,
                hint="pick another name; 'help' is reserved by the repl",
                command=command.name,
            )

        if self._sealed:
            trigger(LateRegistrationWarning(
                f"command {command.name!r} was registered after the session started",
                title="late registration",
                code=FaultCode.LATE_REGISTRATION,
                hint="register every command before calling run()",
                command=command.name,
            ))

        self._commands[command.name] = command
        return self

    def command(self, name=Unset, /, *parameters, help=Unset):
        """
        Decorator form of add_command (see replicant.commands.command).

        Returns the registered Command.
        """
        decorator = command(name, *parameters, help=help)

        def wrapper(callback, /):
            self.add_command(created := decorator(callback))
            return created

        return wrapper

    def process_line(self, line, /):
        """
        Process one input line and return the handler's output.

        Returns
        - str | Text: output to print.
        - None: nothing to print (also for blank lines).

        Raises
        - ParseError, UnknownCommandError, MissingArgumentError,
          TooManyArgumentsError, ConversionError, HandlerError (all DispatchError).
        - SessionExit when the handler ends the session.
        """
        if not (tokens := tokenize(line)):
            return None

        name, *tokens = tokens
        try:
            command = self._commands[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, self._commands.keys(), 1)
            try:
                hint = "did you mean %r? type 'help' to list the available commands" % suggestions[0]
            except IndexError:
                hint = "type 'help' to list the available commands"
            raise UnknownCommandError(
                f"unknown command {name!r}",
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                hint=hint,
                command=name,
            ) from None

        arguments = MappingProxyType(bind(command, tokens))

        try:
            output = command(arguments, self._context)
        except (ReplException, SessionExit):
            raise
        except Exception as exception:
            raise HandlerError(
                f"command {name!r} failed: {str(exception) or type(exception).__name__}",
                title="handler error",
                code=FaultCode.HANDLER_ERROR,
                hint=f"usage: {command.usage}",
                command=name,
                exception=exception,
            ) from exception

        if output is not None and not isinstance(output, str | Text):
            raise HandlerError(
                f"command {name!r} returned {type(output).__name__}, expected a string or None",
                title="handler error",
                code=FaultCode.HANDLER_ERROR,
                hint="return text to print it, or None to print nothing",
                command=name,
            )
        return output

    def report(self, fault, /):
        """
        Render 'fault' on the error console with this repl's options.
        """
        self._errconsole.print(copy.replace(fault, app=self._name, colorful=self._colorful, fancy=self._fancy))

    def run(self):
        """
        Seal the registry, print the banner and loop until the session ends.

        Exceptions raised by 'onerror' or by the reader (other than EOFError and
        KeyboardInterrupt) propagate to the caller.
        """
        self.seal()
        if self._banner:
            self._console.print(self._banner, markup=False, highlight=False)

        while True:
            try:
                line = self._reader.readline(self._prompt)
            except EOFError:
                break
            except KeyboardInterrupt:
                if self._interrupt == "exit":
                    break
                continue

            try:
                output = self.process_line(line)
            except SessionExit:
                break
            except ReplException as fault:
                self._onerror(fault, self)
                continue

            if output is not None:
                self._console.print(output, markup=False, highlight=False)


__all__ = (
    "Repl",
    "PromptReader",
    "StreamReader",
    "CommandCompleter",
    "default_error_handler",
)
