"""
Replicant command layer: named handlers with ordered, validated parameters.

What this module provides
- Command: binds an ordered sequence of Parameters to a handler callable.
  • add_parameter() enforces the ordering rules the moment a parameter is added.
  • usage renders "name first [second] [rest...]" for the help command.
- command(...): decorator factory building a Command from a plain function.

Handler contract
    def handler(arguments, context):
        ...
- arguments: read-only mapping of parameter name to Value, holding exactly the
  parameters the binder resolved (required ones always; optional ones only when
  supplied or defaulted; variadic ones as a sequence Value).
- context: the host-owned object lent by the Repl for the duration of the call.
- returns: str | rich.text.Text to print, or None to print nothing.
- raising: faults from replicant.faults propagate as they are; anything else is
  reported by the Repl as a HandlerError.

Ordering rules (checked by add_parameter, never deferred to dispatch time)
- required parameters must precede optional ones (OrderingError).
- nothing may follow a variadic parameter (OrderingError).
- names are unique within a command (DuplicateParameterError).
A parameter rejected by any of these checks is not added and stays mutable.

Quick start
    from replicant import command, Parameter

    @command("add", Parameter("first", required=True), Parameter("second", required=True))
    def add(arguments, context):
        "Add two numbers together"
        return str(arguments["first"].convert(int) + arguments["second"].convert(int))
"""
import inspect
import re

from rich.text import Text

from .faults import EmptyNameError, OrderingError, DuplicateParameterError, FaultCode
from .parameters import Parameter
from .utils import Unset, Introspectable, coalesce, rename


class Command(metaclass=Introspectable):
    """
    A named, documented unit binding ordered Parameters to a handler.

    Properties (read-only)
    - name: str (non-empty, no whitespace)
    - parameters: tuple[Parameter, ...] in declaration order
    - help: str | Text | None
    - callback: the handler callable
    - usage: str
    """
    __introspectable__ = ("name", "parameters", "help", "callback")
    __displayable__ = ("name", "parameters", "help")

    def __init__(self, name, callback, /, *parameters, help=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not name.strip():
            raise EmptyNameError(
                f"{type(self).__typename__} names cannot be empty",
                title="empty name",
                code=FaultCode.EMPTY_NAME,
                hint="give every command the word users will type to run it",
            )
        elif re.search(r"\s", name):
            raise ValueError(f"{type(self).__typename__} names cannot contain whitespace")

        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")

        self._name = name
        self._callback = callback
        self._parameters = []
        self._help = None

        for parameter in parameters:
            self.add_parameter(parameter)
        if help is not Unset:
            self.set_help(help)

    def add_parameter(self, parameter, /):
        """
        Append a parameter after the ones already declared.

        Raises
        - OrderingError: a required parameter after an optional one, or any
          parameter after a variadic one.
        - DuplicateParameterError: the name is already declared on this command.
        - TypeError: the argument is not a Parameter.

        On success the parameter is frozen and the command is returned for chaining.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError(f"{type(self).__typename__} parameters must be parameter instances")

        if any(existing.name == parameter.name for existing in self._parameters):
            raise DuplicateParameterError(
                f"command {self._name!r} already has a parameter named {parameter.name!r}",
                title="duplicate parameter",
                code=FaultCode.DUPLICATE_PARAMETER,
                hint="parameter names must be unique within a command",
                command=self._name,
                parameter=parameter.name,
            )

        if self._parameters and self._parameters[-1].variadic:
            raise OrderingError(
                f"parameter {parameter.name!r} cannot follow variadic parameter {self._parameters[-1].name!r}",
                title="ordering error",
                code=FaultCode.ORDERING,
                hint="a variadic parameter must be the last one of its command",
                command=self._name,
                parameter=parameter.name,
            )

        if parameter.required and any(not existing.required for existing in self._parameters):
            raise OrderingError(
                f"required parameter {parameter.name!r} cannot follow an optional parameter",
                title="ordering error",
                code=FaultCode.ORDERING,
                hint="declare every required parameter before the optional ones",
                command=self._name,
                parameter=parameter.name,
            )

        self._parameters.append(parameter._freeze())
        return self

    def set_help(self, help, /):
        """
        Set the one-line description listed by 'help'; None clears it.
        """
        if help is not None and not isinstance(help, str | Text):
            raise TypeError(f"{type(self).__typename__} 'help' must be a string")
        elif isinstance(help, str) and not (help := help.strip()):
            raise ValueError(f"{type(self).__typename__} 'help' cannot be empty")
        self._help = help
        return self

    @property
    def usage(self):
        return " ".join([self._name, *(parameter.usage for parameter in self._parameters)])

    def __call__(self, arguments, context=None, /):
        return self._callback(arguments, context)


def command(name=Unset, /, *parameters, help=Unset):
    """
    Create a decorator that turns a handler function into a Command.

    Parameters
    - name: str | Unset
      Word that runs the command; defaults to the function's __name__.
    - *parameters: Parameter
      Declared in order through Command.add_parameter (same validation).
    - help: str | Text | None | Unset
      Defaults to the first line of the function's docstring.

    Usage
        @command()
        def ping(arguments, context):
            "Answer with pong"
            return "pong"

    Returns
    - Callable[[Callable], Command]
    """
    if callable(name):
        raise TypeError("@command() must be called before decorating, e.g. @command()")

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        summary = (inspect.getdoc(callback) or "").strip().partition("\n")[0]
        return Command(
            coalesce(name, getattr(callback, "__name__", "")),
            callback,
            *parameters,
            help=coalesce(help, summary or None),
        )

    return wrapper


__all__ = (
    "Command",
    "command",
)
