"""
Replicant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- ReplException / ReplWarning: base types that carry a message plus immutable options
  and know how to render themselves with rich (lowercased, short, with a single hint).
- trigger(): central entry point to surface a fault, raising it (library use) or
  rendering it on the stderr console (shell use).

Taxonomy
- ValidationError (registration time, raised by the builders)
  • EmptyNameError, RequiredWithDefaultError, OrderingError,
    DuplicateParameterError, DuplicateCommandError
- DispatchError (per line, raised by Repl.process_line; never ends the session)
  • ParseError (tokenization)
  • BindingError: MissingArgumentError, TooManyArgumentsError
  • ConversionError (Value.convert)
  • UnknownCommandError
  • HandlerError (anything a handler raised that is not already a fault)
- SessionExit: control flow, ends the session loop.
- ReplWarning: LateRegistrationWarning.

Integration
- Every fault carries at least "title", "code" and "hint" options; fault specific
  context (command, parameter, literal, ...) travels in the same mapping.
- Rendering options ("app", "colorful", "fancy", "ratio") are merged later through
  copy.replace(fault, **options); the original fault is never mutated.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - registration (1100x)
      • EMPTY_NAME, REQUIRED_WITH_DEFAULT, ORDERING, DUPLICATE_PARAMETER, DUPLICATE_COMMAND
    - routing (1110x)
      • UNKNOWN_COMMAND
    - tokenizing (1111x)
      • UNTERMINATED_QUOTE
    - binding (1112x)
      • MISSING_ARGUMENT, TOO_MANY_ARGUMENTS
    - conversion (1113x)
      • CONVERSION_FAILED
    - delegated (1114x)
      • HANDLER_ERROR
    - warnings (12xxx)
      • LATE_REGISTRATION

    spacing leaves room for additions without reshuffling existing codes.
    """
    # --- registration errors (110xx) ---
    EMPTY_NAME            = 11001
    REQUIRED_WITH_DEFAULT = 11002
    ORDERING              = 11003
    DUPLICATE_PARAMETER   = 11004
    DUPLICATE_COMMAND     = 11005

    # --- routing errors (1110x) ---
    UNKNOWN_COMMAND       = 11101

    # --- tokenizing errors (1111x) ---
    UNTERMINATED_QUOTE    = 11111

    # --- binding errors (1112x) ---
    MISSING_ARGUMENT      = 11121
    TOO_MANY_ARGUMENTS    = 11122

    # --- conversion errors (1113x) ---
    CONVERSION_FAILED     = 11131

    # --- delegated errors (1114x) ---
    HANDLER_ERROR         = 11141

    # --- warnings (12xxx) ---
    LATE_REGISTRATION     = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. without one, the numeric
        value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    Build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ app — code | title ]"
    - body: message
    - hint: " → hint"
    fancy wraps body and hint in a Panel titled by the header.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    app = text(options.get("app", getattr(main, "__prog__", "replicant")), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        app,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
        " | ",
        text(str(options.get("title", "fault")).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*renders), title=header, title_align="left", width=width)

    return Group(header, *renders)


class ReplException(Exception):
    """
    base class of every fault the library raises.

    - message: one short, lowercased sentence.
    - options: read-only mapping with "title", "code", "hint" and fault specific
      context (e.g. "command", "parameter", "literal").
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else str(self.options.get("title", ""))

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class ValidationError(ReplException): ...
class EmptyNameError(ValidationError): ...
class RequiredWithDefaultError(ValidationError): ...
class OrderingError(ValidationError): ...
class DuplicateParameterError(ValidationError): ...
class DuplicateCommandError(ValidationError): ...

class DispatchError(ReplException): ...
class ParseError(DispatchError): ...
class BindingError(DispatchError): ...
class MissingArgumentError(BindingError): ...
class TooManyArgumentsError(BindingError): ...
class ConversionError(DispatchError): ...
class UnknownCommandError(DispatchError): ...
class HandlerError(DispatchError): ...


class SessionExit(Exception):
    """
    raised (by the synthesized quit command or by any handler) to end the session loop.
    """


class ReplWarning(Warning):
    """
    base class for advisory conditions; emitted through the warnings module.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else str(self.options.get("title", ""))

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class LateRegistrationWarning(ReplWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via copy.replace before triggering.
    - with shell=True faults are rendered on the stderr console; otherwise errors
      are raised and warnings are emitted through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ReplException",
    "ValidationError",
    "EmptyNameError",
    "RequiredWithDefaultError",
    "OrderingError",
    "DuplicateParameterError",
    "DuplicateCommandError",
    "DispatchError",
    "ParseError",
    "BindingError",
    "MissingArgumentError",
    "TooManyArgumentsError",
    "ConversionError",
    "UnknownCommandError",
    "HandlerError",
    "SessionExit",
    "ReplWarning",
    "LateRegistrationWarning",
    "trigger",
)
