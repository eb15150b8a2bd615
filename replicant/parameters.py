r"""
Replicant parameter declarations.

Overview
- Parameter: a named, positional slot a Command expects an argument for.
  • required: the binder fails when no token is left for it.
  • default: Value bound when no token is left (optional parameters only).
  • variadic: absorbs every remaining token as a sequence Value (last parameter only).
  • help: short description shown by the synthesized help command.

Building
- Chained setters validate incrementally, so the call that introduces a conflict
  is the call that fails:
      >>> Parameter("who").set_required(True).set_help("who to greet")
- The constructor accepts the same fields as keywords and applies them in the
  same order (required, default, variadic, help), with the same checks:
      >>> Parameter("count", default=1, help="how many times")

Lifecycle
- A Parameter is mutable until Command.add_parameter accepts it; from then on it
  is frozen and every setter raises TypeError. This keeps the command's ordering
  invariants (required before optional, variadic last) true for its whole life.

Validation highlights
- name: string, non-empty (EmptyNameError otherwise) and without surrounding
  whitespace (ValueError otherwise).
- required=True together with a default raises RequiredWithDefaultError, in
  whichever order the two are set.
- help: string, non-empty after trimming, or None to clear it.
"""
from rich.text import Text

from .faults import EmptyNameError, RequiredWithDefaultError, FaultCode
from .utils import Unset, Introspectable
from .values import Value


class Parameter(metaclass=Introspectable):
    """
    Validating builder for one positional parameter.

    Properties (read-only)
    - name: str
    - required: bool (False unless set)
    - default: Value | None
    - variadic: bool
    - help: str | Text | None
    - frozen: bool (True once owned by a command)
    """
    __introspectable__ = ("name", "required", "default", "variadic", "help", "frozen")
    __displayable__ = ("name", "required", "default", "variadic", "help")

    def __init__(self, name, /, required=Unset, default=Unset, variadic=Unset, help=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not name.strip():
            raise EmptyNameError(
                f"{type(self).__typename__} names cannot be empty",
                title="empty name",
                code=FaultCode.EMPTY_NAME,
                hint="give every parameter a name, e.g. Parameter('who')",
            )
        elif name != name.strip():
            raise ValueError(f"{type(self).__typename__} names cannot start or end with whitespace")

        self._name = name
        self._required = False
        self._default = None
        self._variadic = False
        self._help = None
        self._frozen = False

        if required is not Unset:
            self.set_required(required)
        if default is not Unset:
            self.set_default(default)
        if variadic is not Unset:
            self.set_variadic(variadic)
        if help is not Unset:
            self.set_help(help)

    def _ensure_mutable(self):
        if self._frozen:
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot change once added to a command")

    def set_required(self, required, /):
        """
        Mark the parameter as required (True) or optional (False).

        Raises RequiredWithDefaultError when required=True and a default is set.
        """
        self._ensure_mutable()
        if not isinstance(required, bool):
            raise TypeError(f"{type(self).__typename__} 'required' must be a boolean")
        if required and self._default is not None:
            raise RequiredWithDefaultError(
                f"parameter {self._name!r} has a default and cannot be required",
                title="required with default",
                code=FaultCode.REQUIRED_WITH_DEFAULT,
                hint="drop the default or leave the parameter optional",
                parameter=self._name,
            )
        self._required = required
        return self

    def set_default(self, default, /):
        """
        Set the value bound when no token is left for this parameter.

        The default is stored as a Value (anything Value() accepts is wrapped).
        Raises RequiredWithDefaultError on a required parameter.
        """
        self._ensure_mutable()
        if self._required:
            raise RequiredWithDefaultError(
                f"parameter {self._name!r} is required and cannot have a default",
                title="required with default",
                code=FaultCode.REQUIRED_WITH_DEFAULT,
                hint="make the parameter optional before giving it a default",
                parameter=self._name,
            )
        self._default = Value(default)
        return self

    def set_variadic(self, variadic, /):
        """
        Let the parameter absorb every remaining token (it must then be the last one).
        """
        self._ensure_mutable()
        if not isinstance(variadic, bool):
            raise TypeError(f"{type(self).__typename__} 'variadic' must be a boolean")
        self._variadic = variadic
        return self

    def set_help(self, help, /):
        """
        Set the short description shown by 'help <command>'; None clears it.
        """
        self._ensure_mutable()
        if help is not None and not isinstance(help, str | Text):
            raise TypeError(f"{type(self).__typename__} 'help' must be a string")
        elif isinstance(help, str) and not (help := help.strip()):
            raise ValueError(f"{type(self).__typename__} 'help' cannot be empty")
        self._help = help
        return self

    def _freeze(self):
        self._frozen = True
        return self

    @property
    def usage(self):
        """
        Usage fragment: name, [name], name... or [name...].
        """
        fragment = self._name + "..." * self._variadic
        return fragment if self._required else f"[{fragment}]"


__all__ = (
    "Parameter",
)
