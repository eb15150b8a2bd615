"""
Binder: match the tokens after a command name against its parameters.

Algorithm
- Parameters are walked in declaration order; tokens are consumed left to right.
- A non-variadic parameter takes the next token; with none left it takes its
  default; with no default it fails (MissingArgumentError) when required and is
  left out of the mapping otherwise.
- A variadic parameter (always last) takes every remaining token as a sequence
  Value. With no token left it fails when required; when optional it binds its
  default as a one-item sequence, or an empty sequence.
- Tokens left over once every parameter is bound raise TooManyArgumentsError.

Binding is positional only: there are no named or flag-style arguments.
The mapping's insertion order follows the parameters, but lookups are by name.
"""
from .faults import MissingArgumentError, TooManyArgumentsError, FaultCode
from .values import Value


def bind(command, tokens, /):
    """
    Return the parameter-name to Value mapping for 'tokens'.

    Parameters
    - command: Command whose parameters drive the binding.
    - tokens: sequence of strings following the command name.

    Raises
    - MissingArgumentError (options: command, parameter)
    - TooManyArgumentsError (options: command, maximum, given)
    """
    tokens = list(tokens)
    arguments = {}
    index = 0

    for parameter in command.parameters:
        if parameter.variadic:
            if rest := tokens[index:]:
                arguments[parameter.name] = Value.sequence(rest)
            elif parameter.required:
                raise _missing(command, parameter)
            elif parameter.default is not None:
                arguments[parameter.name] = Value.sequence([parameter.default])
            else:
                arguments[parameter.name] = Value.sequence([])
            index = len(tokens)
        elif index < len(tokens):
            arguments[parameter.name] = Value(tokens[index])
            index += 1
        elif parameter.default is not None:
            arguments[parameter.name] = parameter.default
        elif parameter.required:
            raise _missing(command, parameter)

    if index < len(tokens):
        maximum = len(command.parameters)
        raise TooManyArgumentsError(
            f"command {command.name!r} takes at most {maximum} "
            f"argument{"s" * (maximum != 1)} but {len(tokens)} {"were" if len(tokens) > 1 else "was"} given",
            title="too many arguments",
            code=FaultCode.TOO_MANY_ARGUMENTS,
            hint=f"usage: {command.usage}",
            command=command.name,
            maximum=maximum,
            given=len(tokens),
        )

    return arguments


def _missing(command, parameter, /):
    return MissingArgumentError(
        f"missing required argument {parameter.name!r} for command {command.name!r}",
        title="missing argument",
        code=FaultCode.MISSING_ARGUMENT,
        hint=f"usage: {command.usage}",
        command=command.name,
        parameter=parameter.name,
    )


__all__ = (
    "bind",
)
