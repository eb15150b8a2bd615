"""
Help rendering for the synthesized 'help' command.

What this module provides
- HelpEntry: snapshot of one command (name, usage, summary, parameter rows).
- HelpContext: application metadata plus the entries, in registration order.
- HelpViewer: protocol for custom renderers (help(command, context) -> str | Text).
- DefaultHelpViewer: the stock renderer.

Default layout
- 'help':
      MyApp v0.1.0: My very cool app
      ------------------------------
      add - Add two numbers together
      hello - Greetings!
- 'help add':
      add: Add two numbers together
      usage: add first second

      parameters:
        first          the first operand
  (the parameters section appears only when some parameter has help text)

Styling
- With colorful=True the palette below applies; a __styles__ mapping in __main__
  overrides any entry. With colorful=False the output is plain text.
"""
from collections import defaultdict, namedtuple
from typing import Protocol

from rich.text import Text

from .faults import UnknownCommandError, FaultCode


class HelpEntry(namedtuple("HelpEntry", ("command", "usage", "summary", "parameters"))):
    __slots__ = ()

    @classmethod
    def of(cls, command, /):
        return cls(
            command.name,
            command.usage,
            command.help,
            tuple((parameter.usage, parameter.help) for parameter in command.parameters),
        )


HelpContext = namedtuple("HelpContext", ("name", "version", "description", "entries"))


class HelpViewer(Protocol):
    def help(self, command, context, /):
        """
        Render help for 'command' (None lists every command).

        Must raise UnknownCommandError when 'command' has no entry.
        """


class DefaultHelpViewer:
    """
    Stock renderer; returns rich Text (plain when colorful is False).
    """

    #: Hanging-indent column for parameter descriptions.
    indent = 15

    def __init__(self, *, colorful=False):
        self.colorful = colorful

    def help(self, command, context, /):
        styles = defaultdict(str, {
            # === Listing ===
            "header": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "header-rule": "#4B5563",  # Slate rule under the header
            "command-name": "bold #36C5F0",  # SKY-BLUE commands
            "command-help": "#9CA3AF",  # Muted gray

            # === Single command ===
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "usage-section": "bold #36C5F0",
            "group-label": "bold #FFFFFF",
            "parameter-name": "bold #FFD600",  # AMBER for parameters
            "parameter-help": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if isinstance(fragment, Text):
                return fragment.copy() if self.colorful else Text(fragment.plain)
            return Text(str(fragment), styler(style))

        if command is None:
            return self._listing(context, text)

        for entry in context.entries:
            if entry.command == command:
                return self._details(entry, text)

        raise UnknownCommandError(
            f"no help for unknown command {command!r}",
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint="type 'help' to list the available commands",
            command=command,
        )

    def _listing(self, context, text):
        header = context.name
        if context.version:
            header += " " + context.version
        if context.description:
            header += ": " + context.description

        rendered = Text()
        rendered.append_text(text(header, "header")).append("\n")
        rendered.append_text(text("-" * len(header), "header-rule"))
        for entry in context.entries:
            rendered.append("\n").append_text(text(entry.command, "command-name"))
            if entry.summary:
                rendered.append(" - ").append_text(text(entry.summary, "command-help"))
        return rendered

    def _details(self, entry, text):
        rendered = Text()
        if entry.summary:
            rendered.append_text(text(entry.command, "command-name")).append(": ")
            rendered.append_text(text(entry.summary, "command-help")).append("\n")
        rendered.append_text(text("usage", "usage-label")).append(": ")
        rendered.append_text(text(entry.usage, "usage-section"))

        if any(help for _, help in entry.parameters):
            rendered.append("\n\n").append_text(text("parameters", "group-label")).append(":")
            for usage, help in entry.parameters:
                section = Text("  ").append_text(text(usage, "parameter-name"))
                if help:
                    if len(section) >= self.indent:
                        section.append("\n").append(" " * self.indent)
                    else:
                        section.append(" " * (self.indent - len(section)))
                    section.append_text(text(help, "parameter-help"))
                rendered.append("\n").append_text(section)
        return rendered


__all__ = (
    "HelpEntry",
    "HelpContext",
    "HelpViewer",
    "DefaultHelpViewer",
)
