"""
Argot help and version rendering.

Layout
- A blank line, then "{app} {version}" (the version part only when set).
- A blank line, then the description.
- A blank line, then "Options:" followed by one row per option in
  registration order (reserved help/version rows last):
      "    " + usage padded to the widest usage + "  = " + summary
- A blank line, then the extra text followed by a blank line (when set).

Colour
- Text is assembled as a rich Text and printed into an in-memory Console.
  With colour on, the Console emits 256-colour ANSI sequences; with colour
  off, it emits the same characters without any escape.
- The Console never looks at the terminal: no wrapping, no width detection,
  no environment variables.
- Styles can be overridden with a __styles__ mapping defined in __main__
  (keys: title, version, description, options-label, usage, summary, extra).
"""
import io
from collections import defaultdict

from rich.console import Console
from rich.text import Text

_WIDTH = 1 << 16


def _console(file, /, *, colorful):
    return Console(
        file=file,
        width=_WIDTH,
        force_terminal=colorful,
        force_jupyter=False,
        force_interactive=False,
        color_system="256" if colorful else None,
        no_color=False,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
        legacy_windows=False,
    )


def render(text, /, *, colorful=False):
    """
    Turn a rich Text into a plain or ANSI-coloured string.
    """
    with io.StringIO() as buffer:
        _console(buffer, colorful=colorful).print(text, end="")
        return buffer.getvalue()


class HelpRenderer:
    """
    Builds the help screen and the version line for a reserved registry.
    """

    def __init__(self, registry, config, /):
        self.registry = registry
        self.config = config

    def rows(self):
        """
        Return the (usage, summary) column pairs, one per option.
        """
        return [(spec.usage(), spec.summary()) for spec in self.registry]

    def assemble(self):
        main = __import__("__main__")
        config = self.config

        styles = defaultdict(str, {
            "title": "bold #FF4D94",  # magenta-pink program name
            "version": "bold #00E6FF",  # cyan version
            "description": "italic #A3A3A3",  # neutral gray
            "options-label": "bold #FFFFFF",  # white header
            "usage": "bold #FFD600",  # amber usage column
            "summary": "#9CA3AF",  # muted gray summary column
            "extra": "#737373",  # dim footer gray
        } | getattr(main, "__styles__", {}))

        rows = self.rows()
        width = max((len(usage) for usage, _ in rows), default=0)

        text = Text("\n")
        text.append(config.app, styles["title"])
        if config.version:
            text.append(" ")
            text.append(config.version, styles["version"])
        text.append("\n\n")
        text.append(config.description, styles["description"])
        text.append("\n\n")
        text.append("Options:", styles["options-label"])
        text.append("\n")
        for usage, summary in rows:
            text.append("    ")
            text.append(usage.ljust(width), styles["usage"])
            text.append("  ")
            text.append("= " + summary, styles["summary"])
            text.append("\n")
        text.append("\n")
        if config.extra:
            text.append(config.extra, styles["extra"])
            text.append("\n\n")
        return text

    def render(self, *, colorful=False):
        return render(self.assemble(), colorful=colorful)

    def version(self, *, colorful=False):
        """
        Return "{app} {version}" followed by a newline (just "{app}" when no
        version is configured).
        """
        main = __import__("__main__")
        styles = defaultdict(str, {
            "title": "bold #FF4D94",
            "version": "bold #00E6FF",
        } | getattr(main, "__styles__", {}))

        text = Text(self.config.app, styles["title"])
        if self.config.version:
            text.append(" ")
            text.append(self.config.version, styles["version"])
        text.append("\n")
        return render(text, colorful=colorful)


__all__ = (
    "render",
    "HelpRenderer",
)
