"""
Line-oriented, leveled logger handed to every command instance.

Modes
- interactive (raw=False): each line is printed through a rich Console, prefixed with a
  styled level label; info/success/debug go to stdout, warning/error/fatal to stderr.
- raw (raw=True): nothing is printed; lines are recorded in `logs` as "[<level>] <message>"
  so tests and embedding applications can inspect the output.
"""
from rich.console import Console
from rich.text import Text
from rich.traceback import Traceback

LEVELS = {
    "info": ("info", "underline blue", False),
    "success": ("success", "underline green", False),
    "debug": ("debug", "dim", False),
    "warning": ("warn", "underline yellow", True),
    "error": ("error", "underline red", True),
    "fatal": ("fatal", "bold red", True),
}


class Logger:
    def __init__(self, raw=False, *, console=None, verbose=False):
        self.raw = raw
        self.verbose = verbose
        self.logs = []
        self._stdout = console if console is not None else Console()
        self._stderr = console if console is not None else Console(stderr=True)

    def _log(self, level, message, args):
        if args:
            message = message % args
        label, style, stderr = LEVELS[level]
        if self.raw:
            self.logs.append("[%s] %s" % (level, message))
            return
        console = self._stderr if stderr else self._stdout
        console.print(Text.assemble((label, style), " ", str(message)), highlight=False)

    def info(self, message, *args):
        self._log("info", message, args)

    def success(self, message, *args):
        self._log("success", message, args)

    def warning(self, message, *args):
        self._log("warning", message, args)

    def error(self, message, *args):
        self._log("error", message, args)

    def debug(self, message, *args):
        # hidden unless the logger was built verbose
        if self.verbose:
            self._log("debug", message, args)

    def fatal(self, error):
        """
        Log an exception (or a plain message) as fatal.

        In interactive mode the traceback of an exception is rendered below the line.
        """
        self._log("fatal", str(error), ())
        if not self.raw and isinstance(error, BaseException):
            self._stderr.print(Traceback.from_exception(type(error), error, error.__traceback__))

    def clear(self):
        self.logs.clear()


__all__ = ("Logger",)
