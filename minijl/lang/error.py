"""Error handling for the minijl language. Only GenericExceptions should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy:
    GenericException
     ├── ParseError           token stream does not match the grammar (raised before anything runs)
     └── RuntimeTrap          fatal condition while interpreting
          ├── FunctionSymbolAccess
          └── DivisionByZero
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a minijl error. msg is a str.format template whose
    slots are filled with exprs; exprs[0] should be the offending text that caused the error.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.template = msg
        self.exprs = exprs
        self.msg = msg.format(*exprs)
        self.expr = exprs[0]  # needed for error display
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ParseError(GenericException):
    """The token stream does not match the grammar. Parsing stops at the first one: there is no recovery."""


class RuntimeTrap(GenericException):
    """Unrecoverable condition while interpreting. execution is the Execution that was running when the trap fired,
    attached by interpret.
    """
    execution = None


class FunctionSymbolAccess(RuntimeTrap):
    """A function symbol was read where an integer value is required."""

    def __init__(self, name):
        super().__init__("tried to get the value of function symbol '{}'", name, internal=True)
        self.name = name


class DivisionByZero(RuntimeTrap):

    def __init__(self, dividend):
        super().__init__("division by zero ('{} / 0')", str(dividend), diagnosis=False)
        self.dividend = dividend


class ErrorHandler:
    """Context manager that will report minijl errors instead of letting Python tracebacks through."""
    ERROR = "red"

    def __init__(self, fatal=True, color=True):
        self.fatal = fatal
        self.color = color
        self.path = None

    def register_file(self, path):
        """Registers path as the file errors are reported against."""
        self.path = path

    def _colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=not self.color)

    def format(self, error):
        """Returns the full report for error: location, message and (if any) diagnosis."""
        error_msg = ""
        if self.path:
            error_msg += self._colored(f"{self.path}: ", attrs=["bold"])

        if error.internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += error.template.format(*(self._colored(expr, attrs=["bold"]) for expr in error.exprs))

        if not error.internal and error.expr and error.diagnosis:
            error_msg += "\n" + self.diagnose(error)

        return error_msg

    def diagnose(self, error):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, 1)
        diagnosis += self._colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += self._colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Reports error, which must be a GenericException. Exits with status 1 if self.fatal."""
        print(self.format(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("program is nested too deeply: maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
