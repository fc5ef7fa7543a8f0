"""Handles interactive/command-line mode for minijl interpreter. Uses cmd as backend."""

import cmd

from minijl.lang.error import ErrorHandler
from minijl.lang.session import Session


class Shell(cmd.Cmd):
    """minijl interpreter shell."""
    intro = "minijl interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, error_handler=None, session_options=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)
        self.error_handler = error_handler
        self.session_options = session_options or {}

        self.sess = None
        self._tmp_line = ""

    def default(self, line):
        """Buffers a line of a minijl program, running the program once it is complete."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source, add_to_prev = Session.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not source.strip():
                return

            self.sess = Session(self.error_handler, Session.SH_FILE, source, **self.session_options)
            self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the minijl interpreter!\n\n"
              "minijl is a small Julia-flavored language with single-character integer \n"
              "variables, prefix arithmetic and if/while/repeat control flow. Each program \n"
              "is wrapped in 'function <name> ... end' and runs once it is complete.\n\n"
              "Try it out by typing 'function f x = + 1 2 print x end'. This will print 3. \n"
              "Programs can span several lines: the prompt changes to '. ' until every \n"
              "'function', 'if' and 'while' has its 'end'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
