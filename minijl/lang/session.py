"""Session control for the minijl language. Runs one program through the whole pipeline, either from a .jl file or
from text typed in command-line mode, with optional diagnostic dumps between the stages.
"""

from minijl.grammar import parse
from minijl.interpreter import interpret
from minijl.lang.error import GenericException
from minijl.lexical import TokenKind, describe_tokens, tokenize


class Session:
    """Governs one run of a minijl program."""
    SH_FILE = "<in>"  # command-line interpreter filename
    OPENERS = (TokenKind.FUNCTION, TokenKind.IF, TokenKind.WHILE)  # each is closed by an "end"

    def __init__(self, error_handler, path, source=None, show_tokens=False, show_tree=False, dump_symbols=False,
                 emit=print):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                  # used for error messages
        self.show_tokens = show_tokens    # print 'word: token' for every word before parsing
        self.show_tree = show_tree        # print the syntax tree before running
        self.dump_symbols = dump_symbols  # print the symbol table after a successful run
        self.emit = emit                  # called with each printed value

        self.tokens = []
        self.program = None
        self.execution = None

        if source is None:
            if path == Session.SH_FILE:
                raise GenericException("'<in>' is a reserved filename")
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except (OSError, UnicodeDecodeError):
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        self.source = source

    @staticmethod
    def preprocess_line(line, pending=""):
        """Joins line to pending (text of previous lines not yet run). Returns updated source and whether the program
        is still open, i.e. has more "function"/"if"/"while" than "end".
        """
        source = f"{pending}\n{line}" if pending else line

        depth = 0
        for token in tokenize(source):
            if token.kind in Session.OPENERS:
                depth += 1
            elif token.kind is TokenKind.END:
                depth -= 1

        return source, depth > 0

    def run(self):
        """Lexes, parses and interprets self.source. Returns the Execution; any error is raised to the caller."""
        if self.show_tokens:
            print(describe_tokens(self.source))

        self.tokens = tokenize(self.source)
        self.program = parse(self.tokens)

        if self.show_tree:
            print(self.program.display())

        self.execution = interpret(self.program, self.emit)

        if self.dump_symbols:
            print()
            print("Interpretation finished.")
            print("Dumping symbol table")
            print(self.execution.dump())

        return self.execution

    @property
    def results(self):
        """Values printed by the last run."""
        return self.execution.output if self.execution else []
