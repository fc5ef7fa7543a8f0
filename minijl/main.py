"""Runs minijl programs from .jl files, or in command-line mode when no file is given. Also uses the error handling
context manager. Called from the minijl console script.
"""

import argparse

from minijl.lang.error import ErrorHandler
from minijl.lang.session import Session
from minijl.lang.shell import Shell


def create_arg_parser():
    """Creates command line argument parser."""
    parser = argparse.ArgumentParser(prog="minijl", description="Interpreter for a small Julia-flavored language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print every word and its token before parsing")
    parser.add_argument("--tree", action="store_true", help="print the syntax tree before running")
    parser.add_argument("--dump", action="store_true", help="print the symbol table after running")
    parser.add_argument("--no-color", action="store_true", help="do not color error messages")
    return parser


def main(argv=None):
    """Runs minijl interpreter. Called from minijl console script."""
    args = create_arg_parser().parse_args(argv)
    options = {"show_tokens": args.tokens, "show_tree": args.tree, "dump_symbols": args.dump}

    with ErrorHandler(color=not args.no_color) as error_handler:
        if args.file is not None:
            Session(error_handler, args.file, **options).run()
        else:
            error_handler.fatal = False
            Shell(error_handler, options).cmdloop()


if __name__ == "__main__":
    main()
