"""Lexical analysis for the minijl language: source text to an ordered list of Tokens.

The lexer never fails. Every word is classified on its own:

```
<word> ::= <keyword> | <operator>     ; exact match, see TokenKind
         | ["+" | "-"] <digit>+       ; integer literal (ASCII digits only)
         | <char>                     ; identifier: any other single character
         | <char> <char>+             ; anything else is an unrecognized token, rejected later by the parser
```

Words are separated by whitespace and by "(" and ")". Parentheses only delimit words: they never become tokens. Lines
starting with "//" are comments and contribute no words; there are no inline comments.
"""

from dataclasses import dataclass
from enum import Enum
import re


class TokenKind(Enum):
    """Every kind of token. Keywords and operators map to their exact lexeme."""
    IDENTIFIER = "<identifier>"
    INTEGER_LITERAL = "<integer>"
    UNRECOGNIZED = "<unrecognized>"

    ASSIGNMENT = "="

    LESS_THAN_OR_EQUAL = "<="
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    GREATER_THAN = ">"
    EQUAL = "=="
    NOT_EQUAL = "~="

    ADDITION = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "*"
    DIVISION = "/"

    FUNCTION = "function"
    END = "end"
    IF = "if"
    THEN = "then"
    ELSE = "else"
    WHILE = "while"
    DO = "do"
    REPEAT = "repeat"
    UNTIL = "until"
    PRINT = "print"


PAYLOAD_KINDS = (TokenKind.IDENTIFIER, TokenKind.INTEGER_LITERAL, TokenKind.UNRECOGNIZED)
KEYWORDS = {kind.value: kind for kind in TokenKind if kind not in PAYLOAD_KINDS}

COMMENT = "//"
INTEGER = re.compile(r"[+-]?[0-9]+")
SEPARATORS = re.compile(r"[\s()]+")


@dataclass(frozen=True)
class Token:
    """One lexical unit. value is the name of an identifier, the int of an integer literal, the offending text of an
    unrecognized token and None for everything else.
    """
    kind: TokenKind
    value: object = None

    @classmethod
    def identifier(cls, name):
        return cls(TokenKind.IDENTIFIER, name)

    @classmethod
    def integer(cls, value):
        return cls(TokenKind.INTEGER_LITERAL, value)

    @classmethod
    def unrecognized(cls, text):
        return cls(TokenKind.UNRECOGNIZED, text)

    def __repr__(self):
        if self.kind in PAYLOAD_KINDS:
            return f"{self.kind.name.lower()}({self.value!r})"
        return self.kind.name.lower()

    def __str__(self):
        """The source text this token was classified from."""
        if self.kind in PAYLOAD_KINDS:
            return str(self.value)
        return self.kind.value


def classify(word):
    """Maps a single word to its Token. Pure: no lookahead, no state."""
    if word in KEYWORDS:
        return Token(KEYWORDS[word])
    if INTEGER.fullmatch(word):
        return Token.integer(int(word))
    if len(word) == 1:
        return Token.identifier(word)
    return Token.unrecognized(word)


def split_words(source):
    """Returns the words of source, in order, with comment lines dropped."""
    lines = [line for line in source.splitlines() if not line.startswith(COMMENT)]
    return [word for word in SEPARATORS.split("\n".join(lines)) if word]


def tokenize(source):
    """Converts source text to a list of Tokens."""
    return [classify(word) for word in split_words(source)]


def describe_tokens(source):
    """Returns one 'word: token' line per word of source. Used for the token dump diagnostic."""
    return "\n".join(f"{word}: {classify(word)!r}" for word in split_words(source))
