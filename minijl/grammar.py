"""Recursive-descent parser for the minijl language: Tokens to a Program syntax tree.

Formally, minijl can be defined as

```
<program>    ::= "function" <name> <block> "end"                 ; <name>: <id>, or a longer valid name
<block>      ::= <statement>*                                    ; ends where no statement can start
<statement>  ::= <if> | <assign> | <while> | <print> | <repeat>  ; tried in this order
<if>         ::= "if" <bool-expr> "then" <block> "else" <block> "end"
<assign>     ::= <id> "=" <arith-expr>
<while>      ::= "while" <bool-expr> "do" <block> "end"
<print>      ::= "print" <arith-expr>
<repeat>     ::= "repeat" <block> "until" <bool-expr>
<bool-expr>  ::= <rel-op> <arith-expr> <arith-expr>
<rel-op>     ::= "<=" | "<" | ">=" | ">" | "==" | "~="
<arith-expr> ::= <id> | <int> | <arith-op> <arith-expr> <arith-expr>
<arith-op>   ::= "+" | "-" | "*" | "/"
```

Expressions are prefix (operator first), so `+ 1 * 2 3` is 1 + (2 * 3): there is no precedence and no associativity.

Each syntax tree class consumes exactly the tokens it owns from a TokenStream and leaves the rest to its caller. Any
token that does not fit raises a ParseError immediately; there is no partial tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from minijl.lang.error import ParseError
from minijl.lexical import Token, TokenKind, tokenize


class TokenStream:
    """Read-only token buffer with a front cursor (pos) and a back bound (end). Only the cursors move."""

    def __init__(self, tokens):
        self.tokens = tuple(tokens)
        self.pos = 0
        self.end = len(self.tokens)

    def __len__(self):
        return self.end - self.pos

    def peek(self, offset=0):
        """Returns the token offset places after the cursor without consuming it, or None past the end."""
        idx = self.pos + offset
        if idx < self.end:
            return self.tokens[idx]
        return None

    def pop(self):
        """Consumes and returns the first remaining token."""
        if not self:
            raise ParseError("unexpected end of program", diagnosis=False)
        self.pos += 1
        return self.tokens[self.pos - 1]

    def pop_last(self):
        """Consumes and returns the last remaining token."""
        if not self:
            raise ParseError("unexpected end of program", diagnosis=False)
        self.end -= 1
        return self.tokens[self.end]

    def expect(self, kind, last=False):
        """Consumes the first (or last) token, raising a ParseError unless it is of the given kind."""
        token = self.pop_last() if last else self.pop()
        if token.kind is not kind:
            raise unexpected(token, kind)
        return token

    def __repr__(self):
        return f"TokenStream({list(self.tokens[self.pos:self.end])})"


def unexpected(token, expected=None):
    """ParseError for token, optionally naming the kind of token that should have been there."""
    if expected is None:
        return ParseError("unexpected token '{}'", str(token))
    return ParseError("unexpected token '{}', expected '{}'", (str(token), expected.value))


class SyntaxTree(ABC):
    """Superclass for every node of a minijl syntax tree."""

    @classmethod
    @abstractmethod
    def from_tokens(cls, stream):
        """This method should consume exactly the tokens this node owns from stream and return the node. It should
        raise a ParseError as soon as a token does not fit.
        """

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return []

    @property
    def label(self):
        """Short description shown by display (name, value or operator), if any."""
        return None

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>('<label>', nodes=[
            <Node>(nodes=[
                ...
                <Node>('<label>')  # <-- if nodes is empty
            ])
        ])
        """
        fields = [repr(self.label)] if self.label is not None else []
        if self.nodes:
            fields.append("nodes=[")

        result = f"{'    ' * indents}{type(self).__name__}({', '.join(fields)}"
        if self.nodes:
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __str__(self):
        return self.display()


def match_operator(operators, stream, expected):
    """Consumes the first token of stream and returns the member of the operators Enum with the same lexeme."""
    token = stream.peek()
    if token is None:
        raise ParseError("unexpected end of program, expected {}", expected, diagnosis=False)
    try:
        operator = operators(token.kind.value)
    except ValueError:
        raise ParseError("unexpected token '{}', expected {}", (str(token), expected)) from None
    stream.pop()
    return operator


class RelativeOperator(Enum):
    LESS_THAN_OR_EQUAL = "<="
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    GREATER_THAN = ">"
    EQUAL = "=="
    NOT_EQUAL = "~="

    @classmethod
    def from_tokens(cls, stream):
        """Consumes the first token if it is a relative operator."""
        return match_operator(cls, stream, "a relative operator")


class ArithmeticOperator(Enum):
    ADDITION = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "*"
    DIVISION = "/"

    @classmethod
    def from_tokens(cls, stream):
        """Consumes the first token if it is an arithmetic operator."""
        return match_operator(cls, stream, "an expression")


class ArithmeticExpression(SyntaxTree):
    """Identifier, integer literal, or operator applied to two arithmetic expressions."""

    @classmethod
    def from_tokens(cls, stream):
        token = stream.peek()
        if token is not None and token.kind is TokenKind.IDENTIFIER:
            stream.pop()
            return Identifier(token.value)
        if token is not None and token.kind is TokenKind.INTEGER_LITERAL:
            stream.pop()
            return IntegerLiteral(token.value)

        operator = ArithmeticOperator.from_tokens(stream)
        lhs = ArithmeticExpression.from_tokens(stream)
        rhs = ArithmeticExpression.from_tokens(stream)
        return BinaryExpression(operator, lhs, rhs)


@dataclass(frozen=True)
class Identifier(ArithmeticExpression):
    name: str

    @property
    def label(self):
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(ArithmeticExpression):
    value: int

    @property
    def label(self):
        return str(self.value)


@dataclass(frozen=True)
class BinaryExpression(ArithmeticExpression):
    operator: ArithmeticOperator
    lhs: ArithmeticExpression
    rhs: ArithmeticExpression

    @property
    def nodes(self):
        return [self.lhs, self.rhs]

    @property
    def label(self):
        return self.operator.value


@dataclass(frozen=True)
class BooleanExpression(SyntaxTree):
    operator: RelativeOperator
    lhs: ArithmeticExpression
    rhs: ArithmeticExpression

    @classmethod
    def from_tokens(cls, stream):
        operator = RelativeOperator.from_tokens(stream)
        lhs = ArithmeticExpression.from_tokens(stream)
        rhs = ArithmeticExpression.from_tokens(stream)
        return cls(operator, lhs, rhs)

    @property
    def nodes(self):
        return [self.lhs, self.rhs]

    @property
    def label(self):
        return self.operator.value


class Statement(SyntaxTree):
    """Superclass for statements. Subclasses are tried in the order they are declared in this module."""

    @staticmethod
    @abstractmethod
    def check_grammar(stream):
        """This method should return whether the statement starts at the front of stream, looking at no more than the
        first two tokens and consuming none.
        """

    @classmethod
    def generate_tree(cls, stream):
        """Consumes and returns the next statement of stream, or returns None if no statement starts there."""
        for subclass in cls.__subclasses__():
            if subclass.check_grammar(stream):
                return subclass.from_tokens(stream)
        return None


@dataclass(frozen=True)
class Block(SyntaxTree):
    statements: tuple

    @classmethod
    def from_tokens(cls, stream):
        """Consumes statements until the next token cannot start one. The token that ends a block ("then", "else",
        "end", "until") is left for the caller.
        """
        statements = []
        statement = Statement.generate_tree(stream)
        while statement is not None:
            statements.append(statement)
            statement = Statement.generate_tree(stream)
        return cls(tuple(statements))

    @property
    def nodes(self):
        return list(self.statements)


@dataclass(frozen=True)
class IfStatement(Statement):
    condition: BooleanExpression
    true_block: Block
    else_block: Block

    @staticmethod
    def check_grammar(stream):
        return stream.peek() == Token(TokenKind.IF)

    @classmethod
    def from_tokens(cls, stream):
        stream.expect(TokenKind.IF)
        condition = BooleanExpression.from_tokens(stream)
        stream.expect(TokenKind.THEN)
        true_block = Block.from_tokens(stream)
        stream.expect(TokenKind.ELSE)
        else_block = Block.from_tokens(stream)
        stream.expect(TokenKind.END)
        return cls(condition, true_block, else_block)

    @property
    def nodes(self):
        return [self.condition, self.true_block, self.else_block]


@dataclass(frozen=True)
class AssignmentStatement(Statement):
    identifier: str
    expression: ArithmeticExpression

    @staticmethod
    def check_grammar(stream):
        # no keyword: "=" in second place is what tells an assignment apart
        return len(stream) >= 3 and stream.peek(1) == Token(TokenKind.ASSIGNMENT)

    @classmethod
    def from_tokens(cls, stream):
        identifier = stream.expect(TokenKind.IDENTIFIER)
        stream.expect(TokenKind.ASSIGNMENT)
        expression = ArithmeticExpression.from_tokens(stream)
        return cls(identifier.value, expression)

    @property
    def nodes(self):
        return [self.expression]

    @property
    def label(self):
        return self.identifier


@dataclass(frozen=True)
class WhileStatement(Statement):
    condition: BooleanExpression
    block: Block

    @staticmethod
    def check_grammar(stream):
        return stream.peek() == Token(TokenKind.WHILE)

    @classmethod
    def from_tokens(cls, stream):
        stream.expect(TokenKind.WHILE)
        condition = BooleanExpression.from_tokens(stream)
        stream.expect(TokenKind.DO)
        block = Block.from_tokens(stream)
        stream.expect(TokenKind.END)
        return cls(condition, block)

    @property
    def nodes(self):
        return [self.condition, self.block]


@dataclass(frozen=True)
class PrintStatement(Statement):
    expression: ArithmeticExpression

    @staticmethod
    def check_grammar(stream):
        return stream.peek() == Token(TokenKind.PRINT)

    @classmethod
    def from_tokens(cls, stream):
        stream.expect(TokenKind.PRINT)
        return cls(ArithmeticExpression.from_tokens(stream))

    @property
    def nodes(self):
        return [self.expression]


@dataclass(frozen=True)
class RepeatStatement(Statement):
    block: Block
    condition: BooleanExpression

    @staticmethod
    def check_grammar(stream):
        return stream.peek() == Token(TokenKind.REPEAT)

    @classmethod
    def from_tokens(cls, stream):
        stream.expect(TokenKind.REPEAT)
        block = Block.from_tokens(stream)
        stream.expect(TokenKind.UNTIL)
        condition = BooleanExpression.from_tokens(stream)
        return cls(block, condition)

    @property
    def nodes(self):
        return [self.block, self.condition]


@dataclass(frozen=True)
class Program(SyntaxTree):
    identifier: str
    block: Block

    @classmethod
    def from_tokens(cls, stream):
        """Consumes "function" and the program name from the front and "end" from the back, then the block, which
        must use up every token in between.
        """
        stream.expect(TokenKind.FUNCTION)
        name = stream.pop()
        if not Program.check_name(name):
            raise unexpected(name, TokenKind.IDENTIFIER)
        stream.expect(TokenKind.END, last=True)

        block = Block.from_tokens(stream)
        if stream:
            raise unexpected(stream.peek())

        return cls(name.value, block)

    @staticmethod
    def check_name(token):
        """Whether token can name the program: an identifier, or a longer word that is a valid name. The program name
        is never an operand, so it is not held to the one-character rule.
        """
        if token.kind is TokenKind.IDENTIFIER:
            return True
        return token.kind is TokenKind.UNRECOGNIZED and token.value.isidentifier()

    @property
    def nodes(self):
        return [self.block]

    @property
    def label(self):
        return self.identifier


def parse(tokens):
    """Builds the Program for a sequence of Tokens. Raises a ParseError if tokens do not match the grammar."""
    return Program.from_tokens(TokenStream(tokens))


def parse_source(source):
    """Tokenizes and parses source text."""
    return parse(tokenize(source))
