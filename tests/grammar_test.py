import os
import unittest

from minijl.grammar import (
    ArithmeticExpression, ArithmeticOperator, AssignmentStatement, BinaryExpression, Block, BooleanExpression,
    Identifier, IfStatement, IntegerLiteral, PrintStatement, Program, RelativeOperator, RepeatStatement, Statement,
    TokenStream, WhileStatement, parse, parse_source,
)
from minijl.lang.error import ParseError
from minijl.lexical import Token, TokenKind, tokenize

PROGRAMS = os.path.join(os.path.dirname(__file__), "programs")


def stream(source):
    return TokenStream(tokenize(source))


class TokenStreamTestCase(unittest.TestCase):

    def test_cursors(self):
        tokens = stream("function f print 1 end")
        self.assertEqual(5, len(tokens))
        self.assertEqual(Token.identifier("f"), tokens.peek(1))
        self.assertIsNone(tokens.peek(5))

        self.assertEqual(Token(TokenKind.FUNCTION), tokens.pop())
        self.assertEqual(Token(TokenKind.END), tokens.pop_last())
        self.assertEqual(3, len(tokens))
        self.assertEqual([Token.identifier("f"), Token(TokenKind.PRINT), Token.integer(1)],
                         [tokens.pop() for _ in range(3)])

        self.assertFalse(tokens)
        self.assertIsNone(tokens.peek())
        self.assertRaises(ParseError, tokens.pop)
        self.assertRaises(ParseError, tokens.pop_last)

    def test_buffer_is_not_modified(self):
        tokens = tokenize("print 1")
        token_stream = TokenStream(tokens)
        token_stream.pop()
        self.assertEqual([Token(TokenKind.PRINT), Token.integer(1)], tokens)
        self.assertEqual(tuple(tokens), token_stream.tokens)

    def test_expect(self):
        tokens = stream("then x")
        self.assertEqual(Token(TokenKind.THEN), tokens.expect(TokenKind.THEN))
        with self.assertRaises(ParseError) as context:
            tokens.expect(TokenKind.ELSE)
        self.assertEqual("unexpected token 'x', expected 'else'", str(context.exception))
        self.assertEqual("x", context.exception.expr)

        tokens = stream("x end")
        self.assertEqual(Token(TokenKind.END), tokens.expect(TokenKind.END, last=True))


class ArithmeticExpressionTestCase(unittest.TestCase):

    def test_from_tokens(self):
        cases = {
            "x": Identifier("x"),
            "-4": IntegerLiteral(-4),
            "+ 1 2": BinaryExpression(ArithmeticOperator.ADDITION, IntegerLiteral(1), IntegerLiteral(2)),
            "+ 1 * 2 3": BinaryExpression(
                ArithmeticOperator.ADDITION,
                IntegerLiteral(1),
                BinaryExpression(ArithmeticOperator.MULTIPLICATION, IntegerLiteral(2), IntegerLiteral(3)),
            ),
            "/ (- a 1) b": BinaryExpression(
                ArithmeticOperator.DIVISION,
                BinaryExpression(ArithmeticOperator.SUBTRACTION, Identifier("a"), IntegerLiteral(1)),
                Identifier("b"),
            ),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, ArithmeticExpression.from_tokens(stream(case)), case)

    def test_consumes_only_its_tokens(self):
        tokens = stream("- x 1 print")
        ArithmeticExpression.from_tokens(tokens)
        self.assertEqual([Token(TokenKind.PRINT)], list(tokens.tokens[tokens.pos:tokens.end]))

    def test_should_raise(self):
        should_raise = ["", "+", "+ 1", "print", "== 1 2", "abc", "= 1 2"]
        for case in should_raise:
            self.assertRaises(ParseError, ArithmeticExpression.from_tokens, stream(case))


class BooleanExpressionTestCase(unittest.TestCase):

    def test_from_tokens(self):
        operators = {
            "<=": RelativeOperator.LESS_THAN_OR_EQUAL,
            "<": RelativeOperator.LESS_THAN,
            ">=": RelativeOperator.GREATER_THAN_OR_EQUAL,
            ">": RelativeOperator.GREATER_THAN,
            "==": RelativeOperator.EQUAL,
            "~=": RelativeOperator.NOT_EQUAL,
        }
        for lexeme, operator in operators.items():
            expected = BooleanExpression(operator, Identifier("x"), IntegerLiteral(5))
            self.assertEqual(expected, BooleanExpression.from_tokens(stream(f"{lexeme} x 5")), lexeme)

    def test_should_raise(self):
        should_raise = ["", "x 5", "= x 5", "+ x 5", "< x", "<"]
        for case in should_raise:
            self.assertRaises(ParseError, BooleanExpression.from_tokens, stream(case))


class StatementTestCase(unittest.TestCase):

    def test_dispatch_order(self):
        self.assertEqual([IfStatement, AssignmentStatement, WhileStatement, PrintStatement, RepeatStatement],
                         Statement.__subclasses__())

    def test_generate_tree(self):
        cases = {
            "print 1": PrintStatement(IntegerLiteral(1)),
            "x = 2": AssignmentStatement("x", IntegerLiteral(2)),
            "while < x 3 do end": WhileStatement(
                BooleanExpression(RelativeOperator.LESS_THAN, Identifier("x"), IntegerLiteral(3)), Block(())),
            "repeat until == 1 1": RepeatStatement(
                Block(()), BooleanExpression(RelativeOperator.EQUAL, IntegerLiteral(1), IntegerLiteral(1))),
            "if > 1 0 then print 1 else end": IfStatement(
                BooleanExpression(RelativeOperator.GREATER_THAN, IntegerLiteral(1), IntegerLiteral(0)),
                Block((PrintStatement(IntegerLiteral(1)),)),
                Block(()),
            ),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Statement.generate_tree(stream(case)), case)

    def test_no_statement(self):
        should_fail = ["", "then", "else", "end", "until == 1 1", "5", "x", "x ="]
        for case in should_fail:
            tokens = stream(case)
            self.assertIsNone(Statement.generate_tree(tokens), case)
            self.assertEqual(len(tokenize(case)), len(tokens), case)

    def test_assignment_check_grammar(self):
        should_fail = ["x =", "x 1 = 2", "= x 1", "print x"]
        for case in should_fail:
            self.assertFalse(AssignmentStatement.check_grammar(stream(case)), case)

        should_pass = ["x = 1", "x = + 1 2", "print = 1"]
        for case in should_pass:
            self.assertTrue(AssignmentStatement.check_grammar(stream(case)), case)

    def test_assignment_needs_identifier(self):
        should_raise = ["5 = 3", "print = 1", "xy = 1"]
        for case in should_raise:
            self.assertRaises(ParseError, AssignmentStatement.from_tokens, stream(case))


class ProgramTestCase(unittest.TestCase):

    def test_parse(self):
        with open(os.path.join(PROGRAMS, "test.jl")) as file:
            program = parse_source(file.read())

        expected = Program("test", Block((
            AssignmentStatement("x", IntegerLiteral(3)),
            IfStatement(
                BooleanExpression(RelativeOperator.LESS_THAN_OR_EQUAL, Identifier("x"), IntegerLiteral(5)),
                Block((PrintStatement(Identifier("x")),)),
                Block((PrintStatement(IntegerLiteral(0)),)),
            ),
        )))
        self.assertEqual(expected, program)
        self.assertEqual(2, len(program.block.statements))

    def test_identifier(self):
        cases = {
            "function f end": "f",
            "function z print 1 end": "z",
            "function q repeat print 7 until == 1 1 end": "q",
            "function test end": "test",
            "function main_2 print 1 end": "main_2",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(tokenize(case)).identifier, case)

    def test_nested_blocks(self):
        program = parse_source("function f while < i 3 do if == i 1 then print i else i = + i 1 end end end")
        loop, = program.block.statements
        self.assertIsInstance(loop, WhileStatement)
        branch, = loop.block.statements
        self.assertIsInstance(branch, IfStatement)
        self.assertEqual(Block((AssignmentStatement(
            "i", BinaryExpression(ArithmeticOperator.ADDITION, Identifier("i"), IntegerLiteral(1))),)),
            branch.else_block)

    def test_should_raise(self):
        should_raise = [
            "",
            "function",
            "function f",
            "function end",
            "function 5 end",
            "function 1.5 end",
            "f = 1 end",
            "function f if == 1 1 then print 1 else print 2 end",  # if without its end
            "function f if == 1 1 then print 1 end end",           # no else
            "function f if 1 1 then print 1 else print 2 end end",
            "function f while < 1 2 print 1 end end",               # no do
            "function f repeat print 1 end",                        # no until
            "function f print end",
            "function f print 1 xyz end",                           # unrecognized token left over
            "function f else end",
            "function f x = end",
            "function f 5 = 3 end",
            "function f print 1 end extra",
            "function f print 1 end end",
            "function f print 1 + 2 end",                           # infix
        ]
        for case in should_raise:
            self.assertRaises(ParseError, parse, tokenize(case))

    def test_missing_end_file(self):
        with open(os.path.join(PROGRAMS, "missing_end.jl")) as file:
            self.assertRaises(ParseError, parse_source, file.read())

    def test_display(self):
        expected = ("Program('f', nodes=[\n"
                    "    Block(nodes=[\n"
                    "        PrintStatement(nodes=[\n"
                    "            BinaryExpression('+', nodes=[\n"
                    "                IntegerLiteral('1'),\n"
                    "                Identifier('x')\n"
                    "            ])\n"
                    "        ])\n"
                    "    ])\n"
                    "])")
        program = parse_source("function f print + 1 x end")
        self.assertEqual(expected, program.display())
        self.assertEqual(expected, str(program))
        self.assertEqual("Block()", Block(()).display())


if __name__ == '__main__':
    unittest.main()
