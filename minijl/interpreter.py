"""Tree-walking interpreter for minijl syntax trees.

Basic program flow:
    1. Lexer: splits source text into Tokens (see minijl/lexical.py)
    2. Parser: builds a Program syntax tree by recursive descent (see minijl/grammar.py)
    3. Interpreter: walks the tree, executing statements for effect and evaluating expressions for value

Each call to interpret gets a fresh Execution: nothing carries over between runs.
"""

import operator

from minijl.grammar import (
    AssignmentStatement, BinaryExpression, IfStatement, Identifier, IntegerLiteral, PrintStatement, RepeatStatement,
    WhileStatement, ArithmeticOperator, RelativeOperator,
)
from minijl.lang.error import DivisionByZero, FunctionSymbolAccess, GenericException, RuntimeTrap
from minijl.symbol import Symbol


def truncated_division(lhs, rhs):
    """Integer division rounding toward zero (Python's // rounds toward negative infinity)."""
    if rhs == 0:
        raise DivisionByZero(lhs)
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


ARITHMETIC = {
    ArithmeticOperator.ADDITION: operator.add,
    ArithmeticOperator.SUBTRACTION: operator.sub,
    ArithmeticOperator.MULTIPLICATION: operator.mul,
    ArithmeticOperator.DIVISION: truncated_division,
}

RELATIONAL = {
    RelativeOperator.LESS_THAN_OR_EQUAL: operator.le,
    RelativeOperator.LESS_THAN: operator.lt,
    RelativeOperator.GREATER_THAN_OR_EQUAL: operator.ge,
    RelativeOperator.GREATER_THAN: operator.gt,
    RelativeOperator.EQUAL: operator.eq,
    RelativeOperator.NOT_EQUAL: operator.ne,
}


class Execution:
    """State of one run of a Program: the symbol table and everything printed so far, in order."""

    def __init__(self, name, emit=None):
        self.name = name
        self.symbols = {name: Symbol.function()}
        self.output = []
        self.emit = emit

    def lookup(self, name):
        """Integer value of name. Unbound names are 0."""
        symbol = self.symbols.get(name, Symbol.variable(0))
        if symbol.is_function:
            raise FunctionSymbolAccess(name)
        return symbol.value

    def assign(self, name, value):
        self.symbols[name] = Symbol.variable(value)

    def print(self, value):
        self.output.append(value)
        if self.emit is not None:
            self.emit(value)

    def variables(self):
        """Dict of variable name: value, without the function symbol."""
        return {name: symbol.value for name, symbol in self.symbols.items() if not symbol.is_function}

    def dump(self):
        """Symbol table, one 'name: symbol' line per entry in binding order."""
        return "\n".join(f"{name}: {symbol}" for name, symbol in self.symbols.items())

    def __repr__(self):
        return f"Execution(name={self.name!r}, output={self.output!r})"


def interpret(program, emit=None):
    """Runs program and returns its Execution. emit, if given, is called with each printed value as it is printed.

    A RuntimeTrap stops the run at once; the Execution so far is attached to it as trap.execution.
    """
    execution = Execution(program.identifier, emit)
    try:
        execute_block(program.block, execution)
    except RuntimeTrap as trap:
        trap.execution = execution
        raise
    return execution


def execute_block(block, execution):
    for statement in block.statements:
        execute(statement, execution)


def execute(statement, execution):
    """Executes a single statement for its effect on execution."""
    if isinstance(statement, IfStatement):
        if holds(statement.condition, execution):
            execute_block(statement.true_block, execution)
        else:
            execute_block(statement.else_block, execution)

    elif isinstance(statement, AssignmentStatement):
        execution.assign(statement.identifier, evaluate(statement.expression, execution))

    elif isinstance(statement, WhileStatement):
        while holds(statement.condition, execution):
            execute_block(statement.block, execution)

    elif isinstance(statement, PrintStatement):
        execution.print(evaluate(statement.expression, execution))

    elif isinstance(statement, RepeatStatement):
        execute_block(statement.block, execution)
        while not holds(statement.condition, execution):
            execute_block(statement.block, execution)

    else:
        raise GenericException("'{}' is not a statement", type(statement).__name__, internal=True)


def holds(condition, execution):
    """Evaluates a BooleanExpression: lhs fully, then rhs, then compares."""
    lhs = evaluate(condition.lhs, execution)
    rhs = evaluate(condition.rhs, execution)
    return RELATIONAL[condition.operator](lhs, rhs)


def evaluate(expression, execution):
    """Evaluates an ArithmeticExpression to an int, lhs before rhs."""
    if isinstance(expression, IntegerLiteral):
        return expression.value

    elif isinstance(expression, Identifier):
        return execution.lookup(expression.name)

    elif isinstance(expression, BinaryExpression):
        lhs = evaluate(expression.lhs, execution)
        rhs = evaluate(expression.rhs, execution)
        return ARITHMETIC[expression.operator](lhs, rhs)

    raise GenericException("'{}' is not an arithmetic expression", type(expression).__name__, internal=True)
