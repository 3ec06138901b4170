''' Parse a formula string into an expression tree and evaluate it.

    The formula language is a small recursive-descent grammar:

        additive       := multiplicative (('+'|'-') multiplicative)*
        multiplicative := power (('*'|'/') power)*
        power          := unary ('**' power)?
        unary          := '-' unary | atom
        atom           := number | identifier ['(' args ')'] | '(' additive ')'

    Note the unary minus binds tighter than the power operator, so
    "-2**2" evaluates as (-2)**2 = 4, and power is right-associative,
    so "2**3**2" is 2**(3**2) = 512.

    Arithmetic is done on numpy float64 so division by zero, overflow, and
    fractional powers of negative numbers give inf or nan instead of raising.
'''

import re
import enum
from dataclasses import dataclass
from typing import Tuple
import numpy as np


# Evaluation follows IEEE-754 semantics. Let div/0, overflow, and log(-1)
# quietly produce inf or nan, they are filtered out by the simulation.
np.seterr(divide='ignore', invalid='ignore', over='ignore')


_NUMBER = re.compile(r'\d+(\.\d*)?([eE][+-]?\d+)?', re.ASCII)
_IDENTIFIER = re.compile(r'[a-zA-Z_]\w*', re.ASCII)


class FormulaError(ValueError):
    ''' Base class for errors in parsing or evaluating a formula '''


class FormulaSyntaxError(FormulaError):
    ''' Formula text could not be parsed

        Attributes:
            position (int): Character offset into the formula where parsing failed
            message (str): Description of the problem
    '''
    def __init__(self, position, message):
        super().__init__(message)
        self.position = position
        self.message = message


class EvalErrorKind(enum.Enum):
    ''' Reason a formula could not be evaluated '''
    UNKNOWN_VARIABLE = 'UnknownVariable'
    UNKNOWN_FUNCTION = 'UnknownFunction'
    UNKNOWN_OPERATOR = 'UnknownOperator'


class EvalError(FormulaError):
    ''' Formula could not be evaluated

        Attributes:
            kind (EvalErrorKind): Type of failure
            name (str): The variable, function, or operator that failed
    '''
    def __init__(self, kind, name):
        super().__init__(f'{kind.value}: {name}')
        self.kind = kind
        self.name = name


@dataclass(frozen=True)
class Number:
    ''' Numeric literal '''
    value: float


@dataclass(frozen=True)
class Variable:
    ''' Named unknown or constant '''
    name: str


@dataclass(frozen=True)
class Binary:
    ''' Binary operation: +, -, *, /, ** '''
    op: str
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Unary:
    ''' Unary operation (negation) '''
    op: str
    operand: 'Expr'


@dataclass(frozen=True)
class Call:
    ''' Function call '''
    name: str
    args: Tuple['Expr', ...] = ()


Expr = (Number, Variable, Binary, Unary, Call)


_CONSTANTS = {
    'pi': np.pi,
    'PI': np.pi,
    'e': np.e,
    'E': np.e,
    }


def _arg(fn):
    ''' Wrap single-argument function. Extra arguments are ignored and
        a missing argument is nan.
    '''
    def wrapped(*args):
        return fn(args[0]) if args else np.float64(np.nan)
    return wrapped


def _power(base, exponent):
    ''' Power with 1**nan and (+/-1)**inf giving nan '''
    if np.isnan(exponent) or (np.isinf(exponent) and np.abs(base) == 1):
        return np.float64(np.nan)
    return np.float64(base) ** exponent


def _pow(*args):
    base = args[0] if len(args) > 0 else np.nan
    exponent = args[1] if len(args) > 1 else np.nan
    return _power(base, exponent)


def _round(x):
    ''' Round half toward positive infinity '''
    r = np.floor(x)
    return r + 1 if x - r >= 0.5 else r


def _min(*args):
    return np.min(args) if args else np.float64(np.inf)


def _max(*args):
    return np.max(args) if args else np.float64(-np.inf)


_FUNCTIONS = {
    'log': _arg(np.log),
    'log10': _arg(np.log10),
    'log2': _arg(np.log2),
    'exp': _arg(np.exp),
    'sqrt': _arg(np.sqrt),
    'abs': _arg(np.abs),
    'ceil': _arg(np.ceil),
    'floor': _arg(np.floor),
    'round': _arg(_round),
    'min': _min,
    'max': _max,
    'pow': _pow,
    }


_OPERATORS = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': lambda a, b: a / b,
    '**': _power,
    }


def constants():
    ''' Get dictionary of named constants available in formulas '''
    return dict(_CONSTANTS)


def functions():
    ''' Get list of function names available in formulas '''
    return sorted(_FUNCTIONS)


class _Parser:
    ''' Recursive descent parser. One instance per formula. '''
    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _peek(self, n=1):
        return self.text[self.pos:self.pos+n]

    def _skipws(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def parse(self):
        expr = self._additive()
        self._skipws()
        if self.pos < len(self.text):
            raise FormulaSyntaxError(self.pos, f"Unexpected '{self.text[self.pos]}' at position {self.pos}")
        return expr

    def _additive(self):
        left = self._multiplicative()
        self._skipws()
        while self._peek() in ('+', '-'):
            op = self._peek()
            self.pos += 1
            left = Binary(op, left, self._multiplicative())
            self._skipws()
        return left

    def _multiplicative(self):
        left = self._power()
        self._skipws()
        while self._peek() in ('*', '/'):
            op = self._peek()
            self.pos += 1
            left = Binary(op, left, self._power())
            self._skipws()
        return left

    def _power(self):
        base = self._unary()
        self._skipws()
        if self._peek(2) == '**':
            self.pos += 2
            return Binary('**', base, self._power())
        return base

    def _unary(self):
        self._skipws()
        if self._peek() == '-':
            self.pos += 1
            return Unary('-', self._unary())
        return self._atom()

    def _expect_close(self):
        self._skipws()
        if self._peek() != ')':
            raise FormulaSyntaxError(self.pos, f"Unmatched parenthesis: expected ')' at position {self.pos}")
        self.pos += 1

    def _atom(self):
        self._skipws()
        if self.pos >= len(self.text):
            raise FormulaSyntaxError(self.pos, f'Unexpected end of formula at position {self.pos}')

        if self._peek() == '(':
            self.pos += 1
            expr = self._additive()
            self._expect_close()
            return expr

        match = _NUMBER.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            return Number(float(match.group()))

        match = _IDENTIFIER.match(self.text, self.pos)
        if match:
            name = match.group()
            self.pos = match.end()
            self._skipws()
            if self._peek() == '(':
                self.pos += 1
                args = []
                self._skipws()
                if self._peek() != ')':
                    args.append(self._additive())
                    self._skipws()
                    while self._peek() == ',':
                        self.pos += 1
                        args.append(self._additive())
                        self._skipws()
                self._expect_close()
                return Call(name, tuple(args))
            return Variable(name)

        raise FormulaSyntaxError(self.pos, f"Unexpected character '{self.text[self.pos]}' at position {self.pos}")


def parse(text):
    ''' Parse the formula string into an expression tree

        Args:
            text (str): Formula, e.g. "population * meals_per_day * price"

        Returns:
            Expr: Root node of the expression tree

        Raises:
            FormulaSyntaxError: if the formula is malformed
    '''
    if not isinstance(text, str):
        raise FormulaSyntaxError(0, f'Non string formula {text!r}')

    parser = _Parser(text)
    try:
        return parser.parse()
    except RecursionError as exc:
        raise FormulaSyntaxError(parser.pos, 'Formula is nested too deeply') from exc


def _children(node):
    ''' Sub-expressions of a node, in left-to-right order '''
    if isinstance(node, Binary):
        return (node.left, node.right)
    if isinstance(node, Unary):
        return (node.operand,)
    if isinstance(node, Call):
        return node.args
    return ()


def _evaluate(expr, variables):
    # Post-order walk on explicit stacks. Left-associative chains such as
    # a+b+c+... nest as deep as they are long.
    values = []
    stack = [(expr, False)]
    while stack:
        node, ready = stack.pop()
        if isinstance(node, Number):
            values.append(np.float64(node.value))

        elif isinstance(node, Variable):
            if node.name in variables:
                values.append(np.float64(variables[node.name]))
            elif node.name in _CONSTANTS:
                values.append(np.float64(_CONSTANTS[node.name]))
            else:
                raise EvalError(EvalErrorKind.UNKNOWN_VARIABLE, node.name)

        elif not isinstance(node, Expr):
            raise TypeError(f'Not an expression node: {node!r}')

        elif not ready:
            if isinstance(node, Call) and node.name not in _FUNCTIONS:
                raise EvalError(EvalErrorKind.UNKNOWN_FUNCTION, node.name)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(_children(node)))

        elif isinstance(node, Binary):
            right = values.pop()
            left = values.pop()
            try:
                op = _OPERATORS[node.op]
            except KeyError:
                raise EvalError(EvalErrorKind.UNKNOWN_OPERATOR, node.op) from None
            values.append(op(left, right))

        elif isinstance(node, Unary):
            operand = values.pop()
            if node.op != '-':
                raise EvalError(EvalErrorKind.UNKNOWN_OPERATOR, node.op)
            values.append(-operand)

        else:  # Call
            nargs = len(node.args)
            args = values[len(values)-nargs:]
            del values[len(values)-nargs:]
            values.append(_FUNCTIONS[node.name](*args))

    return values[0]


def evaluate(expr, variables=None):
    ''' Evaluate the expression tree

        Args:
            expr (Expr): Expression tree from parse()
            variables (dict): Values for each variable name in the expression.
                Names not given here fall back to the constants pi, PI, e, E.

        Returns:
            float: Result of the expression. May be inf or nan.

        Raises:
            EvalError: for an unknown variable, function, or operator
    '''
    if variables is None:
        variables = {}
    return float(_evaluate(expr, variables))


def extract_variables(expr):
    ''' Get names of the free variables in the expression, in order of first
        occurrence. Constants (pi, e) are not included.
    '''
    names = {}  # dict keeps insertion order
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Variable):
            if node.name not in _CONSTANTS:
                names.setdefault(node.name, None)
        else:
            stack.extend(reversed(_children(node)))
    return list(names)
