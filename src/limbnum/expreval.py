"""
Safe evaluation of unsigned integer expressions over UInt.

Allowed: decimal literals (underscores ok), parentheses, + - * // % **,
and the calls pow(a, b[, m]) and gcd(a, b). Everything else (names,
attributes, floats, unary minus, '/') is rejected.

Literals never go through Python's int parser: each digit run is swapped for
a placeholder name before ``ast.parse`` and decoded by the limb codec, so
inputs longer than ``sys.get_int_max_str_digits()`` still work.
"""

from __future__ import annotations

import ast
import re

from limbnum.errors import MalformedNumeralError, NegativeResultError, NonPositiveDivisorError
from limbnum.runtime import CFG
from limbnum.uint import UInt, gcd, power
from limbnum.utility import UserInputError, dec_digits

_MAX_NODES = 256  # sanity guard
_LITERAL_RE = re.compile(r"(?<![\w.])\d[\d_]*(?![\w.])")
_PLACEHOLDER = "__lit{}__"
_PLACEHOLDER_RE = re.compile(r"__lit\d*__")

_FUNCS = {"pow": (2, 3), "gcd": (2, 2)}


class _ExprError(Exception):
    pass


class _NotExpression(_ExprError):
    pass


class NotAnExpression(UserInputError):
    """The text does not even parse as an expression (e.g. a profile name)."""


def _max_digits() -> int:
    return int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000))


def _too_many_digits(limit: int) -> UserInputError:
    return UserInputError(
        f"number has more than {limit} decimal digits. "
        "Increase BEHAVIOUR.MAX_DIGITS in the profile or pass a smaller value."
    )


def _extract_literals(expr: str) -> tuple[str, dict[str, UInt]]:
    """Replace digit runs by placeholder names; return (rewritten, table)."""
    reserved = _PLACEHOLDER_RE.search(expr)
    if reserved:
        raise _NotExpression(f"unknown name {reserved.group(0)!r}")
    table: dict[str, UInt] = {}

    def repl(m: re.Match) -> str:
        token = m.group(0)
        if token.endswith("_") or "__" in token:
            raise _ExprError(f"malformed literal {token!r}")
        name = _PLACEHOLDER.format(len(table))
        table[name] = UInt.parse(token.replace("_", ""))
        return name

    return _LITERAL_RE.sub(repl, expr), table


def _would_exceed_digit_limit_for_pow(base: UInt, exp: int, limit: int) -> bool:
    """
    Cheap lower bound on the decimal digits of base**exp.

    For base >= 10**(k-1) (k = digits of base) we have
        base**exp >= 10**((k-1)*exp)
    and for base >= 2 also base**exp >= 2**exp, whose digit count is
    bounded below by exp*30103//100000 + 1.
    """
    if exp <= 1 or base <= 1:
        return False
    k = dec_digits(base)
    digits_lb = max((k - 1) * exp + 1, 1 + (exp * 30103) // 100000)
    return digits_lb > limit


def _eval_tree(tree: ast.Expression, table: dict[str, UInt]) -> UInt:
    limit = _max_digits()

    def _eval(node: ast.AST, *, modulus: UInt | None = None) -> UInt:
        if isinstance(node, ast.Name):
            if node.id in table:
                return table[node.id]
            raise _NotExpression(f"unknown name {node.id!r}")

        if isinstance(node, ast.Constant):
            raise _ExprError("only unsigned decimal integers are allowed")

        if isinstance(node, ast.UnaryOp):
            if isinstance(node.op, ast.UAdd):
                return _eval(node.operand, modulus=modulus)
            raise _ExprError("negative numbers are not supported")

        if isinstance(node, ast.BinOp):
            op_type = type(node.op)

            if op_type is ast.Pow:
                base = _eval(node.left, modulus=modulus)
                exp = int(_eval(node.right))
                if modulus is not None:
                    return power(base, exp, modulus)
                if _would_exceed_digit_limit_for_pow(base, exp, limit):
                    raise _too_many_digits(limit)
                return power(base, exp)

            if op_type is ast.Mod:
                # evaluate the left side modulo the right one
                m = _eval(node.right)
                if not m:
                    raise _ExprError("modulus by zero is not allowed")
                return _eval(node.left, modulus=m) % m

            # + and * commute with reduction mod m; other operators do not
            if op_type is ast.Add:
                return _eval(node.left, modulus=modulus) + _eval(node.right, modulus=modulus)
            if op_type is ast.Mult:
                return _eval(node.left, modulus=modulus) * _eval(node.right, modulus=modulus)
            if op_type is ast.Sub:
                return _eval(node.left) - _eval(node.right)
            if op_type is ast.FloorDiv:
                return _eval(node.left) // _eval(node.right)
            if op_type is ast.Div:
                raise _ExprError("use '//' for integer division")
            raise _ExprError(f"unsupported operator: {op_type.__name__}")

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCS:
                raise _ExprError("only pow() and gcd() may be called")
            if node.keywords:
                raise _ExprError(f"{node.func.id}() does not take keyword arguments")
            lo, hi = _FUNCS[node.func.id]
            if not lo <= len(node.args) <= hi:
                raise _ExprError(f"{node.func.id}() takes {lo} to {hi} arguments" if lo != hi
                                 else f"{node.func.id}() takes exactly {lo} arguments")
            args = [_eval(a) for a in node.args]
            if node.func.id == "gcd":
                return gcd(*args)
            if len(args) == 3:
                if not args[2]:
                    raise _ExprError("modulus by zero is not allowed")
                return power(args[0], int(args[1]), args[2])
            if _would_exceed_digit_limit_for_pow(args[0], int(args[1]), limit):
                raise _too_many_digits(limit)
            return power(args[0], int(args[1]))

        raise _ExprError(f"unsupported syntax: {type(node).__name__}")

    value = _eval(tree.body)
    if dec_digits(value) > limit:
        raise _too_many_digits(limit)
    return value


def evaluate(expr: str) -> UInt:
    """Evaluate ``expr``; raises UserInputError with a readable message on failure."""
    text = (expr or "").strip()
    if not text:
        raise UserInputError("Invalid input: empty expression")

    try:
        rewritten, table = _extract_literals(text)
        for lit in table.values():
            if dec_digits(lit) > _max_digits():
                raise _too_many_digits(_max_digits())
        try:
            tree = ast.parse(rewritten, mode="eval")
        except SyntaxError as e:
            raise _NotExpression("not a valid integer expression") from e
        if sum(1 for _ in ast.walk(tree)) > _MAX_NODES:
            raise _ExprError("expression too large")
        return _eval_tree(tree, table)
    except _NotExpression as e:
        raise NotAnExpression(f"Invalid input: {e}") from None
    except _ExprError as e:
        raise UserInputError(f"Invalid input: {e}") from None
    except MalformedNumeralError as e:
        raise UserInputError(f"Invalid input: {e}") from None
    except NegativeResultError:
        raise UserInputError("Invalid input: result would be negative (unsigned arithmetic)") from None
    except NonPositiveDivisorError:
        raise UserInputError("Invalid input: division by zero") from None


def try_evaluate(expr: str) -> UInt | None:
    """Like evaluate(), but None when the text is not an expression at all."""
    try:
        return evaluate(expr)
    except NotAnExpression:
        return None
