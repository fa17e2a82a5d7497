"""Site filter expressions.

A small boolean expression language over record fields, compiled once
into a predicate. Examples:

    QUAL>=30 && INFO/DP>10
    TYPE="snp" || FILTER="PASS"
    (AC>1 & AF<0.5) | DB

Fields: CHROM, POS, ID, REF, ALT (first alternate), QUAL, FILTER, N_ALT,
N_SAMPLES, TYPE, INFO/<tag> or a bare INFO tag. Missing values never
match; multi-valued fields match if any element matches.
"""

import operator
import re
from collections.abc import Callable
from typing import Any

from variant_converter.config import FilterLogic
from variant_converter.exceptions import FilterExpressionError

Predicate = Callable[[Any], bool]
Operand = Callable[[Any], list[Any]]

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<number>-?\d+(?:\.\d*)?(?:[eE][-+]?\d+)?)
      | (?P<string>"[^"]*"|'[^']*')
      | (?P<op>&&|\|\||==|!=|<=|>=|=|<|>|&|\||\(|\))
      | (?P<name>[A-Za-z_][A-Za-z0-9_./]*)
    )
    """,
    re.VERBOSE,
)

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_AND = {"&&", "&"}
_OR = {"||", "|"}


def _as_list(value: Any) -> list[Any]:
    """Normalize a field value into a list of non-missing scalars."""
    if value is None:
        return []
    if isinstance(value, (tuple, list)):
        return [v for v in value if v is not None]
    return [value]


def variant_type(ref: str, alt: str) -> str:
    """Classify one alternate allele against the reference."""
    if alt.startswith("<") or "[" in alt or "]" in alt or alt in (".", "*"):
        return "other"
    if len(ref) == len(alt):
        return "snp" if len(ref) == 1 else "mnp"
    return "indel"


def _record_types(record: Any) -> list[str]:
    alts = record.alts or ()
    if not alts:
        return ["ref"]
    return [variant_type(record.ref, alt) for alt in alts]


_FIELDS: dict[str, Callable[[Any], Any]] = {
    "CHROM": lambda r: r.chrom,
    "POS": lambda r: r.pos,
    "ID": lambda r: r.id,
    "REF": lambda r: r.ref,
    "ALT": lambda r: r.alts[0] if r.alts else None,
    "QUAL": lambda r: r.qual,
    "FILTER": lambda r: list(r.filter) or ["."],
    "N_ALT": lambda r: len(r.alts or ()),
    "N_SAMPLES": lambda r: len(r.samples),
    "TYPE": _record_types,
}


def _compare(op: Callable[[Any, Any], bool], left: Any, right: Any) -> bool:
    if isinstance(left, str) != isinstance(right, str):
        try:
            left, right = float(left), float(right)
        except (TypeError, ValueError):
            return False
    if isinstance(left, bool) or isinstance(right, bool):
        left, right = int(left), int(right)
    try:
        return bool(op(left, right))
    except TypeError:
        return False


class _Parser:
    """Recursive-descent compiler from tokens to predicates."""

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.tokens = self._tokenize(expression)
        self.pos = 0

    def _tokenize(self, expression: str) -> list[tuple[str, str]]:
        tokens: list[tuple[str, str]] = []
        index = 0
        while index < len(expression):
            if expression[index:].strip() == "":
                break
            match = _TOKEN_RE.match(expression, index)
            if match is None or match.end() == index:
                raise FilterExpressionError(
                    f"Could not parse the expression at '{expression[index:].strip()}': "
                    f"{expression}"
                )
            kind = match.lastgroup
            assert kind is not None
            tokens.append((kind, match.group(kind)))
            index = match.end()
        return tokens

    def _peek(self) -> tuple[str, str] | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            raise FilterExpressionError(f"Unexpected end of expression: {self.expression}")
        self.pos += 1
        return token

    def compile(self) -> Predicate:
        if not self.tokens:
            raise FilterExpressionError("Empty filter expression")
        predicate = self._or()
        if self._peek() is not None:
            raise FilterExpressionError(
                f"Unexpected '{self._peek()[1]}' in expression: {self.expression}"  # type: ignore[index]
            )
        return predicate

    def _or(self) -> Predicate:
        terms = [self._and()]
        while (token := self._peek()) is not None and token[1] in _OR:
            self.pos += 1
            terms.append(self._and())
        if len(terms) == 1:
            return terms[0]
        return lambda r: any(t(r) for t in terms)

    def _and(self) -> Predicate:
        terms = [self._comparison()]
        while (token := self._peek()) is not None and token[1] in _AND:
            self.pos += 1
            terms.append(self._comparison())
        if len(terms) == 1:
            return terms[0]
        return lambda r: all(t(r) for t in terms)

    def _comparison(self) -> Predicate:
        token = self._peek()
        if token is not None and token[1] == "(":
            self.pos += 1
            inner = self._or()
            closing = self._next()
            if closing[1] != ")":
                raise FilterExpressionError(f"Missing ')' in expression: {self.expression}")
            return inner

        left = self._operand()
        token = self._peek()
        if token is None or token[1] not in _COMPARATORS:
            return lambda r: any(bool(v) for v in left(r))

        self.pos += 1
        op = _COMPARATORS[token[1]]
        right = self._operand()

        def compare(record: Any) -> bool:
            lhs, rhs = left(record), right(record)
            return any(_compare(op, a, b) for a in lhs for b in rhs)

        return compare

    def _operand(self) -> Operand:
        kind, text = self._next()
        if kind == "number":
            number = float(text) if any(c in text for c in ".eE") else int(text)
            return lambda r: [number]
        if kind == "string":
            literal = text[1:-1]
            return lambda r: [literal]
        if kind == "name":
            return self._field(text)
        raise FilterExpressionError(f"Unexpected '{text}' in expression: {self.expression}")

    def _field(self, name: str) -> Operand:
        if name.upper() in _FIELDS and "/" not in name:
            getter = _FIELDS[name.upper()]
            return lambda r: _as_list(getter(r))

        tag = name[5:] if name.upper().startswith("INFO/") else name
        if not tag or "/" in tag:
            raise FilterExpressionError(f"Unsupported field '{name}' in expression")
        return lambda r: _as_list(r.info.get(tag))


class SiteFilter:
    """Compiled include/exclude site filter.

    Usage:
        site_filter = SiteFilter("QUAL>30", FilterLogic.EXCLUDE)
        kept = [rec for rec in records if site_filter.passes(rec)]
    """

    def __init__(self, expression: str, logic: FilterLogic = FilterLogic.INCLUDE) -> None:
        """Compile the expression.

        Raises:
            FilterExpressionError: If the expression does not parse
        """
        self.expression = expression
        self.logic = logic
        self._predicate = _Parser(expression).compile()

    def test(self, record: Any) -> bool:
        """Raw result of the expression for a record."""
        return self._predicate(record)

    def passes(self, record: Any) -> bool:
        """Whether the record survives the include/exclude logic."""
        matched = self.test(record)
        if self.logic is FilterLogic.EXCLUDE:
            return not matched
        return matched
