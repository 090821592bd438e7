"""Filter building: column/operator/value conditions compiled to a SQL predicate.

Every column name and value that reaches the compiled text goes through
``quote_identifier`` or ``quote_literal``. Nothing else is interpolated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..exceptions import FilterError, MissingValue, UnknownColumn


class OperatorKind(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    LIKE = "LIKE"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

    @property
    def is_unary(self) -> bool:
        return self in (OperatorKind.IS_NULL, OperatorKind.IS_NOT_NULL)

    @classmethod
    def parse(cls, text: Union[str, "OperatorKind"]) -> "OperatorKind":
        """Parse an operator from its display text.

        Examples:
            >>> OperatorKind.parse(">=")
            <OperatorKind.GE: '>='>
            >>> OperatorKind.parse("==")
            <OperatorKind.EQ: '='>
            >>> OperatorKind.parse("is not null")
            <OperatorKind.IS_NOT_NULL: 'IS NOT NULL'>
        """
        if isinstance(text, OperatorKind):
            return text
        normalized = " ".join(text.strip().upper().split())
        if normalized == "==":
            normalized = "="
        elif normalized == "<>":
            normalized = "!="
        try:
            return cls(normalized)
        except ValueError:
            raise FilterError(f"Unknown operator: {text}") from None


# Display order in the filter editor
OPERATORS: Tuple[OperatorKind, ...] = tuple(OperatorKind)


def quote_identifier(name: str) -> str:
    """Quote a column name as a SQL identifier.

    Examples:
        >>> quote_identifier("age")
        '"age"'
        >>> quote_identifier('we"ird')
        '"we""ird"'
    """
    if "\x00" in name:
        raise FilterError("Column name contains a NUL character")
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    """Quote a value as a SQL string literal.

    Examples:
        >>> quote_literal("30")
        "'30'"
        >>> quote_literal("O'Brien")
        "'O''Brien'"
    """
    if "\x00" in value:
        raise FilterError("Filter value contains a NUL character")
    return "'" + value.replace("'", "''") + "'"


@dataclass(frozen=True)
class FilterCondition:
    """One condition; ``value`` is None exactly for the unary null tests."""

    column: str
    operator: OperatorKind
    value: Optional[str] = None

    def render(self) -> str:
        """Render this condition as a SQL clause.

        Examples:
            >>> FilterCondition("age", OperatorKind.GT, "30").render()
            '"age" > \\'30\\''
            >>> FilterCondition("city", OperatorKind.IS_NULL).render()
            '"city" IS NULL'
        """
        column = quote_identifier(self.column)
        if self.operator.is_unary:
            return f"{column} {self.operator.value}"
        if self.operator is OperatorKind.LIKE:
            # Substring match against the text form of the column
            pattern = quote_literal(f"%{self.value}%")
            return f"CAST({column} AS VARCHAR) LIKE {pattern}"
        return f"{column} {self.operator.value} {quote_literal(self.value or '')}"

    def describe(self) -> str:
        if self.operator.is_unary:
            return f'"{self.column}" {self.operator.value}'
        return f"\"{self.column}\" {self.operator.value} '{self.value}'"


@dataclass(frozen=True)
class Predicate:
    """Compiled boolean filter expression."""

    sql: str = "TRUE"

    @property
    def is_trivial(self) -> bool:
        return self.sql == "TRUE"

    def __str__(self) -> str:
        return self.sql


ALWAYS_TRUE = Predicate()


@dataclass
class FilterBuilder:
    """Ordered AND-list of conditions validated against a schema.

    Conditions can only be appended or removed from the end.
    """

    columns: Tuple[str, ...]
    _conditions: List[FilterCondition] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.columns = tuple(self.columns)

    @classmethod
    def from_conditions(
        cls, columns: Iterable[str], conditions: Iterable[FilterCondition]
    ) -> "FilterBuilder":
        builder = cls(tuple(columns))
        for condition in conditions:
            builder.add_condition(condition.column, condition.operator, condition.value)
        return builder

    @property
    def conditions(self) -> Tuple[FilterCondition, ...]:
        return tuple(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def __iter__(self) -> Iterator[FilterCondition]:
        return iter(self.conditions)

    def add_condition(
        self,
        column: str,
        operator: Union[str, OperatorKind],
        value: Optional[str] = None,
    ) -> FilterCondition:
        """Validate and append a condition.

        Raises:
            UnknownColumn: If ``column`` is not in the schema
            MissingValue: If a binary operator has no value
        """
        op = OperatorKind.parse(operator)
        if column not in self.columns:
            raise UnknownColumn(column)
        if op.is_unary:
            value = None
        elif not value:
            raise MissingValue(op.value)

        # Fail on NUL characters now rather than at compile time
        quote_identifier(column)
        if value is not None:
            quote_literal(value)

        condition = FilterCondition(column, op, value)
        self._conditions.append(condition)
        return condition

    def remove_last(self) -> None:
        if self._conditions:
            self._conditions.pop()

    def compile(self) -> Predicate:
        """AND-join the rendered conditions.

        Examples:
            >>> builder = FilterBuilder(("id", "age"))
            >>> _ = builder.add_condition("age", ">", "30")
            >>> _ = builder.add_condition("age", "<", "50")
            >>> builder.compile().sql
            '"age" > \\'30\\' AND "age" < \\'50\\''
        """
        if not self._conditions:
            return ALWAYS_TRUE
        return Predicate(" AND ".join(c.render() for c in self._conditions))


__all__ = [
    "ALWAYS_TRUE",
    "FilterBuilder",
    "FilterCondition",
    "OPERATORS",
    "OperatorKind",
    "Predicate",
    "quote_identifier",
    "quote_literal",
]
