"""Filter editor: builds a draft condition list over a column set."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from ..core.filters import OPERATORS, FilterBuilder, FilterCondition, OperatorKind
from ..core.navigation import CONSUMED, KeyEvent, Pop, Screen, Transition
from ..exceptions import FilterError


class FilterField(Enum):
    COLUMN = "Column"
    OPERATOR = "Operator"
    VALUE = "Value"


@dataclass
class FilterEditorScreen(Screen):
    """Edits a private copy of the inspector's conditions.

    Applying pops with the draft as the result; escape pops with nothing and
    the inspector keeps its filter.
    """

    draft: FilterBuilder
    field_cursor: FilterField = FilterField.COLUMN
    column_index: int = 0
    operator_index: int = 0
    value_input: str = ""
    error: Optional[str] = None

    title = "Filter"
    bindings = (
        ("tab", "next field"),
        ("↑↓", "choose"),
        ("enter", "add / apply"),
        ("a", "apply"),
        ("d", "remove last"),
        ("esc", "cancel"),
    )

    @classmethod
    def for_columns(
        cls, columns: Iterable[str], conditions: Iterable[FilterCondition] = ()
    ) -> "FilterEditorScreen":
        return cls(draft=FilterBuilder.from_conditions(columns, conditions))

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.draft.columns

    @property
    def draft_conditions(self) -> Tuple[FilterCondition, ...]:
        return self.draft.conditions

    @property
    def operator(self) -> OperatorKind:
        return OPERATORS[self.operator_index]

    @property
    def column(self) -> Optional[str]:
        return self.columns[self.column_index] if self.columns else None

    @property
    def captures_text(self) -> bool:
        return self.field_cursor is FilterField.VALUE

    def on_key(self, event: KeyEvent) -> Transition:
        if event.key == "escape":
            return Pop()
        if event.key == "tab":
            self.next_field()
        elif event.key in ("up", "down"):
            self.choose(-1 if event.key == "up" else 1)
        elif event.key == "enter":
            return self.submit()
        elif self.field_cursor is FilterField.VALUE:
            if event.key == "backspace":
                self.value_input = self.value_input[:-1]
            elif event.is_printable:
                self.value_input += event.character
        elif event.key == "a":
            return Pop(result=self.draft_conditions)
        elif event.key == "d":
            self.draft.remove_last()
            self.error = None
        return CONSUMED

    def next_field(self) -> None:
        if self.field_cursor is FilterField.COLUMN:
            self.field_cursor = FilterField.OPERATOR
        elif self.field_cursor is FilterField.OPERATOR and not self.operator.is_unary:
            self.field_cursor = FilterField.VALUE
        else:
            self.field_cursor = FilterField.COLUMN

    def choose(self, step: int) -> None:
        if self.field_cursor is FilterField.COLUMN and self.columns:
            self.column_index = max(0, min(len(self.columns) - 1, self.column_index + step))
        elif self.field_cursor is FilterField.OPERATOR:
            self.operator_index = max(0, min(len(OPERATORS) - 1, self.operator_index + step))

    def submit(self) -> Transition:
        """Enter: advance, add the condition, or apply the draft.

        On the value field an empty input applies and a non-empty one adds.
        A unary operator is added straight from the operator field.
        """
        if self.field_cursor is FilterField.COLUMN:
            self.field_cursor = FilterField.OPERATOR
        elif self.field_cursor is FilterField.OPERATOR:
            if self.operator.is_unary:
                self.add_condition()
            else:
                self.field_cursor = FilterField.VALUE
        elif not self.value_input:
            return Pop(result=self.draft_conditions)
        else:
            self.add_condition()
        return CONSUMED

    def add_condition(self) -> bool:
        """Append the fields as a condition; on rejection keep them and show why."""
        if self.column is None:
            self.error = "No columns to filter on"
            return False
        try:
            self.draft.add_condition(self.column, self.operator, self.value_input or None)
        except FilterError as e:
            self.error = str(e)
            return False
        self.value_input = ""
        self.error = None
        self.field_cursor = FilterField.COLUMN
        return True
