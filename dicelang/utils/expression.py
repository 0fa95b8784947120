from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# 64-bit platform ranges for the numeric fields
UNSIGNED_MAX = 2 ** 64 - 1
SIGNED_MAX = 2 ** 63 - 1
SIGNED_MIN = -(2 ** 63)

# Dice rolled by one expression unless the caller asks otherwise; 0 disables
DEFAULT_MAX_DICE = 100000


class DiceError(ValueError):
    """Base class for anything wrong with a user-supplied expression."""


class DiceSyntaxError(DiceError):
    def __init__(self, notation: str, position: int = 0, reason: str = ''):
        self.notation = notation
        self.position = position
        self.reason = reason
        message = f"Failed to parse expression '{notation}'"
        if reason:
            message += f" at position {position}: {reason}"
        super().__init__(message)


class EvaluationOverflowError(DiceError):
    def __init__(self, notation: str, field: str, value=None):
        self.notation = notation
        self.field = field
        self.value = value
        if value is None:
            message = f"Numeric overflow in {field} of '{notation}'"
        else:
            message = f"Invalid {field} '{value}' in '{notation}': out of range"
        super().__init__(message)


class DiceLimitError(DiceError):
    def __init__(self, notation: str, dice_count: int, max_dice: int):
        self.notation = notation
        self.dice_count = dice_count
        self.max_dice = max_dice
        super().__init__(f"Too many dice in '{notation}': {dice_count} (max {max_dice})")


class SelectionKind(Enum):
    DROP_LOW = 'd'
    DROP_HIGH = 'D'
    KEEP_HIGH = 'k'
    KEEP_LOW = 'K'

    @property
    def phrase(self) -> str:
        return {
            SelectionKind.DROP_LOW: 'drop lowest',
            SelectionKind.DROP_HIGH: 'drop highest',
            SelectionKind.KEEP_HIGH: 'keep highest',
            SelectionKind.KEEP_LOW: 'keep lowest',
        }[self]


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind
    count: int

    def __str__(self):
        return f'{self.kind.value}{self.count}'


@dataclass(frozen=True)
class Expression:
    """A parsed roll: dice_count x d(die_size), an optional keep/drop rule and a modifier."""
    die_size: int
    dice_count: int = 1
    selection: Optional[Selection] = None
    modifier: int = 0

    def __str__(self):
        notation = f'{self.dice_count}d{self.die_size}'
        if self.selection:
            notation += str(self.selection)
        if self.modifier:
            notation += f'{self.modifier:+d}'
        return notation

    def describe(self) -> str:
        """
        Human readable form, e.g. '4d6 drop lowest 1 +2'.
        """
        text = f'{self.dice_count}d{self.die_size}'
        if self.selection:
            text += f' {self.selection.kind.phrase} {self.selection.count}'
        if self.modifier > 0:
            text += f' +{self.modifier}'
        elif self.modifier < 0:
            text += f' {self.modifier}'
        return text


@dataclass(frozen=True)
class RollResult:
    expression: Expression
    rolls: Tuple[int, ...]
    kept: Tuple[int, ...]
    modifier: int
    total: int
    # positions in rolls of the kept dice, ascending
    kept_indexes: Tuple[int, ...]

    @property
    def dropped(self) -> Tuple[int, ...]:
        kept = set(self.kept_indexes)
        return tuple(r for i, r in enumerate(self.rolls) if i not in kept)


@dataclass(frozen=True)
class RollOutcome:
    notation: str
    result: Optional[RollResult] = None
    error: Optional[DiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
