import logging
import random
from typing import List, Optional, Sequence

from dicelang.utils.expression import (
    SIGNED_MAX,
    SIGNED_MIN,
    DEFAULT_MAX_DICE,
    DiceLimitError,
    EvaluationOverflowError,
    Expression,
    RollResult,
    Selection,
    SelectionKind,
)
from dicelang.utils.grammar import parse

logger = logging.getLogger(__name__)


def select(rolls: Sequence[int], selection: Optional[Selection]) -> List[int]:
    """
    Returns the indexes of the rolls kept by the selection, in roll order.
    Counts larger than the number of rolls keep or drop everything.
    """
    if selection is None:
        return list(range(len(rolls)))
    n = selection.count
    # sorted() is stable, so the earlier die wins a tie at the boundary
    ascending = sorted(range(len(rolls)), key=lambda i: rolls[i])
    descending = sorted(range(len(rolls)), key=lambda i: rolls[i], reverse=True)
    if selection.kind == SelectionKind.DROP_LOW:
        kept = ascending[n:]
    elif selection.kind == SelectionKind.DROP_HIGH:
        kept = descending[n:]
    elif selection.kind == SelectionKind.KEEP_HIGH:
        kept = descending[:n]
    else:
        kept = ascending[:n]
    return sorted(kept)


class DiceRoller:
    def __init__(self, rng=None, max_dice: Optional[int] = DEFAULT_MAX_DICE):
        """
        rng is any object with a randint(a, b) method, e.g. random.Random.
        It is drawn from exactly once per die, in roll order.
        max_dice of 0 or None rolls any number of dice.
        """
        self.rng = rng if rng is not None else random.Random()
        self.max_dice = max_dice

    def roll(self, notation: str) -> RollResult:
        """
        Parses and rolls a single expression token.
        Supports:
        - 20, d20
        - 3d6
        - 4d6d1 (drop lowest)
        - 2d20D1 (drop highest)
        - 4d6k3 (keep highest)
        - 2d8K1 (keep lowest)
        - 1d8+4, 2d8K1-1
        """
        return self.evaluate(parse(notation), notation)

    def evaluate(self, expression: Expression, notation: Optional[str] = None) -> RollResult:
        notation = notation if notation is not None else str(expression)
        if self.max_dice and expression.dice_count > self.max_dice:
            raise DiceLimitError(notation, expression.dice_count, self.max_dice)

        rolls = tuple(self.rng.randint(1, expression.die_size) for _ in range(expression.dice_count))
        kept_indexes = tuple(select(rolls, expression.selection))
        kept = tuple(rolls[i] for i in kept_indexes)

        subtotal = sum(kept)
        if subtotal > SIGNED_MAX:
            raise EvaluationOverflowError(notation, 'sum of rolls')
        total = subtotal + expression.modifier
        if not SIGNED_MIN <= total <= SIGNED_MAX:
            raise EvaluationOverflowError(notation, 'total')

        logger.debug('Rolled %s: rolls=%s kept=%s total=%d', expression, rolls, kept, total)
        return RollResult(
            expression=expression,
            rolls=rolls,
            kept=kept,
            modifier=expression.modifier,
            total=total,
            kept_indexes=kept_indexes,
        )
