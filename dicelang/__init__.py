from typing import Iterable, List, Optional

from dicelang.utils.dice_roller import DiceRoller
from dicelang.utils.expression import DiceError, RollOutcome, RollResult
from dicelang.utils.grammar import parse

__version__ = '0.3.0'


def format_rolls(result: RollResult) -> str:
    # Strikethrough the dropped rolls
    kept = set(result.kept_indexes)
    roll_display = [str(r) if i in kept else f'~~{r}~~' for i, r in enumerate(result.rolls)]
    return '[' + ', '.join(roll_display) + ']'


def format_result(result: RollResult, quiet: bool = False) -> str:
    if quiet:
        return str(result.total)
    return f'{result.expression.describe()}\t{format_rolls(result)}\t{result.total}'


class Dice:
    def __init__(self, roller: Optional[DiceRoller] = None, quiet: bool = False):
        self.roller = roller or DiceRoller()
        self.quiet = quiet

    def roll_all(self, notations: Iterable[str]) -> List[RollOutcome]:
        """
        Rolls every expression independently. A bad expression is reported
        in its own outcome and does not stop the others.
        """
        outcomes = []
        for notation in notations:
            try:
                result = self.roller.roll(notation)
            except DiceError as e:
                outcomes.append(RollOutcome(notation, error=e))
                continue
            outcomes.append(RollOutcome(notation, result=result))
        return outcomes

    def render(self, outcome: RollOutcome) -> str:
        if outcome.ok:
            return format_result(outcome.result, self.quiet)
        return f'Error: {outcome.error}'


__all__ = ['Dice', 'DiceRoller', 'format_result', 'format_rolls', 'parse']
