"""
Grammar for the dice expression language.

    expression   := number_expr? die_size drop_keep? modifier? END
    number_expr  := digits? "d"
    die_size     := digits
    drop_keep    := ("d" | "D" | "k" | "K") digits
    modifier     := ("+" | "-") digits

Examples:
    20, d20    1 x d20
    3d6        3 x d6
    4d6d1      4 x d6 dropping the lowest
    2d20D1     2 x d20 dropping the highest
    4d6k3      4 x d6 keeping the highest 3
    2d8K1-1    2 x d8 keeping the lowest, minus one

Whitespace is never skipped: callers split input into tokens first.
"""
import logging

from pyparsing import Char, Literal, Opt, ParseException, StringEnd, Word, nums

from dicelang.utils.expression import (
    SIGNED_MAX,
    UNSIGNED_MAX,
    DiceSyntaxError,
    EvaluationOverflowError,
    Expression,
    Selection,
    SelectionKind,
)

logger = logging.getLogger(__name__)

# Longest decimal string that can still fit in 64 bits
_MAX_DIGITS = len(str(UNSIGNED_MAX))


def _digits(label: str, results_name: str):
    return Word(nums).set_name(label)(results_name)


def _grammar():
    number_expr = Opt(_digits('number of dice', 'dice_count')) + Literal('d')
    die_size = _digits('die size', 'die_size')
    drop_keep = (
        Char('dDkK').set_name('drop/keep marker')('selection')
        + _digits('number of dice to drop or keep', 'selection_count')
    )
    modifier = Char('+-').set_name('modifier sign')('sign') + _digits('modifier value', 'modifier')
    expression = Opt(number_expr) + die_size + Opt(drop_keep) + Opt(modifier) + StringEnd()
    return expression.leave_whitespace().parse_with_tabs()


EXPRESSION = _grammar()


def _number(notation: str, text: str, field: str, limit: int) -> int:
    significant = text.lstrip('0') or '0'
    if len(significant) > _MAX_DIGITS or int(significant) > limit:
        raise EvaluationOverflowError(notation, field, text)
    return int(significant)


def parse(notation: str) -> Expression:
    """
    Parse one dice expression token such as '4d6d1+2'.

    Raises DiceSyntaxError when the token does not match the grammar in
    full and EvaluationOverflowError when a number does not fit in 64 bits.
    """
    try:
        tokens = EXPRESSION.parse_string(notation)
    except ParseException as e:
        found = repr(notation[e.loc]) if e.loc < len(notation) else 'end of text'
        raise DiceSyntaxError(notation, e.loc, f'{e.msg}, found {found}') from None

    dice_count = 1
    if 'dice_count' in tokens:
        dice_count = _number(notation, tokens['dice_count'], 'number of dice', UNSIGNED_MAX)
        if dice_count == 0:
            raise DiceSyntaxError(notation, 0, 'number of dice must be at least 1')

    die_size = _number(notation, tokens['die_size'], 'die size', SIGNED_MAX)
    if die_size == 0:
        raise DiceSyntaxError(notation, notation.find('d') + 1, 'die size must be at least 1')

    selection = None
    if 'selection' in tokens:
        kind = SelectionKind(tokens['selection'])
        count = _number(notation, tokens['selection_count'], f'number of dice to {kind.phrase}', UNSIGNED_MAX)
        selection = Selection(kind, count)

    modifier = 0
    if 'modifier' in tokens:
        modifier = _number(notation, tokens['modifier'], 'modifier', SIGNED_MAX)
        if tokens['sign'] == '-':
            modifier = -modifier

    expression = Expression(
        die_size=die_size,
        dice_count=dice_count,
        selection=selection,
        modifier=modifier,
    )
    logger.debug('Parsed %r as %s', notation, expression)
    return expression
