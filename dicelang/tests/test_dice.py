from dicelang import Dice, format_result, format_rolls
from dicelang.utils.dice_roller import DiceRoller
from dicelang.utils.expression import DiceLimitError, DiceSyntaxError, EvaluationOverflowError


def test_roll_all_keeps_input_order(scripted):
    dice = Dice(DiceRoller(scripted([4, 6, 1, 2, 3, 5, 17])))
    outcomes = dice.roll_all(['2d6', 'bogus', '4d6d1', 'd20'])
    assert [o.notation for o in outcomes] == ['2d6', 'bogus', '4d6d1', 'd20']
    assert [o.ok for o in outcomes] == [True, False, True, True]
    assert outcomes[0].result.total == 10
    assert isinstance(outcomes[1].error, DiceSyntaxError)
    assert outcomes[1].result is None
    assert outcomes[2].result.kept == (2, 3, 5)
    assert outcomes[3].result.total == 17


def test_bad_expression_does_not_consume_draws(scripted):
    source = scripted([5, 5])
    outcomes = Dice(DiceRoller(source)).roll_all(['3d6*2', 'd6', '9999999999999999999999d6', 'd6'])
    assert [o.ok for o in outcomes] == [False, True, False, True]
    assert isinstance(outcomes[2].error, EvaluationOverflowError)
    assert len(source.calls) == 2


def test_format_rolls_strikes_dropped(scripted):
    result = DiceRoller(scripted([3, 1, 6, 4])).roll('4d6d1')
    assert format_rolls(result) == '[3, ~~1~~, 6, 4]'


def test_format_rolls_with_duplicates(scripted):
    result = DiceRoller(scripted([5, 2, 5])).roll('3d6k2')
    assert format_rolls(result) == '[5, ~~2~~, 5]'


def test_format_result(scripted):
    result = DiceRoller(scripted([3, 1, 6, 4])).roll('4d6d1+2')
    assert format_result(result) == '4d6 drop lowest 1 +2\t[3, ~~1~~, 6, 4]\t15'
    assert format_result(result, quiet=True) == '15'


def test_render(scripted):
    dice = Dice(DiceRoller(scripted([6, 2])), quiet=True)
    good, bad = dice.roll_all(['2d6', 'd+5'])
    assert dice.render(good) == '8'
    assert dice.render(bad).startswith("Error: Failed to parse expression 'd+5'")


def test_format_rolls_strikes_the_die_that_was_dropped(scripted):
    result = DiceRoller(scripted([2, 2, 5, 2])).roll('4d6d1')
    assert format_rolls(result) == '[~~2~~, 2, 5, 2]'
    assert result.dropped == (2,)


def test_default_dice_reports_oversized_roll():
    first, second = Dice().roll_all(['100000000000d6', 'd6'])
    assert isinstance(first.error, DiceLimitError)
    assert second.ok
