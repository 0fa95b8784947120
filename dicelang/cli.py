import argparse
import logging
import random
import readline  # noqa: F401  line editing and history for input()
import sys

from dotenv import load_dotenv

from dicelang import Dice, __version__
from dicelang.utils.dice_roller import DiceRoller
from dicelang.utils.settings import load_settings

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Rolls dice using a small expression language.

The simplest expression is just a number, the size of the die to roll:
`20` or `d20` rolls a twenty sided die. Prefix a count to roll several
dice, e.g. `3d6`.

To drop dice use `d` (lowest) or `D` (highest): `4d6d1` rolls four six
sided dice dropping the lowest, `2d20D1` drops the higher of two d20s.
To keep dice use `k` (highest) or `K` (lowest): `4d6k3`, `2d20K1`.

Add a constant with `+` or `-`: `4d6+1`, `3d6-2`, `2d20K1+7`.

Run without any expressions to enter interactive mode."""

EPILOG = """\
summary:
  3d6      3 x d6
  4d6d1    3 x d6 dropping lowest
  20+1     1 x d20 and add one to the result
  2d8K1-1  2 x d8 keep the lower and subtract 1"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog='dicelang',
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-q', '--quiet', action='store_true', help='Quiet output (just the result)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible rolls')
    parser.add_argument('--settings', default=None, help='Path to settings.json')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('expression', nargs='*', help='Roll expressions, ie `4d6k3 4d6d1`')
    return parser


def split_expressions(args):
    tokens = []
    for arg in args:
        tokens.extend(arg.split())
    return tokens


def report(dice: Dice, notations) -> int:
    """Prints every outcome in order and returns how many failed."""
    failed = 0
    for outcome in dice.roll_all(notations):
        if outcome.ok:
            print(dice.render(outcome))
        else:
            failed += 1
            print(dice.render(outcome), file=sys.stderr)
    return failed


def repl(dice: Dice, parser) -> int:
    print(f'dicelang {__version__}')
    print("enter 'help' for help, 'exit' to exit")
    while True:
        try:
            line = input('>> ')
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            continue

        line = line.strip()
        if line == 'exit':
            return 0
        if line in ('help', '?'):
            parser.print_help()
            continue
        if line:
            report(dice, line.split())


def main(argv=None) -> int:
    # Load environment variables from .env file
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    seed = args.seed if args.seed is not None else settings.seed
    logger.debug('Using seed %s, max dice %s', seed, settings.max_dice)

    roller = DiceRoller(random.Random(seed), max_dice=settings.max_dice)
    dice = Dice(roller, quiet=args.quiet or settings.quiet)

    if not args.expression:
        return repl(dice, parser)
    return 1 if report(dice, split_expressions(args.expression)) else 0


if __name__ == '__main__':
    sys.exit(main())
