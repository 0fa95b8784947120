import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dicelang.utils.expression import DEFAULT_MAX_DICE

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off', '')


@dataclass
class Settings:
    quiet: bool = False
    seed: Optional[int] = None
    max_dice: int = DEFAULT_MAX_DICE  # 0 disables the limit
    log_level: str = 'WARNING'


def _to_bool(key: str, value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid value for {key}: {value!r} (expected true or false)")


def _to_int(key: str, value, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Invalid value for {key}: {value!r} (expected an integer)")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {key}: {value!r} (expected an integer)") from None
    if minimum is not None and number < minimum:
        raise ValueError(f"Invalid value for {key}: {number} (must be at least {minimum})")
    return number


def _to_level(key: str, value) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid value for {key}: {value!r} (expected one of {', '.join(LOG_LEVELS)})")
    return level


def _read_file(path: str) -> dict:
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug('Settings file %s not found, using defaults.', path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning('Error decoding settings file %s, using defaults: %s', path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning('Settings file %s does not hold an object, using defaults.', path)
        return {}
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Reads settings.json (or path, or $DICE_SETTINGS) and applies the
    DICE_QUIET, DICE_SEED, DICE_MAX_DICE and DICE_LOG_LEVEL overrides.
    """
    path = path or os.getenv('DICE_SETTINGS', 'settings.json')
    data = _read_file(path)
    settings = Settings()

    values = {
        'quiet': data.get('quiet'),
        'seed': data.get('seed'),
        'max_dice': data.get('max_dice'),
        'log_level': data.get('log_level'),
    }
    for key in values:
        env_value = os.getenv(f'DICE_{key.upper()}')
        if env_value is not None:
            values[key] = env_value

    if values['quiet'] is not None:
        settings.quiet = _to_bool('quiet', values['quiet'])
    if values['seed'] not in (None, ''):
        settings.seed = _to_int('seed', values['seed'])
    if values['max_dice'] is not None:
        settings.max_dice = _to_int('max_dice', values['max_dice'], minimum=0)
    if values['log_level'] is not None:
        settings.log_level = _to_level('log_level', values['log_level'])
    return settings
