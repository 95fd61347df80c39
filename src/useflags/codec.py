"""Conversion of flag records to and from human-readable status strings.

The full form is the one stored in snapshot files::

    on
    minus, make.conf
    off, default, undocumented
    (on, make.conf, default)

The base word reflects the sign of ``set``; annotations always appear in the
order above and a masked flag has its whole status wrapped in parentheses.
"""

__all__ = ("encode", "decode", "expressed")

from .exceptions import InvalidStatus
from .flags import FlagRecord

ON, OFF, MINUS = 'on', 'off', 'minus'
MAKE_CONF, DEFAULT, UNDOCUMENTED = 'make.conf', 'default', 'undocumented'

_words = {ON: 1, OFF: 0, MINUS: -1}
_annotations = (MAKE_CONF, DEFAULT, UNDOCUMENTED)


def _sign(value):
    return (value > 0) - (value < 0)


def _word(value):
    if value > 0:
        return ON
    elif value < 0:
        return MINUS
    return OFF


def encode(record, brief=False):
    """Render a record as a status string.

    :param brief: only return the bare status word; masked flags are
        always reported as ``minus``
    """
    if brief:
        if record.masked > 0:
            return MINUS
        return _word(record.set)

    parts = [_word(record.set)]
    if record.manual:
        parts.append(MAKE_CONF)
    if record.default:
        parts.append(DEFAULT)
    if record.documented <= 0:
        parts.append(UNDOCUMENTED)
    s = ', '.join(parts)
    if record.masked > 0:
        s = f'({s})'
    return s


def decode(text):
    """Parse a full status string produced by :func:`encode`.

    :raises InvalidStatus: if the text isn't in the encoder's format
    """
    s = text.strip().lower()
    masked = s.startswith('(') and s.endswith(')')
    if masked:
        s = s[1:-1]
    word, *annotations = (x.strip() for x in s.split(','))

    try:
        value = _words[word]
    except KeyError:
        raise InvalidStatus(text)
    for annotation in annotations:
        if annotation not in _annotations:
            raise InvalidStatus(text)
    if MAKE_CONF in annotations and not value:
        # overrides always carry a sign
        raise InvalidStatus(text)

    record = FlagRecord(set=value, masked=int(masked))
    if MAKE_CONF in annotations:
        record.manual = value
    if DEFAULT in annotations:
        # without an override the effective value came from the defaults
        record.default = value if value and not record.manual else 1
    if UNDOCUMENTED not in annotations:
        record.documented = 1
    return record


def expressed(record):
    """Project a record onto the fields :func:`encode` can express."""
    return (
        _sign(record.set),
        bool(record.manual),
        bool(record.default),
        record.masked > 0,
        record.documented > 0,
    )
