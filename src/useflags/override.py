"""Applying USE-variable style expressions to a flag store."""

__all__ = (
    "is_glob", "compile_glob", "apply_flags", "apply_override", "apply_defaults",
    "apply_make_conf", "touch_flags",
)

import re
from functools import lru_cache

from .exceptions import EmptyUseVariable
from .log import logger

_wildcards = frozenset('?*')


def is_glob(token):
    return not _wildcards.isdisjoint(token)


@lru_cache(maxsize=None)
def compile_glob(pattern):
    """Compile a ``?``/``*`` glob into an anchored regex."""
    chunks = []
    for c in pattern:
        if c == '*':
            chunks.append('.*')
        elif c == '?':
            chunks.append('.')
        else:
            chunks.append(re.escape(c))
    return re.compile(''.join(chunks), re.DOTALL)


def _iter_matches(store, token):
    """Yield the records a token refers to.

    Globs only match flags already in the store; literal names are created.
    """
    if is_glob(token):
        regex = compile_glob(token)
        for name in sorted(store.keys()):
            if regex.fullmatch(name):
                yield store[name]
    else:
        yield store.get_or_create(token)


def apply_flags(store, expression, value, field, secondary, forced):
    """Write ``value`` to ``field`` (and ``secondary``) for each matched flag."""
    for token in expression.split():
        for record in _iter_matches(store, token):
            store.write(record, field, secondary, value, forced=forced)


def apply_override(store, expression, value):
    """Force a user override of the flags in ``expression`` to ``value``."""
    apply_flags(store, expression, value, 'manual', 'set', forced=True)


def _split_signed(text):
    for token in text.split():
        if token[0] == '-':
            if len(token) == 1:
                logger.warning("'-' negation without a flag, ignoring")
                continue
            yield token[1:], -1
        else:
            yield token, 1


def touch_flags(store, text):
    """Create the literal flags named in ``text`` without writing any field."""
    for token in text.split():
        if token[0] == '-':
            token = token[1:]
        if token and not is_glob(token):
            store.get_or_create(token)


def apply_defaults(store, text):
    """Apply profile defaults (``make.defaults`` USE) without overriding pinned flags."""
    for token, value in _split_signed(text):
        apply_flags(store, token, value, 'default', 'set', forced=False)


def apply_make_conf(store, text, source=None):
    """Apply the USE variable of make.conf as user overrides.

    :param source: description of where ``text`` came from, used in errors
    :raises EmptyUseVariable: if ``text`` contains no flags
    """
    if not text.strip():
        raise EmptyUseVariable(source)
    for token, value in _split_signed(text):
        apply_override(store, token, value)
