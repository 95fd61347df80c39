"""Saving, loading and comparing flag snapshots.

A snapshot file holds one ``<flag>: <status>`` line per flag, sorted by flag
name, where the status is the full form produced by
:func:`useflags.codec.encode`.  Comments and blank lines are ignored when
reading.
"""

__all__ = ("save", "load", "diff", "format_diff", "iter_lines")

import os
import re

from snakeoil.bash import iter_read_bash
from snakeoil.fileutils import AtomicWriteFile
from snakeoil.osutils import ensure_dirs

from . import codec, const
from .exceptions import InvalidStatus, SnapshotError
from .flags import FlagStore
from .log import logger

_line_re = re.compile(r'^(?P<name>[^:\s]+)[:\s]\s*(?P<status>.*)$')


def iter_lines(store, brief=False):
    """Yield ``<flag>: <status>`` lines sorted by flag name."""
    for name in store.sorted_names():
        yield f'{name}: {codec.encode(store[name], brief=brief)}'


def save(store, path):
    """Write a store to ``path``, replacing the file atomically.

    :raises SnapshotError: if the file can't be written
    """
    f = None
    try:
        dirname = os.path.dirname(path)
        if dirname and not ensure_dirs(dirname, mode=0o755):
            raise PermissionError(f'failed creating directory {dirname!r}')
        f = AtomicWriteFile(path)
        for line in iter_lines(store):
            f.write(line + '\n')
        f.close()
    except EnvironmentError as e:
        if f is not None:
            f.discard()
        raise SnapshotError(path, e, write=True) from e
    logger.debug(f'saved {len(store)} flags to {path!r}')


def load(path, store=None):
    """Read a snapshot file.

    Lines that can't be parsed are skipped.

    :param store: store to replace the contents of, a new one by default
    :raises SnapshotError: if the file can't be read
    """
    if store is None:
        store = FlagStore()
    else:
        store.clear()

    try:
        for lineno, line in iter_read_bash(path, enum_line=True):
            m = _line_re.match(line)
            if m is None:
                logger.debug(f'{path!r}, line {lineno}: no flag name, skipping')
                continue
            try:
                store[m.group('name')] = codec.decode(m.group('status'))
            except InvalidStatus as e:
                logger.debug(f'{path!r}, line {lineno}: {e}, skipping')
    except (UnicodeDecodeError, EnvironmentError) as e:
        raise SnapshotError(path, e) from e
    return store


def _status(store, name):
    try:
        return codec.encode(store[name])
    except KeyError:
        return const.MISSING_FLAG


def diff(old, new, reverse=False):
    """Compare two stores.

    :param reverse: swap the roles of ``old`` and ``new``
    :return: list of ``(name, old_status, new_status)`` tuples for every flag
        whose status differs, sorted by name; a flag missing from a store has
        the status ``NONE``
    """
    if reverse:
        old, new = new, old
    entries = []
    for name in sorted(set(old.keys()).union(new.keys())):
        old_status, new_status = _status(old, name), _status(new, name)
        if old_status != new_status:
            entries.append((name, old_status, new_status))
    return entries


def format_diff(entries):
    for name, old_status, new_status in entries:
        yield f'{name}: {old_status} -> {new_status}'
