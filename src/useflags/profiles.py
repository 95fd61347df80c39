"""Profile inheritance resolution.

Profiles are walked parents first, so forced writes (``use.mask``) from nearer
layers override farther ones.  ``make.defaults`` is applied nearest first with
soft writes instead, so the nearest layer mentioning a flag pins its default.
"""

__all__ = ("ProfileResolver", "read_profile_tokens", "parent_paths")

import os

from snakeoil.bash import iter_read_bash
from snakeoil.osutils import abspath, pjoin

from . import const
from .exceptions import (NonexistentProfile, ProfileError,
                         ProfileRecursionError)
from .log import logger
from .override import apply_defaults, touch_flags


def read_profile_tokens(path, filename):
    """Yield the first token of each non-comment line of a profile file.

    Missing files yield nothing.
    """
    fp = pjoin(path, filename)
    try:
        for line in iter_read_bash(fp):
            token = line.split(None, 1)[0]
            if token:
                yield token
    except FileNotFoundError:
        return
    except (UnicodeDecodeError, EnvironmentError) as e:
        raise ProfileError(path, filename, e) from e


def parent_paths(path):
    """Absolute paths of the parents listed in a profile's ``parent`` file."""
    return tuple(
        abspath(pjoin(path, token))
        for token in read_profile_tokens(path, const.PARENT))


def _local_flag(token):
    return token.split(':', 1)[-1]


class ProfileResolver:
    """Merge profile data into a :obj:`useflags.flags.FlagStore`.

    :param store: store to populate
    :param read_defaults: callable taking a ``make.defaults`` path and
        returning the expansion of its USE variable
    :param max_depth: maximum parent nesting before giving up
    """

    def __init__(self, store, read_defaults, max_depth=const.MAX_PROFILE_DEPTH):
        self.store = store
        self.read_defaults = read_defaults
        self.max_depth = max_depth

    def stack(self, path):
        """Return the profile directories of a profile, parents first.

        :raises NonexistentProfile: if the profile or one of its parents
            doesn't exist
        :raises ProfileRecursionError: if parents nest too deep
        """
        stack = []
        # walked iteratively; cyclic parents would exhaust the interpreter
        # recursion limit long before max_depth is reached
        todo = [(abspath(path), 0, False)]
        while todo:
            path, depth, expanded = todo.pop()
            if expanded:
                stack.append(path)
                continue
            if depth > self.max_depth:
                raise ProfileRecursionError(path, self.max_depth)
            if not os.path.isdir(path):
                raise NonexistentProfile(path)
            todo.append((path, depth, True))
            todo.extend((parent, depth + 1, False)
                        for parent in reversed(parent_paths(path)))
        return tuple(stack)

    def apply_node(self, path):
        """Apply the masking and documentation files of a single directory."""
        store = self.store
        logger.debug(f'reading profile {path!r}')

        for token in read_profile_tokens(path, const.USE_MASK):
            if token[0] == '-':
                value, token = 0, token[1:]
            else:
                value = 1
            if token:
                store.write(store.get_or_create(token), 'masked', None, value, forced=True)

        for filename, extract in ((const.USE_DESC, None),
                                  (const.USE_LOCAL_DESC, _local_flag)):
            for token in read_profile_tokens(path, filename):
                if extract is not None:
                    token = extract(token)
                if token:
                    store.write(store.get_or_create(token), 'documented', None, 1)

        # deprecated auto-defaults only make flags known
        for token in read_profile_tokens(path, const.USE_DEFAULTS):
            store.get_or_create(token.lstrip('-'))

    def read_make_defaults(self, path):
        """Return the USE expansion of a layer's make.defaults, None if absent."""
        fp = pjoin(path, const.MAKE_DEFAULTS)
        if not os.path.isfile(fp):
            return None
        logger.debug(f'reading {fp!r}')
        return self.read_defaults(fp)

    def apply_make_defaults(self, layers):
        """Apply make.defaults of ``layers`` (parents first), nearest layer winning."""
        defaults = [text for text in map(self.read_make_defaults, layers) if text is not None]
        # globs in nearer layers have to see flags only farther layers introduce
        for text in defaults:
            touch_flags(self.store, text)
        for text in reversed(defaults):
            apply_defaults(self.store, text)

    def apply_root(self, path):
        """Apply a repository profiles root; these may be absent."""
        if not os.path.isdir(path):
            logger.debug(f'skipping nonexistent profiles root {path!r}')
            return
        self.apply_node(path)

    def resolve(self, system_profile, repo_profiles=(), user_profile=None):
        """Populate the store from all profile layers.

        :param system_profile: path of the selected profile (required)
        :param repo_profiles: repository ``profiles`` directories (optional)
        :param user_profile: path of the user's profile overrides (optional)
        :return: the populated store
        """
        for path in repo_profiles:
            self.apply_root(path)

        layers = list(self.stack(system_profile))
        if user_profile is not None:
            if os.path.isdir(user_profile):
                layers.extend(self.stack(user_profile))
            else:
                logger.debug(f'no user profile at {user_profile!r}')

        for path in layers:
            self.apply_node(path)
        self.apply_make_defaults(layers)
        return self.store
