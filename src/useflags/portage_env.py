"""Access to the Portage configuration of a system.

This wraps the external helpers used to query Portage (eix, portageq and the
shell) and knows where profiles and make.conf live below a configuration root.
Helpers are looked up once by :func:`detect_backends` and :class:`Shell` and
then handed to the objects needing them.
"""

__all__ = (
    "EixBackend", "PortageqBackend", "detect_backends", "VarReader",
    "enumerate_repos", "ProfileLocator", "Shell", "PortageEnv",
)

import os
import re

from snakeoil import process
from snakeoil.osutils import listdir_files, pjoin
from snakeoil.process.spawn import spawn_get_output
from snakeoil.sequences import stable_unique

from . import const
from .exceptions import MissingBackend, NonexistentProfile, ShellError
from .flags import FlagStore
from .log import logger
from .override import apply_make_conf
from .profiles import ProfileResolver

_var_name_re = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _check_var_name(name):
    if not _var_name_re.match(name):
        raise ValueError(f'invalid variable name: {name!r}')


class Backend:
    """Query tool reporting the value of a Portage variable."""

    binary = None

    def __init__(self, binary_path):
        self.binary_path = binary_path

    def __repr__(self):
        return f'<{self.__class__.__name__} binary_path={self.binary_path!r}>'

    def command(self, name):
        raise NotImplementedError(self, 'command')

    def read(self, name, env=None):
        """Return the value of ``name``, an empty string if it's undefined."""
        _check_var_name(name)
        if env is None:
            env = dict(os.environ)
        ret, out = spawn_get_output(self.command(name), env=env)
        if ret != 0:
            logger.debug(f'{self.binary}: {name} undefined (exit status {ret})')
            return ''
        return ''.join(out).strip()


class EixBackend(Backend):

    binary = 'eix'

    def command(self, name):
        return [self.binary_path, '--print', name]


class PortageqBackend(Backend):

    binary = 'portageq'

    def command(self, name):
        return [self.binary_path, 'envvar', name]


_backends = {x.binary: x for x in (EixBackend, PortageqBackend)}


def detect_backends(choice='auto'):
    """Find the config-variable backends to use.

    :param choice: ``auto`` for every installed backend in order of
        preference, ``none`` for no backends, or a backend name
    :raises MissingBackend: if an explicitly requested backend isn't installed
    """
    if choice == 'none':
        return ()
    elif choice == 'auto':
        names, fatal = const.BACKENDS, False
    else:
        names, fatal = (choice,), True

    backends = []
    for name in names:
        try:
            kls = _backends[name]
        except KeyError:
            raise MissingBackend(name, 'unknown backend')
        try:
            backends.append(kls(process.find_binary(kls.binary)))
        except process.CommandNotFound as e:
            if fatal:
                raise MissingBackend(name, str(e)) from e
            logger.info(f'config backend {name!r} not found, skipping')
    if not backends:
        logger.warning('no config backend available, repositories must be given explicitly')
    return tuple(backends)


class VarReader:
    """Read Portage variables, asking each backend in turn."""

    def __init__(self, backends, root=None):
        self.backends = tuple(backends)
        self.env = None
        if root is not None:
            self.env = dict(os.environ, ROOT=root)

    def read_var(self, name):
        for backend in self.backends:
            value = backend.read(name, env=self.env)
            if value:
                return value
        return ''


def enumerate_repos(reader, root='/'):
    """Find the repositories and configuration root of an installation.

    :return: tuple of repository paths (main repository first) and the
        configuration root
    """
    repos = [reader.read_var('PORTDIR')]
    repos.extend(reader.read_var('PORTDIR_OVERLAY').split())
    repos = tuple(stable_unique(x for x in repos if x))
    config_root = (
        os.environ.get('PORTAGE_CONFIGROOT') or
        reader.read_var('PORTAGE_CONFIGROOT') or
        root)
    return repos, config_root


class ProfileLocator:
    """Locate profile and make.conf paths below a configuration root."""

    def __init__(self, config_root='/'):
        self.config_root = config_root

    def system_profile(self):
        """Path of the selected profile, with symlinks resolved.

        :raises NonexistentProfile: if no profile is selected
        """
        for rel in const.SYSTEM_PROFILE_PATHS:
            path = pjoin(self.config_root, rel)
            if os.path.isdir(path):
                return os.path.realpath(path)
        raise NonexistentProfile(pjoin(self.config_root, const.SYSTEM_PROFILE_PATHS[0]))

    @staticmethod
    def repo_profiles(repos):
        return tuple(pjoin(repo, 'profiles') for repo in repos)

    def user_profile(self):
        return pjoin(self.config_root, const.USER_PROFILE_PATH)

    def make_conf_files(self):
        """Existing make.conf files in sourcing order.

        A make.conf directory contributes its non-hidden, non-backup files in
        alphabetical order.
        """
        files = []
        for rel in const.MAKE_CONF_PATHS:
            path = pjoin(self.config_root, rel)
            if os.path.isdir(path):
                files.extend(
                    pjoin(path, x) for x in sorted(listdir_files(path))
                    if not (x.startswith('.') or x.endswith('~')))
            elif os.path.isfile(path):
                files.append(path)
        return files


class Shell:
    """Shell used to expand variables of bash-syntax config files."""

    def __init__(self, binary='bash'):
        try:
            self.binary_path = process.find_binary(binary)
        except process.CommandNotFound as e:
            raise MissingBackend(binary, str(e)) from e

    def source_variable(self, paths, name):
        """Source ``paths`` in order and return the expansion of ``name``.

        :raises ShellError: if sourcing fails
        """
        _check_var_name(name)
        paths = tuple(paths)
        if not paths:
            return ''
        script = f'unset {name}; for f; do source "$f" || exit; done; printf "%s" "${{{name}}}"'
        ret, out = spawn_get_output(
            [self.binary_path, '-c', script, 'useflags'] + list(paths),
            env=dict(os.environ))
        if ret != 0:
            raise ShellError(paths, ret)
        return ''.join(out)

    def read_use(self, path):
        return self.source_variable((path,), 'USE')


class PortageEnv:
    """Everything needed to resolve the USE flags of a system.

    :param reader: :obj:`VarReader` used for repository lookups
    :param shell: :obj:`Shell` used to expand make.conf and make.defaults
    :param root: installation root
    :param config_root: configuration root, enumerated if not given
    :param repos: repository paths, enumerated if not given
    """

    def __init__(self, reader, shell, root='/', config_root=None, repos=None):
        self.reader = reader
        self.shell = shell
        self.root = root
        if repos is None or config_root is None:
            found_repos, found_root = enumerate_repos(reader, root)
            if repos is None:
                repos = found_repos
            if config_root is None:
                config_root = found_root
        self.repos = tuple(repos)
        self.config_root = config_root
        self.locator = ProfileLocator(config_root)

    def resolve(self):
        """Return a store with the effective USE flags of the system."""
        store = FlagStore()
        resolver = ProfileResolver(store, self.shell.read_use)
        resolver.resolve(
            self.locator.system_profile(),
            repo_profiles=self.locator.repo_profiles(self.repos),
            user_profile=self.locator.user_profile())

        files = self.locator.make_conf_files()
        source = ', '.join(files) if files else 'make.conf'
        apply_make_conf(store, self.shell.source_variable(files, 'USE'), source=source)
        return store
