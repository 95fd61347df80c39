"""Base useflags exceptions."""

from snakeoil.cli.exceptions import UserException


class UseflagsException(Exception):
    """Generic useflags exception."""


class UseflagsUserException(UseflagsException, UserException):
    """Generic useflags exception with a sane string for non-debug, user-facing output."""


class ProfileError(UseflagsUserException):

    def __init__(self, path, filename, error):
        super().__init__(str(error))
        self.path, self.filename, self.error = path, filename, error

    def __str__(self):
        if self.filename:
            return f"failed parsing {self.filename!r} in {self.path!r}: {self.error}"
        return f"failed parsing {self.path!r}: {self.error}"


class NonexistentProfile(ProfileError):
    """Profile for a nonexistent directory."""

    def __init__(self, path):
        super().__init__(path, "", "nonexistent profile directory")


class ProfileRecursionError(ProfileError):
    """Parent profile chain too deep, most likely cyclic."""

    def __init__(self, path, depth):
        super().__init__(path, "parent", f"profile nesting exceeds {depth} levels")
        self.depth = depth


class EmptyUseVariable(UseflagsUserException):
    """No USE variable found in make.conf."""

    def __init__(self, source=None):
        self.source = source
        super().__init__(str(self))

    def __str__(self):
        if self.source:
            return f'no USE variable found in {self.source}'
        return 'no USE variable found'


class SnapshotError(UseflagsUserException):

    def __init__(self, path, error, write=False):
        self.path, self.error, self.write = path, error, write
        super().__init__(str(self))

    def __str__(self):
        action = 'writing' if self.write else 'reading'
        return f'failed {action} snapshot {self.path!r}: {self.error}'


class InvalidStatus(UseflagsException, ValueError):
    """Status text not produced by the encoder."""

    def __init__(self, text):
        super().__init__(f'invalid flag status: {text!r}')
        self.text = text


class ShellError(UseflagsUserException):

    def __init__(self, paths, ret, output=''):
        self.paths, self.ret, self.output = tuple(paths), ret, output
        super().__init__(str(self))

    def __str__(self):
        s = f"sourcing {', '.join(map(repr, self.paths))} failed with exit status {self.ret}"
        if self.output:
            s += f': {self.output}'
        return s


class MissingBackend(UseflagsUserException):

    def __init__(self, backend, error):
        self.backend, self.error = backend, error
        super().__init__(str(self))

    def __str__(self):
        return f'config backend {self.backend!r} unavailable: {self.error}'
