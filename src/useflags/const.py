"""
Internal constants.
"""

import os

from . import __title__

osp = os.path


def _GET_CONST(attr, default_value, allow_environment_override=True):
    result = default_value
    if allow_environment_override:
        result = os.environ.get(f'USEFLAGS_OVERRIDE_{attr}', result)
    if isinstance(default_value, int):
        result = int(result)
    return result


# XDG compatible data path
USER_DATA_PATH = osp.join(
    os.environ.get('XDG_DATA_HOME', osp.expanduser('~/.local/share')), __title__)

SNAPSHOT_FILE = _GET_CONST(
    'SNAPSHOT_FILE', osp.join(USER_DATA_PATH, 'snapshot'))

# parent profile chains longer than this are assumed to be cyclic
MAX_PROFILE_DEPTH = _GET_CONST('MAX_PROFILE_DEPTH', 1000)

# diff placeholder for a flag missing from one side
MISSING_FLAG = 'NONE'

# paths relative to the configuration root, in lookup order
SYSTEM_PROFILE_PATHS = ('etc/portage/make.profile', 'etc/make.profile')
USER_PROFILE_PATH = 'etc/portage/profile'
MAKE_CONF_PATHS = ('etc/make.conf', 'etc/portage/make.conf')

# per-profile files, applied in this order
USE_MASK = 'use.mask'
USE_DESC = 'use.desc'
USE_LOCAL_DESC = 'use.local.desc'
USE_DEFAULTS = 'use.defaults'
MAKE_DEFAULTS = 'make.defaults'
PARENT = 'parent'

# config-variable backends in order of preference
BACKENDS = ('eix', 'portageq')
