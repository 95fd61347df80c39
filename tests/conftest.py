import os

import pytest
from snakeoil import process
from snakeoil.bash import read_bash_dict


def _find_binary(name):
    try:
        return process.find_binary(name)
    except process.CommandNotFound:
        return None


def pytest_configure(config):
    config.addinivalue_line('markers', 'shell: test sources files with a real bash')


def pytest_collection_modifyitems(config, items):
    if _find_binary('bash') is not None:
        return
    skip_shell = pytest.mark.skip(reason='needs bash')
    for item in items:
        if 'shell' in item.keywords:
            item.add_marker(skip_shell)


@pytest.fixture
def read_defaults():
    """make.defaults USE reader parsing bash syntax in-process."""
    def f(path):
        return read_bash_dict(path).get('USE', '')
    return f


class ProfileTree:
    """Build repositories, profiles and a config root below a directory."""

    def __init__(self, path):
        self.path = path

    def mk_repo(self, name='gentoo', **files):
        profiles = self.path / name / 'profiles'
        profiles.mkdir(parents=True, exist_ok=True)
        for fname, data in files.items():
            (profiles / fname.replace('_', '.')).write_text(data)
        return self.path / name

    def mk_profile(self, rel, parents=(), **files):
        """Create a profile directory; keyword names map '_' to '.'."""
        path = self.path / rel
        path.mkdir(parents=True, exist_ok=True)
        if parents:
            (path / 'parent').write_text('\n'.join(map(str, parents)) + '\n')
        for fname, data in files.items():
            (path / fname.replace('_', '.')).write_text(data)
        return path

    def mk_config_root(self, profile, make_conf='USE="foo"\n', name='root'):
        root = self.path / name
        portage = root / 'etc' / 'portage'
        portage.mkdir(parents=True, exist_ok=True)
        os.symlink(profile, portage / 'make.profile')
        if make_conf is not None:
            (portage / 'make.conf').write_text(make_conf)
        return root


@pytest.fixture
def profile_tree(tmp_path):
    return ProfileTree(tmp_path)
