import os
import textwrap

import pytest
from useflags import snapshot
from useflags.exceptions import SnapshotError
from useflags.flags import FlagRecord, FlagStore


def mk_store(**flags):
    return FlagStore({k: FlagRecord(**v) for k, v in flags.items()})


class TestIterLines:

    def test_sorted(self):
        store = mk_store(
            zlib=dict(set=1, default=1, documented=1),
            acl=dict(set=-1, manual=-1, documented=1),
            bar=dict(set=1, masked=1))
        assert list(snapshot.iter_lines(store)) == [
            'acl: minus, make.conf',
            'bar: (on, undocumented)',
            'zlib: on, default',
        ]
        assert list(snapshot.iter_lines(store, brief=True)) == [
            'acl: minus', 'bar: minus', 'zlib: on']


class TestSaveLoad:

    def test_roundtrip(self, tmp_path):
        store = mk_store(
            foo=dict(set=1, manual=1, documented=1),
            bar=dict(set=-1, default=-1),
            baz=dict(masked=1, documented=1))
        path = str(tmp_path / 'nested' / 'snapshot')
        snapshot.save(store, path)
        assert os.path.isfile(path)
        loaded = snapshot.load(path)
        assert list(snapshot.iter_lines(loaded)) == list(snapshot.iter_lines(store))

    def test_file_format(self, tmp_path):
        path = tmp_path / 'snapshot'
        snapshot.save(mk_store(foo=dict(set=1, documented=1)), str(path))
        assert path.read_text() == 'foo: on\n'

    def test_overwrite(self, tmp_path):
        path = str(tmp_path / 'snapshot')
        snapshot.save(mk_store(foo=dict(set=1)), path)
        snapshot.save(mk_store(bar=dict(set=1)), path)
        assert list(snapshot.load(path).keys()) == ['bar']

    def test_skips_junk(self, tmp_path):
        path = tmp_path / 'snapshot'
        path.write_text(textwrap.dedent("""\
            # saved snapshot

            foo: on, make.conf
            bar: sideways
            :on
            baz off
            """))
        store = snapshot.load(str(path))
        assert sorted(store.keys()) == ['baz', 'foo']
        assert store['foo'] == FlagRecord(set=1, manual=1, documented=1)
        assert store['baz'] == FlagRecord(documented=1)

    def test_load_into_store(self, tmp_path):
        path = tmp_path / 'snapshot'
        path.write_text('foo: on\n')
        store = mk_store(bar=dict(set=1))
        assert snapshot.load(str(path), store) is store
        assert list(store.keys()) == ['foo']

    def test_missing(self, tmp_path):
        path = str(tmp_path / 'missing')
        with pytest.raises(SnapshotError) as excinfo:
            snapshot.load(path)
        assert not excinfo.value.write
        assert 'reading' in str(excinfo.value)

    def test_unwritable(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('')
        with pytest.raises(SnapshotError) as excinfo:
            snapshot.save(FlagStore(), str(blocker / 'snapshot'))
        assert excinfo.value.write


class TestDiff:

    def test_changes(self):
        old = mk_store(
            foo=dict(set=1, manual=1, documented=1),
            bar=dict(set=1, documented=1),
            same=dict(set=-1, documented=1))
        new = mk_store(
            bar=dict(set=-1, manual=-1, documented=1),
            same=dict(set=-1, documented=1),
            baz=dict(set=1, documented=1))
        entries = snapshot.diff(old, new)
        assert entries == [
            ('bar', 'on', 'minus, make.conf'),
            ('baz', 'NONE', 'on'),
            ('foo', 'on, make.conf', 'NONE'),
        ]
        assert list(snapshot.format_diff(entries)) == [
            'bar: on -> minus, make.conf',
            'baz: NONE -> on',
            'foo: on, make.conf -> NONE',
        ]

    def test_reverse(self):
        old = mk_store(foo=dict(set=1, documented=1))
        new = mk_store(foo=dict(set=-1, documented=1), bar=dict(documented=1))
        assert snapshot.diff(old, new, reverse=True) == [
            (name, b, a) for name, a, b in snapshot.diff(old, new)]

    def test_identical(self):
        store = mk_store(foo=dict(set=1))
        assert snapshot.diff(store, mk_store(foo=dict(set=1))) == []
        assert snapshot.diff(FlagStore(), FlagStore()) == []

    def test_expressed_fields_only(self):
        old = mk_store(foo=dict(set=2, default=1, documented=1))
        new = mk_store(foo=dict(set=1, default=-1, documented=3))
        assert snapshot.diff(old, new) == []
