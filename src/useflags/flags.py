"""USE flag records and the store mapping flag names to them.

Every field of a :obj:`FlagRecord` is tri-state: ``0`` means unknown (the
flag was never mentioned), a positive value means enabled and a negative
value means explicitly disabled.  Keeping "not mentioned" apart from "off" is
what lets later configuration layers decide whether they may override a value.
"""

__all__ = ("FIELDS", "FlagRecord", "FlagStore")

from snakeoil.klass import generic_equality
from snakeoil.mappings import DictMixin

FIELDS = ('set', 'manual', 'default', 'masked', 'documented')


class FlagRecord(metaclass=generic_equality):
    """Attributes of a single USE flag.

    :ivar set: effective enablement
    :ivar manual: ``set`` was forced by an explicit user override
    :ivar default: value given by profile defaults
    :ivar masked: the profile masks the flag
    :ivar documented: the flag has a description
    """

    __slots__ = FIELDS
    __attr_comparison__ = FIELDS

    def __init__(self, **kwargs):
        for field in FIELDS:
            setattr(self, field, kwargs.pop(field, 0))
        if kwargs:
            raise TypeError(f'unknown flag fields: {", ".join(sorted(kwargs))}')

    def __repr__(self):
        fields = ', '.join(f'{x}={getattr(self, x)}' for x in FIELDS)
        return f'{self.__class__.__name__}({fields})'

    def copy(self):
        return self.__class__(**{x: getattr(self, x) for x in FIELDS})


class FlagStore(DictMixin):
    """Mapping of flag name to :obj:`FlagRecord`."""

    def __init__(self, flags=None):
        self._flags = {}
        if flags is not None:
            self._flags.update(flags)

    def __getitem__(self, key):
        return self._flags[key]

    def __setitem__(self, key, value):
        self._flags[key] = value

    def __delitem__(self, key):
        del self._flags[key]

    def __contains__(self, key):
        return key in self._flags

    def __len__(self):
        return len(self._flags)

    def keys(self):
        return iter(self._flags.keys())

    def clear(self):
        self._flags.clear()

    def __repr__(self):
        return f'<{self.__class__.__name__} flags={len(self)}, @{id(self):#8x}>'

    def get_or_create(self, name):
        """Return the record for ``name``, inserting an unknown one if needed."""
        record = self._flags.get(name)
        if record is None:
            record = self._flags[name] = FlagRecord()
        return record

    @staticmethod
    def write(record, field, secondary, value, forced=False):
        """Write ``value`` into a record field.

        Soft writes (the default) only touch a field that is still unknown;
        forced writes always overwrite.  If the primary write happens and
        ``secondary`` names another field, that field is set to the same value.

        :return: True if the primary field was written
        """
        if not forced and getattr(record, field):
            return False
        setattr(record, field, value)
        if secondary is not None:
            setattr(record, secondary, value)
        return True

    def sorted_names(self):
        return sorted(self._flags)
