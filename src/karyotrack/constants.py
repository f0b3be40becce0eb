"""
module responsible for small utility functions and constants used throughout the karyotrack package
"""
PROGNAME: str = 'karyotrack'
EXIT_OK: int = 0


class KaryoNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> nspace = KaryoNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """

    def __init__(self, *pos, **kwargs):
        object.__setattr__(self, '_members', {})
        for k in pos:
            if k in self._members:
                raise AttributeError('Cannot respecify existing attribute', k, self._members[k])
            self[k] = k

        for attr, val in kwargs.items():
            if attr in self._members:
                raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
            self[attr] = val

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()])),
        )

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            return variables[attr]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, val):
        self.__setattr__(key, val)

    def __setattr__(self, attr, val):
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        object.__getattribute__(self, '_members')[attr] = val

    def __iter__(self):
        return iter(self.keys())

    def items(self):
        """
        Example:
            >>> KaryoNamespace(thing=1, otherthing=2).items()
            [('thing', 1), ('otherthing', 2)]
        """
        return [(k, self[k]) for k in self.keys()]

    def keys(self):
        return [k for k in self._members]

    def values(self):
        return [self[k] for k in self._members]

    def enforce(self, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> nspace = KaryoNamespace(thing=1, otherthing=2)
            >>> nspace.enforce(1)
            1
            >>> nspace.enforce(3)
            Traceback (most recent call last):
            ....
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value


SUBCOMMAND = KaryoNamespace(ANNOTATE='annotate', SETTINGS='settings')
"""KaryoNamespace: holds the subcommands of the command line interface"""

ANNOT_FORMAT = KaryoNamespace(BED='bed', JSON='json')
"""KaryoNamespace: wire formats accepted for annotation payloads"""

DEFAULT_ANNOTATIONS_COLOR: str = '#F00'
"""str: color given to annotations which have neither an explicit nor a track color"""

DEFAULT_TRACK_INDEX: int = 0

TRACK_INDEX_SLOT: int = 3
"""int: positional slot of the track index in a raw annotation tuple"""

DEFAULT_BAR_WIDTH: int = 3

GIEMSA_STAIN = KaryoNamespace(
    GNEG='gneg',
    GPOS33='gpos33',
    GPOS50='gpos50',
    GPOS66='gpos66',
    GPOS75='gpos75',
    GPOS25='gpos25',
    GPOS100='gpos100',
    ACEN='acen',
    GVAR='gvar',
    STALK='stalk',
)
"""KaryoNamespace: holds controlled vocabulary relating to stains of chromosome bands"""

CHR_PREFIX: str = 'chr'

DEFAULT_TAXID: str = '9606'
"""str: NCBI taxonomy id used when the organism is not given (Homo sapiens)"""
