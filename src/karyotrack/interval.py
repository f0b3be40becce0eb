class Interval:
    """
    a closed range [start, end] on either the base-pair or the pixel axis
    """

    def __init__(self, start, end=None, number_type=None):
        """
        Args:
            start (int): the start of the interval (inclusive)
            end (int): the end of the interval (inclusive)
            number_type (type): int or float, inferred from start/end when not given
        """
        self.start = start
        self.end = end if end is not None else start

        if number_type is None:
            if (
                int(self.start) != float(self.start)
                or int(self.end) != float(self.end)
                or isinstance(self.start, float)
                or isinstance(self.end, float)
            ):
                number_type = float
            else:
                number_type = int
        self.number_type = number_type

        self.start = self.number_type(self.start)
        self.end = self.number_type(self.end)
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.start
        elif index == 1:
            return self.end
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    def __len__(self):
        """
        the length of the interval

        Example:
            >>> len(Interval(1, 11))
            11

        Warning:
            only works for integer intervals
        """
        return Interval.length(self)

    def length(self):
        if self.number_type == float:
            return self[1] - self[0]
        return self[1] - self[0] + 1

    def __lt__(self, other):
        if self[0] < other[0]:
            return True
        elif self[0] == other[0] and self[1] < other[1]:
            return True
        return False

    def __repr__(self):
        cls = self.__class__.__name__
        number_type = ''
        if self.number_type != int:
            number_type = ', type={}'.format(self.number_type)
        return '{}({}, {}{})'.format(cls, self.start, self.end, number_type)

    def __eq__(self, other):
        if self[0] != other[0] or self[1] != other[1]:
            return False
        return True

    def __contains__(self, other):
        try:
            if other[0] >= self[0] and other[1] <= self[1]:
                return True
        except TypeError:
            if other >= self[0] and other <= self[1]:
                return True
        return False

    def __hash__(self):
        return hash((self[0], self[1]))


class IntervalMapping:
    """
    mapping between coordinate systems using intervals.
    source intervals may share a boundary but must not otherwise overlap
    """

    def __init__(self, mapping=None):
        if mapping is None:
            mapping = dict()
        self.mapping = {}
        for src_interval, tgt_interval in mapping.items():
            self.add(src_interval, tgt_interval)

    def keys(self):
        return self.mapping.keys()

    def items(self):
        return self.mapping.items()

    def __getitem__(self, item):
        return self.mapping[item]

    def __len__(self):
        return len(self.mapping)

    def add(self, src_interval, tgt_interval):
        src_interval = Interval(src_interval[0], src_interval[1], number_type=float)
        tgt_interval = Interval(tgt_interval[0], tgt_interval[1], number_type=float)
        for curr in self.mapping:
            if curr.start < src_interval.end and src_interval.start < curr.end:
                raise ValueError('source intervals in mapping must not overlap', curr, src_interval)
        self.mapping[src_interval] = tgt_interval

    def convert_ratioed_pos(self, pos):
        """
        convert any given position given a mapping of intervals to another range

        Args:
            pos (float): a position in the first coordinate system

        Returns:
            float: the position in the alternate coordinate system given the input mapping

        Raises:
            IndexError: if the input position is not in any of the mapped intervals

        Example:
            >>> mapping = IntervalMapping(mapping={(0, 10): (100, 110), (10, 20): (110, 130)})
            >>> mapping.convert_ratioed_pos(5)
            105.0
            >>> mapping.convert_ratioed_pos(15)
            120.0
        """
        for src_interval, tgt_interval in self.mapping.items():
            if pos in src_interval:
                if src_interval.length() > 0:
                    ratio = tgt_interval.length() / src_interval.length()
                    return tgt_interval.start + (pos - src_interval.start) * ratio
                return tgt_interval.start
        raise IndexError(pos, 'position not found in mapping', list(self.mapping.keys()))
