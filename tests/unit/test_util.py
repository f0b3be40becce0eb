import pytest
from karyotrack.util import (
    bash_expands,
    cast_boolean,
    filepath,
    get_extension,
    is_remote,
    round_half_up,
    strip_chr_prefix,
)

from ..util import get_data


class TestCast:
    def test_boolean(self):
        assert cast_boolean('t') is True
        assert cast_boolean('Yes') is True
        assert cast_boolean('0') is False
        assert cast_boolean('F') is False
        with pytest.raises(TypeError):
            cast_boolean('maybe')


class TestRoundHalfUp:
    def test_ties(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(1100.5) == 1101
        assert round_half_up(-0.5) == 0

    def test_nearest(self):
        assert round_half_up(2.49) == 2
        assert round_half_up(2.51) == 3


class TestGetExtension:
    @pytest.mark.parametrize(
        'locator,expected',
        [
            ['https://example.org/genes.bed', 'bed'],
            ['https://example.org/genes.json?version=2', 'json'],
            ['https://example.org/genes.BED', 'BED'],
            ['https://example.org/v1.2/genes', ''],
            ['data.xyz', 'xyz'],
            ['/path/to/annots.tar.gz', 'gz'],
        ],
    )
    def test_get_extension(self, locator, expected):
        assert get_extension(locator) == expected


class TestIsRemote:
    def test_remote(self):
        assert is_remote('https://example.org/genes.bed')
        assert is_remote('http://example.org/genes.bed')

    def test_local(self):
        assert not is_remote('/data/genes.bed')
        assert not is_remote('genes.json')


class TestStripChrPrefix:
    def test_strip(self):
        assert strip_chr_prefix('chr1') == '1'
        assert strip_chr_prefix('chrX') == 'X'

    def test_no_prefix(self):
        assert strip_chr_prefix('X') == 'X'
        assert strip_chr_prefix(2) == '2'

    def test_only_leading(self):
        assert strip_chr_prefix('1chr') == '1chr'


class TestBashExpands:
    def test_brace_expansion(self):
        files = bash_expands(get_data('annotations.{json,bed}'))
        assert len(files) == 2

    def test_missing(self):
        with pytest.raises(FileNotFoundError):
            bash_expands(get_data('missing_*.json'))

    def test_filepath(self):
        assert filepath(get_data('config.json')).endswith('config.json')
        with pytest.raises(TypeError):
            filepath(get_data('annotations.*'))
