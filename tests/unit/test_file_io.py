import json
from unittest.mock import MagicMock

import pytest
import requests
from karyotrack.annotate.base import RawAnnotationSet
from karyotrack.annotate.file_io import (
    detect_format,
    fetch_annotations,
    load_annotations,
    parse_annotations_json,
    parse_bed,
    read_annotations,
    rgb_to_hex,
)
from karyotrack.error import FetchFailed, MalformedPayload, UnsupportedFormat

from ..util import get_data


def mock_session(text='', status_error=None, get_error=None):
    response = MagicMock(spec=requests.Response)
    response.text = text
    if status_error:
        response.raise_for_status.side_effect = status_error
    session = MagicMock(spec=requests.Session)
    if get_error:
        session.get.side_effect = get_error
    else:
        session.get.return_value = response
    return session


class TestRgbToHex:
    def test_convert(self):
        assert rgb_to_hex('255,0,0') == '#ff0000'
        assert rgb_to_hex('0,128,255') == '#0080ff'

    def test_unset(self):
        assert rgb_to_hex('0') is None
        assert rgb_to_hex('.') is None

    def test_bad_values(self):
        with pytest.raises(MalformedPayload):
            rgb_to_hex('255,0')
        with pytest.raises(MalformedPayload):
            rgb_to_hex('256,0,0')


class TestParseBed:
    def test_file(self):
        with open(get_data('annotations.bed'), 'r') as fh:
            raw = parse_bed(fh.read())
        assert raw.keys == ['name', 'start', 'length', 'trackIndex', 'color']
        assert [g.chr for g in raw.annots] == ['1', '2']
        assert raw.annots[0].annots == [
            ['BRCA1', 1000, 200, 0, '#ff0000'],
            ['MYC', 1500, 500, 0, '#008000'],
        ]
        assert raw.annots[1].annots == [['TP53', 100, 50, 0, '#0000ff']]
        assert len(raw) == 3

    def test_three_columns(self):
        raw = parse_bed('chr1 0 10\nchr1 10 20\n')
        assert raw.keys == ['start', 'length', 'trackIndex']
        assert raw.annots[0].annots == [[1, 10, 0], [11, 10, 0]]

    def test_partial_item_rgb(self):
        raw = parse_bed('chr1\t0\t10\ta\t0\t+\t0\t10\t255,0,0\nchr1\t10\t20\tb\t0\t+\t10\t20\t0\n')
        assert raw.keys == ['name', 'start', 'length', 'trackIndex']
        assert raw.annots[0].annots[1] == ['b', 11, 10, 0]

    def test_skips_headers_only(self):
        raw = parse_bed('track name=empty\nbrowser position chr1:1-100\n# nothing here\n')
        assert raw.annots == []
        assert len(raw) == 0

    def test_too_few_columns(self):
        with pytest.raises(MalformedPayload):
            parse_bed('chr1\t10\n')

    def test_non_integer_coordinates(self):
        with pytest.raises(MalformedPayload):
            parse_bed('chr1\tten\t20\tname\n')

    def test_ragged_rows(self):
        with pytest.raises(MalformedPayload):
            parse_bed('chr1\t0\t10\tname\nchr1\t10\t20\n')

    def test_end_before_start(self):
        with pytest.raises(MalformedPayload):
            parse_bed('chr1\t20\t10\tname\n')


class TestParseAnnotationsJson:
    def test_text(self):
        with open(get_data('annotations.json'), 'r') as fh:
            raw = parse_annotations_json(fh.read())
        assert raw.keys == ['name', 'start', 'length']
        assert [g.chr for g in raw.annots] == ['2', '1', '99']

    def test_integer_chr(self):
        raw = parse_annotations_json({'keys': ['start', 'length'], 'annots': [{'chr': 1, 'annots': []}]})
        assert raw.annots[0].chr == '1'

    def test_invalid_json(self):
        with pytest.raises(MalformedPayload):
            parse_annotations_json('{"keys": [')

    @pytest.mark.parametrize(
        'data',
        [
            {'annots': []},
            {'keys': [], 'annots': []},
            {'keys': ['start', 'length'], 'annots': [{'annots': []}]},
            {'keys': ['start', 'length'], 'annots': [{'chr': '1', 'annots': [1, 2]}]},
        ],
    )
    def test_schema_errors(self, data):
        with pytest.raises(MalformedPayload):
            parse_annotations_json(data)

    def test_missing_required_keys(self):
        with pytest.raises(MalformedPayload):
            parse_annotations_json({'keys': ['name', 'start'], 'annots': []})

    def test_duplicate_keys(self):
        with pytest.raises(MalformedPayload):
            parse_annotations_json({'keys': ['start', 'length', 'start'], 'annots': []})


class TestDetectFormat:
    def test_extension(self):
        assert detect_format('https://example.org/genes.bed') == 'bed'
        assert detect_format('https://example.org/genes.json?v=1') == 'json'

    def test_declared_format(self):
        assert detect_format('https://example.org/genes', 'BED') == 'bed'

    def test_extension_is_case_sensitive(self):
        with pytest.raises(UnsupportedFormat) as exc:
            detect_format('https://example.org/genes.BED')
        assert exc.value.extension == 'BED'

    def test_unsupported(self):
        with pytest.raises(UnsupportedFormat) as exc:
            detect_format('https://example.org/data.xyz')
        assert exc.value.extension == 'xyz'
        assert 'XYZ' in str(exc.value)


class TestFetchAnnotations:
    def test_json(self):
        with open(get_data('annotations.json'), 'r') as fh:
            session = mock_session(fh.read())
        raw = fetch_annotations('https://example.org/annots.json', session=session, timeout=5)
        session.get.assert_called_once_with('https://example.org/annots.json', timeout=5)
        assert len(raw) == 4

    def test_bed(self):
        session = mock_session('chr1\t0\t10\tgene\n')
        raw = fetch_annotations('https://example.org/annots.bed?token=abc', session=session)
        assert raw.annots[0].annots == [['gene', 1, 10, 0]]

    def test_unsupported_is_not_requested(self):
        session = mock_session('')
        with pytest.raises(UnsupportedFormat):
            fetch_annotations('https://example.org/data.xyz', session=session)
        session.get.assert_not_called()

    def test_http_error(self):
        session = mock_session(status_error=requests.HTTPError('404 Client Error'))
        with pytest.raises(FetchFailed) as exc:
            fetch_annotations('https://example.org/annots.json', session=session)
        assert exc.value.url == 'https://example.org/annots.json'
        assert isinstance(exc.value.__cause__, requests.HTTPError)

    def test_connection_error(self):
        session = mock_session(get_error=requests.ConnectionError('refused'))
        with pytest.raises(FetchFailed):
            fetch_annotations('https://example.org/annots.bed', session=session)

    def test_malformed_body(self):
        session = mock_session('<html></html>')
        with pytest.raises(MalformedPayload):
            fetch_annotations('https://example.org/annots.json', session=session)


class TestLoadAnnotations:
    def test_bed(self):
        raw = load_annotations(get_data('annotations.bed'))
        assert raw.keys[-1] == 'color'

    def test_json(self):
        raw = load_annotations(get_data('annotations.json'))
        assert len(raw) == 4

    def test_other_extension_read_as_json(self, tmp_path):
        filename = tmp_path / 'annotations.txt'
        filename.write_text(json.dumps({'keys': ['start', 'length'], 'annots': []}))
        raw = load_annotations(str(filename))
        assert raw.annots == []

    def test_error_names_file(self, tmp_path):
        filename = tmp_path / 'broken.json'
        filename.write_text('not json')
        with pytest.raises(MalformedPayload) as exc:
            load_annotations(str(filename))
        assert 'broken.json' in str(exc.value)


class TestReadAnnotations:
    def test_resident_object(self):
        raw = RawAnnotationSet(keys=['start', 'length'])
        assert read_annotations(raw) is raw

    def test_dict(self):
        raw = read_annotations({'keys': ['start', 'length'], 'annots': [{'chr': 'X', 'annots': [[1, 2]]}]})
        assert raw.annots[0].chr == 'X'

    def test_remote(self):
        session = mock_session('chr2\t0\t10\n')
        raw = read_annotations('https://example.org/annots.bed', session=session)
        assert raw.annots[0].chr == '2'

    def test_local(self):
        raw = read_annotations(get_data('annotations.bed'))
        assert len(raw) == 3
