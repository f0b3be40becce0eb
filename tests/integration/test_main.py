import json
import sys
from unittest.mock import patch

import pytest
from karyotrack.constants import SUBCOMMAND
from karyotrack.main import main

from ..util import get_data


@pytest.fixture
def configpath(tmp_path):
    return tmp_path / 'config.json'


def run_main(args):
    with patch.object(sys, 'argv', ['karyotrack'] + args):
        return main()


class TestHelpMenu:
    @pytest.mark.parametrize('args', [['-h'], [SUBCOMMAND.ANNOTATE, '-h'], [SUBCOMMAND.SETTINGS, '-h']])
    def test_help(self, args):
        with pytest.raises(SystemExit) as exc:
            run_main(args)
        assert exc.value.code == 0

    def test_missing_subcommand(self):
        with pytest.raises(SystemExit) as exc:
            run_main([])
        assert exc.value.code != 0


class TestAnnotate:
    def test_bed(self, tmp_path):
        output = tmp_path / 'out' / 'annotations.json'
        run_main(
            [
                SUBCOMMAND.ANNOTATE,
                '--config',
                get_data('config.json'),
                '--templates',
                get_data('cytoBand.txt'),
                '--annotations',
                get_data('annotations.bed'),
                '--output',
                str(output),
            ]
        )
        result = json.loads(output.read_text())
        assert [g['chr'] for g in result] == ['1', '2', 'X']
        assert [a['name'] for a in result[0]['annots']] == ['BRCA1', 'MYC']
        assert result[0]['annots'][0]['px'] == 220
        assert result[0]['annots'][0]['color'] == '#ff0000'
        assert result[2]['annots'] == []

    def test_json_from_config(self, configpath, tmp_path):
        configpath.write_text(
            json.dumps({'chr_height': 400, 'annotations_path': get_data('annotations.json')})
        )
        output = tmp_path / 'annotations.json'
        run_main(
            [
                SUBCOMMAND.ANNOTATE,
                '-c',
                str(configpath),
                '-t',
                get_data('{cytoBand,missing}.txt'),
                '-o',
                str(output),
            ]
        )
        result = json.loads(output.read_text())
        assert len(result) == 3
        assert [a['name'] for a in result[1]['annots']] == ['TP53', 'KRAS']
        assert result[1]['annots'][0]['chrIndex'] == 0
        assert result[0]['annots'][0]['chrIndex'] == 1

    def test_missing_templates(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            run_main(
                [
                    SUBCOMMAND.ANNOTATE,
                    '-c',
                    get_data('config.json'),
                    '-t',
                    get_data('missing_cytoBand.txt'),
                    '-o',
                    str(tmp_path / 'annotations.json'),
                ]
            )
        assert exc.value.code != 0

    def test_log_file(self, tmp_path):
        log = tmp_path / 'run.log'
        run_main(
            [
                SUBCOMMAND.ANNOTATE,
                '-c',
                get_data('config.json'),
                '-t',
                get_data('cytoBand.txt'),
                '-a',
                get_data('annotations.bed'),
                '-o',
                str(tmp_path / 'annotations.json'),
                '--log',
                str(log),
            ]
        )
        assert 'writing:' in log.read_text()


class TestSettings:
    def test_settings(self, tmp_path):
        output = tmp_path / 'settings.json'
        run_main([SUBCOMMAND.SETTINGS, '-c', get_data('config.json'), '-o', str(output)])
        result = json.loads(output.read_text())
        assert result['chr_height'] == 400
        assert result['annots_enabled'] is False
        assert result['annot_tracks_height'] == 0
        assert result['annotations_color'] == '#F00'
        assert result['annotation_tracks'][1]['shape'] == 'triangle'

    def test_bad_config(self, configpath, tmp_path):
        configpath.write_text(json.dumps({'unknown_setting': 1}))
        with pytest.raises(Exception):
            run_main([SUBCOMMAND.SETTINGS, '-c', str(configpath), '-o', str(tmp_path / 's.json')])
