#!python
import argparse
import json
import logging
import os
import platform
import sys
import time
from typing import List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .chromosome import build_chromosome_table, load_templates
from .constants import ANNOT_FORMAT, DEFAULT_TAXID, EXIT_OK, PROGNAME, SUBCOMMAND
from .illustrate.constants import init_annot_settings
from .schemas import validate_config
from .session import AnnotationSession
from .util import filepath


def annotate_main(
    config, templates, output, annotations=None, file_format=None, taxid=None, timeout=None
):
    """
    resolve the annotations of a diagram and write them, grouped by chromosome, to a JSON file
    """
    config = validate_config(config)
    if annotations:
        config['annotations_path'] = annotations
    taxid = taxid or config['taxid'] or DEFAULT_TAXID
    table = build_chromosome_table(
        taxid, load_templates(*templates).values(), chr_height=config['chr_height']
    )
    session = AnnotationSession(config, table, taxid=taxid)
    annots = session.load(file_format=file_format, timeout=timeout)

    if os.path.dirname(output):
        _util.mkdirp(os.path.dirname(output))
    _util.logger.info(f'writing: {output}')
    with open(output, 'w') as fh:
        fh.write(json.dumps([group.to_dict() for group in annots], indent='  '))
    return annots


def settings_main(config, outputfile):
    """
    write the configuration with the defaults and the derived annotation settings filled in
    """
    settings = init_annot_settings(validate_config(config))
    _util.logger.info(f'writing: {outputfile}')
    with open(outputfile, 'w') as fh:
        fh.write(json.dumps(settings.to_dict(), sort_keys=True, indent='  '))
    return settings


def create_parser(argv):
    parser = argparse.ArgumentParser(prog=PROGNAME, formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )
        required[command].add_argument(
            '--config', '-c', help='path to the JSON config file', type=filepath, required=True
        )

    # annotate
    required[SUBCOMMAND.ANNOTATE].add_argument(
        '-o', '--output', help='path to the output JSON file', required=True, metavar='FILEPATH'
    )
    required[SUBCOMMAND.ANNOTATE].add_argument(
        '-t',
        '--templates',
        nargs='+',
        help='path to the cytoband file(s) describing the chromosomes',
        required=True,
        metavar='FILEPATH',
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '-a',
        '--annotations',
        help='url or path of the annotations. Overrides the annotations_path of the config',
        default=None,
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '--format',
        dest='file_format',
        choices=sorted(ANNOT_FORMAT.values()),
        default=None,
        help='format of the annotations. Interpolated from the file extension when not given',
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '--taxid', default=None, help='NCBI taxonomy id of the organism the templates describe'
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '--timeout',
        type=float,
        default=None,
        help='seconds to wait for a remote annotations server',
    )

    # settings
    required[SUBCOMMAND.SETTINGS].add_argument(
        '--outputfile', '-o', required=True, help='path to the outputfile', metavar='FILEPATH'
    )

    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads the configuration and redirects into subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'karyotrack: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    with open(args.config, 'r') as fh:
        config = json.load(fh)

    if args.command == SUBCOMMAND.ANNOTATE:
        try:
            args.templates = _util.bash_expands(*args.templates)
        except FileNotFoundError:
            parser.error(f'--templates file(s) {args.templates} do not exist')

    try:
        if args.command == SUBCOMMAND.ANNOTATE:
            annotate_main(
                config,
                args.templates,
                args.output,
                annotations=args.annotations,
                file_format=args.file_format,
                taxid=args.taxid,
                timeout=args.timeout,
            )
        else:
            settings_main(config, args.outputfile)

        duration = int(time.time()) - start_time
        _util.logger.info(f'run time (s): {duration}')
        return EXIT_OK
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


if __name__ == '__main__':
    main()
