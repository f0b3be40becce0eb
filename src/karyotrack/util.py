import errno
import logging
import math
import os
import re
from glob import glob
from typing import List

from braceexpand import braceexpand

from .constants import CHR_PREFIX

logger = logging.getLogger('karyotrack')


def bash_expands(*expressions: str) -> List[str]:
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if not file_list:
            raise TypeError('File not found', path)
        elif len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


def strip_chr_prefix(name) -> str:
    """
    Example:
        >>> strip_chr_prefix('chr1')
        '1'
        >>> strip_chr_prefix('X')
        'X'
    """
    return re.sub(f'^{CHR_PREFIX}', '', str(name))


def round_half_up(value) -> int:
    """
    round to the nearest integer with ties going up

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-0.5)
        0
    """
    return int(math.floor(value + 0.5))


def is_remote(locator: str) -> bool:
    return str(locator)[:4] == 'http'


def get_extension(locator: str) -> str:
    """
    the file extension of a path or url, ignoring any query string

    Example:
        >>> get_extension('https://example.org/annots/genes.bed?version=2')
        'bed'
        >>> get_extension('genes')
        ''
    """
    path = str(locator).split('?')[0]
    basename = path.rsplit('/', 1)[-1]
    if '.' not in basename:
        return ''
    return basename.rsplit('.', 1)[-1]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg} = {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname
