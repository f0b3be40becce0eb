"""
module which holds all functions relating to reading annotation payloads
"""
import io
import json
from typing import Dict, List, Optional, Union

import pandas as pd
import requests

from ..constants import ANNOT_FORMAT, DEFAULT_TRACK_INDEX
from ..error import FetchFailed, MalformedPayload, UnsupportedFormat
from ..schemas import validate_annotations
from ..util import get_extension, is_remote, logger, strip_chr_prefix
from .base import RawAnnotationSet, RawChromosomeAnnotGroup

BED_KEYS = ['name', 'start', 'length', 'trackIndex']
"""list: key schema of the annotations decoded from a BED file"""

BED_HEADER_PREFIXES = ('#', 'track', 'browser')

BED_ITEM_RGB_COLUMN = 8


def rgb_to_hex(item_rgb: str) -> Optional[str]:
    """
    convert a BED itemRgb value to a hex color

    Example:
        >>> rgb_to_hex('255,0,0')
        '#ff0000'
        >>> rgb_to_hex('0') is None
        True
    """
    item_rgb = str(item_rgb).strip()
    if item_rgb in ['0', '', '.']:
        return None
    try:
        red, green, blue = [int(c) for c in item_rgb.split(',')]
    except ValueError:
        raise MalformedPayload(f'itemRgb must be given as r,g,b: {item_rgb}')
    for channel in [red, green, blue]:
        if not 0 <= channel <= 255:
            raise MalformedPayload(f'itemRgb channels must be between 0 and 255: {item_rgb}')
    return '#{:02x}{:02x}{:02x}'.format(red, green, blue)


def parse_bed(text: str) -> RawAnnotationSet:
    """
    decode BED text into the compact annotations form.

    BED coordinates are 0-based and half open. They are converted to a 1-based start and a length

    .. code-block:: text

        track name=genes
        chr1    999     1199    BRCA1   0   +   999 1199    255,0,0

    Returns:
        annotations grouped by chromosome (chr prefix removed) in order of first appearance

    Raises:
        MalformedPayload: fewer than 3 columns, inconsistent column counts, or non-integer coordinates
    """
    lines = [
        line
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith(BED_HEADER_PREFIXES)
    ]
    if not lines:
        logger.warning('BED input did not contain any annotations')
        return RawAnnotationSet(keys=list(BED_KEYS), annots=[])

    try:
        df = pd.read_csv(
            io.StringIO('\n'.join(lines)),
            sep=r'\s+',
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.ParserError as err:
        raise MalformedPayload(f'BED rows have inconsistent columns: {err}')

    if df.shape[1] < 3:
        raise MalformedPayload(f'BED rows require at least 3 columns (found {df.shape[1]})')
    if df.isna().any().any() or (df == '').any().any():
        raise MalformedPayload('BED rows have inconsistent columns')

    try:
        chrom_start = df[1].astype(int)
        chrom_end = df[2].astype(int)
    except ValueError as err:
        raise MalformedPayload(f'BED start and end must be integers: {err}')
    if (chrom_end < chrom_start).any():
        raise MalformedPayload('BED end must not be before start')

    keys = list(BED_KEYS)
    has_name = df.shape[1] > 3
    if not has_name:
        keys.remove('name')

    colors: List[Optional[str]] = []
    if df.shape[1] > BED_ITEM_RGB_COLUMN:
        colors = [rgb_to_hex(v) for v in df[BED_ITEM_RGB_COLUMN]]
        if all(colors):
            keys.append('color')
        else:
            logger.debug('itemRgb not given for every BED row; using track colors')
            colors = []

    groups: Dict[str, RawChromosomeAnnotGroup] = {}
    for i, (chrom, start, end) in enumerate(zip(df[0], chrom_start, chrom_end)):
        row = []
        if has_name:
            row.append(df[3].iloc[i])
        row.extend([int(start) + 1, int(end - start), DEFAULT_TRACK_INDEX])
        if colors:
            row.append(colors[i])
        chrom = strip_chr_prefix(chrom)
        groups.setdefault(chrom, RawChromosomeAnnotGroup(chr=chrom)).annots.append(row)

    return RawAnnotationSet(keys=keys, annots=list(groups.values()))


def parse_annotations_json(data: Union[str, bytes, Dict]) -> RawAnnotationSet:
    """
    parse a native annotations document (or its text)

    Raises:
        MalformedPayload: the text is not valid JSON or the document does not have the keys/annots form
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as err:
            raise MalformedPayload(f'annotations are not valid JSON: {err}')
    validate_annotations(data)
    return RawAnnotationSet.from_dict(data)


DECODERS = {
    ANNOT_FORMAT.BED: parse_bed,
    ANNOT_FORMAT.JSON: parse_annotations_json,
}


def detect_format(locator: str, file_format: Optional[str] = None) -> str:
    """
    choose the decoder for a resource from its declared format or its (lower case) file extension

    Raises:
        UnsupportedFormat: the format is neither BED nor JSON
    """
    # file extensions are matched case-sensitively, a declared format is not
    extension = str(file_format).lower() if file_format else get_extension(locator)
    if extension not in ANNOT_FORMAT.values():
        raise UnsupportedFormat(extension)
    return extension


def load_annotations(filepath: str, file_format: Optional[str] = None) -> RawAnnotationSet:
    """
    read annotations from the local file system. BED files are decoded as BED and
    anything else is read as native JSON unless a format is declared
    """
    if file_format is None:
        file_format = (
            ANNOT_FORMAT.BED if get_extension(filepath) == ANNOT_FORMAT.BED else ANNOT_FORMAT.JSON
        )
    decoder = DECODERS[ANNOT_FORMAT.enforce(str(file_format).lower())]
    logger.info(f'loading: {filepath}')
    with open(filepath, 'r') as fh:
        content = fh.read()
    try:
        return decoder(content)
    except MalformedPayload as err:
        raise MalformedPayload(f'Error in loading file: {filepath}. {err}')


def fetch_annotations(
    url: str,
    file_format: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> RawAnnotationSet:
    """
    request an annotations resource over HTTP and decode it

    The format is checked before the request is made so that unsupported resources are never downloaded

    Raises:
        UnsupportedFormat: the extension is neither bed nor json
        FetchFailed: the request failed or returned a non-2xx status
        MalformedPayload: the body could not be decoded
    """
    decoder = DECODERS[detect_format(url, file_format)]
    requester = session if session is not None else requests
    logger.info(f'fetching: {url}')
    try:
        response = requester.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as err:
        raise FetchFailed(url, err) from err
    return decoder(response.text)


def read_annotations(
    source: Union[str, Dict, RawAnnotationSet],
    file_format: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> RawAnnotationSet:
    """
    produce the raw annotations for a source: an already resident object, a url, or a local path
    """
    if isinstance(source, RawAnnotationSet):
        return source
    if isinstance(source, dict):
        return parse_annotations_json(source)
    if is_remote(source):
        return fetch_annotations(source, file_format, session=session, timeout=timeout)
    return load_annotations(source, file_format)
