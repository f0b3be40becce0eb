import math
import numbers
from typing import Callable, Dict, List, Optional, Sequence

from ..chromosome import ChromosomeModel
from ..constants import DEFAULT_ANNOTATIONS_COLOR, DEFAULT_TRACK_INDEX, TRACK_INDEX_SLOT
from ..error import AnnotationError, MalformedPayload, UnresolvedChromosome
from ..util import logger, round_half_up
from .base import (
    RESOLVED_FIELDS,
    AnnotationGroup,
    AnnotationTrack,
    RawAnnotationSet,
    ResolvedAnnotation,
)

ChromosomeLookup = Callable[[str], Optional[ChromosomeModel]]
CoordinateMapper = Callable[[ChromosomeModel, float], float]


def _warn(err: AnnotationError):
    logger.warning(str(err))


def _resolve_track(row: Sequence, fields: Dict, tracks: List[AnnotationTrack]) -> int:
    if 'trackIndex' in fields:
        track_index = fields['trackIndex']
    elif len(row) <= TRACK_INDEX_SLOT:
        raise MalformedPayload(
            f'annotation {list(row)} has no track index (expected at position {TRACK_INDEX_SLOT})'
        )
    else:
        track_index = row[TRACK_INDEX_SLOT]
    if (
        isinstance(track_index, bool)
        or not isinstance(track_index, numbers.Integral)
        or not 0 <= track_index < len(tracks)
    ):
        raise MalformedPayload(
            f'annotation track index {repr(track_index)} does not select one of the {len(tracks)} tracks'
        )
    return int(track_index)


def resolve_annotation(
    keys: List[str],
    row: Sequence,
    chr: str,
    chr_model: ChromosomeModel,
    chr_index: int,
    convert_bp_to_px: CoordinateMapper,
    tracks: Optional[List[AnnotationTrack]] = None,
    default_color: str = DEFAULT_ANNOTATIONS_COLOR,
) -> ResolvedAnnotation:
    """
    convert a single raw annotation row to a resolved annotation

    Raises:
        MalformedPayload: the row does not match the keys, has a missing/invalid track index,
            or has coordinates which are not on the chromosome
    """
    if len(row) not in (len(keys), len(keys) + 1):
        raise MalformedPayload(
            f'annotation {list(row)} has {len(row)} values but there are {len(keys)} keys'
        )
    fields = dict(zip(keys, row))

    start, length = fields['start'], fields['length']
    for value in (start, length):
        if (
            isinstance(value, bool)
            or not isinstance(value, numbers.Real)
            or not math.isfinite(value)
        ):
            raise MalformedPayload(
                f'annotation start and length must be finite numbers: {repr(start)}, {repr(length)}'
            )
    if length < 0:
        raise MalformedPayload(f'annotation length must not be negative: {repr(length)}')
    stop = start + length

    try:
        start_px = convert_bp_to_px(chr_model, start)
        stop_px = convert_bp_to_px(chr_model, stop)
    except IndexError as err:
        raise MalformedPayload(f'annotation {list(row)} cannot be positioned: {err}')
    px = round_half_up((start_px + stop_px) / 2)

    color = default_color
    shape = None
    if tracks:
        track_index = _resolve_track(row, fields, tracks)
        color = tracks[track_index].color
        shape = tracks[track_index].shape
    else:
        track_index = DEFAULT_TRACK_INDEX

    if 'color' in fields:
        color = fields['color']
    if 'shape' in fields:
        shape = fields['shape']

    return ResolvedAnnotation(
        chr=chr,
        chr_index=chr_index,
        start=start,
        length=length,
        start_px=start_px,
        stop_px=stop_px,
        px=px,
        color=color,
        track_index=track_index,
        shape=shape,
        extra={k: v for k, v in fields.items() if k not in RESOLVED_FIELDS},
    )


def process_annot_data(
    raw_annots: RawAnnotationSet,
    get_chromosome: ChromosomeLookup,
    convert_bp_to_px: CoordinateMapper,
    tracks: Optional[List[AnnotationTrack]] = None,
    default_color: str = DEFAULT_ANNOTATIONS_COLOR,
    warn: Optional[Callable[[AnnotationError], None]] = None,
) -> List[AnnotationGroup]:
    """
    Converts raw annotation data, structured as lists of values per chromosome, into
    resolved annotations with their track, color, shape and pixel offsets

    Groups on chromosomes which are not part of the diagram, or with rows which cannot be
    resolved, are dropped whole. Each dropped group is reported to warn and does not stop the
    remaining groups from being processed

    Args:
        raw_annots: the compact annotations
        get_chromosome: returns the chromosome model for a chromosome name (None if it is not drawn)
        convert_bp_to_px: converts a base-pair position on a chromosome model to pixels
        tracks: the configured annotation tracks
        default_color: color used when there is neither an explicit nor a track color
        warn: called with the error for each dropped group (logs a warning by default)

    Returns:
        one group per resolved chromosome, in the order of the raw annotations
    """
    warn = _warn if warn is None else warn
    annots = []

    for chr_index, group in enumerate(raw_annots.annots):
        chr_model = get_chromosome(group.chr)
        if chr_model is None:
            warn(UnresolvedChromosome(group.chr, len(group.annots)))
            continue
        try:
            resolved = [
                resolve_annotation(
                    raw_annots.keys,
                    row,
                    group.chr,
                    chr_model,
                    chr_index,
                    convert_bp_to_px,
                    tracks=tracks,
                    default_color=default_color,
                )
                for row in group.annots
            ]
        except MalformedPayload as err:
            warn(
                MalformedPayload(
                    f'Chromosome "{group.chr}": {len(group.annots)} annotations not shown. {err}'
                )
            )
            continue
        annots.append(AnnotationGroup(chr=group.chr, annots=resolved))

    logger.debug(
        f'resolved {sum([len(g.annots) for g in annots])} of {len(raw_annots)} annotations '
        f'on {len(annots)} chromosomes'
    )
    return annots


def fill_annots(annots: List[AnnotationGroup], chromosome_names: List[str]) -> List[AnnotationGroup]:
    """
    Fills out the annotations such that the top-level list matches the chromosomes of the
    diagram in order and number. Chromosomes without annotations get an empty group and
    groups on chromosomes which are not drawn are dropped

    Args:
        annots: annotations grouped by chromosome, in any order
        chromosome_names: the canonical order of the chromosomes on the diagram
    """
    filled_annots = [AnnotationGroup(chr=chr_name) for chr_name in chromosome_names]
    chr_indices: Dict[str, int] = {}
    for i, chr_name in enumerate(chromosome_names):
        chr_indices.setdefault(chr_name, i)

    for group in annots:
        chr_index = chr_indices.get(group.chr)
        if chr_index is not None:
            filled_annots[chr_index] = group
    return filled_annots

