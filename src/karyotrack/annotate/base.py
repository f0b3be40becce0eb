"""
record types for raw (columnar) and resolved (pixel positioned) annotations
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..constants import DEFAULT_TRACK_INDEX
from ..error import MalformedPayload

REQUIRED_KEYS = ('start', 'length')
"""tuple: keys every raw annotation payload must define"""

RESOLVED_FIELDS = {
    'chr',
    'chrIndex',
    'start',
    'length',
    'stop',
    'px',
    'startPx',
    'stopPx',
    'trackIndex',
    'color',
    'shape',
}


@dataclass
class RawChromosomeAnnotGroup:
    chr: str
    annots: List[Sequence[Any]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'chr': self.chr, 'annots': [list(row) for row in self.annots]}


@dataclass
class RawAnnotationSet:
    """
    annotations in the compact form served to the diagram: the meaning of each value in
    a row is given by its position in keys
    """

    keys: List[str]
    annots: List[RawChromosomeAnnotGroup] = field(default_factory=list)

    def __post_init__(self):
        missing = [k for k in REQUIRED_KEYS if k not in self.keys]
        if missing:
            raise MalformedPayload(f'annotation keys must include {missing}: {self.keys}')
        if len(set(self.keys)) != len(self.keys):
            raise MalformedPayload(f'annotation keys must be unique: {self.keys}')

    @classmethod
    def from_dict(cls, data: Dict) -> 'RawAnnotationSet':
        """
        build from a document already checked against the annotations schema
        """
        return cls(
            keys=list(data['keys']),
            annots=[
                RawChromosomeAnnotGroup(chr=str(group['chr']), annots=list(group['annots']))
                for group in data['annots']
            ],
        )

    def to_dict(self) -> Dict:
        return {'keys': list(self.keys), 'annots': [group.to_dict() for group in self.annots]}

    def __len__(self):
        return sum([len(group.annots) for group in self.annots])


@dataclass(frozen=True)
class AnnotationTrack:
    color: str
    shape: Optional[str] = None
    id: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'AnnotationTrack':
        return cls(
            color=data['color'],
            shape=data.get('shape'),
            id=data.get('id'),
            display_name=data.get('displayName'),
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'color': self.color,
            'shape': self.shape,
            'displayName': self.display_name,
        }


@dataclass
class ResolvedAnnotation:
    """
    a single annotation with its rendering attributes and pixel geometry resolved

    Attributes:
        chr: chromosome name
        chr_index: position of the chromosome group in the raw annotations
        start: start in base pairs
        length: length in base pairs
        stop: start + length
        px: pixel midpoint, rounded
        start_px: pixel offset of start
        stop_px: pixel offset of stop
        track_index: index into the configured track list
        color: CSS color
        shape: rendering shape identifier
        extra: any other fields given by the raw annotation keys (ex. name, id)
    """

    chr: str
    chr_index: int
    start: int
    length: int
    start_px: float
    stop_px: float
    px: int
    color: str
    track_index: int = DEFAULT_TRACK_INDEX
    shape: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def stop(self) -> int:
        return self.start + self.length

    @property
    def name(self) -> Optional[str]:
        return self.extra.get('name')

    def to_dict(self) -> Dict:
        """
        flatten to the wire form used by the drawing components
        """
        row = dict(self.extra)
        row.update(
            {
                'chr': self.chr,
                'chrIndex': self.chr_index,
                'start': self.start,
                'length': self.length,
                'stop': self.stop,
                'px': self.px,
                'startPx': self.start_px,
                'stopPx': self.stop_px,
                'trackIndex': self.track_index,
                'color': self.color,
                'shape': self.shape,
            }
        )
        return row


@dataclass
class AnnotationGroup:
    chr: str
    annots: List[ResolvedAnnotation] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'chr': self.chr, 'annots': [annot.to_dict() for annot in self.annots]}
