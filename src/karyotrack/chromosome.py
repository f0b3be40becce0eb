"""
chromosome geometry: the models annotations are positioned against and the
default base-pair to pixel conversion
"""
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .constants import GIEMSA_STAIN
from .interval import Interval, IntervalMapping
from .util import logger, strip_chr_prefix


class Band(Interval):
    """
    a cytogenetic band. Coordinates are base-pair boundaries, so a band loaded from a
    0-based cytoband row (start, end) covers the 1-based bases start + 1 to end
    """

    def __init__(self, start, end, name=None, stain=GIEMSA_STAIN.GNEG):
        Interval.__init__(self, start, end, number_type=int)
        self.name = name
        self.stain = GIEMSA_STAIN.enforce(stain)
        self.px = None

    def __repr__(self):
        return '{}({}, {}, name={}, stain={})'.format(
            self.__class__.__name__, self.start, self.end, repr(self.name), repr(self.stain)
        )


class ChromosomeModel:
    """
    a chromosome as drawn on the diagram

    Attributes:
        name: chromosome name without any chr prefix
        length: length of the chromosome in base pairs
        bands: cytogenetic bands sorted by position
        px_length: drawn length of the chromosome in pixels (set when laid out)
    """

    def __init__(self, name: str, length: int, bands: Optional[List[Band]] = None):
        self.name = strip_chr_prefix(name)
        if length <= 0:
            raise AttributeError('chromosome length must be a natural number', name, length)
        self.length = int(length)
        self.bands = sorted(bands) if bands else [Band(0, self.length)]
        self.px_length = None
        self.mapping = None

    def __repr__(self):
        return '{}({}, length={}, bands={})'.format(
            self.__class__.__name__, repr(self.name), self.length, len(self.bands)
        )

    def layout(self, px_length: float):
        """
        assign pixel intervals to each band, proportional to its base-pair length
        """
        mapping = IntervalMapping()
        ratio = px_length / self.length
        for band in self.bands:
            band.px = Interval(band.start * ratio, band.end * ratio, number_type=float)
            mapping.add((band.start, band.end), band.px)
        self.px_length = px_length
        self.mapping = mapping
        return self


def convert_bp_to_px(chr_model: ChromosomeModel, bp: float) -> float:
    """
    convert a base-pair position on a chromosome to its pixel offset from the start of the drawn chromosome

    Positions up to one base past the end of the chromosome are accepted so that the
    stop of an annotation on the last base can be converted

    Raises:
        IndexError: the position is not on the chromosome or the chromosome has not been laid out

    Example:
        >>> chrom = ChromosomeModel('1', 1000).layout(100)
        >>> convert_bp_to_px(chrom, 500)
        50.0
    """
    if chr_model.mapping is None:
        raise IndexError('chromosome has not been laid out', chr_model.name)
    if bp < 0 or bp > chr_model.length + 1:
        raise IndexError(
            f'base pair {bp} out of range for chromosome {chr_model.name} (1-{chr_model.length})'
        )
    return chr_model.mapping.convert_ratioed_pos(min(bp, chr_model.length))


class ChromosomeTable:
    """
    chromosome models keyed by taxid and then by chromosome name, in the order they were added
    """

    def __init__(self, chr_height: float = 400):
        self.chr_height = chr_height
        self._models: Dict[str, Dict[str, ChromosomeModel]] = {}

    def add(self, taxid, *chr_models: ChromosomeModel):
        models = self._models.setdefault(str(taxid), {})
        for chr_model in chr_models:
            if chr_model.name in models:
                raise KeyError('duplicate chromosome name', chr_model.name, taxid)
            models[chr_model.name] = chr_model
        self.layout(taxid)
        return self

    def layout(self, taxid):
        """
        scale every chromosome of an organism relative to its longest chromosome
        """
        models = self._models.get(str(taxid), {})
        if not models:
            return
        longest = max([m.length for m in models.values()])
        for chr_model in models.values():
            chr_model.layout(self.chr_height * chr_model.length / longest)

    def get(self, taxid, name) -> Optional[ChromosomeModel]:
        return self._models.get(str(taxid), {}).get(str(name))

    def names(self, taxid) -> List[str]:
        return list(self._models.get(str(taxid), {}).keys())

    def taxids(self) -> List[str]:
        return list(self._models.keys())

    def __contains__(self, taxid):
        return str(taxid) in self._models


def load_templates(*filepaths: str) -> Dict[str, ChromosomeModel]:
    """
    assumes the input file is 0-indexed with [start,end) style. Columns are expected in
    the following order, tab-delimited. A header should not be given

    1. name
    2. start
    3. end
    4. band_name
    5. giemsa_stain

    for example

    .. code-block:: text

        chr1    0   2300000 p36.33  gneg
        chr1    2300000 5400000 p36.32  gpos25

    Returns:
        chromosome models keyed by chromosome name (without the chr prefix), in file order
    """
    header = ['name', 'start', 'end', 'band_name', 'giemsa_stain']
    templates: Dict[str, ChromosomeModel] = {}

    for filename in filepaths:
        df = pd.read_csv(
            filename,
            sep='\t',
            dtype={
                'start': int,
                'end': int,
                'name': str,
                'band_name': str,
                'giemsa_stain': str,
            },
            names=header,
            comment='#',
            keep_default_na=False,
        )

        bands_by_template: Dict[str, List[Band]] = {}
        for row in df.to_dict('records'):
            band = Band(row['start'], row['end'], name=row['band_name'], stain=row['giemsa_stain'])
            bands_by_template.setdefault(strip_chr_prefix(row['name']), []).append(band)

        for tname, bands in bands_by_template.items():
            if tname in templates:
                raise KeyError('duplicate chromosome name', tname, filename)
            end = max([b.end for b in bands])
            templates[tname] = ChromosomeModel(tname, end, bands=bands)
        logger.info(f'loaded {len(bands_by_template)} chromosomes from {filename}')
    return templates


def build_chromosome_table(
    taxid, templates: Iterable[ChromosomeModel], chr_height: float = 400
) -> ChromosomeTable:
    table = ChromosomeTable(chr_height=chr_height)
    table.add(taxid, *templates)
    return table
