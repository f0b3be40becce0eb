"""
the annotation state owned by a single diagram
"""
from typing import Callable, Dict, List, Optional, Union

import requests

from .annotate.base import AnnotationGroup, RawAnnotationSet
from .annotate.file_io import read_annotations
from .annotate.main import CoordinateMapper, fill_annots, process_annot_data
from .chromosome import ChromosomeModel, ChromosomeTable, convert_bp_to_px
from .error import AnnotationError
from .illustrate.constants import init_annot_settings
from .schemas import validate_config
from .util import logger


class AnnotationSession:
    """
    holds the configuration, chromosome models and annotation data of one diagram

    raw_annots and annots are only written once a fetch (or load) has completed and are
    replaced, never updated in place, by each subsequent fetch

    Attributes:
        config: configuration with all defaults filled in
        settings: the annotation layout settings derived from the configuration
        raw_annots: the compact annotations from the most recent fetch
        annots: the resolved annotations of the most recent load, one group per chromosome in canonical order
    """

    def __init__(
        self,
        config: Dict,
        chromosomes: ChromosomeTable,
        taxid: Optional[str] = None,
        annots: Optional[Union[RawAnnotationSet, Dict]] = None,
        convert_bp_to_px: CoordinateMapper = convert_bp_to_px,
        on_load_annots: Optional[Callable[['AnnotationSession'], None]] = None,
        heatmap_deserializer: Optional[Callable[[RawAnnotationSet], None]] = None,
        on_will_show_annot_tooltip: Optional[Callable] = None,
        warn: Optional[Callable[[AnnotationError], None]] = None,
        http_session: Optional[requests.Session] = None,
    ):
        """
        Args:
            config: the diagram configuration (see the config schema)
            chromosomes: the chromosome models available to the diagram
            taxid: the organism drawn, defaults to the configured taxid or the only organism in chromosomes
            annots: annotations already in memory
            convert_bp_to_px: converts base-pair positions on a chromosome model to pixels
            on_load_annots: called once each time raw annotations have been loaded
            heatmap_deserializer: receives the raw annotations when heatmaps are configured
            on_will_show_annot_tooltip: called by the tooltip component before an annotation tooltip is shown
            warn: receives the error for each group of annotations which could not be shown
            http_session: requests session used to fetch remote annotations
        """
        self.config = validate_config(config)
        self.chromosomes = chromosomes
        self.taxid = self._pick_taxid(taxid)
        self.annots_in_memory = annots
        self.convert_bp_to_px = convert_bp_to_px
        self.on_load_annots_callback = on_load_annots
        self.heatmap_deserializer = heatmap_deserializer
        self.warn = warn
        self.http_session = http_session

        self.settings = init_annot_settings(
            self.config,
            has_annots=annots is not None,
            on_will_show_annot_tooltip=on_will_show_annot_tooltip,
        )
        self.raw_annots: Optional[RawAnnotationSet] = None
        self.annots: Optional[List[AnnotationGroup]] = None

    def _pick_taxid(self, taxid) -> str:
        if taxid is None:
            taxid = self.config['taxid']
        if taxid is None:
            taxids = self.chromosomes.taxids()
            if len(taxids) != 1:
                raise AttributeError(
                    'taxid must be given when the chromosomes do not belong to exactly one organism',
                    taxids,
                )
            taxid = taxids[0]
        if taxid not in self.chromosomes:
            raise KeyError('no chromosomes were given for the organism', taxid)
        return str(taxid)

    @property
    def chromosome_names(self) -> List[str]:
        """
        the canonical order of the chromosomes on the diagram
        """
        if self.config['chromosomes']:
            return list(self.config['chromosomes'])
        return self.chromosomes.names(self.taxid)

    def get_chromosome(self, name: str) -> Optional[ChromosomeModel]:
        return self.chromosomes.get(self.taxid, name)

    def _after_raw_annots(self, raw_annots: RawAnnotationSet):
        if self.config['heatmaps']:
            if self.heatmap_deserializer is None:
                logger.warning('heatmaps are configured but no heatmap deserializer was given')
            else:
                self.heatmap_deserializer(raw_annots)
        if self.on_load_annots_callback:
            self.on_load_annots_callback(self)

    def fetch_annots(
        self,
        source: Union[str, Dict, RawAnnotationSet],
        file_format: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> RawAnnotationSet:
        """
        read the raw annotations from a url, a local path or an object already in memory and
        store them on the session

        Raises:
            UnsupportedFormat: the resource is neither BED nor JSON
            FetchFailed: the remote resource could not be read
            MalformedPayload: the resource could not be decoded
        """
        raw_annots = read_annotations(
            source, file_format, session=self.http_session, timeout=timeout
        )
        self.raw_annots = raw_annots
        logger.info(
            f'loaded {len(raw_annots)} raw annotations on {len(raw_annots.annots)} chromosomes'
        )
        self._after_raw_annots(raw_annots)
        return raw_annots

    def process_annot_data(
        self, raw_annots: Optional[RawAnnotationSet] = None
    ) -> List[AnnotationGroup]:
        """
        resolve raw annotations (the most recently fetched by default) against the chromosomes of this diagram
        """
        if raw_annots is None:
            raw_annots = self.raw_annots
        if raw_annots is None:
            raise AttributeError('annotations must be fetched before they can be processed')
        return process_annot_data(
            raw_annots,
            self.get_chromosome,
            self.convert_bp_to_px,
            tracks=self.settings.annotation_tracks,
            default_color=self.settings.annotations_color,
            warn=self.warn,
        )

    def fill_annots(self, annots: List[AnnotationGroup]) -> List[AnnotationGroup]:
        return fill_annots(annots, self.chromosome_names)

    def annotations_source(self):
        """
        the source annotations are loaded from: in-memory annotations, then inline configured
        annotations, then the annotations path, then the local annotations path
        """
        if self.annots_in_memory is not None:
            return self.annots_in_memory
        for key in ['annotations', 'annotations_path', 'local_annotations_path']:
            if self.config[key] is not None:
                return self.config[key]
        return None

    def load(
        self, file_format: Optional[str] = None, timeout: Optional[float] = None
    ) -> List[AnnotationGroup]:
        """
        fetch, resolve and order the annotations of this diagram
        """
        source = self.annotations_source()
        if source is None:
            raise AttributeError('no annotations have been given to the diagram')
        raw_annots = self.fetch_annots(source, file_format=file_format, timeout=timeout)
        self.annots = self.fill_annots(self.process_annot_data(raw_annots))
        return self.annots
