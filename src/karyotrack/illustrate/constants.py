from typing import Callable, List, Optional

from colour import Color

from ..annotate.base import AnnotationTrack
from ..constants import DEFAULT_ANNOTATIONS_COLOR, DEFAULT_BAR_WIDTH
from ..schemas import DEFAULTS
from ..util import round_half_up

ANNOTATION_SOURCE_KEYS = ['annotations_path', 'local_annotations_path', 'annotations']
"""list: configuration keys which enable the annotation layer when given"""


def check_color(color: str) -> str:
    """
    check that a string is a color understood by the drawing layer

    Raises:
        ValueError: the color is not recognized

    Example:
        >>> check_color('#F00')
        '#F00'
    """
    Color(color)
    return color


class AnnotationSettings:
    """
    holds settings related to the layout and styling of annotations
    """

    def __init__(
        self,
        has_annots: bool = False,
        on_will_show_annot_tooltip: Optional[Callable] = None,
        **kwargs,
    ):
        """
        Args:
            has_annots: in-memory annotations have been given to the diagram
            on_will_show_annot_tooltip: called by the tooltip component before an annotation tooltip is shown
            **kwargs: configuration values, see the config schema
        """
        inputs = {}
        inputs.update(DEFAULTS.items())
        inputs.update(kwargs)
        for arg, val in inputs.items():
            if arg not in DEFAULTS:
                raise KeyError('unrecognized argument', arg)
            setattr(self, arg, val)

        self.annotation_tracks: Optional[List[AnnotationTrack]] = (
            [AnnotationTrack.from_dict(t) for t in self.annotation_tracks]
            if self.annotation_tracks
            else None
        )
        for track in self.annotation_tracks or []:
            check_color(track.color)

        self.annots_enabled = has_annots or any(
            [inputs[key] is not None for key in ANNOTATION_SOURCE_KEYS]
        )
        if self.annots_enabled:
            if not self.annotation_height:
                self.annotation_height = round_half_up(self.chr_height / 100)

            if self.annotation_tracks:
                self.num_annot_tracks = len(self.annotation_tracks)
            else:
                self.num_annot_tracks = 1
            self.annot_tracks_height = self.annotation_height * self.num_annot_tracks

            if self.bar_width is None:
                self.bar_width = DEFAULT_BAR_WIDTH
        else:
            self.annot_tracks_height = 0

        if self.annotations_color is None:
            self.annotations_color = DEFAULT_ANNOTATIONS_COLOR
        check_color(self.annotations_color)

        if self.show_annot_tooltip is not False:
            self.show_annot_tooltip = True

        self.on_will_show_annot_tooltip_callback = on_will_show_annot_tooltip

    def to_dict(self):
        result = {
            k: v for k, v in self.__dict__.items() if k != 'on_will_show_annot_tooltip_callback'
        }
        if self.annotation_tracks:
            result['annotation_tracks'] = [t.to_dict() for t in self.annotation_tracks]
        return result


def init_annot_settings(config, has_annots=False, on_will_show_annot_tooltip=None):
    """
    derive the annotation layout settings from a (schema validated) configuration
    """
    return AnnotationSettings(
        has_annots=has_annots, on_will_show_annot_tooltip=on_will_show_annot_tooltip, **config
    )
