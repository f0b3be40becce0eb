import collections.abc
import os
from copy import deepcopy
from typing import Dict

from snakemake.utils import validate as snakemake_validate

from ..error import MalformedPayload

CONFIG_SCHEMA = os.path.join(os.path.dirname(__file__), 'config.json')
ANNOTATIONS_SCHEMA = os.path.join(os.path.dirname(__file__), 'annotations.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def _short_message(err) -> str:
    # these can get super long
    return '. '.join([line for line in str(err).split('\n') if line.strip()][:3])


def validate_config(config: Dict) -> Dict:
    """
    check a configuration against the config schema and fill in the defaults

    Returns:
        a copy of the input config with all defaults set
    """
    config = deepcopy(config)
    snakemake_validate(config, CONFIG_SCHEMA, set_default=True)
    return config


def validate_annotations(data) -> None:
    """
    check that a parsed document has the native annotations (keys/annots) form

    Raises:
        MalformedPayload: the document does not match the annotations schema
    """
    try:
        snakemake_validate(data, ANNOTATIONS_SCHEMA)
    except Exception as err:
        raise MalformedPayload(_short_message(err))


DEFAULTS = ImmutableDict(validate_config({}))
