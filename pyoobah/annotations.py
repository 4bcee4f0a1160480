"""Classes and methods to handle probes metadata : Array types (EPIC, 450K...), probe design (Infinium type I or II)
with their color channel (Red/Green), and the control probes categories of each array.

The annotation of a dataset is a dataframe with one row per probe and at least the columns `probe_id`, `type` ('I' or
'II') and `channel` ('G', 'R', or empty for type II probes).
"""
from enum import Enum, unique

import pandas as pd

from pyoobah.exceptions import UnsupportedPlatformError, DimensionMismatchError
from pyoobah.utils import get_logger

LOGGER = get_logger()


@unique
class ArrayType(Enum):
    """Names of the different array types supported.

    Possible values are : HUMAN_27K, HUMAN_450K, HUMAN_EPIC, HUMAN_EPIC_V2"""
    HUMAN_27K = 'HM27'  #: Human Methylation 27K, CpG sites
    HUMAN_450K = 'HM450'  #: Human Methylation 450K, CpG sites
    HUMAN_EPIC = 'EPIC'  #: Human Methylation EPIC (around 850K CpG sites)
    HUMAN_EPIC_V2 = 'EPICv2'  #: Human Methylation EPIC V2 (around 950K CpG sites)

    def __str__(self):
        return self.value

    @classmethod
    def from_tag(cls, tag):
        """Find the array type matching a platform tag. The tag can be an ArrayType, its value ('HM450', 'EPIC'...) or
        a target name ('probes450', 'probesEPIC'...). Case is ignored.

        :param tag: platform tag to convert
        :type tag: ArrayType | str

        :raises UnsupportedPlatformError: if the tag doesn't match any supported array type

        :return: the array type
        :rtype: ArrayType"""
        if isinstance(tag, cls):
            return tag

        if isinstance(tag, str):
            key = tag.strip().lower()
            if key in _PLATFORM_TAGS:
                return _PLATFORM_TAGS[key]

        LOGGER.error(f'Invalid value for platform : {tag}')
        raise UnsupportedPlatformError(f'Invalid value for platform : {tag}. Supported platforms are '
                                       f'{[str(array_type) for array_type in cls]}')


_PLATFORM_TAGS = {
    'hm27': ArrayType.HUMAN_27K, 'probes27': ArrayType.HUMAN_27K,
    'hm450': ArrayType.HUMAN_450K, 'probes450': ArrayType.HUMAN_450K,
    'epic': ArrayType.HUMAN_EPIC, 'probesepic': ArrayType.HUMAN_EPIC,
    'epicv2': ArrayType.HUMAN_EPIC_V2, 'probesepicv2': ArrayType.HUMAN_EPIC_V2,
}

_CONTROL_CATEGORIES_450K = ['BISULFITE CONVERSION I', 'BISULFITE CONVERSION II', 'EXTENSION', 'HYBRIDIZATION',
                            'NEGATIVE', 'NON-POLYMORPHIC', 'NORM_A', 'NORM_C', 'NORM_G', 'NORM_T', 'SPECIFICITY I',
                            'SPECIFICITY II', 'STAINING', 'TARGET REMOVAL']


def control_probe_categories(array_type: ArrayType | str) -> list[str]:
    """Return the names of the control probes categories of an array type

    :param array_type: the array type, or a platform tag
    :type array_type: ArrayType | str

    :return: control probes categories, sorted alphabetically
    :rtype: list[str]"""
    array_type = ArrayType.from_tag(array_type)

    if array_type == ArrayType.HUMAN_27K:
        return ['BISULFITE CONVERSION', 'EXTENSION', 'HYBRIDIZATION', 'MISMATCH', 'NEGATIVE', 'NON-POLYMORPHIC',
                'NORM_GRN', 'NORM_RED', 'STAINING', 'TARGET REMOVAL']
    if array_type == ArrayType.HUMAN_450K:
        return list(_CONTROL_CATEGORIES_450K)
    # EPIC and EPIC v2 arrays have an extra restoration control
    return sorted(_CONTROL_CATEGORIES_450K + ['RESTORATION'])


class ProbeChannelAssignment:
    """Partition of the probes in three disjoint sets : type I probes read in the green channel, type I probes read in
    the red channel, and type II probes.

    :ivar type1_green: IDs of type I green probes
    :vartype type1_green: pandas.Index

    :ivar type1_red: IDs of type I red probes
    :vartype type1_red: pandas.Index

    :ivar type2: IDs of type II probes
    :vartype type2: pandas.Index
    """

    def __init__(self, type1_green: pd.Index, type1_red: pd.Index, type2: pd.Index):
        self.type1_green = pd.Index(type1_green, name='probe_id')
        self.type1_red = pd.Index(type1_red, name='probe_id')
        self.type2 = pd.Index(type2, name='probe_id')

    @classmethod
    def from_annotation(cls, annotation: pd.DataFrame):
        """Build the assignment from the `type` and `channel` columns of an annotation dataframe. If there is no
        `probe_id` column, the index is used as probe IDs.

        :param annotation: probes annotation
        :type annotation: pandas.DataFrame

        :rtype: ProbeChannelAssignment"""
        missing_columns = {'type', 'channel'} - set(annotation.columns)
        if len(missing_columns) > 0:
            raise DimensionMismatchError(f'Annotation is missing column(s) {missing_columns}')

        probe_ids = annotation['probe_id'] if 'probe_id' in annotation.columns else annotation.index.to_series()
        probe_ids = pd.Index(probe_ids.values)
        # categorical columns must be converted before filling missing values
        design_type = annotation['type'].astype(object).fillna('').astype(str).str.strip().to_numpy()
        channel = annotation['channel'].astype(object).fillna('').astype(str).str.strip().str[:1].str.upper().to_numpy()

        is_type1 = design_type == 'I'
        type1_green = probe_ids[is_type1 & (channel == 'G')]
        type1_red = probe_ids[is_type1 & (channel == 'R')]
        type2 = probe_ids[design_type == 'II']

        return cls(type1_green, type1_red, type2)

    def check_probes(self, site_ids: pd.Index) -> None:
        """Check that each probe of `site_ids` belongs to exactly one of the three sets.

        :param site_ids: probe IDs of the dataset
        :type site_ids: pandas.Index

        :raises DimensionMismatchError: if a probe is missing, duplicated or unknown

        :return: None"""
        assigned = self.type1_green.append([self.type1_red, self.type2])

        if assigned.has_duplicates:
            duplicated = assigned[assigned.duplicated()].unique().tolist()
            raise DimensionMismatchError(f'{len(duplicated)} probe(s) have several channel assignments, e.g. '
                                         f'{duplicated[:5]}')

        unassigned = site_ids.difference(assigned)
        if len(unassigned) > 0:
            raise DimensionMismatchError(f'{len(unassigned)} probe(s) have no channel assignment, e.g. '
                                         f'{unassigned[:5].tolist()}')

        unknown = assigned.difference(site_ids)
        if len(unknown) > 0:
            raise DimensionMismatchError(f'{len(unknown)} annotated probe(s) are not in the dataset, e.g. '
                                         f'{unknown[:5].tolist()}')

    def __len__(self):
        return len(self.type1_green) + len(self.type1_red) + len(self.type2)

    def __repr__(self):
        return (f'ProbeChannelAssignment(type I green: {len(self.type1_green):,}, type I red: {len(self.type1_red):,}, '
                f'type II: {len(self.type2):,})')
