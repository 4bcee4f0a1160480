"""
Mask probes by detection p-value, one sample at a time (pOOBAH).

Every probe whose detection p-value is strictly above the threshold is masked in the sample where it failed: its
signal (M, U, M0, U0) and its p-value are set to NaN in this sample's column only. The p-values of the other probes are
stored in `pval_sites`.
"""
from numbers import Number

import pandas as pd
from joblib import Parallel, delayed

from pyoobah.annotations import ArrayType, ProbeChannelAssignment
from pyoobah.channels import ChannelIntensities, separate_channels
from pyoobah.dataset import MethylationDataset
from pyoobah.detection import sample_p_values
from pyoobah.exceptions import (InvalidParameterError, DatasetTypeError, DimensionMismatchError, EmptyDatasetError,
                                SampleProcessingError)
from pyoobah.mask import MaskCollection, apply_detection_mask
from pyoobah.utils import is_real_number, get_logger

LOGGER = get_logger()


class MaskingSummary:
    """Statistics of a masking run.

    :ivar nb_probes: number of probes
    :vartype nb_probes: int
    :ivar nb_samples: number of samples
    :vartype nb_samples: int
    :ivar masks: the masks applied to each sample
    :vartype masks: MaskCollection
    :ivar failures: error message of each sample that could not be processed
    :vartype failures: dict
    """

    def __init__(self, nb_probes: int, nb_samples: int, masks: MaskCollection | None = None,
                 failures: dict | None = None):
        self.nb_probes = nb_probes
        self.nb_samples = nb_samples
        self.masks = MaskCollection() if masks is None else masks
        self.failures = {} if failures is None else failures

    @property
    def nb_total(self) -> int:
        """Number of (probe, sample) pairs"""
        return self.nb_probes * self.nb_samples

    @property
    def nb_masked(self) -> int:
        """Number of masked (probe, sample) pairs"""
        return self.masks.number_probes_masked()

    @property
    def masked_fraction(self) -> float:
        """Fraction of masked (probe, sample) pairs, rounded to 3 decimals"""
        if self.nb_total == 0:
            return 0.0
        return round(self.nb_masked / self.nb_total, 3)

    def __str__(self):
        return '\n'.join(['=======================',
                          '=    pOOBAH           =',
                          '=======================',
                          f'No. probes: {self.nb_probes}',
                          f'No. samples: {self.nb_samples}',
                          f'No. probes times samples: {self.nb_total}',
                          f'No. of masked probes: {self.nb_masked}',
                          f'Fraction of masked probes: {self.masked_fraction}'])

    def __repr__(self):
        return self.__str__()


####################################################################################################################
# Input validation
####################################################################################################################

def check_threshold(threshold) -> None:
    """Check that the threshold is a number in [0, 1]"""
    if not (is_real_number(threshold) and 0 <= threshold <= 1):
        LOGGER.error(f'Invalid value for threshold : {threshold}')
        raise InvalidParameterError('Invalid value for threshold. Please specify a numeric in the range of [0, 1].')


def get_channel_assignment(dataset: MethylationDataset, anno_table: pd.DataFrame | None) -> ProbeChannelAssignment:
    """Find the probes annotation to use, check that it matches the dataset, and derive the probes channel assignment.

    If `anno_table` is None or has no `probe_id` column, the dataset annotation is used. Otherwise it must have as many
    probes as the dataset, and its `type` and `channel` columns are used if it has them.

    :raises InvalidParameterError: if `anno_table` is not a dataframe
    :raises DimensionMismatchError: if the annotation doesn't match the dataset probes

    :return: the channel assignment
    :rtype: ProbeChannelAssignment"""
    if anno_table is not None and not isinstance(anno_table, pd.DataFrame):
        raise InvalidParameterError(f'anno_table must be a pandas DataFrame, not {type(anno_table)}')

    if anno_table is None or 'probe_id' not in anno_table.columns:
        anno_table = dataset.get_annotation()
        if anno_table is None:
            raise DimensionMismatchError('No annotation provided, and the dataset has no annotation')
    elif len(anno_table['probe_id']) != dataset.nb_probes:
        LOGGER.error(f'The annotation ({len(anno_table):,} probes) and dataset ({dataset.nb_probes:,} probes) are not '
                     f'compatible')
        raise DimensionMismatchError('The annotation and dataset are not compatible.')
    elif not {'type', 'channel'}.issubset(anno_table.columns):
        dataset_annotation = dataset.get_annotation()
        if dataset_annotation is None:
            raise DimensionMismatchError('The annotation has no probe type and channel, and the dataset has no '
                                         'annotation')
        anno_table = dataset_annotation

    assignment = ProbeChannelAssignment.from_annotation(anno_table)
    assignment.check_probes(dataset.site_ids)
    return assignment


def check_input(dataset, anno_table: pd.DataFrame | None, threshold: float) -> ChannelIntensities:
    """Run all the input checks, in order, and return the dataset intensities split by channel. Nothing is modified in
    the dataset.

    :raises InvalidParameterError: if the threshold or the annotation parameter is invalid
    :raises DatasetTypeError: if `dataset` is not a MethylationDataset
    :raises UnsupportedPlatformError: if the platform of the dataset is unknown
    :raises DimensionMismatchError: if the annotation or the channel matrices don't match the dataset
    :raises EmptyDatasetError: if the dataset has no sample

    :return: the intensities split by channel
    :rtype: ChannelIntensities"""
    check_threshold(threshold)

    if isinstance(anno_table, Number):
        LOGGER.error(f'Invalid value for anno_table : {anno_table}')
        raise InvalidParameterError('Invalid value for anno_table. Wanted to specify the p-value threshold?')

    if not isinstance(dataset, MethylationDataset):
        LOGGER.error(f'Invalid dataset type {type(dataset)}')
        raise DatasetTypeError(f'Please provide a MethylationDataset, not {type(dataset)}')

    array_type = ArrayType.from_tag(dataset.array_type)
    LOGGER.debug(f'platform : {array_type}')

    if dataset.site_ids.has_duplicates:
        raise DimensionMismatchError('Probe IDs of the dataset must be unique')

    if dataset.M.columns.has_duplicates:
        duplicated = dataset.M.columns[dataset.M.columns.duplicated()].unique().tolist()
        LOGGER.error(f'Duplicated sample names : {duplicated}')
        raise DimensionMismatchError(f'Sample names of the dataset must be unique, found duplicates {duplicated}')

    for name in ['U', 'M0', 'U0', 'oob_M', 'oob_U']:
        matrix = getattr(dataset, name)
        if not (matrix.index.equals(dataset.site_ids) and matrix.columns.equals(dataset.M.columns)):
            LOGGER.error(f'Matrix {name} is not aligned with M')
            raise DimensionMismatchError(f'Equal dimensions and IDs are expected (M/{name})')

    assignment = get_channel_assignment(dataset, anno_table)
    intensities = separate_channels(dataset, assignment)

    if dataset.nb_samples == 0:
        LOGGER.error('Dataset contains no samples.')
        raise EmptyDatasetError('Dataset contains no samples.')

    return intensities


####################################################################################################################
# Masking
####################################################################################################################

def _safe_sample_p_values(sample_name: str, intensities: ChannelIntensities,
                          min_background_signal: float | None) -> tuple:
    """Compute the p-values of a sample, returning the error message instead of raising it, so that one failing sample
    doesn't stop the others"""
    try:
        return sample_name, sample_p_values(sample_name, intensities, min_background_signal), None
    except Exception as e:
        return sample_name, None, f'{type(e).__name__}: {e}'


def run_poobah(dataset: MethylationDataset, anno_table: pd.DataFrame | None = None, threshold: float = 0.05,
               verbose: bool = False, n_jobs: int = 1, min_background_signal: float | None = None) -> MaskingSummary:
    """Compute the detection p-values of each sample, and mask the probes with a p-value strictly above the threshold.
    The dataset is modified in place.

    :param dataset: dataset to mask
    :type dataset: MethylationDataset
    :param anno_table: probes annotation, with at least a `probe_id` column. If None, the dataset annotation is used.
        Default: None
    :type anno_table: pandas.DataFrame | None
    :param threshold: p-values above this threshold are masked. Default: 0.05
    :type threshold: float
    :param verbose: if True, log the masking statistics. Default: False
    :type verbose: bool
    :param n_jobs: number of parallel jobs used to compute the p-values, -1 uses all processors. Default: 1
    :type n_jobs: int
    :param min_background_signal: if the background sum of a channel is lower or equal to this value, use an empirical
        prior as background. Default: None
    :type min_background_signal: float | None

    :raises SampleProcessingError: after all samples were processed, if the computation failed for some of them

    :return: the masking statistics
    :rtype: MaskingSummary"""
    intensities = check_input(dataset, anno_table, threshold)

    LOGGER.info(f'>>> Start pOOBAH masking of {dataset.nb_samples} samples (threshold {threshold})')

    dataset.reset_pval_sites()
    sample_names = dataset.sample_names

    # if there is only one job, don't parallelize
    if n_jobs == 1 or len(sample_names) == 1:
        results = [_safe_sample_p_values(name, intensities.for_sample(name), min_background_signal)
                   for name in sample_names]
    else:
        results = Parallel(n_jobs=n_jobs)(delayed(_safe_sample_p_values)(name, intensities.for_sample(name),
                                                                          min_background_signal)
                                          for name in sample_names)

    summary = MaskingSummary(dataset.nb_probes, dataset.nb_samples)

    for sample_name, p_values, error in results:
        if error is not None:
            LOGGER.error(f'Detection p-values of sample {sample_name} could not be computed: {error}')
            summary.failures[sample_name] = error
            continue
        summary.masks.add_mask(apply_detection_mask(dataset, sample_name, p_values, threshold))

    if verbose:
        LOGGER.info('\n' + str(summary))

    LOGGER.info('pOOBAH masking done')

    if len(summary.failures) > 0:
        raise SampleProcessingError(summary.failures)

    return summary


def mask_by_detection_p_value(dataset: MethylationDataset, anno_table: pd.DataFrame | None = None,
                              threshold: float = 0.05, verbose: bool = False, n_jobs: int = 1,
                              min_background_signal: float | None = None) -> MethylationDataset:
    """Mask probes signal intensities based on their out-of-band signal intensities (pOOBAH), to counter hybridization
    failures. The method is applied separately to each sample : a probe can be masked in sample A but not in sample B.

    See `run_poobah()` for the parameters.

    :return: the same dataset, where the M, U, M0, U0 and pval_sites values of the masked probes are NaN
    :rtype: MethylationDataset"""
    run_poobah(dataset, anno_table, threshold, verbose, n_jobs, min_background_signal)
    return dataset
