"""Mask probes whose detection p-value is above a threshold, and keep track of the masked probes of each sample"""
import pandas as pd

from pyoobah.utils import get_logger

LOGGER = get_logger()


class Mask:
    """
    A mask is a set of probes that are masked for a specific sample.

    :var mask_name: the name of the mask
    :vartype mask_name: str
    :var sample_label: the name of the sample the mask is applied to
    :vartype sample_label: str
    :var series: a pandas Series of booleans indexed by probe ID, where True indicates that the probe is masked
    :vartype series: pandas.Series
    """
    def __init__(self, mask_name: str, sample_label: str, series: pd.Series):
        """Create a new Mask object.

        :param mask_name: the name of the mask
        :type mask_name: str
        :param sample_label: the name of the sample the mask is applied to
        :type sample_label: str
        :param series: a pandas Series of booleans, where True indicates that the probe is masked
        :type series: pandas.Series"""
        self.mask_name = mask_name
        self.sample_label = sample_label
        if not isinstance(series, pd.Series):
            raise ValueError("series must be a pandas Series.")
        self.series = series

    def __str__(self):
        return f"Mask(name: {self.mask_name}, sample: {self.sample_label}, # masked probes: {int(self.series.sum()):,})"

    def __repr__(self):
        return self.__str__()


class MaskCollection:
    """A collection of masks, one per (mask name, sample).

    :var masks: a dictionary of masks, where the key is a tuple (mask_name, sample_label) and the value is a Mask object
    :vartype masks: dict
    """
    def __init__(self):
        self.masks = {}

    def add_mask(self, mask: Mask) -> None:
        """Add a new mask to the collection.

        :param mask: the mask to add
        :type mask: Mask"""
        if not isinstance(mask, Mask):
            raise ValueError("mask must be an instance of Mask.")

        if (mask.mask_name, mask.sample_label) in self.masks:
            LOGGER.info(f"{mask} already exists, overriding it.")

        self.masks[(mask.mask_name, mask.sample_label)] = mask

    def number_probes_masked(self, mask_name: str | None = None, sample_label: str | None = None) -> int:
        """Return the number of masked (probe, sample) pairs for a specific sample, or for all samples if no sample name
        is provided.

        :param mask_name: the name of the mask. Default: None
        :type mask_name: str | None
        :param sample_label: the name of the sample the mask is applied to. Default: None
        :type sample_label: str | None

        :return: number of masked probes
        :rtype: int"""
        total = 0
        for mask in self.masks.values():
            if mask_name is not None and mask.mask_name != mask_name:
                continue
            if sample_label is not None and mask.sample_label != sample_label:
                continue
            total += int(mask.series.sum())
        return total

    def __len__(self):
        return len(self.masks)

    def __str__(self):
        desc = ''
        for mask in self.masks.values():
            desc += mask.__str__() + '\n'
        return desc

    def __repr__(self):
        return self.__str__()


def select_masked_probes(p_values: pd.Series, threshold: float, site_ids: pd.Index) -> pd.Index:
    """Select the probes whose p-value is strictly above the threshold. Missing p-values are never selected, and probes
    that are not in `site_ids` are discarded.

    :param p_values: detection p-values indexed by probe ID
    :type p_values: pandas.Series
    :param threshold: p-value threshold
    :type threshold: float
    :param site_ids: probe IDs of the dataset
    :type site_ids: pandas.Index

    :return: IDs of the probes to mask
    :rtype: pandas.Index"""
    masked = p_values.index[(p_values > threshold).to_numpy(dtype=bool)]
    return masked[masked.isin(site_ids)]


def apply_detection_mask(dataset, sample_name: str, p_values: pd.Series, threshold: float) -> Mask:
    """Store the p-values of a sample in the dataset, then mask its probes with a p-value above the threshold. Only the
    column of this sample is modified.

    :param dataset: dataset to update
    :type dataset: MethylationDataset
    :param sample_name: name of the sample
    :type sample_name: str
    :param p_values: detection p-values of the sample, indexed by probe ID
    :type p_values: pandas.Series
    :param threshold: p-value threshold
    :type threshold: float

    :return: the mask of the sample, over all the dataset probes
    :rtype: Mask"""
    masked_probes = select_masked_probes(p_values, threshold, dataset.site_ids)

    dataset.set_p_values(sample_name, p_values)
    nb_masked = dataset.mask_sample(sample_name, masked_probes)
    LOGGER.debug(f'{nb_masked:,} probes masked in sample {sample_name}')

    series = pd.Series(dataset.site_ids.isin(masked_probes), index=dataset.site_ids)
    return Mask(f'poobah_{threshold}', sample_name, series)
