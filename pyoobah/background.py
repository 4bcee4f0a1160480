"""Empirical background model of a sample : the distribution of the out-of-band signal of a color channel, as an
empirical cumulative distribution function (ECDF)."""
import numpy as np
import pandas as pd
from statsmodels.distributions.empirical_distribution import ECDF as ecdf

from pyoobah.utils import get_total_intensity, get_logger

LOGGER = get_logger()

EMPIRICAL_PRIOR = np.arange(1000)


def get_background(signal_frame: pd.DataFrame, channel: str) -> np.ndarray:
    """Get the total (M+U) out-of-band signal of a channel. The out-of-band signal of the green channel comes from the
    type I red probes, and conversely. Probes flagged in the `mask` column are excluded.

    :param signal_frame: signal of one sample, as returned by `build_signal_frame()`
    :type signal_frame: pandas.DataFrame
    :param channel: 'G' or 'R'
    :type channel: str

    :return: background intensities, without missing values
    :rtype: numpy.ndarray"""
    designed_channel = 'R' if channel == 'G' else 'G'
    oob_probes = signal_frame[(signal_frame['col'] == designed_channel) & ~signal_frame['mask']]
    return get_total_intensity(oob_probes, channel, remove_na=True)


def build_background_ecdf(background: np.ndarray, min_signal: float | None = None) -> ecdf | None:
    """Build the ECDF of the background intensities. The ECDF counts the values lower or equal to the query.

    :param background: background intensities
    :type background: numpy.ndarray
    :param min_signal: if the sum of the background intensities is lower or equal to this value, use an empirical prior
        (uniform on 0..999) instead. Default: None
    :type min_signal: float | None

    :return: the ECDF, or None if there is no background value
    :rtype: statsmodels.distributions.empirical_distribution.ECDF | None"""
    background = np.asarray(background, dtype='float64')
    background = background[~np.isnan(background)]

    if min_signal is not None and np.sum(background) <= min_signal:
        LOGGER.debug('Not enough out of band signal, use empirical prior')
        background = EMPIRICAL_PRIOR

    if len(background) == 0:
        return None

    return ecdf(background)


def background_p_values(background_ecdf: ecdf | None, intensities) -> np.ndarray:
    """Probability for a background value to be strictly higher than each intensity (1 - ECDF). The p-value is NaN
    where the intensity is missing, or everywhere if there is no background model.

    :param background_ecdf: the background model
    :type background_ecdf: statsmodels.distributions.empirical_distribution.ECDF | None
    :param intensities: total in-band intensities
    :type intensities: array-like

    :return: p-values, in [0, 1] or NaN
    :rtype: numpy.ndarray"""
    intensities = np.asarray(intensities, dtype='float64')

    if background_ecdf is None:
        return np.full(intensities.shape, np.nan)

    p_values = 1 - background_ecdf(intensities)
    p_values[np.isnan(intensities)] = np.nan
    return p_values
