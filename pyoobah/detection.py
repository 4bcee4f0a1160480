"""
Detection p-values based on the empirical cumulative distribution function (ECDF) of out-of-band signal, aka pOOBAH
(p-values by Out-Of-Band Array Hybridization).

For each sample, the green and red backgrounds are modelled by the out-of-band signal of the type I probes designed
for the other channel. The p-value of a type I probe is the probability for a background value of its channel to be
higher than its total in-band intensity (M+U). Type II probes have no out-of-band reference, their p-value is NaN.
"""
import numpy as np
import pandas as pd

from pyoobah.background import get_background, build_background_ecdf, background_p_values
from pyoobah.channels import ChannelIntensities
from pyoobah.utils import get_total_intensity, get_logger

LOGGER = get_logger()

SIGNAL_COLUMNS = ['MG', 'MR', 'UG', 'UR']


def build_signal_frame(intensities: ChannelIntensities) -> pd.DataFrame:
    """Gather the signal of one sample in a dataframe with one row per probe, indexed by probe ID. Columns `MG`, `MR`,
    `UG`, `UR` hold the methylated/unmethylated signal of each channel, `col` the design channel ('G', 'R' or '2' for
    type II probes) and `mask` excludes probes from the background.

    Type II probes have no methylated signal per channel: their green (methylated) and red (unmethylated) signals are
    stored in `UG` and `UR`.

    :param intensities: intensities of the sample, as returned by `ChannelIntensities.for_sample()`
    :type intensities: ChannelIntensities

    :raises DimensionMismatchError: if in-band and out-of-band probes don't match

    :return: the signal dataframe
    :rtype: pandas.DataFrame"""
    # rows of in-band and out-of-band signal are paired by position
    intensities.check_consistency()

    def make_frame(mg, mr, ug, ur, col: str, index: pd.Index) -> pd.DataFrame:
        df = pd.DataFrame({'MG': mg, 'MR': mr, 'UG': ug, 'UR': ur}, index=index, dtype='float64')
        df['col'] = col
        return df

    green, red = intensities.green, intensities.red
    green_oob, red_oob, type2 = intensities.green_oob, intensities.red_oob, intensities.type2

    frames = [
        make_frame(green.M.values, red_oob.M.values, green.U.values, red_oob.U.values, 'G', green.M.index),
        make_frame(green_oob.M.values, red.M.values, green_oob.U.values, red.U.values, 'R', red.M.index),
        make_frame(np.nan, np.nan, type2.M.values, type2.U.values, '2', type2.M.index),
    ]

    signal_frame = pd.concat(frames)
    signal_frame.index.name = 'probe_id'
    signal_frame['mask'] = False
    return signal_frame


def compute_p_values(signal_frame: pd.DataFrame, min_background_signal: float | None = None) -> pd.Series:
    """Compute the detection p-value of each probe of the signal dataframe.

    :param signal_frame: signal of one sample, as returned by `build_signal_frame()`
    :type signal_frame: pandas.DataFrame
    :param min_background_signal: if the background sum of a channel is lower or equal to this value, an empirical
        prior is used as background. Default: None
    :type min_background_signal: float | None

    :return: p-values indexed by probe ID, NaN for type II probes and probes with missing signal
    :rtype: pandas.Series"""
    p_values = pd.Series(np.nan, index=signal_frame.index, name='p_value', dtype='float64')

    for channel in ['G', 'R']:
        background_ecdf = build_background_ecdf(get_background(signal_frame, channel), min_background_signal)
        if background_ecdf is None:
            LOGGER.warning(f'No out-of-band signal for channel {channel}, detection p-values are unknown')

        is_channel = (signal_frame['col'] == channel).values
        in_band = get_total_intensity(signal_frame[is_channel], channel)
        p_values.loc[is_channel] = background_p_values(background_ecdf, in_band)

    return p_values


def sample_p_values(sample_name: str, intensities: ChannelIntensities,
                    min_background_signal: float | None = None) -> pd.Series:
    """Compute the detection p-values of one sample, from its channel intensities (series).

    :param sample_name: name of the sample, used to name the returned series
    :type sample_name: str
    :param intensities: intensities of the sample
    :type intensities: ChannelIntensities
    :param min_background_signal: see `compute_p_values()`. Default: None
    :type min_background_signal: float | None

    :return: p-values indexed by probe ID
    :rtype: pandas.Series"""
    LOGGER.debug(f'computing detection p-values of sample {sample_name}')
    signal_frame = build_signal_frame(intensities)
    return compute_p_values(signal_frame, min_background_signal).rename(sample_name)
