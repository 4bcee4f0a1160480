"""Split the intensities of a dataset by color channel and probe design: type I green, type I red, their out-of-band
counterparts, and type II probes."""
from typing import NamedTuple

import pandas as pd

from pyoobah.annotations import ProbeChannelAssignment
from pyoobah.exceptions import DimensionMismatchError
from pyoobah.utils import get_logger

LOGGER = get_logger()


class MethylationPair(NamedTuple):
    """Methylated and unmethylated signal of a set of probes, as dataframes (probes x samples) or series (probes)"""
    M: pd.DataFrame | pd.Series
    U: pd.DataFrame | pd.Series


class ChannelIntensities(NamedTuple):
    """Intensities split by channel.

    `green_oob` holds the green signal of type I red probes, and `red_oob` the red signal of type I green probes, so
    that `green` and `red_oob` share the same rows, as do `red` and `green_oob`."""
    green: MethylationPair
    red: MethylationPair
    green_oob: MethylationPair
    red_oob: MethylationPair
    type2: MethylationPair

    def for_sample(self, sample_name: str):
        """Select the column of one sample in every matrix.

        :param sample_name: name of the sample
        :type sample_name: str

        :return: the intensities of the sample, as series
        :rtype: ChannelIntensities"""
        return ChannelIntensities(*[MethylationPair(pair.M[sample_name], pair.U[sample_name]) for pair in self])

    def check_consistency(self) -> None:
        """Check that methylated and unmethylated matrices have the same probe IDs, and that in-band matrices have the
        same probe IDs as their out-of-band counterparts.

        :raises DimensionMismatchError: if the probe IDs are not identical

        :return: None"""
        for name, pair in zip(self._fields, self):
            if not pair.M.index.equals(pair.U.index):
                LOGGER.error(f'Methylated and unmethylated {name} probes differ')
                raise DimensionMismatchError(f'Equal dimensions and IDs are expected ({name} M/U)')

        for in_band, out_of_band in [('green', 'red_oob'), ('red', 'green_oob')]:
            if not getattr(self, in_band).M.index.equals(getattr(self, out_of_band).M.index):
                LOGGER.error(f'{in_band} in-band and {out_of_band} out-of-band probes differ')
                raise DimensionMismatchError(f'Equal dimensions and IDs are expected ({in_band}/{out_of_band})')


def separate_channels(dataset, assignment: ProbeChannelAssignment) -> ChannelIntensities:
    """Split the dataset intensities according to the probes channel assignment. The current (possibly masked) `M`
    and `U` matrices are used for in-band signal.

    :param dataset: the dataset to split
    :type dataset: MethylationDataset
    :param assignment: type I green, type I red and type II probe IDs
    :type assignment: ProbeChannelAssignment

    :return: the intensities split by channel
    :rtype: ChannelIntensities"""

    def select(df_m: pd.DataFrame, df_u: pd.DataFrame, probe_ids: pd.Index) -> MethylationPair:
        return MethylationPair(df_m.loc[probe_ids], df_u.loc[probe_ids])

    intensities = ChannelIntensities(green=select(dataset.M, dataset.U, assignment.type1_green),
                                     red=select(dataset.M, dataset.U, assignment.type1_red),
                                     green_oob=select(dataset.oob_M, dataset.oob_U, assignment.type1_red),
                                     red_oob=select(dataset.oob_M, dataset.oob_U, assignment.type1_green),
                                     type2=select(dataset.M, dataset.U, assignment.type2))

    LOGGER.debug(f'Separated channels : {len(assignment.type1_green):,} type I green, '
                 f'{len(assignment.type1_red):,} type I red, {len(assignment.type2):,} type II probes')
    return intensities
