"""Class that holds the intensities of a set of samples, as probes x samples matrices aligned on the same probe IDs,
together with the detection p-values and the probes annotation."""

import numpy as np
import pandas as pd

from pyoobah.annotations import ArrayType
from pyoobah.utils import get_logger

LOGGER = get_logger()

MATRIX_NAMES = ['M', 'U', 'M0', 'U0', 'oob_M', 'oob_U', 'pval_sites']


class MethylationDataset:
    """
    Intensities of all the probes of a set of samples. Every matrix is a dataframe with probe IDs as index and sample
    names as columns, in the same order.

    :ivar M: methylated in-band signal (green signal for type II probes)
    :vartype M: pandas.DataFrame
    :ivar U: unmethylated in-band signal (red signal for type II probes)
    :vartype U: pandas.DataFrame
    :ivar M0: original methylated signal, kept for audit
    :vartype M0: pandas.DataFrame
    :ivar U0: original unmethylated signal, kept for audit
    :vartype U0: pandas.DataFrame
    :ivar oob_M: methylated out-of-band signal of type I probes, NaN for type II probes
    :vartype oob_M: pandas.DataFrame
    :ivar oob_U: unmethylated out-of-band signal of type I probes, NaN for type II probes
    :vartype oob_U: pandas.DataFrame
    :ivar pval_sites: detection p-values, NaN until computed
    :vartype pval_sites: pandas.DataFrame | None
    :ivar array_type: platform tag of the samples
    :vartype array_type: ArrayType | str
    :ivar annotation: probes annotation, with columns `probe_id`, `type` and `channel`
    :vartype annotation: pandas.DataFrame | None
    """

    def __init__(self, M: pd.DataFrame, U: pd.DataFrame, oob_M: pd.DataFrame | None = None,
                 oob_U: pd.DataFrame | None = None, array_type: ArrayType | str = ArrayType.HUMAN_EPIC_V2,
                 annotation: pd.DataFrame | None = None, M0: pd.DataFrame | None = None, U0: pd.DataFrame | None = None,
                 pval_sites: pd.DataFrame | None = None):
        """Create a dataset from in-band and out-of-band intensity matrices. `M0` and `U0` default to a copy of `M` and
        `U`. Missing out-of-band matrices are filled with NaN.

        :param M: methylated in-band signal
        :type M: pandas.DataFrame
        :param U: unmethylated in-band signal
        :type U: pandas.DataFrame
        :param oob_M: methylated out-of-band signal. Default: None
        :type oob_M: pandas.DataFrame | None
        :param oob_U: unmethylated out-of-band signal. Default: None
        :type oob_U: pandas.DataFrame | None
        :param array_type: platform tag. Default: EPICv2
        :type array_type: ArrayType | str
        :param annotation: probes annotation. Default: None
        :type annotation: pandas.DataFrame | None
        :param M0: original methylated signal. Default: None
        :type M0: pandas.DataFrame | None
        :param U0: original unmethylated signal. Default: None
        :type U0: pandas.DataFrame | None
        :param pval_sites: detection p-values. Default: None
        :type pval_sites: pandas.DataFrame | None"""
        self.M = self._as_float(M)
        self.U = self._as_float(U)
        self.M0 = self._as_float(M if M0 is None else M0)
        self.U0 = self._as_float(U if U0 is None else U0)
        self.oob_M = self._empty_matrix() if oob_M is None else self._as_float(oob_M)
        self.oob_U = self._empty_matrix() if oob_U is None else self._as_float(oob_U)
        self.pval_sites = None if pval_sites is None else self._as_float(pval_sites)
        self.array_type = array_type
        self.annotation = annotation

    @staticmethod
    def _as_float(df: pd.DataFrame) -> pd.DataFrame:
        # masking writes NaN, which requires float columns
        return df.astype('float64').copy()

    def _empty_matrix(self) -> pd.DataFrame:
        return pd.DataFrame(np.nan, index=self.M.index.copy(), columns=self.M.columns.copy(), dtype='float64')

    ####################################################################################################################
    # Properties
    ####################################################################################################################

    @property
    def site_ids(self) -> pd.Index:
        """Ordered probe IDs, one per row of every matrix"""
        return self.M.index

    @property
    def sample_names(self) -> list[str]:
        """Ordered sample names, one per column of every matrix"""
        return self.M.columns.tolist()

    @property
    def nb_samples(self) -> int:
        """Count the number of samples contained in the object

        :return: number of samples
        :rtype: int"""
        return len(self.M.columns)

    @property
    def nb_probes(self) -> int:
        """Count the number of probes contained in the object

        :return: number of probes
        :rtype: int"""
        return len(self.M.index)

    def get_annotation(self) -> pd.DataFrame | None:
        """Return the dataset annotation with a `probe_id` column, in the order of the matrices rows.

        :return: the annotation, or None if the dataset has no annotation
        :rtype: pandas.DataFrame | None"""
        if self.annotation is None:
            LOGGER.warning('The dataset has no annotation')
            return None

        annotation = self.annotation.copy()
        if 'probe_id' not in annotation.columns:
            annotation = annotation.rename_axis('probe_id').reset_index()

        annotation = annotation.set_index('probe_id').reindex(self.site_ids)
        return annotation.rename_axis('probe_id').reset_index()

    ####################################################################################################################
    # Detection p-values & masking
    ####################################################################################################################

    def reset_pval_sites(self) -> None:
        """Make sure `pval_sites` is a (number of probes x number of samples) matrix aligned with the intensities. If
        it's not the case, replace it by a matrix of NaN."""
        if self.pval_sites is not None and self.pval_sites.shape == self.M.shape:
            self.pval_sites.index = self.site_ids
            self.pval_sites.columns = self.M.columns
            return

        if self.pval_sites is not None:
            LOGGER.warning(f'Detection p-values shape {self.pval_sites.shape} does not match intensities shape '
                           f'{self.M.shape}, resetting them')

        self.pval_sites = self._empty_matrix()

    def set_p_values(self, sample_name: str, p_values: pd.Series) -> None:
        """Write the detection p-values of a sample. Probes missing from `p_values` are set to NaN.

        :param sample_name: name of the sample (column) to update
        :type sample_name: str
        :param p_values: p-values indexed by probe ID
        :type p_values: pandas.Series

        :return: None"""
        if self.pval_sites is None:
            self.reset_pval_sites()
        column = self.M.columns.get_loc(sample_name)
        self.pval_sites.iloc[:, column] = p_values.reindex(self.site_ids).to_numpy(dtype='float64')

    def mask_sample(self, sample_name: str, probe_ids) -> int:
        """Set the signal (M, U, M0, U0) and the detection p-value of the given probes to NaN, for one sample only.
        All the matrices are updated together.

        :param sample_name: name of the sample (column) to mask
        :type sample_name: str
        :param probe_ids: IDs of the probes to mask. IDs that are not in the dataset are ignored
        :type probe_ids: list-like

        :return: number of masked probes
        :rtype: int"""
        if self.pval_sites is None:
            self.reset_pval_sites()

        rows = self.site_ids.get_indexer(pd.Index(probe_ids).unique())
        rows = rows[rows >= 0]
        if len(rows) == 0:
            return 0

        column = self.M.columns.get_loc(sample_name)
        for df in [self.M, self.U, self.M0, self.U0, self.pval_sites]:
            df.iloc[rows, column] = np.nan

        return len(rows)

    ####################################################################################################################
    # Description, copy & conversion
    ####################################################################################################################

    def copy(self):
        """Creates a copy of the MethylationDataset object."""
        annotation = None if self.annotation is None else self.annotation.copy()
        pval_sites = None if self.pval_sites is None else self.pval_sites.copy()
        return MethylationDataset(self.M, self.U, self.oob_M, self.oob_U, self.array_type, annotation, self.M0,
                                  self.U0, pval_sites)

    def __str__(self):
        return f'MethylationDataset ({self.array_type}) : {self.nb_probes:,} probes x {self.nb_samples} samples'

    def __repr__(self):
        description = self.__str__() + '\n'
        description += 'No annotation\n' if self.annotation is None else f'Annotation : {len(self.annotation):,} probes\n'
        description += self.M.__repr__()
        return description

    @staticmethod
    def from_signal_df(signal_df: pd.DataFrame, array_type: ArrayType | str, M0: pd.DataFrame | None = None,
                       U0: pd.DataFrame | None = None):
        """Build a dataset from a signal dataframe with one row per probe, index levels `type`, `channel` and
        `probe_id`, and columns (sample name, signal channel, methylation state), e.g. ('sample1', 'G', 'M').

        Type I probes take their in-band signal from their own channel and their out-of-band signal from the other
        channel. Type II probes take their methylated signal from the green channel and their unmethylated signal from
        the red channel.

        :param signal_df: the signal dataframe
        :type signal_df: pandas.DataFrame
        :param array_type: platform tag of the samples
        :type array_type: ArrayType | str
        :param M0: original methylated signal. Default: None
        :type M0: pandas.DataFrame | None
        :param U0: original unmethylated signal. Default: None
        :type U0: pandas.DataFrame | None

        :return: the new dataset
        :rtype: MethylationDataset"""
        index_df = signal_df.index.to_frame(index=False)
        probe_ids = pd.Index(index_df['probe_id'].values, name='probe_id')
        design_type = index_df['type'].astype(object).fillna('').astype(str).to_numpy()
        channel = index_df['channel'].astype(object).fillna('').astype(str).str[:1].to_numpy()

        is_green = (design_type == 'I') & (channel == 'G')
        is_red = (design_type == 'I') & (channel == 'R')
        is_type2 = design_type == 'II'

        # skip non-signal columns such as 'mask_info'
        sample_names = [name for name in signal_df.columns.get_level_values(0).unique()
                        if (name, 'G', 'M') in signal_df.columns]
        matrices = {name: pd.DataFrame(np.nan, index=probe_ids, columns=sample_names, dtype='float64')
                    for name in ['M', 'U', 'oob_M', 'oob_U']}

        for sample_name in sample_names:
            sample_df = signal_df[sample_name]
            green = {state: sample_df[('G', state)].to_numpy(dtype='float64') for state in ['M', 'U']}
            red = {state: sample_df[('R', state)].to_numpy(dtype='float64') for state in ['M', 'U']}
            for state in ['M', 'U']:
                in_band = np.where(is_green, green[state], np.where(is_red, red[state], np.nan))
                out_of_band = np.where(is_green, red[state], np.where(is_red, green[state], np.nan))
                matrices[state][sample_name] = in_band
                matrices[f'oob_{state}'][sample_name] = out_of_band
            matrices['M'].loc[is_type2, sample_name] = green['M'][is_type2]
            matrices['U'].loc[is_type2, sample_name] = red['U'][is_type2]

        annotation = pd.DataFrame({'probe_id': probe_ids,
                                   'type': np.where(is_type2, 'II', np.where(is_green | is_red, 'I', None)),
                                   'channel': np.where(is_green, 'G', np.where(is_red, 'R', None))})

        return MethylationDataset(matrices['M'], matrices['U'], matrices['oob_M'], matrices['oob_U'], array_type,
                                  annotation, M0, U0)
