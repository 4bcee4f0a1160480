import warnings

import numpy as np
import pandas as pd

from pyoobah.dataset import MethylationDataset


def test_properties(test_dataset):
    assert test_dataset.nb_samples == 3
    assert test_dataset.nb_probes == 90
    assert test_dataset.sample_names == ['sample_0', 'sample_1', 'sample_2']
    assert test_dataset.site_ids[0] == 'cg_green_000'
    assert test_dataset.pval_sites is None
    # M0 and U0 default to a copy of M and U
    assert test_dataset.M0.equals(test_dataset.M)
    assert test_dataset.M0 is not test_dataset.M
    # just checking that the functions don't crash
    test_dataset.__str__()
    test_dataset.__repr__()


def test_default_oob_and_float_conversion():
    M = pd.DataFrame({'s1': [1, 2]}, index=['p1', 'p2'])
    dataset = MethylationDataset(M, M, array_type='EPIC')
    assert dataset.M.dtypes['s1'] == 'float64'
    assert dataset.oob_M.isna().all().all()
    assert dataset.oob_U.shape == (2, 1)
    assert dataset.get_annotation() is None


def test_float_conversion_copies_input():
    M = pd.DataFrame({'s1': [1, 2]}, index=['p1', 'p2'])
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        dataset = MethylationDataset(M, M)
    dataset.M.iloc[0, 0] = np.nan
    assert M.iloc[0, 0] == 1
    assert dataset.U.iloc[0, 0] == 1
    assert dataset.M0.iloc[0, 0] == 1


def test_get_annotation_is_aligned():
    M = pd.DataFrame({'s1': [1, 2, 3]}, index=['p1', 'p2', 'p3'])
    annotation = pd.DataFrame({'type': ['II', 'I', 'I'], 'channel': [None, 'G', 'R']}, index=['p3', 'p1', 'p2'])
    dataset = MethylationDataset(M, M, annotation=annotation)
    dataset_annotation = dataset.get_annotation()
    assert dataset_annotation.probe_id.tolist() == ['p1', 'p2', 'p3']
    assert dataset_annotation.type.tolist() == ['I', 'I', 'II']


def test_reset_pval_sites(test_dataset):
    test_dataset.pval_sites = pd.DataFrame(np.zeros((5, 2)))
    test_dataset.reset_pval_sites()
    assert test_dataset.pval_sites.shape == (90, 3)
    assert test_dataset.pval_sites.isna().all().all()
    assert test_dataset.pval_sites.index.equals(test_dataset.site_ids)

    # a matrix with the right shape is kept
    test_dataset.pval_sites.iloc[0, 0] = 0.5
    test_dataset.reset_pval_sites()
    assert test_dataset.pval_sites.iloc[0, 0] == 0.5


def test_mask_sample(test_dataset):
    initial = test_dataset.copy()
    test_dataset.set_p_values('sample_1', pd.Series(0.01, index=test_dataset.site_ids))
    nb_masked = test_dataset.mask_sample('sample_1', ['cg_green_010', 'cg_red_003', 'unknown_probe'])
    assert nb_masked == 2

    for name in ['M', 'U', 'M0', 'U0', 'pval_sites']:
        df = getattr(test_dataset, name)
        assert df.loc[['cg_green_010', 'cg_red_003'], 'sample_1'].isna().all()
        assert df.loc['cg_green_011', 'sample_1'] == (0.01 if name == 'pval_sites' else getattr(initial, name).loc['cg_green_011', 'sample_1'])
        # other samples are untouched
        if name != 'pval_sites':
            pd.testing.assert_frame_equal(df[['sample_0', 'sample_2']], getattr(initial, name)[['sample_0', 'sample_2']])

    assert test_dataset.mask_sample('sample_1', []) == 0


def test_copy_is_independent(test_dataset):
    copied = test_dataset.copy()
    copied.M.iloc[0, 0] = -1
    copied.annotation.loc[0, 'type'] = 'II'
    assert test_dataset.M.iloc[0, 0] != -1
    assert test_dataset.annotation.loc[0, 'type'] == 'I'


def test_from_signal_df():
    index = pd.MultiIndex.from_tuples([('I', 'G', 'cg', 'cg_green'), ('I', 'R', 'cg', 'cg_red'),
                                       ('II', np.nan, 'cg', 'cg_ii')],
                                      names=['type', 'channel', 'probe_type', 'probe_id'])
    columns = pd.MultiIndex.from_product([['s1', 's2'], ['G', 'R'], ['M', 'U']],
                                         names=['sample_name', 'signal_channel', 'methylation_state'])
    values = np.arange(24, dtype='float64').reshape(3, 8)
    values[2, [1, 2, 5, 6]] = np.nan  # type II probes have no green U / red M
    signal_df = pd.DataFrame(values, index=index, columns=columns)

    dataset = MethylationDataset.from_signal_df(signal_df, 'HM450')

    assert dataset.sample_names == ['s1', 's2']
    assert dataset.site_ids.tolist() == ['cg_green', 'cg_red', 'cg_ii']
    # type I green : in-band green, out-of-band red
    assert dataset.M.loc['cg_green'].tolist() == [0, 4]
    assert dataset.U.loc['cg_green'].tolist() == [1, 5]
    assert dataset.oob_M.loc['cg_green'].tolist() == [2, 6]
    assert dataset.oob_U.loc['cg_green'].tolist() == [3, 7]
    # type I red : in-band red, out-of-band green
    assert dataset.M.loc['cg_red'].tolist() == [10, 14]
    assert dataset.U.loc['cg_red'].tolist() == [11, 15]
    assert dataset.oob_M.loc['cg_red'].tolist() == [8, 12]
    assert dataset.oob_U.loc['cg_red'].tolist() == [9, 13]
    # type II : methylated from green, unmethylated from red
    assert dataset.M.loc['cg_ii'].tolist() == [16, 20]
    assert dataset.U.loc['cg_ii'].tolist() == [19, 23]
    assert dataset.oob_M.loc['cg_ii'].isna().all()

    annotation = dataset.get_annotation()
    assert annotation.type.tolist() == ['I', 'I', 'II']
    assert annotation.channel.tolist()[:2] == ['G', 'R']
