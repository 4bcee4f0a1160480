import numpy as np
import pandas as pd
import pytest

from pyoobah.dataset import MethylationDataset

# probes whose in-band signal is below any background value, in every sample
LOW_GREEN_PROBES = ['cg_green_000', 'cg_green_001', 'cg_green_002']
LOW_RED_PROBES = ['cg_red_000', 'cg_red_001']
# probe that fails in the first sample only
SAMPLE_SPECIFIC_PROBE = 'cg_green_005'


def make_dataset(nb_green=40, nb_red=30, nb_type2=20, nb_samples=3, seed=42, array_type='EPIC') -> MethylationDataset:
    """Synthetic dataset : in-band signal between 1000 and 3000 per allele, out-of-band signal between 50 and 800, so
    that only the low probes fail detection"""
    rng = np.random.default_rng(seed)
    green_ids = [f'cg_green_{i:03d}' for i in range(nb_green)]
    red_ids = [f'cg_red_{i:03d}' for i in range(nb_red)]
    type2_ids = [f'cg_ii_{i:03d}' for i in range(nb_type2)]
    probe_ids = pd.Index(green_ids + red_ids + type2_ids, name='probe_id')
    sample_names = [f'sample_{i}' for i in range(nb_samples)]
    shape = (len(probe_ids), nb_samples)

    def matrix(low, high):
        return pd.DataFrame(rng.uniform(low, high, shape), index=probe_ids, columns=sample_names)

    M, U = matrix(1000, 3000), matrix(1000, 3000)
    oob_M, oob_U = matrix(50, 800), matrix(50, 800)
    oob_M.loc[type2_ids] = np.nan
    oob_U.loc[type2_ids] = np.nan

    low_probes = [p for p in LOW_GREEN_PROBES + LOW_RED_PROBES if p in probe_ids]
    M.loc[low_probes] = 10
    U.loc[low_probes] = 10

    if SAMPLE_SPECIFIC_PROBE in probe_ids and nb_samples > 0:
        M.loc[SAMPLE_SPECIFIC_PROBE] = 5000
        U.loc[SAMPLE_SPECIFIC_PROBE] = 5000
        M.loc[SAMPLE_SPECIFIC_PROBE, sample_names[0]] = 10
        U.loc[SAMPLE_SPECIFIC_PROBE, sample_names[0]] = 10

    annotation = pd.DataFrame({'probe_id': probe_ids,
                               'type': ['I'] * (nb_green + nb_red) + ['II'] * nb_type2,
                               'channel': ['G'] * nb_green + ['R'] * nb_red + [None] * nb_type2})

    return MethylationDataset(M, U, oob_M, oob_U, array_type, annotation)


@pytest.fixture
def test_dataset():
    return make_dataset()


@pytest.fixture
def three_probes_dataset():
    """One sample, one type I green probe far above background, one type I red probe inside the background, and one
    type II probe with a low signal"""
    probe_ids = pd.Index(['cg_green', 'cg_red', 'cg_ii'], name='probe_id')
    M = pd.DataFrame({'sample_1': [2500, 50, 20]}, index=probe_ids)
    U = pd.DataFrame({'sample_1': [2500, 50, 20]}, index=probe_ids)
    oob_M = pd.DataFrame({'sample_1': [100, 100, np.nan]}, index=probe_ids)
    oob_U = pd.DataFrame({'sample_1': [100, 100, np.nan]}, index=probe_ids)
    annotation = pd.DataFrame({'probe_id': probe_ids, 'type': ['I', 'I', 'II'], 'channel': ['G', 'R', None]})
    return MethylationDataset(M, U, oob_M, oob_U, 'HM450', annotation)


@pytest.fixture
def dataset_factory():
    return make_dataset
