"""
Functions to give an insight on the detection p-values of a dataset by calculating and printing some reference
statistics.
"""
import numpy as np

from pyoobah.annotations import ProbeChannelAssignment
from pyoobah.dataset import MethylationDataset


def print_header(title: str) -> None:
    """Format and print a QC section header

    :param title: title of the section header
    :type title: str

    :return: None"""
    print('\n===================================================================')
    print(f'|  {title}')
    print('===================================================================\n')


def print_value(name: str, value) -> None:
    """Format and print a QC value

    :param name: name (description) of the value to display
    :type name: str
    :param value: value to display. Can be anything printable.

    :return: None"""
    if isinstance(value, (float, np.float32, np.float64)):
        print(f'{name:<55} {value:.2f}')
    elif isinstance(value, (int, np.int32, np.int64)):
        print(f'{name:<55} {value:,}')
    else:
        print(f'{name:<55} {value}')


def print_pct(name: str, value) -> None:
    """Format and print a QC percentage (x100 will be applied to the input value)

    :param name: name (description) of the value to display
    :type name: str
    :param value: value to display. Can be anything numeric.

    :return: None"""
    print(f'{name:<55} {100*value:.2f} %')


def detection_stats(dataset: MethylationDataset, sample_name: str, threshold: float = 0.05) -> None:
    """Print detection statistics of the given sample, from the p-values stored in the dataset. Type II probes have
    no p-value and are only counted.

    :param dataset: dataset containing the sample to check, after masking
    :type dataset: MethylationDataset
    :param sample_name: name of the sample
    :type sample_name: str
    :param threshold: p-value threshold used for detection success. Default: 0.05
    :type threshold: float

    :return: None"""
    print_header(f'Detection - {sample_name}')

    if dataset.pval_sites is None:
        print('No detection p-values, run pOOBAH masking first')
        return

    p_values = dataset.pval_sites[sample_name]
    assignment = ProbeChannelAssignment.from_annotation(dataset.get_annotation())

    type1_ids = assignment.type1_green.append(assignment.type1_red)
    type1_p_values = p_values.reindex(type1_ids)
    missing = int(type1_p_values.isna().sum())
    print_value('N. Type I probes w/ Missing p-value', missing)
    if len(type1_p_values) > 0:
        print_pct('% Type I probes w/ Missing p-value', missing / len(type1_p_values))

    for name, probe_ids in [('Type I Green', assignment.type1_green), ('Type I Red', assignment.type1_red)]:
        probes = p_values.reindex(probe_ids).dropna()
        nb_success = int((probes <= threshold).sum())
        print()
        print_value(f'N. {name} probes w/ p-value', len(probes))
        print_value(f'N. Probes w/ Detection Success {name}', nb_success)
        if len(probes) > 0:
            print_pct(f'% Detection Success {name}', nb_success / len(probes))

    print()
    print_value('N. Type II probes (no p-value)', len(assignment.type2))
