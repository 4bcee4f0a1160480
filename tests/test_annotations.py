import pandas as pd
import pytest

from pyoobah.annotations import ArrayType, ProbeChannelAssignment, control_probe_categories
from pyoobah.exceptions import UnsupportedPlatformError, DimensionMismatchError


def test_array_type_from_tag():
    assert ArrayType.from_tag('HM450') == ArrayType.HUMAN_450K
    assert ArrayType.from_tag('probes450') == ArrayType.HUMAN_450K
    assert ArrayType.from_tag('probesEPIC') == ArrayType.HUMAN_EPIC
    assert ArrayType.from_tag('epicv2') == ArrayType.HUMAN_EPIC_V2
    assert ArrayType.from_tag('probes27') == ArrayType.HUMAN_27K
    assert ArrayType.from_tag(ArrayType.HUMAN_EPIC) == ArrayType.HUMAN_EPIC
    assert len(ArrayType) == 4


@pytest.mark.parametrize('tag', ['MSA', 'MM285', '', None, 450])
def test_unsupported_platform(tag):
    with pytest.raises(UnsupportedPlatformError):
        ArrayType.from_tag(tag)


def test_control_probe_categories():
    categories_450k = control_probe_categories('HM450')
    assert 'NEGATIVE' in categories_450k
    assert 'RESTORATION' not in categories_450k
    assert 'RESTORATION' in control_probe_categories(ArrayType.HUMAN_EPIC)
    assert control_probe_categories('EPICv2') == control_probe_categories('EPIC')
    assert 'NORM_GRN' in control_probe_categories('probes27')
    for array_type in ArrayType:
        categories = control_probe_categories(array_type)
        assert categories == sorted(categories)
    with pytest.raises(UnsupportedPlatformError):
        control_probe_categories('unknown')


def test_assignment_from_annotation():
    annotation = pd.DataFrame({'probe_id': ['p1', 'p2', 'p3', 'p4'],
                               'type': pd.Categorical(['I', 'I', 'II', 'I']),
                               'channel': pd.Categorical(['Grn', 'Red', None, 'G'])})
    assignment = ProbeChannelAssignment.from_annotation(annotation)
    assert assignment.type1_green.tolist() == ['p1', 'p4']
    assert assignment.type1_red.tolist() == ['p2']
    assert assignment.type2.tolist() == ['p3']
    assert len(assignment) == 4
    assignment.check_probes(pd.Index(['p1', 'p2', 'p3', 'p4']))


def test_assignment_uses_index_without_probe_id():
    annotation = pd.DataFrame({'type': ['I', 'II'], 'channel': ['R', None]}, index=['p1', 'p2'])
    assignment = ProbeChannelAssignment.from_annotation(annotation)
    assert assignment.type1_red.tolist() == ['p1']
    assert assignment.type2.tolist() == ['p2']


def test_assignment_errors():
    with pytest.raises(DimensionMismatchError):
        ProbeChannelAssignment.from_annotation(pd.DataFrame({'probe_id': ['p1'], 'type': ['I']}))

    # type I probe without channel
    annotation = pd.DataFrame({'probe_id': ['p1', 'p2'], 'type': ['I', 'I'], 'channel': ['G', None]})
    with pytest.raises(DimensionMismatchError):
        ProbeChannelAssignment.from_annotation(annotation).check_probes(pd.Index(['p1', 'p2']))

    # probe in two sets
    assignment = ProbeChannelAssignment(pd.Index(['p1']), pd.Index(['p1']), pd.Index([]))
    with pytest.raises(DimensionMismatchError):
        assignment.check_probes(pd.Index(['p1']))

    # annotated probe missing from the dataset
    assignment = ProbeChannelAssignment(pd.Index(['p1']), pd.Index(['p2']), pd.Index([]))
    with pytest.raises(DimensionMismatchError):
        assignment.check_probes(pd.Index(['p1']))
