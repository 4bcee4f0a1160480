from conftest import LOW_GREEN_PROBES, LOW_RED_PROBES
from pyoobah import mask_by_detection_p_value
from pyoobah.quality_control import detection_stats, print_value, print_pct


def test_detection_stats_before_masking(test_dataset, capsys):
    detection_stats(test_dataset, 'sample_0')
    captured = capsys.readouterr()
    assert 'Detection - sample_0' in captured.out
    assert 'No detection p-values, run pOOBAH masking first' in captured.out


def test_detection_stats(test_dataset, capsys):
    mask_by_detection_p_value(test_dataset, threshold=0.05)
    detection_stats(test_dataset, 'sample_1', threshold=0.05)
    lines = capsys.readouterr().out.split('\n')

    def value_of(name):
        line = next(line for line in lines if line.startswith(name))
        return line[len(name):].strip()

    # masked probes have lost their p-value
    assert value_of('N. Type I probes w/ Missing p-value') == str(len(LOW_GREEN_PROBES + LOW_RED_PROBES))
    assert value_of('N. Type I Green probes w/ p-value') == str(40 - len(LOW_GREEN_PROBES))
    assert value_of('N. Type I Red probes w/ p-value') == str(30 - len(LOW_RED_PROBES))
    # the remaining probes all passed the threshold
    assert value_of('% Detection Success Type I Green') == '100.00 %'
    assert value_of('% Detection Success Type I Red') == '100.00 %'
    assert value_of('N. Type II probes (no p-value)') == '20'


def test_print_values(capsys):
    print_value('integer', 1234)
    print_value('float', 0.12345)
    print_value('text', 'abc')
    print_pct('percentage', 0.5)
    lines = capsys.readouterr().out.split('\n')
    assert lines[0].split() == ['integer', '1,234']
    assert lines[1].split() == ['float', '0.12']
    assert lines[2].split() == ['text', 'abc']
    assert lines[3].split() == ['percentage', '50.00', '%']
