"""Errors raised while masking probes by detection p-value. Every validation error is raised before any sample is
processed, so a failed call leaves the dataset untouched."""


class PyoobahError(Exception):
    """Base class for exceptions in pyoobah."""
    pass


class InvalidParameterError(PyoobahError, ValueError):
    """Raised when a parameter has a wrong value, e.g. a threshold outside of [0, 1]."""
    pass


class DatasetTypeError(PyoobahError, TypeError):
    """Raised when the input is not a MethylationDataset."""
    pass


class UnsupportedPlatformError(PyoobahError, ValueError):
    """Raised when the platform tag of a dataset is not one of the supported array types."""
    pass


class DimensionMismatchError(PyoobahError, ValueError):
    """Raised when the annotation, the probe channels or the intensity matrices are not aligned."""
    pass


class EmptyDatasetError(PyoobahError, ValueError):
    """Raised when the dataset contains no sample."""
    pass


class SampleProcessingError(PyoobahError, RuntimeError):
    """Raised after all samples were processed, if the computation failed for some of them.

    :ivar failures: error message for each failed sample
    :vartype failures: dict
    """

    def __init__(self, failures: dict):
        self.failures = failures
        names = ', '.join(str(name) for name in failures)
        super().__init__(f'Detection p-value computation failed for {len(failures)} sample(s): {names}')
