"""pOOBAH masking of Illumina methylation arrays : detection p-values from out-of-band signal, computed per sample."""
from pyoobah.annotations import ArrayType, control_probe_categories
from pyoobah.dataset import MethylationDataset
from pyoobah.exceptions import (PyoobahError, InvalidParameterError, DatasetTypeError, UnsupportedPlatformError,
                                DimensionMismatchError, EmptyDatasetError, SampleProcessingError)
from pyoobah.poobah import mask_by_detection_p_value, run_poobah, MaskingSummary
from pyoobah.utils import set_logger

__version__ = '0.1.0'
