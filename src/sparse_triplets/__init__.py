"""
Sparse integer matrices stored as (row, col, value) triplets.

Reads and writes a plain-text triplet format and supports addition,
subtraction and multiplication of the stored matrices.
"""

__version__ = "0.1.0"

from .sparse_matrix import SparseMatrix, Triplet
from .matrix_io import parse, serialize, parse_text, serialize_text, parse_triplet_line
from .arithmetic import add, subtract, multiply
from .csr import CSRView, to_csr
from .config import CodecConfig
from .matrix_errors import (
    SparseMatrixError,
    MatrixFormatError,
    MatrixConfigError,
    InvalidDimensionsError,
    MalformedHeaderError,
    MalformedTripletError,
    IndexOutOfRangeError,
    DimensionMismatchError,
    IOFailureError,
    InvalidCodecConfigError,
    MissingColumnError,
)

__all__ = [
    "SparseMatrix",
    "Triplet",
    "parse",
    "serialize",
    "parse_text",
    "serialize_text",
    "parse_triplet_line",
    "add",
    "subtract",
    "multiply",
    "CSRView",
    "to_csr",
    "CodecConfig",
    "SparseMatrixError",
    "MatrixFormatError",
    "MatrixConfigError",
    "InvalidDimensionsError",
    "MalformedHeaderError",
    "MalformedTripletError",
    "IndexOutOfRangeError",
    "DimensionMismatchError",
    "IOFailureError",
    "InvalidCodecConfigError",
    "MissingColumnError",
]
