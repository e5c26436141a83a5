
class SparseMatrixError(ValueError):
    """Base class for sparse matrix runtime errors."""
    pass

class MatrixFormatError(SparseMatrixError):
    """Base class for errors in the persisted text format."""
    pass

class MatrixConfigError(ValueError):
    """Base class for codec configuration errors."""
    pass



class InvalidDimensionsError(SparseMatrixError):
    """Raised when a matrix is created with a non-positive row or column count."""

    def __init__(self, rows, cols):
        self.rows = rows
        self.cols = cols
        message = f"Invalid matrix dimensions {rows}x{cols}. rows and cols must be positive integers"
        super().__init__(message)


class MalformedHeaderError(MatrixFormatError):
    """Raised when the rows= or cols= header line is missing or unparseable."""

    def __init__(self, expected_key: str, line: str = None, line_number: int = None):
        self.expected_key = expected_key
        self.line = line
        self.line_number = line_number
        if line is None:
            message = f"Missing '{expected_key} = <positive integer>' header line"
        else:
            message = f"Line {line_number}: expected '{expected_key} = <positive integer>', got {line!r}"
        super().__init__(message)


class MalformedTripletError(MatrixFormatError):
    """Raised when a data line matches neither the (r,c,v) nor the {r,c,v} grammar."""

    def __init__(self, line: str, line_number: int = None, reason: str = ""):
        self.line = line
        self.line_number = line_number
        self.reason = reason

        location = f"Line {line_number}: " if line_number is not None else ""
        message = f"{location}malformed triplet {line!r}{f' ({reason})' if reason else ''}"
        super().__init__(message)


class IndexOutOfRangeError(SparseMatrixError, IndexError):
    """Raised when a triplet or accessor index lies outside the declared matrix bounds."""

    def __init__(self, row: int, col: int, rows: int, cols: int, line_number: int = None):
        self.row = row
        self.col = col
        self.rows = rows
        self.cols = cols
        self.line_number = line_number

        location = f"Line {line_number}: " if line_number is not None else ""
        message = f"{location}index ({row}, {col}) out of range for {rows}x{cols} matrix"
        super().__init__(message)


class DimensionMismatchError(SparseMatrixError):
    """Raised when operand shapes are incompatible for the requested operation."""

    def __init__(self, operation: str, left_shape: tuple[int, int], right_shape: tuple[int, int]):
        self.operation = operation
        self.left_shape = left_shape
        self.right_shape = right_shape

        if operation == 'multiply':
            requirement = "left cols must equal right rows"
        else:
            requirement = "shapes must be identical"
        message = (
            f"Cannot {operation} a {left_shape[0]}x{left_shape[1]} matrix "
            f"and a {right_shape[0]}x{right_shape[1]} matrix: {requirement}"
        )
        super().__init__(message)


class IOFailureError(SparseMatrixError):
    """Raised when a matrix file cannot be opened, read or written."""

    def __init__(self, path, mode: str, reason: str = ""):
        self.path = path
        self.mode = mode
        self.reason = reason

        action = "read" if mode == 'r' else "write"
        message = f"Cannot {action} matrix file {str(path)!r}{f': {reason}' if reason else ''}"
        super().__init__(message)


class InvalidCodecConfigError(MatrixConfigError):
    """Raised when a codec configuration field holds an unsupported value."""

    def __init__(self, field: str, value, valid_values: list = None):
        self.field = field
        self.value = value
        self.valid_values = valid_values
        if valid_values is None:
            message = f"Invalid value {value!r} for {field}"
        else:
            message = f"Invalid value {value!r} for {field}. Must be one of: {valid_values}"
        super().__init__(message)


class MissingColumnError(MatrixFormatError):
    """Raised when a triplet dataframe lacks one of the row, col or value columns."""

    def __init__(self, column: str, columns: list):
        self.column = column
        self.columns = columns
        message = f"Column \"{column}\" not found in triplet dataframe. Found: {columns}"
        super().__init__(message)
