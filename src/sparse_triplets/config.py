import codecs
from typing import Literal
from dataclasses import dataclass

from .constants import BRACKET_STYLES
from .matrix_errors import InvalidCodecConfigError


@dataclass
class CodecConfig:
    """
    Configuration for reading and writing the triplet text format.

    Reading always accepts both bracket styles and both header spacings;
    these options only control how a matrix is written back out.
    """

    bracket_style: Literal['curly', 'paren'] = 'curly'
    """Bracket style used for every triplet line on write:
    - 'curly': {row,col,value}
    - 'paren': (row,col,value)
    """

    header_spacing: bool = True
    """Whether header lines are written as 'rows = N' (True) or 'rows=N' (False)."""

    encoding: str = 'utf-8'
    """Text encoding used for matrix files."""

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.bracket_style not in BRACKET_STYLES:
            raise InvalidCodecConfigError('bracket_style', self.bracket_style, list(BRACKET_STYLES))
        if not isinstance(self.header_spacing, bool):
            raise InvalidCodecConfigError('header_spacing', self.header_spacing, [True, False])
        if not isinstance(self.encoding, str) or not self.encoding:
            raise InvalidCodecConfigError('encoding', self.encoding)
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise InvalidCodecConfigError('encoding', self.encoding) from e

    @property
    def brackets(self) -> tuple[str, str]:
        return BRACKET_STYLES[self.bracket_style]
