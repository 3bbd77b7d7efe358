"""vbsfmt: VBScript / ASP source reformatter."""

from vbsfmt.errors import FormatError, RegionMismatchError, UnbalancedDelimitersError
from vbsfmt.formatter import FormatOptions, FormatResult, format_text

__version__ = "0.1.0"

__all__ = [
    "FormatError",
    "FormatOptions",
    "FormatResult",
    "RegionMismatchError",
    "UnbalancedDelimitersError",
    "format_text",
]
