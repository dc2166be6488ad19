"""Custom exceptions for model conversion"""


class ConversionError(Exception):
    """Base exception for conversion errors"""
    pass


class InputError(ConversionError):
    """Malformed or empty source data (no triangles, bad indices, corrupt CEM)"""
    pass


class ObjParseError(InputError):
    """Syntax error in an OBJ document"""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.message = message
        super().__init__(f"Error in OBJ file on line {line_number}: {message}")


class UnsupportedFormatError(ConversionError):
    """Source/target format pairing that is not implemented"""
    pass
