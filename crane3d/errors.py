"""
Exceptions raised by the crane model
"""


class CraneModelError(Exception):
    """Base class for all crane model errors"""


class ConfigurationError(CraneModelError, ValueError):
    """Invalid model parameters or update arguments"""


class DivergedError(CraneModelError, ArithmeticError):
    """Integration produced a non-finite or unsolvable state"""
