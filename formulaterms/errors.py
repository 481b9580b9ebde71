# Top-level error and warning classes


class FormulaTermsError(Exception):
    pass


class FormulaTermsWarning(Warning):
    pass


# Formula parsing errors and warnings


class FormulaParsingError(FormulaTermsError):
    """
    An error occured during the parsing of a formula specification.
    """


class FormulaSyntaxError(FormulaParsingError):
    """
    The nominated formula specification is not syntactically valid.
    """


class InteractionLiteralWarning(FormulaTermsWarning):
    """
    A numeric literal other than `1` was dropped from an interaction.
    """


# Schema resolution errors


class ResolutionError(FormulaTermsError):
    pass


class ColumnNotFoundError(ResolutionError):
    """
    A term referenced a column that is not present in the data (or schema).

    Attributes:
        name: The name of the missing column.
        suggestions: The closest known names, nearest first.
    """

    def __init__(self, message, name=None, suggestions=()):
        super().__init__(message)
        self.name = name
        self.suggestions = tuple(suggestions)


class SchemaMismatchError(ResolutionError):
    pass


class InterceptForbiddenError(ResolutionError):
    pass


# Contrast coding errors


class CodingError(FormulaTermsError):
    pass


# Column generation errors and warnings


class FormulaMaterializationError(FormulaTermsError):
    pass


class DataMismatchWarning(FormulaTermsWarning):
    pass
