"""Nhotyp: a prefix-notation language over 48-bit integers."""

# Main API
from nhotyp.nhotyp import Nhotyp, NhotypRunResult
from nhotyp.nhotyp_loader import NhotypLoader, NhotypProgram
from nhotyp.nhotyp_session import NhotypSession

# Exceptions
from nhotyp.nhotyp_error import (
    NhotypError, NhotypLoadError, NhotypTokenError, NhotypParseError, NhotypUnclosedBlockError,
    NhotypDuplicateDefinitionError, NhotypEvalError, NhotypUnboundVariableError,
    NhotypUnknownIdentifierError, NhotypInputError, NhotypRecursionLimitError, ErrorMessageBuilder
)

# Input and output
from nhotyp.nhotyp_io import (
    NhotypInput, NhotypOutput, NhotypStreamInput, NhotypListInput, NhotypStreamOutput, NhotypBufferingOutput
)

# Lower-level components
from nhotyp.nhotyp_token import NhotypToken, NhotypTokenType, NhotypLine
from nhotyp.nhotyp_tokenizer import NhotypTokenizer
from nhotyp.nhotyp_parser import NhotypParser
from nhotyp.nhotyp_symbol_table import NhotypSymbolTable
from nhotyp.nhotyp_math import NhotypMathFunctions
from nhotyp.nhotyp_environment import NhotypEnvironment
from nhotyp.nhotyp_call_stack import NhotypCallStack
from nhotyp.nhotyp_evaluator import NhotypEvaluator


__all__ = [
    # Main API
    "Nhotyp", "NhotypRunResult", "NhotypLoader", "NhotypProgram", "NhotypSession",

    # Exceptions
    "NhotypError", "NhotypLoadError", "NhotypTokenError", "NhotypParseError", "NhotypUnclosedBlockError",
    "NhotypDuplicateDefinitionError", "NhotypEvalError", "NhotypUnboundVariableError",
    "NhotypUnknownIdentifierError", "NhotypInputError", "NhotypRecursionLimitError", "ErrorMessageBuilder",

    # Input and output
    "NhotypInput", "NhotypOutput", "NhotypStreamInput", "NhotypListInput", "NhotypStreamOutput",
    "NhotypBufferingOutput",

    # Lower-level components
    "NhotypToken", "NhotypTokenType", "NhotypLine", "NhotypTokenizer", "NhotypParser", "NhotypSymbolTable",
    "NhotypMathFunctions", "NhotypEnvironment", "NhotypCallStack", "NhotypEvaluator"
]
