"""Tokenizer for Nhotyp source text with detailed error messages."""

import re
from typing import List

from nhotyp.nhotyp_error import NhotypTokenError
from nhotyp.nhotyp_token import (
    NhotypLine, NhotypToken, NhotypTokenType, OPERATOR_ARITIES, STATEMENT_KEYWORDS
)


MAX_TOKEN_LENGTH = 63

_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')
_IDENTIFIER_PATTERN = re.compile(r'[a-z_]+')
_ALLOWED_CHARACTERS = frozenset('abcdefghijklmnopqrstuvwxyz_0123456789+-*/%<=>!')


class NhotypTokenizer:
    """Splits Nhotyp source into lines of classified tokens."""

    def tokenize(self, source: str) -> List[NhotypLine]:
        """
        Tokenize program source.

        Everything after a '#' on a line is a comment.  Lines left blank are dropped.

        Args:
            source: The program text

        Returns:
            Non-blank lines, each with its tokens and 1-indexed line number

        Raises:
            NhotypTokenError: If a token is too long or contains illegal characters
        """
        lines = []
        for index, text in enumerate(source.split('\n')):
            line_number = index + 1
            code = text.split('#', 1)[0]
            words = code.split()
            if not words:
                continue

            tokens = [self.classify(word, line_number) for word in words]
            lines.append(NhotypLine(line_number, tokens))

        return lines

    def classify(self, word: str, line: int) -> NhotypToken:
        """
        Classify a single atom.

        Args:
            word: The atom text
            line: Line number for error reporting

        Returns:
            The classified token

        Raises:
            NhotypTokenError: If the atom is not a valid token
        """
        if len(word) > MAX_TOKEN_LENGTH:
            raise NhotypTokenError(
                message=f"Token length exceeded ({len(word)} of {MAX_TOKEN_LENGTH})",
                received=f"Token: {word[:20]}...",
                suggestion=f"Use names of at most {MAX_TOKEN_LENGTH} characters",
                line=line
            )

        for char in word:
            if char not in _ALLOWED_CHARACTERS:
                raise NhotypTokenError(
                    message=f"Unexpected character {char!r}",
                    received=f"Token: {word}",
                    expected="Lowercase letters, '_', digits or one of + - * / % < = > !",
                    line=line
                )

        if _INTEGER_PATTERN.fullmatch(word):
            return NhotypToken(NhotypTokenType.INTEGER, word, line)

        if word in OPERATOR_ARITIES:
            return NhotypToken(NhotypTokenType.OPERATOR, word, line)

        if word in STATEMENT_KEYWORDS:
            return NhotypToken(NhotypTokenType.KEYWORD, word, line)

        if _IDENTIFIER_PATTERN.fullmatch(word):
            return NhotypToken(NhotypTokenType.IDENTIFIER, word, line)

        raise NhotypTokenError(
            message=f"Malformed token {word!r}",
            received=f"Token: {word}",
            expected="An integer, an operator, a keyword or a name made of lowercase letters and '_'",
            example="+ count 1",
            line=line
        )
