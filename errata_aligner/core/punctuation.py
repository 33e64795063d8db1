import re
import unicodedata


# =============================
# 统一标点处理器
# =============================


class PunctuationHandler:
    """Unified handling of punctuation checks shared by the splitters and the scorer"""

    WHITESPACE_PATTERN = re.compile(r"\s+")

    @staticmethod
    def is_punctuation(char: str) -> bool:
        """
        Check if a single character belongs to a Unicode punctuation category (P*).

        Args:
            char: single character

        Returns:
            True if the character is punctuation
        """
        return unicodedata.category(char).startswith("P")

    @staticmethod
    def strip_punctuation(text: str) -> str:
        """Remove every Unicode punctuation character from text"""
        return "".join(ch for ch in text if not PunctuationHandler.is_punctuation(ch))

    @staticmethod
    def has_content(text: str) -> bool:
        """True if anything is left once whitespace and punctuation are removed"""
        compact = PunctuationHandler.WHITESPACE_PATTERN.sub("", text)
        return bool(PunctuationHandler.strip_punctuation(compact))

    @staticmethod
    def is_between_ascii_letters(text: str, pos: int) -> bool:
        """
        Check if punctuation is surrounded by ASCII letters or digits.

        Used by the sentence splitter to avoid splitting inside English
        abbreviations and words such as "e.g" or "it's".

        Args:
            text: text string
            pos: punctuation position

        Returns:
            True if punctuation is surrounded by ASCII letters
        """
        if 0 < pos < len(text) - 1:
            left = text[pos - 1]
            right = text[pos + 1]
            # str.isalpha() is True for CJK characters too, restrict to ASCII
            left_ok = left.isascii() and (left.isalpha() or left.isdigit())
            right_ok = right.isascii() and (right.isalpha() or right.isdigit())
            return left_ok and right_ok
        return False

    @staticmethod
    def is_decimal_point(text: str, pos: int) -> bool:
        """
        Check if position is a decimal point (e.g., . in 3.14).

        Args:
            text: text string
            pos: position

        Returns:
            True if it is a decimal point
        """
        if text[pos] == "." and 0 < pos < len(text) - 1:
            return text[pos - 1].isdigit() and text[pos + 1].isdigit()
        return False

    @staticmethod
    def should_skip_for_splitting(text: str, pos: int) -> bool:
        """
        Check if punctuation should be skipped during sentence splitting.

        Rules:
        1. Skip punctuation surrounded by ASCII letters (English abbreviations)
        2. Skip decimal points
        """
        return PunctuationHandler.is_between_ascii_letters(
            text, pos
        ) or PunctuationHandler.is_decimal_point(text, pos)
