"""
Text Preprocessor - Tokenisasi dan normalisasi teks dokumen
"""

from typing import Iterable, List, Optional, Set
import logging

logger = logging.getLogger(__name__)


def _strip_boundary(word: str) -> str:
    """Buang karakter non-alfanumerik di awal dan akhir token"""
    start, end = 0, len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


def tokenize(text: str) -> List[str]:
    """
    Tokenisasi teks menjadi list token

    Lower-case, split whitespace, trim karakter non-alfanumerik
    di batas token, token kosong dibuang. Urutan token dipertahankan.

    Args:
        text: Teks mentah

    Returns:
        List of tokens
    """
    if not text:
        return []

    tokens = (_strip_boundary(word) for word in text.lower().split())
    return [t for t in tokens if t]


class TextPreprocessor:
    """Preprocessor dengan filter opsional di atas tokenize()"""

    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        min_token_length: int = 1
    ):
        """
        Initialize preprocessor

        Args:
            stopwords: Token yang dibuang setelah tokenisasi (default: tidak ada)
            min_token_length: Panjang minimum token
        """
        if min_token_length < 1:
            raise ValueError("min_token_length must be >= 1")

        self.stopwords: Set[str] = {w.lower() for w in stopwords} if stopwords else set()
        self.min_token_length = min_token_length

    def tokenize(self, text: str) -> List[str]:
        """
        Tokenisasi lalu filter stopwords dan token pendek

        Args:
            text: Teks mentah

        Returns:
            List of tokens
        """
        tokens = tokenize(text)

        if self.min_token_length > 1:
            tokens = [t for t in tokens if len(t) >= self.min_token_length]

        if self.stopwords:
            tokens = [t for t in tokens if t not in self.stopwords]

        return tokens

    def preprocess(self, text: str) -> str:
        """Full preprocessing pipeline, hasil di-join kembali dengan spasi"""
        return " ".join(self.tokenize(text))
