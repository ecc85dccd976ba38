"""
NLP Module - Tokenisasi dan TF-IDF
"""

from recsys.nlp.preprocessor import TextPreprocessor, tokenize
from recsys.nlp.vectorizer import (
    TFIDFVectorizer,
    compute_tf_idf,
    cosine_similarity,
    document_frequency,
    term_frequency,
    tf_idf,
)

__all__ = [
    "TextPreprocessor",
    "TFIDFVectorizer",
    "tokenize",
    "term_frequency",
    "document_frequency",
    "tf_idf",
    "compute_tf_idf",
    "cosine_similarity",
]
