"""
TF-IDF Vectorizer - Ekstraksi term vector dari teks dokumen
"""

import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging

import numpy as np
from scipy import sparse
from sklearn.feature_extraction import DictVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine_similarity

from recsys.nlp.preprocessor import TextPreprocessor, tokenize
from recsys.config import NLP_CONFIG

logger = logging.getLogger(__name__)

# token -> weight, key yang tidak ada berarti bobot 0
TermVector = Dict[str, float]

TextOrTokens = Union[str, Sequence[str]]


def _as_tokens(doc: TextOrTokens) -> List[str]:
    """Terima teks mentah, Document, atau list token yang sudah jadi"""
    if isinstance(doc, str):
        return tokenize(doc)
    content = getattr(doc, "content", None)
    if isinstance(content, str):
        return tokenize(content)
    return list(doc)


def term_frequency(doc: TextOrTokens) -> TermVector:
    """
    Hitung term frequency: jumlah token / total token dalam dokumen

    Dokumen tanpa token menghasilkan vector kosong.
    """
    tokens = _as_tokens(doc)
    if not tokens:
        return {}

    total = len(tokens)
    return {token: count / total for token, count in Counter(tokens).items()}


def document_frequency(corpus: Iterable[TextOrTokens]) -> Dict[str, int]:
    """
    Hitung document frequency: jumlah dokumen berbeda yang memuat token

    Args:
        corpus: Iterable of texts (atau list token)

    Returns:
        Dict token -> jumlah dokumen
    """
    frequencies: Counter = Counter()
    for doc in corpus:
        frequencies.update(set(_as_tokens(doc)))
    return dict(frequencies)


def _weigh(tf: TermVector, frequencies: Dict[str, int], total_docs: int) -> TermVector:
    # df yang hilang dianggap 1 supaya tidak terjadi ln(N/0)
    return {
        token: tf_value * math.log(total_docs / (frequencies.get(token) or 1))
        for token, tf_value in tf.items()
    }


def compute_tf_idf(texts: Sequence[TextOrTokens]) -> List[TermVector]:
    """
    Hitung TF-IDF untuk setiap dokumen (posisional)

    weight = tf(token, doc) * ln(total_docs / df(token))

    Args:
        texts: List of texts

    Returns:
        List of term vectors, urutan sama dengan input
    """
    token_lists = [_as_tokens(text) for text in texts]
    frequencies = document_frequency(token_lists)
    total_docs = len(token_lists)

    return [_weigh(term_frequency(tokens), frequencies, total_docs) for tokens in token_lists]


def tf_idf(documents: Sequence) -> Dict[str, TermVector]:
    """
    Hitung TF-IDF untuk corpus Document, di-key dengan document id

    Args:
        documents: List of Document (punya atribut id dan content)

    Returns:
        Dict doc_id -> term vector
    """
    ids = [doc.id for doc in documents]
    duplicates = sorted(doc_id for doc_id, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate document ids: {duplicates}")

    vectors = compute_tf_idf([doc.content for doc in documents])
    return dict(zip(ids, vectors))


def cosine_similarity(vec1: TermVector, vec2: TermVector) -> float:
    """
    Cosine similarity antara dua term vector

    Dot product atas gabungan key, dibagi perkalian magnitude.
    Magnitude 0 menghasilkan 0.0.
    """
    dot = 0.0
    for key in set(vec1) | set(vec2):
        dot += vec1.get(key, 0.0) * vec2.get(key, 0.0)

    norm1 = math.sqrt(sum(v * v for v in vec1.values()))
    norm2 = math.sqrt(sum(v * v for v in vec2.values()))

    if norm1 == 0 or norm2 == 0:
        return 0.0

    # clamp pembulatan floating point
    return max(-1.0, min(1.0, dot / (norm1 * norm2)))


def vectors_to_matrix(vectors: Sequence[TermVector]) -> Tuple[sparse.csr_matrix, List[str]]:
    """
    Ubah list term vector menjadi sparse matrix (dokumen x token)

    Returns:
        (sparse matrix, feature names)
    """
    dict_vectorizer = DictVectorizer(sparse=True)
    matrix = dict_vectorizer.fit_transform(vectors)
    return sparse.csr_matrix(matrix), dict_vectorizer.get_feature_names_out().tolist()


class TFIDFVectorizer:
    """
    TF-IDF Vectorizer untuk ekstraksi fitur dari teks dokumen
    Digunakan untuk content-based filtering
    """

    def __init__(self, preprocessor: Optional[TextPreprocessor] = None):
        """
        Initialize TF-IDF Vectorizer

        Args:
            preprocessor: Tokenizer dengan filter tambahan (default: tokenize() polos)
        """
        self.preprocessor = preprocessor or TextPreprocessor()

        self.is_fitted = False
        self.n_documents = 0
        self.document_frequencies: Dict[str, int] = {}
        self.feature_names: List[str] = []

    def _tokens(self, texts: Iterable[str]) -> List[List[str]]:
        return [self.preprocessor.tokenize(text) for text in texts]

    def fit(self, texts: List[str]) -> 'TFIDFVectorizer':
        """
        Fit vectorizer dengan corpus teks

        Args:
            texts: List of texts

        Returns:
            self
        """
        token_lists = self._tokens(texts)

        self.document_frequencies = document_frequency(token_lists)
        self.n_documents = len(token_lists)
        self.feature_names = sorted(self.document_frequencies)
        self.is_fitted = True

        logger.info(
            f"TF-IDF Vectorizer fitted on {self.n_documents} documents "
            f"with {len(self.feature_names)} features"
        )

        return self

    def transform(self, texts: List[str]) -> List[TermVector]:
        """
        Transform texts ke TF-IDF vectors memakai statistik corpus hasil fit

        Setiap teks dihitung sebagai satu dokumen tambahan:
        total_docs = n_documents + 1 dan df token di teks bertambah 1.

        Args:
            texts: List of texts

        Returns:
            List of term vectors
        """
        if not self.is_fitted:
            raise ValueError("Vectorizer belum di-fit. Panggil fit() terlebih dahulu.")

        total_docs = self.n_documents + 1
        vectors = []
        for tokens in self._tokens(texts):
            frequencies = {
                token: self.document_frequencies.get(token, 0) + 1
                for token in set(tokens)
            }
            vectors.append(_weigh(term_frequency(tokens), frequencies, total_docs))

        return vectors

    def fit_transform(self, texts: List[str]) -> List[TermVector]:
        """
        Fit dan transform dalam satu langkah

        Args:
            texts: List of texts

        Returns:
            List of term vectors, satu per teks
        """
        self.fit(texts)
        return [
            _weigh(term_frequency(tokens), self.document_frequencies, self.n_documents)
            for tokens in self._tokens(texts)
        ]

    def get_top_keywords(self, text: str, top_n: int = None) -> List[Tuple[str, float]]:
        """
        Dapatkan top keywords dari satu teks relatif terhadap corpus hasil fit

        Args:
            text: Input text
            top_n: Jumlah keywords yang diambil

        Returns:
            List of (keyword, score) tuples
        """
        top_n = top_n if top_n is not None else NLP_CONFIG.get("top_keywords", 10)

        vector = self.transform([text])[0]
        ranked = sorted(
            ((token, weight) for token, weight in vector.items() if weight > 0),
            key=lambda item: (-item[1], item[0])
        )
        return ranked[:top_n]

    def compute_similarity(self, texts: List[str]) -> np.ndarray:
        """
        Hitung cosine similarity antar semua texts

        Args:
            texts: List of texts

        Returns:
            Similarity matrix (n x n)
        """
        if not texts:
            return np.zeros((0, 0))

        vectors = self.fit_transform(texts)
        matrix, feature_names = vectors_to_matrix(vectors)
        if not feature_names:
            return np.zeros((len(texts), len(texts)))

        return pairwise_cosine_similarity(matrix)

    def find_similar(
        self,
        query_text: str,
        corpus_texts: List[str],
        top_n: Optional[int] = None
    ) -> List[Tuple[int, float]]:
        """
        Cari texts yang paling mirip dengan query

        Query dihitung sebagai dokumen tambahan di corpus, jadi vector-nya
        langsung sebanding dengan vector dokumen. Urutan hasil: skor turun,
        skor sama mengikuti urutan corpus.

        Args:
            query_text: Text query
            corpus_texts: Corpus untuk pencarian
            top_n: Jumlah hasil (None = semua)

        Returns:
            List of (index, similarity_score) tuples
        """
        if top_n is not None and top_n < 0:
            raise ValueError(f"top_n must be >= 0, got {top_n}")

        token_lists = self._tokens([query_text, *corpus_texts])
        query_vector, *corpus_vectors = compute_tf_idf(token_lists)

        similarities = [
            (idx, cosine_similarity(query_vector, vector))
            for idx, vector in enumerate(corpus_vectors)
        ]

        # sort stabil: skor sama tetap urutan corpus
        similarities.sort(key=lambda x: x[1], reverse=True)

        if top_n is not None:
            similarities = similarities[:top_n]

        return similarities
