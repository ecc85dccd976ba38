"""
Content-Based Filtering Recommender
Rekomendasi dokumen berdasarkan kemiripan konten (TF-IDF + cosine similarity)
"""

from typing import List, Optional, Sequence, Tuple
import logging

from recsys.data import Document
from recsys.nlp.vectorizer import TFIDFVectorizer, cosine_similarity
from recsys.config import RECOMMENDATION_CONFIG

logger = logging.getLogger(__name__)

__all__ = ["InvalidInputError", "ContentBasedRecommender", "recommend", "cosine_similarity"]


class InvalidInputError(ValueError):
    """Input dari caller tidak valid (mis. query kosong)"""


def recommend(
    documents: Sequence[Document],
    query: str,
    top_n: int
) -> List[Tuple[Document, float]]:
    """
    Ranking dokumen terhadap query teks

    Args:
        documents: Corpus dokumen
        query: Teks query (di-trim, tidak boleh kosong)
        top_n: Jumlah hasil maksimum

    Returns:
        List of (Document, score), skor turun, skor sama mengikuti urutan corpus
    """
    if query is None or not query.strip():
        raise InvalidInputError("Query text must not be empty")
    if top_n < 0:
        raise ValueError(f"top_n must be >= 0, got {top_n}")

    query = query.strip()
    ranked = TFIDFVectorizer().find_similar(
        query, [doc.content for doc in documents], top_n=top_n
    )

    return [(documents[idx], score) for idx, score in ranked]


class ContentBasedRecommender:
    """
    Content-Based Filtering Recommender untuk dokumen

    Menyimpan corpus yang sudah di-load oleh caller; setiap rekomendasi
    menghitung ulang TF-IDF atas corpus + query.
    """

    def __init__(self, documents: Sequence[Document], top_n: Optional[int] = None):
        self.documents = list(documents)
        self.top_n = top_n if top_n is not None else RECOMMENDATION_CONFIG.get("top_n_recommendations", 15)

        logger.info(f"ContentBasedRecommender ready with {len(self.documents)} documents")

    def recommend(self, query: str, top_n: Optional[int] = None) -> List[Tuple[Document, float]]:
        """Rekomendasi dokumen untuk query teks"""
        top_n = top_n if top_n is not None else self.top_n
        results = recommend(self.documents, query, top_n)

        logger.debug(f"Query '{query.strip()[:50]}' -> {len(results)} results")

        return results

    def find_similar_documents(
        self,
        doc_id: str,
        top_n: Optional[int] = None
    ) -> List[Tuple[Document, float]]:
        """
        Cari dokumen yang mirip dengan dokumen yang sudah ada di corpus

        Args:
            doc_id: ID dokumen referensi
            top_n: Jumlah rekomendasi

        Returns:
            List of (Document, score) tanpa dokumen referensi itu sendiri
        """
        reference = next((doc for doc in self.documents if doc.id == doc_id), None)
        if reference is None:
            raise KeyError(f"Document {doc_id} tidak ditemukan")

        top_n = top_n if top_n is not None else self.top_n
        others = [doc for doc in self.documents if doc.id != doc_id]

        if not reference.content.strip():
            logger.warning(f"Document {doc_id} has no content, returning no recommendations")
            return []

        return recommend(others, reference.content, top_n)
