"""
Item-Item Collaborative Filtering
==================================
- Item-item cosine similarity matrix dari User-Item rating matrix
- k-Nearest Neighbors per item
- Statistik rating per item

Rating 0.0 berarti "belum dirating".
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import logging

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from recsys.config import RECOMMENDATION_CONFIG, SIMILARITY_CONFIG
from recsys.data import as_rating_matrix
from recsys.recommendation.scoring import RecommendationScorer

logger = logging.getLogger(__name__)

# item index -> [(neighbor item index, similarity)], turun menurut similarity
NeighborList = Dict[int, List[Tuple[int, float]]]


def _parallel_map(func: Callable, items: Iterable, max_workers: Optional[int]) -> List:
    """Map dengan thread pool; hasil tetap urut sesuai input"""
    if max_workers == 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


def _resolve_workers(max_workers: Optional[int]) -> Optional[int]:
    if max_workers is None:
        max_workers = SIMILARITY_CONFIG.get("max_workers")
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")
    return max_workers


def compute_item_similarity(
    matrix,
    max_workers: Optional[int] = None,
    method: Optional[str] = None
) -> np.ndarray:
    """
    Hitung item-item cosine similarity matrix

    Magnitude setiap kolom dihitung sekali. Setiap pasangan (i, j), i <= j,
    hanya membaca input yang immutable, jadi baris segitiga atas dihitung
    paralel lalu digabung menjadi matrix simetris di satu langkah akhir.

    Args:
        matrix: Rating matrix users x items
        max_workers: Jumlah thread (default: SIMILARITY_CONFIG)
        method: "pairwise" (thread pool) atau "vectorized" (sklearn)

    Returns:
        Similarity matrix items x items
    """
    method = method or SIMILARITY_CONFIG.get("method", "pairwise")
    max_workers = _resolve_workers(max_workers)

    if method == "vectorized":
        ratings = as_rating_matrix(matrix)
        if ratings.shape[1] == 0:
            return np.zeros((0, 0))
        if ratings.shape[0] == 0:
            return np.zeros((ratings.shape[1], ratings.shape[1]))
        # clamp pembulatan floating point
        return np.clip(cosine_similarity(ratings.T), -1.0, 1.0)

    if method != "pairwise":
        raise ValueError(f"Unknown similarity method: {method!r}")

    ratings = as_rating_matrix(matrix)
    n_items = ratings.shape[1]

    # satu baris per item, contiguous untuk dot product
    columns = np.ascontiguousarray(ratings.T)
    magnitudes = np.sqrt(np.einsum("ij,ij->i", columns, columns))

    def upper_row(i: int) -> np.ndarray:
        dots = columns[i:] @ columns[i]
        denominators = magnitudes[i] * magnitudes[i:]
        row = np.zeros(n_items - i)
        np.divide(dots, denominators, out=row, where=denominators != 0)
        np.clip(row, -1.0, 1.0, out=row)
        return row

    rows = _parallel_map(upper_row, range(n_items), max_workers)

    similarity = np.zeros((n_items, n_items))
    for i, row in enumerate(rows):
        similarity[i, i:] = row
        similarity[i:, i] = row

    logger.info(f"Item-item similarity computed for {n_items} items")

    return similarity


compute_item_item_similarity = compute_item_similarity


def k_nearest(similarity_matrix, k: int, max_workers: Optional[int] = None) -> NeighborList:
    """
    Top-k item paling mirip untuk setiap item

    Item itu sendiri tidak pernah masuk list. Skor sama diurutkan
    berdasarkan index item (naik).

    Args:
        similarity_matrix: Matrix items x items
        k: Jumlah tetangga per item

    Returns:
        Dict item index -> [(neighbor index, similarity)]
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")

    similarity = np.asarray(similarity_matrix, dtype=float)
    if similarity.ndim != 2 or similarity.shape[0] != similarity.shape[1]:
        raise ValueError(f"Similarity matrix must be square, got shape {similarity.shape}")

    n_items = similarity.shape[0]
    max_workers = _resolve_workers(max_workers)

    def neighbors_of(i: int) -> List[Tuple[int, float]]:
        others = np.delete(np.arange(n_items), i)
        scores = similarity[i, others]
        # lexsort: key terakhir adalah key utama
        order = np.lexsort((others, -scores))[:k]
        return [(int(others[o]), float(scores[o])) for o in order]

    rows = _parallel_map(neighbors_of, range(n_items), max_workers)

    return dict(enumerate(rows))


find_k_nearest_neighbors = k_nearest


def most_frequently_rated_items(matrix, top_n: int) -> List[Tuple[int, int]]:
    """
    Item dengan jumlah rating terbanyak

    Returns:
        List of (item index, jumlah rating), turun; sama -> index naik
    """
    ratings = as_rating_matrix(matrix)
    counts = np.count_nonzero(ratings > 0, axis=0)
    order = np.lexsort((np.arange(len(counts)), -counts))[:max(top_n, 0)]

    return [(int(j), int(counts[j])) for j in order]


def highest_rated_items(matrix, top_n: int) -> List[Tuple[int, float]]:
    """
    Item dengan rata-rata rating tertinggi (hanya cell yang dirating)

    Item tanpa rating tidak ikut.

    Returns:
        List of (item index, rata-rata rating)
    """
    ratings = as_rating_matrix(matrix)
    rated = ratings > 0
    counts = rated.sum(axis=0)
    sums = np.where(rated, ratings, 0.0).sum(axis=0)

    items = np.flatnonzero(counts)
    means = sums[items] / counts[items]
    order = np.lexsort((items, -means))[:max(top_n, 0)]

    return [(int(items[o]), float(means[o])) for o in order]


class ItemBasedRecommender:
    """
    Item-item collaborative filtering di atas rating matrix in-memory

    fit() membangun similarity matrix dan neighbor index sekali
    untuk satu snapshot dataset.
    """

    def __init__(
        self,
        k_neighbors: Optional[int] = None,
        max_workers: Optional[int] = None,
        method: Optional[str] = None,
        exclude_rated: Optional[bool] = None
    ):
        self.k_neighbors = k_neighbors if k_neighbors is not None else RECOMMENDATION_CONFIG.get("k_neighbors", 10)
        self.max_workers = max_workers
        self.method = method
        self.exclude_rated = exclude_rated

        self.ratings: Optional[np.ndarray] = None
        self.similarity_matrix: Optional[np.ndarray] = None
        self.neighbors: Optional[NeighborList] = None
        self.scorer: Optional[RecommendationScorer] = None

    @property
    def is_fitted(self) -> bool:
        return self.neighbors is not None

    def fit(self, matrix) -> 'ItemBasedRecommender':
        self.ratings = as_rating_matrix(matrix)
        self.similarity_matrix = compute_item_similarity(
            self.ratings, max_workers=self.max_workers, method=self.method
        )
        self.neighbors = k_nearest(self.similarity_matrix, self.k_neighbors, max_workers=self.max_workers)
        self.scorer = RecommendationScorer(
            self.neighbors, n_items=self.ratings.shape[1], exclude_rated=self.exclude_rated
        )

        logger.info(
            f"ItemBasedRecommender fitted: {self.ratings.shape[0]} users, "
            f"{self.ratings.shape[1]} items, k={self.k_neighbors}"
        )

        return self

    def _check_fitted(self):
        if not self.is_fitted:
            raise ValueError("Model belum di-fit. Panggil fit() terlebih dahulu.")

    def similar_items(self, item_index: int) -> List[Tuple[int, float]]:
        """Tetangga terdekat satu item"""
        self._check_fitted()
        if item_index not in self.neighbors:
            raise IndexError(f"Item index {item_index} out of range")
        return self.neighbors[item_index]

    def recommend_for_user(self, user_index: int, top_n: Optional[int] = None) -> List[Tuple[int, float]]:
        """Rekomendasi untuk user di baris user_index dari matrix hasil fit"""
        self._check_fitted()
        if not 0 <= user_index < self.ratings.shape[0]:
            raise IndexError(f"User index {user_index} out of range")
        return self.scorer.recommend(self.ratings[user_index], top_n=top_n)
