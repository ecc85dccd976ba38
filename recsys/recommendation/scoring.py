"""
Recommendation Scorer - Agregasi skor item dari rating user dan neighbor index
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from recsys.config import RECOMMENDATION_CONFIG

logger = logging.getLogger(__name__)


def recommend_for_user(
    user_ratings: Sequence[float],
    neighbors: Dict[int, List[Tuple[int, float]]],
    n_items: Optional[int] = None,
    exclude_rated: bool = False
) -> List[Tuple[int, float]]:
    """
    Hitung skor rekomendasi item untuk satu user

    Untuk setiap item yang dirating (rating > 0), rating * similarity
    ditambahkan ke skor setiap tetangganya.

    Args:
        user_ratings: Rating user per item (0.0 = belum dirating)
        neighbors: Neighbor index dari k_nearest()
        n_items: Jumlah item di rating matrix; jika diberikan, panjang
            user_ratings harus sama
        exclude_rated: Buang item yang sudah dirating user dari hasil

    Returns:
        List of (item index, skor) dengan skor != 0, turun;
        skor sama -> index naik
    """
    ratings = np.asarray(user_ratings, dtype=float)
    if ratings.ndim != 1:
        raise ValueError(f"user_ratings must be 1-dimensional, got shape {ratings.shape}")
    if n_items is not None and len(ratings) != n_items:
        raise ValueError(
            f"user_ratings has length {len(ratings)}, expected {n_items} (matrix column count)"
        )

    scores: Dict[int, float] = defaultdict(float)
    rated_items = np.flatnonzero(ratings > 0)

    for item in rated_items:
        rating = ratings[item]
        for neighbor, similarity in neighbors.get(int(item), []):
            scores[neighbor] += rating * similarity

    rated = set(rated_items.tolist())
    recommendations = [
        (item, float(score))
        for item, score in scores.items()
        if score != 0 and not (exclude_rated and item in rated)
    ]
    recommendations.sort(key=lambda x: (-x[1], x[0]))

    return recommendations


recommend_items_for_user = recommend_for_user


class RecommendationScorer:
    """
    Scoring rekomendasi item-item untuk satu neighbor index

    Menerapkan kebijakan caller: exclude item yang sudah dirating dan top_n.
    """

    def __init__(
        self,
        neighbors: Dict[int, List[Tuple[int, float]]],
        n_items: Optional[int] = None,
        exclude_rated: Optional[bool] = None,
        top_n: Optional[int] = None
    ):
        """
        Initialize scorer

        Args:
            neighbors: Neighbor index dari k_nearest()
            n_items: Jumlah item (untuk validasi panjang rating user)
            exclude_rated: Default dari RECOMMENDATION_CONFIG
            top_n: Default dari RECOMMENDATION_CONFIG
        """
        self.neighbors = neighbors
        self.n_items = n_items
        self.exclude_rated = (
            exclude_rated if exclude_rated is not None
            else RECOMMENDATION_CONFIG.get("exclude_rated", False)
        )
        self.top_n = top_n if top_n is not None else RECOMMENDATION_CONFIG.get("top_n_recommendations", 15)

    def recommend(self, user_ratings: Sequence[float], top_n: Optional[int] = None) -> List[Tuple[int, float]]:
        """
        Ranking item untuk satu user

        Returns:
            Paling banyak top_n (item index, skor)
        """
        top_n = top_n if top_n is not None else self.top_n
        if top_n < 0:
            raise ValueError(f"top_n must be >= 0, got {top_n}")

        ranked = recommend_for_user(
            user_ratings, self.neighbors, n_items=self.n_items, exclude_rated=self.exclude_rated
        )

        if not ranked:
            logger.debug("User has no rated items with neighbors, no recommendations")

        return ranked[:top_n]
