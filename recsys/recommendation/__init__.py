"""
Recommendation Module - Content-Based, Item-Item CF, dan Matrix Factorization
"""

from recsys.recommendation.content_based import ContentBasedRecommender, InvalidInputError, recommend
from recsys.recommendation.scoring import RecommendationScorer, recommend_for_user
from recsys.recommendation.collaborative import (
    ItemBasedRecommender,
    compute_item_similarity,
    highest_rated_items,
    k_nearest,
    most_frequently_rated_items,
)
from recsys.recommendation.factorization import MatrixFactorization, compute_rmse, factorize

__all__ = [
    "ContentBasedRecommender",
    "InvalidInputError",
    "recommend",
    "RecommendationScorer",
    "recommend_for_user",
    "ItemBasedRecommender",
    "compute_item_similarity",
    "k_nearest",
    "most_frequently_rated_items",
    "highest_rated_items",
    "MatrixFactorization",
    "compute_rmse",
    "factorize",
]
