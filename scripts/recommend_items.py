"""
Script untuk item-item collaborative filtering dan matrix factorization
dari ratings CSV atau database
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from recsys import setup_logging
from recsys.data import build_rating_matrix, load_ratings_csv
from recsys.database import load_ratings_from_db
from recsys.recommendation.collaborative import (
    ItemBasedRecommender,
    highest_rated_items,
    most_frequently_rated_items,
)
from recsys.recommendation.factorization import MatrixFactorization


def parse_args():
    parser = argparse.ArgumentParser(description="Item-item recommendations")
    parser.add_argument("--source", choices=["csv", "db"], default="csv")
    parser.add_argument("--path", help="Ratings CSV path (source=csv)")
    parser.add_argument("--movie-id", type=int, help="Tampilkan tetangga terdekat item ini")
    parser.add_argument("--user-id", type=int, help="Rekomendasi untuk user ini")
    parser.add_argument("--top-n", type=int, default=10)
    parser.add_argument("--factorize", action="store_true", help="Latih matrix factorization juga")
    return parser.parse_args()


def main():
    args = parse_args()

    df = load_ratings_from_db() if args.source == "db" else load_ratings_csv(args.path)
    matrix, mapper = build_rating_matrix(df)
    print(f"Matrix: {matrix.shape[0]} users x {matrix.shape[1]} items")

    print("\nTop 10 Most Frequently Rated:")
    for item, count in most_frequently_rated_items(matrix, 10):
        print(f"  Movie ID: {mapper.get_item_id(item)}, Count: {count}")

    print("\nTop 10 Highest Rated:")
    for item, mean in highest_rated_items(matrix, 10):
        print(f"  Movie ID: {mapper.get_item_id(item)}, Rating: {mean:.2f}")

    recommender = ItemBasedRecommender().fit(matrix)

    if args.movie_id is not None:
        item_index = mapper.get_item_index(args.movie_id)
        if item_index is None:
            print(f"\n❌ Movie {args.movie_id} tidak ditemukan")
        else:
            print(f"\nNeighbors of movie {args.movie_id}:")
            for neighbor, similarity in recommender.similar_items(item_index):
                print(f"  Movie ID: {mapper.get_item_id(neighbor)}, Similarity: {similarity:.4f}")

    if args.user_id is not None:
        user_index = mapper.get_user_index(args.user_id)
        if user_index is None:
            print(f"\n❌ User {args.user_id} tidak ditemukan")
        else:
            print(f"\nRecommendations for user {args.user_id}:")
            for item, score in recommender.recommend_for_user(user_index, top_n=args.top_n):
                print(f"  Movie ID: {mapper.get_item_id(item)}, Score: {score:.4f}")

            if args.factorize:
                model = MatrixFactorization(show_progress=True).fit(matrix)
                print(f"\nMatrix factorization RMSE: {model.rmse:.4f}")
                for item, predicted in model.recommend(matrix, user_index, top_n=args.top_n):
                    print(f"  Movie ID: {mapper.get_item_id(item)}, Predicted: {predicted:.2f}")


if __name__ == "__main__":
    setup_logging()
    main()
