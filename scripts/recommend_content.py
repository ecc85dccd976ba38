"""
Script untuk rekomendasi dokumen berdasarkan teks query
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from recsys import setup_logging
from recsys.data import load_documents
from recsys.recommendation.content_based import ContentBasedRecommender, InvalidInputError


def run_content_recommendation(path: str = None):
    """Tanya query lalu tampilkan dokumen yang paling mirip"""
    documents = load_documents(path)
    recommender = ContentBasedRecommender(documents)

    query = input("Enter content for recommendation: ")

    try:
        recommendations = recommender.recommend(query)
    except InvalidInputError:
        print("No input provided. Exiting...")
        return

    print(f"\nRecommendations for '{query.strip()}':")
    for doc, score in recommendations:
        print(f'  - ID: "{doc.id}", Content: "{doc.content}" (score: {score:.2f})')


if __name__ == "__main__":
    setup_logging()
    run_content_recommendation(sys.argv[1] if len(sys.argv) > 1 else None)
