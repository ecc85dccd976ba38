"""
Script untuk inisialisasi database dan load data ratings awal dari CSV
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from recsys import setup_logging
from recsys.config import RATINGS_PATH
from recsys.data import load_ratings_csv, matrix_summary, build_rating_matrix
from recsys.database import init_db, get_session, Rating


def setup_database():
    """Initialize database dan load ratings"""
    print("=" * 50)
    print("Setup Database Sistem Rekomendasi")
    print("=" * 50)

    # Initialize tables
    print("\n1. Membuat tabel database...")
    init_db()

    # Load rating data
    print("\n2. Memuat data ratings...")
    session = get_session()

    try:
        # Check if ratings already exist
        existing_count = session.query(Rating).count()

        if existing_count > 0:
            print(f"   ⚠️  Database sudah memiliki {existing_count} ratings")
            response = input("   Apakah ingin reset dan load ulang? (y/n): ")

            if response.lower() == 'y':
                session.query(Rating).delete()
                session.commit()
                print("   ✅ Data ratings lama dihapus")
            else:
                print("   ⏭️  Skip loading, menggunakan data existing")
                return

        if not os.path.exists(RATINGS_PATH):
            print(f"   ❌ File tidak ditemukan: {RATINGS_PATH}")
            return

        df = load_ratings_csv(RATINGS_PATH)
        print(f"   📄 Membaca {len(df)} ratings dari CSV")

        for row in df.itertuples(index=False):
            session.add(Rating(
                user_id=int(row.user_id),
                movie_id=int(row.movie_id),
                rating=float(row.rating),
                timestamp=int(row.timestamp) if hasattr(row, 'timestamp') else None
            ))

        session.commit()
        print(f"   ✅ Berhasil memuat {len(df)} ratings ke database")

        # Show summary
        print("\n3. Ringkasan data:")
        matrix, _ = build_rating_matrix(df)
        summary = matrix_summary(matrix)
        print(f"   • Users: {summary['n_users']}")
        print(f"   • Items: {summary['n_items']}")
        print(f"   • Sparsity: {summary['sparsity']:.4%}")

    except Exception as e:
        print(f"   ❌ Error: {e}")
        session.rollback()
        raise

    finally:
        session.close()

    print("\n" + "=" * 50)
    print("✅ Setup selesai!")
    print("=" * 50)
    print("\nUntuk rekomendasi item:")
    print("  python scripts/recommend_items.py --source db")


if __name__ == "__main__":
    setup_logging()
    setup_database()
