"""
Konfigurasi Aplikasi Sistem Rekomendasi
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base Directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Data Files
DATA_DIR = Path(os.getenv("RECSYS_DATA_DIR", BASE_DIR / "data"))
DOCUMENTS_PATH = DATA_DIR / "documents.json"
RATINGS_PATH = DATA_DIR / "ratings.csv"

# Database Configuration
# Untuk local: gunakan SQLite
# Untuk production: gunakan PostgreSQL dari environment variable
DATABASE_URL = os.getenv("DATABASE_URL")

if DATABASE_URL:
    # Railway/Heroku format: postgres:// -> postgresql://
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)
else:
    DATABASE_PATH = DATA_DIR / "ratings.db"
    DATABASE_URL = f"sqlite:///{DATABASE_PATH}"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if not value:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# NLP Configuration
NLP_CONFIG = {
    "top_keywords": 10,
}

# Recommendation Configuration
RECOMMENDATION_CONFIG = {
    "top_n_recommendations": _env_int("RECSYS_TOP_N", 15),
    "k_neighbors": _env_int("RECSYS_K_NEIGHBORS", 10),
    "exclude_rated": _env_bool("RECSYS_EXCLUDE_RATED", False),
}

# Item-item similarity: jumlah worker thread pool, None = default executor
SIMILARITY_CONFIG = {
    "max_workers": _env_int("RECSYS_MAX_WORKERS", 0) or None,
    "method": os.getenv("RECSYS_SIMILARITY_METHOD", "pairwise"),
}

# Matrix Factorization (SGD)
FACTORIZATION_CONFIG = {
    "latent_dim": _env_int("RECSYS_LATENT_DIM", 10),
    "learning_rate": _env_float("RECSYS_LEARNING_RATE", 0.01),
    "regularization": _env_float("RECSYS_REGULARIZATION", 0.1),
    "epochs": _env_int("RECSYS_EPOCHS", 500),
    "report_every": 50,
    "rmse_on_observed": _env_bool("RECSYS_RMSE_ON_OBSERVED", False),
    "random_state": None,
}

# Logging Configuration
LOGGING_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO"),
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
