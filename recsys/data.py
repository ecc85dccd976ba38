"""
Data Module - Loader dokumen dan pembentukan rating matrix

Semua loader mengembalikan struktur in-memory milik caller,
tidak ada dataset global.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Union
import logging

import numpy as np
import pandas as pd
from scipy import sparse

from recsys.config import DOCUMENTS_PATH, RATINGS_PATH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """Dokumen teks untuk content-based filtering"""
    id: str
    content: str


class RatingMatrixMapper:
    """
    Mapping antara ID eksternal (user/item) dan index matrix 0-based
    """

    def __init__(self, user_ids: List, item_ids: List):
        self.user_ids = list(user_ids)
        self.item_ids = list(item_ids)
        self._user_to_idx = {user: idx for idx, user in enumerate(self.user_ids)}
        self._item_to_idx = {item: idx for idx, item in enumerate(self.item_ids)}

    @property
    def n_users(self) -> int:
        return len(self.user_ids)

    @property
    def n_items(self) -> int:
        return len(self.item_ids)

    def get_user_index(self, user_id):
        return self._user_to_idx.get(user_id)

    def get_item_index(self, item_id):
        return self._item_to_idx.get(item_id)

    def get_user_id(self, index: int):
        if 0 <= index < len(self.user_ids):
            return self.user_ids[index]
        return None

    def get_item_id(self, index: int):
        if 0 <= index < len(self.item_ids):
            return self.item_ids[index]
        return None


def load_documents(path: Union[str, Path] = None) -> List[Document]:
    """
    Load dokumen dari file JSON (array of {"id", "content"})

    Args:
        path: Path file JSON (default: DOCUMENTS_PATH)

    Returns:
        List of Document
    """
    path = Path(path or DOCUMENTS_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Documents file not found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON array of documents in {path}")

    documents = []
    for i, record in enumerate(records):
        try:
            documents.append(Document(id=str(record["id"]), content=str(record["content"])))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid document record at position {i}: {record!r}") from e

    logger.info(f"Loaded {len(documents)} documents from {path}")

    return documents


def load_ratings_csv(path: Union[str, Path] = None) -> pd.DataFrame:
    """
    Load ratings dari CSV

    Returns:
        pd.DataFrame: Dataset berisi user, item, dan rating.
    """
    path = Path(path or RATINGS_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Ratings file not found at {path}")

    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} ratings from {path}")

    return df


def build_rating_matrix(
    df_ratings: pd.DataFrame,
    user_col: str = "user_id",
    item_col: str = "movie_id",
    rating_col: str = "rating"
) -> Tuple[np.ndarray, RatingMatrixMapper]:
    """
    Buat dense User-Item rating matrix dari DataFrame ratings.

    ID user/item eksternal dipetakan ke index 0-based (urutan ID terurut).
    Rating kosong (NaN) menjadi 0.0, yaitu "belum dirating".
    Baris duplikat (user, item) memakai rating terakhir.

    Returns:
        (matrix users x items, mapper)
    """
    missing = [c for c in (user_col, item_col, rating_col) if c not in df_ratings.columns]
    if missing:
        raise ValueError(f"Ratings data is missing columns: {missing}")

    df = df_ratings[[user_col, item_col, rating_col]].drop_duplicates(
        subset=[user_col, item_col], keep="last"
    )

    users = sorted(df[user_col].unique().tolist())
    items = sorted(df[item_col].unique().tolist())
    mapper = RatingMatrixMapper(users, items)

    matrix = np.zeros((len(users), len(items)), dtype=float)
    if len(df):
        rows = df[user_col].map(mapper.get_user_index).to_numpy()
        cols = df[item_col].map(mapper.get_item_index).to_numpy()
        values = df[rating_col].fillna(0.0).to_numpy(dtype=float)
        matrix[rows, cols] = values

    # Calculate sparsity
    n_rated = int(np.count_nonzero(matrix > 0))
    sparsity = 1 - n_rated / matrix.size if matrix.size else 1.0
    logger.info(
        f"Rating matrix: {matrix.shape[0]} users x {matrix.shape[1]} items, "
        f"{n_rated} rated cells, sparsity {sparsity:.4%}"
    )

    return matrix, mapper


def matrix_summary(matrix: np.ndarray) -> Dict:
    """Ringkasan ukuran dan sparsity rating matrix"""
    matrix = np.asarray(matrix, dtype=float)
    n_rated = int(np.count_nonzero(matrix > 0))
    return {
        "n_users": int(matrix.shape[0]),
        "n_items": int(matrix.shape[1]),
        "n_ratings": n_rated,
        "sparsity": 1 - n_rated / matrix.size if matrix.size else 1.0,
    }


def as_rating_matrix(matrix) -> np.ndarray:
    """
    Terima numpy array, nested list, atau scipy sparse matrix

    NaN dianggap "belum dirating" dan menjadi 0.0.
    """
    if sparse.issparse(matrix):
        matrix = matrix.toarray()
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"Rating matrix must be 2-dimensional, got shape {matrix.shape}")
    return np.where(np.isnan(matrix), 0.0, matrix)
