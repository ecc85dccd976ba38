"""
Matrix Factorization - Latent factor model dengan Stochastic Gradient Descent

Rating matrix (users x items) didekati dengan P (users x f) . Q (f x items).
Hanya cell yang dirating (> 0) memberi sinyal gradient.
"""

from typing import List, Optional, Tuple
import logging

import numpy as np
from tqdm import tqdm

from recsys.config import FACTORIZATION_CONFIG
from recsys.data import as_rating_matrix

logger = logging.getLogger(__name__)


def compute_rmse(ratings, predictions, observed_only: bool = False) -> float:
    """
    Root mean squared error antara rating dan prediksi

    Args:
        ratings: Rating matrix (0.0 = belum dirating)
        predictions: Matrix prediksi dengan shape sama
        observed_only: Hanya hitung cell yang dirating

    Returns:
        RMSE (0.0 jika tidak ada cell yang dihitung)
    """
    ratings = np.asarray(ratings, dtype=float)
    predictions = np.asarray(predictions, dtype=float)
    if ratings.shape != predictions.shape:
        raise ValueError(f"Shape mismatch: ratings {ratings.shape} vs predictions {predictions.shape}")

    diff = ratings - predictions
    if observed_only:
        diff = diff[ratings > 0]

    if diff.size == 0:
        return 0.0

    return float(np.sqrt(np.mean(diff ** 2)))


class MatrixFactorization:
    """
    SGD matrix factorization

    State: initialized -> training -> converged. Epoch berjalan sampai
    jumlah tetap (tanpa early stopping). Urutan update dalam satu epoch
    deterministik (row-major atas cell yang dirating).
    """

    INITIALIZED = "initialized"
    TRAINING = "training"
    CONVERGED = "converged"

    def __init__(
        self,
        latent_dim: int = None,
        learning_rate: float = None,
        regularization: float = None,
        epochs: int = None,
        report_every: int = None,
        rmse_on_observed: bool = None,
        random_state: Optional[int] = None,
        show_progress: bool = False
    ):
        """
        Initialize model

        Args:
            latent_dim: Dimensi latent factor f
            learning_rate: Step size SGD
            regularization: Koefisien L2
            epochs: Jumlah epoch
            report_every: Interval epoch untuk pencatatan RMSE
            rmse_on_observed: RMSE hanya atas cell yang dirating
                (default: semua cell, cell kosong dianggap target 0)
            random_state: Seed untuk inisialisasi factor
            show_progress: Tampilkan progress bar tqdm
        """
        cfg = FACTORIZATION_CONFIG
        self.latent_dim = latent_dim if latent_dim is not None else cfg.get("latent_dim", 10)
        self.learning_rate = learning_rate if learning_rate is not None else cfg.get("learning_rate", 0.01)
        self.regularization = regularization if regularization is not None else cfg.get("regularization", 0.1)
        self.epochs = epochs if epochs is not None else cfg.get("epochs", 500)
        self.report_every = report_every if report_every is not None else cfg.get("report_every", 50)
        self.rmse_on_observed = (
            rmse_on_observed if rmse_on_observed is not None else cfg.get("rmse_on_observed", False)
        )
        self.random_state = random_state if random_state is not None else cfg.get("random_state")
        self.show_progress = show_progress

        if self.latent_dim < 1:
            raise ValueError(f"latent_dim must be >= 1, got {self.latent_dim}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.regularization < 0:
            raise ValueError(f"regularization must be >= 0, got {self.regularization}")
        if self.epochs < 0:
            raise ValueError(f"epochs must be >= 0, got {self.epochs}")
        if self.report_every < 1:
            raise ValueError(f"report_every must be >= 1, got {self.report_every}")

        self.state = self.INITIALIZED
        self.user_factors: Optional[np.ndarray] = None
        self.item_factors: Optional[np.ndarray] = None
        self.history: List[Tuple[int, float]] = []
        self.rmse: Optional[float] = None

    def _init_factors(self, n_users: int, n_items: int):
        rng = np.random.default_rng(self.random_state)
        self.user_factors = rng.uniform(0.0, 1.0, size=(n_users, self.latent_dim))
        self.item_factors = rng.uniform(0.0, 1.0, size=(self.latent_dim, n_items))

    def _sgd_epoch(self, ratings: np.ndarray, cells: np.ndarray):
        lr = self.learning_rate
        reg = self.regularization
        P = self.user_factors
        Q = self.item_factors

        for i, j in cells:
            error = ratings[i, j] - P[i] @ Q[:, j]

            # per dimensi k: update user dulu, item memakai nilai user yang baru
            P[i] += lr * (2 * error * Q[:, j] - reg * P[i])
            Q[:, j] += lr * (2 * error * P[i] - reg * Q[:, j])

    def fit(self, matrix) -> 'MatrixFactorization':
        """
        Latih latent factors pada rating matrix

        Args:
            matrix: Rating matrix users x items (0.0 = belum dirating)

        Returns:
            self
        """
        ratings = as_rating_matrix(matrix)

        n_users, n_items = ratings.shape
        self._init_factors(n_users, n_items)
        self.history = []

        cells = np.argwhere(ratings > 0)
        if len(cells) == 0:
            logger.warning(
                "Rating matrix has no rated cells; returning randomly initialized factors"
            )
            self.rmse = compute_rmse(ratings, self.predict(), observed_only=self.rmse_on_observed)
            self.state = self.CONVERGED
            return self

        logger.info(
            f"Training matrix factorization: {n_users} users x {n_items} items, "
            f"{len(cells)} ratings, f={self.latent_dim}, epochs={self.epochs}"
        )

        self.state = self.TRAINING
        epochs = tqdm(range(self.epochs), desc="SGD epochs", disable=not self.show_progress)

        for epoch in epochs:
            self._sgd_epoch(ratings, cells)

            if epoch % self.report_every == 0:
                rmse = compute_rmse(ratings, self.predict(), observed_only=self.rmse_on_observed)
                self.history.append((epoch, rmse))
                logger.info(f"Epoch: {epoch}, RMSE: {rmse:.4f}")

        self.rmse = compute_rmse(ratings, self.predict(), observed_only=self.rmse_on_observed)
        self.state = self.CONVERGED

        logger.info(f"Matrix factorization finished, RMSE: {self.rmse:.4f}")

        return self

    def predict(self) -> np.ndarray:
        """Rekonstruksi dense matrix prediksi P . Q"""
        if self.user_factors is None or self.item_factors is None:
            raise ValueError("Model belum di-fit. Panggil fit() terlebih dahulu.")
        return self.user_factors @ self.item_factors

    reconstruct = predict

    def recommend(self, matrix, user_index: int, top_n: int = 10) -> List[Tuple[int, float]]:
        """
        Item dengan prediksi tertinggi yang belum dirating user

        Args:
            matrix: Rating matrix yang dipakai saat fit
            user_index: Baris user
            top_n: Jumlah hasil

        Returns:
            List of (item index, predicted rating)
        """
        if self.state != self.CONVERGED:
            raise ValueError("Model belum di-fit. Panggil fit() terlebih dahulu.")

        ratings = as_rating_matrix(matrix)
        expected = (self.user_factors.shape[0], self.item_factors.shape[1])
        if ratings.shape != expected:
            raise ValueError(f"Rating matrix shape {ratings.shape} does not match fitted shape {expected}")
        if not 0 <= user_index < self.user_factors.shape[0]:
            raise IndexError(f"User index {user_index} out of range")

        predicted = self.user_factors[user_index] @ self.item_factors
        candidates = np.flatnonzero(ratings[user_index] <= 0)
        order = np.lexsort((candidates, -predicted[candidates]))[:max(top_n, 0)]

        return [(int(candidates[o]), float(predicted[candidates[o]])) for o in order]


def factorize(
    matrix,
    latent_dim: int = None,
    learning_rate: float = None,
    regularization: float = None,
    epochs: int = None,
    random_state: Optional[int] = None,
    rmse_on_observed: bool = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Matrix factorization dengan SGD

    Returns:
        (user_factors users x f, item_factors f x items)
    """
    model = MatrixFactorization(
        latent_dim=latent_dim,
        learning_rate=learning_rate,
        regularization=regularization,
        epochs=epochs,
        random_state=random_state,
        rmse_on_observed=rmse_on_observed,
    ).fit(matrix)

    return model.user_factors, model.item_factors
