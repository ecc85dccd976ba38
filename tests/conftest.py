import numpy as np
import pytest

from recsys.data import Document


@pytest.fixture
def small_corpus():
    return [
        Document(id="a", content="cat dog"),
        Document(id="b", content="dog bird"),
    ]


@pytest.fixture
def pets_corpus():
    return [
        Document(id="1", content="The quick brown fox jumps over the lazy dog."),
        Document(id="2", content="A lazy cat sleeps all day long."),
        Document(id="3", content="Foxes and dogs are both mammals."),
        Document(id="4", content="Stock markets rallied on strong earnings."),
        Document(id="5", content="The cat chased the fox out of the garden!"),
    ]


@pytest.fixture
def rating_matrix():
    # 3 users x 4 items
    return np.array([
        [4.0, 5.0, 4.0, 1.0],
        [3.0, 5.0, 0.0, 2.0],
        [0.0, 0.0, 3.0, 4.0],
    ])
