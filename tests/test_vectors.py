"""Tests for vector literal helpers."""

import pytest

from milestone_search.core.vectors import (
    cosine_similarity,
    embedding_to_vector,
    vector_to_embedding,
)


class TestVectorLiteral:
    def test_format(self):
        assert embedding_to_vector([0.1, -2.5, 3.0]) == "[0.1,-2.5,3.0]"

    def test_ints_serialized_as_floats(self):
        assert embedding_to_vector([1, 2]) == "[1.0,2.0]"

    def test_empty(self):
        assert embedding_to_vector([]) == "[]"
        assert vector_to_embedding("[]") == []

    def test_parse_tolerates_spaces(self):
        assert vector_to_embedding("[1, 2.5 , -3]") == [1.0, 2.5, -3.0]

    def test_preserves_values(self):
        embedding = [0.1 + 0.2, 1e-7, -123.456789, 0.0]
        assert vector_to_embedding(embedding_to_vector(embedding)) == embedding

    def test_malformed_literal(self):
        with pytest.raises(ValueError):
            vector_to_embedding("[1,abc]")

    @pytest.mark.parametrize("literal", ["12", "(1.0,2.0)", "[1.0,2.0", "1.0]", ""])
    def test_requires_brackets(self, literal: str):
        with pytest.raises(ValueError, match="Not a vector literal"):
            vector_to_embedding(literal)


class TestCosineSimilarity:
    def test_parallel(self):
        assert cosine_similarity([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)

    def test_opposite(self):
        assert cosine_similarity([1, 1], [-1, -1]) == pytest.approx(-1.0)

    def test_zero_vector(self):
        assert cosine_similarity([0, 0], [1, 1]) == 0.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity([1, 2], [1, 2, 3])
