import numpy as np
import pytest

from ldpc_bp.ldpc import ParityCheckGraph, encode_systematic, generator_matrix


H_SMALL = np.array(
    [
        [1, 1, 1, 0, 0, 1, 0, 0],
        [1, 0, 0, 1, 1, 1, 0, 1],
        [1, 0, 1, 1, 1, 0, 1, 0],
        [0, 1, 0, 0, 1, 0, 1, 1],
    ],
    dtype=np.uint8,
)


def test_codewords_satisfy_parity_checks():
    rng = np.random.default_rng(0)
    graph = ParityCheckGraph.from_dense(H_SMALL)
    for _ in range(10):
        message = rng.integers(0, 2, size=graph.k, dtype=np.uint8)
        codeword = encode_systematic(message, graph)
        assert codeword.size == graph.n
        assert not ((H_SMALL.astype(int) @ codeword) % 2).any()
        np.testing.assert_array_equal(codeword[: graph.k], message)


def test_generator_matrix_rows_are_codewords():
    G = generator_matrix(H_SMALL)
    assert G.shape == (4, 8)
    np.testing.assert_array_equal(G[:, :4], np.eye(4, dtype=np.uint8))
    assert not ((H_SMALL.astype(int) @ G.T.astype(int)) % 2).any()

    message = np.array([1, 0, 1, 1], dtype=np.uint8)
    expected = (message @ G.astype(int)) % 2
    np.testing.assert_array_equal(expected, encode_systematic(message, H_SMALL))


def test_singular_parity_part_rejected():
    H = np.array([[1, 1, 1, 0], [0, 1, 1, 0]], dtype=np.uint8)
    with pytest.raises(ValueError):
        encode_systematic(np.array([1, 0]), H)


def test_message_length_checked():
    with pytest.raises(ValueError):
        encode_systematic(np.zeros(3, dtype=np.uint8), H_SMALL)
