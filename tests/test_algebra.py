import numpy as np
import pytest

from ldpc_bp.ldpc import LOG_BP, MIN_SUM, PRODUCT_BP, phi, sgn
from ldpc_bp.ldpc.algebra import exclusive_reduce, ordered_reduce


def test_sgn_treats_zero_as_positive():
    np.testing.assert_array_equal(sgn(np.array([-2.0, 0.0, 3.0, np.nan])), [-1.0, 1.0, 1.0, -1.0])


def test_phi_is_self_inverse():
    x = np.linspace(0.1, 5.0, 25)
    np.testing.assert_allclose(phi(phi(x)), x, rtol=1e-9)


def test_exclusive_reduce_matches_loop():
    rng = np.random.default_rng(7)
    values = rng.normal(size=(4, 5))
    expected = np.array(
        [[np.sum(np.delete(row, t)) for t in range(row.size)] for row in values]
    )
    np.testing.assert_allclose(exclusive_reduce(values, np.add, 0.0), expected)
    expected = np.array(
        [[np.prod(np.delete(row, t)) for t in range(row.size)] for row in values]
    )
    np.testing.assert_allclose(exclusive_reduce(values, np.multiply, 1.0), expected)


def _loop_fold(row, start, skip=None):
    acc = start
    for t, value in enumerate(row):
        if t != skip:
            acc += value
    return acc


def test_folds_add_left_to_right_from_start():
    # 1 + 1e16 rounds back to 1e16, so the order of the additions shows
    values = np.array([[1e16, 5.0, -1e16], [0.5, -1e16, 1e16]])
    start = np.array([1.0, 3.0])

    rows = list(zip(values.tolist(), start.tolist()))

    totals = ordered_reduce(values, np.add, start)
    np.testing.assert_array_equal(totals, [_loop_fold(r, s) for r, s in rows])
    assert totals[1] == 4.0

    others = exclusive_reduce(values, np.add, 0.0, start=start)
    expected = [[_loop_fold(r, s, skip=c) for c in range(len(r))] for r, s in rows]
    np.testing.assert_array_equal(others, expected)
    assert others[0, 1] == 0.0


def test_channel_weights():
    bits = np.array([0, 1, 1, 0])
    np.testing.assert_allclose(PRODUCT_BP.weights(bits, 0.9), [9.0, 1 / 9, 1 / 9, 9.0])
    np.testing.assert_allclose(LOG_BP.weights(bits, 0.9), np.log([9.0, 1 / 9, 1 / 9, 9.0]))
    np.testing.assert_allclose(MIN_SUM.weights(bits, 0.25), np.log([1 / 3, 3.0, 3.0, 1 / 3]))


def test_degree_two_checks_collapse_to_min_sum():
    rng = np.random.default_rng(11)
    R = rng.uniform(0.1, 5.0, size=(6, 2)) * rng.choice([-1.0, 1.0], size=(6, 2))
    mask = np.ones_like(R, dtype=bool)
    log_msgs = LOG_BP.check_update(R, mask)
    min_msgs = MIN_SUM.check_update(R, mask)
    np.testing.assert_array_equal(np.sign(log_msgs), np.sign(min_msgs))
    np.testing.assert_allclose(log_msgs, min_msgs, rtol=1e-9)
    np.testing.assert_allclose(min_msgs, R[:, ::-1])


def test_padded_cells_do_not_contribute():
    R = np.array([[2.0, -1.0, 0.5], [3.0, -4.0, 123.0]])
    mask = np.array([[True, True, True], [True, True, False]])
    msgs = MIN_SUM.check_update(R, mask)
    np.testing.assert_allclose(msgs[0], [-0.5, 0.5, -1.0])
    np.testing.assert_allclose(msgs[1, :2], [-4.0, 3.0])


def test_min_sum_single_neighbour_check_gives_largest_double():
    msgs = MIN_SUM.check_update(np.array([[-1.5]]), np.array([[True]]))
    assert msgs[0, 0] == np.finfo(np.float64).max


def test_log_bp_single_neighbour_check_is_infinite():
    with np.errstate(divide="ignore"):
        msgs = LOG_BP.check_update(np.array([[-1.5]]), np.array([[True]]))
    assert msgs[0, 0] == np.inf


def test_product_check_is_not_clamped():
    R = np.array([[1.0, 9.0]])
    with np.errstate(divide="ignore", invalid="ignore"):
        msgs = PRODUCT_BP.check_update(R, np.ones_like(R, dtype=bool))
    assert msgs[0, 0] == pytest.approx(9.0)
    assert np.isnan(msgs[0, 1])


def test_product_and_log_domains_agree():
    rng = np.random.default_rng(3)
    L = rng.uniform(0.2, 3.0, size=(5, 4)) * rng.choice([-1.0, 1.0], size=(5, 4))
    mask = np.ones_like(L, dtype=bool)
    linear = PRODUCT_BP.check_update(np.exp(L), mask)
    np.testing.assert_allclose(np.log(linear), LOG_BP.check_update(L, mask), rtol=1e-7)


def test_decisions_use_domain_threshold():
    np.testing.assert_array_equal(PRODUCT_BP.decide(np.array([1.0, 0.99, np.nan])), [0, 1, 1])
    np.testing.assert_array_equal(LOG_BP.decide(np.array([0.0, -1e-9, np.nan])), [0, 1, 1])
