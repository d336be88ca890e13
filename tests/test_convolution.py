import numpy as np
import pytest

from dungeongen.layout.convolution import HALLWAY_KERNEL, convolve, pad_kernel, room_kernel
from dungeongen.layout.tiles import AnchorMode


def test_top_left_sums_footprint():
    field = np.arange(16, dtype=float).reshape(4, 4)
    out = convolve(field, room_kernel(2, 2), AnchorMode.TOP_LEFT)
    assert out[0, 0] == 0 + 1 + 4 + 5
    assert out[1, 2] == 6 + 7 + 10 + 11


def test_top_left_skips_taps_outside_field():
    field = np.arange(16, dtype=float).reshape(4, 4)
    out = convolve(field, room_kernel(2, 2), AnchorMode.TOP_LEFT)
    assert out[3, 3] == 15
    assert out[2, 3] == 11 + 15


def test_padding_weighs_ring_around_footprint():
    field = np.ones((5, 5))
    out = convolve(field, room_kernel(1, 1), AnchorMode.TOP_LEFT, pad_amount=1, pad_value=1)
    # A 1x1 footprint plus its ring is a 3x3 window anchored on the footprint.
    assert out[2, 2] == 9
    assert out[0, 0] == 4
    assert out[0, 2] == 6


def test_zero_padding_matches_unpadded():
    field = np.random.default_rng(3).integers(0, 5, size=(6, 7)).astype(float)
    plain = convolve(field, room_kernel(2, 3), AnchorMode.TOP_LEFT)
    padded = convolve(field, room_kernel(2, 3), AnchorMode.TOP_LEFT, pad_amount=1, pad_value=0)
    assert np.array_equal(plain, padded)


def test_center_anchor_spreads_delta_as_kernel():
    field = np.zeros((5, 5))
    field[2, 2] = 1
    out = convolve(field, HALLWAY_KERNEL, AnchorMode.CENTER)
    assert np.allclose(out[1:4, 1:4], HALLWAY_KERNEL)
    assert out[0].sum() == 0
    assert out[:, 4].sum() == 0


def test_center_anchor_on_edges():
    field = np.ones((3, 3))
    out = convolve(field, HALLWAY_KERNEL, AnchorMode.CENTER)
    assert out[1, 1] == pytest.approx(2.5)
    assert out[0, 0] == pytest.approx(1 + 2 / 8 + 2 / 8 + 1 / 8)


@pytest.mark.parametrize("kernel", [np.ones((2, 2)), np.ones((3, 1)), np.ones((3, 5))])
def test_center_anchor_rejects_bad_kernels(kernel):
    with pytest.raises(ValueError):
        convolve(np.ones((4, 4)), kernel, AnchorMode.CENTER)


def test_input_kernel_not_mutated_by_padding():
    kernel = [[1, 1], [1, 1]]
    convolve(np.ones((4, 4)), kernel, AnchorMode.TOP_LEFT, pad_amount=2, pad_value=3)
    assert kernel == [[1, 1], [1, 1]]


def test_pad_kernel_shape_and_value():
    padded = pad_kernel(room_kernel(2, 3), 1, 7)
    assert padded.shape == (4, 5)
    assert padded[0, 0] == 7
    assert padded[1, 1] == 1


def test_output_is_new_array():
    field = np.ones((4, 4))
    out = convolve(field, room_kernel(1, 1))
    out[0, 0] = 42
    assert field[0, 0] == 1
