import warnings

import numpy as np
import pytest

from colorblend.color.transfer import (
    GAMMA_2_2,
    GAMMA_2_4,
    HLG,
    IDENTITY,
    PQ,
    PQ_C1,
    PQ_M1,
    PQ_M2,
    PRESETS,
    SRGB,
    BT709,
    TransferFunction,
    TransferFunctionKind,
    available_transfer_functions,
    quantize,
)
from colorblend.core.errors import InvalidParameter

SAMPLES = np.arange(256)


@pytest.mark.parametrize("tf", PRESETS, ids=lambda tf: tf.name)
def test_round_trip_within_one_sample(tf):
    out = tf.from_linear(tf.to_linear(SAMPLES)).astype(np.int16)
    assert np.abs(out - SAMPLES).max() <= 1


@pytest.mark.parametrize("tf", PRESETS, ids=lambda tf: tf.name)
def test_decode_is_monotonic(tf):
    linear = tf.to_linear(SAMPLES)
    assert np.all(np.diff(linear) >= 0)
    assert linear[0] == pytest.approx(0.0, abs=1e-9)


def test_scalar_in_scalar_out():
    assert isinstance(SRGB.to_linear(128), float)
    assert isinstance(SRGB.from_linear(0.5), int)
    assert SRGB.to_linear(255) == pytest.approx(1.0)
    assert SRGB.to_linear(0) == 0.0


def test_srgb_mid_grey():
    assert SRGB.from_linear(0.5) == 188
    assert SRGB.to_linear(188) == pytest.approx(0.5029, abs=1e-3)


def test_bt709_endpoints():
    assert BT709.to_linear(255) == pytest.approx(1.0)
    assert BT709.from_linear(1.0) == 255
    assert BT709.from_linear(0.01) == round(0.01 * 4.5 * 255)


def test_pq_decode_follows_curve():
    expected = (1.0 - PQ_C1) ** (1 / PQ_M1)
    assert PQ.to_linear(255) == pytest.approx(expected)
    assert PQ.to_linear(0) == 0.0
    assert PQ.from_linear(0.0) == 0
    mid = ((128 / 255) ** (1 / PQ_M2) - PQ_C1) ** (1 / PQ_M1)
    assert PQ.to_linear(128) == pytest.approx(mid)
    assert PQ.from_linear(mid) == 128


def test_hlg_normalized_range():
    assert HLG.to_linear(255) == pytest.approx(1.0, abs=1e-4)
    assert HLG.from_linear(1.0) == 255
    # Lower branch is a square law
    assert HLG.to_linear(100) == pytest.approx((100 / 255) ** 2 / 3)


def test_gamma_power_law():
    assert GAMMA_2_2.to_linear(128) == pytest.approx((128 / 255) ** 2.2)
    assert GAMMA_2_4.from_linear(0.25) == int(np.floor(0.25 ** (1 / 2.4) * 255 + 0.5))


def test_identity_is_exact():
    assert np.array_equal(IDENTITY.from_linear(IDENTITY.to_linear(SAMPLES)), SAMPLES)


@pytest.mark.parametrize("tf", PRESETS, ids=lambda tf: tf.name)
def test_encode_clamps_out_of_range(tf):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = tf.from_linear(np.array([-1.0, -1e-9, 0.0, 1.0, 1.5, 12.0]))
    assert out[0] == out[1] == out[2] == tf.from_linear(0.0)
    assert out[3] == out[4] == out[5] == 255


def test_hlg_encode_has_no_domain_warnings():
    values = np.linspace(0.0, 1 / 12, 50)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        encoded = HLG.from_linear(values)
    assert not np.any(np.isnan(encoded.astype(float)))


def test_quantize_rounds_half_up_and_clamps():
    out = quantize(np.array([-3.0, 0.5, 1.5, 2.5, 254.6, 300.0]))
    assert out.tolist() == [0, 1, 2, 3, 255, 255]
    assert out.dtype == np.uint8


@pytest.mark.parametrize(
    "name, expected",
    [
        ("srgb", SRGB),
        ("sRGB_IEC_61966_2_1", SRGB),
        ("BT_709", BT709),
        ("PQ", PQ),
        ("hlg", HLG),
        ("Gamma_2_2", GAMMA_2_2),
        ("gamma2.4", GAMMA_2_4),
        ("identity", IDENTITY),
    ],
)
def test_from_name(name, expected):
    assert TransferFunction.from_name(name) == expected


def test_from_name_custom_gamma():
    tf = TransferFunction.from_name("gamma:2.6")
    assert tf.kind == TransferFunctionKind.GAMMA
    assert tf.exponent == pytest.approx(2.6)
    assert tf.name == "gamma2.6"


@pytest.mark.parametrize("name", ["bogus", "", "gamma", "gamma:-1"])
def test_from_name_rejects_unknown(name):
    with pytest.raises(InvalidParameter):
        TransferFunction.from_name(name)


def test_invalid_construction():
    with pytest.raises(InvalidParameter):
        TransferFunction.with_gamma(0)
    with pytest.raises(InvalidParameter):
        TransferFunction.with_gamma(float("nan"))
    with pytest.raises(InvalidParameter):
        TransferFunction(TransferFunctionKind.SRGB, 2.2)
    with pytest.raises(InvalidParameter):
        TransferFunction("srgb")
    with pytest.raises(InvalidParameter):
        TransferFunction.resolve(TransferFunctionKind.GAMMA)
    with pytest.raises(InvalidParameter):
        TransferFunction.resolve(42)


@pytest.mark.parametrize("exponent", ["2.2", None, True, [2.2]])
def test_gamma_exponent_must_be_a_number(exponent):
    with pytest.raises(InvalidParameter):
        TransferFunction.with_gamma(exponent)


def test_available_names():
    names = available_transfer_functions()
    assert names == ["srgb", "bt709", "pq", "hlg", "gamma2.2", "gamma2.4", "gamma2.8", "identity"]
