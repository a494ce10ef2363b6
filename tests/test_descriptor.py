import numpy as np
import pytest

from homography_playground.descriptor import TransformDescriptor, TransformKind
from homography_playground.errors import VariantMismatchError


def test_default_is_identity():
    d = TransformDescriptor()
    assert d.kind is TransformKind.IDENTITY
    assert d.params == {}
    assert d.enabled
    np.testing.assert_array_equal(d.to_matrix(), np.eye(3))


def test_variant_matrices():
    np.testing.assert_allclose(
        TransformDescriptor.translate(5.0, -2.0).to_matrix(),
        [[1, 0, 5], [0, 1, -2], [0, 0, 1]],
    )
    np.testing.assert_allclose(
        TransformDescriptor.scale(2.0, 3.0).to_matrix(),
        [[2, 0, 0], [0, 3, 0], [0, 0, 1]],
    )
    c, s = np.cos(np.pi / 6), np.sin(np.pi / 6)
    np.testing.assert_allclose(
        TransformDescriptor.rotate(30.0).to_matrix(),
        [[c, -s, 0], [s, c, 0], [0, 0, 1]],
    )


def test_switching_kind_resets_parameters():
    d = TransformDescriptor.translate(10.0, 20.0)

    d.switch_kind(TransformKind.SCALE)
    assert d.params == {"sx": 1.0, "sy": 1.0}

    d.switch_kind(TransformKind.ROTATE)
    assert d.angle_degrees == 0.0

    d.switch_kind(TransformKind.TRANSLATE)
    assert (d.tx, d.ty) == (0.0, 0.0)

    d.switch_kind(TransformKind.IDENTITY)
    assert d.params == {}


def test_setters_update_active_variant():
    d = TransformDescriptor.rotate(0.0)
    d.set_angle(45)
    assert d.angle_degrees == 45.0

    d = TransformDescriptor.scale(1.0, 1.0)
    d.set_scale(0.5, 2)
    assert (d.sx, d.sy) == (0.5, 2.0)


def test_setter_on_wrong_variant_raises():
    d = TransformDescriptor.identity()
    with pytest.raises(VariantMismatchError):
        d.set_angle(10.0)
    with pytest.raises(TypeError):
        TransformDescriptor.rotate(5.0).set_translation(1.0, 1.0)


def test_unknown_parameter_raises():
    with pytest.raises(VariantMismatchError):
        TransformDescriptor(TransformKind.SCALE, angle_degrees=3.0)


def test_inactive_parameter_is_not_an_attribute():
    with pytest.raises(AttributeError):
        TransformDescriptor.rotate(10.0).tx


def test_equality_and_copy():
    a = TransformDescriptor.scale(2.0, 2.0)
    b = a.copy()
    assert a == b
    b.set_scale(3.0, 3.0)
    assert a != b
    assert a.sx == 2.0


def test_repr():
    assert repr(TransformDescriptor.translate(1.5, 2.0)) == "Translate(tx=1.5, ty=2)"
    assert repr(TransformDescriptor(TransformKind.IDENTITY, enabled=False)) == "Identity(disabled)"


def test_kind_labels():
    assert [k.label for k in TransformKind] == ["I", "Rot", "Scale", "Trans"]
