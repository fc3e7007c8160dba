import unittest
import numpy as np
from polyaffine import (
    Basis2,
    Basis3,
    Decomposed,
    Decomposed2,
    Decomposed3,
    NotInvertibleError,
    Quaternion,
    Ray,
)

ROT_Z_90 = Basis3.from_axis_angle([0, 0, 1], 90, degrees=True)


class TestDecomposedCreation(unittest.TestCase):
    def test_identity(self):
        t = Decomposed3.identity()
        self.assertEqual(t.scale, 1.0)
        self.assertIsInstance(t.rot, Basis3)
        np.testing.assert_array_equal(t.rot.mat, np.eye(3))
        np.testing.assert_array_equal(t.disp, [0, 0, 0])

    def test_identity_with_rotation_type(self):
        t = Decomposed3.identity(rotation_type=Quaternion)
        self.assertIsInstance(t.rot, Quaternion)
        t2 = Decomposed2.identity()
        self.assertIsInstance(t2.rot, Basis2)
        np.testing.assert_array_equal(t2.disp, [0, 0])

    def test_defaults(self):
        t = Decomposed3()
        self.assertEqual(t, Decomposed3.identity())

    def test_generic_needs_rotation_type(self):
        with self.assertRaises(TypeError):
            Decomposed.identity()
        t = Decomposed.identity(rotation_type=Quaternion)
        self.assertEqual(t.dimension, 3)
        t = Decomposed(2.0, Basis2(), [1, 2])
        self.assertEqual(t.dimension, 2)

    def test_rotation_dimension_checked(self):
        with self.assertRaises(TypeError):
            Decomposed3(1.0, Basis2())
        with self.assertRaises(TypeError):
            Decomposed2.identity(rotation_type=Basis3)
        with self.assertRaises(ValueError):
            Decomposed3(1.0, Basis3(), [1, 2])

    def test_from_helpers(self):
        t = Decomposed3.from_translation([1, 2, 3])
        np.testing.assert_array_equal(t.transform_point([0, 0, 0]), [1, 2, 3])
        s = Decomposed3.from_scale(3)
        np.testing.assert_array_equal(s.transform_point([1, 1, 1]), [3, 3, 3])
        r = Decomposed3.from_rotation(ROT_Z_90)
        np.testing.assert_allclose(r.transform_point([1, 0, 0]), [0, 1, 0], atol=1e-12)


class TestDecomposedTransforms(unittest.TestCase):
    def setUp(self):
        self.t = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])

    def test_transform_point(self):
        # scale, rotate, then displace
        np.testing.assert_allclose(self.t.transform_point([1, 0, 0]), [1, 2, 0], atol=1e-12)

    def test_transform_vector_ignores_displacement(self):
        np.testing.assert_allclose(self.t.transform_vector([1, 0, 0]), [0, 2, 0], atol=1e-12)

    def test_point_minus_vector_is_displacement(self):
        for v in ([1, 0, 0], [0.5, -3, 2], [0, 0, 0]):
            diff = self.t.transform_point(v) - self.t.transform_vector(v)
            np.testing.assert_allclose(diff, self.t.disp, atol=1e-12)

    def test_transform_as_point(self):
        np.testing.assert_allclose(
            self.t.transform_as_point([3, 4, 5]),
            self.t.transform_point([3, 4, 5]),
        )

    def test_transform_ray(self):
        ray = Ray([0, 0, 0], [1, 0, 0])
        out = self.t.transform_ray(ray)
        self.assertIsInstance(out, Ray)
        np.testing.assert_allclose(out.origin, [1, 0, 0], atol=1e-12)
        # direction keeps the scale
        np.testing.assert_allclose(out.direction, [0, 2, 0], atol=1e-12)

    def test_2d(self):
        t = Decomposed2(2.0, Basis2.from_angle(np.pi / 2), [1, 0])
        np.testing.assert_allclose(t.transform_point([1, 0]), [1, 2], atol=1e-12)
        np.testing.assert_allclose(t.transform_vector([1, 0]), [0, 2], atol=1e-12)

    def test_quaternion_rotation(self):
        t = Decomposed3(2.0, Quaternion.from_axis_angle([0, 0, 1], np.pi / 2), [1, 0, 0])
        np.testing.assert_allclose(t.transform_point([1, 0, 0]), [1, 2, 0], atol=1e-12)


class TestDecomposedConcat(unittest.TestCase):
    def test_concat_applies_self_first(self):
        a = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        b = Decomposed3(0.5, Basis3.from_euler_angles(30, 0, 10), [0, -3, 4])
        p = np.array([0.2, -1.0, 3.0])
        np.testing.assert_allclose(
            a.concat(b).transform_point(p),
            b.transform_point(a.transform_point(p)),
            atol=1e-12,
        )

    def test_concat_fields(self):
        a = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        b = Decomposed3.from_translation([0, 0, 5])
        c = a.concat(b)
        self.assertEqual(c.scale, 2.0)
        self.assertTrue(c.rot.approx_eq(ROT_Z_90))
        np.testing.assert_allclose(c.disp, [1, 0, 5], atol=1e-12)

    def test_concat_rejects_other_types(self):
        with self.assertRaises(TypeError):
            Decomposed3.identity().concat(Decomposed2.identity())

    def test_concat_self(self):
        a = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        b = Decomposed3.from_translation([0, 0, 5])
        expected = a.concat(b)
        out = a.concat_self(b)
        self.assertIs(out, a)
        self.assertTrue(a.approx_eq(expected))


class TestDecomposedInvert(unittest.TestCase):
    def test_invert_fields(self):
        t = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        inv = t.invert()
        self.assertEqual(inv.scale, 0.5)
        self.assertTrue(inv.rot.approx_eq(ROT_Z_90.invert()))
        # -(R^-1 disp) / scale
        np.testing.assert_allclose(inv.disp, [0, 0.5, 0], atol=1e-12)

    def test_invert_round_trip(self):
        t = Decomposed3(3.0, Quaternion.from_euler_angles(10, 50, -80), [4, -2, 7])
        inv = t.invert()
        p = np.array([1.5, 2.5, -3.5])
        np.testing.assert_allclose(inv.transform_point(t.transform_point(p)), p, atol=1e-9)
        np.testing.assert_allclose(t.concat(inv).transform_point(p), p, atol=1e-9)
        np.testing.assert_allclose(t.concat(inv).transform_vector(p), p, atol=1e-9)

    def test_zero_scale_is_not_invertible(self):
        t = Decomposed3(0.0, ROT_Z_90, [1, 2, 3])
        self.assertIsNone(t.invert())
        self.assertIsNone(Decomposed2(1e-9, Basis2(), [1, 1]).invert())

    def test_epsilon(self):
        t = Decomposed3(1e-3, Basis3(), [0, 0, 0])
        self.assertIsNotNone(t.invert())
        self.assertIsNone(t.invert(epsilon=1e-2))

    def test_invert_self(self):
        t = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        expected = t.invert()
        self.assertIs(t.invert_self(), t)
        self.assertTrue(t.approx_eq(expected))

    def test_invert_self_raises_and_keeps_value(self):
        t = Decomposed3(0.0, ROT_Z_90, [1, 2, 3])
        with self.assertRaises(NotInvertibleError):
            t.invert_self()
        self.assertEqual(t.scale, 0.0)
        np.testing.assert_array_equal(t.disp, [1, 2, 3])


class TestDecomposedLookAt(unittest.TestCase):
    def test_eye_maps_to_origin(self):
        for rotation_type in (Basis3, Quaternion):
            t = Decomposed3.look_at([0, 0, 5], [0, 0, 0], [0, 1, 0], rotation_type=rotation_type)
            self.assertEqual(t.scale, 1.0)
            np.testing.assert_allclose(t.transform_point([0, 0, 5]), [0, 0, 0], atol=1e-9)
            # the target lies straight ahead on +z
            np.testing.assert_allclose(t.transform_point([0, 0, 0]), [0, 0, 5], atol=1e-9)

    def test_general_position(self):
        eye = np.array([3.0, -2.0, 1.0])
        center = np.array([-1.0, 4.0, 2.0])
        t = Decomposed3.look_at(eye, center, [0, 0, 1])
        np.testing.assert_allclose(t.transform_point(eye), [0, 0, 0], atol=1e-9)
        ahead = t.transform_point(center)
        np.testing.assert_allclose(ahead, [0, 0, np.linalg.norm(center - eye)], atol=1e-9)

    def test_2d_target_lands_ahead(self):
        center = np.array([1.0, -1.0])
        for eye in ([1, 4], [6, -1], [-2, -5], [1, -3]):
            with self.subTest(eye=eye):
                t = Decomposed2.look_at(eye, center, [0, 1])
                np.testing.assert_allclose(t.transform_point(eye), [0, 0], atol=1e-9)
                np.testing.assert_allclose(
                    t.transform_point(center), [0, np.linalg.norm(center - eye)], atol=1e-9)

    def test_eye_at_center(self):
        with self.assertRaises(ValueError):
            Decomposed2.look_at([1, 1], [1, 1], [0, 1])
        with self.assertRaises(ValueError):
            Decomposed3.look_at([1, 2, 3], [1, 2, 3], [0, 1, 0])


class TestDecomposedConversion(unittest.TestCase):
    def test_to_matrix4(self):
        t = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        expected = np.array([
            [0, -2, 0, 1],
            [2, 0, 0, 0],
            [0, 0, 2, 0],
            [0, 0, 0, 1],
        ], dtype=float)
        np.testing.assert_allclose(t.to_matrix4(), expected, atol=1e-12)

    def test_to_matrix3(self):
        t = Decomposed2(2.0, Basis2.from_angle(np.pi / 2), [1, 0])
        expected = np.array([
            [0, -2, 1],
            [2, 0, 0],
            [0, 0, 1],
        ], dtype=float)
        np.testing.assert_allclose(t.to_matrix3(), expected, atol=1e-12)

    def test_to_affine_matrix(self):
        t = Decomposed3(2.0, ROT_Z_90, [1, 0, 0])
        m = t.to_affine_matrix()
        p = np.array([1.0, 0.0, 0.0])
        np.testing.assert_allclose(m.transform_point(p), t.transform_point(p), atol=1e-12)
        np.testing.assert_allclose(m.transform_point(p), [1, 2, 0], atol=1e-12)

    def test_decompose(self):
        t = Decomposed3(2.0, ROT_Z_90, [1, 2, 3])
        scale, rot, disp = t.decompose()
        np.testing.assert_array_equal(scale, [2, 2, 2])
        self.assertEqual(rot, t.rot)
        self.assertIsNot(rot, t.rot)
        np.testing.assert_array_equal(disp, [1, 2, 3])
        disp[0] = 100.0
        self.assertEqual(t.disp[0], 1.0)

    def test_decompose_2d(self):
        scale, rot, disp = Decomposed2(0.5, Basis2(), [1, 2]).decompose()
        np.testing.assert_array_equal(scale, [0.5, 0.5])
        self.assertIsInstance(rot, Basis2)

    def test_to_tuple(self):
        scale, rot, disp = Decomposed3(2.0, ROT_Z_90, [1, 2, 3]).to_tuple()
        self.assertEqual(scale, 2.0)
        self.assertEqual(rot, ROT_Z_90)
        np.testing.assert_array_equal(disp, [1, 2, 3])


if __name__ == "__main__":
    unittest.main()
