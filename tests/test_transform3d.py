# tests/test_transform3d.py

import unittest
import math
import numpy as np
from gee import Angle, Point, Quad, Rect, Size, Transform, Transform3d, Vector

SQRT_HALF = math.sqrt(0.5)


class TestCreation(unittest.TestCase):
    def test_identity(self):
        t = Transform3d.identity()
        np.testing.assert_array_equal(t.matrix, np.eye(4))
        self.assertTrue(t.is_identity())
        self.assertEqual(Transform3d(), t)

    def test_from_scale(self):
        t = Transform3d.from_scale(2, 3, 4)
        np.testing.assert_array_equal(t.matrix, np.diag([2.0, 3.0, 4.0, 1.0]))

    def test_from_translation(self):
        t = Transform3d.from_translation(7, 8, 9)
        expected = np.eye(4)
        expected[3, :3] = [7, 8, 9]
        np.testing.assert_array_equal(t.matrix, expected)
        self.assertEqual((t.m41, t.m42, t.m43, t.m44), (7.0, 8.0, 9.0, 1.0))

    def test_row_major_and_from_rows(self):
        values = [float(i) for i in range(16)]
        a = Transform3d.row_major(*values)
        b = Transform3d.from_rows(np.arange(16).reshape(4, 4).tolist())
        self.assertEqual(a, b)
        self.assertEqual(a.to_list(), values)
        self.assertEqual(a.m23, 6.0)

    def test_invalid_shape_raises(self):
        with self.assertRaises(ValueError):
            Transform3d.from_rows([[1, 0], [0, 1]])

    def test_fields_are_properties(self):
        t = Transform3d.from_rows(np.arange(16).reshape(4, 4))
        for r in range(4):
            for c in range(4):
                name = f"m{r + 1}{c + 1}"
                self.assertIsInstance(getattr(Transform3d, name), property)
                self.assertEqual(getattr(t, name), float(4 * r + c))

    def test_unknown_attribute_raises(self):
        with self.assertRaises(AttributeError):
            Transform3d.identity().m55

    def test_from_transform(self):
        t2 = Transform.row_major(1, 2, 3, 4, 5, 6)
        t = Transform3d.from_transform(t2)
        expected = np.array([
            [1, 2, 0, 0],
            [3, 4, 0, 0],
            [0, 0, 1, 0],
            [5, 6, 0, 1],
        ], dtype=float)
        np.testing.assert_array_equal(t.matrix, expected)


class TestProjection(unittest.TestCase):
    def test_ortho_maps_box_to_ndc(self):
        t = Transform3d.ortho(0, 4, 0, 2, -1, 1)
        np.testing.assert_allclose(t.transform_point(Point(0, 0)).to_tuple(), (-1, -1))
        np.testing.assert_allclose(t.transform_point(Point(4, 2)).to_tuple(), (1, 1))
        np.testing.assert_allclose(t.transform_point(Point(2, 1)).to_tuple(), (0, 0))
        # near -> -1, far -> +1 along z
        self.assertAlmostEqual(t.m33, -1.0)
        self.assertAlmostEqual(t.m43, 0.0)

    def test_ortho_from_rect_puts_top_up(self):
        rect = Rect(Point(0, 0), Size(800, 600))
        t = Transform3d.ortho_from_rect(rect)
        np.testing.assert_allclose(t.transform_point(rect.top_left()).to_tuple(), (-1, 1))
        np.testing.assert_allclose(t.transform_point(rect.bottom_right()).to_tuple(), (1, -1))
        np.testing.assert_allclose(t.transform_point(rect.top_right()).to_tuple(), (1, 1))

    def test_ortho_agrees_with_2d_ortho(self):
        lifted = Transform3d.from_transform(Transform.ortho(-3, 5, -2, 7))
        full = Transform3d.ortho(-3, 5, -2, 7, 0.1, 10)
        for p in (Point(-3, -2), Point(5, 7), Point(1.5, 0.25)):
            np.testing.assert_allclose(
                lifted.transform_point(p).to_tuple(),
                full.transform_point(p).to_tuple(),
                atol=1e-12,
            )

    def test_persp_layout(self):
        near, far = 0.1, 100.0
        t = Transform3d.persp(Size(16, 9), Angle.from_degrees(90), near, far)
        depth = near - far
        expected = np.array([
            [9 / 16, 0, 0, 0],
            [0, 1, 0, 0],
            [0, 0, far / depth, -1],
            [0, 0, near * far / depth, 0],
        ])
        np.testing.assert_allclose(t.matrix, expected, atol=1e-12)

    def test_persp_focal_length(self):
        t = Transform3d.persp(Size.square(1), Angle.from_degrees(60), 1, 10)
        f = 1 / math.tan(math.radians(30))
        self.assertAlmostEqual(t.m11, f)
        self.assertAlmostEqual(t.m22, f)


class TestComposition(unittest.TestCase):
    def test_post_mul_is_matrix_product(self):
        a = Transform3d.from_rows(np.arange(16).reshape(4, 4) * 0.5)
        b = Transform3d.persp(Size(4, 3), Angle.from_degrees(70), 0.5, 50)
        np.testing.assert_allclose(a.post_mul(b).matrix, a.matrix @ b.matrix)
        np.testing.assert_allclose((a @ b).matrix, a.matrix @ b.matrix)

    def test_pre_mul_is_swapped_post_mul(self):
        a = Transform3d.from_translation(1, 2, 3)
        b = Transform3d.from_scale(2, 2, 2)
        self.assertEqual(a.pre_mul(b), b.post_mul(a))

    def test_post_applies_other_second(self):
        t = Transform3d.from_translation(1, 2, 3).post_mul(Transform3d.from_scale(2, 2, 2))
        self.assertEqual(t.transform_point(Point.zero()), Point(2.0, 4.0))
        t = Transform3d.from_translation(1, 2, 3).pre_mul(Transform3d.from_scale(2, 2, 2))
        self.assertEqual(t.transform_point(Point.zero()), Point(1.0, 2.0))

    def test_wrappers(self):
        t = Transform3d.from_scale(2, 2, 2)
        self.assertEqual(t.post_translate(1, 1, 1), t.post_mul(Transform3d.from_translation(1, 1, 1)))
        self.assertEqual(t.pre_translate(1, 1, 1), Transform3d.from_translation(1, 1, 1).post_mul(t))
        self.assertEqual(t.post_scale(1, 2, 3), t.post_mul(Transform3d.from_scale(1, 2, 3)))
        self.assertEqual(t.pre_scale(1, 2, 3), Transform3d.from_scale(1, 2, 3).post_mul(t))

    def test_identity_is_neutral(self):
        t = Transform3d.persp(Size(4, 3), Angle.from_degrees(70), 0.5, 50)
        self.assertTrue(t.post_mul(Transform3d.identity()).approx_eq(t))
        self.assertTrue(Transform3d.identity().post_mul(t).approx_eq(t))

    def test_lift_commutes_with_composition(self):
        a = Transform.from_rotation(Angle.from_degrees(25), Point(1, 2))
        b = Transform.from_scale(2, -1).post_translate(3, 0)
        lifted = Transform3d.from_transform(a).post_mul(Transform3d.from_transform(b))
        self.assertTrue(lifted.approx_eq(Transform3d.from_transform(a.post_mul(b)), 1e-12))


class TestApplication(unittest.TestCase):
    def test_transforming_some_vectors(self):
        self.assertEqual(Transform3d.identity().transform_vector(Vector.zero()), Vector(0.0, 0.0))
        self.assertEqual(
            Transform3d.identity().transform_vector(Vector(42.0, -12.0)),
            Vector(42.0, -12.0),
        )
        self.assertEqual(
            Transform3d.from_transform(Transform.from_translation(1, 2)).transform_vector(Vector.zero()),
            Vector(1.0, 2.0),
        )
        self.assertEqual(
            Transform3d.from_transform(Transform.from_scale(1, 2)).transform_vector(Vector(3, 4)),
            Vector(3.0, 8.0),
        )
        rotated = Transform3d.from_transform(
            Transform.from_rotation(Angle.from_degrees(90), Point.zero())
        ).transform_vector(Vector(1, 1))
        np.testing.assert_allclose(rotated.to_tuple(), (1.0, -1.0), atol=1e-12)

    def test_lifted_point_matches_2d(self):
        t2 = Transform.from_skew(Angle.from_degrees(12)).post_rotate(Angle.from_degrees(40)).post_translate(-3, 8)
        t3 = Transform3d.from_transform(t2)
        for p in (Point(0, 0), Point(1, -2), Point(10, 3.5)):
            np.testing.assert_allclose(
                t3.transform_point(p).to_tuple(),
                t2.transform_point(p).to_tuple(),
                atol=1e-12,
            )

    def test_no_perspective_divide(self):
        # w would be 2 here, but the result is simply truncated
        t = Transform3d.row_major(
            1, 0, 0, 1,
            0, 1, 0, 0,
            0, 0, 1, 0,
            0, 0, 0, 1,
        )
        self.assertEqual(t.transform_point(Point(1, 5)), Point(1.0, 5.0))

    def test_transform_rect_keeps_corners(self):
        square = Rect(Point(0, 0), Size(1, 1))
        t = Transform3d.from_transform(Transform.from_rotation_about_origin(Angle.from_degrees(45)))
        quad = t.transform_rect(square)
        self.assertIsInstance(quad, Quad)
        expected = [
            (0.0, 0.0),
            (SQRT_HALF, -SQRT_HALF),
            (2 * SQRT_HALF, 0.0),
            (SQRT_HALF, SQRT_HALF),
        ]
        for p, e in zip(quad.points(), expected):
            np.testing.assert_allclose(p.to_tuple(), e, atol=1e-12)
        # no area inflation, unlike the 2D bounding rect
        self.assertAlmostEqual(quad.area(), square.area())
        bounding = Transform.from_rotation_about_origin(Angle.from_degrees(45)).transform_rect(square)
        self.assertGreater(bounding.area(), quad.area() + 0.5)

    def test_batch_matches_single(self):
        t = Transform3d.ortho(0, 4, 0, 2, -1, 1)
        pts = np.array([[0.0, 0.0], [4.0, 2.0], [1.0, -1.0]])
        out = t.transform_points(pts)
        for row, p in zip(out, pts):
            np.testing.assert_allclose(row, t.transform_point(Point(*p)).to_tuple())


class TestInverse(unittest.TestCase):
    def test_determinant(self):
        self.assertAlmostEqual(Transform3d.from_scale(2, 3, 4).determinant(), 24.0)
        self.assertAlmostEqual(Transform3d.from_translation(5, 6, 7).determinant(), 1.0)

    def test_inverse_round_trip(self):
        for t in (
            Transform3d.from_scale(2, 4, 8).post_translate(1, 2, 3),
            Transform3d.persp(Size(4, 3), Angle.from_degrees(70), 0.5, 50),
            Transform3d.ortho(-3, 5, -2, 7, 0.1, 10),
        ):
            inv = t.inverse()
            self.assertIsNotNone(inv)
            self.assertTrue(t.post_mul(inv).approx_eq(Transform3d.identity(), 1e-9))
            np.testing.assert_allclose(inv.matrix, np.linalg.inv(t.matrix), atol=1e-9)

    def test_singular_returns_none(self):
        self.assertIsNone(Transform3d.from_scale(0, 1, 1).inverse())
        self.assertIsNone(Transform3d.from_rows(np.ones((4, 4))).inverse())


if __name__ == "__main__":
    unittest.main()
