
import unittest

import numpy as np

from conicfit import (
    fit_ellipse_direct, algebraic_to_geometric, make_ellipse_points,
    check_fit, DegenerateInputError, UnfittableConstraintError,
    LinearAlgebra)
from conicfit.fit_ellipse_direct import _select_ellipse_eigenvector


def _angle_diff(phi0, phi1):
    """Difference of two axis directions, modulo pi."""
    return (phi0 - phi1 + np.pi/2) % np.pi - np.pi/2


class TestDirect(unittest.TestCase):

    def assertGeometry(self, c, expected, tol=1e-6):
        xc, yc, a, b, phi = algebraic_to_geometric(c)
        xc0, yc0, a0, b0, phi0 = expected
        self.assertTrue(np.allclose(
            [xc, yc, a, b], [xc0, yc0, a0, b0], rtol=tol, atol=tol),
            msg='%s != %s' % ((xc, yc, a, b), (xc0, yc0, a0, b0)))
        self.assertAlmostEqual(_angle_diff(phi, phi0), 0, delta=tol)

    def test_semiaxes_5_2(self):
        """Axis aligned ellipse centered at the origin."""
        pts = make_ellipse_points(5, 2, 0, 0, 0, noise=0, n=50)
        c = fit_ellipse_direct(pts[:, 0], pts[:, 1])
        self.assertEqual(c.shape, (6,))
        self.assertGeometry(c, (0, 0, 5, 2, 0))

    def test_rotated_offset_ellipse(self):
        for phi in [np.pi/6, 2*np.pi/3, -1.2]:
            pts = make_ellipse_points(6, 3, phi, 10, -4, n=40)
            c = fit_ellipse_direct(pts[:, 0], pts[:, 1])
            self.assertGeometry(c, (10, -4, 6, 3, phi))

    def test_unit_norm(self):
        pts = make_ellipse_points(120, 45, 0.3, 512, 384, noise=2, n=100,
                                  rng=0)
        c = fit_ellipse_direct(pts)
        self.assertAlmostEqual(np.linalg.norm(c), 1)
        self.assertLess(c[1]**2 - 4*c[0]*c[2], 0)

    def test_points_on_fit(self):
        pts = make_ellipse_points(4, 7, 1.0, -3, 2, n=30)
        c = fit_ellipse_direct(pts)
        self.assertTrue(np.allclose(check_fit(c, pts[:, 0], pts[:, 1]), 0,
                                    atol=1e-10))

    def test_scale_invariance(self):
        pts = make_ellipse_points(6, 3, 0.4, 2, 1, n=40)
        xc, yc, a, b, phi = algebraic_to_geometric(fit_ellipse_direct(pts))
        for k in [3.5, -0.25]:
            c = fit_ellipse_direct(k*pts)
            self.assertGeometry(
                c, (k*xc, k*yc, abs(k)*a, abs(k)*b, phi))

    def test_extreme_scales(self):
        """Micrometres in metres and geodetic sized ellipses."""
        pts = make_ellipse_points(5, 2, 0.3, 1, 1, n=50)
        for k in [1e-7, 1e6, 1e7]:
            c = fit_ellipse_direct(k*pts)
            xc, yc, a, b, phi = algebraic_to_geometric(c)
            self.assertTrue(np.allclose(
                np.array([xc, yc, a, b])/k, [1, 1, 5, 2], rtol=1e-6),
                msg='k=%g' % k)
            self.assertAlmostEqual(_angle_diff(phi, 0.3), 0, delta=1e-6)

    def test_translation_invariance(self):
        pts = make_ellipse_points(6, 3, 0.4, 0, 0, n=40)
        xc, yc, a, b, phi = algebraic_to_geometric(fit_ellipse_direct(pts))
        tx, ty = 1000.0, -250.0
        c = fit_ellipse_direct(pts + [tx, ty])
        self.assertGeometry(c, (xc + tx, yc + ty, a, b, phi))

    def test_noisy(self):
        pts = make_ellipse_points(20, 10, 0.5, 5, 5, noise=0.05, n=200,
                                  rng=7)
        xc, yc, a, b, phi = algebraic_to_geometric(fit_ellipse_direct(pts))
        self.assertTrue(np.allclose([xc, yc, a, b], [5, 5, 20, 10],
                                    atol=0.2))
        self.assertAlmostEqual(_angle_diff(phi, 0.5), 0, delta=0.02)

    def test_complex_input(self):
        pts = make_ellipse_points(3, 2, 0.2, 1, 1, n=25)
        c0 = fit_ellipse_direct(pts[:, 0], pts[:, 1])
        c1 = fit_ellipse_direct(pts[:, 0] + 1j*pts[:, 1])
        self.assertTrue(np.allclose(c0, c1))

    def test_input_not_mutated(self):
        pts = make_ellipse_points(3, 2, 0.2, 1, 1, n=25)
        x, y = pts[:, 0].copy(), pts[:, 1].copy()
        fit_ellipse_direct(x, y)
        self.assertTrue(np.array_equal(x, pts[:, 0]))
        self.assertTrue(np.array_equal(y, pts[:, 1]))

    def test_multiple_ellipses(self):
        params = [(5, 2, 0.0, 0, 0), (6, 3, 1.0, 10, -4), (2, 1, -0.5, 3, 3)]
        pts = np.stack([make_ellipse_points(*p, n=30) for p in params])
        c = fit_ellipse_direct(pts[..., 0], pts[..., 1])
        self.assertEqual(c.shape, (3, 6))
        self.assertTrue(np.allclose(np.linalg.norm(c, axis=-1), 1))
        for ci, (a, b, phi, xc, yc) in zip(c, params):
            self.assertGeometry(ci, (xc, yc, a, b, phi))

    def test_collinear(self):
        with self.assertRaises(DegenerateInputError):
            fit_ellipse_direct([0., 1., 2.], [0., 1., 2.])

    def test_coincident(self):
        with self.assertRaises(DegenerateInputError):
            fit_ellipse_direct(np.ones(10), 2*np.ones(10))

    def test_empty(self):
        with self.assertRaises(DegenerateInputError):
            fit_ellipse_direct(np.array([]), np.array([]))

    def test_degenerate_reports_point_set(self):
        good = make_ellipse_points(5, 2, n=10)
        bad = np.stack((np.arange(10.), np.arange(10.)), axis=-1)
        pts = np.stack((good, bad))
        with self.assertRaisesRegex(DegenerateInputError, r'S3.*\[1\]'):
            fit_ellipse_direct(pts[..., 0], pts[..., 1])

    def test_linalg_backend(self):
        calls = []

        class Recording(LinearAlgebra):
            def eig(self, A):
                calls.append(A.shape)
                return super().eig(A)

        pts = make_ellipse_points(5, 2, n=20)
        c = fit_ellipse_direct(pts, linalg=Recording())
        self.assertEqual(calls, [(1, 3, 3)])
        self.assertGeometry(c, (0, 0, 5, 2, 0))

        # a strict tolerance rejects the (well conditioned) scaled S3
        with self.assertRaises(DegenerateInputError):
            fit_ellipse_direct(pts, linalg=LinearAlgebra(rcond=0.5))


    def test_unfittable_reports_point_set(self):
        class NoEllipse(LinearAlgebra):
            def eig(self, A):
                evals, evec = super().eig(A)
                evec = evec.copy()
                # a'Ca = 0, -1, 0 for the columns of the identity
                evec[1] = np.eye(3)
                return evals, evec

        params = [(5, 2, 0.0, 0, 0), (6, 3, 1.0, 10, -4)]
        pts = np.stack([make_ellipse_points(*p, n=30) for p in params])
        with self.assertRaisesRegex(UnfittableConstraintError,
                                    'point set 1'):
            fit_ellipse_direct(pts, linalg=NoEllipse())


class TestSelectEigenvector(unittest.TestCase):

    def test_first_positive(self):
        # columns: (1, 0, -1), (1, 0, 1), (1, 1, 1); a'Ca = -4, 4, 3
        evec = np.array([
            [1., 1., 1.],
            [0., 0., 1.],
            [-1., 1., 1.],
        ])
        self.assertEqual(_select_ellipse_eigenvector(evec), 1)

    def test_ignores_imaginary_part(self):
        evec = np.array([
            [1., 0., 1.],
            [0., 1., 0.],
            [1., 0., -1.],
        ]) + 0j
        self.assertEqual(_select_ellipse_eigenvector(evec), 0)

    def test_none_positive(self):
        evec = np.array([
            [1., 0., 1.],
            [0., 1., 0.],
            [-1., 0., 0.],
        ])
        with self.assertRaises(UnfittableConstraintError):
            _select_ellipse_eigenvector(evec)


if __name__ == '__main__':
    unittest.main()
