from polyaffine import AffineMatrix3, Basis3, Decomposed3, Quaternion
import timeit
import numpy as np

if __name__ == "__main__":
    N = 100_000
    point = np.array([1.0, 2.0, 3.0])

    d = Decomposed3(2.0, Basis3.from_euler_angles(10, 20, 30), [1, 2, 3])
    q = Decomposed3(2.0, Quaternion.from_euler_angles(10, 20, 30), [1, 2, 3])
    m = d.to_affine_matrix()

    # warm up the compiled kernels
    for t in (d, q, m):
        t.concat(t).invert()

    print("creation: ", timeit.timeit(lambda: Decomposed3.identity(), number=N))
    print("look_at (decomposed): ", timeit.timeit(
        lambda: Decomposed3.look_at([0, 0, 5], [0, 0, 0], [0, 1, 0]), number=N))
    print("look_at (matrix): ", timeit.timeit(
        lambda: AffineMatrix3.look_at([0, 0, 5], [0, 0, 0], [0, 1, 0]), number=N))

    for label, t in (("basis", d), ("quaternion", q), ("matrix", m)):
        print(f"transform_point ({label}): ", timeit.timeit(lambda: t.transform_point(point), number=N))
        print(f"concat ({label}): ", timeit.timeit(lambda: t.concat(t), number=N))
        print(f"invert ({label}): ", timeit.timeit(lambda: t.invert(), number=N))
