# geometry.py
import math
from numpy import float64 as np_float64
from numpy import ndarray
import numpy as np
from numba import njit

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(cache=True)
def quaternion_to_rotation(quaternion: ndarray, w_last: bool = True) -> ndarray:
    """
    Convert a unit quaternion to a 3x3 rotation matrix.

    Parameters:
        quaternion (ndarray): A 4-element array representing the quaternion.
        w_last (bool, optional): Determines the order of the quaternion components.
            - True: quaternion is [x, y, z, w] (default).
            - False: quaternion is [w, x, y, z].

    Returns:
        ndarray: A 3x3 rotation matrix corresponding to the input quaternion.
    """
    if w_last:
        x, y, z, w = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    else:
        w, x, y, z = quaternion[0], quaternion[1], quaternion[2], quaternion[3]

    xx = x*x
    yy = y*y
    zz = z*z
    xy = x*y
    xz = x*z
    yz = y*z
    wx = w*x
    wy = w*y
    wz = w*z

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = 1 - 2*(yy + zz)
    R[0, 1] = 2*(xy - wz)
    R[0, 2] = 2*(xz + wy)

    R[1, 0] = 2*(xy + wz)
    R[1, 1] = 1 - 2*(xx + zz)
    R[1, 2] = 2*(yz - wx)

    R[2, 0] = 2*(xz - wy)
    R[2, 1] = 2*(yz + wx)
    R[2, 2] = 1 - 2*(xx + yy)
    return R


@njit(cache=True, fastmath=True)
def rotation_to_quaternion(rotation: ndarray, w_last: bool = True) -> ndarray:
    """
    Converts a 3x3 rotation matrix to a normalized quaternion.

    The branch is picked from the trace of the matrix so the square root is
    always taken of the largest available term.

    Parameters:
        rotation (ndarray): A 3x3 rotation matrix.
        w_last (bool, optional): If True, the quaternion is returned as [x, y, z, w];
                                 otherwise as [w, x, y, z]. Default is True.

    Returns:
        ndarray: A 1D array of 4 floats representing the normalized quaternion.
    """
    a00, a01, a02 = rotation[0, 0], rotation[0, 1], rotation[0, 2]
    a10, a11, a12 = rotation[1, 0], rotation[1, 1], rotation[1, 2]
    a20, a21, a22 = rotation[2, 0], rotation[2, 1], rotation[2, 2]

    tr = a00 + a11 + a22

    if tr > 0.0:
        S = math.sqrt(tr + 1.0) * 2.0
        qw = 0.25 * S
        qx = (a21 - a12) / S
        qy = (a02 - a20) / S
        qz = (a10 - a01) / S
    else:
        # pick largest diagonal element
        if a00 > a11 and a00 > a22:
            S = math.sqrt(1.0 + a00 - a11 - a22) * 2.0
            qw = (a21 - a12) / S
            qx = 0.25 * S
            qy = (a01 + a10) / S
            qz = (a02 + a20) / S
        elif a11 > a22:
            S = math.sqrt(1.0 + a11 - a00 - a22) * 2.0
            qw = (a02 - a20) / S
            qx = (a01 + a10) / S
            qy = 0.25 * S
            qz = (a12 + a21) / S
        else:
            S = math.sqrt(1.0 + a22 - a00 - a11) * 2.0
            qw = (a10 - a01) / S
            qx = (a02 + a20) / S
            qy = (a12 + a21) / S
            qz = 0.25 * S

    norm = math.sqrt(qx*qx + qy*qy + qz*qz + qw*qw)
    qx /= norm
    qy /= norm
    qz /= norm
    qw /= norm

    out = np.empty(4, dtype=np_float64)
    if w_last:
        out[0], out[1], out[2], out[3] = qx, qy, qz, qw
    else:
        out[0], out[1], out[2], out[3] = qw, qx, qy, qz

    return out


@njit(cache=True)
def euler_to_rotation(
        roll: float,
        pitch: float,
        yaw: float,
        degrees: bool = True) -> ndarray:
    """
    Compute a rotation matrix from Euler angles.

    The rotation is constructed as R = Rz(yaw) @ Ry(pitch) @ Rx(roll): roll about
    the x-axis is applied first, then pitch about y, then yaw about z.

    Parameters:
        roll (float): Rotation angle about the x-axis.
        pitch (float): Rotation angle about the y-axis.
        yaw (float): Rotation angle about the z-axis.
        degrees (bool, optional): Whether the angles are in degrees. Defaults to True.

    Returns:
        ndarray: A 3x3 rotation matrix.
    """
    if degrees:
        roll *= np.pi/180.0
        pitch *= np.pi/180.0
        yaw *= np.pi/180.0

    sr, cr = np.sin(roll),  np.cos(roll)
    sp, cp = np.sin(pitch), np.cos(pitch)
    sy, cy = np.sin(yaw),   np.cos(yaw)

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = cy*cp
    R[0, 1] = cy*sp*sr - sy*cr
    R[0, 2] = cy*sp*cr + sy*sr

    R[1, 0] = sy*cp
    R[1, 1] = sy*sp*sr + cy*cr
    R[1, 2] = sy*sp*cr - cy*sr

    R[2, 0] = -sp
    R[2, 1] = cp*sr
    R[2, 2] = cp*cr
    return R


@njit(cache=True)
def euler_to_quaternion(
    roll: float,
    pitch: float,
    yaw: float,
    degrees: bool = True
) -> ndarray:
    """
    Converts Euler angles to a quaternion [x, y, z, w] describing the same
    rotation as `euler_to_rotation`.
    """
    if degrees:
        roll *= np.pi/180.0
        pitch *= np.pi/180.0
        yaw *= np.pi/180.0

    hr, hp, hy = roll*0.5, pitch*0.5, yaw*0.5
    sr, cr = np.sin(hr), np.cos(hr)
    sp, cp = np.sin(hp), np.cos(hp)
    sy, cy = np.sin(hy), np.cos(hy)

    # quaternion for R = Rz * Ry * Rx  is q = qz * qy * qx
    out = np.empty(4, dtype=np_float64)
    out[0] = sr*cp*cy - cr*sp*sy
    out[1] = cr*sp*cy + sr*cp*sy
    out[2] = cr*cp*sy - sr*sp*cy
    out[3] = cr*cp*cy + sr*sp*sy
    return out


@njit(cache=True)
def axis_angle_to_quaternion(axis: ndarray, angle: float) -> ndarray:
    """
    Unit quaternion [x, y, z, w] for a right-handed rotation of `angle`
    radians about `axis`. The axis does not need to be normalized.
    """
    ax, ay, az = axis[0], axis[1], axis[2]
    n = math.sqrt(ax*ax + ay*ay + az*az)
    s = math.sin(angle * 0.5) / n

    out = np.empty(4, dtype=np_float64)
    out[0] = ax * s
    out[1] = ay * s
    out[2] = az * s
    out[3] = math.cos(angle * 0.5)
    return out


@njit(cache=True)
def quaternion_multiply(a: ndarray, b: ndarray) -> ndarray:
    """
    Hamilton product a * b of two [x, y, z, w] quaternions. As a rotation the
    result applies `b` first, then `a`.
    """
    x1, y1, z1, w1 = a[0], a[1], a[2], a[3]
    x2, y2, z2, w2 = b[0], b[1], b[2], b[3]

    out = np.empty(4, dtype=np_float64)
    out[0] = w1*x2 + x1*w2 + y1*z2 - z1*y2
    out[1] = w1*y2 - x1*z2 + y1*w2 + z1*x2
    out[2] = w1*z2 + x1*y2 - y1*x2 + z1*w2
    out[3] = w1*w2 - x1*x2 - y1*y2 - z1*z2
    return out


@njit(cache=True, fastmath=True)
def quaternion_rotate(quaternion: ndarray, vector: ndarray) -> ndarray:
    """
    Rotate a 3D vector by a unit [x, y, z, w] quaternion:
        v' = v + w t + q_v x t,   t = 2 (q_v x v)
    """
    qx, qy, qz, qw = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    vx, vy, vz = vector[0], vector[1], vector[2]

    tx = 2.0 * (qy*vz - qz*vy)
    ty = 2.0 * (qz*vx - qx*vz)
    tz = 2.0 * (qx*vy - qy*vx)

    out = np.empty(3, dtype=np_float64)
    out[0] = vx + qw*tx + (qy*tz - qz*ty)
    out[1] = vy + qw*ty + (qz*tx - qx*tz)
    out[2] = vz + qw*tz + (qx*ty - qy*tx)
    return out


@njit(cache=True)
def look_at_rotation(direction: ndarray, up: ndarray) -> ndarray:
    """
    Rotation matrix whose rows are the (side, up, forward) basis of a viewer
    looking along `direction`. It maps `direction` onto +z and the projected
    `up` onto +y.

    Parameters:
        direction (ndarray): viewing direction, need not be normalized.
        up (ndarray): vertical reference, must not be parallel to `direction`.

    Returns:
        ndarray: A proper 3x3 rotation matrix.
    """
    dx, dy, dz = direction[0], direction[1], direction[2]
    n = math.sqrt(dx*dx + dy*dy + dz*dz)
    dx, dy, dz = dx/n, dy/n, dz/n

    # side = up x dir
    sx = up[1]*dz - up[2]*dy
    sy = up[2]*dx - up[0]*dz
    sz = up[0]*dy - up[1]*dx
    n = math.sqrt(sx*sx + sy*sy + sz*sz)
    sx, sy, sz = sx/n, sy/n, sz/n

    # up' = dir x side
    ux = dy*sz - dz*sy
    uy = dz*sx - dx*sz
    uz = dx*sy - dy*sx
    n = math.sqrt(ux*ux + uy*uy + uz*uz)
    ux, uy, uz = ux/n, uy/n, uz/n

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0], R[0, 1], R[0, 2] = sx, sy, sz
    R[1, 0], R[1, 1], R[1, 2] = ux, uy, uz
    R[2, 0], R[2, 1], R[2, 2] = dx, dy, dz
    return R


@njit(cache=True)
def look_at_matrix(eye: ndarray, center: ndarray, up: ndarray) -> ndarray:
    """
    Right-handed 4x4 view matrix: the camera sits at `eye`, looks down its
    local -z axis towards `center`, with +y following `up`. `eye` maps to the
    origin.
    """
    fx, fy, fz = center[0] - eye[0], center[1] - eye[1], center[2] - eye[2]
    n = math.sqrt(fx*fx + fy*fy + fz*fz)
    fx, fy, fz = fx/n, fy/n, fz/n

    # side = f x up
    sx = fy*up[2] - fz*up[1]
    sy = fz*up[0] - fx*up[2]
    sz = fx*up[1] - fy*up[0]
    n = math.sqrt(sx*sx + sy*sy + sz*sz)
    sx, sy, sz = sx/n, sy/n, sz/n

    # u = side x f
    ux = sy*fz - sz*fy
    uy = sz*fx - sx*fz
    uz = sx*fy - sy*fx

    ex, ey, ez = eye[0], eye[1], eye[2]

    M = np.zeros((4, 4), dtype=np_float64)
    M[0, 0], M[0, 1], M[0, 2] = sx, sy, sz
    M[1, 0], M[1, 1], M[1, 2] = ux, uy, uz
    M[2, 0], M[2, 1], M[2, 2] = -fx, -fy, -fz
    M[0, 3] = -(sx*ex + sy*ey + sz*ez)
    M[1, 3] = -(ux*ex + uy*ey + uz*ez)
    M[2, 3] = fx*ex + fy*ey + fz*ez
    M[3, 3] = 1.0
    return M


@njit(cache=True)
def angle_to_rotation(angle: float) -> ndarray:
    """2x2 counter-clockwise rotation by `angle` radians."""
    c, s = math.cos(angle), math.sin(angle)
    R = np.empty((2, 2), dtype=np_float64)
    R[0, 0], R[0, 1] = c, -s
    R[1, 0], R[1, 1] = s, c
    return R


@njit(cache=True)
def signed_angle(a: ndarray, b: ndarray) -> float:
    """Counter-clockwise angle in radians from 2D vector `a` to `b`, in (-pi, pi]."""
    return math.atan2(a[0]*b[1] - a[1]*b[0], a[0]*b[0] + a[1]*b[1])
