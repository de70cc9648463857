from math import *

class GeometrySettings:
    STEP_SIZE = 1.0
    MIN_STEP_SIZE = 0.5
    MAX_STEP_SIZE = 100.0
    EPSILON = 1e-9
    @staticmethod
    def clamp_step_size(value):
        return max(GeometrySettings.MIN_STEP_SIZE, min(GeometrySettings.MAX_STEP_SIZE, value))

class PathPoint(object):
    def __init__(self, x, y):
        self.x = x
        self.y = y
    def __repr__(self):
        return f"PathPoint({self.x:0.3f},{self.y:0.3f})"
    def as_tuple(self):
        return (self.x, self.y)
    @staticmethod
    def from_tuple(t):
        if len(t) != 2:
            raise ValueError("Invalid number of data items in a point record")
        return PathPoint(t[0], t[1])
    def dist(self, other):
        dx = other.x - self.x
        dy = other.y - self.y
        return sqrt(dx * dx + dy * dy)
    def angle_to(self, p2):
        return atan2(p2.y - self.y, p2.x - self.x)
    def translated(self, dx, dy):
        return PathPoint(self.x + dx, self.y + dy)
    # Rotation in degrees about the coordinate origin
    def rotated(self, angle):
        if not angle:
            return PathPoint(self.x, self.y)
        a = angle * pi / 180
        cosv, sinv = cos(a), sin(a)
        return PathPoint(self.x * cosv - self.y * sinv, self.x * sinv + self.y * cosv)
    def __eq__(self, other):
        return isinstance(other, PathPoint) and self.x == other.x and self.y == other.y
    def __ne__(self, other):
        return not self.__eq__(other)
    def __hash__(self):
        return (self.x, self.y).__hash__()

def dist(a, b):
    dx = b.x - a.x
    dy = b.y - a.y
    return sqrt(dx * dx + dy * dy)

def weighted(p1, p2, alpha):
    return PathPoint(p1.x + (p2.x - p1.x) * alpha, p1.y + (p2.y - p1.y) * alpha)

def same_position(a, b, eps=None):
    if eps is None:
        eps = GeometrySettings.EPSILON
    return abs(a.x - b.x) <= eps and abs(a.y - b.y) <= eps

def place_point(pt, origin, rotation):
    return pt.rotated(rotation).translated(origin.x, origin.y)

# Signed sweep of an arc. The sign always agrees with the direction flag;
# both length and sampling go through here.
def arc_span(start_angle, end_angle, clockwise):
    span = end_angle - start_angle
    if clockwise:
        if span > 0:
            span -= 2 * pi
    else:
        if span < 0:
            span += 2 * pi
    return span

class PathSegment(object):
    def is_line(self):
        return False
    def is_arc(self):
        return False
    def __ne__(self, other):
        return not self.__eq__(other)

class PathLine(PathSegment):
    def __init__(self, start, end):
        self.start = start
        self.end = end
    def __repr__(self):
        return f"PathLine({self.start}, {self.end})"
    def __eq__(self, other):
        return isinstance(other, PathLine) and self.start == other.start and self.end == other.end
    def is_line(self):
        return True
    def length(self):
        return dist(self.start, self.end)
    def at_fraction(self, alpha):
        return weighted(self.start, self.end, alpha)
    def extreme_points(self):
        return [self.start, self.end]
    def placed(self, origin, rotation):
        return PathLine(place_point(self.start, origin, rotation), place_point(self.end, origin, rotation))

class PathArc(PathSegment):
    def __init__(self, start, end, center, radius, clockwise, start_angle, end_angle):
        self.start = start
        self.end = end
        self.center = center
        self.radius = radius
        self.clockwise = clockwise
        self.start_angle = start_angle
        self.end_angle = end_angle
    def __repr__(self):
        return f"PathArc({self.start}, {self.end}, {self.center}, {self.radius:0.3f}, {'CW' if self.clockwise else 'CCW'})"
    def __eq__(self, other):
        return (isinstance(other, PathArc) and self.start == other.start and self.end == other.end and self.center == other.center
            and self.radius == other.radius and self.clockwise == other.clockwise
            and self.start_angle == other.start_angle and self.end_angle == other.end_angle)
    def is_arc(self):
        return True
    def span(self):
        return arc_span(self.start_angle, self.end_angle, self.clockwise)
    def length(self):
        return abs(self.span() * self.radius)
    def angle_at_fraction(self, alpha):
        return self.start_angle + self.span() * alpha
    def at_fraction(self, alpha):
        a = self.angle_at_fraction(alpha)
        return PathPoint(self.center.x + self.radius * cos(a), self.center.y + self.radius * sin(a))
    def at_angle(self, angle):
        return PathPoint(self.center.x + self.radius * cos(angle), self.center.y + self.radius * sin(angle))
    def quadrant_seps(self):
        # Points where the swept part of the circle crosses an axis direction,
        # needed on top of start and end to get the bounds
        sspan = self.span()
        if sspan < 0:
            a1 = (self.start_angle + sspan) % (2 * pi)
            a2 = self.start_angle % (2 * pi)
        else:
            a1 = self.start_angle % (2 * pi)
            a2 = (self.start_angle + sspan) % (2 * pi)
        q1 = floor(a1 / (pi / 2))
        q2 = floor(a2 / (pi / 2))
        if q2 < q1 or (q2 == q1 and abs(sspan) >= pi):
            q2 += 4
        return [self.at_angle((i + 1) * pi / 2) for i in range(q1, q2)]
    def extreme_points(self):
        return [self.start, self.end] + self.quadrant_seps()
    def placed(self, origin, rotation):
        a = rotation * pi / 180
        return PathArc(place_point(self.start, origin, rotation), place_point(self.end, origin, rotation),
            place_point(self.center, origin, rotation), self.radius, self.clockwise, self.start_angle + a, self.end_angle + a)

# Motion codes 0/1 are straight moves, 2/3 are CW/CCW arcs with the centre
# given as an offset (i, j) from the start point. Anything else has no geometry.
def build_segment(code, start, end, i=0, j=0):
    if code == 0 or code == 1:
        return PathLine(start, end)
    if code == 2 or code == 3:
        i = i or 0
        j = j or 0
        center = start.translated(i, j)
        return PathArc(start, end, center, hypot(i, j), code == 2, center.angle_to(start), center.angle_to(end))
    return None

class MinMax(object):
    def __init__(self):
        self.min = None
        self.max = None
    def feed(self, value):
        if self.min is None:
            self.min = self.max = value
        else:
            self.min = min(self.min, value)
            self.max = max(self.max, value)

def segments_bounds(segments, points=()):
    xcoords = MinMax()
    ycoords = MinMax()
    for p in points:
        xcoords.feed(p.x)
        ycoords.feed(p.y)
    for s in segments:
        for p in s.extreme_points():
            xcoords.feed(p.x)
            ycoords.feed(p.y)
    if xcoords.min is None:
        return None
    return (xcoords.min, ycoords.min, xcoords.max, ycoords.max)

def max_bounds(*b):
    b = [i for i in b if i is not None]
    if not b:
        return None
    return (min(i[0] for i in b), min(i[1] for i in b), max(i[2] for i in b), max(i[3] for i in b))
