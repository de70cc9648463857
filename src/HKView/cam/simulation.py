import bisect
import logging
from concurrent.futures import ThreadPoolExecutor

from HKView.common.geom import *
from HKView.common.codes import PathType

logger = logging.getLogger(__name__)

class InvalidStepSizeError(ValueError):
    def __init__(self, step_size):
        ValueError.__init__(self, f"Step size must be positive, got {step_size}")
        self.step_size = step_size

class PathSample(object):
    def __init__(self, position, part_index, contour_index, segment_index, progress, laser_on, path_type):
        self.position = position
        self.part_index = part_index
        self.contour_index = contour_index
        self.segment_index = segment_index
        self.progress = progress
        self.laser_on = laser_on
        self.path_type = path_type
    def __repr__(self):
        return f"PathSample({self.position}, {self.part_index}/{self.contour_index}/{self.segment_index}, {self.progress:0.3f}, {self.path_type}{', on' if self.laser_on else ''})"
    def __eq__(self, other):
        return isinstance(other, PathSample) and self.__dict__ == other.__dict__
    def placed(self, part):
        return PathSample(part.placed_point(self.position), self.part_index, self.contour_index, self.segment_index, self.progress, self.laser_on, self.path_type)

def check_step_size(step_size):
    if not step_size > 0:
        raise InvalidStepSizeError(step_size)

def path_length(segments):
    return sum(s.length() for s in segments)

def segment_steps(segment, step_size):
    check_step_size(step_size)
    return max(0, ceil(segment.length() / step_size))

def sample_segment(segment, step_size, segment_index=0, part_index=0, contour_index=0, path_type=PathType.CUTTING, laser_on=True):
    steps = segment_steps(segment, step_size)
    res = []
    # A degenerate segment still yields its start point
    for i in range(steps + 1):
        t = i / steps if steps > 0 else 0
        res.append(PathSample(segment.at_fraction(t), part_index, contour_index, segment_index, t, laser_on, path_type))
    return res

def segment_path(segments, step_size, part_index=0, contour_index=0, path_type=PathType.CUTTING, laser_on=True, first_index=0):
    check_step_size(step_size)
    res = []
    for n, segment in enumerate(segments):
        res += sample_segment(segment, step_size, first_index + n, part_index, contour_index, path_type, laser_on)
    return res

# Pierce point, then lead-in, approach and cutting path in traversal order.
# Segment indices refer to Contour.all_segments.
def segment_contour(contour, step_size, part_index=0, contour_index=0):
    check_step_size(step_size)
    res = []
    if contour.has_piercing():
        res.append(PathSample(contour.piercing_position, part_index, contour_index, 0, 0, False, PathType.PIERCING))
    index = 0
    if contour.lead_in is not None:
        res += segment_path([contour.lead_in], step_size, part_index, contour_index, PathType.LEAD_IN, True, index)
        index += 1
    res += segment_path(contour.approach_path, step_size, part_index, contour_index, PathType.APPROACH, False, index)
    index += len(contour.approach_path)
    res += segment_path(contour.cutting_path, step_size, part_index, contour_index, PathType.CUTTING, True, index)
    logger.debug("Contour %s of part %d: %d points", contour.id, part_index, len(res))
    return res

def segment_part(part, step_size, part_index=0, placed=False):
    res = []
    for contour_index, contour in enumerate(part.contours):
        res += segment_contour(contour, step_size, part_index, contour_index)
    if placed:
        res = [p.placed(part) for p in res]
    return res

# Parts share no state, so they can be sampled independently; the result
# order does not depend on the number of workers.
def segment_program(program, step_size, placed=False, workers=1):
    check_step_size(step_size)
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            batches = list(executor.map(lambda item: segment_part(item[1], step_size, item[0], placed), enumerate(program.parts)))
    else:
        batches = [segment_part(part, step_size, part_index, placed) for part_index, part in enumerate(program.parts)]
    return [p for batch in batches for p in batch]

class SimulationPlan(object):
    def __init__(self, points):
        self.points = points
        self.distances = []
        total = 0
        last = None
        for p in points:
            if last is not None:
                total += dist(last.position, p.position)
            self.distances.append(total)
            last = p
        self.total_distance = total
    def is_empty(self):
        return not self.points
    def index_at_distance(self, distance):
        if not self.points:
            return None
        return max(0, bisect.bisect_right(self.distances, distance) - 1)
    def point_at_distance(self, distance):
        index = self.index_at_distance(distance)
        return self.points[index] if index is not None else None
    def progress(self, distance):
        if self.total_distance <= 0:
            return 1.0 if self.points else 0.0
        return max(0.0, min(1.0, distance / self.total_distance))
