import logging

from HKView.common.geom import *
from HKView.common.codes import MaterialType, AssistGas, PiercingType, RemnantPhase
from HKView.common.gparser import tokenize, CommentCommand, BlockCommand, LoadDatabaseCommand, InitCommand, PlacementCommand, ProgramEndCommand

logger = logging.getLogger(__name__)

VERSION_PREFIX = "!V"

class MissingSectionError(ValueError):
    def __init__(self, section):
        ValueError.__init__(self, f"{section} command not found")
        self.section = section

class PartCodeNotFoundError(ValueError):
    def __init__(self, part_id, block_number):
        ValueError.__init__(self, f"Part code block N{block_number} for {part_id} not found")
        self.part_id = part_id
        self.block_number = block_number

class ModelObject(object):
    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__
    def __ne__(self, other):
        return not self.__eq__(other)

class Contour(ModelObject):
    def __init__(self, block_number, piercing_type, cutting_type, piercing_position, tool_compensation, width, height,
            lead_in=None, lead_in_code=0, approach_path=None, cutting_path=None, end_code=0, end_position=None):
        self.id = f"contour-{block_number}"
        self.block_number = block_number
        self.piercing_type = piercing_type
        self.cutting_type = cutting_type
        self.piercing_position = piercing_position
        self.tool_compensation = tool_compensation
        self.width = width
        self.height = height
        self.lead_in = lead_in
        self.lead_in_code = lead_in_code
        self.approach_path = list(approach_path or [])
        self.cutting_path = list(cutting_path or [])
        self.end_code = end_code
        self.end_position = end_position if end_position is not None else PathPoint(0, 0)
        # Physical traversal order
        self.all_segments = ([lead_in] if lead_in is not None else []) + self.approach_path + self.cutting_path
    def __repr__(self):
        return f"Contour({self.id}, {len(self.all_segments)} segments)"
    def has_piercing(self):
        return self.piercing_type != PiercingType.NONE
    def length(self):
        return sum(s.length() for s in self.all_segments)
    def bounds(self):
        return segments_bounds(self.all_segments, [self.piercing_position, self.end_position])

class Part(ModelObject):
    def __init__(self, placement_block, block_number, origin, rotation, contours, contour_count=0):
        # Placement block keeps ids unique when one part code is placed several times
        self.id = f"part-{placement_block}"
        self.placement_block = placement_block
        self.block_number = block_number
        self.origin = origin
        self.rotation = rotation
        self.contours = contours
        self.contour_count = contour_count
    def __repr__(self):
        return f"Part({self.id}, N{self.block_number}, {len(self.contours)} contours)"
    def all_segments(self):
        return [s for c in self.contours for s in c.all_segments]
    def length(self):
        return sum(c.length() for c in self.contours)
    # Placement box as shown on screen: taken from the last contour only
    def nominal_size(self):
        if not self.contours:
            return (0, 0)
        last = self.contours[-1]
        return (last.width, last.height)
    def bounds(self):
        return max_bounds(*[c.bounds() for c in self.contours])
    def placed_point(self, pt):
        return place_point(pt, self.origin, self.rotation)

class NestingEntry(ModelObject):
    def __init__(self, placement_block, origin, rotation, part_block, contour_count):
        self.placement_block = placement_block
        self.origin = origin
        self.rotation = rotation
        self.part_block = part_block
        self.contour_count = contour_count
    def part_id(self):
        return f"part-{self.placement_block}"
    def __repr__(self):
        return f"NestingEntry(N{self.placement_block} -> N{self.part_block}, {self.origin}, {self.rotation})"

class Program(ModelObject):
    def __init__(self, version, material, init, nesting, parts, skipped_parts=None, commands=None):
        self.version = version
        self.material = material
        self.init = init
        self.workpiece = (init.width, init.height)
        self.nesting = nesting
        self.parts = parts
        self.skipped_parts = list(skipped_parts or [])
        self.commands = commands
    def material_name(self):
        return MaterialType.describe(self.material.material)
    def assist_gas_name(self):
        return AssistGas.describe(self.material.assist_gas)
    def is_complete(self):
        return not self.skipped_parts

# One contour in the making. The pen position is handed in and the new one
# returned, so the builder holds no position of its own.
class ContourBuilder(object):
    def __init__(self, block_number, piercing_type, cutting_type, pierce, tool_compensation, width, height, cutting=False):
        self.block_number = block_number
        self.piercing_type = piercing_type
        self.cutting_type = cutting_type
        self.pierce = pierce
        self.tool_compensation = tool_compensation
        self.width = width
        self.height = height
        self.cutting = cutting
        self.lead_in = None
        self.lead_in_code = 0
        self.approach_path = []
        self.cutting_path = []
    @staticmethod
    def from_start(cmd, block_number):
        return ContourBuilder(block_number, cmd.piercing_type, cmd.cutting_type, PathPoint(cmd.x, cmd.y), cmd.tool_compensation, cmd.width, cmd.height)
    @staticmethod
    def from_remnant(cmd, block_number):
        # Remnant cuts have no piercing and no separate approach travel
        return ContourBuilder(block_number, PiercingType.NONE, cmd.cutting_type, PathPoint(cmd.x, cmd.y), 0, 0, 0, cutting=True)
    def add_lead_in(self, code, pen, end, i, j):
        if not code:
            return pen
        segment = build_segment(code, pen, end, i, j)
        if segment is None:
            logger.debug("Lead-in with unsupported code %s ignored", code)
            return pen
        self.lead_in = segment
        self.lead_in_code = code
        return end
    def start_cutting(self):
        self.cutting = True
    def add_motion(self, code, pen, end, i, j):
        segment = build_segment(code, pen, end, i, j)
        if segment is None:
            logger.debug("Motion with unsupported code %s ignored", code)
            return pen
        if self.cutting:
            self.cutting_path.append(segment)
        else:
            self.approach_path.append(segment)
        return end
    def finish(self, code, pen, end, i, j):
        if code and not same_position(pen, end):
            segment = build_segment(code, pen, end, i, j)
            if segment is not None:
                self.cutting_path.append(segment)
        return Contour(self.block_number, self.piercing_type, self.cutting_type, self.pierce, self.tool_compensation, self.width, self.height,
            self.lead_in, self.lead_in_code, self.approach_path, self.cutting_path, code, end)

class PartScanner(object):
    def __init__(self, block_number):
        self.block_number = block_number
        self.pen = PathPoint(0, 0)
        self.modal_code = 0
        self.builder = None
        self.contours = []
        self.finished = False
    def scan(self, commands):
        for cmd in commands:
            cmd.execute(self)
            if self.finished:
                break
        return self.contours
    def open(self, builder):
        if self.builder is not None:
            logger.debug("Discarding unterminated contour at N%d", self.builder.block_number)
        self.builder = builder
        self.pen = builder.pierce
    def close(self, contour):
        self.contours.append(contour)
        self.builder = None
    def handleBlockCommand(self, cmd):
        self.block_number = cmd.number
    def handleContourStartCommand(self, cmd):
        self.open(ContourBuilder.from_start(cmd, self.block_number))
    def handleRemnantStartCommand(self, cmd):
        self.open(ContourBuilder.from_remnant(cmd, self.block_number))
    def handleLeadInCommand(self, cmd):
        if self.builder is not None:
            self.pen = self.builder.add_lead_in(cmd.code, self.pen, PathPoint(cmd.x, cmd.y), cmd.i, cmd.j)
    def handleCutStartCommand(self, cmd):
        if self.builder is not None:
            self.builder.start_cutting()
    def handleRemnantPhaseCommand(self, cmd):
        if self.builder is None:
            return
        if cmd.phase == RemnantPhase.CUT:
            self.builder.start_cutting()
        elif cmd.phase == RemnantPhase.END:
            self.close(self.builder.finish(0, self.pen, self.pen, 0, 0))
    def handleMotionCommand(self, cmd):
        code = cmd.code_number()
        if cmd.code is None:
            code = self.modal_code
            # Without a centre offset a modal arc has no circle to follow
            if code in (2, 3) and cmd.i is None and cmd.j is None:
                code = 1
        elif not cmd.is_gcode():
            return
        elif code in (0, 1, 2, 3):
            self.modal_code = code
        if self.builder is None or not cmd.has_xy():
            return
        self.pen = self.builder.add_motion(code, self.pen, PathPoint(cmd.x, cmd.y), cmd.i, cmd.j)
    def handleContourEndCommand(self, cmd):
        if self.builder is not None:
            self.close(self.builder.finish(cmd.code, self.pen, PathPoint(cmd.x, cmd.y), cmd.i, cmd.j))
    def handlePartEndCommand(self, cmd):
        if self.builder is not None:
            logger.debug("Discarding unterminated contour at N%d", self.builder.block_number)
            self.builder = None
        self.finished = True

class ProgramBuilder(object):
    def __init__(self, commands):
        self.commands = commands
    def version(self):
        for cmd in self.commands:
            if isinstance(cmd, CommentCommand) and cmd.text.startswith(VERSION_PREFIX):
                return cmd.text
        return "Unknown"
    def required(self, ctype):
        for cmd in self.commands:
            if isinstance(cmd, ctype):
                return cmd
        raise MissingSectionError(ctype.name)
    def nesting(self):
        nesting = []
        block_number = 0
        for cmd in self.commands:
            if isinstance(cmd, BlockCommand):
                block_number = cmd.number
            elif isinstance(cmd, PlacementCommand):
                nesting.append(NestingEntry(block_number, PathPoint(cmd.x, cmd.y), cmd.rotation, cmd.part_block, cmd.contour_count))
            elif isinstance(cmd, ProgramEndCommand):
                break
        return nesting
    def find_block(self, number):
        for i, cmd in enumerate(self.commands):
            if isinstance(cmd, BlockCommand) and cmd.number == number:
                return i
        return None
    def part(self, entry):
        start = self.find_block(entry.part_block)
        if start is None:
            raise PartCodeNotFoundError(entry.part_id(), entry.part_block)
        contours = PartScanner(entry.part_block).scan(self.commands[start:])
        return Part(entry.placement_block, entry.part_block, entry.origin, entry.rotation, contours, entry.contour_count)
    def build(self):
        version = self.version()
        material = self.required(LoadDatabaseCommand)
        init = self.required(InitCommand)
        nesting = self.nesting()
        parts = []
        skipped = []
        for entry in nesting:
            try:
                parts.append(self.part(entry))
            except PartCodeNotFoundError as e:
                logger.warning("%s, part skipped", e)
                skipped.append(e.part_id)
        logger.info("Program %s: %d parts, %d skipped", version, len(parts), len(skipped))
        return Program(version, material, init, nesting, parts, skipped, self.commands)

def parse_program(text):
    return ProgramBuilder(tokenize(text)).build()

def load_program(filename):
    with open(filename, "r", encoding="utf-8") as f:
        return parse_program(f.read())
