import logging
import re
import sys

logger = logging.getLogger(__name__)

NUMBER_PREFIX = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")

# Numeric fields in vendor macros are frequently elided or garbled; such a
# field reads as the default instead of rejecting the whole line.
def lenient_float(text, default=0):
    if text is None:
        return default
    m = NUMBER_PREFIX.match(str(text))
    if not m:
        return default
    return float(m.group(1))

def lenient_int(text, default=0):
    return int(lenient_float(text, default))

def unquote(text):
    if text is None:
        return ''
    return text.replace('"', '')

class Command(object):
    def get_family(self):
        return self.__class__.__name__
    def execute(self, receiver):
        f = "handle" + self.get_family()
        if hasattr(receiver, f):
            getattr(receiver, f)(self)
        elif hasattr(receiver, "handleRest"):
            receiver.handleRest(self)
    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__
    def __ne__(self, other):
        return not self.__eq__(other)
    def __repr__(self):
        items = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{self.__class__.__name__}({items})"

class CommentCommand(Command):
    def __init__(self, text):
        self.text = text

class BlockCommand(Command):
    def __init__(self, number):
        self.number = number

class MacroCommand(Command):
    name = None
    fields = []
    def __init__(self, args):
        self.args = list(args)
        for n, (attr, conv) in enumerate(self.fields):
            setattr(self, attr, conv(self.args[n] if n < len(self.args) else None))

class LoadDatabaseCommand(MacroCommand):
    name = "HKLDB"
    fields = [('material', lenient_int), ('db_name', unquote), ('assist_gas', lenient_int)]

class InitCommand(MacroCommand):
    name = "HKINI"
    fields = [('total_parts', lenient_int), ('width', lenient_float), ('height', lenient_float)]

class PlacementCommand(MacroCommand):
    name = "HKOST"
    fields = [('x', lenient_float), ('y', lenient_float), ('rotation', lenient_float), ('part_block', lenient_int), ('contour_count', lenient_int)]

class PrePierceCommand(MacroCommand):
    name = "HKPPP"

class ContourStartCommand(MacroCommand):
    name = "HKSTR"
    fields = [('piercing_type', lenient_int), ('cutting_type', lenient_int), ('x', lenient_float), ('y', lenient_float),
        ('tool_compensation', lenient_int), ('width', lenient_float), ('height', lenient_float)]

class PierceCommand(MacroCommand):
    name = "HKPIE"

class LeadInCommand(MacroCommand):
    name = "HKLEA"
    fields = [('code', lenient_int), ('x', lenient_float), ('y', lenient_float), ('i', lenient_float), ('j', lenient_float)]

class CutStartCommand(MacroCommand):
    name = "HKCUT"

class ContourEndCommand(MacroCommand):
    name = "HKSTO"
    fields = [('code', lenient_int), ('x', lenient_float), ('y', lenient_float), ('i', lenient_float), ('j', lenient_float), ('web', lenient_int)]

class PartEndCommand(MacroCommand):
    name = "HKPED"

class ProgramEndCommand(MacroCommand):
    name = "HKEND"

# HKSCRC is overloaded: four or more arguments open a remnant cut contour,
# a single argument is a phase marker within it
class RemnantStartCommand(MacroCommand):
    name = "HKSCRC"
    fields = [('cutting_type', lenient_int), ('cutting_kind', lenient_int), ('x', lenient_float), ('y', lenient_float)]

class RemnantPhaseCommand(MacroCommand):
    name = "HKSCRC"
    fields = [('phase', lenient_int)]

macroTypeList = [
    LoadDatabaseCommand,
    InitCommand,
    PlacementCommand,
    PrePierceCommand,
    ContourStartCommand,
    PierceCommand,
    LeadInCommand,
    CutStartCommand,
    ContourEndCommand,
    PartEndCommand,
    ProgramEndCommand,
]
macroTypes = { ctype.name: ctype for ctype in macroTypeList }

def macro_command(name, args):
    if name == "HKSCRC":
        if len(args) >= 4:
            return RemnantStartCommand(args)
        if len(args) == 1:
            return RemnantPhaseCommand(args)
        logger.debug("Ignoring HKSCRC with %d arguments", len(args))
        return None
    ctype = macroTypes.get(name)
    if ctype is None:
        logger.debug("Ignoring unknown macro %s", name)
        return None
    return ctype(args)

class MotionCommand(Command):
    axes = "XYZIJF"
    def __init__(self, code, x=None, y=None, z=None, i=None, j=None, f=None):
        self.code = code
        self.x = x
        self.y = y
        self.z = z
        self.i = i
        self.j = j
        self.f = f
    def is_gcode(self):
        return self.code is not None and self.code.startswith('G')
    def code_number(self):
        if self.code is None:
            return None
        return int(self.code[1:])
    def has_xy(self):
        return self.x is not None and self.y is not None

class GcodeTokenizer(object):
    comment_re = re.compile(r"^;")
    block_re = re.compile(r"^N(\d+)")
    macro_re = re.compile(r"^(HK[A-Z]+)")
    macro_args_re = re.compile(r"\(([^)]*)\)")
    motion_re = re.compile(r"^(?:[GM]\d+|[XYZ])")
    motion_code_re = re.compile(r"^([GM]\d+)")
    axis_res = { axis: re.compile(axis + r"([-+]?(?:\d+\.?\d*|\.\d+))") for axis in MotionCommand.axes }
    def tokenize(self, text):
        commands = []
        for line in text.splitlines():
            line = line.strip()
            if line:
                commands += self.tokenize_line(line)
        return commands
    def tokenize_line(self, line):
        if self.comment_re.match(line):
            return [CommentCommand(line[1:].strip())]
        m = self.block_re.match(line)
        if m:
            res = [BlockCommand(int(m.group(1)))]
            rest = line[m.end():].strip()
            if rest:
                res += self.tokenize_line(rest)
            return res
        m = self.macro_re.match(line)
        if m:
            cmd = macro_command(m.group(1), self.macro_args(line))
            return [cmd] if cmd is not None else []
        if self.motion_re.match(line):
            return [self.motion(line)]
        logger.debug("Ignoring unrecognized line: %s", line)
        return []
    def macro_args(self, line):
        m = self.macro_args_re.search(line)
        if not m or not m.group(1).strip():
            return []
        return [unquote(arg.strip()) for arg in m.group(1).split(",")]
    def motion(self, line):
        # Trailing comment after the motion words
        line = line.split(';')[0]
        m = self.motion_code_re.match(line)
        values = {}
        for axis, axis_re in self.axis_res.items():
            am = axis_re.search(line)
            if am:
                values[axis.lower()] = float(am.group(1))
        return MotionCommand(m.group(1) if m else None, **values)

def tokenize(text):
    return GcodeTokenizer().tokenize(text)

if __name__ == "__main__":
    with open(sys.argv[1], "r", encoding="utf-8") as f:
        for cmd in tokenize(f.read()):
            print(cmd)
