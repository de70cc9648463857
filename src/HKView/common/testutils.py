def fmt(value):
    return f"{value:g}" if isinstance(value, (int, float)) else str(value)

def macro(name, *args):
    return f"{name}({','.join(fmt(a) for a in args)})"

class ProgramWriter(object):
    def __init__(self, version="!V2.1"):
        self.lines = []
        if version is not None:
            self.comment(version)
    def line(self, text):
        self.lines.append(text)
        return self
    def comment(self, text):
        return self.line(f";{text}")
    def header(self, material=1, db_name="DB1", gas=1, parts=1, width=100, height=50):
        self.line(f'HKLDB({material},"{db_name}",{gas})')
        return self.line(macro("HKINI", parts, width, height))
    def block(self, number, payload=None):
        return self.line(f"N{number}" if payload is None else f"N{number} {payload}")
    def placement(self, x, y, rotation, part_block, contours=1):
        return self.line(macro("HKOST", x, y, rotation, part_block, contours))
    def contour_start(self, piercing_type, cutting_type, x, y, compensation=0, width=0, height=0):
        return self.line(macro("HKSTR", piercing_type, cutting_type, x, y, compensation, width, height))
    def pierce(self):
        return self.line("HKPIE(0,0,0)")
    def lead_in(self, code, x, y, i=0, j=0):
        return self.line(macro("HKLEA", code, x, y, i, j))
    def cut(self):
        return self.line("HKCUT(0,0,0)")
    def motion(self, code, **words):
        text = code or ""
        for axis in "XYZIJF":
            if axis.lower() in words:
                text += f" {axis}{fmt(words[axis.lower()])}"
        return self.line(text.strip())
    def contour_end(self, code, x, y, i=0, j=0, web=0):
        return self.line(macro("HKSTO", code, x, y, i, j, web))
    def remnant_start(self, cutting_type, cutting_kind, x, y):
        return self.line(macro("HKSCRC", cutting_type, cutting_kind, x, y))
    def remnant_phase(self, phase):
        return self.line(macro("HKSCRC", phase))
    def part_end(self):
        return self.line("HKPED(0,0,0)")
    def program_end(self):
        return self.line("HKEND(0,0,0)")
    def text(self):
        return "\n".join(self.lines) + "\n"
