import os
import sys
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from HKView.common.geom import *
from HKView.common.gparser import tokenize
from HKView.common.testutils import ProgramWriter
from HKView.cam.program import *

def single_part():
    w = ProgramWriter()
    w.header(material=1, db_name="DB1", gas=2, parts=1, width=300, height=200)
    w.block(10).placement(50, 60, 0, 100, 1)
    w.block(20).program_end()
    w.block(100)
    return w

def lines(*points):
    return [PathLine(PathPoint(*points[i]), PathPoint(*points[i + 1])) for i in range(len(points) - 1)]

class HeaderTest(unittest.TestCase):
    def testEmptyNesting(self):
        w = ProgramWriter(version=None)
        w.line('HKLDB(1,"DB1",1)').line("HKINI(1,100,50)").line("HKEND")
        program = parse_program(w.text())
        self.assertEqual(program.parts, [])
        self.assertEqual(program.nesting, [])
        self.assertEqual(program.skipped_parts, [])
        self.assertEqual(program.workpiece, (100, 50))
        self.assertEqual(program.version, "Unknown")
    def testVersionAndMaterial(self):
        w = single_part()
        w.comment("!V9 not the first")
        program = parse_program(w.text())
        self.assertEqual(program.version, "!V2.1")
        self.assertEqual(program.material.db_name, "DB1")
        self.assertEqual(program.material_name(), "MS (Mild Steel)")
        self.assertEqual(program.assist_gas_name(), "N2 (Nitrogen)")
        self.assertEqual(program.init.total_parts, 1)
        self.assertEqual(program.workpiece, (300, 200))
    def testUnknownCodes(self):
        program = parse_program('HKLDB(7,"X",8)\nHKINI(1,10,10)')
        self.assertEqual(program.material_name(), "Unknown (7)")
        self.assertEqual(program.assist_gas_name(), "Unknown (8)")
    def testVersionNeedsPrefix(self):
        w = ProgramWriter(version="generated by nest")
        w.comment("!V3.0").header()
        self.assertEqual(parse_program(w.text()).version, "!V3.0")
    def testMissingMaterial(self):
        with self.assertRaises(MissingSectionError) as cm:
            parse_program("HKINI(1,100,50)\nHKEND")
        self.assertEqual(cm.exception.section, "HKLDB")
        self.assertIn("HKLDB", str(cm.exception))
    def testMissingDimensions(self):
        with self.assertRaises(MissingSectionError) as cm:
            parse_program('HKLDB(1,"DB1",1)\nHKEND')
        self.assertEqual(cm.exception.section, "HKINI")
        self.assertIsInstance(cm.exception, ValueError)
    def testFirstOccurrenceWins(self):
        program = parse_program('HKLDB(1,"A",1)\nHKLDB(2,"B",2)\nHKINI(1,10,20)\nHKINI(1,30,40)')
        self.assertEqual(program.material.db_name, "A")
        self.assertEqual(program.workpiece, (10, 20))

class NestingTest(unittest.TestCase):
    def testEntries(self):
        w = ProgramWriter().header()
        w.block(10).placement(1, 2, 90, 100, 3)
        w.line("N11 HKOST(5,6,0,200,1)")
        w.block(12).program_end()
        w.block(13).placement(9, 9, 0, 300, 1)
        program = parse_program(w.text())
        self.assertEqual(program.nesting, [
            NestingEntry(10, PathPoint(1, 2), 90, 100, 3),
            NestingEntry(11, PathPoint(5, 6), 0, 200, 1),
        ])
        self.assertEqual(program.nesting[0].part_id(), "part-10")
    def testPlacementBeforeAnyBlock(self):
        program = parse_program(ProgramWriter().header().placement(0, 0, 0, 7).text())
        self.assertEqual(program.nesting[0].placement_block, 0)
    def testMissingPartCode(self):
        w = ProgramWriter().header()
        w.block(10).placement(0, 0, 0, 100, 1)
        w.block(11).placement(0, 0, 0, 999, 1)
        w.block(12).program_end()
        w.block(100).contour_start(1, 1, 0, 0).cut().motion("G1", x=10, y=0).contour_end(0, 10, 0).part_end()
        program = parse_program(w.text())
        self.assertEqual([p.id for p in program.parts], ["part-10"])
        self.assertEqual(program.skipped_parts, ["part-11"])
        self.assertFalse(program.is_complete())
    def testRepeatedPlacements(self):
        w = ProgramWriter().header()
        w.block(10).placement(0, 0, 0, 100, 1)
        w.block(11).placement(50, 0, 180, 100, 1)
        w.block(12).program_end()
        w.block(100).contour_start(1, 1, 0, 0).cut().motion("G1", x=10, y=0).contour_end(0, 10, 0).part_end()
        program = parse_program(w.text())
        self.assertEqual([p.id for p in program.parts], ["part-10", "part-11"])
        self.assertEqual([p.block_number for p in program.parts], [100, 100])
        self.assertEqual(program.parts[0].contours, program.parts[1].contours)
        self.assertEqual(program.parts[1].rotation, 180)
        self.assertEqual(program.parts[1].origin, PathPoint(50, 0))

class ContourTest(unittest.TestCase):
    def parse_contours(self, w):
        program = parse_program(w.text())
        self.assertEqual(len(program.parts), 1)
        return program.parts[0].contours

    def testLeadInAndCutting(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0, 0, 10, 10).lead_in(1, 10, 0).cut()
        w.motion("G1", x=10, y=10)
        w.contour_end(0, 10, 10).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.all_segments, lines((0, 0), (10, 0), (10, 10)))
        self.assertEqual(contour.lead_in, PathLine(PathPoint(0, 0), PathPoint(10, 0)))
        self.assertEqual(contour.lead_in_code, 1)
        self.assertEqual(contour.approach_path, [])
        self.assertEqual(contour.cutting_path, lines((10, 0), (10, 10)))
        self.assertEqual(contour.end_code, 0)
        self.assertEqual(contour.end_position, PathPoint(10, 10))
        self.assertEqual(contour.id, "contour-100")
        self.assertEqual(contour.piercing_position, PathPoint(0, 0))

    def testClosingSegment(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G1", x=10, y=0).motion("G1", x=10, y=10)
        w.contour_end(1, 0, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.cutting_path, lines((0, 0), (10, 0), (10, 10), (0, 0)))
        self.assertEqual(contour.end_code, 1)

    def testClosingArc(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G1", x=10, y=0)
        w.contour_end(3, 0, 0, -5, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(len(contour.cutting_path), 2)
        arc = contour.cutting_path[1]
        self.assertTrue(arc.is_arc())
        self.assertEqual(arc.center, PathPoint(5, 0))
        self.assertFalse(arc.clockwise)

    def testNoClosingSegmentAtPen(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G1", x=10, y=0)
        w.contour_end(1, 10, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.cutting_path, lines((0, 0), (10, 0)))
        self.assertEqual(contour.end_code, 1)

    def testApproachBeforeCut(self):
        w = single_part()
        w.contour_start(1, 1, 5, 5).pierce()
        w.motion("G0", x=6, y=5)
        w.motion("G1", x=7, y=5)
        w.cut()
        w.motion("G2", x=9, y=5, i=1, j=0)
        w.contour_end(0, 9, 5).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.approach_path, lines((5, 5), (6, 5), (7, 5)))
        self.assertEqual(len(contour.cutting_path), 1)
        self.assertTrue(contour.cutting_path[0].is_arc())
        self.assertTrue(contour.cutting_path[0].clockwise)
        self.assertEqual(contour.all_segments, contour.approach_path + contour.cutting_path)

    def testLeadInCodeZero(self):
        w = single_part()
        w.contour_start(1, 1, 5, 5).lead_in(0, 8, 8).cut()
        w.motion("G1", x=5, y=10)
        w.contour_end(0, 5, 10).part_end()
        contour, = self.parse_contours(w)
        self.assertIsNone(contour.lead_in)
        self.assertEqual(contour.all_segments, lines((5, 5), (5, 10)))

    def testLeadInToOrigin(self):
        # Endpoints on an axis or at the origin still produce a lead-in
        w = single_part()
        w.contour_start(1, 1, 5, 5).lead_in(1, 0, 0).cut()
        w.motion("G1", x=0, y=10)
        w.contour_end(0, 0, 10).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.lead_in, PathLine(PathPoint(5, 5), PathPoint(0, 0)))
        self.assertEqual(contour.cutting_path, lines((0, 0), (0, 10)))

    def testArcLeadIn(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).lead_in(3, 10, 0, 5, 0).cut()
        w.contour_end(0, 10, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertTrue(contour.lead_in.is_arc())
        self.assertEqual(contour.all_segments, [contour.lead_in])

    def testMotionWithoutCoordinates(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G1", x=5)
        w.motion("G1", f=1000)
        w.motion("G1", x=5, y=5)
        w.contour_end(0, 5, 5).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.cutting_path, lines((0, 0), (5, 5)))

    def testUnsupportedCodeKeepsPen(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G41", x=3, y=3)
        w.motion("M5", x=4, y=4)
        w.motion("G1", x=10, y=0)
        w.contour_end(0, 10, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.cutting_path, lines((0, 0), (10, 0)))

    def testModalMotion(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G1", x=10, y=0)
        w.motion(None, x=10, y=10)
        w.motion("G3", x=0, y=10, i=-5, j=0)
        w.motion(None, x=-10, y=10, i=-5, j=0)
        w.contour_end(0, -10, 10).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual([s.is_arc() for s in contour.cutting_path], [False, False, True, True])
        self.assertEqual(contour.cutting_path[1], PathLine(PathPoint(10, 0), PathPoint(10, 10)))

    def testModalArcWithoutCentre(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.motion("G2", x=10, y=0, i=5, j=0)
        w.motion(None, x=20, y=0)
        w.contour_end(0, 20, 0).part_end()
        contour, = self.parse_contours(w)
        arc, move = contour.cutting_path
        self.assertTrue(arc.is_arc())
        self.assertEqual(move, PathLine(PathPoint(10, 0), PathPoint(20, 0)))
        self.assertEqual(move.length(), 10)
        self.assertAlmostEqual(contour.length(), 5 * pi + 10)

    def testSeveralContours(self):
        w = single_part()
        w.block(101).contour_start(1, 1, 0, 0, 0, 5, 5).cut().motion("G1", x=5, y=0).contour_end(1, 0, 0)
        w.block(102).contour_start(1, 1, 20, 20, 0, 40, 30).cut().motion("G1", x=30, y=20).contour_end(0, 30, 20)
        w.part_end()
        w.block(200).contour_start(1, 1, 0, 0).cut().motion("G1", x=1, y=1).contour_end(0, 1, 1).part_end()
        contours = self.parse_contours(w)
        self.assertEqual([c.id for c in contours], ["contour-101", "contour-102"])
        self.assertEqual(contours[1].all_segments, lines((20, 20), (30, 20)))

    def testUnterminatedContourDiscarded(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut().motion("G1", x=5, y=0).contour_end(0, 5, 0)
        w.contour_start(1, 1, 9, 9).cut().motion("G1", x=10, y=9)
        w.part_end()
        contours = self.parse_contours(w)
        self.assertEqual(len(contours), 1)

    def testRestartedContour(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut().motion("G1", x=5, y=0)
        w.contour_start(1, 1, 9, 9).cut().motion("G1", x=10, y=9).contour_end(0, 10, 9)
        w.part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.all_segments, lines((9, 9), (10, 9)))

    def testRemnantCut(self):
        w = single_part()
        w.remnant_start(1, 2, 0, 50)
        w.motion("G1", x=100, y=50)
        w.remnant_phase(1)
        w.motion("G1", x=100, y=0)
        w.remnant_phase(2)
        w.part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.piercing_type, 0)
        self.assertFalse(contour.has_piercing())
        self.assertEqual(contour.cutting_type, 1)
        self.assertEqual(contour.approach_path, [])
        self.assertEqual(contour.cutting_path, lines((0, 50), (100, 50), (100, 0)))
        self.assertEqual(contour.end_position, PathPoint(100, 0))
        self.assertEqual(contour.end_code, 0)

    def testRemnantClosedByContourEnd(self):
        w = single_part()
        w.remnant_start(1, 2, 0, 0)
        w.motion("G1", x=10, y=0)
        w.contour_end(1, 10, 10).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.cutting_path, lines((0, 0), (10, 0), (10, 10)))

    def testMotionOutsideContour(self):
        w = single_part()
        w.motion("G0", x=50, y=50)
        w.contour_start(1, 1, 0, 0).cut().motion("G1", x=1, y=0).contour_end(0, 1, 0).part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.all_segments, lines((0, 0), (1, 0)))

    def testBlockAndPayloadOnOneLine(self):
        w = single_part()
        w.block(101, "HKSTR(1,1,0,0,0,0,0)")
        w.cut()
        w.block(102, "G1 X3 Y4")
        w.block(103, "HKSTO(0,3,4,0,0,0)")
        w.part_end()
        contour, = self.parse_contours(w)
        self.assertEqual(contour.id, "contour-101")
        self.assertEqual(contour.all_segments, lines((0, 0), (3, 4)))

    def testCorruptLinesDegrade(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut()
        w.line("HKBOGUS(1,2)")
        w.line("#garbage")
        w.line("HKLEA(oops)")
        w.motion("G1", x=5, y=0)
        w.line("HKSTO(1,zz,0)")
        w.part_end()
        contour, = self.parse_contours(w)
        # The garbled end reads as (0, 0) and closes back to the pierce point
        self.assertEqual(contour.cutting_path, lines((0, 0), (5, 0), (0, 0)))
        self.assertEqual(contour.end_position, PathPoint(0, 0))

class PartTest(unittest.TestCase):
    def testNominalSizeFromLastContour(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0, 0, 100, 80).cut().motion("G1", x=1, y=0).contour_end(0, 1, 0)
        w.contour_start(1, 1, 0, 0, 0, 20, 10).cut().motion("G1", x=1, y=0).contour_end(0, 1, 0)
        w.part_end()
        part = parse_program(w.text()).parts[0]
        self.assertEqual(part.nominal_size(), (20, 10))
        self.assertEqual(Part(1, 1, PathPoint(0, 0), 0, []).nominal_size(), (0, 0))

    def testBounds(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0, 0, 1, 1).cut()
        w.motion("G2", x=10, y=0, i=5, j=0)
        w.contour_end(0, 10, 0)
        w.contour_start(1, 1, 20, -3, 0, 1, 1).cut()
        w.motion("G1", x=25, y=-3)
        w.contour_end(0, 25, -3)
        w.part_end()
        part = parse_program(w.text()).parts[0]
        b = part.contours[0].bounds()
        self.assertAlmostEqual(b[0], 0)
        self.assertAlmostEqual(b[1], 0)
        self.assertAlmostEqual(b[2], 10)
        self.assertAlmostEqual(b[3], 5)
        b = part.bounds()
        self.assertAlmostEqual(b[0], 0)
        self.assertAlmostEqual(b[1], -3)
        self.assertAlmostEqual(b[2], 25)
        self.assertAlmostEqual(b[3], 5)
        self.assertAlmostEqual(part.length(), 5 * pi + 5)

    def testPlacedPoint(self):
        part = Part(10, 100, PathPoint(100, 50), 90, [])
        p = part.placed_point(PathPoint(10, 0))
        self.assertAlmostEqual(p.x, 100)
        self.assertAlmostEqual(p.y, 60)

class IdempotenceTest(unittest.TestCase):
    def testParseTwice(self):
        w = single_part()
        w.contour_start(1, 1, 0, 0).lead_in(2, 2, 0, 1, 0).cut()
        w.motion("G1", x=10, y=0).motion("G3", x=10, y=10, i=0, j=5)
        w.contour_end(1, 0, 0).part_end()
        text = w.text()
        p1 = parse_program(text)
        p2 = parse_program(text)
        self.assertIsNot(p1, p2)
        self.assertEqual(p1, p2)
        self.assertEqual(p1.commands, tokenize(text))

    def testLoadProgram(self):
        import tempfile
        w = single_part()
        w.contour_start(1, 1, 0, 0).cut().motion("G1", x=1, y=0).contour_end(0, 1, 0).part_end()
        with tempfile.TemporaryDirectory() as tmpdir:
            fn = os.path.join(tmpdir, "test.MPF")
            with open(fn, "w", encoding="utf-8") as f:
                f.write(w.text())
            self.assertEqual(load_program(fn), parse_program(w.text()))

if __name__ == "__main__":
    unittest.main()
