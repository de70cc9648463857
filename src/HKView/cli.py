import argparse
import logging
import os.path
import sys

from HKView.cam.program import load_program
from HKView.cam.simulation import path_length, segment_program, SimulationPlan
from HKView.common.codes import PiercingType, CuttingType
from HKView.common.logsetup import setup_logging
from HKView.common.settings import ConfigSettings

def create_parser():
    parser = argparse.ArgumentParser(prog="hkview-info", description="Summarize an HK laser cutting program")
    parser.add_argument('input', type=str, help="Program file (.MPF)")
    parser.add_argument('--step-size', type=float, metavar='MM', help="Sampling step in millimeters (default: from settings)")
    parser.add_argument('--points', action='store_true', help="Sample the whole program and report point counts")
    parser.add_argument('--contours', action='store_true', help="List contours of every part")
    parser.add_argument('--verbose', '-v', action='store_true', help="Debug logging")
    return parser

def describe_program(program, show_contours=False):
    lines = []
    lines.append(f"Version: {program.version}")
    lines.append(f"Material: {program.material_name()}, database {program.material.db_name}, gas {program.assist_gas_name()}")
    lines.append(f"Workpiece: {program.workpiece[0]:g} x {program.workpiece[1]:g} mm")
    lines.append(f"Nesting: {len(program.nesting)} placements")
    for part in program.parts:
        w, h = part.nominal_size()
        lines.append(f"  {part.id}: N{part.block_number} at ({part.origin.x:g}, {part.origin.y:g}) rot {part.rotation:g}, "
            f"{len(part.contours)} contours, {w:g} x {h:g} mm, path {part.length():0.2f} mm")
        if show_contours:
            for contour in part.contours:
                lines.append(f"    {contour.id}: {PiercingType.describe(contour.piercing_type)}, {CuttingType.describe(contour.cutting_type)}, "
                    f"{len(contour.all_segments)} segments, {path_length(contour.all_segments):0.2f} mm")
    for part_id in program.skipped_parts:
        lines.append(f"  {part_id}: skipped, part code not found")
    return lines

# Relative names that do not exist in the current directory are looked up
# in the configured input directory
def resolve_input(filename, config):
    if os.path.isabs(filename) or os.path.exists(filename) or config is None:
        return filename
    directory = config.input_dir()
    if directory:
        candidate = os.path.join(directory, filename)
        if os.path.exists(candidate):
            return candidate
    return filename

def main(argv=None, config=None):
    args = create_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    if config is None and (args.step_size is None or not os.path.exists(args.input)):
        config = ConfigSettings()
    if args.step_size is None:
        config.update()
        step_size = config.step_size
    else:
        step_size = args.step_size
    input_file = resolve_input(args.input, config)
    try:
        program = load_program(input_file)
        for line in describe_program(program, args.contours):
            print(line)
        if args.points:
            plan = SimulationPlan(segment_program(program, step_size))
            print(f"Sampled: {len(plan.points)} points at {step_size:g} mm, {plan.total_distance:0.2f} mm travelled")
    except (OSError, ValueError) as e:
        print(f"hkview-info: {e}", file=sys.stderr)
        return 1
    if config is not None:
        config.remember_input(input_file)
        config.save()
    return 0

if __name__ == "__main__":
    sys.exit(main())
