#!/usr/bin/env python3
"""
RUN_SPIRAL_WALLS: Archimedean Spiral as Model Lines and Walls
=============================================================

This demo walks the spiral workflow end to end:
1. Set up a small model (levels, wall types)
2. Sketch the spiral with model lines
3. Build the same spiral as walls
4. Export the segment table
5. Plot plan and 3D views

Run with:
    python demos/run_spiral_walls.py

Outputs:
    artifacts/spiral_segments.csv  - Segment table (meters)
    artifacts/spiral_plan.png      - Plan view
    artifacts/spiral_3d.html       - Interactive 3D visualization
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from form_kit.generative import generate_spiral, SpiralParams
from form_kit.generative.spiral import spiral_sample_count
from form_kit.io import segments_to_frame, write_frame_csv
from form_kit.kernel.units import to_internal_length
from form_kit.logging_config import setup_logging
from form_kit.repository import InMemoryRepository, WALLS, MODEL_LINES
from form_kit.viz import plot_plan, plot_geometry_3d
from form_kit.workflows import spiral_model_lines, spiral_walls


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def main():
    setup_logging()
    print_header("SPIRAL WALLS")

    # =========================================================================
    # STEP 1: MODEL SETUP
    # =========================================================================
    print_header("STEP 1: Model Setup")

    repo = InMemoryRepository()
    level = repo.add_level("Level 1", 0.0)
    repo.add_type(WALLS, "Generic - 200mm")
    repo.add_type(WALLS, "Curtain Wall 1", kind='Curtain')

    print(f"""
    Levels:      {[lv.name for lv in repo.levels()]}
    Wall types:  {[t.name for t in repo.types(WALLS)]}
    """)

    # =========================================================================
    # STEP 2: MODEL LINE SKETCH
    # =========================================================================
    print_header("STEP 2: Spiral Sketch (model lines)")

    report = spiral_model_lines(repo, level.name, max_radius=2400, turn_count=10,
                                angle_resolution_degrees=20, unit="cm")
    for line in report.summary_lines():
        print(f"    {line}")

    # =========================================================================
    # STEP 3: SPIRAL WALLS
    # =========================================================================
    print_header("STEP 3: Spiral Walls")

    report = spiral_walls(repo, level.name, max_radius_m=24, turn_count=5,
                          angle_resolution_degrees=30, wall_height_m=3.0)
    for line in report.summary_lines():
        print(f"    {line}")

    print(f"""
    Model lines: {len(repo.elements(MODEL_LINES))}
    Walls:       {len(repo.elements(WALLS))}
    Committed:   {repo.committed}
    """)

    # =========================================================================
    # STEP 4: EXPORT
    # =========================================================================
    print_header("STEP 4: Export Segment Table")

    params = SpiralParams(max_radius=to_internal_length(24, "m"), turn_count=10,
                          angle_resolution_degrees=20)
    segments = generate_spiral(params)
    frame = segments_to_frame(segments, "m")
    csv_path = write_frame_csv(frame, "artifacts/spiral_segments.csv")

    print(f"""
    Samples:     {spiral_sample_count(params)}
    Segments:    {len(frame)}
    Shortest:    {frame['length'].min():.3f} m
    Longest:     {frame['length'].max():.3f} m
    Saved to:    {csv_path}
    """)

    # =========================================================================
    # STEP 5: VISUALIZATION
    # =========================================================================
    print_header("STEP 5: Visualization")

    plot_plan(segments, title="Spiral (24 m, 10 turns, 20 deg)",
              outpath="artifacts/spiral_plan.png")
    plot_geometry_3d(segments, title="Spiral", outpath="artifacts/spiral_3d.html")

    print_header("DONE")


if __name__ == "__main__":
    main()
