"""Example: solve a symmetric two-cable hanger and lay out its labels."""

from cable_statics import Point, place_labels, solve, to_canvas

WIDTH, HEIGHT = 500.0, 400.0

POINTS = {
    "P0": Point(0, 120),
    "P1": Point(-150, 60),
    "P2": Point(150, 60),
    "P3": Point(0, -60),
}


def main() -> None:
    result = solve(POINTS["P0"], POINTS["P1"], POINTS["P2"], POINTS["P3"], 100.0, 270.0)
    print(f"Tensions: {result.tension_a:.3f} N, {result.tension_b:.3f} N")
    print(f"Torques: {result.torque_a:.3f}, {result.torque_b:.3f} (net {result.net_torque:.3f})")

    canvas_points = {name: to_canvas(p.x, p.y, WIDTH, HEIGHT) for name, p in POINTS.items()}
    # Canvas Y points down, so the downward world force is +90 degrees on screen.
    for name, label in place_labels(canvas_points, 90.0, WIDTH, HEIGHT).items():
        print(f"{name}: {label.octant_name} ({label.align}/{label.baseline})")


if __name__ == "__main__":
    main()
