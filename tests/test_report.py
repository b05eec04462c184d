from cable_statics import DiagramState, Point, format_labels, format_report, place_labels, solve


def _symmetric_state() -> DiagramState:
    return DiagramState(
        pivot=Point(0, 10),
        anchor_a=Point(-10, 0),
        anchor_b=Point(10, 0),
        load=Point(0, -10),
        force_magnitude=10.0,
        force_direction=270.0,
    )


def test_report_lists_coordinates_tensions_forces_and_torques():
    state = _symmetric_state()
    result = solve(state.pivot, state.anchor_a, state.anchor_b, state.load, 10.0, 270.0)

    lines = format_report(state, result)

    assert lines[:4] == ["P0: (0, 10)", "P1: (-10, 0)", "P2: (10, 0)", "P3: (0, -10)"]
    assert "Tension P1-P3: 7.1 N" in lines
    assert "Tension P2-P3: 7.1 N" in lines
    assert "Force at P3: 10.0 N at 270°" in lines
    assert "Force at P1: (5.0i, -5.0j) N" in lines
    assert "Force at P2: (-5.0i, -5.0j) N" in lines
    assert "Torque P1 about P0: 100.0 N⋅m" in lines
    assert "Torque P2 about P0: -100.0 N⋅m" in lines
    net = lines[-1]
    assert net.startswith("Net torque: ")
    assert abs(float(net.split(": ")[1].split()[0])) < 0.05


def test_report_shows_tension_magnitude():
    state = DiagramState(
        pivot=Point(0, 10),
        anchor_a=Point(-10, 0),
        anchor_b=Point(10, 0),
        load=Point(0, -10),
        force_magnitude=10.0,
        force_direction=90.0,
    )
    result = solve(state.pivot, state.anchor_a, state.anchor_b, state.load, 10.0, 90.0)

    assert result.tension_a < 0
    assert "Tension P1-P3: 7.1 N" in format_report(state, result)


def test_format_labels_in_requested_order():
    points = {"P0": Point(250, 50), "P3": Point(250, 250)}
    labels = place_labels(points, 0.0, 500, 400)

    lines = format_labels(labels, ["P3", "P0"])

    assert lines[0].startswith("P3: ")
    assert lines[1].startswith("P0: ")
    assert "align=" in lines[0] and "baseline=" in lines[0]
