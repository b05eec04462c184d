"""Example: drive a session the way a UI would and print the shareable URL."""

from cable_statics import DiagramSession, MemoryStorage, UrlLocation


def main() -> None:
    location = UrlLocation("https://example.org/statics")
    session = DiagramSession(MemoryStorage(), location)

    # Grab the load point (canvas 250, 250) and drop it lower and to the right.
    session.begin_drag(250, 250)
    session.drag_to(290, 320)
    session.end_drag()
    session.set_force_direction("270")

    frame = session.update()
    print("Tension A:", round(frame.result.tension_a, 3))
    print("Tension B:", round(frame.result.tension_b, 3))
    print("URL:", location.url)


if __name__ == "__main__":
    main()
