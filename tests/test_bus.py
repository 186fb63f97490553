from app.bus import ReferenceCell, ReferenceFeed, ReferenceSample, SessionBus, load_reference_csv


def test_cell_holds_latest_value():
    cell = ReferenceCell()
    assert cell.get() is None
    assert cell.value() is None

    cell.set(ReferenceSample(1, 0.1))
    cell.set(ReferenceSample(2, -0.2))
    assert cell.get() == ReferenceSample(2, -0.2)
    assert cell.value() == -0.2


def test_session_bus_stops():
    bus = SessionBus()
    assert bus.is_running()
    bus.stop()
    assert not bus.is_running()


def test_load_reference_csv(tmp_path, capsys):
    path = tmp_path / "ref.csv"
    path.write_text(
        "ts_us,ground_steering\n"
        "2000,0.05\n"
        "# comment\n"
        "\n"
        "1000,-0.1\n"
        "3000,oops\n"
    )

    samples = load_reference_csv(str(path))

    assert samples == [ReferenceSample(1000, -0.1), ReferenceSample(2000, 0.05)]
    assert "bad reference row" in capsys.readouterr().out


def test_feed_publishes_all_samples():
    bus = SessionBus()
    samples = [ReferenceSample(ts, ts / 1e6) for ts in (0, 1000, 2000)]
    feed = ReferenceFeed(bus, samples)

    feed.start()
    feed.join(timeout=2.0)

    assert feed.published == 3
    assert bus.reference.value() == 0.002


def test_feed_stops_with_the_bus():
    bus = SessionBus()
    bus.stop()
    feed = ReferenceFeed(bus, [ReferenceSample(0, 0.1)])

    feed.start()
    feed.join(timeout=2.0)

    assert feed.published == 0
    assert bus.reference.value() is None
