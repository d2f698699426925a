from tripplanner.models.entities import LocalEvent, TransportOption
from tripplanner.planner import listings as l


def _options():
    return [
        TransportOption(mode="flight", provider="Air France", departure="2026-11-01T10:00:00", arrival="2026-11-01T11:15:00", price="$100", duration="1h 15m"),
        TransportOption(mode="bus", provider="FlixBus", departure="2026-11-01T07:00:00", arrival="2026-11-01T15:00:00", price="$30", duration="8h"),
        TransportOption(mode="train", provider="Eurostar", departure="soon", arrival="", price="$50", duration="2h 30m"),
    ]


def test_sort_by_price():
    assert [l.parse_price(o.price) for o in l.sort_transport_options(_options(), "price")] == [30, 50, 100]


def test_sort_by_duration():
    assert [o.mode for o in l.sort_transport_options(_options(), "duration")] == ["flight", "train", "bus"]


def test_sort_by_departure_puts_unparseable_last():
    assert [o.mode for o in l.sort_transport_options(_options(), "departure")] == ["bus", "flight", "train"]


def test_sort_is_stable_and_returns_new_list():
    options = _options() + [TransportOption(mode="car", provider="Hertz", price="$30", duration="5h")]
    result = l.sort_transport_options(options, "price")
    assert [o.mode for o in result[:2]] == ["bus", "car"]
    assert result is not options
    assert [o.mode for o in l.sort_transport_options(options, "rating")] == [o.mode for o in options]


def test_filter_transport_options():
    options = _options()
    assert [o.mode for o in l.filter_transport_options(options, modes=["Train", "bus"])] == ["bus", "train"]
    assert [o.mode for o in l.filter_transport_options(options, max_price=60)] == ["bus", "train"]
    assert [o.mode for o in l.filter_transport_options(options, max_duration=180)] == ["flight", "train"]


def test_zero_limits_still_filter():
    options = _options() + [TransportOption(mode="walk", provider="", price="Free", duration="45m")]
    assert [o.mode for o in l.filter_transport_options(options, max_price=0)] == ["walk"]
    assert l.filter_transport_options(options, max_duration=0) == []


def test_parse_price_and_duration():
    assert l.parse_price("$1,200") == 1200
    assert l.parse_price("call us") == 0
    assert l.parse_price(42) == 42
    assert l.parse_duration("2h 30m") == 150
    assert l.parse_duration("150m") == 150
    assert l.parse_duration("1.5h") == 90
    assert l.parse_duration("1.5h 10m") == 100
    assert l.parse_duration("soon") == 0


def test_filter_events_by_category_keeps_order():
    events = [
        LocalEvent(name="Jazz Night", date="2026-11-01", category="Music"),
        LocalEvent(name="Marathon", date="2026-11-01", category="Sports"),
        LocalEvent(name="Opera Gala", date="2026-11-03", category="Music"),
    ]
    assert [e.name for e in l.filter_events(events, "Music")] == ["Jazz Night", "Opera Gala"]
    assert [e.name for e in l.filter_events(events, search="MARA")] == ["Marathon"]
    assert l.filter_events(events) == events
    assert list(l.group_events_by_date(events)) == ["2026-11-01", "2026-11-03"]
    assert l.event_categories(events) == ["Music", "Sports"]


def test_price_floor():
    assert l.price_floor("$20 - $50") == 20
    assert l.price_floor("Free") == 0
    assert l.price_floor(None) == 0


def test_formatting():
    assert l.format_duration(150) == "2h 30m"
    assert l.format_price(1234.5) == "$1,234.50"
    assert l.format_price(10, "JPY") == "JPY 10.00"
    assert l.format_price_range(20, 50) == "$20 - $50"
    assert l.format_price_range(0, 30) == "Up to $30"
    assert l.format_price_range(0, 0) == "$0"
    assert l.format_temperature(21.5) == "22°C"
    assert l.format_temperature(0, "F") == "32°F"
