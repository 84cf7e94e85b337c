import io

from eventmailer.models import Customer, Event, RankedEvent
from eventmailer.report import emit_report, emit_section, format_line

CUSTOMER = Customer(name="Mr. Fake", city="New York")


def test_format_line_omits_zero_distance():
    ranked = RankedEvent(event=Event(name="Metallica", city="New York"), distance=0)

    assert format_line(CUSTOMER, ranked) == "Mr. Fake: Metallica in New York"


def test_format_line_includes_positive_distance():
    ranked = RankedEvent(event=Event(name="LadyGaGa", city="Chicago"), distance=221)

    assert format_line(CUSTOMER, ranked) == "Mr. Fake: LadyGaGa in Chicago (221 miles away)"


def test_format_line_includes_price_after_distance():
    ranked = RankedEvent(event=Event(name="LadyGaGa", city="San Francisco", price=2), distance=589)

    assert format_line(CUSTOMER, ranked, 2) == "Mr. Fake: LadyGaGa in San Francisco (589 miles away) for $2"


def test_format_line_uses_threaded_distance_not_recomputed():
    ranked = RankedEvent(event=Event(name="LadyGaGa", city="Chicago"), distance=7)

    assert format_line(CUSTOMER, ranked).endswith("(7 miles away)")


def test_format_line_keeps_distance_for_failed_lookup():
    ranked = RankedEvent(event=Event(name="LadyGaGa", city="Chicago"), distance=221, failed=True)

    assert format_line(CUSTOMER, ranked, 0) == "Mr. Fake: LadyGaGa in Chicago (221 miles away) for $0"


def test_emit_section_writes_one_line_each():
    out = io.StringIO()

    emit_section(["a", "b"], out)

    assert out.getvalue() == "a\nb\n"


def test_emit_report_separates_sections(capsys):
    emit_report([["a"], [], ["b", "c"]], separator="----")

    assert capsys.readouterr().out == "a\n----\n----\nb\nc\n"
