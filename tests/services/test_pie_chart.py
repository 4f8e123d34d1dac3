from quickpoll.services.charts import COLORS, pie_slices, render_pie_svg


def _row(option_id, percentage, vote_count=1, text=None):
    return {
        "option_id": option_id,
        "option_text": text or option_id,
        "percentage": percentage,
        "vote_count": vote_count,
    }


def test_even_split_draws_two_half_circles_from_the_top():
    slices = pie_slices([_row("a", 50), _row("b", 50)])

    assert [s["path"] for s in slices] == [
        "M 150 150 L 150 30 A 120 120 0 0 1 150 270 Z",
        "M 150 150 L 150 270 A 120 120 0 0 1 150 30 Z",
    ]
    assert slices[0]["start_angle"] == -90
    assert slices[1]["end_angle"] == 270


def test_options_without_votes_are_skipped():
    slices = pie_slices([_row("a", 0, 0), _row("b", 100, 3), _row("c", 0, 0)])

    assert [s["option_id"] for s in slices] == ["b"]


def test_slice_over_half_uses_large_arc_flag():
    big, small = pie_slices([_row("a", 75), _row("b", 25)])

    assert " 0 1 1 " in big["path"]
    assert " 0 0 1 " in small["path"]


def test_unanimous_result_draws_full_circle():
    (only,) = pie_slices([_row("a", 100, 5)])

    assert only["path"].count("A 120 120") == 2
    assert only["path"].startswith("M 150 30")


def test_colours_cycle_through_palette():
    rows = [_row(str(i), 9) for i in range(11)]

    slices = pie_slices(rows)

    assert slices[0]["color"] == COLORS[0]
    assert slices[10]["color"] == COLORS[0]
    assert slices[3]["color"] == COLORS[3]


def test_render_returns_none_without_votes():
    assert render_pie_svg([_row("a", 0, 0), _row("b", 0, 0)]) is None


def test_render_escapes_option_text():
    svg = render_pie_svg([_row("a", 100, 1, text="<b>Tea</b>")])

    assert svg.startswith("<svg")
    assert "&lt;b&gt;Tea&lt;/b&gt;: 100% (1 vote)" in svg
    assert "<b>" not in svg
