"""Pie chart geometry for poll results, rendered as inline SVG."""
import math

from markupsafe import escape

COLORS = [
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#6366f1",
]

START_ANGLE = -90.0


def _fmt(value):
    value = round(value, 3)
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


def _point(center_x, center_y, radius, angle):
    rad = math.radians(angle)
    return center_x + radius * math.cos(rad), center_y + radius * math.sin(rad)


def pie_path(start_angle, end_angle, radius, center_x, center_y):
    x1, y1 = _point(center_x, center_y, radius, start_angle)
    x2, y2 = _point(center_x, center_y, radius, end_angle)
    large_arc = 1 if end_angle - start_angle > 180 else 0

    return " ".join(
        [
            f"M {_fmt(center_x)} {_fmt(center_y)}",
            f"L {_fmt(x1)} {_fmt(y1)}",
            f"A {_fmt(radius)} {_fmt(radius)} 0 {large_arc} 1 {_fmt(x2)} {_fmt(y2)}",
            "Z",
        ]
    )


def full_circle_path(radius, center_x, center_y):
    # An arc whose end point equals its start point draws nothing, so split it.
    top_x, top_y = _point(center_x, center_y, radius, START_ANGLE)
    bottom_x, bottom_y = _point(center_x, center_y, radius, START_ANGLE + 180)
    r = _fmt(radius)
    return " ".join(
        [
            f"M {_fmt(top_x)} {_fmt(top_y)}",
            f"A {r} {r} 0 1 1 {_fmt(bottom_x)} {_fmt(bottom_y)}",
            f"A {r} {r} 0 1 1 {_fmt(top_x)} {_fmt(top_y)}",
            "Z",
        ]
    )


def pie_slices(results, size=300, radius=120):
    """Turn tallied results into drawable slices.

    Options with a 0% share are left out; the rest are laid out clockwise from
    the top of the circle, coloured by their position among drawn slices.
    """
    center_x = center_y = size / 2
    chart_data = [row for row in results if row["percentage"] > 0]

    slices = []
    current_angle = START_ANGLE
    for index, row in enumerate(chart_data):
        sweep = row["percentage"] / 100 * 360
        if len(chart_data) == 1 and sweep >= 360:
            path = full_circle_path(radius, center_x, center_y)
        else:
            path = pie_path(current_angle, current_angle + sweep, radius, center_x, center_y)
        slices.append(
            {
                "path": path,
                "color": COLORS[index % len(COLORS)],
                "start_angle": current_angle,
                "end_angle": current_angle + sweep,
                "option_id": row["option_id"],
                "option_text": row["option_text"],
                "percentage": row["percentage"],
                "vote_count": row["vote_count"],
            }
        )
        current_angle += sweep
    return slices


def render_pie_svg(results, size=300, radius=120):
    slices = pie_slices(results, size=size, radius=radius)
    if not slices:
        return None

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}" class="pie-chart">'
    ]
    for segment in slices:
        votes_label = "vote" if segment["vote_count"] == 1 else "votes"
        parts.append(
            f'<path d="{segment["path"]}" fill="{segment["color"]}" '
            f'stroke="white" stroke-width="2">'
            f'<title>{escape(segment["option_text"])}: {segment["percentage"]}% '
            f'({segment["vote_count"]} {votes_label})</title></path>'
        )
    parts.append("</svg>")
    return "".join(parts)
