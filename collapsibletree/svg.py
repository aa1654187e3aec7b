import xml.etree.ElementTree as ET
from typing import Dict, Optional, Tuple

Point = Tuple[float, float]

###############################################################################
# Constants
###############################################################################
NODE_RADIUS = "3"
NODE_STROKE_WIDTH = "10"
COLLAPSED_FILL = "#555"
LEAF_FILL = "#999"
LINK_STROKE_COLOR = "#555"
LINK_STROKE_OPACITY = "0.4"
LINK_STROKE_WIDTH = "1.5"
HALO_STROKE_COLOR = "white"
HALO_STROKE_WIDTH = "3"
LABEL_DY = "0.31em"
LABEL_OFFSET_CHILD = 8
LABEL_OFFSET_ROOT = -10


def fmt(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_viewbox(viewbox) -> str:
    return " ".join(fmt(v) for v in viewbox)


###############################################################################
# SVG Element Creation Utilities
###############################################################################
def get_svg_root(
    width: float,
    height: float,
    viewbox: Optional[Tuple[float, float, float, float]] = None,
    font: str = "11px sans-serif",
) -> ET.Element:
    """
    Creates an SVG root element of the given size. Without a viewBox the
    origin is at 0,0.
    """
    data = {
        "viewBox": format_viewbox(viewbox or (0, 0, width, height)),
        "version": "1.1",
        "xmlns": "http://www.w3.org/2000/svg",
        "width": fmt(width),
        "height": fmt(height),
        "style": f"font: {font}; user-select: none;",
    }
    return ET.Element("svg", data)


def add_svg_group(parent: ET.Element, attrs: Dict[str, str]) -> ET.Element:
    """Add a g element to the parent and return the created element."""
    return ET.SubElement(parent, "g", attrs)


def add_svg_path(parent: ET.Element, attrs: Dict[str, str]) -> ET.Element:
    """Add a path element to the parent and return the created element."""
    return ET.SubElement(parent, "path", attrs)


def link_path_vertical(source: Point, target: Point) -> str:
    """Cubic Bezier from source to target with vertical tangents."""
    (sx, sy), (tx, ty) = source, target
    my = (sy + ty) / 2
    return f"M{fmt(sx)},{fmt(sy)}C{fmt(sx)},{fmt(my)} {fmt(tx)},{fmt(my)} {fmt(tx)},{fmt(ty)}"


def link_path_horizontal(source: Point, target: Point) -> str:
    """Cubic Bezier from source to target with horizontal tangents."""
    (sx, sy), (tx, ty) = source, target
    mx = (sx + tx) / 2
    return f"M{fmt(sx)},{fmt(sy)}C{fmt(mx)},{fmt(sy)} {fmt(mx)},{fmt(ty)} {fmt(tx)},{fmt(ty)}"


def marker_fill(has_hidden_children: bool) -> str:
    return COLLAPSED_FILL if has_hidden_children else LEAF_FILL


def add_node_marker(
    parent: ET.Element, node_id: int, name: str, depth: int, has_hidden_children: bool
) -> ET.Element:
    """
    Add a labeled node marker: a circle plus the label drawn twice, a white
    halo underneath so links crossing the text stay readable.
    """
    group = ET.SubElement(
        parent,
        "g",
        {
            "class": "node",
            "data-node-id": str(node_id),
            "fill-opacity": "0",
            "stroke-opacity": "0",
        },
    )
    ET.SubElement(
        group,
        "circle",
        {
            "r": NODE_RADIUS,
            "fill": marker_fill(has_hidden_children),
            "stroke-width": NODE_STROKE_WIDTH,
        },
    )
    label_y = str(LABEL_OFFSET_CHILD if depth else LABEL_OFFSET_ROOT)
    halo = ET.SubElement(
        group,
        "text",
        {
            "dy": LABEL_DY,
            "y": label_y,
            "text-anchor": "middle",
            "stroke-linejoin": "round",
            "stroke-width": HALO_STROKE_WIDTH,
            "stroke": HALO_STROKE_COLOR,
        },
    )
    halo.text = name
    label = ET.SubElement(
        group, "text", {"dy": LABEL_DY, "y": label_y, "text-anchor": "middle"}
    )
    label.text = name
    return group


def update_node_marker(
    group: ET.Element, x: float, y: float, opacity: float, has_hidden_children: bool
) -> None:
    group.set("transform", f"translate({fmt(x)},{fmt(y)})")
    group.set("fill-opacity", fmt(opacity))
    group.set("stroke-opacity", fmt(opacity))
    circle = group.find("circle")
    if circle is not None:
        circle.set("fill", marker_fill(has_hidden_children))
