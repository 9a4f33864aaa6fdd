"""
Wallpaper Generator - task list to 1920x1080 desktop wallpaper
The scene is described as SVG markup, then rasterized with Pillow.
"""
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont

from config import LAYOUT, WALLPAPER_CONFIG, output_path as default_output_path
from errors import RenderError
from models import Style, Task
from wallpaper_setter import set_wallpaper

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


# ============================================================================
# TEXT SAFETY
# ============================================================================

# Code points XML 1.0 does not allow anywhere in a document
XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def escape_xml(text) -> str:
    """Escape text for embedding in SVG content or attribute values.

    Characters XML cannot represent at all are dropped.
    """
    return (
        XML_ILLEGAL.sub("", str(text if text is not None else ""))
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _num(value) -> str:
    """Format a coordinate without a trailing .0"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _element(tag: str, attrs: Sequence[Tuple[str, object]], content: Optional[str] = None) -> str:
    parts = " ".join(f'{name}="{escape_xml(value)}"' for name, value in attrs)
    if content is None:
        return f"<{tag} {parts}/>"
    return f"<{tag} {parts}>{content}</{tag}>"


# ============================================================================
# SCENE COMPOSITION
# ============================================================================

def task_rows(count: int, layout: Dict) -> List[float]:
    """
    Baseline y of each task row, block vertically centered.

    total = count * H + (count - 1) * S
    startY = (canvasHeight - total) / 2 + titleOffset
    """
    if count <= 0:
        return []
    row_h = layout["row_height"]
    spacing = layout["row_spacing"]
    total = count * row_h + (count - 1) * spacing
    start_y = (layout["height"] - total) / 2 + layout["title_offset"]
    return [start_y + i * (row_h + spacing) for i in range(count)]


def build_scene(tasks: Sequence[Task], style: Style, layout: Optional[Dict] = None) -> str:
    """
    Describe the wallpaper as an SVG document.

    Pure function of its inputs: identical tasks, style and layout always
    produce identical markup. Task text is escaped before it is embedded.
    """
    layout = {**LAYOUT, **(layout or {})}
    width, height = layout["width"], layout["height"]
    family = layout["font_family"]
    text_color = style.text

    elements = []

    # Background
    if layout["gradient"]:
        elements.append(
            "<defs>"
            + '<linearGradient id="shade" x1="0" y1="0" x2="0" y2="1">'
            + _element("stop", [("offset", 0), ("stop-color", "#000000"), ("stop-opacity", 0)])
            + _element("stop", [("offset", 1), ("stop-color", "#000000"),
                                ("stop-opacity", _num(layout["gradient_strength"]))])
            + "</linearGradient></defs>"
        )
    elements.append(_element("rect", [
        ("x", 0), ("y", 0), ("width", width), ("height", height), ("fill", style.background),
    ]))
    if layout["gradient"]:
        elements.append(_element("rect", [
            ("x", 0), ("y", 0), ("width", width), ("height", height), ("fill", "url(#shade)"),
        ]))

    # Title
    elements.append(_element("text", [
        ("x", _num(width / 2)),
        ("y", layout["title_y"]),
        ("font-size", layout["title_size"]),
        ("font-family", family),
        ("font-weight", layout["title_weight"]),
        ("fill", text_color),
        ("text-anchor", "middle"),
    ], escape_xml(layout["title"])))

    # Body
    if not tasks:
        elements.append(_element("text", [
            ("x", _num(width / 2)),
            ("y", _num(height / 2)),
            ("font-size", layout["empty_size"]),
            ("font-family", family),
            ("fill", text_color),
            ("text-anchor", "middle"),
            ("opacity", _num(layout["empty_opacity"])),
        ], escape_xml(layout["empty_message"])))
    else:
        start_x = (width - layout["block_width"]) / 2
        for i, (task, y) in enumerate(zip(tasks, task_rows(len(tasks), layout))):
            attrs = [
                ("x", _num(start_x)),
                ("y", _num(y)),
                ("font-size", layout["task_size"]),
                ("font-family", family),
                ("fill", text_color),
                ("text-anchor", "start"),
            ]
            if task.is_complete:
                attrs.append(("text-decoration", "line-through"))
                attrs.append(("opacity", _num(layout["completed_opacity"])))
            label = f"{i + 1}. {escape_xml(task.text)}"
            elements.append(_element("text", attrs, label))

    body = "\n  ".join(elements)
    return (
        f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">\n  {body}\n</svg>\n'
    )


# ============================================================================
# FONT UTILITIES
# ============================================================================

@lru_cache(maxsize=32)
def get_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    """Get system font with fallback."""
    fonts = ["segoeuib.ttf", "arialbd.ttf", "Arial Bold.ttf", "DejaVuSans-Bold.ttf",
             "LiberationSans-Bold.ttf", "Helvetica.ttc"]
    if not bold:
        fonts = ["segoeui.ttf", "arial.ttf", "Arial.ttf", "DejaVuSans.ttf",
                 "LiberationSans-Regular.ttf", "Helvetica.ttc"]

    for name in fonts:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


# ============================================================================
# RASTERIZER
# ============================================================================

TEXT_ANCHORS = {"start": "ls", "middle": "ms", "end": "rs"}


def _tag(element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _float(element, name: str, default: float = 0.0) -> float:
    value = element.get(name)
    return float(value) if value is not None else default


def _rgba(color: str, opacity: float = 1.0) -> Tuple[int, int, int, int]:
    """Parse a color string; raises ValueError for unknown colors."""
    rgb = ImageColor.getrgb(color.strip())
    alpha = rgb[3] if len(rgb) == 4 else 255
    return rgb[0], rgb[1], rgb[2], int(round(alpha * max(0.0, min(1.0, opacity))))


def _collect_gradients(root) -> Dict[str, Dict]:
    gradients = {}
    for grad in root.iter(f"{{{SVG_NS}}}linearGradient"):
        stops = []
        for stop in grad:
            if _tag(stop) != "stop":
                continue
            color = _rgba(stop.get("stop-color", "#000000"), _float(stop, "stop-opacity", 1.0))
            stops.append((_float(stop, "offset"), color))
        if not stops:
            continue
        stops.sort(key=lambda s: s[0])
        gradients[grad.get("id")] = {
            "vector": tuple(_float(grad, k, d) for k, d in
                            (("x1", 0), ("y1", 0), ("x2", 1), ("y2", 0))),
            "stops": stops,
        }
    return gradients


def render_gradient(size: Tuple[int, int], gradient: Dict) -> Image.Image:
    """Rasterize a linear gradient (objectBoundingBox units) to an RGBA tile."""
    w, h = size
    x1, y1, x2, y2 = gradient["vector"]
    dx, dy = x2 - x1, y2 - y1
    length_sq = dx * dx + dy * dy or 1.0

    xs = (np.arange(w, dtype=np.float32) + 0.5) / w
    ys = (np.arange(h, dtype=np.float32) + 0.5) / h
    gx, gy = np.meshgrid(xs, ys)
    t = np.clip(((gx - x1) * dx + (gy - y1) * dy) / length_sq, 0.0, 1.0)

    offsets = [s[0] for s in gradient["stops"]]
    channels = [
        np.interp(t, offsets, [s[1][c] for s in gradient["stops"]])
        for c in range(4)
    ]
    pixels = np.stack(channels, axis=-1).round().astype(np.uint8)
    return Image.fromarray(pixels, "RGBA")


def _draw_rect(image: Image.Image, element, gradients: Dict[str, Dict]):
    x, y = int(_float(element, "x")), int(_float(element, "y"))
    w = int(_float(element, "width", image.width))
    h = int(_float(element, "height", image.height))
    if w <= 0 or h <= 0:
        return

    fill = element.get("fill", "#000000").strip()
    opacity = _float(element, "opacity", 1.0)

    if fill.startswith("url(#"):
        gradient = gradients.get(fill[5:-1])
        if gradient is None:
            raise RenderError(f"Unknown gradient reference: {fill}")
        tile = render_gradient((w, h), gradient)
        if opacity < 1.0:
            alpha = np.asarray(tile.getchannel("A"), dtype=np.float32) * opacity
            tile.putalpha(Image.fromarray(alpha.astype(np.uint8), "L"))
        image.alpha_composite(tile, dest=(x, y))
        return

    if fill == "none":
        return
    layer = Image.new("RGBA", (w, h), _rgba(fill, opacity))
    image.alpha_composite(layer, dest=(x, y))


def _draw_text(image: Image.Image, element):
    content = element.text or ""
    if not content:
        return

    x, y = _float(element, "x"), _float(element, "y")
    size = max(1, int(_float(element, "font-size", 16)))
    weight = element.get("font-weight", "normal")
    bold = weight == "bold" or (weight.isdigit() and int(weight) >= 600)
    font = get_font(size, bold)
    anchor = TEXT_ANCHORS.get(element.get("text-anchor", "start"), "ls")
    color = _rgba(element.get("fill", "#000000"), _float(element, "opacity", 1.0))

    # Text with opacity is drawn on its own layer, then blended
    if color[3] < 255:
        target = Image.new("RGBA", image.size, (0, 0, 0, 0))
    else:
        target = image
    draw = ImageDraw.Draw(target)
    draw.text((x, y), content, font=font, fill=color, anchor=anchor)

    if "line-through" in element.get("text-decoration", ""):
        left, _, right, _ = draw.textbbox((x, y), content, font=font, anchor=anchor)
        strike_y = y - size * 0.3
        draw.line([(left, strike_y), (right, strike_y)], fill=color, width=max(1, size // 14))

    if target is not image:
        image.alpha_composite(target)


def rasterize_scene(svg: str, output_path, size: Optional[Tuple[int, int]] = None) -> Path:
    """
    Encode an SVG scene produced by build_scene as a PNG file.

    Supports the subset build_scene emits: rect (solid or linear gradient
    fill) and text (anchor, weight, opacity, line-through).

    Raises:
        RenderError: markup, color or file output problems
    """
    output_path = Path(output_path)
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as e:
        raise RenderError(f"Malformed scene markup: {e}") from e

    try:
        if size is None:
            size = (int(_float(root, "width", LAYOUT["width"])),
                    int(_float(root, "height", LAYOUT["height"])))
        image = Image.new("RGBA", size, (0, 0, 0, 255))
        gradients = _collect_gradients(root)

        for element in root:
            tag = _tag(element)
            if tag == "rect":
                _draw_rect(image, element, gradients)
            elif tag == "text":
                _draw_text(image, element)
            elif tag != "defs":
                logger.debug("Skipping unsupported scene element <%s>", tag)

        image.convert("RGB").save(output_path, "PNG")
    except ValueError as e:
        raise RenderError(f"Invalid scene value: {e}") from e
    except (Image.DecompressionBombError, MemoryError) as e:
        raise RenderError(f"Scene too large to draw: {e}") from e
    except OSError as e:
        raise RenderError(f"Cannot write {output_path}: {e}") from e

    return output_path


# ============================================================================
# MAIN GENERATOR
# ============================================================================

@dataclass
class RenderResult:
    """Where the wallpaper went, plus any non-fatal problems on the way"""

    image_path: str
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def generate_wallpaper(tasks: Sequence[Task], style: Style,
                       output_path=None,
                       setter: Optional[Callable[[str, str], bool]] = set_wallpaper,
                       layout: Optional[Dict] = None) -> RenderResult:
    """
    Render the task list to the wallpaper PNG and set it as the desktop background.

    Never raises for encoding or wallpaper failures; they are logged and
    returned as warnings. image_path is always the target path.
    """
    layout = {**LAYOUT, **(layout or {})}
    target = Path(output_path) if output_path is not None else default_output_path()
    result = RenderResult(image_path=str(target))

    svg = build_scene(tasks, style, layout)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if layout["keep_svg"]:
            target.with_suffix(".svg").write_text(svg, encoding="utf-8")
    except OSError as e:
        logger.error("Cannot prepare wallpaper folder %s: %s", target.parent, e)
        result.warnings.append(f"Cannot write wallpaper: {e}")
        return result

    try:
        rasterize_scene(svg, target, (layout["width"], layout["height"]))
    except RenderError as e:
        logger.error("Failed to generate wallpaper: %s", e)
        result.warnings.append(f"Failed to generate wallpaper: {e}")
        return result

    if setter is None:
        return result

    try:
        applied = setter(str(target), WALLPAPER_CONFIG["scale_mode"])
    except Exception as e:
        logger.exception("Wallpaper setter raised")
        result.warnings.append(f"Failed to set wallpaper: {e}")
        return result

    if applied:
        logger.info("Wallpaper set: %s", target)
    else:
        logger.warning("Could not set wallpaper: %s", target)
        result.warnings.append(f"Could not set wallpaper: {target}")
    return result
