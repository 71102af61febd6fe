"""
Life Weeks Image Generation Service

Draws a computed LifeCalendarView as a 'Life in Weeks' PNG: one row per
year, one cell per week. Inspired by Tim Urban's "Your Life in Weeks" from
Wait But Why. All date and statistics math happens upstream; this module
only paints cells.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont
from PIL.ImageFont import FreeTypeFont

from .life_calendar_service import LifeCalendarView
from .life_weeks_domain import WEEKS_PER_YEAR
from .life_weeks_grid import WeekCell

logger = logging.getLogger(__name__)

# Constants for grid design
CELL_SIZE = 12  # pixels
GRID_PADDING = 40  # pixels around the grid
TEXT_AREA_HEIGHT = 120  # pixels for text overlay at bottom

# Colors (RGBA)
LIVED_COLOR = (0, 123, 255, 204)  # Blue, 80% opacity
EXTRA_LIFE_COLOR = (255, 140, 0, 220)  # Orange
FUTURE_COLOR = (220, 220, 220, 255)  # Light gray
CURRENT_OUTLINE_COLOR = (220, 20, 60, 255)  # Crimson
TEXT_COLOR = (50, 50, 50, 255)  # Dark gray text
BACKGROUND_COLOR = (255, 255, 255, 255)  # White

_FONT_PATHS = (
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)


def _load_font(size: int) -> Union[FreeTypeFont, ImageFont.ImageFont]:
    for font_path in _FONT_PATHS:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def calculate_image_size(row_count: int) -> Tuple[int, int]:
    """Image dimensions for a grid spanning row_count year rows."""
    width = (WEEKS_PER_YEAR * CELL_SIZE) + (2 * GRID_PADDING)
    height = (max(row_count, 1) * CELL_SIZE) + (2 * GRID_PADDING) + TEXT_AREA_HEIGHT
    return width, height


def _cell_box(cell: WeekCell) -> Tuple[int, int, int, int]:
    x = GRID_PADDING + cell.col_index * CELL_SIZE
    y = GRID_PADDING + cell.row_index * CELL_SIZE
    # leave 1px margin between cells
    return x + 1, y + 1, x + CELL_SIZE - 1, y + CELL_SIZE - 1


def _draw_cell(draw: ImageDraw.ImageDraw, cell: WeekCell) -> None:
    x1, y1, x2, y2 = _cell_box(cell)
    fill_color = EXTRA_LIFE_COLOR if cell.is_extra_life else LIVED_COLOR

    if cell.is_lived:
        draw.rectangle([x1, y1, x2, y2], fill=fill_color)
        return

    draw.rectangle([x1, y1, x2, y2], fill=FUTURE_COLOR)

    if cell.is_current:
        filled_width = round((x2 - x1) * cell.fill_fraction)
        if filled_width > 0:
            draw.rectangle([x1, y1, x1 + filled_width, y2], fill=fill_color)
        draw.rectangle([x1, y1, x2, y2], outline=CURRENT_OUTLINE_COLOR, width=1)


def _footer_lines(view: LifeCalendarView) -> Tuple[str, ...]:
    progress = view.progress
    lines = [
        f"Week {progress.completed_weeks:,}",
        f"Age: {progress.completed_years} years · "
        f"expectancy at birth {view.expectancy.years:.1f} years",
    ]
    if view.stats is not None:
        lines.append(
            f"Chance of dying this year: {view.stats.death_prob_percent}% · "
            f"remaining {view.stats.remaining_life_expectancy} years "
            f"(total {view.total_life_expectancy:.1f})"
        )
    return tuple(lines)


def _draw_text_overlay(
    draw: ImageDraw.ImageDraw, image_width: int, image_height: int, view: LifeCalendarView
) -> None:
    """Draw text information at the bottom of the image."""
    fonts = (_load_font(32), _load_font(16), _load_font(14))
    text_y = image_height - TEXT_AREA_HEIGHT + 10

    for line, font in zip(_footer_lines(view), fonts):
        draw.text((image_width // 2, text_y), line, fill=TEXT_COLOR, font=font, anchor="mt")
        text_y += 36 if font is fonts[0] else 24


def render_life_calendar(view: LifeCalendarView) -> Image.Image:
    """Paint a LifeCalendarView onto a new RGBA image.

    Raises:
        ValueError: If the view has no birth date (nothing to draw).
    """
    if not view.has_birth_date:
        raise ValueError("Cannot render a life calendar without a birth date")

    last_row = view.grid.rows[-1].row_index if len(view.grid) else 0
    image_width, image_height = calculate_image_size(last_row + 1)

    image = Image.new("RGBA", (image_width, image_height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    for cell in view.grid.cells():
        _draw_cell(draw, cell)

    _draw_text_overlay(draw, image_width, image_height, view)
    return image


def save_life_calendar(
    view: LifeCalendarView,
    output_dir: Path,
    output_path: Optional[Path] = None,
) -> Path:
    """Render a view and write it as PNG.

    Args:
        view: Computed life calendar.
        output_dir: Directory used when output_path is not given.
        output_path: Explicit file path (optional).

    Returns:
        Path to the generated PNG image
    """
    image = render_life_calendar(view)

    if output_path is None:
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = view.now.strftime("%Y%m%d")
        output_path = output_dir / f"life-calendar-{timestamp}.png"
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    image.save(output_path, "PNG")
    logger.info(f"Generated life calendar grid: {output_path}")

    return output_path
