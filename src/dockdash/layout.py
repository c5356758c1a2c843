"""Column widths and table height derived from the terminal size."""

from .model import Layout

MIN_TERMINAL_WIDTH = 80
ID_WIDTH = 14
STATUS_WIDTH = 16
# Padding and borders around the five columns
RESERVED_WIDTH = 10
MIN_NAME_WIDTH = 20
MIN_IMAGE_WIDTH = 25
MIN_PORTS_WIDTH = 20
MIN_TABLE_HEIGHT = 10
# Title, filter, status and help lines plus table header and spacing
RESERVED_LINES = 10


def compute_layout(width: int, height: int) -> Layout:
    width = max(MIN_TERMINAL_WIDTH, width)
    remaining = width - (ID_WIDTH + STATUS_WIDTH + RESERVED_WIDTH)

    name_width = max(MIN_NAME_WIDTH, remaining // 3)
    image_width = max(MIN_IMAGE_WIDTH, remaining // 3)
    ports_width = max(MIN_PORTS_WIDTH, remaining - name_width - image_width)

    return Layout(
        id_width=ID_WIDTH,
        name_width=name_width,
        image_width=image_width,
        status_width=STATUS_WIDTH,
        ports_width=ports_width,
        table_height=max(MIN_TABLE_HEIGHT, height - RESERVED_LINES),
    )
