"""
Module: images

Purpose:
    Image identity and geometry models. The layout engine never touches
    pixel data; it only reads an optional natural size hint and assigns
    rectangles.

Key Classes:
    - ImageRef: Image identity plus optional natural size
    - Rect: Pixel rectangle on the preview canvas
    - GridSpan: Cell range inside a template grid (end-exclusive)
    - PositionedImage: Image placed on a page with reapplication metadata

Dependencies:
    - dataclasses (std)
    - PIL.Image: Header-only size probing in ImageRef.from_path

Used By:
    - core.models.templates: Region is a GridSpan
    - engine.*: Every arranger consumes ImageRef and emits PositionedImage
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

from PIL import Image


@dataclass(frozen=True, slots=True)
class ImageRef:
    """
    An image to be laid out (identity and optional size hint).

    Attributes:
        id: Stable identifier (upload id, file name...)
        natural_width: Pixel width of the source, if known
        natural_height: Pixel height of the source, if known

    Example:
        >>> ImageRef("a", 1920, 1080).aspect_ratio
        1.777...
        >>> ImageRef("b").aspect_ratio is None
        True
    """

    id: str
    natural_width: Optional[int] = None
    natural_height: Optional[int] = None

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Width / height, or None when either dimension is unknown."""
        if not self.natural_width or not self.natural_height:
            return None
        if self.natural_width <= 0 or self.natural_height <= 0:
            return None
        return self.natural_width / self.natural_height

    @property
    def has_dimensions(self) -> bool:
        return self.aspect_ratio is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageRef:
        """
        Build from a host mapping.

        Accepts both the host's camelCase keys (``naturalWidth``) and
        snake_case keys.
        """
        width = data.get("naturalWidth", data.get("natural_width"))
        height = data.get("naturalHeight", data.get("natural_height"))
        return cls(
            id=str(data["id"]),
            natural_width=int(width) if width is not None else None,
            natural_height=int(height) if height is not None else None,
        )

    @classmethod
    def from_path(cls, path: Union[str, Path], image_id: Optional[str] = None) -> ImageRef:
        """
        Probe an image file for its natural size.

        Pillow reads only the header here; pixel data is never decoded.

        Args:
            path: Image file path
            image_id: Identifier to use (defaults to the file name)

        Raises:
            OSError: If the file cannot be opened as an image
        """
        path = Path(path)
        with Image.open(path) as img:
            width, height = img.size
        return cls(id=image_id or path.name, natural_width=width, natural_height=height)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.natural_width is not None:
            data["naturalWidth"] = self.natural_width
        if self.natural_height is not None:
            data["naturalHeight"] = self.natural_height
        return data


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangle in preview pixels (origin top-left).

    Example:
        >>> Rect(0, 0, 100, 50).area
        5000
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects(self, other: Rect, tolerance: float = 1e-9) -> bool:
        """
        Check whether two rectangles share interior area.

        Rectangles that only touch along an edge do NOT intersect.
        """
        return not (
            self.right <= other.x + tolerance
            or other.right <= self.x + tolerance
            or self.bottom <= other.y + tolerance
            or other.bottom <= self.y + tolerance
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class GridSpan:
    """
    Cell range inside a rows×cols grid.

    The range is [row_start, row_end) x [col_start, col_end).

    Invariants:
        - row_start >= 0, col_start >= 0
        - row_end > row_start, col_end > col_start
    """

    row_start: int
    row_end: int
    col_start: int
    col_end: int

    def __post_init__(self) -> None:
        """Validate span on construction."""
        if self.row_start < 0 or self.col_start < 0:
            raise ValueError(f"span start must be >= 0: {self}")
        if self.row_end <= self.row_start:
            raise ValueError(f"row_end must be > row_start: {self.row_end} <= {self.row_start}")
        if self.col_end <= self.col_start:
            raise ValueError(f"col_end must be > col_start: {self.col_end} <= {self.col_start}")

    @classmethod
    def from_cell(cls, row: int, col: int, row_span: int = 1, col_span: int = 1) -> GridSpan:
        """Build from a top-left cell and spans (the catalog's notation)."""
        return cls(row, row + row_span, col, col + col_span)

    @property
    def row_span(self) -> int:
        return self.row_end - self.row_start

    @property
    def col_span(self) -> int:
        return self.col_end - self.col_start

    @property
    def cell_count(self) -> int:
        return self.row_span * self.col_span

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (row, col) cell covered by the span."""
        for row in range(self.row_start, self.row_end):
            for col in range(self.col_start, self.col_end):
                yield (row, col)

    def overlaps(self, other: GridSpan) -> bool:
        """Check whether two spans share at least one cell."""
        return not (
            self.row_end <= other.row_start
            or other.row_end <= self.row_start
            or self.col_end <= other.col_start
            or other.col_end <= self.col_start
        )

    def transposed(self) -> GridSpan:
        """Swap the row and column ranges."""
        return GridSpan(self.col_start, self.col_end, self.row_start, self.row_end)


@dataclass(frozen=True, slots=True)
class PositionedImage:
    """
    An image placed on a page.

    Attributes:
        image: The placed image
        rect: Pixel rectangle on the preview canvas
        row_index: Row of the placement (grid row or template row)
        col_index: Column of the placement within its row/grid
        grid_span: Template cell range, when placed from a template
        full_cover: True when produced by the full cover arranger

    Example:
        >>> p = PositionedImage(ImageRef("a"), Rect(0, 0, 240, 170), 0, 0)
        >>> p.rect.area
        40800
    """

    image: ImageRef
    rect: Rect
    row_index: int
    col_index: int
    grid_span: Optional[GridSpan] = None
    full_cover: bool = True

    @property
    def image_id(self) -> str:
        return self.image.id

    def with_image(self, image: ImageRef) -> PositionedImage:
        """Same rectangle and metadata, different image."""
        return PositionedImage(
            image=image,
            rect=self.rect,
            row_index=self.row_index,
            col_index=self.col_index,
            grid_span=self.grid_span,
            full_cover=self.full_cover,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the host's preview format."""
        data = self.image.to_dict()
        data.update(
            {
                "x": self.rect.x,
                "y": self.rect.y,
                "previewWidth": self.rect.width,
                "previewHeight": self.rect.height,
                "rowIndex": self.row_index,
                "colIndex": self.col_index,
                "fullCoverMode": self.full_cover,
            }
        )
        if self.grid_span is not None:
            data["gridSpan"] = {
                "rowStart": self.grid_span.row_start,
                "rowEnd": self.grid_span.row_end,
                "colStart": self.grid_span.col_start,
                "colEnd": self.grid_span.col_end,
            }
        return data


ImageLike = Union[ImageRef, PositionedImage, Mapping[str, Any]]


def as_image_ref(item: ImageLike) -> ImageRef:
    """
    Coerce an input item to an ImageRef.

    PositionedImage inputs are unwrapped so previously arranged pages can be
    re-arranged directly.
    """
    if isinstance(item, ImageRef):
        return item
    if isinstance(item, PositionedImage):
        return item.image
    return ImageRef.from_dict(item)
